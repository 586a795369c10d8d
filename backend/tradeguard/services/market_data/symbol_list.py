"""
Symbol Catalogue for Crypto Pairs

USDT-quoted perpetual pairs with display names, for search/autocomplete.
"""

from tradeguard.schemas.market import SymbolData

QUOTE_CURRENCY = "USDT"

# Ordered by popularity; the first POPULAR_COUNT make up the default list
CRYPTO_PAIRS = [
    {"base": "BTC", "name": "Bitcoin"},
    {"base": "ETH", "name": "Ethereum"},
    {"base": "SOL", "name": "Solana"},
    {"base": "BNB", "name": "BNB"},
    {"base": "DOGE", "name": "Dogecoin"},
    {"base": "XRP", "name": "XRP"},
    {"base": "ADA", "name": "Cardano"},
    {"base": "AVAX", "name": "Avalanche"},
    {"base": "LINK", "name": "Chainlink"},
    {"base": "DOT", "name": "Polkadot"},
    {"base": "LTC", "name": "Litecoin"},
    {"base": "TRX", "name": "TRON"},
    {"base": "TON", "name": "Toncoin"},
    {"base": "SHIB", "name": "Shiba Inu"},
    {"base": "BCH", "name": "Bitcoin Cash"},
    {"base": "NEAR", "name": "NEAR Protocol"},
    {"base": "UNI", "name": "Uniswap"},
    {"base": "APT", "name": "Aptos"},
    {"base": "ARB", "name": "Arbitrum"},
    {"base": "OP", "name": "Optimism"},
]

POPULAR_COUNT = 10


def _to_symbol_data(index: int, pair: dict) -> SymbolData:
    return SymbolData(
        id=str(index + 1),
        symbol=f"{pair['base']}/{QUOTE_CURRENCY}",
        base_currency=pair["base"],
        quote_currency=QUOTE_CURRENCY,
    )


def get_popular_symbols(limit: int = POPULAR_COUNT) -> list[SymbolData]:
    """Most traded pairs for the default suggestion list."""
    return [_to_symbol_data(i, p) for i, p in enumerate(CRYPTO_PAIRS[: min(limit, POPULAR_COUNT)])]


def search_symbols(query: str, limit: int = 10) -> list[SymbolData]:
    """
    Search pairs by base currency, pair symbol or name.

    Args:
        query: Search query, e.g. "sol", "ETH/USDT" or "coin"
        limit: Maximum results to return

    Returns:
        Exact base matches first, then prefix matches, then name matches
    """
    query = query.strip().upper()
    if not query:
        return []

    base_query = query.split("/")[0].split("-")[0]
    indexed = list(enumerate(CRYPTO_PAIRS))
    results: list[tuple[int, dict]] = []

    # Exact base match first
    results.extend((i, p) for i, p in indexed if p["base"] == base_query)

    # Prefix match on the base
    for i, p in indexed:
        if p["base"].startswith(base_query) and (i, p) not in results:
            results.append((i, p))

    # Name contains query
    for i, p in indexed:
        if query in p["name"].upper() and (i, p) not in results:
            results.append((i, p))

    return [_to_symbol_data(i, p) for i, p in results[:limit]]
