"""Tests for market-data providers and boundary normalization."""

import pytest

from tradeguard.schemas.market import CrossStatus, Timeframe
from tradeguard.services.base import ExternalUnavailableError, ValidationError
from tradeguard.services.market_data import (
    MockPriceProvider,
    format_adjustments,
    market_state_payload,
    normalize_market_state,
    get_popular_symbols,
    normalize_symbol,
    search_symbols,
)
from tradeguard.services.market_data.mock_data import generate_mock_prices, get_base_price
from tradeguard.services.market_data.yahoo_adapter import YahooPriceProvider, get_yahoo_symbol
from tests.factories import make_snapshot


CAMEL_PAYLOAD = {
    "symbol": "BTC/USDT",
    "currentPrice": 95120.5,
    "rsi": 58.3,
    "ma50": 94710.2,
    "ma200": 92005.8,
    "ema12": 95002.4,
    "ema200": 92440.1,
    "macd": {"line": 112.4, "signal": 98.2, "histogram": 14.2, "crossStatus": "UP"},
    "volatility": 310.5,
}

SNAKE_PAYLOAD = {
    "symbol": "BTC/USDT",
    "current_price": 95120.5,
    "rsi": 58.3,
    "ma_50": 94710.2,
    "ma_200": 92005.8,
    "ema_12": 95002.4,
    "ema_200": 92440.1,
    "macd": {"line": 112.4, "signal": 98.2, "histogram": 14.2, "cross_status": "up"},
    "volatility": 310.5,
}


# ── Symbols ──────────────────────────────────────────────────────────────


class TestNormalizeSymbol:
    def test_appends_default_quote(self):
        assert normalize_symbol("btc") == "BTC/USDT"

    def test_keeps_explicit_pair(self):
        assert normalize_symbol(" eth/usdc ") == "ETH/USDC"
        assert normalize_symbol("sol-usdt") == "SOL-USDT"

    def test_empty_raises(self):
        with pytest.raises(ValidationError):
            normalize_symbol("   ")

    def test_yahoo_symbol(self):
        assert get_yahoo_symbol("BTC/USDT") == "BTC-USD"
        assert get_yahoo_symbol("eth-usdc") == "ETH-USD"
        assert get_yahoo_symbol("SOL/EUR") == "SOL-EUR"
        assert get_yahoo_symbol("AAPL") == "AAPL"


# ── Market state payloads ────────────────────────────────────────────────


class TestNormalizeMarketState:
    def test_camel_case(self):
        snap = normalize_market_state(CAMEL_PAYLOAD)
        assert snap.current_price == 95120.5
        assert snap.ma50 == 94710.2
        assert snap.macd.cross_status == CrossStatus.UP

    def test_snake_case_matches_camel_case(self):
        assert normalize_market_state(SNAKE_PAYLOAD) == normalize_market_state(CAMEL_PAYLOAD)

    def test_missing_fields_default(self):
        snap = normalize_market_state({"currentPrice": 10.0, "rsi": 40.0})
        assert snap.ma200 == 0.0
        assert snap.macd.histogram == 0.0
        assert snap.macd.cross_status == CrossStatus.NONE

    def test_unknown_cross_status_is_none(self):
        payload = dict(CAMEL_PAYLOAD, macd={"line": 1.0, "crossStatus": "SIDEWAYS"})
        assert normalize_market_state(payload).macd.cross_status == CrossStatus.NONE

    @pytest.mark.parametrize("payload", [None, {}, [1, 2]])
    def test_empty_raises(self, payload):
        with pytest.raises(ValidationError):
            normalize_market_state(payload)

    def test_malformed_raises(self):
        with pytest.raises(ValidationError, match="Malformed"):
            normalize_market_state(dict(CAMEL_PAYLOAD, rsi="high"))

    def test_out_of_range_rsi_raises(self):
        with pytest.raises(ValidationError):
            normalize_market_state(dict(CAMEL_PAYLOAD, rsi=140.0))

    def test_payload_is_camel_case(self):
        payload = market_state_payload(make_snapshot(cross=CrossStatus.DOWN))
        assert payload["currentPrice"] == 100.0
        assert payload["macd"]["crossStatus"] == "DOWN"
        assert normalize_market_state(payload) == make_snapshot(cross=CrossStatus.DOWN)


class TestFormatAdjustments:
    def test_none(self):
        assert format_adjustments(None) is None
        assert format_adjustments({}) is None

    def test_string_passthrough(self):
        assert format_adjustments("Move stop to 94000") == "Move stop to 94000"

    def test_dict_to_bullets(self):
        text = format_adjustments({"stopLoss": 94000, "leverage": "5x"})
        assert text.splitlines() == ["• STOPLOSS: 94000", "• LEVERAGE: 5x"]


# ── Mock provider ────────────────────────────────────────────────────────


class TestMockProvider:
    def test_deterministic(self):
        a = generate_mock_prices("BTC/USDT", Timeframe.M15, 100)
        b = generate_mock_prices("btc/usdt", Timeframe.M15, 100)
        assert a == b

    def test_timeframe_changes_series(self):
        assert generate_mock_prices("BTC/USDT", Timeframe.M15, 50) != generate_mock_prices(
            "BTC/USDT", Timeframe.H1, 50
        )

    def test_base_price(self):
        assert get_base_price("ETH/USDT") == 3200.0
        assert get_base_price("XYZ-USDT") == 100.0

    @pytest.mark.asyncio
    async def test_provider_returns_requested_length(self):
        series = await MockPriceProvider().get_price_series("SOL/USDT", Timeframe.H4, 250)
        assert series.symbol == "SOL/USDT"
        assert series.timeframe == Timeframe.H4
        assert len(series.prices) == 250
        assert all(p > 0 for p in series.prices)


# ── Yahoo provider (network stubbed) ─────────────────────────────────────


class TestYahooProvider:
    @pytest.mark.asyncio
    async def test_download_failure_is_external_unavailable(self, monkeypatch):
        provider = YahooPriceProvider()

        def boom(symbol, timeframe):
            raise ConnectionError("timed out")

        monkeypatch.setattr(provider, "_download_closes", boom)
        with pytest.raises(ExternalUnavailableError):
            await provider.get_price_series("BTC/USDT", Timeframe.M15, 300)

    @pytest.mark.asyncio
    async def test_empty_history_is_external_unavailable(self, monkeypatch):
        provider = YahooPriceProvider()
        monkeypatch.setattr(provider, "_download_closes", lambda symbol, timeframe: [])
        with pytest.raises(ExternalUnavailableError):
            await provider.get_price_series("BTC/USDT", Timeframe.M15, 300)

    @pytest.mark.asyncio
    async def test_trims_to_lookback(self, monkeypatch):
        provider = YahooPriceProvider()
        closes = [100.0 + i for i in range(500)]
        monkeypatch.setattr(provider, "_download_closes", lambda symbol, timeframe: closes)
        series = await provider.get_price_series("BTC/USDT", Timeframe.M15, 300)
        assert len(series.prices) == 300
        assert series.prices[-1] == closes[-1]

    @pytest.mark.asyncio
    async def test_four_hour_keeps_every_fourth_close(self, monkeypatch):
        provider = YahooPriceProvider()
        closes = [float(i) for i in range(1, 13)]
        monkeypatch.setattr(provider, "_download_closes", lambda symbol, timeframe: closes)
        series = await provider.get_price_series("BTC/USDT", Timeframe.H4, 300)
        assert series.prices == [4.0, 8.0, 12.0]


# ── Symbol catalogue ─────────────────────────────────────────────────────


class TestSymbolCatalogue:
    def test_popular_starts_with_majors(self):
        symbols = [s.symbol for s in get_popular_symbols(5)]
        assert symbols == ["BTC/USDT", "ETH/USDT", "SOL/USDT", "BNB/USDT", "DOGE/USDT"]

    def test_popular_is_capped(self):
        assert len(get_popular_symbols(50)) == 10

    def test_entries_are_usdt_pairs(self):
        for s in get_popular_symbols():
            assert s.quote_currency == "USDT"
            assert s.symbol == f"{s.base_currency}/USDT"

    def test_ids_are_stable(self):
        assert search_symbols("eth")[0].id == get_popular_symbols()[1].id == "2"

    def test_exact_base_match_first(self):
        results = search_symbols("op")
        assert results[0].base_currency == "OP"

    def test_pair_and_dash_queries(self):
        assert search_symbols("ETH/USDT")[0].symbol == "ETH/USDT"
        assert search_symbols("sol-usdt")[0].symbol == "SOL/USDT"

    def test_name_match(self):
        bases = [s.base_currency for s in search_symbols("coin")]
        assert bases == ["BTC", "DOGE", "LTC", "TON", "BCH"]

    def test_no_duplicates(self):
        bases = [s.base_currency for s in search_symbols("b", limit=50)]
        assert len(bases) == len(set(bases))

    def test_limit_and_empty(self):
        assert len(search_symbols("b", limit=2)) == 2
        assert search_symbols("   ") == []
        assert search_symbols("zzz") == []
