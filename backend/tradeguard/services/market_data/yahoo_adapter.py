"""
Yahoo Finance Price Provider

Fetches REAL close-price history from Yahoo Finance.
Crypto pairs quoted in USDT map to the Yahoo USD pair (BTC/USDT -> BTC-USD).
"""

import asyncio
import logging

import yfinance as yf

from tradeguard.schemas.market import PriceSeries, Timeframe
from tradeguard.services.base import ExternalUnavailableError
from tradeguard.services.market_data.interface import (
    MarketDataProviderInterface,
    MarketDataRequest,
)

logger = logging.getLogger(__name__)


# Timeframe mapping for yfinance (no native 4h interval, resampled from 1h)
TIMEFRAME_MAP = {
    Timeframe.M1: "1m",
    Timeframe.M5: "5m",
    Timeframe.M15: "15m",
    Timeframe.M30: "30m",
    Timeframe.H1: "1h",
    Timeframe.H4: "1h",
    Timeframe.D1: "1d",
    Timeframe.W1: "1wk",
}

# Longest period Yahoo serves for each interval
PERIOD_MAP = {
    Timeframe.M1: "7d",
    Timeframe.M5: "60d",
    Timeframe.M15: "60d",
    Timeframe.M30: "60d",
    Timeframe.H1: "2y",
    Timeframe.H4: "2y",
    Timeframe.D1: "5y",
    Timeframe.W1: "max",
}

# Yahoo lists stablecoin-quoted crypto against USD
QUOTE_MAP = {
    "USDT": "USD",
    "USDC": "USD",
    "BUSD": "USD",
}

H4_STEP = 4


def get_yahoo_symbol(symbol: str) -> str:
    """Convert a BASE/QUOTE pair to Yahoo Finance format."""
    symbol = symbol.upper().strip()
    for sep in ("/", "-"):
        if sep in symbol:
            base, quote = symbol.split(sep, 1)
            return f"{base}-{QUOTE_MAP.get(quote, quote)}"
    return symbol


class YahooPriceProvider(MarketDataProviderInterface):
    """Close-price history from Yahoo Finance."""

    @property
    def name(self) -> str:
        return "YahooPriceProvider"

    def _download_closes(self, yahoo_symbol: str, timeframe: Timeframe) -> list[float]:
        ticker = yf.Ticker(yahoo_symbol)
        hist = ticker.history(
            period=PERIOD_MAP.get(timeframe, "1y"),
            interval=TIMEFRAME_MAP.get(timeframe, "1d"),
        )
        if hist.empty:
            return []
        return [float(c) for c in hist["Close"].dropna().tolist() if c > 0]

    async def execute(self, input_data: MarketDataRequest) -> PriceSeries:
        """Fetch close-price history from Yahoo Finance."""
        yahoo_symbol = get_yahoo_symbol(input_data.symbol)
        logger.info(f"Fetching {yahoo_symbol} ({input_data.timeframe.value}) from Yahoo Finance...")

        try:
            # yfinance is synchronous, run in executor
            loop = asyncio.get_running_loop()
            closes = await loop.run_in_executor(
                None,
                lambda: self._download_closes(yahoo_symbol, input_data.timeframe),
            )
        except Exception as e:
            logger.error(f"Error fetching {yahoo_symbol} from Yahoo Finance: {e}")
            raise ExternalUnavailableError(
                self.name,
                f"Price history unavailable for {input_data.symbol}",
                {"symbol": yahoo_symbol, "error": str(e)},
            ) from e

        if input_data.timeframe == Timeframe.H4:
            closes = closes[::-1][::H4_STEP][::-1]

        if not closes:
            logger.warning(f"No data returned for {yahoo_symbol}")
            raise ExternalUnavailableError(
                self.name,
                f"No price history for {input_data.symbol}",
                {"symbol": yahoo_symbol},
            )

        return PriceSeries(
            symbol=input_data.symbol,
            timeframe=input_data.timeframe,
            prices=closes[-input_data.lookback:],
        )

    async def health_check(self) -> bool:
        """Check Yahoo Finance connectivity with a short BTC fetch."""
        try:
            loop = asyncio.get_running_loop()
            closes = await loop.run_in_executor(
                None, lambda: self._download_closes("BTC-USD", Timeframe.D1)
            )
            return bool(closes)
        except Exception as e:
            logger.error(f"Yahoo Finance health check failed: {e}")
            return False
