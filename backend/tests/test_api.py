"""Tests for the HTTP API (mock market data, LLM disabled, in-memory DB)."""

import pytest
from fastapi.testclient import TestClient

from tradeguard.db.database import configure_engine
from tradeguard.main import app
from tradeguard.core.config import settings
from tradeguard.schemas.market import PriceSeries, Timeframe
from tradeguard.services.base import ExternalUnavailableError
from tradeguard.services.indicators import IndicatorService
from tradeguard.services.market_data import (
    MarketDataProviderInterface,
    MarketDataRequest,
    get_market_data_provider,
)
from tradeguard.services.risk import RiskService
from tradeguard.services.strategy import AnalysisService, get_analysis_service
from tradeguard.services.llm import NullVerdictProvider


# ── Helpers ──────────────────────────────────────────────────────────────


class DownProvider(MarketDataProviderInterface):
    async def execute(self, input_data: MarketDataRequest) -> PriceSeries:
        raise ExternalUnavailableError(self.name, f"Price history unavailable for {input_data.symbol}")

    async def health_check(self) -> bool:
        return False


class RecordingProvider(MarketDataProviderInterface):
    """Serves a flat series and remembers the requested timeframe."""

    def __init__(self):
        self.requests = []

    async def execute(self, input_data: MarketDataRequest) -> PriceSeries:
        self.requests.append(input_data)
        return PriceSeries(symbol=input_data.symbol, timeframe=input_data.timeframe, prices=[100.0] * 60)

    async def health_check(self) -> bool:
        return True


def _proposal(**overrides):
    body = {
        "symbol": "BTC/USDT",
        "side": "LONG",
        "timeframe": "15m",
        "entry_price": 100.0,
        "stop_loss": 95.0,
        "take_profit": 110.0,
        "account_balance": 1000.0,
        "risk_percentage": 1.0,
        "leverage": 10.0,
        "strategy_id": "MACD_RSI_COMPOSITE",
    }
    body.update(overrides)
    return body


PASSING_STATE = {
    "currentPrice": 100.0,
    "rsi": 25.0,
    "ma50": 100.0,
    "ma200": 100.0,
    "ema12": 100.0,
    "ema200": 90.0,
    "macd": {"line": 0.5, "signal": 0.3, "histogram": 0.2, "crossStatus": "UP"},
    "volatility": 1.0,
}

WEAK_STATE = dict(PASSING_STATE, rsi=50.0, macd={"crossStatus": "NONE"})


@pytest.fixture
def client():
    configure_engine("sqlite+aiosqlite:///:memory:")
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def market_down():
    app.dependency_overrides[get_market_data_provider] = lambda: DownProvider()
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(
        market_provider=DownProvider(),
        indicator_service=IndicatorService(),
        risk_service=RiskService(),
        verdict_provider=NullVerdictProvider(),
    )
    yield
    app.dependency_overrides.clear()


# ── Basics ───────────────────────────────────────────────────────────────


class TestBasics:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"


class TestStrategyEndpoints:
    def test_list(self, client):
        resp = client.get("/api/v1/strategy/list")
        assert resp.status_code == 200
        assert {s["id"] for s in resp.json()} == {"MACD_RSI_COMPOSITE", "TREND_MOMENTUM"}

    def test_rules(self, client):
        data = client.get("/api/v1/strategy/TREND_MOMENTUM/rules").json()
        assert data["min_conditions"] == 2
        assert len(data["rules"]["LONG"]) == 3
        assert len(data["rules"]["SHORT"]) == 3


# ── Sizing ───────────────────────────────────────────────────────────────


class TestSizingEndpoint:
    def test_full_balance_margin(self, client):
        body = _proposal(entry_price=100.0, stop_loss=99.0, take_profit=102.0, leverage=1.0)
        data = client.post("/api/v1/analysis/sizing", json=body).json()
        assert data["quantity"] == pytest.approx(10.0)
        assert data["margin_usage_percent"] == pytest.approx(100.0)
        assert data["is_safe"] is True

    def test_entry_equals_stop(self, client):
        resp = client.post("/api/v1/analysis/sizing", json=_proposal(stop_loss=100.0))
        assert resp.status_code == 200
        assert resp.json()["is_safe"] is False
        assert resp.json()["quantity"] == 0.0

    def test_invalid_body(self, client):
        resp = client.post("/api/v1/analysis/sizing", json=_proposal(risk_percentage=0))
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "overrides",
        [{"stop_loss": 0.0}, {"entry_price": -100.0}, {"account_balance": 0.0}],
    )
    def test_non_positive_inputs_size_to_zero(self, client, overrides):
        resp = client.post("/api/v1/analysis/sizing", json=_proposal(**overrides))
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_safe"] is False
        assert data["quantity"] == 0.0
        assert data["margin"] == 0.0
        assert len(data["warnings"]) == 1


# ── Evaluate ─────────────────────────────────────────────────────────────


class TestEvaluateEndpoint:
    def test_supplied_state_executes(self, client):
        resp = client.post(
            "/api/v1/analysis/evaluate",
            json={"proposal": _proposal(), "market_state": PASSING_STATE},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["recommendation"] == "EXECUTE"
        assert data["source"] == "RULES"

    def test_weak_state_waits(self, client):
        resp = client.post(
            "/api/v1/analysis/evaluate",
            json={"proposal": _proposal(), "market_state": WEAK_STATE},
        )
        assert resp.json()["recommendation"] == "WAIT"

    def test_unsafe_cancels(self, client):
        resp = client.post(
            "/api/v1/analysis/evaluate",
            json={
                "proposal": _proposal(stop_loss=99.5, leverage=1.0),
                "market_state": PASSING_STATE,
            },
        )
        assert resp.json()["recommendation"] == "CANCEL"

    @pytest.mark.parametrize("overrides", [{"stop_loss": 0.0}, {"account_balance": -5.0}])
    def test_non_positive_inputs_cancel(self, client, overrides):
        resp = client.post(
            "/api/v1/analysis/evaluate",
            json={"proposal": _proposal(**overrides), "market_state": PASSING_STATE},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["recommendation"] == "CANCEL"
        assert data["confidence_score"] == 0

    def test_empty_state_is_bad_request(self, client):
        resp = client.post(
            "/api/v1/analysis/evaluate",
            json={"proposal": _proposal(), "market_state": {}},
        )
        assert resp.status_code == 400

    def test_fetches_when_state_missing(self, client):
        resp = client.post("/api/v1/analysis/evaluate", json={"proposal": _proposal()})
        assert resp.status_code == 200
        assert resp.json()["recommendation"] in {"EXECUTE", "WAIT", "CANCEL"}


# ── Market state ─────────────────────────────────────────────────────────


class TestMarketEndpoint:
    def test_state_for_mock_symbol(self, client):
        resp = client.get("/api/v1/market/state", params={"symbol": "btc", "timeframe": "1h"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["symbol"] == "BTC/USDT"
        assert 0 <= data["rsi"] <= 100
        assert data["ma200"] > 0

    def test_unknown_timeframe(self, client):
        resp = client.get("/api/v1/market/state", params={"symbol": "btc", "timeframe": "2h"})
        assert resp.status_code == 422

    def test_timeframe_defaults_to_setting(self, client, monkeypatch):
        recorder = RecordingProvider()
        app.dependency_overrides[get_market_data_provider] = lambda: recorder
        monkeypatch.setattr(settings, "default_timeframe", "1h")
        resp = client.get("/api/v1/market/state", params={"symbol": "eth"})
        assert resp.status_code == 200
        assert recorder.requests[0].timeframe == Timeframe.H1
        assert recorder.requests[0].symbol == "ETH/USDT"


# ── Symbols ──────────────────────────────────────────────────────────────


class TestSymbolEndpoints:
    def test_popular(self, client):
        resp = client.get("/api/v1/symbol/popular", params={"limit": 3, "exchange": "binance"})
        assert resp.status_code == 200
        assert resp.json() == [
            {"id": "1", "symbol": "BTC/USDT", "base_currency": "BTC", "quote_currency": "USDT"},
            {"id": "2", "symbol": "ETH/USDT", "base_currency": "ETH", "quote_currency": "USDT"},
            {"id": "3", "symbol": "SOL/USDT", "base_currency": "SOL", "quote_currency": "USDT"},
        ]

    def test_popular_limit_bounds(self, client):
        assert client.get("/api/v1/symbol/popular", params={"limit": 0}).status_code == 422

    def test_search(self, client):
        data = client.get("/api/v1/symbol/search", params={"q": "doge", "limit": 10}).json()
        assert data[0]["symbol"] == "DOGE/USDT"

    def test_search_no_match(self, client):
        assert client.get("/api/v1/symbol/search", params={"q": "zzz"}).json() == []

    def test_search_requires_query(self, client):
        assert client.get("/api/v1/symbol/search").status_code == 422


# ── Run + history ────────────────────────────────────────────────────────


class TestRunEndpoint:
    def test_run_is_persisted(self, client):
        resp = client.post("/api/v1/analysis/run", json={"proposal": _proposal(symbol="eth")})
        assert resp.status_code == 200
        data = resp.json()
        assert data["run"]["state"] == "DONE"
        assert data["record"]["proposal"]["symbol"] == "ETH/USDT"

        latest = client.get("/api/v1/analysis/records/latest", params={"limit": 5}).json()
        assert len(latest) == 1
        assert latest[0]["id"] == data["record"]["id"]

    def test_latest_limit_bounds(self, client):
        assert client.get("/api/v1/analysis/records/latest", params={"limit": 0}).status_code == 422


class TestMarketUnavailable:
    def test_run_returns_503_failed(self, client, market_down):
        resp = client.post("/api/v1/analysis/run", json={"proposal": _proposal()})
        assert resp.status_code == 503
        detail = resp.json()["detail"]
        assert detail["state"] == "FAILED"
        assert detail["history"] == ["PENDING", "FETCHING_MARKET", "FAILED"]

    def test_nothing_persisted_on_failure(self, client, market_down):
        client.post("/api/v1/analysis/run", json={"proposal": _proposal()})
        app.dependency_overrides.clear()
        assert client.get("/api/v1/analysis/records/latest").json() == []

    def test_market_state_returns_503(self, client, market_down):
        resp = client.get("/api/v1/market/state", params={"symbol": "btc"})
        assert resp.status_code == 503
        assert resp.json()["detail"]["state"] == "FAILED"
