"""Tests for the analysis-record store on an in-memory SQLite database."""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from tradeguard.db import (
    close_db,
    create_record,
    get_db_context,
    init_db,
    list_latest_records,
    record_to_schema,
)
from tradeguard.schemas.analysis import AnalysisRecord, Recommendation
from tradeguard.schemas.market import CrossStatus
from tradeguard.services.risk import compute_sizing
from tradeguard.services.strategy import decide
from tests.factories import make_proposal, make_snapshot


@pytest_asyncio.fixture
async def db():
    await init_db("sqlite+aiosqlite:///:memory:")
    yield
    await close_db()


def _analysis(symbol="BTC/USDT"):
    proposal = make_proposal(symbol=symbol)
    snapshot = make_snapshot(cross=CrossStatus.UP, rsi=25.0, ema200=90.0, symbol=symbol)
    return proposal, snapshot, decide(proposal, snapshot, compute_sizing(proposal))


class TestRecordStore:
    @pytest.mark.asyncio
    async def test_create_and_read_back(self, db):
        proposal, snapshot, result = _analysis()
        async with get_db_context() as session:
            row = await create_record(session, proposal, snapshot, result)
            record_id = row.id

        async with get_db_context() as session:
            rows = await list_latest_records(session)

        assert len(rows) == 1
        record = record_to_schema(rows[0])
        assert isinstance(record, AnalysisRecord)
        assert record.id == record_id
        assert record.proposal == proposal
        assert record.snapshot == snapshot
        assert record.result == result

    @pytest.mark.asyncio
    async def test_scalar_columns(self, db):
        proposal, snapshot, result = _analysis()
        async with get_db_context() as session:
            row = await create_record(session, proposal, snapshot, result)
        assert row.symbol == "BTC/USDT"
        assert row.side == "LONG"
        assert row.timeframe == "15m"
        assert row.strategy == "MACD_RSI_COMPOSITE"
        assert row.recommendation == Recommendation.EXECUTE.value
        assert row.market_state["macd"]["crossStatus"] == "UP"

    @pytest.mark.asyncio
    async def test_latest_first_and_limited(self, db):
        start = datetime(2025, 1, 1)
        async with get_db_context() as session:
            for i, symbol in enumerate(["BTC/USDT", "ETH/USDT", "SOL/USDT"]):
                row = await create_record(session, *_analysis(symbol))
                row.created_at = start + timedelta(minutes=i)
            await session.flush()

        async with get_db_context() as session:
            rows = await list_latest_records(session, limit=2)

        assert [r.symbol for r in rows] == ["SOL/USDT", "ETH/USDT"]

    @pytest.mark.asyncio
    async def test_empty_store(self, db):
        async with get_db_context() as session:
            assert await list_latest_records(session) == []
