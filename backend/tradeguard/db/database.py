"""
Database connection and session management.

Uses SQLite with aiosqlite for async support. The engine is created on
first use so tests can point init_db() at an in-memory database.
"""

import os
import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tradeguard.db.models import AnalysisRecordRow, Base
from tradeguard.core.config import settings
from tradeguard.schemas.analysis import AnalysisRecord, AnalysisResult
from tradeguard.schemas.market import IndicatorSnapshot
from tradeguard.schemas.trade import TradeProposal
from tradeguard.services.market_data.normalize import (
    market_state_payload,
    normalize_market_state,
)

logger = logging.getLogger(__name__)

# Default database location: backend/data/tradeguard.db
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")

MAX_HISTORY_LIMIT = 200

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def default_database_url() -> str:
    """SQLite URL from settings, or the default file under DATA_DIR."""
    if settings.sqlite_path:
        return f"sqlite+aiosqlite:///{settings.sqlite_path}"
    os.makedirs(DATA_DIR, exist_ok=True)
    return f"sqlite+aiosqlite:///{os.path.join(DATA_DIR, 'tradeguard.db')}"


def configure_engine(url: Optional[str] = None) -> AsyncEngine:
    """(Re)create the engine and session factory for the given URL."""
    global _engine, _session_factory

    # Note: SQLite requires check_same_thread=False for async
    _engine = create_async_engine(
        url or default_database_url(),
        echo=False,  # Set to True for SQL debugging
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Recommended for SQLite
    )
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        configure_engine()
    return _engine


def get_session_factory() -> async_sessionmaker:
    if _session_factory is None:
        configure_engine()
    return _session_factory


async def init_db(url: Optional[str] = None) -> None:
    """
    Initialize the database - create all tables.
    Called on application startup.
    """
    engine = configure_engine(url) if url else get_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database initialized at: {engine.url}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database connections closed")
    _engine = None
    _session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.
    Use with FastAPI Depends().
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions.
    Use when not in a FastAPI route.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# CRUD helper functions

async def create_record(
    session: AsyncSession,
    proposal: TradeProposal,
    snapshot: IndicatorSnapshot,
    result: AnalysisResult,
) -> AnalysisRecordRow:
    """Store a completed analysis."""
    row = AnalysisRecordRow(
        symbol=proposal.symbol,
        timeframe=proposal.timeframe.value,
        strategy=proposal.strategy_id,
        side=proposal.side.value,
        recommendation=result.recommendation.value,
        confidence=result.confidence_score,
        trade_config=proposal.model_dump(mode="json"),
        market_state=market_state_payload(snapshot),
        analysis_result=result.model_dump(mode="json"),
    )
    session.add(row)
    await session.flush()
    logger.info(f"Stored analysis record {row.id} for {row.symbol}: {row.recommendation}")
    return row


async def list_latest_records(session: AsyncSession, limit: int = 20) -> list[AnalysisRecordRow]:
    """Get the most recent analysis records, newest first."""
    limit = max(1, min(limit, MAX_HISTORY_LIMIT))
    result = await session.execute(
        select(AnalysisRecordRow)
        .order_by(AnalysisRecordRow.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def record_to_schema(row: AnalysisRecordRow) -> AnalysisRecord:
    """Convert a stored row back into an AnalysisRecord."""
    return AnalysisRecord(
        id=row.id,
        timestamp=row.created_at,
        proposal=TradeProposal.model_validate(row.trade_config),
        snapshot=normalize_market_state(row.market_state),
        result=AnalysisResult.model_validate(row.analysis_result),
    )
