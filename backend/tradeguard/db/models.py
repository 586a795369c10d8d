"""
SQLAlchemy models for TradeGuard database.

Uses SQLite for local persistence of:
- Analysis records (proposal + market state + result)
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Float,
    DateTime,
    Index,
    JSON,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class AnalysisRecordRow(Base):
    """
    One completed analysis.
    The three JSON columns hold the full proposal, market state and result;
    the scalar columns duplicate what the history list filters and shows.
    """
    __tablename__ = "analysis_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    symbol = Column(String(30), nullable=False, index=True)
    timeframe = Column(String(5), nullable=False)  # 1m .. 1w
    strategy = Column(String(50), nullable=False)
    side = Column(String(10), nullable=False)  # LONG, SHORT

    recommendation = Column(String(10), nullable=False)  # EXECUTE, WAIT, CANCEL
    confidence = Column(Float, nullable=False)

    trade_config = Column(JSON, nullable=False)
    market_state = Column(JSON, nullable=False)  # camelCase, as served by the API
    analysis_result = Column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_analysis_symbol_created", "symbol", "created_at"),
    )
