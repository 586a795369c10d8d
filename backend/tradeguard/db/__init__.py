"""
Database module for TradeGuard.

Provides SQLite database connection, models and the analysis-record store.
"""

from tradeguard.db.database import (
    get_db,
    get_db_context,
    init_db,
    close_db,
    create_record,
    list_latest_records,
    record_to_schema,
)
from tradeguard.db.models import Base, AnalysisRecordRow

__all__ = [
    "get_db",
    "get_db_context",
    "init_db",
    "close_db",
    "create_record",
    "list_latest_records",
    "record_to_schema",
    "Base",
    "AnalysisRecordRow",
]
