"""
Symbol API Endpoints

Pair catalogue for the trade form's symbol autocomplete.
"""

from fastapi import APIRouter, Query

from tradeguard.schemas.market import SymbolData
from tradeguard.services.market_data import get_popular_symbols, search_symbols

router = APIRouter()


@router.get("/popular", response_model=list[SymbolData])
async def get_popular_symbols_endpoint(
    limit: int = Query(default=10, ge=1, le=10),
):
    """Most traded pairs, most popular first."""
    return get_popular_symbols(limit)


@router.get("/search", response_model=list[SymbolData])
async def search_symbols_endpoint(
    q: str = Query(..., min_length=1, description="Search query"),
    limit: int = Query(default=10, ge=1, le=50),
):
    """
    Search pairs by base currency, pair symbol or name.

    Returns matching pairs for autocomplete.
    """
    return search_symbols(q, limit)
