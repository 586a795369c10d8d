"""
TradeGuard - trade decision support for leveraged positions.

Indicator Engine, Position & Risk Calculator and Decision Aggregator
behind a FastAPI backend.
"""

__version__ = "0.1.0"
