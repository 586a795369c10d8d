"""
TradeGuard Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradeguard.core.config import settings
from tradeguard.core.logging import configure_logging
from tradeguard.api.v1 import router as api_v1_router
from tradeguard.schemas.analysis import AnalysisState
from tradeguard.services.base import ExternalUnavailableError, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Market data provider: {settings.market_data_provider}")

    # Initialize SQLite database
    from tradeguard.db.database import init_db, close_db
    await init_db()

    if not settings.llm_enabled:
        logger.info("LLM verdicts disabled - decisions are rule-based only")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    TradeGuard Trade Decision Support API

    ## Architecture
    - **Market Data**: Close prices from Yahoo Finance (or a deterministic mock)
    - **Indicator Engine**: SMA, EMA, RSI, MACD, volatility (pure NumPy)
    - **Position & Risk Calculator**: Size from acceptable loss, margin and fees
    - **Decision Aggregator**: Strategy rules + optional AI verdict

    ## Core Principles
    - Rules are authoritative: unsafe sizing cancels, unmet rules wait
    - The AI verdict is advisory and never does math
    - Human executes
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
cors_origins = [settings.frontend_url]
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ExternalUnavailableError)
async def external_unavailable_handler(request: Request, exc: ExternalUnavailableError):
    return JSONResponse(
        status_code=503,
        content={
            "detail": {
                "state": AnalysisState.FAILED.value,
                "service": exc.service_name,
                "error": exc.message,
                "history": exc.details.get("history", []),
            }
        },
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": {"service": exc.service_name, "error": exc.message}},
    )


# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "TradeGuard Backend API",
        "docs": "/docs",
        "health": "/health",
    }
