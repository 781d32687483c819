"""
FX Helper Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fxhelper.core.config import settings
from fxhelper.api import router as api_router
from fxhelper.db.database import init_db, close_db
from fxhelper.services.broker import BrokerConfig, OandaClient

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/helpers", "/oanda")
PUBLIC_PATHS = {"/helpers/health"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    await init_db()

    broker_config = BrokerConfig.from_settings(settings)
    app.state.broker_client = OandaClient(broker_config)
    if broker_config.is_configured:
        logger.info(f"OANDA bridge: {broker_config.base_url}")
    else:
        logger.warning("OANDA bridge disabled (OANDA_TOKEN / OANDA_ACCOUNT_ID not set)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.broker_client.close()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    FX Helper API

    ## Architecture
    - **Indicator Engine**: EMA, RSI, MACD, Bollinger Bands, ATR, ADX,
      Stochastic and Ichimoku over client-supplied candles (pure NumPy)
    - **Trade Helpers**: signal preset, order preview, trade journal
    - **OANDA Bridge**: read-only passthrough to the OANDA v3 REST API
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.middleware("http")
async def require_api_key(request: Request, call_next):
    """Check X-API-Key when HELPER_API_KEY is configured."""
    path = request.url.path
    if (
        settings.helper_api_key
        and path.startswith(PROTECTED_PREFIXES)
        and path not in PUBLIC_PATHS
        and request.headers.get("X-API-Key") != settings.helper_api_key
    ):
        return JSONResponse(status_code=401, content={"detail": "Unauthorized"})
    return await call_next(request)


# CORS middleware (added last so preflight requests skip the key check)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)


@app.get("/helpers/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FX Helper API",
        "docs": "/docs",
        "health": "/helpers/health",
    }
