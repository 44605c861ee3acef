"""CleanAds Proxy — FastAPI Application Entry Point.

Proxies the CleanAds advertiser report API and normalizes its rows for
incremental sync consumers.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.cleanads_routes import router as cleanads_router
from app.api.errors import register_exception_handlers
from app.api.health_routes import router as health_router
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("CleanAds proxy starting up...")
    logger.info(f"Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    if not settings.proxy_api_key:
        logger.warning("PROXY_API_KEY not set, proxy accepts unauthenticated requests")
    yield
    logger.info("CleanAds proxy shut down")


app = FastAPI(
    title="CleanAds Proxy",
    description="Proxy for the CleanAds reporting API with normalized records and incremental sync windows.",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
)

register_exception_handlers(app)

# Routers
app.include_router(cleanads_router)
app.include_router(health_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Liveness probe."""
    return {
        "status": "healthy",
        "service": "cleanads-proxy",
        "version": VERSION,
    }
