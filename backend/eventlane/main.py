"""
EventLane Booking Modes API - Main Application Entry Point

Answers "how is this event booked?" for every page that renders an event:
- Effective booking mode (RSVP, paid, hybrid, external, none)
- Availability and call-to-action decisions
- Reconciliation of vendor ticket types into commerce variations
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventlane.core.config import get_settings
from eventlane.core.logging import setup_logging, get_logger
from eventlane.core.metrics import metrics_endpoint
from eventlane.api.router import api_router
from eventlane.api.middleware import RequestLoggingMiddleware
from eventlane.infrastructure.redis_client import get_redis, close_redis

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        sync_lock_strategy=settings.SYNC_LOCK_STRATEGY,
    )

    # Only the redis lock strategy needs a connection up front
    if settings.SYNC_LOCK_STRATEGY == "redis":
        if await get_redis():
            logger.info("redis_ready")
        else:
            logger.warning("redis_unavailable", message="Sync locks fail open until Redis returns")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event booking-mode resolution and ticket reconciliation API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "sync_lock_strategy": settings.SYNC_LOCK_STRATEGY,
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
