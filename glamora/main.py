"""
Glamora Backend - FastAPI Application

Main application entry point with middleware, routers, and OpenAPI
documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from glamora.config import settings
from glamora.database import init_db, close_db, get_db, get_redis
from glamora.middleware.rate_limit import RateLimitMiddleware
from glamora.routers import (
    auth,
    users,
    reports,
    marketplace,
    outfits,
    clothing_usage,
    admin,
    scheduler,
)
from glamora.scheduler import restriction_expiry_job
from glamora.utils.log_setup import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_scheduler() -> AsyncIOScheduler:
    """Build the background scheduler with every maintenance job registered."""
    job_scheduler = AsyncIOScheduler()
    job_scheduler.add_job(
        restriction_expiry_job.execute,
        "interval",
        minutes=settings.restriction_sweep_minutes,
        id="restriction_expiry",
        name="Restriction Expiry Job",
        max_instances=1,
        coalesce=True,
    )
    return job_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Configure logging
    - Initialize database connections
    - Start background jobs
    - Cleanup on shutdown
    """
    setup_logging(settings.log_level)

    await init_db()

    try:
        await get_db().client.admin.command("ping")
        logger.info("Connected to MongoDB")
    except Exception as e:
        logger.error(f"FAILED to connect to MongoDB: {e}")

    redis_client = get_redis()
    if redis_client:
        try:
            await redis_client.ping()
            logger.info("Redis connected")
        except Exception as e:
            logger.error(f"FAILED to connect to Redis: {e}")

    job_scheduler = None
    try:
        job_scheduler = create_scheduler()
        job_scheduler.start()
        logger.info(
            f"Scheduler started: Restriction Expiry ({settings.restriction_sweep_minutes}m)"
        )
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}", exc_info=True)

    yield

    if job_scheduler:
        job_scheduler.shutdown()
        logger.info("Scheduler stopped")

    await close_db()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Glamora API",
    description="""
    Glamora - Wardrobe, Outfit and Marketplace Platform API

    ## Features
    - Outfit history and clothing usage analytics
    - Marketplace listings with admin moderation
    - User reports and timed account restrictions
    - Admin dashboard metrics, analytics and settings

    ## Authentication
    Authenticated endpoints require a JWT in the Authorization header:
    `Authorization: Bearer <token>`
    """,
    version=API_VERSION,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# Middleware
# =============================================================================

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_origins_list != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate Limiting Middleware
app.add_middleware(RateLimitMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"message": ...}, keeping structured details."""
    content = {"message": exc.detail}
    if isinstance(exc.detail, dict):
        content = {"message": exc.detail.get("message", ""), "detail": exc.detail}

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    SECURITY: Do not leak internal error details.
    """
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


# =============================================================================
# Routers
# =============================================================================

api = settings.api_prefix

# Mobile app routes
app.include_router(auth.router, prefix=f"{api}/auth", tags=["Authentication"])
app.include_router(users.router, prefix=f"{api}/users", tags=["Users"])
app.include_router(reports.router, prefix=f"{api}/reports", tags=["Reports"])
app.include_router(marketplace.router, prefix=f"{api}/marketplace", tags=["Marketplace"])
app.include_router(outfits.router, prefix=f"{api}/outfits", tags=["Outfits"])
app.include_router(clothing_usage.router, prefix=f"{api}/clothing-usage", tags=["Clothing Usage"])

# Admin dashboard routes
app.include_router(admin.router, prefix=f"{api}/admin", tags=["Admin"])
app.include_router(scheduler.router, prefix=f"{api}/admin", tags=["Scheduler"])


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "version": API_VERSION}


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Glamora API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }
