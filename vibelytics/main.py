"""
Main FastAPI application for the Vibelytics mood tracking API.

This module contains the main FastAPI application instance and root endpoint.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from vibelytics.config import settings
from vibelytics.core.exceptions import register_exception_handlers
from vibelytics.database import create_tables
from vibelytics.routers.auth import router as auth_router
from vibelytics.routers.mood import router as mood_router
from vibelytics.routers.user import router as user_router
from vibelytics.routers.weather import router as weather_router
from vibelytics.utils.logging_config import get_logger, setup_logging

# Import all models to ensure SQLAlchemy relationships are properly configured
import vibelytics.models  # noqa: F401

# Initialize logging
setup_logging()
logger = get_logger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.
    """
    logger.info(f"{settings.PROJECT_NAME} - Application starting up")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('://')[0]}")
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured; signup, signin and protected routes will fail")

    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables()
        logger.info("Database tables ensured")
    else:
        logger.warning("Remember to run 'alembic upgrade head' to apply database migrations")

    yield

    logger.info(f"{settings.PROJECT_NAME} - Application shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Mood tracking API with per-user weather snapshots",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

register_exception_handlers(app)

# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Authorization"],
    )


@app.get("/")
@limiter.limit("60/minute")
async def root(request: Request):
    """
    Root endpoint returning API information.
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
@limiter.limit("60/minute")
async def health_check(request: Request):
    """
    Health check endpoint.
    """
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(user_router, prefix=settings.API_PREFIX)
app.include_router(mood_router, prefix=settings.API_PREFIX)
app.include_router(weather_router, prefix=settings.API_PREFIX)
