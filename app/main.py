"""FastAPI main application module."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from app.config.database import close_redis, get_async_session_local, init_models, init_redis
from app.config.logging_config import setup_logging
from app.config.settings import settings
from app.middleware.exception_handler import register_exception_handlers
from app.middleware.logging_middleware import PerformanceMiddleware, RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.routers import admin, auth, categories, posts, social
from app.services.category_service import CategoryService

setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

# Register exception handlers
register_exception_handlers(app)

# Security middleware
if settings.ENVIRONMENT == "production":
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)

# Middleware added last runs first, so logging wraps the rate limiter
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    PerformanceMiddleware,
    slow_request_threshold=settings.SLOW_REQUEST_THRESHOLD,
)
app.add_middleware(
    RequestLoggingMiddleware,
    log_headers=settings.ENVIRONMENT == "development",
)


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    await init_models()

    session_local = get_async_session_local()
    async with session_local() as db:
        await CategoryService(db).ensure_default_category()

    if settings.RATE_LIMIT_ENABLED:
        await init_redis()

    logger.info("Application started", extra={"environment": settings.ENVIRONMENT})


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    await close_redis()


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "environment": settings.ENVIRONMENT,
    }


# Include routers
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Authentication"])
app.include_router(posts.router, prefix=f"{settings.API_PREFIX}/posts", tags=["Posts"])
app.include_router(
    categories.router, prefix=f"{settings.API_PREFIX}/categories", tags=["Categories"]
)
app.include_router(social.router, prefix=f"{settings.API_PREFIX}/social", tags=["Social"])
app.include_router(admin.router, prefix=f"{settings.API_PREFIX}/admin", tags=["Admin"])


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs_url": f"{settings.API_PREFIX}/docs",
    }
