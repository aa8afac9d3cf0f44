import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.cache.redis_cache import CacheService
from src.infrastructure.config.settings import get_settings
from src.infrastructure.persistence.database import engine, get_db
from src.presentation.api.dependencies import (get_cache_service,
                                               install_shared_cache,
                                               set_cache_service)
from src.presentation.api.exception_handlers import \
    register_exception_handlers
from src.presentation.api.v1.routes import (auth, projects, reference_data,
                                            tasks)
from src.presentation.middleware.rate_limit import limiter
from src.presentation.middleware.security import (RequestSizeLimitMiddleware,
                                                  SecurityHeadersMiddleware)
from src.presentation.middleware.timeout import TimeoutMiddleware
from src.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    # Initialize logging
    setup_logging()

    # Permission cache: shared Redis when enabled, otherwise in-process TTL cache
    if settings.redis_enabled:
        try:
            await install_shared_cache(CacheService())
        except RedisError as e:
            logger.warning("Redis cache initialization failed: %s. Using in-process cache.", e)
            set_cache_service(None)
    else:
        logger.info("Redis cache disabled in configuration; using in-process cache")

    yield

    # Shutdown cache
    if settings.redis_enabled:
        cache = await get_cache_service()
        if isinstance(cache, CacheService):
            try:
                await cache.disconnect()
                logger.info("Redis cache disconnected")
            except Exception as e:
                logger.warning("Error during cache shutdown: %s", e)

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

# Middleware (order matters - applied in reverse)
# 1. Request deadline
app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)

# 2. Request size limit (uploads plus some room for the multipart envelope)
app.add_middleware(
    RequestSizeLimitMiddleware, max_request_size=settings.max_upload_size + 1024 * 1024
)

# 3. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 4. CORS middleware
# Security: Using allow_credentials=True requires specific origins (not wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(reference_data.router, prefix="/api", tags=["reference-data"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for load balancers and monitoring.

    Validates:
    - API is responsive
    - Database connectivity
    - Redis cache availability (optional)

    Returns:
    - 200 OK if healthy
    - 503 Service Unavailable if unhealthy
    """
    from typing import Any

    from fastapi.responses import JSONResponse
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    checks: dict[str, Any] = {
        "api": True,  # If we got here, API is responding
        "database": False,
        "cache": None,  # None = not configured, True = healthy, False = unhealthy
    }

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except SQLAlchemyError as e:
        logger.error("Health check database query failed: %s", e)

    if settings.redis_enabled:
        cache = await get_cache_service()
        checks["cache"] = cache.is_available()

    # Cache is optional, database and API are required
    if checks["api"] and checks["database"]:
        return {"status": "healthy", "checks": checks}
    return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
