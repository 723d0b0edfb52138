"""Main FastAPI application."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware

from edusync import __version__
from edusync.api import api_router, function_router
from edusync.config import SyncConfig, get_settings
from edusync.constants import MAX_CONSECUTIVE_FAILURES
from edusync.db import async_session_maker, init_db, session_maker_for
from edusync.services.educators import EducatorSyncService
from edusync.utils.http_client import close_all_clients
from edusync.utils.logging import get_logger, setup_logging
from edusync.utils.metrics import MetricsMiddleware, metrics

settings = get_settings()
setup_logging()
logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # HSTS (only in production)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


async def periodic_educator_sync(shutdown_event: asyncio.Event) -> None:
    """Background task that runs the educator video sync periodically."""
    consecutive_failures = 0
    max_failures = MAX_CONSECUTIVE_FAILURES
    interval = settings.sync_interval_seconds

    while not shutdown_event.is_set():
        try:
            # Wait with cancellation support
            await asyncio.wait_for(
                shutdown_event.wait(),
                timeout=interval
            )
            break  # Shutdown requested
        except TimeoutError:
            pass  # Normal timeout, continue with sync

        try:
            config = SyncConfig.from_settings(settings)
            service = EducatorSyncService(config, session_maker_for(config))
            result = await service.run()
            logger.info(f"Periodic educator sync completed: {result}")
            metrics.background_task_runs_total.inc(task="educator_sync", status="success")
            consecutive_failures = 0  # Reset on success
        except Exception as e:
            consecutive_failures += 1
            metrics.background_task_runs_total.inc(task="educator_sync", status="error")
            logger.error(f"Periodic educator sync failed ({consecutive_failures}/{max_failures}): {e}")
            if consecutive_failures >= max_failures:
                logger.critical("Educator sync: Too many consecutive failures, backing off")
                await asyncio.sleep(interval)  # Extra delay after repeated failures
                consecutive_failures = 0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await init_db()
    logger.info("Database initialized")

    # Create shutdown event for graceful task termination
    shutdown_event = asyncio.Event()

    tasks: list[asyncio.Task] = []
    if settings.sync_scheduler_enabled:
        tasks.append(
            asyncio.create_task(
                periodic_educator_sync(shutdown_event),
                name="educator_sync"
            )
        )
        logger.info(f"Started periodic educator sync (every {settings.sync_interval_seconds}s)")

    yield

    # Graceful shutdown - signal all tasks to stop
    logger.info("Shutting down background tasks...")
    shutdown_event.set()

    # Close persistent HTTP clients
    await close_all_clients()
    logger.info("HTTP clients closed")

    # Wait for tasks to complete gracefully (with timeout)
    if tasks:
        try:
            await asyncio.wait_for(
                asyncio.gather(*tasks, return_exceptions=True),
                timeout=10.0  # 10 second timeout for graceful shutdown
            )
            logger.info("All background tasks stopped gracefully")
        except TimeoutError:
            logger.warning("Background tasks did not stop in time, forcing cancellation")
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    lifespan=lifespan,
)

# Middleware (order matters - first added = last executed)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(MetricsMiddleware)  # Collect HTTP metrics
app.add_middleware(GZipMiddleware, minimum_size=500)  # Compress responses > 500 bytes

# Function endpoints are called straight from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials="*" not in settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Routers
app.include_router(api_router)
app.include_router(function_router)


# Store app start time for uptime tracking
_app_start_time = datetime.now(UTC)


@app.get("/health", include_in_schema=True, tags=["monitoring"])
async def health_check() -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSONResponse with status, uptime, and service health checks.
    """
    from sqlalchemy import text

    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime_seconds": (datetime.now(UTC) - _app_start_time).total_seconds(),
        "version": __version__,
        "checks": {}
    }

    # Check database connection
    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {"status": "healthy"}
    except Exception:
        health_status["checks"]["database"] = {"status": "unhealthy"}
        health_status["status"] = "degraded"

    health_status["checks"]["youtube_api_key"] = {
        "status": "configured" if settings.youtube_api_key else "missing"
    }

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/metrics", include_in_schema=True, tags=["monitoring"])
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus-formatted metrics text.
    """
    return Response(
        content=metrics.format_prometheus(),
        media_type="text/plain; charset=utf-8",
    )
