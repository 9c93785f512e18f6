"""FastAPI application factory and ASGI entry-point.

Run with:
    python -m app.main
    # → http://localhost:3000/health
    # → http://localhost:3000/api-docs  (Swagger UI)
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, settings as default_settings
from app.db import Database
from app.errors import register_exception_handlers
from app.middleware.access_log import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from app.middleware.security import SecurityHeadersMiddleware, parse_cors_origins
from app.routers import companies, health
from app.routers.health import uptime_seconds
from app.schemas.common import ApiResponse, iso_now
from app.utils.openapi import install_openapi

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    logger.info("Starting %s (env=%s)", app.state.settings.app_name, app.state.settings.app_env)
    await database.connect()
    yield
    logger.info("Shutting down")
    await database.disconnect()


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; defaults to the environment-derived settings.
        database: Connection handle; defaults to one built from *settings*.
            Connected in the lifespan if it is not already.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=settings.docs_path if settings.docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.started_at = time.monotonic()

    # Middleware: the last one added runs first.
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(settings.rate_limit_max_requests, settings.rate_limit_window_seconds),
        )
    app.add_middleware(SecurityHeadersMiddleware, enabled=settings.enable_security_headers)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    register_exception_handlers(app)

    @app.get("/health", tags=["Health"], summary="Service health")
    async def service_health(request: Request) -> JSONResponse:
        payload = {
            "uptime": uptime_seconds(request),
            "message": "OK",
            "timestamp": iso_now(),
            "version": settings.app_version,
            "environment": settings.app_env,
        }
        return ApiResponse.ok(payload, "Service is healthy").to_response()

    @app.get(settings.api_prefix, tags=["Health"], summary="API information")
    async def api_info(request: Request) -> JSONResponse:
        base = str(request.base_url).rstrip("/")
        payload = {
            "name": settings.app_name,
            "version": settings.app_version,
            "description": "REST API for managing company data",
            "documentation": f"{base}{settings.docs_path}" if settings.docs_enabled else None,
            "endpoints": {
                "health": "/health",
                "companies": f"{settings.api_prefix}/companies",
            },
        }
        return ApiResponse.ok(payload, "API is running").to_response()

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(companies.router, prefix=settings.api_prefix)

    if settings.docs_enabled:
        install_openapi(app, settings)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "app.main:app",
        host=default_settings.fastapi_host,
        port=default_settings.fastapi_port,
        reload=default_settings.is_development,
    )
