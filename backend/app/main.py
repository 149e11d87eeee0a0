"""StackFast service entry point.

``create_app()`` wires the recommendation and cost routes, request
tracing, error envelopes and readiness checks. The tool catalog is loaded
at startup so a broken catalog stops the process before it takes traffic.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from app.config import Settings, get_settings
from app.dependencies import close_redis, get_redis, init_catalog, init_redis
from app.exceptions import StackFastError
from app.logging_config import get_logger, setup_logging
from app.metrics import APP_INFO, HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL
from gateway.health import HealthMonitor, readiness_catalog
from services.models import ToolProfile

logger = get_logger(__name__)

INTERNAL_ERROR = {
    "error": {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred.",
    }
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging()
    APP_INFO.info({"version": settings.app_version, "environment": settings.environment.value})

    catalog = init_catalog()
    await init_redis()
    logger.info("stackfast_ready", tools=len(catalog), environment=settings.environment.value)

    yield

    await close_redis()
    logger.info("stackfast_stopped")


def _route_template(request: Request) -> str:
    """Path template of the matched route, so metric labels stay bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


async def trace_request(request: Request, call_next) -> Response:
    """Tag logs and responses with a request id and record HTTP metrics."""
    request_id = str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    started = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - started

    response.headers["X-Request-ID"] = request_id
    endpoint = _route_template(request)
    HTTP_REQUESTS_TOTAL.labels(
        method=request.method, endpoint=endpoint, status_code=response.status_code
    ).inc()
    HTTP_REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(elapsed)
    return response


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StackFastError)
    async def stackfast_error_handler(_request: Request, exc: StackFastError) -> JSONResponse:
        logger.warning("request_failed", code=exc.code, status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        # Internals stay in the log, never in the response body
        logger.exception("unhandled_error", error=str(exc))
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)


def _register_system_routes(app: FastAPI, settings: Settings) -> None:
    @app.get("/health", tags=["System"])
    async def liveness() -> dict:
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment.value,
        }

    @app.get("/health/ready", tags=["System"])
    async def readiness(
        redis: aioredis.Redis = Depends(get_redis),
        catalog: list[ToolProfile] | None = Depends(readiness_catalog),
    ) -> JSONResponse:
        """503 until Redis answers and the catalog has tools."""
        result = await HealthMonitor(redis, catalog).check_all()
        return JSONResponse(
            status_code=200 if result["status"] == "healthy" else 503,
            content=result,
        )

    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())


def create_app() -> FastAPI:
    """Build the StackFast application."""
    from api.v1.router import api_v1_router

    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Technology stack recommendations and cost projections for software projects",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Cache"],
    )
    app.middleware("http")(trace_request)

    _register_error_handlers(app)
    app.include_router(api_v1_router, prefix="/api/v1")
    _register_system_routes(app, settings)
    return app


app = create_app()
