# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, Prometheus metrics, and optional access logging.
# Startup creates the resource tables when a resource is configured for the sql backend.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import RequestResponseEndpoint

from resource_api.api.api_config import ApiConfig, get_api_config
from resource_api.api.dependencies import get_database_client
from resource_api.api.error_handlers import register_error_handlers
from resource_api.api.routers.health import router as health_router
from resource_api.api.routers.hello import router as hello_router
from resource_api.api.routers.todos import router as todos_router
from resource_api.api.routers.users import router as users_router
from resource_api.common.db import apply_resource_ddl, test_connection
from resource_api.common.logging import configure_logging

LOGGER = logging.getLogger("resource_api.api")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method"],
)


def _bootstrap_database(config: ApiConfig) -> None:
    if not config.uses_sql_backend:
        return

    db = get_database_client()
    if not test_connection(db.engine):
        LOGGER.warning("Database unreachable at startup; sql-backed resources will report unavailable.")
        return
    if config.create_tables:
        try:
            apply_resource_ddl(
                db.engine,
                users_table=config.users_table_name,
                todos_table=config.todos_table_name,
            )
        except SQLAlchemyError:
            LOGGER.warning("Resource table bootstrap failed.", exc_info=True)


def _route_path(request: Request) -> str:
    # Label by route template so record ids do not explode metric cardinality.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def create_app(config: ApiConfig | None = None) -> FastAPI:
    """Create configured FastAPI application instance."""

    config = config or get_api_config()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _bootstrap_database(config)
        yield
        if config.uses_sql_backend and get_database_client.cache_info().currsize:
            get_database_client().dispose()

    app = FastAPI(
        title=config.api_name,
        description=(
            "CRUD services for users and todos over interchangeable in-memory and relational stores, "
            "plus plain-text greeting routes."
        ),
        version=config.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "users", "description": "User records identified by UUID."},
            {"name": "todos", "description": "Todo records identified by backend-assigned integers."},
            {"name": "hello", "description": "Plain-text greeting routes."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                LOGGER.info(
                    "request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
                    request_id,
                    request.method,
                    request.url.path,
                    response.status_code,
                    duration_ms,
                )

            return response
        finally:
            duration_s = time.perf_counter() - started
            path_label = _route_path(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    register_error_handlers(app)

    app.include_router(hello_router)
    app.include_router(health_router)
    app.include_router(users_router, prefix=config.api_version_path)
    app.include_router(todos_router, prefix=config.api_version_path)

    return app


app = create_app()
