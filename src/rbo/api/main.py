from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from rbo.api.dependencies import build_services
from rbo.api.error_handling import register_exception_handlers
from rbo.api.middleware.request_id import RequestIDMiddleware
from rbo.api.routes.catalog import router as catalog_router
from rbo.api.routes.health import router as health_router
from rbo.api.routes.metrics import router as metrics_router
from rbo.api.routes.orders import router as orders_router
from rbo.api.routes.pos import router as pos_router
from rbo.application.ports.events import EventPublisher
from rbo.application.ports.snapshot_store import SnapshotStore
from rbo.infrastructure.messaging.redis_publisher import RedisEventPublisher
from rbo.infrastructure.observability.logging_config import configure_logging
from rbo.infrastructure.observability.otel import configure_otel
from rbo.infrastructure.snapshots.factory import (
    CATALOG_NAMESPACE,
    ORDERS_NAMESPACE,
    build_snapshot_store,
)

logger = logging.getLogger("rbo.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()
    if env in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_template(request: Request) -> str:
    # Route template, not the concrete path, as the metric label.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def _observe(request: Request, status_code: int, started: float) -> dict[str, object]:
    elapsed = time.perf_counter() - started
    template = _route_template(request)
    REQUEST_COUNT.labels(method=request.method, path=template, status_code=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=request.method, path=template).observe(elapsed)
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": round(elapsed * 1000, 2),
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_error", extra=_observe(request, 500, started))
            raise

        logger.info("request_complete", extra=_observe(request, response.status_code, started))
        return response


def _default_publisher() -> EventPublisher | None:
    if not os.getenv("REDIS_URL"):
        return None
    return RedisEventPublisher()


def create_app(
    catalog_store: SnapshotStore | None = None,
    order_store: SnapshotStore | None = None,
    publisher: EventPublisher | None = None,
) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Restaurant Back Office", version="0.1.0")
    app.state.services = build_services(
        catalog_store=catalog_store or build_snapshot_store(CATALOG_NAMESPACE),
        order_store=order_store or build_snapshot_store(ORDERS_NAMESPACE),
        publisher=publisher if publisher is not None else _default_publisher(),
    )

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(catalog_router)
    app.include_router(pos_router)
    app.include_router(orders_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    configure_otel(app)
    return app


app = create_app()
