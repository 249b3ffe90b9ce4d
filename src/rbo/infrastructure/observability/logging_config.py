from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from rbo.api.middleware.request_id import get_request_id
from rbo.infrastructure.observability.otel import current_trace_ids

_LOGGING_CONFIGURED = False

# Structured ``extra=`` keys copied onto the JSON line when present.
STRUCTURED_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "store_id",
    "namespace",
    "order_id",
    "status",
    "reason",
)

_QUIET_LOGGERS = ("uvicorn.access",)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, correlated with the request id and active span."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        trace_id, span_id = current_trace_ids()
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
            "trace_id": trace_id,
            "span_id": span_id,
        }
        payload.update(
            {key: getattr(record, key) for key in STRUCTURED_FIELDS if getattr(record, key, None) is not None}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(os.getenv("OTEL_SERVICE_NAME", "rbo-backend")))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
