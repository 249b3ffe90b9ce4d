from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbo.api.middleware.request_id import get_request_id
from rbo.domain.common.errors import (
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific class first; lookups walk the exception's MRO.
DOMAIN_ERROR_STATUS: dict[type[DomainError], tuple[int, str]] = {
    ValidationError: (400, "VALIDATION_FAILED"),
    NotFoundError: (404, "NOT_FOUND"),
    InvalidTransitionError: (409, "INVALID_ORDER_TRANSITION"),
    DomainError: (400, "DOMAIN_ERROR"),
}

_HTTP_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "error": {"code": code, "message": message, "details": details or {}},
        "requestId": get_request_id(),
    }


def _status_for(exc: DomainError) -> tuple[int, str]:
    for cls in type(exc).__mro__:
        if cls in DOMAIN_ERROR_STATUS:
            return DOMAIN_ERROR_STATUS[cls]
    return DOMAIN_ERROR_STATUS[DomainError]


async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    domain_exc = cast(DomainError, exc)
    status_code, code = _status_for(domain_exc)
    details = getattr(domain_exc, "details", None)
    logger.info(
        "request_rejected",
        extra={"method": request.method, "path": request.url.path, "status_code": status_code, "reason": code},
    )
    return JSONResponse(
        status_code=status_code,
        content=error_body(code, str(domain_exc), details if isinstance(details, dict) else None),
    )


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=error_body(
            _HTTP_CODES.get(http_exc.status_code, "HTTP_ERROR"),
            str(http_exc.detail) if http_exc.detail else "request failed",
        ),
        headers=getattr(http_exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return JSONResponse(
        status_code=400,
        content=error_body(
            "INVALID_REQUEST",
            "request validation failed",
            {"errors": jsonable_encoder(validation_exc.errors())},
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
