from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from warehouse_api.core.exceptions import ValidationError, WarehouseError
from warehouse_api.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 409, 500)
}


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[Iterable[str]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = {
        "status": status_code,
        "message": message,
        "errors": list(errors or []),
        "timestamp": datetime.now(timezone.utc),
        "path": request.url.path,
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def _record_error(request: Request, exc: Exception) -> None:
    metrics = getattr(request.app.state, "metrics", None)
    if metrics is not None:
        metrics.record_error(type(exc).__name__, f"{request.method} {request.url.path}")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(WarehouseError)
    async def _domain_error(request: Request, exc: WarehouseError):
        _record_error(request, exc)
        errors = exc.errors if isinstance(exc, ValidationError) else [exc.message]
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(request, exc.status_code, exc.message, errors)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            errors.append(f"{location}: {error.get('msg', 'invalid value')}")
        return error_response(request, 400, "Request validation failed", errors)

    @app.exception_handler(HTTPException)
    async def _http_error(request: Request, exc: HTTPException):
        message = str(exc.detail) if exc.detail is not None else "Request failed"
        return error_response(
            request, exc.status_code, message, [message], headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        _record_error(request, exc)
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(request, 500, "An unexpected error occurred")


__all__ = ["ERROR_RESPONSES", "error_response", "register_exception_handlers"]
