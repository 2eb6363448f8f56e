"""Response envelope ``{message, data?, errors?}`` and exception handlers."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.errors import Failure, Outcome

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred"


def envelope(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    content: dict[str, Any] = {"message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def error_response(message: str, errors: Optional[dict[str, list[str]]] = None, status_code: int = 422) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "errors": errors or {"general": [message]}},
    )


def failure_response(failure: Failure) -> JSONResponse:
    if failure.status_code >= 500:
        return error_response("Request failed", {"general": [GENERIC_ERROR]}, failure.status_code)
    return error_response(failure.message, failure.errors, failure.status_code)


def _field_name(loc: tuple) -> str:
    # ("body", "location") -> "location"; ("query", "provider_id") -> "provider_id"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "general"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(error.get("msg", "Invalid value"))
    logger.info(f"Validation failed for {request.method} {request.url.path}: {list(errors)}")
    return error_response("Validation failed", errors, 422)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = error_response(detail, {"general": [detail]}, exc.status_code)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response("Request failed", {"general": [GENERIC_ERROR]}, 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def respond(outcome: Outcome, message: str, schema=None, status_code: int = 200) -> JSONResponse:
    """Format a service Outcome as the response envelope."""
    if not outcome.ok:
        return failure_response(outcome.failure)
    data = outcome.value
    if schema is not None:
        if isinstance(data, list):
            data = [schema.model_validate(item) for item in data]
        else:
            data = schema.model_validate(data)
    return envelope(message, data, status_code)
