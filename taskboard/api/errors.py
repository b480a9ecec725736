# taskboard/api/errors.py
"""
Translation of failures into the response envelope.

Services raise TaskboardError subclasses; this is the only place that turns
them into HTTP responses. Unexpected exceptions are logged here and the
client only ever sees a generic message.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from taskboard.api.responses import failure
from taskboard.core.exceptions import InternalError, TaskboardError, ValidationError
from taskboard.core.logging import log
from taskboard.models.task import ENUM_VALUES, FIELD_MESSAGES


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(exc.message),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError.from_errors(exc.errors(), FIELD_MESSAGES, ENUM_VALUES)
    log("QUERY", f"{request.method} {request.url.path} rejected: {error.message}")
    return await taskboard_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    log("SECURITY", f"Rate limit hit by {request.client.host if request.client else 'unknown'}: {exc.detail}")
    return JSONResponse(status_code=429, content=failure(f"Rate limit exceeded: {exc.detail}"))


async def catch_unexpected(request: Request, call_next):
    """
    HTTP middleware: anything that escaped the handlers above becomes a 500
    envelope. The real error is logged, never returned.
    """
    try:
        return await call_next(request)
    except Exception as e:
        log("ERROR", f"{request.method} {request.url.path} failed: {type(e).__name__}: {e}")
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content=failure(error.message))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.middleware("http")(catch_unexpected)
