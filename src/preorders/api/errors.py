"""Mapping of pre-orders error kinds to HTTP responses.

Protean's own exceptions (ValidationError, ObjectNotFoundError, ...) are
handled by ``protean.integrations.fastapi.register_exception_handlers``; this
module covers the errors raised by the pre-orders handlers.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from preorders.exceptions import (
    ConcurrencyConflict,
    Forbidden,
    InvalidTransition,
    NotFound,
    OrderWindowClosed,
    PreordersError,
    ValidationFailed,
)
from preorders.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    NotFound: 404,
    Forbidden: 403,
    OrderWindowClosed: 422,
    ValidationFailed: 400,
    InvalidTransition: 409,
    ConcurrencyConflict: 409,
}


def status_code_for(exc: PreordersError) -> int:
    for kind, status_code in STATUS_CODES.items():
        if isinstance(exc, kind):
            return status_code
    return 500


async def preorders_error_handler(request: Request, exc: PreordersError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.warning(
        "Request rejected",
        path=request.url.path,
        method=request.method,
        error=exc.__class__.__name__,
        status_code=status_code,
        message=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PreordersError, preorders_error_handler)
