"""Translate dispatch errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from courier_dispatch.domain.exceptions import (
    AlreadyAssignedError,
    ForcedOfflineError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    AlreadyAssignedError: status.HTTP_409_CONFLICT,
    ForcedOfflineError: status.HTTP_423_LOCKED,
}


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.args[0], "errors": exc.errors},
    )


async def _dispatch_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            status_code = _STATUS_BY_ERROR[error_type]
            break
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the dispatch error handlers to ``app``."""

    app.add_exception_handler(ValidationError, _validation_error_handler)
    for error_type in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, _dispatch_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)


__all__ = ["register_exception_handlers"]
