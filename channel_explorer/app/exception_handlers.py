"""Global exception handlers for the FastAPI application.

Application errors are rendered as RFC 7807 problem details.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from channel_explorer.core.exceptions import (
    ChannelExplorerError,
    ConfigurationError,
    InvalidFilterError,
    StoreFetchError,
    SyncError,
)
from channel_explorer.core.schemas import ProblemDetails

logger = logging.getLogger(__name__)

# Most specific first; the base class is the fallback
ERROR_STATUS: tuple[tuple[type[ChannelExplorerError], int, str], ...] = (
    (StoreFetchError, status.HTTP_502_BAD_GATEWAY, "store-fetch-error"),
    (InvalidFilterError, status.HTTP_400_BAD_REQUEST, "invalid-filter"),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE, "configuration-error"),
    (SyncError, status.HTTP_502_BAD_GATEWAY, "sync-error"),
)


def _problem_body(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """RFC 7807 body; ``extra`` members sit beside the standard ones."""
    problem = ProblemDetails(
        type=type_,
        title=title or ProblemDetails.default_title(status_code),
        status=status_code,
        detail=detail,
        instance=instance,
    )
    response_data = problem.model_dump(exclude_none=True)
    if extra:
        response_data.update(extra)
    return response_data


def _classify(exc: ChannelExplorerError) -> tuple[int, str]:
    for error_type, status_code, type_ in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code, type_
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal-error"


async def app_exception_handler(request: Request, exc: ChannelExplorerError) -> JSONResponse:
    """Render a ``ChannelExplorerError`` as problem details."""
    status_code, type_ = _classify(exc)

    logger.warning(
        "Request failed with %s", type(exc).__name__,
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "status_code": status_code,
            "detail": exc.message,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=_problem_body(
            status_code=status_code,
            detail=exc.message,
            type_=type_,
            instance=request.url.path,
            extra={"details": exc.details} if exc.details else None,
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback, return a generic 500."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path,
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_problem_body(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request",
            type_="internal-error",
            title="Internal Server Error",
            instance=request.url.path,
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChannelExplorerError, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
