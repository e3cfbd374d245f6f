"""FastAPI exception handlers for imagepost errors."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from imagepost.exceptions import ImagePostError, PostValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: PostValidationError) -> JSONResponse:
    """Client input errors: 400 with the message, nothing was written."""
    logger.warning(
        "Rejected request %s %s: %s - %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.message,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def imagepost_error_handler(request: Request, exc: ImagePostError) -> Response:
    """Storage and key generation failures: 500 with an empty body."""
    logger.error(
        "Request %s %s failed: %s - %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.message,
        exc_info=exc,
    )
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    """Anything else raised while serving a request: 500 with an empty body."""
    logger.error(
        "Request %s %s failed: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def not_implemented_handler(request: Request, exc: NotImplementedError) -> Response:
    logger.info("Unimplemented operation requested: %s %s", request.method, request.url.path)
    return Response(status_code=status.HTTP_501_NOT_IMPLEMENTED)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostValidationError, validation_error_handler)
    app.add_exception_handler(ImagePostError, imagepost_error_handler)
    app.add_exception_handler(NotImplementedError, not_implemented_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
