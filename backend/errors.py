"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal Server Error"}


class PeepholeError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class FetchError(PeepholeError):
    """The room census could not be fetched from upstream."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"failed to fetch room census from {url!r}: {cause}")
        self.url = url
        self.cause = cause


class DecodeError(PeepholeError):
    """The room census payload could not be parsed."""

    def __init__(self, cause: Exception):
        super().__init__(f"failed to parse room census payload: {cause}")
        self.cause = cause


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app.

    Clients only ever see a generic body; details stay in the server log.
    """

    @app.exception_handler(PeepholeError)
    async def handle_peephole_error(_request: Request, exc: PeepholeError):
        logger.error("Failed to serve request: %s", exc, exc_info=exc)
        return JSONResponse(INTERNAL_ERROR_BODY, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(INTERNAL_ERROR_BODY, status_code=500)
