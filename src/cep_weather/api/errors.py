"""Translate lookup errors into HTTP responses.

Every failure of the weather pipeline reaches the client through the handlers
registered here, so status codes and bodies stay uniform.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import (
    ClientInputError,
    MethodNotAllowedError,
    WeatherLookupError,
)
from .responses import error_response

LOGGER = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClientInputError)
    async def handle_client_input(request: Request, exc: ClientInputError) -> Response:
        LOGGER.info("Rejected %s %s: %s", request.method, request.url.path, exc.public_message)
        return error_response(exc)

    # Adapters log upstream and configuration failures where the CEP or city is known.
    @app.exception_handler(WeatherLookupError)
    async def handle_lookup_error(_request: Request, exc: WeatherLookupError) -> Response:
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == MethodNotAllowedError.status_code:
            response = error_response(MethodNotAllowedError())
            if exc.headers:
                response.headers.update(exc.headers)
            return response
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> Response:
        LOGGER.exception("Unexpected error: %s", type(exc).__name__)
        return PlainTextResponse("Internal server error", status_code=500)
