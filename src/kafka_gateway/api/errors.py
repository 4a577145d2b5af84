# kafka_gateway/api/errors.py
"""
Error rendering and the per-request fault barrier.

Every error response is a JSON object of the form ``{"error": "..."}``.
"""
from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from kafka_gateway.core.errors import GatewayError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal server error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return error_response(exc.status_code, exc.public_message)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    try:
        message = HTTPStatus(exc.status_code).phrase.lower()
    except ValueError:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def fault_barrier(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Turn any exception escaping a handler into a 500 and keep serving."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("panic recovered: %s %s", request.method, request.url.path)
        return error_response(500, INTERNAL_ERROR)


def install_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.middleware("http")(fault_barrier)
