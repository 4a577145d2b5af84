# kafka_gateway/api/routes.py
"""
Liveness and publish endpoints.
"""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from kafka_gateway.contracts.broker import FailureReason, PublishOutcome, PublishRequest
from kafka_gateway.core.broker.service import PublishCoordinator
from kafka_gateway.core.errors import (
    ClientDisconnectedError,
    DependencyError,
    MissingParameterError,
    ShuttingDownError,
)
from kafka_gateway.api.dependencies import get_coordinator

logger = logging.getLogger(__name__)

router = APIRouter()

WRITE_OK = "kafka 📝"


async def _wait_for_disconnect(request: Request) -> None:
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def _publish_until_disconnect(
    request: Request,
    coordinator: PublishCoordinator,
    publish_request: PublishRequest,
) -> PublishOutcome:
    """Run the publish, cancelling it if the caller disconnects first."""
    publish = asyncio.ensure_future(coordinator.publish(publish_request))
    watcher = asyncio.ensure_future(_wait_for_disconnect(request))
    try:
        await asyncio.wait({publish, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (publish, watcher):
            if not task.done():
                task.cancel()
        await asyncio.gather(publish, watcher, return_exceptions=True)

    if publish.cancelled():
        logger.info("Client disconnected, publish aborted")
        raise ClientDisconnectedError()
    return publish.result()


@router.get("/health_check")
async def health_check() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@router.get("/kafka_write")
async def kafka_write(
    request: Request,
    message: str | None = None,
    coordinator: PublishCoordinator = Depends(get_coordinator),
) -> JSONResponse:
    """Publish ``message`` to the configured topic."""
    if not message:
        raise MissingParameterError("message")

    outcome = await _publish_until_disconnect(
        request, coordinator, PublishRequest(message=message)
    )
    if outcome.success:
        return JSONResponse({"status": WRITE_OK})

    if outcome.reason is FailureReason.SHUTTING_DOWN:
        raise ShuttingDownError()
    raise DependencyError(outcome.detail or "publish failed")
