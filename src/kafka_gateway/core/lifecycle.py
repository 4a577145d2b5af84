# kafka_gateway/core/lifecycle.py
"""
Process lifecycle: Serving -> Draining -> Closed.

The server runner calls :meth:`LifecycleManager.begin_draining` when the
first interrupt arrives; the application lifespan calls
:meth:`LifecycleManager.shutdown` once the listener has stopped. Publishes
register themselves with :meth:`LifecycleManager.track` so shutdown can wait
for them.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator

from kafka_gateway.contracts.broker import Broker
from kafka_gateway.core.errors import ShuttingDownError

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    SERVING = "serving"
    DRAINING = "draining"
    CLOSED = "closed"


class LifecycleManager:
    def __init__(self) -> None:
        self._state = LifecycleState.SERVING
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._shutdown_started = False
        self._closed = asyncio.Event()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def accepting(self) -> bool:
        return self._state is LifecycleState.SERVING

    def begin_draining(self) -> bool:
        """Stop accepting publishes. Returns True only for the call that did it."""
        if self._state is not LifecycleState.SERVING:
            return False
        self._state = LifecycleState.DRAINING
        logger.info("Draining: %d publish(es) in flight", self._in_flight)
        return True

    @asynccontextmanager
    async def track(self) -> AsyncIterator[None]:
        """Register one in-flight publish; refused once draining has begun."""
        if self._state is not LifecycleState.SERVING:
            raise ShuttingDownError("not accepting new publishes")

        self._in_flight += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    async def wait_idle(self, grace: float) -> bool:
        """Wait up to ``grace`` seconds for in-flight publishes to finish."""
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=grace)
            return True
        except asyncio.TimeoutError:
            logger.warning(
                "Grace period of %.1fs elapsed with %d publish(es) still in flight",
                grace,
                self._in_flight,
            )
            return False

    async def shutdown(self, broker: Broker, grace: float) -> None:
        """
        Drain, release the broker and enter the terminal state.

        Concurrent or repeated calls wait for the first one to finish and
        have no further effect.
        """
        if self._shutdown_started:
            await self._closed.wait()
            return
        self._shutdown_started = True

        self.begin_draining()
        try:
            await self.wait_idle(grace)
            await broker.close()
        finally:
            self._state = LifecycleState.CLOSED
            self._closed.set()
            logger.info("Shutdown complete")
