# kafka_gateway/core/broker/service.py
"""
Publish coordinator.

Turns a :class:`PublishRequest` into exactly one bounded-time write on the
shared broker connection and reports the result as a
:class:`PublishOutcome`. Nothing is retried here; callers retry on failure.
"""
from __future__ import annotations

import asyncio
import logging

from kafka_gateway.contracts.broker import (
    Broker,
    FailureReason,
    PublishOutcome,
    PublishRequest,
)
from kafka_gateway.core.errors import (
    BrokerTimeoutError,
    BrokerWriteError,
    DependencyError,
    ShuttingDownError,
)
from kafka_gateway.core.lifecycle import LifecycleManager

logger = logging.getLogger(__name__)


class PublishCoordinator:
    """
    Owns the broker connection on behalf of the request handlers.

    Example:
        coordinator = PublishCoordinator(
            broker=broker,
            topic="health-events",
            write_timeout=5.0,
            lifecycle=lifecycle,
        )
        outcome = await coordinator.publish(PublishRequest(message="ping"))
    """

    def __init__(
        self,
        broker: Broker,
        topic: str,
        write_timeout: float,
        lifecycle: LifecycleManager,
    ) -> None:
        self._broker = broker
        self._topic = topic
        self._write_timeout = write_timeout
        self._lifecycle = lifecycle

    @property
    def broker(self) -> Broker:
        return self._broker

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def write_timeout(self) -> float:
        return self._write_timeout

    async def publish(self, request: PublishRequest) -> PublishOutcome:
        """
        Publish one message.

        Failures the broker can cause are reported as ``Failure``; anything
        else propagates to the caller.
        """
        try:
            async with self._lifecycle.track():
                await asyncio.wait_for(
                    self._broker.send(self._topic, request.value, request.key),
                    timeout=self._write_timeout,
                )
        except ShuttingDownError:
            logger.info("Publish refused: shutting down")
            return PublishOutcome.failed(FailureReason.SHUTTING_DOWN)
        except asyncio.TimeoutError:
            logger.error(
                "kafka write error: deadline of %.1fs exceeded (topic=%s)",
                self._write_timeout,
                self._topic,
            )
            return PublishOutcome.failed(
                FailureReason.TIMEOUT, f"exceeded {self._write_timeout}s"
            )
        except BrokerTimeoutError as exc:
            logger.error("kafka write error: %s", exc)
            return PublishOutcome.failed(FailureReason.TIMEOUT, str(exc))
        except BrokerWriteError as exc:
            logger.error("kafka write error: %s", exc)
            return PublishOutcome.failed(FailureReason.BROKER_ERROR, str(exc))
        except DependencyError as exc:
            # BrokerConnectionError and BrokerClosedError
            logger.error("kafka write error: %s", exc)
            return PublishOutcome.failed(FailureReason.CONNECTION, str(exc))

        logger.debug("Published %d bytes to %s", len(request.value), self._topic)
        return PublishOutcome.ok()
