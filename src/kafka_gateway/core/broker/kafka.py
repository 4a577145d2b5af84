# kafka_gateway/core/broker/kafka.py
"""
Kafka broker connection used by the publish coordinator.

Wraps a single long-lived ``AIOKafkaProducer``. The producer is started
when the application starts; if the cluster is unreachable at that point
the next ``send`` starts it on demand. Connect and close are serialised by a
lock, and once closed the connection refuses any further use.

Usage:
    broker = KafkaBroker(KafkaConfig(bootstrap_servers=["localhost:9092"]))

    await broker.connect()
    await broker.send("health-events", b"hello", key=b"health")
    await broker.close()
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaConnectionError, KafkaError, KafkaTimeoutError

from kafka_gateway.core.broker.partitioning import Balancer, make_balancer
from kafka_gateway.core.errors import (
    BrokerClosedError,
    BrokerConnectionError,
    BrokerTimeoutError,
    BrokerWriteError,
)

logger = logging.getLogger(__name__)

ProducerFactory = Callable[..., Any]


@dataclass
class KafkaConfig:
    """
    Configuration for the Kafka producer.

    Attributes:
        bootstrap_servers: ``host:port`` addresses used to discover the cluster.
        client_id: Identifier reported to the brokers.
        acks: Acknowledgement level; ``1`` waits for the partition leader only.
        request_timeout_ms: Client-side deadline for produce and metadata
            requests. It bounds how long the client waits for the broker; it
            does not withdraw a message that was already queued, so a write
            reported as failed may still be delivered later.
        partitioning: ``least_bytes`` or ``key``.
    """

    bootstrap_servers: list[str] = field(default_factory=lambda: ["localhost:9092"])
    client_id: str = "kafka-gateway"
    acks: int = 1
    request_timeout_ms: int = 5000
    partitioning: str = "least_bytes"


class KafkaBroker:
    """Shared, reconnect-on-demand Kafka producer connection."""

    def __init__(
        self,
        config: KafkaConfig | None = None,
        producer_factory: ProducerFactory = AIOKafkaProducer,
    ) -> None:
        self._config = config or KafkaConfig()
        self._producer_factory = producer_factory
        self._balancer: Balancer = make_balancer(self._config.partitioning)

        self._producer: Any | None = None
        self._closed = False
        self._lock = asyncio.Lock()

        # Stats
        self._sent_count = 0
        self._error_count = 0

    @property
    def config(self) -> KafkaConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._producer is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def _connect_internal(self) -> None:
        """Internal connect without lock."""
        logger.info(
            "Connecting to Kafka at %s",
            ",".join(self._config.bootstrap_servers),
        )

        producer = self._producer_factory(
            bootstrap_servers=self._config.bootstrap_servers,
            client_id=self._config.client_id,
            acks=self._config.acks,
            request_timeout_ms=self._config.request_timeout_ms,
            linger_ms=0,
            enable_idempotence=False,
        )

        try:
            await producer.start()
        except BaseException as exc:
            # Also reached when the caller's deadline cancels a hanging bootstrap
            await asyncio.shield(self._release_failed(producer))
            if isinstance(exc, KafkaError):
                logger.error("Failed to connect to Kafka: %s", exc)
                raise BrokerConnectionError(str(exc)) from exc
            raise

        self._producer = producer
        logger.info("Connected to Kafka as %s", self._config.client_id)

    async def _release_failed(self, producer: Any) -> None:
        try:
            await producer.stop()
        except Exception as exc:
            logger.warning("Error releasing failed Kafka producer: %s", exc)

    async def connect(self) -> None:
        """
        Start the producer.

        Idempotent: calling it when already connected is a no-op.

        Raises:
            BrokerClosedError: If the connection has already been released.
            BrokerConnectionError: If the cluster cannot be bootstrapped.
        """
        async with self._lock:
            if self._closed:
                raise BrokerClosedError("Kafka connection already released")
            if self._producer is not None:
                return
            await self._connect_internal()

    async def close(self) -> None:
        """Release the producer. Only the first call has any effect."""
        async with self._lock:
            if self._closed:
                return
            self._closed = True

            producer, self._producer = self._producer, None
            if producer is None:
                logger.info("Kafka connection released (never connected)")
                return

            try:
                await producer.stop()
            except Exception as exc:
                logger.warning("Error during Kafka disconnect: %s", exc)
            logger.info("Disconnected from Kafka: %s", self.get_stats())

    async def send(self, topic: str, value: bytes, key: bytes | None = None) -> None:
        """
        Produce one message and wait for the leader acknowledgement.

        Raises:
            BrokerClosedError: After ``close``.
            BrokerConnectionError: Cluster unreachable.
            BrokerTimeoutError: The client's request deadline expired.
            BrokerWriteError: The broker rejected the write.
        """
        if self._closed:
            raise BrokerClosedError("Kafka connection already released")

        if self._producer is None:
            await self.connect()

        producer = self._producer
        if producer is None:
            raise BrokerClosedError("Kafka connection released during send")

        try:
            partition = self._balancer.choose(
                await producer.partitions_for(topic), len(value)
            )
            await producer.send_and_wait(
                topic,
                value=value,
                key=key,
                partition=partition,
            )
        except KafkaTimeoutError as exc:
            self._error_count += 1
            raise BrokerTimeoutError(str(exc) or "Kafka request timed out") from exc
        except KafkaConnectionError as exc:
            self._error_count += 1
            raise BrokerConnectionError(str(exc)) from exc
        except KafkaError as exc:
            self._error_count += 1
            raise BrokerWriteError(str(exc)) from exc

        self._sent_count += 1
        logger.debug(
            "Produced to %s (partition=%s, size=%d bytes)",
            topic,
            "auto" if partition is None else partition,
            len(value),
        )

    def get_stats(self) -> dict[str, Any]:
        return {
            "connected": self.is_connected,
            "closed": self._closed,
            "sent_count": self._sent_count,
            "error_count": self._error_count,
        }


def create_kafka_broker(
    bootstrap_servers: list[str],
    client_id: str = "kafka-gateway",
    write_timeout: float = 5.0,
    partitioning: str = "least_bytes",
) -> KafkaBroker:
    """Build a broker whose client-side deadline matches the publish timeout."""
    config = KafkaConfig(
        bootstrap_servers=bootstrap_servers,
        client_id=client_id,
        request_timeout_ms=int(write_timeout * 1000),
        partitioning=partitioning,
    )
    return KafkaBroker(config)
