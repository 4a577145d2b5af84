# kafka_gateway/core/broker/__init__.py
"""
Broker infrastructure for message publishing.

This module provides:
- Kafka connection (``KafkaBroker``) and its factory
- Partition selection strategies
- The publish coordinator used by request handlers

Example usage:

    from kafka_gateway.core.broker import PublishCoordinator, create_kafka_broker

    broker = create_kafka_broker(["localhost:9092"], write_timeout=5.0)
    coordinator = PublishCoordinator(broker, "health-events", 5.0, lifecycle)

    outcome = await coordinator.publish(PublishRequest(message="ping"))
    if not outcome.success:
        print(f"Failed: {outcome.reason}")
"""

from kafka_gateway.core.broker.kafka import KafkaBroker, KafkaConfig, create_kafka_broker
from kafka_gateway.core.broker.partitioning import (
    KeyBalancer,
    LeastBytesBalancer,
    make_balancer,
)
from kafka_gateway.core.broker.service import PublishCoordinator

__all__ = [
    "KafkaBroker",
    "KafkaConfig",
    "create_kafka_broker",
    "KeyBalancer",
    "LeastBytesBalancer",
    "make_balancer",
    "PublishCoordinator",
]
