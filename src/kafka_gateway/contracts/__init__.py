"""Public contracts for the gateway."""
from kafka_gateway.contracts.broker import (
    DEFAULT_PARTITION_KEY,
    Broker,
    FailureReason,
    PublishOutcome,
    PublishRequest,
)

__all__ = [
    "DEFAULT_PARTITION_KEY",
    "Broker",
    "FailureReason",
    "PublishOutcome",
    "PublishRequest",
]
