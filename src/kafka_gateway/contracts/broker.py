# kafka_gateway/contracts/broker.py
"""
Broker protocol and publish value types.

Broker implementations conform to :class:`Broker`. The publish coordinator
does not depend on any specific client library.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

DEFAULT_PARTITION_KEY = b"health"


class FailureReason(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    BROKER_ERROR = "broker_error"
    SHUTTING_DOWN = "shutting_down"


@dataclass(frozen=True)
class PublishRequest:
    message: str
    partition_key: bytes | None = None

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("message must be a non-empty string")

    @property
    def key(self) -> bytes:
        return self.partition_key if self.partition_key is not None else DEFAULT_PARTITION_KEY

    @property
    def value(self) -> bytes:
        return self.message.encode("utf-8")


@dataclass(frozen=True)
class PublishOutcome:
    """Result of one publish attempt: success, or failure with a reason."""

    success: bool
    reason: FailureReason | None = None
    detail: str | None = None

    @classmethod
    def ok(cls) -> PublishOutcome:
        return cls(success=True)

    @classmethod
    def failed(cls, reason: FailureReason, detail: str | None = None) -> PublishOutcome:
        return cls(success=False, reason=reason, detail=detail)


@runtime_checkable
class Broker(Protocol):
    """Transport-agnostic message broker connection."""

    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def send(self, topic: str, value: bytes, key: bytes | None = None) -> None: ...

    @property
    def is_connected(self) -> bool: ...

    @property
    def is_closed(self) -> bool: ...
