# kafka_gateway/core/errors.py
from __future__ import annotations


class GatewayError(Exception):
    """Base class for errors the gateway maps to an HTTP response."""

    status_code = 500
    public_message = "internal server error"


class ClientError(GatewayError):
    status_code = 400


class MissingParameterError(ClientError):
    def __init__(self, name: str) -> None:
        super().__init__(f"missing '{name}' query param")
        self.name = name
        self.public_message = str(self)


class DependencyError(GatewayError):
    status_code = 502
    public_message = "kafka write failed"


class BrokerConnectionError(DependencyError):
    """The broker could not be reached or the bootstrap failed."""


class BrokerWriteError(DependencyError):
    """The broker rejected the produce request."""


class BrokerTimeoutError(DependencyError):
    """The client library gave up waiting for the broker."""


class BrokerClosedError(DependencyError):
    """The connection was used after it had been released."""


class ShuttingDownError(GatewayError):
    status_code = 503
    public_message = "service shutting down"


class ClientDisconnectedError(GatewayError):
    """The caller went away before the publish finished."""

    status_code = 499
    public_message = "client closed request"
