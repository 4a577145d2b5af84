# tests/conftest.py
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from kafka_gateway.core.config import Settings
from kafka_gateway.core.lifecycle import LifecycleManager
from kafka_gateway.main import create_app


class FakeBroker:
    """In-memory broker recording what was delivered."""

    def __init__(
        self,
        delay: float = 0.0,
        error: Exception | None = None,
        connect_error: Exception | None = None,
    ) -> None:
        self.delay = delay
        self.error = error
        self.connect_error = connect_error
        self.delivered: list[tuple[str, bytes, bytes | None]] = []
        self.send_calls = 0
        self.close_calls = 0
        self._connected = False
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self._closed = True
        self._connected = False

    async def send(self, topic: str, value: bytes, key: bytes | None = None) -> None:
        self.send_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.delivered.append((topic, value, key))


def make_settings(**overrides) -> Settings:
    values = {
        "kafka_topic": "health-events",
        "kafka_write_timeout": 0.2,
        "shutdown_grace": 0.5,
        "log_format": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def lifecycle() -> LifecycleManager:
    return LifecycleManager()


@pytest.fixture
def app(settings: Settings, broker: FakeBroker, lifecycle: LifecycleManager):
    return create_app(settings=settings, broker=broker, lifecycle=lifecycle)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
