# kafka_gateway/main.py
"""
Gateway application factory.

Creates the FastAPI application, wires the Kafka connection, the publish
coordinator and the lifecycle manager into ``app.state``, and ties the
connection's lifetime to the application lifespan.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kafka_gateway import __version__
from kafka_gateway.api.errors import install_error_handling
from kafka_gateway.api.routes import router
from kafka_gateway.contracts.broker import Broker
from kafka_gateway.core.broker.kafka import create_kafka_broker
from kafka_gateway.core.broker.service import PublishCoordinator
from kafka_gateway.core.config import Settings, settings as default_settings
from kafka_gateway.core.errors import DependencyError
from kafka_gateway.core.lifecycle import LifecycleManager
from kafka_gateway.core.logging import configure_logging

logger = logging.getLogger(__name__)


# -- Lifespan ------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the broker on startup; drain and release it on shutdown."""
    broker: Broker = app.state.broker
    lifecycle: LifecycleManager = app.state.lifecycle
    cfg: Settings = app.state.settings

    try:
        await broker.connect()
    except DependencyError as exc:
        logger.warning(
            "Kafka unavailable at startup (%s); will reconnect on first publish",
            exc,
        )

    yield

    await lifecycle.shutdown(broker, grace=cfg.shutdown_grace)


# -- Application factory -------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    broker: Broker | None = None,
    lifecycle: LifecycleManager | None = None,
) -> FastAPI:
    """Build and wire the gateway application."""
    cfg = settings or default_settings
    configure_logging(cfg.log_level, cfg.log_format)
    logger.info("Creating gateway application (env=%s)", cfg.app_env)

    if broker is None:
        broker = create_kafka_broker(
            bootstrap_servers=cfg.bootstrap_servers,
            client_id=cfg.kafka_client_id,
            write_timeout=cfg.kafka_write_timeout,
            partitioning=cfg.kafka_partitioning,
        )
    lifecycle = lifecycle or LifecycleManager()

    coordinator = PublishCoordinator(
        broker=broker,
        topic=cfg.kafka_topic,
        write_timeout=cfg.kafka_write_timeout,
        lifecycle=lifecycle,
    )

    app = FastAPI(
        title="Kafka Gateway",
        version=__version__,
        description="Publishes caller-supplied messages to a Kafka topic",
        lifespan=lifespan,
    )

    # Explicit wiring
    app.state.settings = cfg
    app.state.broker = broker
    app.state.lifecycle = lifecycle
    app.state.coordinator = coordinator

    install_error_handling(app)
    app.include_router(router)

    logger.info(
        "Gateway ready: topic=%s brokers=%s partitioning=%s",
        cfg.kafka_topic,
        ",".join(cfg.bootstrap_servers),
        cfg.kafka_partitioning,
    )
    return app
