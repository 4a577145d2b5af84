# kafka_gateway/server.py
"""
Process entry point: run the gateway under uvicorn.

SIGINT/SIGTERM start draining: publishes are refused, uvicorn stops
accepting connections and gives in-flight requests ``SHUTDOWN_GRACE``
seconds before cancelling them, then the lifespan releases the Kafka
connection. Further signals while draining are ignored.
"""
from __future__ import annotations

import logging
import signal
import sys
from types import FrameType

import uvicorn

from kafka_gateway.core.config import Settings
from kafka_gateway.core.lifecycle import LifecycleManager
from kafka_gateway.main import create_app

logger = logging.getLogger(__name__)


class GatewayServer(uvicorn.Server):
    """uvicorn server whose signal handling drives the lifecycle manager."""

    def __init__(self, config: uvicorn.Config, lifecycle: LifecycleManager) -> None:
        super().__init__(config)
        self.lifecycle = lifecycle

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        name = signal.Signals(sig).name
        if self.lifecycle.begin_draining():
            logger.info("Received %s, shutting down...", name)
        else:
            logger.info("Received %s, shutdown already in progress", name)
        self.should_exit = True


def build_server(cfg: Settings) -> GatewayServer:
    lifecycle = LifecycleManager()
    app = create_app(settings=cfg, lifecycle=lifecycle)
    config = uvicorn.Config(
        app,
        host=cfg.host,
        port=cfg.port,
        lifespan="on",
        log_config=None,
        timeout_graceful_shutdown=cfg.shutdown_grace,
    )
    return GatewayServer(config, lifecycle)


def main() -> None:
    cfg = Settings()
    server = build_server(cfg)

    logger.info("Server is running on %s:%d", cfg.host, cfg.port)
    server.run()

    if not server.started:
        logger.error("Server failed to start on %s:%d", cfg.host, cfg.port)
        sys.exit(1)


if __name__ == "__main__":
    main()
