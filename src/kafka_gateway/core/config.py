# kafka_gateway/core/config.py
"""
Central configuration for the gateway.

Environment variables override defaults. ``KAFKA_BROKER`` accepts a single
``host:port`` or a comma separated list of bootstrap addresses.
"""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Listener
    host: str = "0.0.0.0"
    port: int = 8080
    shutdown_grace: float = Field(
        default=10.0,
        gt=0,
        description="Seconds in-flight requests get to finish on shutdown",
    )

    # Kafka
    kafka_broker: str = Field(
        default="localhost:9092",
        description="Bootstrap address list, comma separated",
    )
    kafka_topic: str = "health-events"
    kafka_client_id: str = "kafka-gateway"
    kafka_partitioning: Literal["least_bytes", "key"] = "least_bytes"
    kafka_write_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound in seconds for a single publish",
    )

    @property
    def bootstrap_servers(self) -> list[str]:
        return [addr.strip() for addr in self.kafka_broker.split(",") if addr.strip()]


settings = Settings()
