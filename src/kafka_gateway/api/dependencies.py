# kafka_gateway/api/dependencies.py
"""
FastAPI dependencies for request-scoped services.
"""
from __future__ import annotations

from fastapi import Request

from kafka_gateway.core.broker.service import PublishCoordinator


def get_coordinator(request: Request) -> PublishCoordinator:
    """Return the coordinator wired by ``create_app``."""
    return request.app.state.coordinator
