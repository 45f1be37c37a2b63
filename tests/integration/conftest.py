"""Pytest configuration and fixtures for integration tests."""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_order_service
from api.main import create_app
from core.application.services.order_service import OrderService


@pytest.fixture
def order_service(repository, queue) -> OrderService:
    """OrderService over the in-memory store and the fake queue."""
    return OrderService(repository=repository, queue=queue, timeout_seconds=1.0)


@pytest.fixture
def test_client(order_service) -> TestClient:
    """
    Create FastAPI test client with the in-memory order service.

    The lifespan is not entered, so no real database or Redis is opened.
    """
    app = create_app()
    app.dependency_overrides[get_order_service] = lambda: order_service

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    # Cleanup
    app.dependency_overrides.clear()
