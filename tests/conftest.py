"""Shared pytest fixtures."""
import os

import pytest

from core.infrastructure.adapters.persistence.memory_order_repository import InMemoryOrderRepository
from core.settings import get_app_settings
from tests.mocks.fake_order_queue import FakeOrderQueue


SETTINGS_ENV_PREFIXES = ("ORDER_DB_", "ORDER_QUEUE_", "AZURE_COSMOS_")
SETTINGS_ENV_NAMES = (
    "USE_WORKLOAD_IDENTITY_AUTH",
    "APP_VERSION",
    "LOG_LEVEL",
    "REQUEST_TIMEOUT_SECONDS",
    "PORT",
    "CORS_ALLOW_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep the host environment from leaking into settings under test."""
    for name in list(os.environ):
        if name.startswith(SETTINGS_ENV_PREFIXES) or name in SETTINGS_ENV_NAMES:
            monkeypatch.delenv(name, raising=False)
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()


@pytest.fixture
def repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def queue() -> FakeOrderQueue:
    return FakeOrderQueue()
