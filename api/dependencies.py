"""
FastAPI Dependencies.

Provides dependency injection for the order service.
"""
from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from fastapi import Request

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.services.order_service import OrderService  # noqa: E402


def get_order_service(request: Request) -> OrderService:
    """
    Return the OrderService built at startup.

    The service is created once in the application lifespan and stored on
    app.state; every request shares that instance. Tests replace it through
    app.dependency_overrides.
    """
    return request.app.state.order_service
