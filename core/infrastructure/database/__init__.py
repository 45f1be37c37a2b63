"""Order store wiring."""
from .lifecycle import create_order_repository, open_order_repository

__all__ = ["create_order_repository", "open_order_repository"]
