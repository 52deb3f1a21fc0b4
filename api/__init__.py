"""HTTP API for the budget tracker."""

from .app import create_app, open_storage

__all__ = ["create_app", "open_storage"]
