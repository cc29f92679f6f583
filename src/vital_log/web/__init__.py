"""Sync server for vital-log."""

from .app import create_app

__all__ = ["create_app"]
