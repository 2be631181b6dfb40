"""Logging configuration for processes that embed the client."""

from .setup import setup_logging

__all__ = ["setup_logging"]
