"""Logging configuration for up_cli."""

from up_cli.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
