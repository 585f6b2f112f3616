"""Utility modules."""

from relief_hub.utils.logger import configure_logging, get_logger, log_context

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
]
