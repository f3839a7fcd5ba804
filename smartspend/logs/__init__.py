"""Structured logging package."""

from smartspend.logs.logger import (
    configure_from_settings,
    configure_logging,
    get_logger,
    is_configured,
)

__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "is_configured",
]
