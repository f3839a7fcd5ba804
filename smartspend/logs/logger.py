"""
Structured Logging

DESIGN DECISION: Every module logs through structlog with snake_case
event names and keyword context, e.g.

    logger.info("transaction_added", transaction_id=..., amount="12.50")

This gives:
1. Machine-readable JSON lines in production
2. Readable console output while developing
3. One place to change the format for the whole app
"""

import logging
import sys
from typing import Optional

import structlog


_configured = False


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure stdlib logging and structlog once per process.
    
    Args:
        level: Root log level name (DEBUG, INFO, ...)
        json_output: Render JSON lines; when False, render for a console
    """
    global _configured
    
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def configure_from_settings() -> None:
    """Configure logging from AppSettings (debug mode renders to console)."""
    from smartspend.config import get_settings
    
    app = get_settings().app
    configure_logging(level=app.log_level, json_output=not app.debug_mode)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to a module name."""
    return structlog.get_logger(name)


def is_configured() -> bool:
    return _configured
