"""Logging setup shared by every entry point that embeds the engine.

stdlib logging carries the records (modules use ``logging.getLogger(__name__)``),
structlog renders them: JSON in production, console output otherwise.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import Processor

from cardscore.config import settings


def _renderer() -> Processor:
    if settings.is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging and structlog. Safe to call more than once."""
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(getattr(logging, level_name))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
