"""
Logging configuration based on structlog.

``setup_logging`` is called once on application startup. Development
deployments get a readable console renderer; set ``LOG_FORMAT=json`` to
emit one JSON object per line for log shippers.

Environment variables:
    - LOG_LEVEL:  Minimum level to emit (default: INFO)
    - LOG_FORMAT: ``console`` or ``json`` (default: console)
"""

import logging
import os
import sys

import structlog
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "console")


def setup_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """
    Configure structlog processors and the minimum log level.

    Args:
        level (str): Level name such as ``DEBUG`` or ``INFO``. Unknown names
            fall back to ``INFO``.
        fmt (str): ``json`` for JSON lines, anything else for the console renderer.
    """

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # the console renderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
