"""Structured logging configuration using structlog."""

import logging
import sys
from pathlib import Path
from typing import Any, ContextManager

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "ersync"
APP_VERSION = "0.3.0"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every entry with the ersync name and version."""
    event_dict["app"] = APP_NAME
    event_dict["version"] = APP_VERSION
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
) -> None:
    """Configure structlog on top of stdlib logging.

    The CLI calls this once per invocation with the ``logging`` block of the
    loaded config.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for machine-readable lines, "console" for humans
        log_file: Optional file that receives a copy of every entry
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if log_format == "console":
        processors = shared_processors + [
            structlog.processors.ExceptionPrettyPrinter(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so CLI output on stdout stays parseable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger().setLevel(numeric_level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Module logger; events are snake_case names with keyword fields.

    Example:
        logger = get_logger(__name__)
        logger.warning("field_unmapped", field="nickname")
    """
    return structlog.get_logger(name)


def record_context(record_id: str) -> ContextManager[Any]:
    """Bind ``record_id`` to every entry logged inside the block.

    Tasks started inside the block (section dispatches, uploads) inherit
    the binding.

    Example:
        with record_context("42"):
            logger.info("uploads_started", count=2)
    """
    return structlog.contextvars.bound_contextvars(record_id=record_id)


# JSON to stderr at INFO until the CLI applies the configured settings
setup_logging()
