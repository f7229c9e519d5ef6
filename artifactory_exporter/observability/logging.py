"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


LOG_FORMATS = ("logfmt", "json", "console")


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    fmt: str = "logfmt",
) -> None:
    """Configure structured logging for the exporter.

    Sets up structlog with timestamps, log levels and context binding,
    rendered as logfmt (default), JSON or colored console output.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr).
        fmt: One of `logfmt`, `json` or `console`.

    Raises:
        ValueError: If `fmt` is not a supported format.
    """
    if fmt not in LOG_FORMATS:
        msg = f"Unsupported log format '{fmt}' (expected one of {LOG_FORMATS})"
        raise ValueError(msg)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    elif fmt == "logfmt":
        processors.append(structlog.processors.LogfmtRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    # Route standard library logging (httpx, httpcore) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance.

    Args:
        name: Optional logger name.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
