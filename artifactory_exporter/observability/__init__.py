"""Observability module for logging."""

from artifactory_exporter.observability.logging import (
    LOG_FORMATS,
    configure_logging,
    get_logger,
)


__all__ = [
    "LOG_FORMATS",
    "configure_logging",
    "get_logger",
]
