"""Unit tests for structured logging configuration."""

import io
import json
from collections.abc import Generator

import pytest
import structlog

from artifactory_exporter.observability import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_format(self) -> None:
        """Test JSON output carries event, level and context."""
        output = io.StringIO()
        configure_logging(output=output, fmt="json")

        get_logger("test").info("fetch_complete", endpoint="system/ping", status_code=200)

        record = json.loads(output.getvalue().strip().splitlines()[-1])
        assert record["event"] == "fetch_complete"
        assert record["level"] == "info"
        assert record["endpoint"] == "system/ping"
        assert record["status_code"] == 200
        assert "timestamp" in record

    def test_logfmt_format(self) -> None:
        """Test logfmt output renders key=value pairs."""
        output = io.StringIO()
        configure_logging(output=output, fmt="logfmt")

        get_logger("test").warning("fetch_failed", error_class="TRANSPORT")

        line = output.getvalue().strip().splitlines()[-1]
        assert "event=fetch_failed" in line
        assert "error_class=TRANSPORT" in line
        assert "level=warning" in line

    def test_level_filtering(self) -> None:
        """Test messages below the level are dropped."""
        output = io.StringIO()
        configure_logging(level=30, output=output, fmt="json")

        get_logger("test").debug("cache_hit")

        assert output.getvalue() == ""

    def test_rejects_unknown_format(self) -> None:
        """Test unsupported formats raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported log format"):
            configure_logging(fmt="xml")
