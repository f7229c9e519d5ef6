"""Shared fixtures for the test suite."""

from collections.abc import Generator

import pytest

from artifactory_exporter.fetch.metrics import FetchMetrics


@pytest.fixture(autouse=True)
def reset_fetch_metrics() -> Generator[None]:
    """Start every test with fresh fetch metrics."""
    FetchMetrics.reset()
    yield
    FetchMetrics.reset()
