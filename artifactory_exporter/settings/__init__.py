"""Exporter settings loading."""

from .app import AuthMethod, Credentials, ExporterSettings, OptionalMetrics, get_settings


__all__ = [
    "AuthMethod",
    "Credentials",
    "ExporterSettings",
    "OptionalMetrics",
    "get_settings",
]
