"""Shared telemetry: logging setup and tracing helpers."""

from recordcache.shared.telemetry.logging import get_logger, setup_logging
from recordcache.shared.telemetry.tracing import (
    add_span_attributes,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "traced",
    "add_span_attributes",
]
