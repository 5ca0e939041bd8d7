"""Logging setup and processing-time profiling."""

from __future__ import annotations

from qualify_engine.telemetry.log_format import JSONFormatter, configure_logging
from qualify_engine.telemetry.profiling import (
    ProfileCollector,
    ProfileStats,
    get_collector,
    profile_operation,
)

__all__ = [
    "JSONFormatter",
    "ProfileCollector",
    "ProfileStats",
    "configure_logging",
    "get_collector",
    "profile_operation",
]
