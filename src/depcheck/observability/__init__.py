"""
Observability for depcheck.

Provides logging configuration and report lifecycle event logging.
"""

from __future__ import annotations

from depcheck.observability.logging import (
    HumanReadableFormatter,
    ReportLogger,
    StructuredFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "HumanReadableFormatter",
    "ReportLogger",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
]
