"""
Configuration management for depcheck.

Provides configuration classes and utilities for locating reports,
scoring preferences and severity thresholds.
"""

from depcheck.config.report_config import (
    LoggingConfig,
    ReportConfiguration,
    SeverityThresholds,
    create_default_config,
    load_config_from_env,
)

__all__ = [
    "LoggingConfig",
    "ReportConfiguration",
    "SeverityThresholds",
    "create_default_config",
    "load_config_from_env",
]
