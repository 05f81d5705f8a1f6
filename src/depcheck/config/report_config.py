"""
Report configuration for depcheck.

Provides configuration for locating the report, choosing the scoring
preference and mapping CVSS scores onto issue severities.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from depcheck.models.scoring import IssueSeverity


@dataclass
class SeverityThresholds:
    """
    Minimum CVSS scores per issue severity.

    A threshold of zero disables that severity level.
    """

    blocker: float = 0.0
    critical: float = 7.0
    major: float = 4.0

    def classify(self, score: float) -> IssueSeverity:
        """Map a CVSS score onto an issue severity."""
        return IssueSeverity.from_score(score, self.blocker, self.critical, self.major)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "blocker": self.blocker,
            "critical": self.critical,
            "major": self.major,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SeverityThresholds:
        """Create from dictionary."""
        return cls(
            blocker=float(data.get("blocker", 0.0)),
            critical=float(data.get("critical", 7.0)),
            major=float(data.get("major", 4.0)),
        )


@dataclass
class LoggingConfig:
    """Logging output settings."""

    level: str = "INFO"
    format: str = "human"  # human, json

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"level": self.level, "format": self.format}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoggingConfig:
        """Create from dictionary."""
        return cls(
            level=data.get("level", "INFO"),
            format=data.get("format", "human"),
        )


@dataclass
class ReportConfiguration:
    """
    Complete report configuration.

    report_path may be a local path or an s3://bucket/key URL.
    """

    report_path: str = "dependency-check-report.xml"
    prefer_cvss3: bool = True
    s3_region: str = "us-east-1"
    severity: SeverityThresholds = field(default_factory=SeverityThresholds)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "report_path": self.report_path,
            "prefer_cvss3": self.prefer_cvss3,
            "s3_region": self.s3_region,
            "severity": self.severity.to_dict(),
            "logging": self.logging.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportConfiguration:
        """Create from dictionary."""
        return cls(
            report_path=data.get("report_path", "dependency-check-report.xml"),
            prefer_cvss3=bool(data.get("prefer_cvss3", True)),
            s3_region=data.get("s3_region", "us-east-1"),
            severity=SeverityThresholds.from_dict(data.get("severity") or {}),
            logging=LoggingConfig.from_dict(data.get("logging") or {}),
        )

    @classmethod
    def from_json(cls, json_str: str) -> ReportConfiguration:
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_file(cls, path: str) -> ReportConfiguration:
        """Load configuration from a JSON or YAML file."""
        path = os.path.expanduser(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) if path.endswith(".json") else yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        return cls.from_dict(data)

    def save(self, path: str) -> None:
        """Save configuration to a JSON or YAML file."""
        path = os.path.expanduser(path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.endswith(".json"):
                json.dump(self.to_dict(), f, indent=2)
            else:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env() -> ReportConfiguration:
    """
    Load configuration from environment variables.

    Environment variables:
        DEPCHECK_CONFIG_FILE: Path to configuration file, used as the base
        DEPCHECK_REPORT_PATH: Report location (path or s3://bucket/key)
        DEPCHECK_PREFER_CVSS2: Prefer CVSS v2 scores over CVSS v3
        DEPCHECK_S3_REGION: AWS region for S3 report locations
        DEPCHECK_SEVERITY_BLOCKER: Minimum score for blocker issues
        DEPCHECK_SEVERITY_CRITICAL: Minimum score for critical issues
        DEPCHECK_SEVERITY_MAJOR: Minimum score for major issues
        DEPCHECK_LOG_LEVEL: Log level
        DEPCHECK_LOG_FORMAT: Log format (human, json)

    Returns:
        ReportConfiguration instance
    """
    config_file = os.getenv("DEPCHECK_CONFIG_FILE")
    if config_file and os.path.exists(config_file):
        config = ReportConfiguration.from_file(config_file)
    else:
        config = ReportConfiguration()

    report_path = os.getenv("DEPCHECK_REPORT_PATH")
    if report_path:
        config.report_path = report_path

    prefer_cvss2 = os.getenv("DEPCHECK_PREFER_CVSS2")
    if prefer_cvss2:
        config.prefer_cvss3 = not _env_flag(prefer_cvss2)

    config.s3_region = os.getenv("DEPCHECK_S3_REGION", config.s3_region)

    for level in ("blocker", "critical", "major"):
        value = os.getenv(f"DEPCHECK_SEVERITY_{level.upper()}")
        if value:
            try:
                setattr(config.severity, level, float(value))
            except ValueError:
                raise ValueError(
                    f"DEPCHECK_SEVERITY_{level.upper()} must be a number, got {value!r}"
                ) from None

    config.logging.level = os.getenv("DEPCHECK_LOG_LEVEL", config.logging.level)
    config.logging.format = os.getenv("DEPCHECK_LOG_FORMAT", config.logging.format)

    return config


def create_default_config() -> ReportConfiguration:
    """
    Create a default report configuration.

    Returns:
        ReportConfiguration with the stock Dependency-Check report name
        and severity thresholds
    """
    return ReportConfiguration(
        report_path="dependency-check-report.xml",
        prefer_cvss3=True,
        severity=SeverityThresholds(blocker=0.0, critical=7.0, major=4.0),
        logging=LoggingConfig(level="INFO", format="human"),
    )
