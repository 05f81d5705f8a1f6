"""
Report loading for depcheck.

This package resolves a configured report location to a byte stream and
hands it to the decoder:

- LocalReportSource: report on the local filesystem
- S3ReportSource: report stored as an S3 object (s3://bucket/key)

Use get_report_source() to pick the source for a location, and
load_report() / load_report_if_present() to open and parse in one step.
"""

from __future__ import annotations

import time
from pathlib import Path

from botocore.exceptions import BotoCoreError

from depcheck.errors import ReportNotFoundError, ReportParseError, ReportUnreadableError
from depcheck.loader.base import ReportSource
from depcheck.loader.local import LocalReportSource
from depcheck.loader.s3 import S3ReportSource
from depcheck.models import Analysis
from depcheck.observability.logging import get_logger
from depcheck.parser import parse_report

_log = get_logger("loader")


def get_report_source(location: str | Path, region: str = "us-east-1") -> ReportSource:
    """
    Get the report source for a location.

    Args:
        location: Local path or s3://bucket/key URL
        region: AWS region used for S3 locations

    Returns:
        ReportSource for the location
    """
    if isinstance(location, str) and location.startswith("s3://"):
        return S3ReportSource.from_url(location, region=region)
    return LocalReportSource(location)


def load_report(location: str | Path | ReportSource, region: str = "us-east-1") -> Analysis:
    """
    Open and parse a report.

    The stream is closed when this returns, whether parsing succeeded
    or not.

    Args:
        location: Local path, s3://bucket/key URL or a ReportSource
        region: AWS region used for S3 locations

    Returns:
        Decoded Analysis

    Raises:
        ReportNotFoundError: If the report does not exist
        ReportUnreadableError: If the report cannot be read
        ReportParseError: If the report cannot be decoded
    """
    source = location if isinstance(location, ReportSource) else get_report_source(location, region)

    _log.parse_started(source.location)
    start = time.perf_counter()
    try:
        with source.open() as stream:
            try:
                analysis = parse_report(stream)
            except (OSError, BotoCoreError) as e:
                raise ReportUnreadableError(
                    source.location, f"Failed reading report {source.location}: {e}"
                ) from e
    except ReportParseError as e:
        _log.parse_failed(source.location, str(e))
        raise

    _log.parse_completed(
        source.location,
        dependency_count=len(analysis.dependencies),
        vulnerability_count=analysis.vulnerability_count,
        duration_seconds=time.perf_counter() - start,
    )
    return analysis


def load_report_if_present(
    location: str | Path | ReportSource,
    region: str = "us-east-1",
) -> Analysis | None:
    """
    Open and parse a report, returning None if it does not exist.

    Every other failure propagates.
    """
    try:
        return load_report(location, region=region)
    except ReportNotFoundError as e:
        _log.report_missing(e.location)
        return None


__all__ = [
    "ReportSource",
    "LocalReportSource",
    "S3ReportSource",
    "get_report_source",
    "load_report",
    "load_report_if_present",
]
