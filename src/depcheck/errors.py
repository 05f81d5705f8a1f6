"""
Exceptions raised while loading and decoding Dependency-Check reports.

Parse failures (bad data shape vs. not XML at all) and resource failures
(report absent vs. report unreadable) are separate branches so callers
can skip silently on a missing report and fail loudly on everything else.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base error for report handling."""
    pass


# =============================================================================
# Parse errors
# =============================================================================

class ReportParseError(ReportError):
    """The report could not be decoded into an Analysis."""
    pass


class ReportStructureError(ReportParseError):
    """
    A required field is missing or holds an invalid value.

    Attributes:
        node: Node type the field belongs to (e.g. "Dependency")
        field: Name of the offending field (e.g. "fileName")
    """

    def __init__(self, node: str, field: str, message: str | None = None):
        self.node = node
        self.field = field
        super().__init__(message or f"{node} - {field} not found")


class MalformedReportError(ReportParseError):
    """The report is not well-formed XML or uses forbidden XML features."""
    pass


# =============================================================================
# Resource errors
# =============================================================================

class ReportResourceError(ReportError):
    """The report could not be opened."""

    def __init__(self, location: str, message: str | None = None):
        self.location = location
        super().__init__(message or f"Cannot open report: {location}")


class ReportNotFoundError(ReportResourceError):
    """The configured report does not exist."""

    def __init__(self, location: str):
        super().__init__(location, f"Report not found: {location}")


class ReportUnreadableError(ReportResourceError):
    """The report exists but cannot be read."""
    pass


# =============================================================================
# Scoring errors
# =============================================================================

class NoScoreAvailableError(ReportError):
    """A vulnerability carries neither a CVSS v2 nor a CVSS v3 block."""

    def __init__(self, vulnerability_name: str):
        self.vulnerability_name = vulnerability_name
        super().__init__(f"No CVSS score available for {vulnerability_name}")
