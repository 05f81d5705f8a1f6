"""
depcheck - Streaming decoder for OWASP Dependency-Check XML reports

Turns a Dependency-Check report into an immutable, typed Analysis:
dependencies, their evidence and identifiers, and the vulnerabilities
found in them with CVSS v2 and v3 scores.

Key Features:
- Single forward pass: large reports never load as a whole tree
- Precise errors: a missing field names its node and field
- Document order preserved for dependencies and vulnerabilities
- Reports from local files or S3

Quick Start:
    >>> from depcheck import load_report
    >>>
    >>> analysis = load_report("target/dependency-check-report.xml")
    >>> for dependency in analysis.vulnerable_dependencies:
    ...     for vulnerability in dependency.sorted_vulnerabilities():
    ...         print(dependency.file_name, vulnerability.name, vulnerability.cvss_score())
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core models
from depcheck.models import (
    Analysis,
    Confidence,
    CvssV2,
    CvssV3,
    Dependency,
    Evidence,
    EvidenceType,
    Identifier,
    IdentifierType,
    IssueSeverity,
    ProjectInfo,
    ScanInfo,
    ScoreAvailability,
    Vulnerability,
)

# Errors
from depcheck.errors import (
    MalformedReportError,
    NoScoreAvailableError,
    ReportError,
    ReportNotFoundError,
    ReportParseError,
    ReportResourceError,
    ReportStructureError,
    ReportUnreadableError,
)

# Parsing and loading
from depcheck.parser import XMLReportParser, parse_report
from depcheck.loader import (
    LocalReportSource,
    ReportSource,
    S3ReportSource,
    get_report_source,
    load_report,
    load_report_if_present,
)

__all__ = [
    "__version__",
    # Models
    "Analysis",
    "Confidence",
    "CvssV2",
    "CvssV3",
    "Dependency",
    "Evidence",
    "EvidenceType",
    "Identifier",
    "IdentifierType",
    "IssueSeverity",
    "ProjectInfo",
    "ScanInfo",
    "ScoreAvailability",
    "Vulnerability",
    # Errors
    "MalformedReportError",
    "NoScoreAvailableError",
    "ReportError",
    "ReportNotFoundError",
    "ReportParseError",
    "ReportResourceError",
    "ReportStructureError",
    "ReportUnreadableError",
    # Parsing and loading
    "XMLReportParser",
    "parse_report",
    "LocalReportSource",
    "ReportSource",
    "S3ReportSource",
    "get_report_source",
    "load_report",
    "load_report_if_present",
]
