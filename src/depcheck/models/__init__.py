"""
Data models for decoded Dependency-Check reports.

This package contains the core data models used throughout depcheck:
- Analysis, Dependency, Vulnerability and their children
- CVSS scoring blocks and severity mapping
"""

from __future__ import annotations

from depcheck.models.analysis import (
    Analysis,
    Confidence,
    Dependency,
    Evidence,
    EvidenceType,
    Identifier,
    IdentifierType,
    ProjectInfo,
    ScanInfo,
    Vulnerability,
)
from depcheck.models.scoring import (
    CvssV2,
    CvssV3,
    IssueSeverity,
    ScoreAvailability,
)

__all__ = [
    # Analysis
    "Analysis",
    "Confidence",
    "Dependency",
    "Evidence",
    "EvidenceType",
    "Identifier",
    "IdentifierType",
    "ProjectInfo",
    "ScanInfo",
    "Vulnerability",
    # Scoring
    "CvssV2",
    "CvssV3",
    "IssueSeverity",
    "ScoreAvailability",
]
