"""
CVSS scoring model for Dependency-Check vulnerabilities.

Dependency-Check reports carry up to two independent scoring blocks per
vulnerability: CVSS v2 (older engines only emit this one) and CVSS v3.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class CvssV2:
    """CVSS v2 scoring block."""

    score: float
    severity: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"score": self.score, "severity": self.severity}


@dataclass(frozen=True)
class CvssV3:
    """CVSS v3 scoring block."""

    base_score: float
    base_severity: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"base_score": self.base_score, "base_severity": self.base_severity}


class ScoreAvailability(Enum):
    """Which scoring blocks a vulnerability carries."""

    V2_ONLY = "v2_only"
    V3_ONLY = "v3_only"
    BOTH = "both"
    NEITHER = "neither"

    @classmethod
    def of(cls, cvss_v2: CvssV2 | None, cvss_v3: CvssV3 | None) -> ScoreAvailability:
        """Classify a pair of optional scoring blocks."""
        if cvss_v2 is not None and cvss_v3 is not None:
            return cls.BOTH
        if cvss_v3 is not None:
            return cls.V3_ONLY
        if cvss_v2 is not None:
            return cls.V2_ONLY
        return cls.NEITHER


class IssueSeverity(Enum):
    """Severity assigned to a vulnerability from its score and thresholds."""

    BLOCKER = "blocker"
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

    @classmethod
    def from_score(
        cls,
        score: float,
        blocker: float,
        critical: float,
        major: float,
    ) -> IssueSeverity:
        """
        Map a CVSS score onto an issue severity.

        A threshold of zero or less disables that level.

        Args:
            score: Effective CVSS score
            blocker: Minimum score for BLOCKER
            critical: Minimum score for CRITICAL
            major: Minimum score for MAJOR

        Returns:
            Matching IssueSeverity, MINOR if no threshold is reached
        """
        if blocker > 0 and score >= blocker:
            return cls.BLOCKER
        if critical > 0 and score >= critical:
            return cls.CRITICAL
        if major > 0 and score >= major:
            return cls.MAJOR
        return cls.MINOR
