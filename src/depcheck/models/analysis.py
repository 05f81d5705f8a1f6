"""
Domain model for decoded Dependency-Check reports.

An Analysis is the root value for one report. It owns the scan metadata,
optional project metadata and the dependencies in document order; each
Dependency owns its evidence, identifiers and vulnerabilities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from depcheck.errors import NoScoreAvailableError
from depcheck.models.scoring import CvssV2, CvssV3, ScoreAvailability


class Confidence(Enum):
    """Certainty rating attached to evidence and identifiers."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    HIGHEST = "HIGHEST"

    @classmethod
    def from_string(cls, value: str) -> Confidence:
        """
        Create Confidence from its report value.

        Matching is case-sensitive, the report always writes the enum name.

        Raises:
            ValueError: If value is not a known confidence level
        """
        try:
            return cls[value]
        except KeyError:
            raise ValueError(f"Invalid confidence: {value}") from None


class EvidenceType(Enum):
    """Category of a piece of evidence."""

    VENDOR = "vendor"
    PRODUCT = "product"
    VERSION = "version"

    @property
    def group_key(self) -> str:
        """Key used for this category in the report's evidence listing."""
        return f"{self.value}Evidence"


class IdentifierType(Enum):
    """Identifier group, named after the element that carries it."""

    PACKAGE = "package"
    VULNERABILITY_IDS = "vulnerabilityIds"
    SUPPRESSED_VULNERABILITY_IDS = "suppressedVulnerabilityIds"


@dataclass(frozen=True)
class Evidence:
    """A single observed fact used to identify a dependency."""

    source: str
    name: str
    value: str
    type: EvidenceType
    confidence: Confidence

    @property
    def group_key(self) -> str:
        return self.type.group_key

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "name": self.name,
            "value": self.value,
            "type": self.type.value,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class Identifier:
    """Package coordinate or vulnerability reference of a dependency."""

    id: str
    confidence: Confidence | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "confidence": self.confidence.value if self.confidence else None,
            "url": self.url,
        }


@dataclass(frozen=True)
class Vulnerability:
    """A vulnerability reported against a dependency."""

    name: str
    source: str
    description: str
    severity: str | None = None  # Label as written in the report
    cwes: tuple[str, ...] | None = None
    cvss_v2: CvssV2 | None = None
    cvss_v3: CvssV3 | None = None

    @property
    def score_availability(self) -> ScoreAvailability:
        return ScoreAvailability.of(self.cvss_v2, self.cvss_v3)

    @property
    def has_score(self) -> bool:
        """Whether either scoring block is present."""
        return self.score_availability is not ScoreAvailability.NEITHER

    def cvss_score(self, prefer_v3: bool = True) -> float:
        """
        Get the effective CVSS score.

        The preferred standard is used when present, otherwise the other
        one. Some sources only populate one standard, so the fallback
        applies in both directions.

        Args:
            prefer_v3: Prefer CVSS v3 over CVSS v2

        Returns:
            Effective score

        Raises:
            NoScoreAvailableError: If neither scoring block is present
        """
        v2 = self.cvss_v2.score if self.cvss_v2 else None
        v3 = self.cvss_v3.base_score if self.cvss_v3 else None
        preferred, fallback = (v3, v2) if prefer_v3 else (v2, v3)
        if preferred is not None:
            return preferred
        if fallback is not None:
            return fallback
        raise NoScoreAvailableError(self.name)

    def effective_severity(self, prefer_v3: bool = True) -> str | None:
        """
        Get the severity label matching cvss_score().

        Falls back to the report's own severity label when no scoring
        block is present.
        """
        v2 = self.cvss_v2.severity if self.cvss_v2 else None
        v3 = self.cvss_v3.base_severity if self.cvss_v3 else None
        preferred, fallback = (v3, v2) if prefer_v3 else (v2, v3)
        return preferred or fallback or self.severity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "source": self.source,
            "description": self.description,
            "severity": self.severity,
            "cwes": list(self.cwes) if self.cwes is not None else None,
            "cvss_v2": self.cvss_v2.to_dict() if self.cvss_v2 else None,
            "cvss_v3": self.cvss_v3.to_dict() if self.cvss_v3 else None,
        }


@dataclass(frozen=True)
class Dependency:
    """A scanned artifact and everything discovered about it."""

    file_name: str
    file_path: str
    md5: str
    sha1: str

    evidence_collected: dict[EvidenceType, tuple[Evidence, ...]] = field(default_factory=dict)
    vulnerabilities: tuple[Vulnerability, ...] = ()
    identifiers: dict[IdentifierType, tuple[Identifier, ...]] = field(default_factory=dict)

    sha256: str | None = None
    is_virtual: bool = False

    @property
    def packages(self) -> tuple[Identifier, ...]:
        """Package coordinate identifiers."""
        return self.identifiers.get(IdentifierType.PACKAGE, ())

    @property
    def vulnerability_ids(self) -> tuple[Identifier, ...]:
        """Detected vulnerability id identifiers (CPEs)."""
        return self.identifiers.get(IdentifierType.VULNERABILITY_IDS, ())

    @property
    def suppressed_vulnerability_ids(self) -> tuple[Identifier, ...]:
        """Vulnerability id identifiers suppressed by the scanner."""
        return self.identifiers.get(IdentifierType.SUPPRESSED_VULNERABILITY_IDS, ())

    @property
    def evidence_count(self) -> int:
        """Total number of evidence entries across all categories."""
        return sum(len(group) for group in self.evidence_collected.values())

    @property
    def is_vulnerable(self) -> bool:
        return bool(self.vulnerabilities)

    def get_evidence(self, evidence_type: EvidenceType) -> tuple[Evidence, ...]:
        """Get evidence of one category in document order."""
        return self.evidence_collected.get(evidence_type, ())

    def evidence_by_key(self) -> dict[str, tuple[Evidence, ...]]:
        """Evidence keyed by "<category>Evidence", as the report groups it."""
        return {etype.group_key: group for etype, group in self.evidence_collected.items()}

    def sorted_vulnerabilities(self, prefer_v3: bool = True) -> tuple[Vulnerability, ...]:
        """
        Get vulnerabilities ordered by descending effective score.

        The sort is stable; vulnerabilities without any score keep their
        relative order after all scored ones.

        Args:
            prefer_v3: Scoring preference passed to Vulnerability.cvss_score

        Returns:
            New tuple, the dependency itself is not modified
        """
        scored = [v for v in self.vulnerabilities if v.has_score]
        unscored = [v for v in self.vulnerabilities if not v.has_score]
        scored.sort(key=lambda v: v.cvss_score(prefer_v3), reverse=True)
        return tuple(scored + unscored)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "file_name": self.file_name,
            "file_path": self.file_path,
            "md5": self.md5,
            "sha1": self.sha1,
            "sha256": self.sha256,
            "is_virtual": self.is_virtual,
            "evidence_collected": {
                key: [e.to_dict() for e in group]
                for key, group in self.evidence_by_key().items()
            },
            "identifiers": {
                itype.value: [i.to_dict() for i in group]
                for itype, group in self.identifiers.items()
            },
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
        }


@dataclass(frozen=True)
class ScanInfo:
    """Scanner metadata."""

    engine_version: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"engine_version": self.engine_version}


@dataclass(frozen=True)
class ProjectInfo:
    """Metadata about the scanned project."""

    name: str
    report_date: str  # Kept as written, not parsed
    credits: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "report_date": self.report_date,
            "credits": self.credits,
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "version": self.version,
        }


@dataclass(frozen=True)
class Analysis:
    """Root value decoded from one report."""

    scan_info: ScanInfo
    project_info: ProjectInfo | None = None
    dependencies: tuple[Dependency, ...] = ()

    @property
    def vulnerable_dependencies(self) -> tuple[Dependency, ...]:
        """Dependencies with at least one vulnerability."""
        return tuple(d for d in self.dependencies if d.is_vulnerable)

    @property
    def vulnerability_count(self) -> int:
        """Total vulnerabilities across all dependencies."""
        return sum(len(d.vulnerabilities) for d in self.dependencies)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "scan_info": self.scan_info.to_dict(),
            "project_info": self.project_info.to_dict() if self.project_info else None,
            "total_dependencies": len(self.dependencies),
            "vulnerable_dependencies": len(self.vulnerable_dependencies),
            "total_vulnerabilities": self.vulnerability_count,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }
