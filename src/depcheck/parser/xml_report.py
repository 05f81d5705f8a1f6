"""
Streaming decoder for Dependency-Check XML reports.

Walks the report once, front to back, and builds the Analysis model
bottom-up as each element closes. Every node collects its fields into a
builder of optional slots; the builder validates all required slots in a
single build() step once the node's subtree has been consumed, so one
malformed node yields exactly one error and aborts the whole parse.

Handles report formats emitted by Dependency-Check 4.x and 5.x. Elements
the decoder does not know about are skipped, which lets newer optional
report fields pass through without a version-specific code path.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import IO, Any
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException

from depcheck.errors import MalformedReportError, ReportStructureError
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
    ProjectInfo,
    ScanInfo,
    Vulnerability,
)
from depcheck.parser.cursor import ElementCursor, local_name

logger = logging.getLogger(__name__)


def _require(node: str, **slots: Any) -> None:
    """Raise for the first required slot that was never filled."""
    for name, value in slots.items():
        if value is None:
            raise ReportStructureError(node, name)


def _parse_confidence(node: str, value: str | None) -> Confidence | None:
    if value is None:
        return None
    try:
        return Confidence.from_string(value)
    except ValueError as e:
        raise ReportStructureError(
            node, "confidence", f"{node} - invalid confidence {value!r}"
        ) from e


def _parse_evidence_type(value: str | None) -> EvidenceType | None:
    if value is None:
        return None
    try:
        return EvidenceType(value)
    except ValueError as e:
        raise ReportStructureError(
            "Evidence", "type", f"Evidence - invalid type {value!r}"
        ) from e


_SCORE_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _parse_score(node: str, text: str) -> float:
    """
    Parse a CVSS score, falling back to 0.0 for unparseable values.

    Only plain decimal or exponent notation is accepted; digit separators,
    nan and infinity are rejected.
    """
    if not _SCORE_PATTERN.fullmatch(text):
        logger.warning(f"Could not parse {node} score {text!r}, using 0.0")
        return 0.0
    return float(text)


# =============================================================================
# Builders
# =============================================================================

@dataclass
class _ScanInfoBuilder:
    engine_version: str | None = None

    def build(self) -> ScanInfo:
        _require("ScanInfo", engineVersion=self.engine_version)
        return ScanInfo(engine_version=self.engine_version)


@dataclass
class _ProjectInfoBuilder:
    name: str | None = None
    report_date: str | None = None
    credits: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None

    def build(self) -> ProjectInfo:
        _require("ProjectInfo", name=self.name, reportDate=self.report_date)
        return ProjectInfo(
            name=self.name,
            report_date=self.report_date,
            credits=self.credits,
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.version,
        )


@dataclass
class _EvidenceBuilder:
    type: EvidenceType | None = None
    confidence: Confidence | None = None
    source: str | None = None
    name: str | None = None
    value: str | None = None

    def build(self) -> Evidence:
        _require(
            "Evidence",
            source=self.source,
            name=self.name,
            value=self.value,
            type=self.type,
            confidence=self.confidence,
        )
        return Evidence(
            source=self.source,
            name=self.name,
            value=self.value,
            type=self.type,
            confidence=self.confidence,
        )


@dataclass
class _IdentifierBuilder:
    id: str | None = None
    confidence: Confidence | None = None
    url: str | None = None

    def build(self) -> Identifier:
        _require("Identifier", id=self.id)
        return Identifier(id=self.id, confidence=self.confidence, url=self.url)


@dataclass
class _CvssV2Builder:
    score: float | None = None
    severity: str | None = None

    def build(self) -> CvssV2:
        _require("CvssV2", score=self.score, severity=self.severity)
        return CvssV2(score=self.score, severity=self.severity)


@dataclass
class _CvssV3Builder:
    base_score: float | None = None
    base_severity: str | None = None

    def build(self) -> CvssV3:
        _require("CvssV3", baseScore=self.base_score, baseSeverity=self.base_severity)
        return CvssV3(base_score=self.base_score, base_severity=self.base_severity)


@dataclass
class _VulnerabilityBuilder:
    name: str | None = None
    source: str | None = None
    description: str | None = None
    severity: str | None = None
    cwes: list[str] | None = None
    cvss_v2: CvssV2 | None = None
    cvss_v3: CvssV3 | None = None

    def build(self) -> Vulnerability:
        _require(
            "Vulnerability",
            name=self.name,
            source=self.source,
            description=self.description,
        )
        return Vulnerability(
            name=self.name,
            source=self.source,
            description=self.description,
            severity=self.severity,
            cwes=tuple(dict.fromkeys(self.cwes)) if self.cwes is not None else None,
            cvss_v2=self.cvss_v2,
            cvss_v3=self.cvss_v3,
        )


@dataclass
class _DependencyBuilder:
    file_name: str | None = None
    file_path: str | None = None
    md5: str | None = None
    sha1: str | None = None
    sha256: str | None = None
    is_virtual: bool = False
    evidence: dict[EvidenceType, list[Evidence]] = field(default_factory=dict)
    vulnerabilities: list[Vulnerability] = field(default_factory=list)
    identifiers: dict[IdentifierType, list[Identifier]] = field(default_factory=dict)

    def build(self) -> Dependency:
        _require(
            "Dependency",
            fileName=self.file_name,
            filePath=self.file_path,
            md5=self.md5,
            sha1=self.sha1,
        )
        return Dependency(
            file_name=self.file_name,
            file_path=self.file_path,
            md5=self.md5,
            sha1=self.sha1,
            sha256=self.sha256,
            is_virtual=self.is_virtual,
            evidence_collected={k: tuple(v) for k, v in self.evidence.items()},
            vulnerabilities=tuple(self.vulnerabilities),
            identifiers={k: tuple(v) for k, v in self.identifiers.items()},
        )


@dataclass
class _AnalysisBuilder:
    scan_info: ScanInfo | None = None
    project_info: ProjectInfo | None = None
    dependencies: list[Dependency] = field(default_factory=list)

    def build(self) -> Analysis:
        _require("Analysis", scanInfo=self.scan_info)
        return Analysis(
            scan_info=self.scan_info,
            project_info=self.project_info,
            dependencies=tuple(self.dependencies),
        )


# =============================================================================
# Decoder
# =============================================================================

class _ReportWalker:
    """Single-use walker holding the cursor for one parse call."""

    # Element name to builder attribute for plain text fields
    PROJECT_INFO_FIELDS = {
        "name": "name",
        "reportDate": "report_date",
        "credits": "credits",
        "groupID": "group_id",
        "artifactID": "artifact_id",
        "version": "version",
    }
    DEPENDENCY_FIELDS = {
        "fileName": "file_name",
        "filePath": "file_path",
        "md5": "md5",
        "sha1": "sha1",
        "sha256": "sha256",
    }

    def __init__(self, cursor: ElementCursor):
        self._cursor = cursor

    def walk(self) -> Analysis:
        cursor = self._cursor
        root = cursor.root()
        if local_name(root.tag) != "analysis":
            logger.debug(f"Unexpected root element {local_name(root.tag)}")

        builder = _AnalysisBuilder()
        for child in cursor.children(root):
            name = local_name(child.tag)
            if name == "scanInfo":
                builder.scan_info = self._scan_info(child)
            elif name == "projectInfo":
                builder.project_info = self._project_info(child)
            elif name == "dependencies":
                self._dependencies(child, builder.dependencies)
            else:
                logger.debug(f"Analysis node {name} is not used")
        cursor.finish()
        return builder.build()

    def _scan_info(self, elem: Element) -> ScanInfo:
        builder = _ScanInfoBuilder()
        for child in self._cursor.children(elem):
            name = local_name(child.tag)
            if name.lower() == "engineversion":
                builder.engine_version = self._cursor.text(child)
            else:
                logger.debug(f"ScanInfo node {name} is not used")
        return builder.build()

    def _project_info(self, elem: Element) -> ProjectInfo:
        builder = _ProjectInfoBuilder()
        for child in self._cursor.children(elem):
            name = local_name(child.tag)
            attr = self.PROJECT_INFO_FIELDS.get(name)
            if attr is not None:
                setattr(builder, attr, self._cursor.text(child))
            else:
                logger.debug(f"ProjectInfo node {name} is not used")
        return builder.build()

    def _dependencies(self, elem: Element, dependencies: list[Dependency]) -> None:
        for child in self._cursor.children(elem):
            if local_name(child.tag) == "dependency":
                dependencies.append(self._dependency(child))
            else:
                logger.debug(f"Dependencies node {local_name(child.tag)} is not used")

    def _dependency(self, elem: Element) -> Dependency:
        cursor = self._cursor
        builder = _DependencyBuilder()
        is_virtual = cursor.attributes(elem).get("isVirtual", "false")
        builder.is_virtual = is_virtual.strip().lower() == "true"

        for child in cursor.children(elem):
            name = local_name(child.tag)
            attr = self.DEPENDENCY_FIELDS.get(name)
            if attr is not None:
                setattr(builder, attr, cursor.text(child))
            elif name == "evidenceCollected":
                self._evidence_collected(child, builder.evidence)
            elif name == "vulnerabilities":
                self._vulnerabilities(child, builder.vulnerabilities)
            elif name == "identifiers":
                self._identifiers(child, builder.identifiers)
            else:
                logger.debug(f"Dependency node {name} is not used")
        return builder.build()

    def _evidence_collected(
        self,
        elem: Element,
        groups: dict[EvidenceType, list[Evidence]],
    ) -> None:
        for child in self._cursor.children(elem):
            if local_name(child.tag) != "evidence":
                logger.debug(f"EvidenceCollected node {local_name(child.tag)} is not used")
                continue
            evidence = self._evidence(child)
            groups.setdefault(evidence.type, []).append(evidence)

    def _evidence(self, elem: Element) -> Evidence:
        cursor = self._cursor
        builder = _EvidenceBuilder()
        attributes = cursor.attributes(elem)
        builder.type = _parse_evidence_type(attributes.get("type"))
        builder.confidence = _parse_confidence("Evidence", attributes.get("confidence"))

        for child in cursor.children(elem):
            name = local_name(child.tag)
            if name == "source":
                builder.source = cursor.text(child)
            elif name == "name":
                builder.name = cursor.text(child)
            elif name == "value":
                builder.value = cursor.text(child)
            else:
                logger.debug(f"Evidence node {name} is not used")
        return builder.build()

    def _identifiers(
        self,
        elem: Element,
        groups: dict[IdentifierType, list[Identifier]],
    ) -> None:
        for child in self._cursor.children(elem):
            name = local_name(child.tag)
            try:
                identifier_type = IdentifierType(name)
            except ValueError:
                logger.debug(f"Identifier type {name} is not used")
                continue
            groups.setdefault(identifier_type, []).append(self._identifier(child))

    def _identifier(self, elem: Element) -> Identifier:
        cursor = self._cursor
        builder = _IdentifierBuilder()
        builder.confidence = _parse_confidence(
            "Identifier", cursor.attributes(elem).get("confidence")
        )
        for child in cursor.children(elem):
            name = local_name(child.tag)
            if name == "id":
                builder.id = cursor.text(child)
            elif name == "url":
                builder.url = cursor.text(child)
            else:
                logger.debug(f"Identifier node {name} is not used")
        return builder.build()

    def _vulnerabilities(self, elem: Element, vulnerabilities: list[Vulnerability]) -> None:
        for child in self._cursor.children(elem):
            if local_name(child.tag) == "vulnerability":
                vulnerabilities.append(self._vulnerability(child))
            else:
                logger.debug(f"Vulnerabilities node {local_name(child.tag)} is not used")

    def _vulnerability(self, elem: Element) -> Vulnerability:
        cursor = self._cursor
        builder = _VulnerabilityBuilder()
        for key, value in cursor.attributes(elem).items():
            if key.lower() == "source":
                builder.source = value.strip()

        for child in cursor.children(elem):
            name = local_name(child.tag)
            if name == "name":
                builder.name = cursor.text(child)
            elif name == "description":
                builder.description = cursor.text(child)
            elif name == "severity":
                builder.severity = cursor.text(child)
            elif name == "cvssV2":
                builder.cvss_v2 = self._cvss_v2(child)
            elif name == "cvssV3":
                builder.cvss_v3 = self._cvss_v3(child)
            elif name == "cwes":
                builder.cwes = (builder.cwes or []) + self._cwes(child)
            elif name == "cwe":
                # 4.x reports write a single cwe without the wrapper
                builder.cwes = (builder.cwes or []) + [cursor.text(child)]
            else:
                logger.debug(f"Vulnerability node {name} is not used")
        return builder.build()

    def _cwes(self, elem: Element) -> list[str]:
        cwes = []
        for child in self._cursor.children(elem):
            if local_name(child.tag) == "cwe":
                cwes.append(self._cursor.text(child))
        return cwes

    def _cvss_v2(self, elem: Element) -> CvssV2:
        builder = _CvssV2Builder()
        for child in self._cursor.children(elem):
            name = local_name(child.tag)
            if name == "score":
                builder.score = _parse_score("CVSSv2", self._cursor.text(child))
            elif name == "severity":
                builder.severity = self._cursor.text(child)
            else:
                logger.debug(f"CvssV2 node {name} is not used")
        return builder.build()

    def _cvss_v3(self, elem: Element) -> CvssV3:
        builder = _CvssV3Builder()
        for child in self._cursor.children(elem):
            name = local_name(child.tag)
            if name == "baseScore":
                builder.base_score = _parse_score("CVSSv3", self._cursor.text(child))
            elif name == "baseSeverity":
                builder.base_severity = self._cursor.text(child)
            else:
                logger.debug(f"CvssV3 node {name} is not used")
        return builder.build()


class XMLReportParser:
    """
    Parser for Dependency-Check XML reports.

    Stateless; one instance can parse any number of reports, including
    concurrently from different threads.
    """

    def parse(self, stream: IO[bytes]) -> Analysis:
        """
        Parse a report.

        The stream is read once and is not closed; the caller owns it.

        Args:
            stream: Binary stream positioned at the start of the document

        Returns:
            Decoded Analysis

        Raises:
            ReportStructureError: If a required field is missing or invalid
            MalformedReportError: If the stream is not well-formed XML
        """
        try:
            return _ReportWalker(ElementCursor(stream)).walk()
        except (ParseError, DefusedXmlException) as e:
            raise MalformedReportError(f"Analysis aborted due to: XML is not valid ({e})") from e


def parse_report(stream: IO[bytes]) -> Analysis:
    """Parse a Dependency-Check XML report from a binary stream."""
    return XMLReportParser().parse(stream)
