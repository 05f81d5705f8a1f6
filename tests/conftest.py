"""
Pytest configuration and fixtures for depcheck tests.

This module provides sample reports and report builders used across unit
and integration tests.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable

import pytest

from depcheck.models import (
    Confidence,
    CvssV2,
    CvssV3,
    Dependency,
    Evidence,
    EvidenceType,
    Identifier,
    IdentifierType,
    Vulnerability,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

REPORT_NAMESPACE = "https://jeremylong.github.io/DependencyCheck/dependency-check.2.2.xsd"

DEFAULT_SCAN_INFO = "<scanInfo><engineVersion>5.0.0</engineVersion></scanInfo>"
DEFAULT_PROJECT_INFO = (
    "<projectInfo>"
    "<name>Example</name>"
    "<reportDate>2019-04-17T18:25:00.460+0200</reportDate>"
    "</projectInfo>"
)

STRUTS_DEPENDENCY = """
<dependency>
    <fileName>struts-1.2.8.jar</fileName>
    <filePath>/to/path/struts/struts/1.2.8/struts-1.2.8.jar</filePath>
    <md5>8af31c3a406cfbfd991a6946102d583a</md5>
    <sha1>5919caff42c3f42fb251fd82a58af4a7880826dd</sha1>
    <vulnerabilities>
        <vulnerability source="NVD">
            <name>CVE-2006-1546</name>
            <cvssV2>
                <score>7.5</score>
                <severity>High</severity>
            </cvssV2>
            <description>Apache Software Foundation (ASF) Struts ...</description>
        </vulnerability>
    </vulnerabilities>
</dependency>
"""


def build_report(
    dependencies: str | None = "",
    scan_info: str | None = DEFAULT_SCAN_INFO,
    project_info: str | None = DEFAULT_PROJECT_INFO,
    namespace: str | None = REPORT_NAMESPACE,
) -> bytes:
    """
    Assemble a report document from fragments.

    Passing None for a section leaves it out entirely.
    """
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    parts = ['<?xml version="1.0"?>', f"<analysis{xmlns}>"]
    if scan_info is not None:
        parts.append(scan_info)
    if project_info is not None:
        parts.append(project_info)
    if dependencies is not None:
        parts.append(f"<dependencies>{dependencies}</dependencies>")
    parts.append("</analysis>")
    return "\n".join(parts).encode("utf-8")


@pytest.fixture
def reset_logging():
    """Restore the depcheck logger after a test reconfigures it."""
    logger = logging.getLogger("depcheck")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


# Report document fixtures


@pytest.fixture
def report_builder() -> Callable[..., bytes]:
    """Return the report document builder."""
    return build_report


@pytest.fixture
def report_stream() -> Callable[..., io.BytesIO]:
    """Return a builder producing report documents as binary streams."""

    def _stream(*args, **kwargs) -> io.BytesIO:
        return io.BytesIO(build_report(*args, **kwargs))

    return _stream


@pytest.fixture
def struts_report() -> bytes:
    """Return a report with the single struts dependency."""
    return build_report(STRUTS_DEPENDENCY)


@pytest.fixture
def sample_report_path() -> Path:
    """Return the path of the bundled multi-dependency sample report."""
    return FIXTURES_DIR / "dependency-check-report.xml"


@pytest.fixture
def report_file(tmp_path, struts_report) -> Path:
    """Write the struts report to a temporary file and return its path."""
    path = tmp_path / "dependency-check-report.xml"
    path.write_bytes(struts_report)
    return path


# Model fixtures


@pytest.fixture
def sample_vulnerability() -> Vulnerability:
    """Return a vulnerability carrying both scoring blocks."""
    return Vulnerability(
        name="CVE-2016-1181",
        source="NVD",
        description="ActionServlet.java in Apache Struts 1 mishandles multithreaded access.",
        severity="HIGH",
        cwes=("CWE-362",),
        cvss_v2=CvssV2(score=6.8, severity="MEDIUM"),
        cvss_v3=CvssV3(base_score=8.1, base_severity="HIGH"),
    )


@pytest.fixture
def sample_dependency(sample_vulnerability) -> Dependency:
    """Return a dependency with evidence, identifiers and vulnerabilities."""
    return Dependency(
        file_name="struts-1.2.8.jar",
        file_path="/to/path/struts/struts/1.2.8/struts-1.2.8.jar",
        md5="8af31c3a406cfbfd991a6946102d583a",
        sha1="5919caff42c3f42fb251fd82a58af4a7880826dd",
        evidence_collected={
            EvidenceType.VENDOR: (
                Evidence("file", "name", "struts", EvidenceType.VENDOR, Confidence.HIGH),
            ),
            EvidenceType.PRODUCT: (
                Evidence("file", "name", "struts", EvidenceType.PRODUCT, Confidence.HIGH),
                Evidence("pom", "artifactid", "struts", EvidenceType.PRODUCT, Confidence.HIGHEST),
            ),
        },
        vulnerabilities=(
            Vulnerability(
                name="CVE-2006-1546",
                source="NVD",
                description="Apache Software Foundation (ASF) Struts ...",
                cvss_v2=CvssV2(score=7.5, severity="High"),
            ),
            sample_vulnerability,
        ),
        identifiers={
            IdentifierType.PACKAGE: (
                Identifier("pkg:maven/struts/struts@1.2.8", Confidence.HIGH),
            ),
        },
    )
