"""
Tests for the depcheck domain and scoring models.

Tests cover:
- CVSS scoring preference and fallback
- Severity classification from thresholds
- Vulnerability ordering
- Grouping accessors and dictionary conversion
"""

from __future__ import annotations

import dataclasses

import pytest

from depcheck.errors import NoScoreAvailableError
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


def _vulnerability(name: str, v2: float | None = None, v3: float | None = None) -> Vulnerability:
    return Vulnerability(
        name=name,
        source="NVD",
        description=f"{name} description",
        cvss_v2=CvssV2(score=v2, severity="V2") if v2 is not None else None,
        cvss_v3=CvssV3(base_score=v3, base_severity="V3") if v3 is not None else None,
    )


def _dependency(*vulnerabilities: Vulnerability) -> Dependency:
    return Dependency(
        file_name="lib.jar",
        file_path="/libs/lib.jar",
        md5="d41d8cd98f00b204e9800998ecf8427e",
        sha1="da39a3ee5e6b4b0d3255bfef95601890afd80709",
        vulnerabilities=vulnerabilities,
    )


class TestConfidence:
    """Tests for Confidence enum."""

    def test_confidence_values(self):
        """Test Confidence enum has expected values."""
        assert Confidence.LOW.value == "LOW"
        assert Confidence.MEDIUM.value == "MEDIUM"
        assert Confidence.HIGH.value == "HIGH"
        assert Confidence.HIGHEST.value == "HIGHEST"

    def test_from_string(self):
        """Test creating Confidence from its report value."""
        assert Confidence.from_string("HIGHEST") == Confidence.HIGHEST

    def test_from_string_is_case_sensitive(self):
        """Test lowercase values are rejected."""
        with pytest.raises(ValueError, match="Invalid confidence"):
            Confidence.from_string("high")


class TestEvidenceType:
    """Tests for EvidenceType enum."""

    def test_group_keys(self):
        """Test grouping keys follow the report listing names."""
        assert EvidenceType.VENDOR.group_key == "vendorEvidence"
        assert EvidenceType.PRODUCT.group_key == "productEvidence"
        assert EvidenceType.VERSION.group_key == "versionEvidence"

    def test_from_value(self):
        """Test creating EvidenceType from the type attribute."""
        assert EvidenceType("product") == EvidenceType.PRODUCT


class TestScoreAvailability:
    """Tests for ScoreAvailability classification."""

    @pytest.mark.parametrize(
        "v2,v3,expected",
        [
            (CvssV2(5.0, "MEDIUM"), None, ScoreAvailability.V2_ONLY),
            (None, CvssV3(5.0, "MEDIUM"), ScoreAvailability.V3_ONLY),
            (CvssV2(5.0, "MEDIUM"), CvssV3(6.0, "MEDIUM"), ScoreAvailability.BOTH),
            (None, None, ScoreAvailability.NEITHER),
        ],
    )
    def test_of(self, v2, v3, expected):
        """Test each combination of scoring blocks."""
        assert ScoreAvailability.of(v2, v3) == expected


class TestIssueSeverity:
    """Tests for score to issue severity mapping."""

    def test_default_thresholds(self):
        """Test the stock thresholds with blocker disabled."""
        assert IssueSeverity.from_score(9.8, 0.0, 7.0, 4.0) == IssueSeverity.CRITICAL
        assert IssueSeverity.from_score(7.0, 0.0, 7.0, 4.0) == IssueSeverity.CRITICAL
        assert IssueSeverity.from_score(6.9, 0.0, 7.0, 4.0) == IssueSeverity.MAJOR
        assert IssueSeverity.from_score(4.0, 0.0, 7.0, 4.0) == IssueSeverity.MAJOR
        assert IssueSeverity.from_score(3.9, 0.0, 7.0, 4.0) == IssueSeverity.MINOR

    def test_blocker_enabled(self):
        """Test a positive blocker threshold."""
        assert IssueSeverity.from_score(9.0, 9.0, 7.0, 4.0) == IssueSeverity.BLOCKER

    def test_zero_score_is_minor(self):
        """Test a zero score never reaches a disabled threshold."""
        assert IssueSeverity.from_score(0.0, 0.0, 0.0, 0.0) == IssueSeverity.MINOR


class TestVulnerabilityScoring:
    """Tests for the effective CVSS score."""

    def test_prefers_v3_by_default(self, sample_vulnerability):
        """Test the v3 score wins when both blocks are present."""
        assert sample_vulnerability.cvss_score() == 8.1

    def test_prefers_v2_when_asked(self, sample_vulnerability):
        """Test the v2 score wins when v2 is preferred."""
        assert sample_vulnerability.cvss_score(prefer_v3=False) == 6.8

    def test_falls_back_to_v2(self):
        """Test a v2-only vulnerability under v3 preference."""
        assert _vulnerability("CVE-1", v2=5.0).cvss_score(prefer_v3=True) == 5.0

    def test_falls_back_to_v3(self):
        """Test a v3-only vulnerability under v2 preference."""
        assert _vulnerability("CVE-1", v3=9.1).cvss_score(prefer_v3=False) == 9.1

    def test_zero_score_is_not_absent(self):
        """Test a present zero score is used rather than falling back."""
        vulnerability = _vulnerability("CVE-1", v2=7.0, v3=0.0)

        assert vulnerability.cvss_score(prefer_v3=True) == 0.0

    def test_no_score_raises(self):
        """Test a vulnerability without scoring blocks."""
        vulnerability = _vulnerability("786")

        assert vulnerability.has_score is False
        with pytest.raises(NoScoreAvailableError, match="786"):
            vulnerability.cvss_score()

    def test_effective_severity(self, sample_vulnerability):
        """Test the severity label follows the scoring preference."""
        assert sample_vulnerability.effective_severity() == "HIGH"
        assert sample_vulnerability.effective_severity(prefer_v3=False) == "MEDIUM"

    def test_effective_severity_falls_back_to_label(self):
        """Test the report severity label is used without scoring blocks."""
        vulnerability = dataclasses.replace(_vulnerability("786"), severity="moderate")

        assert vulnerability.effective_severity() == "moderate"

    def test_vulnerability_is_immutable(self, sample_vulnerability):
        """Test vulnerabilities are frozen."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_vulnerability.name = "CVE-0"


class TestSortedVulnerabilities:
    """Tests for ordering vulnerabilities by score."""

    def test_descending_order(self):
        """Test vulnerabilities are ordered by descending score."""
        dependency = _dependency(
            _vulnerability("low", v2=2.0),
            _vulnerability("high", v2=9.0),
            _vulnerability("medium", v2=5.0),
        )

        names = [v.name for v in dependency.sorted_vulnerabilities()]

        assert names == ["high", "medium", "low"]

    def test_preference_changes_order(self):
        """Test the scoring preference decides the ordering."""
        dependency = _dependency(
            _vulnerability("a", v2=9.0, v3=3.0),
            _vulnerability("b", v2=4.0, v3=8.0),
        )

        assert [v.name for v in dependency.sorted_vulnerabilities(prefer_v3=True)] == ["b", "a"]
        assert [v.name for v in dependency.sorted_vulnerabilities(prefer_v3=False)] == ["a", "b"]

    def test_equal_scores_keep_document_order(self):
        """Test the sort is stable."""
        dependency = _dependency(
            _vulnerability("first", v2=5.0),
            _vulnerability("second", v3=5.0),
            _vulnerability("third", v2=5.0),
        )

        names = [v.name for v in dependency.sorted_vulnerabilities()]

        assert names == ["first", "second", "third"]

    def test_unscored_last(self):
        """Test unscored vulnerabilities follow all scored ones in document order."""
        dependency = _dependency(
            _vulnerability("unscored-1"),
            _vulnerability("scored", v2=0.0),
            _vulnerability("unscored-2"),
        )

        names = [v.name for v in dependency.sorted_vulnerabilities()]

        assert names == ["scored", "unscored-1", "unscored-2"]

    def test_dependency_unchanged(self):
        """Test sorting returns a new tuple."""
        original = (_vulnerability("low", v2=1.0), _vulnerability("high", v2=9.0))
        dependency = _dependency(*original)

        dependency.sorted_vulnerabilities()

        assert dependency.vulnerabilities == original


class TestDependency:
    """Tests for Dependency accessors."""

    def test_grouping_accessors(self, sample_dependency):
        """Test evidence and identifier accessors."""
        assert sample_dependency.evidence_count == 3
        assert len(sample_dependency.get_evidence(EvidenceType.PRODUCT)) == 2
        assert sample_dependency.get_evidence(EvidenceType.VERSION) == ()
        assert sample_dependency.packages[0].id == "pkg:maven/struts/struts@1.2.8"
        assert sample_dependency.vulnerability_ids == ()
        assert sample_dependency.suppressed_vulnerability_ids == ()

    def test_evidence_by_key(self, sample_dependency):
        """Test evidence keyed by report listing name."""
        grouped = sample_dependency.evidence_by_key()

        assert list(grouped) == ["vendorEvidence", "productEvidence"]

    def test_evidence_group_key(self):
        """Test evidence exposes its grouping key."""
        evidence = Evidence("file", "name", "1.0", EvidenceType.VERSION, Confidence.LOW)

        assert evidence.group_key == "versionEvidence"

    def test_is_vulnerable(self, sample_dependency):
        """Test vulnerability presence."""
        assert sample_dependency.is_vulnerable is True
        assert _dependency().is_vulnerable is False

    def test_to_dict(self, sample_dependency):
        """Test converting a dependency to a dictionary."""
        data = sample_dependency.to_dict()

        assert data["file_name"] == "struts-1.2.8.jar"
        assert data["is_virtual"] is False
        assert data["sha256"] is None
        assert len(data["evidence_collected"]["productEvidence"]) == 2
        assert data["evidence_collected"]["vendorEvidence"][0]["confidence"] == "HIGH"
        assert data["identifiers"]["package"][0] == {
            "id": "pkg:maven/struts/struts@1.2.8",
            "confidence": "HIGH",
            "url": None,
        }
        assert [v["name"] for v in data["vulnerabilities"]] == ["CVE-2006-1546", "CVE-2016-1181"]
        assert data["vulnerabilities"][1]["cvss_v3"] == {"base_score": 8.1, "base_severity": "HIGH"}
        assert data["vulnerabilities"][0]["cvss_v3"] is None


class TestAnalysis:
    """Tests for the Analysis root value."""

    def test_aggregates(self, sample_dependency):
        """Test aggregate counts."""
        analysis = Analysis(
            scan_info=ScanInfo(engine_version="5.0.0"),
            dependencies=(sample_dependency, _dependency()),
        )

        assert analysis.vulnerable_dependencies == (sample_dependency,)
        assert analysis.vulnerability_count == 2

    def test_to_dict(self, sample_dependency):
        """Test converting an analysis to a dictionary."""
        analysis = Analysis(
            scan_info=ScanInfo(engine_version="5.0.0"),
            project_info=ProjectInfo(name="Example", report_date="2019-04-17"),
            dependencies=(sample_dependency,),
        )

        data = analysis.to_dict()

        assert data["scan_info"] == {"engine_version": "5.0.0"}
        assert data["project_info"]["name"] == "Example"
        assert data["project_info"]["credits"] is None
        assert data["total_dependencies"] == 1
        assert data["vulnerable_dependencies"] == 1
        assert data["total_vulnerabilities"] == 2

    def test_to_dict_without_project_info(self):
        """Test project info is None when absent."""
        data = Analysis(scan_info=ScanInfo(engine_version="4.0.2")).to_dict()

        assert data["project_info"] is None
        assert data["dependencies"] == []

    def test_identifier_defaults(self):
        """Test identifier optional fields."""
        identifier = Identifier(id="cpe:2.3:a:apache:struts:1.2.8")

        assert identifier.confidence is None
        assert identifier.url is None
        assert IdentifierType("vulnerabilityIds") == IdentifierType.VULNERABILITY_IDS
