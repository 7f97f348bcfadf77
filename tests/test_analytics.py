"""
Tests for cross-dataset analytics.
"""

from sbom_index.pipeline.analytics import build_top_cves, fix_availability_rate, is_cve_id
from sbom_index.shared.models import Finding, SeverityLevel


def _finding(dataset: str, cve: str | None, rank: int = 0, cvss: float | None = None, fixed: bool = False) -> Finding:
    return Finding(
        dataset=dataset,
        id=cve,
        severity_rank=rank,
        cvss=cvss,
        fixed_versions=["*"] if fixed else [],
    )


class TestIsCveId:
    """Tests for the CVE id pattern."""

    def test_valid_ids(self) -> None:
        """Test well formed CVE ids."""
        assert is_cve_id("CVE-2024-0001")
        assert is_cve_id("CVE-2021-44228")

    def test_invalid_ids(self) -> None:
        """Test advisories and malformed ids are excluded."""
        assert not is_cve_id("GHSA-abcd-1234-efgh")
        assert not is_cve_id("cve-2024-0001")
        assert not is_cve_id("CVE-2024-001")
        assert not is_cve_id("CVE-2024-0001-extra")
        assert not is_cve_id("CVE-2024-0001\n")
        assert not is_cve_id(" CVE-2024-0001")
        assert not is_cve_id(None)


class TestFixAvailabilityRate:
    """Tests for fix_availability_rate."""

    def test_empty(self) -> None:
        """Test an empty set has a zero rate."""
        assert fix_availability_rate([]) == 0

    def test_rounding(self) -> None:
        """Test percentages round half up."""
        assert fix_availability_rate([_finding("d", None, fixed=True), _finding("d", None)]) == 50
        assert fix_availability_rate([_finding("d", None, fixed=True)] + [_finding("d", None)] * 2) == 33
        assert fix_availability_rate([_finding("d", None, fixed=True)] * 2 + [_finding("d", None)]) == 67
        findings = [_finding("d", None, fixed=True)] + [_finding("d", None)] * 7
        assert fix_availability_rate(findings) == 13  # 12.5 rounds up

    def test_bounds(self) -> None:
        """Test the rate stays within 0-100."""
        assert fix_availability_rate([_finding("d", None, fixed=True)] * 3) == 100
        assert fix_availability_rate([_finding("d", None)] * 3) == 0


class TestBuildTopCves:
    """Tests for build_top_cves."""

    def test_aggregates_across_datasets(self) -> None:
        """Test one entry per CVE with sorted datasets and worst rank."""
        findings = [
            _finding("stable", "CVE-2024-9999", rank=3, cvss=7.5),
            _finding("arm64", "CVE-2024-9999", rank=4, cvss=9.1),
        ]
        [entry] = build_top_cves(findings)
        assert entry.id == "CVE-2024-9999"
        assert entry.count == 2
        assert entry.datasets == ["arm64", "stable"]
        assert entry.worst_severity_rank == 4
        assert entry.max_cvss == 9.1

    def test_excludes_non_cve_ids(self) -> None:
        """Test advisory ids and missing ids never appear."""
        findings = [
            _finding("d", "GHSA-xxxx-yyyy-zzzz", rank=4),
            _finding("d", None, rank=4),
            _finding("d", "CVE-2024-0001\n", rank=4),
        ]
        assert build_top_cves(findings) == []

    def test_ordering(self) -> None:
        """Test worst rank first, then count, then max CVSS."""
        findings = [
            _finding("d", "CVE-2024-0001", rank=3, cvss=7.0),
            _finding("d", "CVE-2024-0002", rank=3, cvss=8.0),
            _finding("d", "CVE-2024-0003", rank=3, cvss=5.0),
            _finding("d", "CVE-2024-0003", rank=2, cvss=5.0),
            _finding("d", "CVE-2024-0004", rank=4),
        ]
        ids = [entry.id for entry in build_top_cves(findings)]
        assert ids == ["CVE-2024-0004", "CVE-2024-0003", "CVE-2024-0002", "CVE-2024-0001"]

    def test_ties_keep_first_seen(self) -> None:
        """Test entries equal on every key keep first-seen order."""
        findings = [_finding("d", "CVE-2024-0002", rank=2), _finding("d", "CVE-2024-0001", rank=2)]
        assert [entry.id for entry in build_top_cves(findings)] == ["CVE-2024-0002", "CVE-2024-0001"]

    def test_missing_cvss(self) -> None:
        """Test max CVSS stays null when no occurrence is scored."""
        [entry] = build_top_cves([_finding("d", "CVE-2024-0001", rank=1)])
        assert entry.max_cvss is None

    def test_limit(self) -> None:
        """Test only the requested number of entries is kept."""
        findings = [_finding("d", f"CVE-2024-{n:04d}", rank=1) for n in range(15)]
        assert len(build_top_cves(findings)) == 10
        assert len(build_top_cves(findings, limit=3)) == 3

    def test_severity_enum_irrelevant_to_rank(self) -> None:
        """Test ranking uses the numeric rank carried by findings."""
        finding = Finding(dataset="d", id="CVE-2024-0001", severity=SeverityLevel.CRITICAL, severity_rank=4)
        assert build_top_cves([finding])[0].worst_severity_rank == 4
