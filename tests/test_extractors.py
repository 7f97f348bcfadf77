"""
Tests for vulnerability field extractors.
"""

from sbom_index.shared.extractors import (
    DEFAULT_TITLE,
    extract_advisory_id,
    extract_affected_refs,
    extract_cwes,
    extract_explicit_severity,
    extract_fixed_versions,
    extract_ratings,
    extract_reference_urls,
    extract_title,
    has_fix_available,
)


class TestAffectedRefs:
    """Tests for extract_affected_refs."""

    def test_object_and_string_refs(self) -> None:
        """Test both ref objects and bare strings are accepted."""
        vuln = {"affects": [{"ref": "a"}, "b", {"ref": ""}, {}, None, 5]}
        assert extract_affected_refs(vuln) == ["a", "b"]

    def test_missing_or_malformed(self) -> None:
        """Test absent or non-list affects give no refs."""
        assert extract_affected_refs({}) == []
        assert extract_affected_refs({"affects": {"ref": "a"}}) == []


class TestScalarFields:
    """Tests for id, title, severity and ratings extraction."""

    def test_advisory_id(self) -> None:
        """Test only non-empty string ids are kept."""
        assert extract_advisory_id({"id": "CVE-2024-0001"}) == "CVE-2024-0001"
        assert extract_advisory_id({"id": ""}) is None
        assert extract_advisory_id({"id": 42}) is None

    def test_title_truncation(self) -> None:
        """Test descriptions are cut to the configured length."""
        assert extract_title({"description": "x" * 500}) == "x" * 200
        assert extract_title({"description": "abcdef"}, max_length=3) == "abc"

    def test_title_default(self) -> None:
        """Test a missing description falls back to the default title."""
        assert extract_title({}) == DEFAULT_TITLE
        assert extract_title({"description": ["not", "text"]}) == DEFAULT_TITLE

    def test_explicit_severity(self) -> None:
        """Test blank severities are treated as absent."""
        assert extract_explicit_severity({"severity": "high"}) == "high"
        assert extract_explicit_severity({"severity": "  "}) is None
        assert extract_explicit_severity({"severity": 3}) is None

    def test_ratings_fall_back_to_cvss(self) -> None:
        """Test the legacy cvss list is used when ratings is absent."""
        assert extract_ratings({"cvss": [{"score": 1.0}]}) == [{"score": 1.0}]
        assert extract_ratings({"ratings": [{"score": 2.0}], "cvss": [{"score": 1.0}]}) == [{"score": 2.0}]
        assert extract_ratings({"ratings": "bad"}) == []


class TestListFields:
    """Tests for CWE and reference extraction."""

    def test_cwes(self) -> None:
        """Test CWE ids from objects and scalars keep their type."""
        vuln = {"cwes": [79, "CWE-89", {"id": 400}, {"id": None}, True, None, 0, ""]}
        assert extract_cwes(vuln) == [79, "CWE-89", 400]

    def test_reference_urls(self) -> None:
        """Test only reference objects with a url contribute."""
        vuln = {"references": [{"url": "https://a"}, {"id": "x"}, "https://b", {"url": ""}]}
        assert extract_reference_urls(vuln) == ["https://a"]


class TestFixDetection:
    """Tests for the strict fix-availability rule."""

    def test_update_response_means_fix(self) -> None:
        """Test the literal update response marks a fix."""
        vuln = {"analysis": {"response": ["update", "workaround_available"]}}
        assert has_fix_available(vuln) is True
        assert extract_fixed_versions(vuln) == ["*"]

    def test_other_responses(self) -> None:
        """Test other responses and free text are ignored."""
        assert has_fix_available({"analysis": {"response": ["will_not_fix"]}}) is False
        assert has_fix_available({"analysis": {"response": "update"}}) is False
        assert has_fix_available({"recommendation": "Upgrade to 2.0"}) is False
        assert has_fix_available({"analysis": "update"}) is False
        assert extract_fixed_versions({}) == []
