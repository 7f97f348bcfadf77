"""
Pytest configuration and shared fixtures for SBOM Index tests.
"""

import json
import tempfile
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

FROZEN_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    """Return a clock that always reports the same instant."""
    return lambda: FROZEN_TIME


@pytest.fixture
def sample_sbom_data() -> dict[str, Any]:
    """Return a CycloneDX document with components and vulnerabilities."""
    return {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "serialNumber": "urn:uuid:test-1234",
        "version": 1,
        "metadata": {
            "timestamp": "2024-04-30T08:00:00Z",
            "tools": [{"name": "test-scanner", "version": "1.0.0"}],
        },
        "components": [
            {
                "bom-ref": "pkg:deb/debian/openssl@3.0.11",
                "type": "library",
                "name": "openssl",
                "version": "3.0.11",
                "purl": "pkg:deb/debian/openssl@3.0.11",
                "licenses": [{"license": {"id": "Apache-2.0"}}],
            },
            {
                "bom-ref": "pkg:deb/debian/zlib@1.2.13",
                "type": "library",
                "name": "zlib",
                "version": "1.2.13",
                "purl": "pkg:deb/debian/zlib@1.2.13",
                "scope": "optional",
                "licenses": [{"license": {"name": "Zlib License"}}],
            },
            {
                "bomRef": "curl-ref",
                "type": "library",
                "name": "curl",
                "version": "8.4.0",
                "licenses": [{"expression": "curl OR MIT"}],
            },
        ],
        "vulnerabilities": [
            {
                "id": "CVE-2023-5678",
                "description": "Excessive time spent in DH key generation",
                "ratings": [
                    {"method": "CVSSv31", "score": 5.3, "severity": "medium"},
                    {"method": "CVSSv2", "score": 7.1, "severity": "high"},
                ],
                "cwes": [400],
                "references": [{"url": "https://nvd.nist.gov/vuln/detail/CVE-2023-5678"}],
                "affects": [
                    {"ref": "pkg:deb/debian/openssl@3.0.11"},
                    {"ref": "pkg:deb/debian/zlib@1.2.13"},
                ],
                "analysis": {"response": ["update"]},
            },
            {
                "id": "CVE-2023-38545",
                "severity": "critical",
                "ratings": [{"source": {"name": "NVD"}, "baseScore": 9.8}],
                "affects": [{"ref": "curl-ref"}],
            },
            {
                "id": "GHSA-abcd-1234-efgh",
                "description": "Advisory without CVE id",
                "ratings": [{"baseSeverity": "LOW"}],
            },
        ],
    }


@pytest.fixture
def make_document() -> Callable[..., dict[str, Any]]:
    """Return a factory for small CycloneDX documents."""

    def _make(
        vulnerabilities: list[Any] | None = None,
        components: list[Any] | None = None,
        timestamp: str | None = None,
    ) -> dict[str, Any]:
        document: dict[str, Any] = {
            "bomFormat": "CycloneDX",
            "specVersion": "1.5",
            "components": components if components is not None else [],
            "vulnerabilities": vulnerabilities if vulnerabilities is not None else [],
        }
        if timestamp:
            document["metadata"] = {"timestamp": timestamp}
        return document

    return _make


@pytest.fixture
def write_sbom(temp_dir: Path) -> Callable[[str, Any], Path]:
    """Return a helper writing a document under ``temp_dir/sboms``."""
    root = temp_dir / "sboms"

    def _write(relative: str, document: Any) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(document, bytes):
            path.write_bytes(document)
        elif isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
