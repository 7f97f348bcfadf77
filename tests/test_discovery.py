"""
Tests for filesystem document discovery.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from sbom_index.pipeline.discovery import dataset_id_for, list_documents
from sbom_index.shared.exceptions import FatalPipelineError


class TestDatasetIdFor:
    """Tests for dataset_id_for."""

    def test_first_segment(self) -> None:
        """Test the first folder under the root names the dataset."""
        root = Path("/data/sboms")
        assert dataset_id_for(root / "stable" / "x" / "a.cyclonedx.json", root) == "stable"
        assert dataset_id_for(root / "arm64" / "a.cyclonedx.json", root) == "arm64"

    def test_file_directly_under_root(self) -> None:
        """Test a root-level file is its own dataset."""
        root = Path("/data/sboms")
        assert dataset_id_for(root / "a.cyclonedx.json", root) == "a.cyclonedx.json"


class TestListDocuments:
    """Tests for list_documents."""

    def test_lists_matching_files_in_order(
        self, temp_dir: Path, write_sbom: Callable[[str, Any], Path]
    ) -> None:
        """Test matching files are yielded sorted with dataset ids."""
        write_sbom("stable/b.cyclonedx.json", {"bomFormat": "CycloneDX"})
        write_sbom("arm64/nested/deep/a.cyclonedx.json", {"bomFormat": "CycloneDX"})
        write_sbom("stable/readme.txt", "ignored")

        sources = list(list_documents(temp_dir / "sboms"))

        assert [source.location for source in sources] == [
            "arm64/nested/deep/a.cyclonedx.json",
            "stable/b.cyclonedx.json",
        ]
        assert [source.dataset_id for source in sources] == ["arm64", "stable"]
        assert b"CycloneDX" in sources[0].content

    def test_custom_pattern(self, temp_dir: Path, write_sbom: Callable[[str, Any], Path]) -> None:
        """Test a custom glob pattern."""
        write_sbom("stable/sbom.json", {"bomFormat": "CycloneDX"})
        write_sbom("stable/a.cyclonedx.json", {"bomFormat": "CycloneDX"})

        sources = list(list_documents(temp_dir / "sboms", "**/sbom.json"))
        assert [source.location for source in sources] == ["stable/sbom.json"]

    def test_missing_root(self, temp_dir: Path) -> None:
        """Test a missing root is fatal."""
        with pytest.raises(FatalPipelineError):
            list(list_documents(temp_dir / "missing"))

    def test_empty_root(self, temp_dir: Path) -> None:
        """Test an empty root yields nothing."""
        assert list(list_documents(temp_dir)) == []
