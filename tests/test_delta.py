"""
Tests for run-over-run snapshot deltas.
"""

from sbom_index.pipeline.delta import annotate_snapshot, diff_snapshots
from sbom_index.shared.models import (
    SEVERITY_BUCKETS,
    DatasetSummary,
    OverallSummary,
    Snapshot,
    empty_severity_counts,
)


def _snapshot(generated_at: str, datasets: dict[str, dict[str, int]]) -> Snapshot:
    summaries = []
    overall = empty_severity_counts()
    for dataset_id, counts in datasets.items():
        severity_counts = empty_severity_counts()
        severity_counts.update(counts)
        for bucket, count in counts.items():
            overall[bucket] += count
        summaries.append(
            DatasetSummary(
                id=dataset_id,
                vulnerabilities=sum(counts.values()),
                severity_counts=severity_counts,
            )
        )
    return Snapshot(
        generated_at=generated_at,
        datasets=summaries,
        overall=OverallSummary(total=sum(overall.values()), severity_counts=overall),
    )


class TestDiffSnapshots:
    """Tests for diff_snapshots."""

    def test_first_run_has_null_deltas(self) -> None:
        """Test deltas are null without a previous snapshot."""
        current = _snapshot("t2", {"stable": {"HIGH": 2}})
        delta = diff_snapshots(None, current)

        assert delta.overall_delta is None
        assert delta.overall_severity_delta == {bucket: None for bucket in SEVERITY_BUCKETS}
        assert delta.datasets["stable"].delta is None

    def test_changes_against_previous(self) -> None:
        """Test per-dataset and overall differences."""
        previous = _snapshot("t1", {"stable": {"HIGH": 3, "LOW": 1}})
        current = _snapshot("t2", {"stable": {"HIGH": 1, "CRITICAL": 1}, "arm64": {"LOW": 2}})
        delta = diff_snapshots(previous, current)

        stable = delta.datasets["stable"]
        assert stable.delta == -2
        assert stable.severity_delta["HIGH"] == -2
        assert stable.severity_delta["CRITICAL"] == 1
        assert stable.severity_delta["LOW"] == -1
        assert delta.datasets["arm64"].delta is None
        assert delta.overall_delta == 0
        assert delta.overall_severity_delta["LOW"] == 1


class TestAnnotateSnapshot:
    """Tests for annotate_snapshot."""

    def test_adds_fields_without_mutating_input(self) -> None:
        """Test delta fields are added to a copy."""
        previous = _snapshot("t1", {"stable": {"HIGH": 1}})
        current = _snapshot("t2", {"stable": {"HIGH": 2}})
        data = current.to_dict()

        annotated = annotate_snapshot(data, diff_snapshots(previous, current))

        assert annotated["datasets"][0]["delta"] == 1
        assert annotated["datasets"][0]["severityDelta"]["HIGH"] == 1
        assert annotated["overall"]["delta"] == 1
        assert annotated["overall"]["total"] == 2
        assert "delta" not in data["datasets"][0]
        assert "delta" not in data["overall"]
