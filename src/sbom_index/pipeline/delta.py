"""
Run-over-run deltas between two snapshots.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from ..shared.models import SEVERITY_BUCKETS, Snapshot


@dataclass
class DatasetDelta:
    id: str
    delta: int | None = None
    severity_delta: dict[str, int | None] = field(default_factory=dict)


@dataclass
class SnapshotDelta:
    """Differences of the current snapshot against the previous one.

    ``None`` values mean there was nothing to compare against.
    """

    datasets: dict[str, DatasetDelta] = field(default_factory=dict)
    overall_delta: int | None = None
    overall_severity_delta: dict[str, int | None] = field(default_factory=dict)


def _severity_delta(
    current: dict[str, int], previous: dict[str, int] | None
) -> dict[str, int | None]:
    if previous is None:
        return {bucket: None for bucket in SEVERITY_BUCKETS}
    return {
        bucket: current.get(bucket, 0) - previous.get(bucket, 0) for bucket in SEVERITY_BUCKETS
    }


def diff_snapshots(previous: Snapshot | None, current: Snapshot) -> SnapshotDelta:
    """Compare two snapshots taken as explicit arguments.

    Args:
        previous: Snapshot of the previous run, or None on the first run
        current: Snapshot just built

    Returns:
        SnapshotDelta keyed by dataset id
    """
    previous_datasets = {summary.id: summary for summary in previous.datasets} if previous else {}

    datasets = {}
    for summary in current.datasets:
        before = previous_datasets.get(summary.id)
        datasets[summary.id] = DatasetDelta(
            id=summary.id,
            delta=summary.vulnerabilities - before.vulnerabilities if before else None,
            severity_delta=_severity_delta(
                summary.severity_counts, before.severity_counts if before else None
            ),
        )

    return SnapshotDelta(
        datasets=datasets,
        overall_delta=current.overall.total - previous.overall.total if previous else None,
        overall_severity_delta=_severity_delta(
            current.overall.severity_counts,
            previous.overall.severity_counts if previous else None,
        ),
    )


def annotate_snapshot(snapshot_data: dict[str, Any], delta: SnapshotDelta) -> dict[str, Any]:
    """Return a copy of a serialized snapshot with delta fields added.

    Adds ``delta``/``severityDelta`` to each dataset entry and to ``overall``;
    existing fields are left untouched.
    """
    annotated = copy.deepcopy(snapshot_data)

    for entry in annotated.get("datasets", []):
        dataset_delta = delta.datasets.get(entry.get("id"))
        entry["delta"] = dataset_delta.delta if dataset_delta else None
        entry["severityDelta"] = (
            dict(dataset_delta.severity_delta)
            if dataset_delta
            else {bucket: None for bucket in SEVERITY_BUCKETS}
        )

    overall = annotated.setdefault("overall", {})
    overall["delta"] = delta.overall_delta
    overall["severityDelta"] = dict(delta.overall_severity_delta)
    return annotated
