"""
Companion stores kept next to the snapshot: finding lifecycle tracker and
rolling history of severity totals.

Both stores are plain JSON-shaped dicts. Every function here returns a new
store instead of mutating the one passed in.
"""

import copy
import logging
import math
import statistics
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from ..shared.models import Finding, Snapshot

logger = logging.getLogger(__name__)

TRACKER_MAX_ENTRIES = 12000
TRACKER_KEEP_CLOSED = 5000
HISTORY_LIMIT = 50
OLDEST_OPEN_LIMIT = 5


def tracker_key(finding: Finding) -> str:
    """Stable key per vulnerability occurrence across runs."""
    if finding.id:
        return f"{finding.dataset}::{finding.id}"
    return f"{finding.dataset}::{finding.component or 'comp'}@{finding.version or ''}"


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def days_between(start: str, end: str) -> int:
    """Whole days between two ISO timestamps, rounded half up, never negative."""
    seconds = (_parse_timestamp(end) - _parse_timestamp(start)).total_seconds()
    return max(0, int(math.floor(seconds / 86400 + 0.5)))


def _median(values: Sequence[int]) -> float | int | None:
    if not values:
        return None
    return statistics.median(values)


def update_tracker(
    state: Mapping[str, Any],
    findings: Sequence[Finding],
    now: str,
    max_entries: int = TRACKER_MAX_ENTRIES,
    keep_closed: int = TRACKER_KEEP_CLOSED,
) -> dict[str, Any]:
    """Record first-seen, last-seen and closed timestamps for findings.

    New keys open with ``firstSeen = lastSeen = now``. Keys seen again refresh
    ``lastSeen`` and reopen. Open keys missing from this run close at ``now``.
    Once the store exceeds ``max_entries``, only the ``keep_closed`` most
    recently closed entries survive; open entries are never pruned.

    Args:
        state: Previous tracker store (``{"vulns": {...}}``)
        findings: Findings of the current run
        now: Generation timestamp of the current run

    Returns:
        New tracker store
    """
    previous = state.get("vulns") if isinstance(state, Mapping) else None
    vulns: dict[str, dict[str, Any]] = {
        key: copy.deepcopy(record)
        for key, record in (previous or {}).items()
        if isinstance(record, dict)
    }

    current_keys = set()
    for finding in findings:
        key = tracker_key(finding)
        current_keys.add(key)
        record = vulns.get(key)
        if record is None:
            record = vulns[key] = {
                "firstSeen": now,
                "lastSeen": now,
                "closedAt": None,
                "meta": {
                    "id": finding.id,
                    "component": finding.component,
                    "dataset": finding.dataset,
                },
            }
        record["lastSeen"] = now
        record["closedAt"] = None

    for key, record in vulns.items():
        if key not in current_keys and record.get("closedAt") is None:
            record["closedAt"] = now

    if len(vulns) > max_entries:
        closed = sorted(
            (key for key, record in vulns.items() if record.get("closedAt")),
            key=lambda key: vulns[key]["closedAt"],
            reverse=True,
        )
        for key in closed[keep_closed:]:
            del vulns[key]
        logger.debug(f"Pruned {max(0, len(closed) - keep_closed)} closed tracker entries")

    return {"vulns": vulns}


def tracker_metrics(
    state: Mapping[str, Any], findings: Sequence[Finding], now: str
) -> dict[str, Any]:
    """Time-to-fix and open-age metrics derived from the tracker store.

    Args:
        state: Tracker store already updated for this run
        findings: Findings of the current run
        now: Generation timestamp of the current run

    Returns:
        Dict with ``ttfMedianDays``, ``openAgeMedianDays`` and ``oldestOpen``
    """
    vulns = state.get("vulns") or {}
    current_keys = {tracker_key(finding) for finding in findings}

    ttf_days = [
        days_between(record["firstSeen"], record["closedAt"])
        for record in vulns.values()
        if record.get("closedAt") and record.get("firstSeen")
    ]

    open_records = [
        (key, record)
        for key, record in vulns.items()
        if key in current_keys and record.get("firstSeen")
    ]
    open_ages = [(key, days_between(record["firstSeen"], now), record) for key, record in open_records]

    oldest_open = sorted(open_ages, key=lambda entry: entry[1], reverse=True)[:OLDEST_OPEN_LIMIT]

    return {
        "ttfMedianDays": _median(ttf_days),
        "openAgeMedianDays": _median([days for _, days, _ in open_ages]),
        "oldestOpen": [
            {"key": key, "days": days, "meta": record.get("meta")} for key, days, record in oldest_open
        ],
    }


def annotate_tracking(
    snapshot: Snapshot, snapshot_data: dict[str, Any], state: Mapping[str, Any]
) -> dict[str, Any]:
    """Return a copy of a serialized snapshot with tracker fields added.

    Items gain ``firstSeen``; metrics gain the fields of ``tracker_metrics``.
    """
    annotated = copy.deepcopy(snapshot_data)
    vulns = state.get("vulns") or {}

    for finding, item in zip(snapshot.items, annotated.get("items", []), strict=True):
        record = vulns.get(tracker_key(finding))
        item["firstSeen"] = record.get("firstSeen") if record else None

    metrics = annotated.setdefault("metrics", {})
    metrics.update(tracker_metrics(state, snapshot.items, snapshot.generated_at))
    return annotated


def append_history(
    history: Mapping[str, Any], snapshot: Snapshot, limit: int = HISTORY_LIMIT
) -> dict[str, Any]:
    """Append this run's totals to the rolling history, keeping the last ``limit``.

    Args:
        history: Previous history store (``{"entries": [...]}``)
        snapshot: Snapshot just built
        limit: Maximum number of entries kept

    Returns:
        New history store
    """
    entries = list(history.get("entries") or []) if isinstance(history, Mapping) else []
    entries.append(
        {
            "generatedAt": snapshot.generated_at,
            "overall": {
                "total": snapshot.overall.total,
                "severityCounts": dict(snapshot.overall.severity_counts),
            },
            "datasets": {
                summary.id: dict(summary.severity_counts) for summary in snapshot.datasets
            },
        }
    )
    return {"entries": entries[-limit:] if limit > 0 else []}
