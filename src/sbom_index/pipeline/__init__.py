"""
Pipeline module for turning CycloneDX documents into a dashboard snapshot.

Contains document discovery, vulnerability normalization, per-dataset
aggregation, cross-dataset analytics, snapshot assembly and the optional
companion features (deltas, lifecycle tracking, history, queries).
"""

from .aggregation import aggregate_dataset, count_severities, merge_dataset_results, validate_document
from .analytics import build_top_cves, fix_availability_rate, is_cve_id
from .delta import SnapshotDelta, annotate_snapshot, diff_snapshots
from .discovery import dataset_id_for, list_documents
from .filtering import FindingQuery, filter_findings, sort_findings, summarize_findings
from .normalizer import VulnerabilityNormalizer
from .snapshot import assemble_snapshot, format_timestamp, read_json, run_pipeline
from .tracking import annotate_tracking, append_history, tracker_metrics, update_tracker

__all__ = [
    # Core pipeline
    "run_pipeline",
    "assemble_snapshot",
    "aggregate_dataset",
    "merge_dataset_results",
    "validate_document",
    "count_severities",
    "VulnerabilityNormalizer",
    "build_top_cves",
    "fix_availability_rate",
    "is_cve_id",
    "read_json",
    "format_timestamp",
    # Discovery
    "list_documents",
    "dataset_id_for",
    # Companion features
    "SnapshotDelta",
    "diff_snapshots",
    "annotate_snapshot",
    "update_tracker",
    "tracker_metrics",
    "annotate_tracking",
    "append_history",
    # Queries
    "FindingQuery",
    "filter_findings",
    "sort_findings",
    "summarize_findings",
]
