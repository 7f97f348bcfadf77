"""
Per-dataset aggregation of normalized findings.
"""

import logging
from collections.abc import Iterable
from typing import Any

from ..shared.exceptions import DocumentParseError, ValidationError, create_error_context
from ..shared.models import (
    DatasetResult,
    DatasetSummary,
    Finding,
    PipelineConfig,
    SeverityLevel,
    empty_severity_counts,
)
from .normalizer import VulnerabilityNormalizer

logger = logging.getLogger(__name__)


def _present(value: Any) -> bool:
    return value is not None and value != "" and value is not False


def validate_document(document: Any, location: str | None = None) -> dict[str, Any]:
    """Check a decoded document loosely looks like a CycloneDX BOM.

    Documents without ``bomFormat``/``specVersion`` are still accepted when
    they carry a ``components`` or ``vulnerabilities`` list.

    Args:
        document: Decoded JSON value
        location: Document identifier for error context

    Returns:
        The document, typed as a dict

    Raises:
        DocumentParseError: If the value is not an object
        ValidationError: If no CycloneDX signal is present at all
    """
    if not isinstance(document, dict):
        raise DocumentParseError(
            "Invalid JSON: not an object",
            create_error_context(document=location, type=type(document).__name__),
        )

    if not _present(document.get("bomFormat")) and not _present(document.get("specVersion")):
        if not isinstance(document.get("vulnerabilities"), list) and not isinstance(
            document.get("components"), list
        ):
            raise ValidationError(
                "Invalid CycloneDX: missing bomFormat/specVersion and no vulnerabilities/components",
                create_error_context(document=location),
            )

    return document


def count_severities(findings: Iterable[Finding]) -> dict[str, int]:
    """Histogram of findings per severity bucket, every bucket present."""
    counts = empty_severity_counts()
    for finding in findings:
        counts[SeverityLevel(finding.severity).value] += 1
    return counts


def _created_timestamp(document: dict[str, Any]) -> str | None:
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        return None
    timestamp = metadata.get("timestamp")
    if isinstance(timestamp, str) and timestamp:
        return timestamp
    return None


def aggregate_dataset(
    document: Any,
    dataset_id: str,
    config: PipelineConfig | None = None,
    location: str | None = None,
) -> DatasetResult:
    """Normalize one document and summarize it.

    Args:
        document: Decoded CycloneDX document
        dataset_id: Dataset the document belongs to
        config: Pipeline configuration
        location: Document identifier used in diagnostics

    Returns:
        DatasetResult with summary, findings and record diagnostics

    Raises:
        DocumentParseError: If the document is not an object
        ValidationError: If the document has no CycloneDX signal
    """
    document = validate_document(document, location)
    normalizer = VulnerabilityNormalizer(config)
    findings, diagnostics = normalizer.normalize(document, dataset_id, location)

    components = document.get("components")
    summary = DatasetSummary(
        id=dataset_id,
        created=_created_timestamp(document),
        components=len(components) if isinstance(components, list) else 0,
        vulnerabilities=len(findings),
        severity_counts=count_severities(findings),
    )
    return DatasetResult(summary=summary, findings=findings, diagnostics=diagnostics)


def merge_dataset_results(results: Iterable[DatasetResult]) -> list[DatasetResult]:
    """Merge results of documents that belong to the same dataset.

    Order follows the first appearance of each dataset; findings keep their
    processing order. ``created`` becomes the latest source timestamp.

    Args:
        results: Per-document results in processing order

    Returns:
        One result per dataset identifier
    """
    merged: dict[str, DatasetResult] = {}
    for result in results:
        dataset_id = result.summary.id
        current = merged.get(dataset_id)
        if current is None:
            merged[dataset_id] = DatasetResult(
                summary=DatasetSummary(
                    id=dataset_id,
                    created=result.summary.created,
                    components=result.summary.components,
                    vulnerabilities=result.summary.vulnerabilities,
                    severity_counts=dict(result.summary.severity_counts),
                ),
                findings=list(result.findings),
                diagnostics=list(result.diagnostics),
            )
            continue

        summary = current.summary
        summary.components += result.summary.components
        summary.vulnerabilities += result.summary.vulnerabilities
        for bucket, count in result.summary.severity_counts.items():
            summary.severity_counts[bucket] = summary.severity_counts.get(bucket, 0) + count
        created = [value for value in (summary.created, result.summary.created) if value]
        summary.created = max(created) if created else None
        current.findings.extend(result.findings)
        current.diagnostics.extend(result.diagnostics)

    logger.debug(f"Merged results into {len(merged)} dataset(s)")
    return list(merged.values())
