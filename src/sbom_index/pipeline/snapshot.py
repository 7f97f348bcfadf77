"""
Snapshot assembly and the pipeline entry point.

``run_pipeline`` is the single function external tooling calls: it takes
documents from a discovery collaborator, isolates per-document failures and
returns the snapshot together with the diagnostics collected on the way.
"""

import json
import logging
import warnings
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from ..shared.exceptions import (
    DocumentError,
    DocumentParseError,
    EmptyResultWarning,
    FatalPipelineError,
    create_error_context,
)
from ..shared.logging import ProgressLogger
from ..shared.models import (
    DatasetResult,
    Diagnostic,
    DocumentSource,
    OverallSummary,
    PipelineConfig,
    PipelineResult,
    Snapshot,
    SnapshotMetrics,
)
from .aggregation import aggregate_dataset, count_severities, merge_dataset_results
from .analytics import DEFAULT_TOP_LIMIT, build_top_cves, fix_availability_rate
from .discovery import UNKNOWN_DATASET

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def read_json(content: bytes | str | Mapping[str, Any], location: str | None = None) -> Any:
    """Decode document content.

    Already decoded mappings are passed through unchanged.

    Args:
        content: Raw bytes, text, or a decoded mapping
        location: Document identifier for error context

    Returns:
        Decoded JSON value

    Raises:
        DocumentParseError: If the content is empty, not UTF-8 or not JSON
    """
    if isinstance(content, Mapping):
        return content

    if isinstance(content, bytes | bytearray):
        try:
            text = bytes(content).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentParseError(
                f"Cannot decode document as UTF-8: {e.reason}",
                create_error_context(document=location),
            ) from e
    elif isinstance(content, str):
        text = content
    else:
        raise DocumentParseError(
            f"Unsupported document content type: {type(content).__name__}",
            create_error_context(document=location),
        )

    if not text.strip():
        raise DocumentParseError("Empty document", create_error_context(document=location))

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(
            f"Invalid JSON: {e.msg} at line {e.lineno} column {e.colno}",
            create_error_context(document=location),
        ) from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and excessive nesting
        raise DocumentParseError(
            f"Invalid JSON: {e}",
            create_error_context(document=location, original_error=type(e).__name__),
        ) from e


def _coerce_source(source: Any) -> DocumentSource:
    """Accept DocumentSource objects as well as (dataset_id, content[, location]) tuples."""
    if isinstance(source, DocumentSource):
        return source
    if isinstance(source, tuple | list) and len(source) in (2, 3):
        dataset_id = source[0]
        location = source[2] if len(source) == 3 else None
        return DocumentSource(
            dataset_id=str(dataset_id) if dataset_id else UNKNOWN_DATASET,
            content=source[1],
            location=location,
        )
    raise DocumentError(
        "Invalid document source: expected (dataset_id, content) pair",
        create_error_context(type=type(source).__name__),
    )


def assemble_snapshot(
    results: Sequence[DatasetResult],
    generated_at: str,
    top_cve_limit: int = DEFAULT_TOP_LIMIT,
) -> Snapshot:
    """Reduce per-document results into the final snapshot.

    Items keep processing order; dataset summaries are merged per id and
    sorted by id. No I/O happens here.

    Args:
        results: Per-document results in processing order
        generated_at: Generation timestamp to stamp on the snapshot
        top_cve_limit: Number of top CVE entries to keep

    Returns:
        Snapshot
    """
    items = [finding for result in results for finding in result.findings]
    datasets = sorted(
        (merged.summary for merged in merge_dataset_results(results)),
        key=lambda summary: summary.id,
    )

    return Snapshot(
        generated_at=generated_at,
        datasets=datasets,
        items=items,
        overall=OverallSummary(total=len(items), severity_counts=count_severities(items)),
        metrics=SnapshotMetrics(
            fix_availability_rate=fix_availability_rate(items),
            top_cves=build_top_cves(items, top_cve_limit),
        ),
    )


def run_pipeline(
    documents: Iterable[Any],
    config: PipelineConfig | None = None,
    clock: Clock | None = None,
    progress: ProgressLogger | None = None,
) -> PipelineResult:
    """Build a snapshot from a set of CycloneDX documents.

    Unreadable or invalid documents and malformed records are skipped and
    reported as diagnostics. An input without any findings still yields a
    structurally valid snapshot and emits ``EmptyResultWarning``.

    Args:
        documents: DocumentSource objects or (dataset_id, content) pairs
        config: Pipeline configuration
        clock: Callable returning the current time; frozen in tests
        progress: Optional progress reporter

    Returns:
        PipelineResult with snapshot and diagnostics

    Raises:
        FatalPipelineError: If the documents cannot be enumerated at all
    """
    config = config or PipelineConfig()
    clock = clock or utc_now

    results: list[DatasetResult] = []
    diagnostics: list[Diagnostic] = []
    seen = 0

    iterator = iter(documents)
    while True:
        try:
            raw_source = next(iterator)
        except StopIteration:
            break
        except FatalPipelineError:
            raise
        except Exception as e:
            raise FatalPipelineError(
                f"Failed to enumerate documents: {e}",
                create_error_context(original_error=type(e).__name__, documents_seen=seen),
            ) from e

        seen += 1
        source: DocumentSource | None = None
        try:
            source = _coerce_source(raw_source)
            location = source.location or f"{source.dataset_id}#{seen}"
            document = read_json(source.content, location)
            result = aggregate_dataset(document, source.dataset_id, config, location)
        except DocumentError as e:
            where = e.context.get("document") or f"document #{seen}"
            logger.warning(f"Skipping {where}: {e.message}")
            diagnostics.append(
                Diagnostic(
                    message=e.message,
                    level="error",
                    dataset=source.dataset_id if source else None,
                    document=e.context.get("document"),
                    error=type(e).__name__,
                )
            )
            if progress:
                progress.document_skipped(str(where), e.message)
            continue

        results.append(result)
        diagnostics.extend(result.diagnostics)
        logger.debug(
            f"Processed {location}: {result.summary.vulnerabilities} findings, "
            f"{result.summary.components} components"
        )
        if progress:
            progress.document_indexed(
                location, result.summary.vulnerabilities, result.summary.components
            )

    snapshot = assemble_snapshot(results, format_timestamp(clock()), config.top_cve_limit)
    pipeline_result = PipelineResult(
        snapshot=snapshot,
        diagnostics=diagnostics,
        documents_seen=seen,
        documents_processed=len(results),
    )

    if snapshot.is_empty:
        message = (
            f"Snapshot contains no findings ({len(results)} of {seen} document(s) processed)"
        )
        logger.warning(message)
        warnings.warn(message, EmptyResultWarning, stacklevel=2)
    else:
        logger.info(
            f"Built snapshot with {snapshot.overall.total} finding(s) across "
            f"{len(snapshot.datasets)} dataset(s)"
        )

    return pipeline_result
