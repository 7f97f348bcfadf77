"""
Build command for SBOM index CLI.
"""

import sys
import warnings
from pathlib import Path

import click

from ...pipeline.delta import annotate_snapshot, diff_snapshots
from ...pipeline.discovery import DEFAULT_PATTERN, list_documents
from ...pipeline.snapshot import run_pipeline
from ...pipeline.tracking import annotate_tracking, append_history, update_tracker
from ...shared.exceptions import EmptyResultWarning, SBOMIndexError
from ...shared.logging import ProgressLogger
from ...shared.models import OutputConfig, PipelineConfig
from ...shared.output import OutputManager
from ..utils import get_output_manager_from_context, load_snapshot_file


@click.command()
@click.argument(
    "input_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--output-dir",
    "-o",
    default="out",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the snapshot, history and tracker files",
)
@click.option("--pattern", default=DEFAULT_PATTERN, show_default=True, help="Glob for SBOM files")
@click.option(
    "--previous",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Snapshot to compare against (default: the one already in the output directory)",
)
@click.option("--delta/--no-delta", default=True, help="Annotate run-over-run deltas")
@click.option("--track/--no-track", default=True, help="Track first-seen and closed findings")
@click.option("--history/--no-history", default=True, help="Append totals to history.json")
@click.option("--top", default=10, show_default=True, type=click.IntRange(min=0), help="Top CVEs to keep")
@click.option("--fuzzy-match", is_flag=True, help="Guess components for dangling affects refs")
@click.pass_context
def build(ctx, input_dir, output_dir, pattern, previous, delta, track, history, top, fuzzy_match):
    """Build a dashboard snapshot from the CycloneDX SBOMs under INPUT_DIR."""
    logger = ctx.obj["logger"]
    out = get_output_manager_from_context(ctx)

    try:
        config = PipelineConfig(top_cve_limit=top, fuzzy_component_match=fuzzy_match)
        output_config = OutputConfig(output_dir=output_dir)
        manager = OutputManager(output_config)

        previous_snapshot = None
        if delta:
            if previous:
                previous_snapshot = load_snapshot_file(previous)
            else:
                previous_snapshot = manager.load_previous_snapshot()
            if previous_snapshot is None:
                out.debug("No previous snapshot found; deltas will be null")

        documents = list(list_documents(input_dir, pattern))
        progress = None if out.is_quiet else ProgressLogger(logger)
        if progress:
            progress.start(len(documents))

        with warnings.catch_warnings():
            # Reported below through the output manager
            warnings.simplefilter("ignore", EmptyResultWarning)
            result = run_pipeline(documents, config, progress=progress)

        if progress:
            progress.finish(result.documents_processed, result.documents_seen)

        for diagnostic in result.diagnostics:
            where = diagnostic.document or diagnostic.dataset or "input"
            if diagnostic.level == "error":
                out.warning(f"Skipped {where}: {diagnostic.message}")
            else:
                out.debug(f"{where} [record {diagnostic.index}]: {diagnostic.message}")

        # Leave the previous snapshot and stores untouched
        if result.all_documents_failed:
            out.error(f"None of the {result.documents_seen} document(s) could be processed")
            sys.exit(1)

        snapshot = result.snapshot
        snapshot_data = snapshot.to_dict()

        if delta:
            snapshot_data = annotate_snapshot(snapshot_data, diff_snapshots(previous_snapshot, snapshot))

        if track:
            tracker = update_tracker(
                manager.load_tracker(),
                snapshot.items,
                snapshot.generated_at,
                max_entries=output_config.tracker_max_entries,
                keep_closed=output_config.tracker_keep_closed,
            )
            snapshot_data = annotate_tracking(snapshot, snapshot_data, tracker)
            manager.write_tracker(tracker)

        if history:
            manager.write_history(
                append_history(manager.load_history(), snapshot, output_config.history_limit)
            )

        snapshot_path = manager.write_snapshot(snapshot_data)

        if snapshot.is_empty:
            out.warning("Snapshot contains no findings")

        out.success(f"Snapshot written: {snapshot_path}")
        out.final_results(
            f"{snapshot.overall.total} findings across {len(snapshot.datasets)} dataset(s), "
            f"fix availability {snapshot.metrics.fix_availability_rate}%"
        )
        logger.info(
            f"Built snapshot from {result.documents_processed}/{result.documents_seen} document(s)"
        )

    except SBOMIndexError as e:
        logger.error(f"Build failed: {e}")
        out.error(f"Error: {e}")
        sys.exit(1)
