"""
Summary command for SBOM index CLI.
"""

import sys
from pathlib import Path

import click

from ...shared.exceptions import SBOMIndexError
from ..utils import get_output_manager_from_context, load_snapshot_file


@click.command()
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--top", default=10, show_default=True, type=click.IntRange(min=0), help="Top CVEs to show")
@click.pass_context
def summary(ctx, snapshot_path, top):
    """Show dataset totals and the top CVE table of a snapshot."""
    logger = ctx.obj["logger"]
    out = get_output_manager_from_context(ctx)

    try:
        snapshot = load_snapshot_file(snapshot_path)
        out.info(f"Snapshot generated at {snapshot.generated_at}")
        out.snapshot_summary(snapshot, top=top)
        logger.debug(f"Summary displayed for {snapshot_path}")

    except SBOMIndexError as e:
        logger.error(f"Summary failed: {e}")
        out.error(f"Error: {e}")
        sys.exit(1)
