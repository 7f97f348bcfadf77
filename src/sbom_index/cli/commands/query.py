"""
Query command for SBOM index CLI.
"""

import sys
from pathlib import Path

import click

from ...pipeline.filtering import SORT_KEYS, FindingQuery, filter_findings, summarize_findings
from ...shared.exceptions import SBOMIndexError
from ...shared.models import SEVERITY_BUCKETS
from ..utils import echo_json, get_output_manager_from_context, load_snapshot_file


@click.command()
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--search", "-s", "q", default="", help="Free text over component, purl, id, licenses, dataset")
@click.option("--dataset", "-d", default="", help="Only findings of this dataset")
@click.option(
    "--severity",
    default="",
    type=click.Choice(["", *SEVERITY_BUCKETS], case_sensitive=False),
    help="Only findings of this severity",
)
@click.option("--fix", default="", type=click.Choice(["", "has", "none"]), help="Fix availability filter")
@click.option("--cvss-min", default=0.0, type=float, help="Minimum CVSS score (0-10)")
@click.option("--sort", "sort_key", default="severityRank", type=click.Choice(list(SORT_KEYS)))
@click.option("--order", "sort_dir", default="desc", type=click.Choice(["asc", "desc"]))
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Maximum findings to print")
@click.pass_context
def query(ctx, snapshot_path, q, dataset, severity, fix, cvss_min, sort_key, sort_dir, limit):
    """Print snapshot findings matching the given filters as JSON."""
    logger = ctx.obj["logger"]
    out = get_output_manager_from_context(ctx)

    try:
        snapshot = load_snapshot_file(snapshot_path)
        finding_query = FindingQuery.from_params(
            {
                "q": q,
                "dataset": dataset,
                "severity": severity,
                "fix": fix,
                "cvssMin": cvss_min,
                "sortKey": sort_key,
                "sortDir": sort_dir,
            }
        )
        if dataset and not finding_query.dataset:
            out.warning(f"Ignoring invalid dataset id: {dataset!r}")

        matches = filter_findings(snapshot.items, finding_query)
        shown = matches if limit is None else matches[:limit]
        logger.debug(f"Query matched {len(matches)} of {len(snapshot.items)} findings")

        echo_json(
            {
                "summary": summarize_findings(matches),
                "items": [finding.to_dict() for finding in shown],
            }
        )

    except SBOMIndexError as e:
        logger.error(f"Query failed: {e}")
        out.error(f"Error: {e}")
        sys.exit(1)
