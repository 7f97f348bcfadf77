"""
Status command for SBOM index CLI.
"""

from pathlib import Path

import click

from ...shared.models import OutputConfig
from ...shared.output import OutputManager


@click.command()
@click.argument("output_dir", default="out", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def status(ctx, output_dir):
    """Show which output files exist in OUTPUT_DIR."""
    logger = ctx.obj["logger"]

    output_manager = OutputManager(OutputConfig(output_dir=output_dir))
    status_info = output_manager.get_status()

    click.echo("📊 Output Directory Status")
    click.echo("=" * 40)
    click.echo(f"Base directory: {status_info['base_dir']}")

    for name, info in status_info["files"].items():
        if info["exists"]:
            click.echo(f"   {name:<10}: {info['path']} ({info['size'] / 1024:.1f} KB)")
        else:
            click.echo(f"   {name:<10}: missing")

    logger.debug(f"Status displayed for {output_dir}")
