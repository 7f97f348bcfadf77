"""
Command line interface for SBOM index using Click.
"""

import click

from ..shared.logging import get_logger, setup_logging
from .commands.build import build
from .commands.query import query
from .commands.status import status
from .commands.summary import summary


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Enable quiet mode")
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool) -> None:
    """SBOM Index - Build a vulnerability dashboard snapshot from CycloneDX SBOMs."""
    # Ensure context object exists
    ctx.ensure_object(dict)

    # Store global flags in context for easy access by subcommands
    ctx.obj["global_flags"] = {"verbose": verbose, "quiet": quiet}

    if quiet:
        log_level = "WARNING"
    elif verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    setup_logging(log_level)
    ctx.obj["logger"] = get_logger()


cli.add_command(build)
cli.add_command(summary)
cli.add_command(query)
cli.add_command(status)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
