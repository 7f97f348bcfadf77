"""
Utilities shared by CLI commands.
"""

import json
from pathlib import Path
from typing import Any

import click

from ..shared.exceptions import DocumentParseError, create_error_context
from ..shared.models import Snapshot
from .output import CLIOutputManager, create_output_manager


def get_cli_flags(ctx) -> dict[str, Any]:
    """Extract CLI flags from Click context, traversing parent contexts."""
    flags = {}

    # Traverse up the context chain to find global flags
    current_ctx = ctx
    while current_ctx:
        if hasattr(current_ctx, "params") and current_ctx.params:
            # Parent values only fill keys the child did not set
            for key, value in current_ctx.params.items():
                flags.setdefault(key, value)
        current_ctx = getattr(current_ctx, "parent", None)

    return flags


def get_output_manager_from_context(ctx) -> CLIOutputManager:
    """Create output manager from Click context flags."""
    flags = get_cli_flags(ctx)

    quiet = flags.get("quiet", False)
    verbose = flags.get("verbose", False)

    return create_output_manager(quiet=quiet, verbose=verbose)


def load_snapshot_file(path: Path) -> Snapshot:
    """Load a snapshot written by ``build``.

    Raises:
        DocumentParseError: If the file is not a JSON object
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError, RecursionError) as e:
        raise DocumentParseError(
            f"Could not read snapshot: {e}",
            create_error_context(document=str(path), original_error=type(e).__name__),
        ) from e

    if not isinstance(data, dict):
        raise DocumentParseError(
            "Snapshot is not a JSON object", create_error_context(document=str(path))
        )
    return Snapshot.from_dict(data)


def echo_json(data: Any) -> None:
    """Write JSON to stdout regardless of quiet mode."""
    click.echo(json.dumps(data, indent=2))
