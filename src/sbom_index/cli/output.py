"""
Centralized CLI output management system.

Provides consistent output handling across all CLI commands with respect for
global --quiet and --verbose flags.
"""

from enum import Enum

from rich.console import Console
from rich.table import Table

from ..shared.models import SEVERITY_BUCKETS, Snapshot

SEVERITY_STYLES = {
    "CRITICAL": "bold red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "cyan",
    "INFO": "dim",
    "UNKNOWN": "dim",
}


class OutputLevel(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"  # Only errors and critical information
    NORMAL = "normal"  # Standard output
    VERBOSE = "verbose"  # Detailed output including debug information


class CLIOutputManager:
    """Centralized output manager for CLI commands."""

    def __init__(
        self,
        level: OutputLevel = OutputLevel.NORMAL,
        use_colors: bool = True,
    ):
        self.level = level
        self.use_colors = use_colors
        self.console = Console(no_color=not use_colors, quiet=(level == OutputLevel.QUIET))
        # Never quiet for errors
        self.error_console = Console(stderr=True, no_color=not use_colors)

    def info(self, message: str, **kwargs) -> None:
        """Print informational message."""
        if self.level == OutputLevel.QUIET:
            return
        self.console.print(message, markup=False, **kwargs)

    def success(self, message: str, **kwargs) -> None:
        """Print success message."""
        if self.level == OutputLevel.QUIET:
            return
        self.console.print(f"✓ {message}", style="green", markup=False, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Print warning message."""
        self.error_console.print(f"⚠️  {message}", style="yellow", markup=False, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Print error message (always shown regardless of quiet mode)."""
        self.error_console.print(f"✗ {message}", style="red bold", markup=False, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """Print debug message (only in verbose mode)."""
        if self.level != OutputLevel.VERBOSE:
            return
        self.console.print(f"🔍 {message}", style="dim", markup=False, **kwargs)

    def final_results(self, message: str, **kwargs) -> None:
        """Print final results (always shown)."""
        self.console.print(f"📊 {message}", style="bold", markup=False, **kwargs)

    def snapshot_summary(self, snapshot: Snapshot, top: int = 10) -> None:
        """Render dataset, severity and top CVE tables for a snapshot."""
        if self.level == OutputLevel.QUIET:
            return

        datasets = Table(title="Datasets")
        datasets.add_column("Dataset")
        datasets.add_column("Created")
        datasets.add_column("Components", justify="right")
        datasets.add_column("Vulnerabilities", justify="right")
        for bucket in SEVERITY_BUCKETS:
            datasets.add_column(bucket.title(), justify="right", style=SEVERITY_STYLES[bucket])
        for summary in snapshot.datasets:
            datasets.add_row(
                summary.id,
                summary.created or "-",
                str(summary.components),
                str(summary.vulnerabilities),
                *(str(summary.severity_counts.get(bucket, 0)) for bucket in SEVERITY_BUCKETS),
            )
        self.console.print(datasets)

        counts = ", ".join(
            f"{bucket}={snapshot.overall.severity_counts.get(bucket, 0)}"
            for bucket in SEVERITY_BUCKETS
        )
        self.console.print(
            f"Total findings: {snapshot.overall.total} ({counts})", markup=False
        )
        self.console.print(
            f"Fix availability: {snapshot.metrics.fix_availability_rate}%", markup=False
        )

        if not snapshot.metrics.top_cves:
            return

        cves = Table(title="Top CVEs")
        cves.add_column("CVE")
        cves.add_column("Count", justify="right")
        cves.add_column("Worst severity")
        cves.add_column("Max CVSS", justify="right")
        cves.add_column("Datasets")
        rank_names = {4: "CRITICAL", 3: "HIGH", 2: "MEDIUM", 1: "LOW"}
        for entry in snapshot.metrics.top_cves[:top]:
            severity = rank_names.get(entry.worst_severity_rank, "INFO/UNKNOWN")
            cves.add_row(
                entry.id,
                str(entry.count),
                severity,
                "-" if entry.max_cvss is None else f"{entry.max_cvss:.1f}",
                ", ".join(entry.datasets),
                style=SEVERITY_STYLES.get(severity),
            )
        self.console.print(cves)

    @property
    def is_quiet(self) -> bool:
        """Check if output manager is in quiet mode."""
        return self.level == OutputLevel.QUIET


def create_output_manager(
    quiet: bool = False, verbose: bool = False, use_colors: bool = True
) -> CLIOutputManager:
    """Factory function to create output manager from CLI flags."""
    if quiet:
        level = OutputLevel.QUIET
    elif verbose:
        level = OutputLevel.VERBOSE
    else:
        level = OutputLevel.NORMAL

    return CLIOutputManager(level=level, use_colors=use_colors)
