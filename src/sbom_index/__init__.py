"""
SBOM Index - Normalize CycloneDX vulnerability reports into a dashboard snapshot.

This package provides functionality for:
- Tolerant extraction of findings from scanner-produced CycloneDX documents
- Per-dataset and cross-dataset security metrics
- Run-over-run deltas, finding lifecycle tracking and history
- A command line for building and inspecting snapshots
"""

__version__ = "0.1.0"

from .pipeline import list_documents, run_pipeline
from .shared.exceptions import SBOMIndexError
from .shared.models import PipelineConfig, PipelineResult, Snapshot

__all__ = [
    "run_pipeline",
    "list_documents",
    "PipelineConfig",
    "PipelineResult",
    "Snapshot",
    "SBOMIndexError",
    "__version__",
]
