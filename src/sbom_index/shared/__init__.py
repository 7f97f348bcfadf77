"""
Shared module for core functionality.

Contains models, exceptions, field extractors, logging and output
management shared across the pipeline and the CLI.
"""

from .component_utils import (
    ComponentNormalizer,
    build_component_index,
    extract_license_names,
    guess_component_by_ref,
)
from .cvss_utils import CVSSRatingHandler, normalize_severity, resolve_severity_rank
from .exceptions import (
    DocumentError,
    DocumentParseError,
    EmptyResultWarning,
    FatalPipelineError,
    OutputError,
    RecordError,
    SBOMIndexError,
    ValidationError,
    create_error_context,
    wrap_external_error,
)
from .extractors import has_fix_available
from .logging import ProgressLogger, get_logger, setup_logging
from .models import (
    DatasetResult,
    DatasetSummary,
    Diagnostic,
    DocumentSource,
    Finding,
    OutputConfig,
    PipelineConfig,
    PipelineResult,
    Rating,
    SeverityLevel,
    Snapshot,
    TopCVE,
)
from .output import OutputManager

__all__ = [
    # Core models
    "DatasetResult",
    "DatasetSummary",
    "Diagnostic",
    "DocumentSource",
    "Finding",
    "OutputConfig",
    "PipelineConfig",
    "PipelineResult",
    "Rating",
    "SeverityLevel",
    "Snapshot",
    "TopCVE",
    # Core exceptions
    "SBOMIndexError",
    "DocumentError",
    "DocumentParseError",
    "ValidationError",
    "RecordError",
    "FatalPipelineError",
    "OutputError",
    "EmptyResultWarning",
    "wrap_external_error",
    "create_error_context",
    # Extractors
    "CVSSRatingHandler",
    "ComponentNormalizer",
    "build_component_index",
    "extract_license_names",
    "guess_component_by_ref",
    "has_fix_available",
    "normalize_severity",
    "resolve_severity_rank",
    # Management
    "OutputManager",
    # Utils
    "ProgressLogger",
    "setup_logging",
    "get_logger",
]
