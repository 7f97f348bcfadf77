"""
Filesystem discovery of CycloneDX documents.

Each top-level folder under the input root is one dataset; documents nested
arbitrarily deeper inside it still belong to that dataset.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from ..shared.exceptions import FatalPipelineError, create_error_context, wrap_external_error
from ..shared.models import DocumentSource

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/*.cyclonedx.json"
UNKNOWN_DATASET = "unknown"


def dataset_id_for(path: Path, root: Path) -> str:
    """Derive the dataset identifier from a document path.

    Args:
        path: Document path
        root: Input root the path lives under

    Returns:
        First path segment relative to the root (the file name itself for
        documents placed directly under the root)
    """
    relative = path.relative_to(root).as_posix()
    return relative.split("/")[0] or UNKNOWN_DATASET


def list_documents(root: Path, pattern: str = DEFAULT_PATTERN) -> Iterator[DocumentSource]:
    """Yield every document under ``root`` matching ``pattern``.

    Files are yielded in sorted path order so repeated runs see the same
    processing order. A file that cannot be read is still yielded, with empty
    content, so the pipeline records it as a skipped document.

    Args:
        root: Input root directory
        pattern: Glob pattern relative to the root

    Yields:
        DocumentSource per matched file

    Raises:
        FatalPipelineError: If the root directory does not exist
        SBOMIndexError: If the directory cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise FatalPipelineError(
            f"SBOM directory not found: {root}",
            create_error_context(root=str(root), pattern=pattern),
        )

    try:
        files = sorted(path for path in root.glob(pattern) if path.is_file())
    except OSError as e:
        raise wrap_external_error(e, create_error_context(root=str(root), pattern=pattern)) from e
    logger.info(f"Found {len(files)} file(s) matching {pattern} in {root}")

    for path in files:
        location = path.relative_to(root).as_posix()
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read {location}: {e}")
            content = b""
        yield DocumentSource(
            dataset_id=dataset_id_for(path, root),
            content=content,
            location=location,
        )
