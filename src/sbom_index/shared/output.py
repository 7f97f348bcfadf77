"""
Output management for the snapshot and its companion stores.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import OutputError, create_error_context
from .models import OutputConfig, Snapshot

logger = logging.getLogger(__name__)


class OutputManager:
    """Reads and writes the JSON files produced by a snapshot build."""

    def __init__(self, config: OutputConfig):
        """Initialize output manager.

        Args:
            config: Output configuration with directory and file names
        """
        self.config = config
        self.base_dir = Path(config.output_dir)

        self.paths = {
            "snapshot": self.base_dir / config.snapshot_name,
            "history": self.base_dir / config.history_name,
            "tracker": self.base_dir / config.tracker_name,
        }

    def _ensure_dir_exists(self, dir_path: Path) -> Path:
        """Ensure directory exists, creating it if necessary.

        Args:
            dir_path: Directory path to ensure exists

        Returns:
            The directory path
        """
        dir_path.mkdir(parents=True, exist_ok=True)
        return dir_path

    def read_json(self, path: Path) -> Any | None:
        """Read a JSON file, returning None when it is missing, empty or invalid.

        Companion stores are optional, so a bad file only costs its history.

        Args:
            path: File to read

        Returns:
            Decoded JSON value or None
        """
        if not path.exists():
            logger.debug(f"File not found: {path}")
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

        if not content.strip():
            logger.warning(f"Empty file: {path}")
            return None

        try:
            return json.loads(content)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Error reading JSON from {path}: {e}")
            return None

    def write_json(self, path: Path, data: Any) -> Path:
        """Write data as indented JSON.

        Args:
            path: Destination file
            data: JSON-serializable value

        Returns:
            The written path

        Raises:
            OutputError: If the file cannot be written
        """
        try:
            self._ensure_dir_exists(path.parent)
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise OutputError(
                f"Failed to write JSON: {e}",
                create_error_context(path=str(path), original_error=type(e).__name__),
            ) from e
        return path

    def load_previous_snapshot(self) -> Snapshot | None:
        """Load the snapshot written by the previous run, if any."""
        data = self.read_json(self.paths["snapshot"])
        if not isinstance(data, dict):
            return None
        return Snapshot.from_dict(data)

    def load_history(self) -> dict[str, Any]:
        data = self.read_json(self.paths["history"])
        if isinstance(data, dict) and isinstance(data.get("entries"), list):
            return data
        return {"entries": []}

    def load_tracker(self) -> dict[str, Any]:
        data = self.read_json(self.paths["tracker"])
        if isinstance(data, dict) and isinstance(data.get("vulns"), dict):
            return data
        return {"vulns": {}}

    def write_snapshot(self, snapshot_data: dict[str, Any]) -> Path:
        return self.write_json(self.paths["snapshot"], snapshot_data)

    def write_history(self, history: dict[str, Any]) -> Path:
        return self.write_json(self.paths["history"], history)

    def write_tracker(self, tracker: dict[str, Any]) -> Path:
        return self.write_json(self.paths["tracker"], tracker)

    def get_status(self) -> dict[str, Any]:
        """Get status information about the output files.

        Returns:
            Dictionary with status information
        """
        files: dict[str, dict[str, Any]] = {}
        for name, path in self.paths.items():
            exists = path.exists()
            files[name] = {
                "path": str(path),
                "exists": exists,
                "size": path.stat().st_size if exists else 0,
            }
        return {"base_dir": str(self.base_dir), "files": files}
