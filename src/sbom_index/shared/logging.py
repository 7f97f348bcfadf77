"""
Logging setup and per-document progress reporting.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sbom_index"
PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO", use_rich: bool = True) -> logging.Logger:
    """Configure the ``sbom_index`` logger to write to stderr.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Level name such as ``"DEBUG"`` or ``"WARNING"``
        use_rich: Render records with a ``RichHandler`` instead of a plain format

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    if use_rich:
        handler = RichHandler(
            console=Console(stderr=True), show_time=True, show_path=False, markup=False
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger.addHandler(handler)
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)


class ProgressLogger:
    """Reports each document of an indexing run as it is processed.

    With ``use_rich`` the lines go to a stderr console; otherwise they are
    emitted as log records so they honour the configured level.
    """

    def __init__(self, logger: logging.Logger | None = None, use_rich: bool = True):
        self.logger = logger or get_logger()
        self.console = Console(stderr=True) if use_rich else None

    def _emit(self, message: str, style: str, level: int = logging.INFO) -> None:
        if self.console is not None:
            self.console.print(message, style=style, markup=False)
        else:
            self.logger.log(level, message)

    def start(self, total_documents: int) -> None:
        """Announce a run over ``total_documents`` documents."""
        self._emit(f"Indexing {total_documents} SBOM document(s)", "blue bold")

    def document_indexed(self, location: str, findings: int, components: int) -> None:
        self._emit(f"  ✓ {location}: {findings} findings, {components} components", "green")

    def document_skipped(self, location: str, reason: str) -> None:
        self._emit(f"  ✗ {location}: {reason}", "red", logging.ERROR)

    def finish(self, processed: int, seen: int) -> None:
        """Summarize the run.

        Args:
            processed: Documents that produced results
            seen: Documents found in the input
        """
        skipped = seen - processed
        if skipped:
            self._emit(
                f"Indexed {processed}/{seen} document(s), {skipped} skipped",
                "yellow bold",
                logging.WARNING,
            )
        else:
            self._emit(f"Indexed {processed}/{seen} document(s)", "green bold")
