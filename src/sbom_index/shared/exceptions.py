"""
Custom exception hierarchy for SBOM index.
"""

from typing import Any


class SBOMIndexError(Exception):
    """Base exception for all SBOM index errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        """Initialize with message and optional context.

        Args:
            message: Error message
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


# Document-level exceptions
class DocumentError(SBOMIndexError):
    """Base exception for problems with a whole input document."""

    pass


class DocumentParseError(DocumentError):
    """Document bytes are not valid JSON or do not decode to an object."""

    pass


class ValidationError(DocumentError):
    """Document carries no plausible CycloneDX signal at all."""

    pass


# Record-level exceptions
class RecordError(SBOMIndexError):
    """A single component or vulnerability entry is structurally invalid."""

    pass


# Pipeline exceptions
class FatalPipelineError(SBOMIndexError):
    """No snapshot can be produced, e.g. documents cannot be enumerated."""

    pass


class OutputError(SBOMIndexError):
    """Writing a snapshot or companion store failed."""

    pass


class EmptyResultWarning(UserWarning):
    """Pipeline produced a valid snapshot without any findings."""

    pass


# Utility functions for error handling
def wrap_external_error(
    error: Exception, context: dict[str, Any] | None = None
) -> SBOMIndexError:
    """Wrap external exceptions in our custom exception hierarchy.

    Args:
        error: External exception to wrap
        context: Additional context information

    Returns:
        Appropriate SBOMIndexError subclass
    """
    error_message = str(error)
    error_context = context or {}
    error_context["original_error"] = type(error).__name__

    if isinstance(error, UnicodeDecodeError):
        return DocumentParseError(f"Cannot decode document: {error_message}", error_context)

    elif isinstance(error, FileNotFoundError):
        return FatalPipelineError(f"File not found: {error_message}", error_context)

    elif isinstance(error, PermissionError):
        return FatalPipelineError(f"Permission denied: {error_message}", error_context)

    elif isinstance(error, ValueError | TypeError):
        return DocumentParseError(f"Data validation error: {error_message}", error_context)

    else:
        return SBOMIndexError(f"Unexpected error: {error_message}", error_context)


def create_error_context(**kwargs) -> dict[str, Any]:
    """Create error context dictionary with standardized keys.

    Args:
        **kwargs: Context key-value pairs

    Returns:
        Context dictionary
    """
    context = {}

    for key, value in kwargs.items():
        if value is not None:
            context[key] = value

    return context
