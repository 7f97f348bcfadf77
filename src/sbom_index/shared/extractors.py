"""
Field extractors for CycloneDX vulnerability records.

Each function reads one concept out of a loosely shaped vulnerability dict
with an explicit fallback order and never raises on missing or mistyped
fields.
"""

from typing import Any

DEFAULT_TITLE = "Vulnerability"
FIX_RESPONSE = "update"
FIX_MARKER = "*"


def extract_affected_refs(vulnerability: dict[str, Any]) -> list[str]:
    """Return the component refs a vulnerability names in ``affects``.

    Entries are ``{"ref": ...}`` objects; bare string refs are accepted too.
    Empty or malformed entries are dropped.
    """
    affects = vulnerability.get("affects")
    if not isinstance(affects, list):
        return []

    refs = []
    for entry in affects:
        ref = entry.get("ref") if isinstance(entry, dict) else entry
        if isinstance(ref, str) and ref:
            refs.append(ref)
    return refs


def extract_ratings(vulnerability: dict[str, Any]) -> list[Any]:
    """Return ``ratings``, falling back to the legacy ``cvss`` list."""
    for name in ("ratings", "cvss"):
        value = vulnerability.get(name)
        if isinstance(value, list):
            return value
    return []


def extract_advisory_id(vulnerability: dict[str, Any]) -> str | None:
    value = vulnerability.get("id")
    if isinstance(value, str) and value:
        return value
    return None


def extract_title(vulnerability: dict[str, Any], max_length: int = 200) -> str:
    """Truncate the description to ``max_length`` characters for display."""
    description = vulnerability.get("description")
    if isinstance(description, str) and description:
        return description[:max_length]
    return DEFAULT_TITLE


def extract_explicit_severity(vulnerability: dict[str, Any]) -> str | None:
    value = vulnerability.get("severity")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def extract_cwes(vulnerability: dict[str, Any]) -> list[Any]:
    """Return CWE identifiers given either as ``{"id": ...}`` objects or scalars."""
    cwes = vulnerability.get("cwes")
    if not isinstance(cwes, list):
        return []

    identifiers = []
    for entry in cwes:
        value = entry.get("id") if isinstance(entry, dict) else entry
        if isinstance(value, str | int) and not isinstance(value, bool) and value:
            identifiers.append(value)
    return identifiers


def extract_reference_urls(vulnerability: dict[str, Any]) -> list[str]:
    """Return ``references[].url`` values, dropping absent or malformed ones."""
    references = vulnerability.get("references")
    if not isinstance(references, list):
        return []

    urls = []
    for entry in references:
        if not isinstance(entry, dict):
            continue
        url = entry.get("url")
        if isinstance(url, str) and url:
            urls.append(url)
    return urls


def has_fix_available(vulnerability: dict[str, Any]) -> bool:
    """True iff ``analysis.response`` is a list containing ``"update"``.

    Only this strict signal counts as an available fix; free-text
    recommendations are ignored.
    """
    analysis = vulnerability.get("analysis")
    if not isinstance(analysis, dict):
        return False
    response = analysis.get("response")
    return isinstance(response, list) and FIX_RESPONSE in response


def extract_fixed_versions(vulnerability: dict[str, Any]) -> list[str]:
    return [FIX_MARKER] if has_fix_available(vulnerability) else []
