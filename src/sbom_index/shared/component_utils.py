"""
Component utilities for resolving vulnerability targets inside one SBOM.

Components are kept as the raw CycloneDX dictionaries; these helpers only
decide how to key them and how to read the few fields findings need.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Component scopes that mark a dependency as not directly required
INDIRECT_SCOPES = {"optional", "transitive"}


class ComponentNormalizer:
    """Handles component identity keys and tolerant field access."""

    @staticmethod
    def normalize_name(component_name: Any) -> str:
        """Normalize component name for case-insensitive comparison.

        Args:
            component_name: Original component name

        Returns:
            Normalized component name (lowercase, stripped)
        """
        if not isinstance(component_name, str) or not component_name:
            return ""
        return component_name.lower().strip()

    @staticmethod
    def identity_key(component: dict[str, Any]) -> str:
        """Compute the key a vulnerability's ``affects`` entries refer to.

        First non-empty of ``bom-ref``, ``bomRef``, ``purl``; otherwise a
        synthesized ``name@version``.

        Args:
            component: Component dictionary

        Returns:
            Identity key, only meaningful within one document
        """
        for name in ("bom-ref", "bomRef", "purl"):
            value = component.get(name)
            if isinstance(value, str) and value:
                return value

        name = component.get("name") or "component"
        version = component.get("version") or ""
        return f"{name}@{version}"

    @staticmethod
    def text_field(component: dict[str, Any], name: str) -> str | None:
        """Return a non-empty string field or None."""
        value = component.get(name)
        if isinstance(value, str) and value:
            return value
        return None

    @staticmethod
    def is_direct(component: dict[str, Any]) -> bool:
        """A component is direct unless its scope says optional or transitive."""
        scope = component.get("scope")
        if not isinstance(scope, str):
            return True
        return scope.lower() not in INDIRECT_SCOPES


def build_component_index(
    components: Any, skipped: list[int] | None = None
) -> dict[str, dict[str, Any]]:
    """Build a lookup table of a document's components keyed by identity key.

    Later entries with a colliding key overwrite earlier ones.

    Args:
        components: The document's ``components`` value
        skipped: Optional list collecting indexes of non-object entries

    Returns:
        Mapping of identity key to component dictionary
    """
    index: dict[str, dict[str, Any]] = {}
    if not isinstance(components, list):
        return index

    for position, component in enumerate(components):
        if not isinstance(component, dict):
            if skipped is not None:
                skipped.append(position)
            continue
        index[ComponentNormalizer.identity_key(component)] = component

    return index


def extract_license_names(licenses: Any) -> list[str]:
    """Extract license identifiers in declaration order.

    Each entry contributes ``license.id``, else ``license.name``, else its SPDX
    ``expression``. Entries contributing nothing are skipped; duplicates stay.

    Args:
        licenses: CycloneDX ``licenses`` list of a component

    Returns:
        License names, possibly empty
    """
    if not isinstance(licenses, list):
        return []

    names = []
    for entry in licenses:
        if not isinstance(entry, dict):
            continue

        candidates = []
        license_data = entry.get("license")
        if isinstance(license_data, dict):
            candidates.extend([license_data.get("id"), license_data.get("name")])
        candidates.append(entry.get("expression"))

        for value in candidates:
            if isinstance(value, str) and value:
                names.append(value)
                break

    return names


def guess_component_by_ref(
    index: dict[str, dict[str, Any]], ref: str
) -> dict[str, Any] | None:
    """Guess a component for a dangling ref by substring-matching names.

    This is an opt-in enhancement (``PipelineConfig.fuzzy_component_match``):
    the ref is lowercased and the first component whose normalized name occurs
    in it wins. Exact lookups must be tried first.

    Args:
        index: Component index of the document
        ref: Reference that did not resolve exactly

    Returns:
        Guessed component or None
    """
    needle = ComponentNormalizer.normalize_name(ref)
    if not needle:
        return None

    for component in index.values():
        name = ComponentNormalizer.normalize_name(component.get("name"))
        if name and name in needle:
            logger.debug(f"Guessed component '{name}' for unresolved ref '{ref}'")
            return component

    return None
