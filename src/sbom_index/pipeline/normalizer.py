"""
Vulnerability normalization: CycloneDX vulnerability records to flat findings.
"""

import logging
from typing import Any

from ..shared.component_utils import (
    ComponentNormalizer,
    build_component_index,
    extract_license_names,
    guess_component_by_ref,
)
from ..shared.cvss_utils import CVSSRatingHandler, normalize_severity, resolve_severity_rank
from ..shared.exceptions import RecordError, create_error_context
from ..shared.extractors import (
    extract_advisory_id,
    extract_affected_refs,
    extract_cwes,
    extract_explicit_severity,
    extract_fixed_versions,
    extract_ratings,
    extract_reference_urls,
    extract_title,
)
from ..shared.models import Diagnostic, Finding, PipelineConfig, SeverityLevel


class VulnerabilityNormalizer:
    """Fans each vulnerability out into one finding per affected component."""

    def __init__(self, config: PipelineConfig | None = None):
        """Initialize the normalizer.

        Args:
            config: Pipeline configuration (title length, fuzzy matching)
        """
        self.config = config or PipelineConfig()
        self.logger = logging.getLogger(__name__)

    def normalize(
        self,
        document: dict[str, Any],
        dataset_id: str,
        location: str | None = None,
    ) -> tuple[list[Finding], list[Diagnostic]]:
        """Normalize every vulnerability of one document.

        A malformed record is skipped with a diagnostic; the rest of the
        document is still processed.

        Args:
            document: Decoded CycloneDX document
            dataset_id: Dataset the document belongs to
            location: Document identifier used in diagnostics

        Returns:
            Tuple of (findings in input order, diagnostics)
        """
        diagnostics: list[Diagnostic] = []

        skipped_components: list[int] = []
        index = build_component_index(document.get("components"), skipped=skipped_components)
        for position in skipped_components:
            diagnostics.append(
                self._record_diagnostic(
                    RecordError(
                        "Invalid component entry: not an object",
                        create_error_context(kind="component"),
                    ),
                    dataset_id,
                    location,
                    position,
                )
            )

        vulnerabilities = document.get("vulnerabilities")
        if not isinstance(vulnerabilities, list):
            vulnerabilities = []

        findings: list[Finding] = []
        for position, vulnerability in enumerate(vulnerabilities):
            try:
                findings.extend(self.normalize_record(vulnerability, dataset_id, index))
            except RecordError as e:
                diagnostics.append(self._record_diagnostic(e, dataset_id, location, position))
            except (TypeError, ValueError, AttributeError, ArithmeticError) as e:
                error = RecordError(
                    f"Failed to process vulnerability: {e}",
                    create_error_context(kind="vulnerability", original_error=type(e).__name__),
                )
                diagnostics.append(self._record_diagnostic(error, dataset_id, location, position))

        return findings, diagnostics

    def normalize_record(
        self,
        vulnerability: Any,
        dataset_id: str,
        index: dict[str, dict[str, Any]],
    ) -> list[Finding]:
        """Produce ``max(1, len(affects))`` findings for one vulnerability.

        Args:
            vulnerability: One entry of the document's ``vulnerabilities``
            dataset_id: Dataset the document belongs to
            index: Component index of the document

        Returns:
            Findings for this vulnerability

        Raises:
            RecordError: If the entry is not an object
        """
        if not isinstance(vulnerability, dict):
            raise RecordError(
                "Invalid vulnerability entry: not an object",
                create_error_context(kind="vulnerability", type=type(vulnerability).__name__),
            )

        refs = extract_affected_refs(vulnerability)
        rating = CVSSRatingHandler.pick_best_rating(extract_ratings(vulnerability))
        severity = self.resolve_severity(vulnerability, rating.severity if rating else None)

        shared = {
            "dataset": dataset_id,
            "id": extract_advisory_id(vulnerability),
            "title": extract_title(vulnerability, self.config.title_max_length),
            "severity": severity,
            "severity_rank": resolve_severity_rank(severity),
            "cvss": rating.score if rating else None,
            "cwes": extract_cwes(vulnerability),
            "urls": extract_reference_urls(vulnerability),
            "fixed_versions": extract_fixed_versions(vulnerability),
        }

        targets: list[str | None] = list(refs) if refs else [None]
        findings = []
        for ref in targets:
            component = self._resolve_component(index, ref)
            findings.append(
                Finding(
                    component=ComponentNormalizer.text_field(component, "name"),
                    version=ComponentNormalizer.text_field(component, "version"),
                    purl=ComponentNormalizer.text_field(component, "purl"),
                    licenses=extract_license_names(component.get("licenses")),
                    direct=ComponentNormalizer.is_direct(component),
                    # Lists are copied so findings of one vulnerability stay independent
                    **{
                        key: list(value) if isinstance(value, list) else value
                        for key, value in shared.items()
                    },
                )
            )
        return findings

    @staticmethod
    def resolve_severity(vulnerability: dict[str, Any], rating_severity: str | None) -> SeverityLevel:
        """Explicit severity first, then the best rating's, else UNKNOWN."""
        explicit = extract_explicit_severity(vulnerability)
        return normalize_severity((explicit or rating_severity or "UNKNOWN").upper())

    def _resolve_component(
        self, index: dict[str, dict[str, Any]], ref: str | None
    ) -> dict[str, Any]:
        """Look up the component a ref names; dangling refs degrade to {}."""
        if ref is None:
            return {}

        component = index.get(ref)
        if component is None and self.config.fuzzy_component_match:
            component = guess_component_by_ref(index, ref)
        if component is None:
            self.logger.debug(f"Unresolved component ref: {ref}")
            return {}
        return component

    def _record_diagnostic(
        self,
        error: RecordError,
        dataset_id: str,
        location: str | None,
        position: int,
    ) -> Diagnostic:
        where = location or dataset_id
        self.logger.warning(f"Skipping record {position} in {where}: {error.message}")
        return Diagnostic(
            message=error.message,
            level="warning",
            dataset=dataset_id,
            document=location,
            index=position,
            error=type(error).__name__,
        )
