"""
Filtering, sorting and summarizing snapshot findings.

Query parameters usually arrive as untrusted strings (CLI flags, URL query
strings), so ``FindingQuery.from_params`` validates each one and falls back
to a neutral value instead of failing.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..shared.models import SEVERITY_BUCKETS, Finding
from .aggregation import count_severities
from .analytics import fix_availability_rate

SORT_KEYS = ("severityRank", "cvss", "component", "dataset", "id")
NUMERIC_SORT_KEYS = {"severityRank", "cvss"}
SORT_ATTRIBUTES = {
    "severityRank": "severity_rank",
    "cvss": "cvss",
    "component": "component",
    "dataset": "dataset",
    "id": "id",
}
FIX_FILTERS = ("has", "none", "")
MAX_QUERY_LENGTH = 500

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_DATASET_ID = re.compile(r"^[a-zA-Z0-9._-]{1,100}$")


def sanitize_search_query(query: Any) -> str:
    """Strip control characters and cap the length of free-text search."""
    if not isinstance(query, str):
        return ""
    return _CONTROL_CHARS.sub("", query)[:MAX_QUERY_LENGTH].strip()


def validate_severity(severity: Any) -> str:
    upper = str(severity or "").upper()
    return upper if upper in SEVERITY_BUCKETS else ""


def validate_dataset_id(dataset: Any) -> str:
    if isinstance(dataset, str) and _DATASET_ID.match(dataset):
        return dataset
    return ""


def validate_cvss(cvss: Any) -> float:
    """Clamp a CVSS threshold to 0-10; unparsable input becomes 0."""
    try:
        value = float(cvss)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(10.0, value))


def validate_fix_filter(fix: Any) -> str:
    return fix if fix in FIX_FILTERS else ""


def validate_sort_key(key: Any) -> str:
    return key if key in SORT_KEYS else "severityRank"


def validate_sort_dir(direction: Any) -> str:
    return direction if direction in ("asc", "desc") else "desc"


@dataclass
class FindingQuery:
    """Filter and sort criteria over snapshot findings."""

    q: str = ""
    dataset: str = ""
    severity: str = ""
    fix: str = ""
    cvss_min: float = 0.0
    sort_key: str = "severityRank"
    sort_dir: str = "desc"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "FindingQuery":
        """Build a query from untrusted parameters, validating each one."""
        return cls(
            q=sanitize_search_query(params.get("q", "")),
            dataset=validate_dataset_id(params.get("dataset", "")),
            severity=validate_severity(params.get("severity", "")),
            fix=validate_fix_filter(params.get("fix", "")),
            cvss_min=validate_cvss(params.get("cvssMin", params.get("cvss_min", 0))),
            sort_key=validate_sort_key(params.get("sortKey", params.get("sort_key"))),
            sort_dir=validate_sort_dir(params.get("sortDir", params.get("sort_dir"))),
        )

    def matches(self, finding: Finding) -> bool:
        if self.dataset and finding.dataset != self.dataset:
            return False
        if self.severity and finding.severity.value != self.severity:
            return False
        if self.cvss_min and (finding.cvss if finding.cvss is not None else -1) < self.cvss_min:
            return False
        if self.fix == "has" and not finding.has_fix:
            return False
        if self.fix == "none" and finding.has_fix:
            return False

        needle = self.q.strip().lower()
        if needle:
            haystack = " ".join(
                [
                    finding.component or "",
                    finding.purl or "",
                    finding.id or "",
                    " ".join(finding.licenses),
                    finding.dataset or "",
                ]
            ).lower()
            if needle not in haystack:
                return False
        return True


def _sort_value(finding: Finding, sort_key: str) -> Any:
    value = getattr(finding, SORT_ATTRIBUTES[sort_key])
    if sort_key in NUMERIC_SORT_KEYS:
        return value if value is not None else -1
    return (value or "").casefold()


def sort_findings(
    findings: Iterable[Finding], sort_key: str = "severityRank", sort_dir: str = "desc"
) -> list[Finding]:
    """Stable sort by one of ``SORT_KEYS``; missing values sort lowest."""
    sort_key = validate_sort_key(sort_key)
    return sorted(
        findings,
        key=lambda finding: _sort_value(finding, sort_key),
        reverse=validate_sort_dir(sort_dir) == "desc",
    )


def filter_findings(findings: Iterable[Finding], query: FindingQuery) -> list[Finding]:
    """Apply a query's filters, then its sort order."""
    matching = [finding for finding in findings if query.matches(finding)]
    return sort_findings(matching, query.sort_key, query.sort_dir)


def summarize_findings(findings: Sequence[Finding]) -> dict[str, Any]:
    """Severity histogram, fix rate and total for a (filtered) set of findings."""
    return {
        "severityCounts": count_severities(findings),
        "fixRate": fix_availability_rate(findings),
        "total": len(findings),
    }
