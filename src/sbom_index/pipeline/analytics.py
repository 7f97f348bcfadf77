"""
Cross-dataset analytics: fix availability and top CVE rankings.
"""

import math
import re
from collections.abc import Sequence

from ..shared.models import Finding, TopCVE

CVE_PATTERN = re.compile(r"CVE-\d{4}-\d{4,}", re.ASCII)
DEFAULT_TOP_LIMIT = 10


def is_cve_id(value: object) -> bool:
    return isinstance(value, str) and CVE_PATTERN.fullmatch(value) is not None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fix_availability_rate(findings: Sequence[Finding]) -> int:
    """Percentage (0-100, rounded half up) of findings with an available fix.

    Returns 0 for an empty sequence.
    """
    if not findings:
        return 0
    with_fix = sum(1 for finding in findings if finding.has_fix)
    return _round_half_up(100 * with_fix / len(findings))


def build_top_cves(findings: Sequence[Finding], limit: int = DEFAULT_TOP_LIMIT) -> list[TopCVE]:
    """Rank CVE identifiers by worst severity, then occurrences, then max CVSS.

    Only ids shaped like ``CVE-YYYY-NNNN`` take part; other advisory ids
    are left out of this ranking. Entries tied on all three keys keep the
    order in which their id was first seen.

    Args:
        findings: Findings across all datasets
        limit: Maximum number of entries returned

    Returns:
        Ranked TopCVE entries
    """
    groups: dict[str, TopCVE] = {}
    datasets: dict[str, set[str]] = {}

    for finding in findings:
        if not is_cve_id(finding.id):
            continue
        cve_id = finding.id
        entry = groups.get(cve_id)
        if entry is None:
            entry = groups[cve_id] = TopCVE(id=cve_id)
            datasets[cve_id] = set()

        entry.count += 1
        datasets[cve_id].add(finding.dataset)
        if finding.cvss is not None:
            entry.max_cvss = finding.cvss if entry.max_cvss is None else max(entry.max_cvss, finding.cvss)
        entry.worst_severity_rank = max(entry.worst_severity_rank, finding.severity_rank)

    for cve_id, entry in groups.items():
        entry.datasets = sorted(datasets[cve_id])

    ranked = sorted(
        groups.values(),
        key=lambda entry: (
            -entry.worst_severity_rank,
            -entry.count,
            -(entry.max_cvss or 0.0),
        ),
    )
    return ranked[:limit]
