"""
Severity and CVSS rating utilities for consistent finding normalization.
"""

import math
from typing import Any

from .models import Rating, SeverityLevel

# Fixed rank table; anything not listed ranks 0
SEVERITY_RANKS = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
    "info": 0,
    "none": 0,
    "unknown": 0,
}

# Scanner-specific spellings folded into the closed enumeration
SEVERITY_ALIASES = {
    "NONE": SeverityLevel.INFO,
    "NEGLIGIBLE": SeverityLevel.INFO,
    "INFORMATIONAL": SeverityLevel.INFO,
    "MODERATE": SeverityLevel.MEDIUM,
    "IMPORTANT": SeverityLevel.HIGH,
}


def resolve_severity_rank(severity: Any) -> int:
    """Map a severity string to its numeric rank (critical=4 ... info/unknown=0).

    Lookup is case-insensitive and never fails; unrecognized or empty input
    ranks 0.
    """
    if isinstance(severity, SeverityLevel):
        severity = severity.value
    if not isinstance(severity, str):
        return 0
    return SEVERITY_RANKS.get(severity.strip().lower(), 0)


def normalize_severity(value: Any) -> SeverityLevel:
    """Normalize free-text severity into the closed ``SeverityLevel`` set."""
    if isinstance(value, SeverityLevel):
        return value
    if not isinstance(value, str) or not value.strip():
        return SeverityLevel.UNKNOWN

    upper = value.strip().upper()
    if upper in SeverityLevel.__members__:
        return SeverityLevel(upper)
    return SEVERITY_ALIASES.get(upper, SeverityLevel.UNKNOWN)


class CVSSRatingHandler:
    """Selects the most alarming rating among the ones a scanner reported."""

    SCORE_FIELDS = ("score", "baseScore")
    SEVERITY_FIELDS = ("severity", "baseSeverity")
    METHOD_FIELDS = ("method", "source")

    @classmethod
    def pick_best_rating(cls, ratings: Any) -> Rating | None:
        """
        Pick the rating with the highest score from a list of rating objects.

        A rating is a candidate when it carries a numeric score or a severity
        string. Candidates without a score compare as 0 and ties keep the
        first one seen, so the choice is deterministic.

        Args:
            ratings: List of CycloneDX ``ratings`` (or legacy ``cvss``) entries

        Returns:
            Rating with uppercased severity, or None when nothing is usable
        """
        if not isinstance(ratings, list):
            return None

        best: Rating | None = None
        for entry in ratings:
            if not isinstance(entry, dict):
                continue

            score = cls._extract_score(entry)
            severity = cls._extract_severity(entry)
            if score is None and not severity:
                continue

            candidate = Rating(
                score=score,
                severity=(severity or "").upper(),
                method=cls._extract_method(entry),
            )
            if best is None or (candidate.score or 0.0) > (best.score or 0.0):
                best = candidate

        return best

    @classmethod
    def _extract_score(cls, data: dict[str, Any]) -> float | None:
        """Extract a CVSS score in the 0-10 range."""
        for name in cls.SCORE_FIELDS:
            value = data.get(name)
            if value is None or isinstance(value, bool):
                continue
            try:
                score = float(value)
            except (ValueError, TypeError, OverflowError):
                continue
            if math.isfinite(score) and 0.0 <= score <= 10.0:
                return score
        return None

    @classmethod
    def _extract_severity(cls, data: dict[str, Any]) -> str | None:
        for name in cls.SEVERITY_FIELDS:
            value = data.get(name)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    @classmethod
    def _extract_method(cls, data: dict[str, Any]) -> str | None:
        """Extract the scoring method; CycloneDX ``source`` may be an object."""
        for name in cls.METHOD_FIELDS:
            value = data.get(name)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("name"), str) and value["name"]:
                return value["name"]
        return None
