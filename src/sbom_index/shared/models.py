"""
Core data models for SBOM index using simple dataclasses.

Models keep Python attribute names internally and serialize to the camelCase
field names consumed by the dashboard through ``to_dict``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class SeverityLevel(str, Enum):
    """Normalized severity buckets for findings."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"
    UNKNOWN = "UNKNOWN"


# Bucket order used for every severity histogram
SEVERITY_BUCKETS: tuple[str, ...] = tuple(level.value for level in SeverityLevel)


def empty_severity_counts() -> dict[str, int]:
    """Return a histogram with every severity bucket set to zero."""
    return {bucket: 0 for bucket in SEVERITY_BUCKETS}


@dataclass
class PipelineConfig:
    """Configuration for snapshot building."""

    title_max_length: int = 200
    top_cve_limit: int = 10
    fuzzy_component_match: bool = False  # Opt-in ref guessing for dangling affects


@dataclass
class OutputConfig:
    """Configuration for persisted snapshot and companion stores."""

    output_dir: Path
    snapshot_name: str = "sbom-index.json"
    history_name: str = "history.json"
    tracker_name: str = "tracker.json"
    history_limit: int = 50
    tracker_max_entries: int = 12000
    tracker_keep_closed: int = 5000


@dataclass
class DocumentSource:
    """One CycloneDX document handed over by a discovery collaborator."""

    dataset_id: str
    content: bytes | str | Mapping[str, Any]
    location: str | None = None


@dataclass
class Rating:
    """Best rating picked from a vulnerability's ratings list."""

    score: float | None = None
    severity: str = ""
    method: str | None = None


@dataclass
class Finding:
    """One vulnerability attributed to one (or no) component."""

    dataset: str
    id: str | None = None
    title: str = "Vulnerability"
    severity: SeverityLevel = SeverityLevel.UNKNOWN
    severity_rank: int = 0
    cvss: float | None = None
    component: str | None = None
    version: str | None = None
    purl: str | None = None
    licenses: list[str] = field(default_factory=list)
    direct: bool = True
    cwes: list[Any] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    fixed_versions: list[str] = field(default_factory=list)

    @property
    def has_fix(self) -> bool:
        return bool(self.fixed_versions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dataset": self.dataset,
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "severityRank": self.severity_rank,
            "cvss": self.cvss,
            "component": self.component,
            "version": self.version,
            "purl": self.purl,
            "licenses": list(self.licenses),
            "direct": self.direct,
            "cwes": list(self.cwes),
            "urls": list(self.urls),
            "fixedVersions": list(self.fixed_versions),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        severity = str(data.get("severity") or SeverityLevel.UNKNOWN.value).upper()
        return cls(
            dataset=str(data.get("dataset") or ""),
            id=data.get("id"),
            title=data.get("title") or "Vulnerability",
            severity=SeverityLevel(severity)
            if severity in SEVERITY_BUCKETS
            else SeverityLevel.UNKNOWN,
            severity_rank=int(data.get("severityRank") or 0),
            cvss=data.get("cvss"),
            component=data.get("component"),
            version=data.get("version"),
            purl=data.get("purl"),
            licenses=list(data.get("licenses") or []),
            direct=bool(data.get("direct", True)),
            cwes=list(data.get("cwes") or []),
            urls=list(data.get("urls") or []),
            fixed_versions=list(data.get("fixedVersions") or []),
        )


@dataclass
class DatasetSummary:
    """Per-dataset counts shown in the dashboard header."""

    id: str
    created: str | None = None
    components: int = 0
    vulnerabilities: int = 0
    severity_counts: dict[str, int] = field(default_factory=empty_severity_counts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created": self.created,
            "components": self.components,
            "vulnerabilities": self.vulnerabilities,
            "severityCounts": dict(self.severity_counts),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DatasetSummary":
        counts = empty_severity_counts()
        counts.update(data.get("severityCounts") or {})
        return cls(
            id=str(data.get("id") or ""),
            created=data.get("created"),
            components=int(data.get("components") or 0),
            vulnerabilities=int(data.get("vulnerabilities") or 0),
            severity_counts=counts,
        )


@dataclass
class TopCVE:
    """Aggregated occurrence statistics for a single CVE identifier."""

    id: str
    count: int = 0
    datasets: list[str] = field(default_factory=list)
    max_cvss: float | None = None
    worst_severity_rank: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "count": self.count,
            "datasets": list(self.datasets),
            "maxCVSS": self.max_cvss,
            "worstSeverityRank": self.worst_severity_rank,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TopCVE":
        return cls(
            id=str(data.get("id") or ""),
            count=int(data.get("count") or 0),
            datasets=list(data.get("datasets") or []),
            max_cvss=data.get("maxCVSS"),
            worst_severity_rank=int(data.get("worstSeverityRank", -1)),
        )


@dataclass
class OverallSummary:
    total: int = 0
    severity_counts: dict[str, int] = field(default_factory=empty_severity_counts)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "severityCounts": dict(self.severity_counts)}


@dataclass
class SnapshotMetrics:
    fix_availability_rate: int = 0
    top_cves: list[TopCVE] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixAvailabilityRate": self.fix_availability_rate,
            "topCVEs": [entry.to_dict() for entry in self.top_cves],
        }


@dataclass
class Snapshot:
    """Final artifact handed to the dashboard."""

    generated_at: str
    datasets: list[DatasetSummary] = field(default_factory=list)
    items: list[Finding] = field(default_factory=list)
    overall: OverallSummary = field(default_factory=OverallSummary)
    metrics: SnapshotMetrics = field(default_factory=SnapshotMetrics)

    @property
    def is_empty(self) -> bool:
        """True when no findings were produced, with or without datasets."""
        return self.overall.total == 0 and not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "datasets": [summary.to_dict() for summary in self.datasets],
            "items": [finding.to_dict() for finding in self.items],
            "overall": self.overall.to_dict(),
            "metrics": self.metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        """Load a previously written snapshot, tolerating missing sections."""
        overall_data = data.get("overall") or {}
        metrics_data = data.get("metrics") or {}

        overall_counts = empty_severity_counts()
        overall_counts.update(overall_data.get("severityCounts") or {})

        return cls(
            generated_at=str(data.get("generatedAt") or ""),
            datasets=[
                DatasetSummary.from_dict(entry)
                for entry in data.get("datasets") or []
                if isinstance(entry, Mapping)
            ],
            items=[
                Finding.from_dict(entry)
                for entry in data.get("items") or []
                if isinstance(entry, Mapping)
            ],
            overall=OverallSummary(
                total=int(overall_data.get("total") or 0),
                severity_counts=overall_counts,
            ),
            metrics=SnapshotMetrics(
                fix_availability_rate=int(metrics_data.get("fixAvailabilityRate") or 0),
                top_cves=[
                    TopCVE.from_dict(entry)
                    for entry in metrics_data.get("topCVEs") or []
                    if isinstance(entry, Mapping)
                ],
            ),
        )


@dataclass
class Diagnostic:
    """A skipped document or record, kept for post-hoc debugging."""

    message: str
    level: str = "warning"
    dataset: str | None = None
    document: str | None = None
    index: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "message": self.message,
            "dataset": self.dataset,
            "document": self.document,
            "index": self.index,
            "error": self.error,
        }


@dataclass
class DatasetResult:
    """Output of aggregating one document (or several merged ones)."""

    summary: DatasetSummary
    findings: list[Finding] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class PipelineResult:
    """Snapshot plus the diagnostics collected while building it."""

    snapshot: Snapshot
    diagnostics: list[Diagnostic] = field(default_factory=list)
    documents_seen: int = 0
    documents_processed: int = 0

    @property
    def is_empty(self) -> bool:
        return self.snapshot.is_empty

    @property
    def documents_failed(self) -> int:
        return self.documents_seen - self.documents_processed

    @property
    def all_documents_failed(self) -> bool:
        return self.documents_seen > 0 and self.documents_processed == 0
