# vuln_report/results.py
# Output side: the render-ready report. Built in one pass by aggregator.py.
from dataclasses import dataclass, field, fields

from . import severity


@dataclass
class VulnCount:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    unknown: int = 0
    called: int = 0
    uncalled: int = 0
    fixed: int = 0
    unfixed: int = 0

    def add(self, other: "VulnCount") -> None:
        """Field-wise addition of another count into this one."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def add_severity(self, rating: str) -> None:
        if rating == severity.CRITICAL:
            self.critical += 1
        elif rating == severity.HIGH:
            self.high += 1
        elif rating == severity.MEDIUM:
            self.medium += 1
        elif rating == severity.LOW:
            self.low += 1
        elif rating == severity.UNKNOWN:
            self.unknown += 1

    @property
    def severity_total(self) -> int:
        return self.critical + self.high + self.medium + self.low + self.unknown

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "unknown": self.unknown,
            "called": self.called,
            "uncalled": self.uncalled,
            "fixed": self.fixed,
            "unfixed": self.unfixed,
        }


@dataclass
class VulnSummary:
    id: str
    package_name: str
    installed_version: str
    fixed_version: str
    severity_rating: str = ""
    severity_score: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "packageName": self.package_name,
            "installedVersion": self.installed_version,
            "fixedVersion": self.fixed_version,
            "severityRating": self.severity_rating,
            "severityScore": self.severity_score,
        }


@dataclass
class VulnResult:
    summary: VulnSummary
    detail: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {"summary": self.summary.to_dict(), "detail": dict(self.detail)}


@dataclass
class PackageResult:
    name: str
    ecosystem: str = ""
    source: str = ""
    called_vulns: list[VulnResult] = field(default_factory=list)
    uncalled_vulns: list[VulnResult] = field(default_factory=list)
    installed_version: str = ""
    fixed_version: str = ""
    count: VulnCount = field(default_factory=VulnCount)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "ecosystem": self.ecosystem,
            "source": self.source,
            "calledVulns": [v.to_dict() for v in self.called_vulns],
            "uncalledVulns": [v.to_dict() for v in self.uncalled_vulns],
            "installedVersion": self.installed_version,
            "fixedVersion": self.fixed_version,
            "count": self.count.to_dict(),
        }


@dataclass
class SourceResult:
    source: str
    ecosystem: str
    package_results: list[PackageResult] = field(default_factory=list)
    package_count: tuple[int, int] = (0, 0) # (called, uncalled) distinct package names
    count: VulnCount = field(default_factory=VulnCount)
    merged: int = 0 # alias findings folded into their group's representative
    unregistered: int = 0 # findings dropped because no group lists their id

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "ecosystem": self.ecosystem,
            "packageResults": [p.to_dict() for p in self.package_results],
            "packageCount": {"called": self.package_count[0], "uncalled": self.package_count[1]},
            "count": self.count.to_dict(),
            "merged": self.merged,
            "unregistered": self.unregistered,
        }


@dataclass
class EcosystemResult:
    ecosystem: str
    sources: list[SourceResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "ecosystem": self.ecosystem,
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass
class Report:
    ecosystem_results: list[EcosystemResult] = field(default_factory=list)
    count: VulnCount = field(default_factory=VulnCount)
    unregistered: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "ecosystemResults": [e.to_dict() for e in self.ecosystem_results],
            "count": self.count.to_dict(),
            "unregistered": self.unregistered,
        }
