# vuln_report/models.py
# Input side: scan findings as produced upstream. Never mutated once loaded.
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SourceInfo:
    path: str
    type: str = ""

    def __str__(self) -> str:
        return f"{self.type}:{self.path}"


@dataclass(frozen=True)
class ImageOrigin:
    layer_id: str
    origin_command: str = ""
    in_base_image: bool = False


@dataclass(frozen=True)
class Package:
    name: str
    version: str
    ecosystem: str
    image_origin: Optional[ImageOrigin] = None


@dataclass(frozen=True)
class Event:
    introduced: Optional[str] = None
    fixed: Optional[str] = None
    last_affected: Optional[str] = None
    limit: Optional[str] = None


@dataclass(frozen=True)
class AffectedRange:
    type: str
    events: tuple[Event, ...] = ()


@dataclass(frozen=True)
class Affected:
    package_name: str
    ecosystem: str
    ranges: tuple[AffectedRange, ...] = ()


@dataclass(frozen=True)
class Vulnerability:
    id: str
    aliases: tuple[str, ...] = ()
    details: str = ""
    summary: str = ""
    affected: tuple[Affected, ...] = ()


@dataclass(frozen=True)
class Group:
    """Aliased vulnerability ids reported as one finding.

    ``called`` is the reachability verdict for the whole group. A group that
    went through no call analysis counts as called.
    """
    ids: tuple[str, ...]
    aliases: tuple[str, ...] = ()
    max_severity: str = ""
    called: bool = True


@dataclass(frozen=True)
class PackageVulns:
    package: Package
    vulnerabilities: tuple[Vulnerability, ...] = ()
    groups: tuple[Group, ...] = ()


@dataclass(frozen=True)
class PackageSource:
    source: SourceInfo
    packages: tuple[PackageVulns, ...] = ()


@dataclass(frozen=True)
class VulnerabilityResults:
    results: tuple[PackageSource, ...] = field(default_factory=tuple)
