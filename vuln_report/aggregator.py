# vuln_report/aggregator.py
"""
Folds scan findings into a Report.

    findings -> group deduplication -> per-package results
             -> per-source results -> ecosystem buckets + grand total

Nothing here performs I/O or raises for a single bad finding: version problems
degrade the finding to UNFIXED, unknown severities rate as UNKNOWN and
findings without a registered group are dropped, logged and counted.
"""

import logging
from typing import Iterable, Optional

from . import severity
from .config import Settings
from .fixes import UNFIXED, resolve_fix, resolve_max_fix
from .grouping import GroupIndex
from .models import PackageSource, PackageVulns, VulnerabilityResults
from .results import (
    EcosystemResult, PackageResult, Report, SourceResult, VulnCount, VulnResult, VulnSummary,
)

logger = logging.getLogger(__name__)


def build_vuln_results(vuln_pkg: PackageVulns) -> list[VulnResult]:
    """One VulnResult per vulnerability of a package, with its fix version resolved."""
    package = vuln_pkg.package
    vuln_results = []
    for vuln in vuln_pkg.vulnerabilities:
        detail = {
            "aliases": ", ".join(vuln.aliases),
            "description": vuln.details,
        }
        if package.image_origin is not None:
            detail["layerCommand"] = package.image_origin.origin_command
            detail["layerId"] = package.image_origin.layer_id
            detail["inBaseImage"] = "true" if package.image_origin.in_base_image else "false"

        fixed_version = resolve_fix(vuln.affected, package.version, package.name, package.ecosystem)
        vuln_results.append(VulnResult(
            summary=VulnSummary(
                id=vuln.id,
                package_name=package.name,
                installed_version=package.version,
                fixed_version=fixed_version,
            ),
            detail=detail,
        ))
    return vuln_results


def build_package_results(vuln_results: Iterable[VulnResult], index: GroupIndex, ecosystem: str) -> tuple[list[PackageResult], int, int]:
    """
    Splits representative findings into called and uncalled per package.

    Returns the package results (first-seen order), the number of alias
    findings merged into a representative and the number of findings dropped
    because no group lists their id.
    """
    package_results: dict[str, PackageResult] = {}
    merged = 0
    unregistered = 0

    for vuln in vuln_results:
        vuln_id = vuln.summary.id
        group = index.representatives.get(vuln_id)
        if group is None:
            if index.is_alias(vuln_id):
                merged += 1
            else:
                unregistered += 1
                logger.warning(f"Dropping {vuln_id} for {vuln.summary.package_name}: no vulnerability group lists it")
            continue

        if len(group.ids) > 1:
            vuln.detail["groupIds"] = ", ".join(group.ids[1:])

        package_name = vuln.summary.package_name
        package_result = package_results.get(package_name)
        if package_result is None:
            package_result = PackageResult(name=package_name)
            package_results[package_name] = package_result

        vuln.summary.severity_score = group.max_severity
        vuln.summary.severity_rating, _ = severity.calculate_rating(group.max_severity)

        if vuln_id in index.uncalled_ids:
            package_result.uncalled_vulns.append(vuln)
            package_result.count.uncalled = len(package_result.uncalled_vulns)
            continue

        package_result.called_vulns.append(vuln)
        package_result.count.called = len(package_result.called_vulns)
        package_result.count.add_severity(vuln.summary.severity_rating)
        if vuln.summary.fixed_version == UNFIXED:
            package_result.count.unfixed += 1
        else:
            package_result.count.fixed += 1

    for package_result in package_results.values():
        # Uncalled-only packages carry no fix recommendation
        if package_result.called_vulns:
            package_result.installed_version = package_result.called_vulns[0].summary.installed_version
            package_result.fixed_version = resolve_max_fix(
                ecosystem, (v.summary.fixed_version for v in package_result.called_vulns))

    return list(package_results.values()), merged, unregistered


def build_source_result(package_source: PackageSource) -> SourceResult:
    """Aggregates one scanned source (lockfile, image, SBOM)."""
    index = GroupIndex()
    all_vulns: list[VulnResult] = []
    ecosystem = ""

    for vuln_pkg in package_source.packages:
        # Sources are single-ecosystem; the first package decides
        if not ecosystem:
            ecosystem = vuln_pkg.package.ecosystem
        index.register(vuln_pkg.package.name, vuln_pkg.groups)
        all_vulns.extend(build_vuln_results(vuln_pkg))

    package_results, merged, unregistered = build_package_results(all_vulns, index, ecosystem)
    count = VulnCount()
    for package_result in package_results:
        package_result.ecosystem = ecosystem
        package_result.source = package_source.source.path
        count.add(package_result.count)

    return SourceResult(
        source=str(package_source.source),
        ecosystem=ecosystem,
        package_results=package_results,
        package_count=index.package_count,
        count=count,
        merged=merged,
        unregistered=unregistered,
    )


def is_os_image(ecosystem: str, prefixes: Iterable[str]) -> bool:
    return any(ecosystem.startswith(prefix) for prefix in prefixes)


def order_ecosystems(ecosystem_map: dict[str, list[SourceResult]], os_image_prefixes: Iterable[str]) -> list[EcosystemResult]:
    """Language ecosystems first, OS/base-image ecosystems last, each in first-seen order."""
    prefixes = tuple(os_image_prefixes)
    ecosystem_results = []
    os_results = []
    for ecosystem, sources in ecosystem_map.items():
        ecosystem_result = EcosystemResult(ecosystem=ecosystem, sources=sources)
        if is_os_image(ecosystem, prefixes):
            os_results.append(ecosystem_result)
        else:
            ecosystem_results.append(ecosystem_result)
    return ecosystem_results + os_results


def build_report(vuln_results: VulnerabilityResults, settings: Optional[Settings] = None) -> Report:
    settings = settings or Settings()
    ecosystem_map: dict[str, list[SourceResult]] = {}
    report = Report()

    for package_source in vuln_results.results:
        source_name = str(package_source.source)
        if any(fragment in source_name for fragment in settings.excluded_source_fragments):
            logger.debug(f"Skipping excluded source {source_name}")
            continue

        source_result = build_source_result(package_source)
        ecosystem_map.setdefault(source_result.ecosystem, []).append(source_result)
        report.count.add(source_result.count)
        report.unregistered += source_result.unregistered

    report.ecosystem_results = order_ecosystems(ecosystem_map, settings.os_image_prefixes)
    logger.info(f"Built report for {sum(len(s) for s in ecosystem_map.values())} sources "
                f"across {len(ecosystem_map)} ecosystems")
    return report
