# vuln_report/render.py
"""
Read-only helpers for consumers of a Report, plus plain text and JSON output.
Nothing here recomputes counts or fix versions; it only walks the Report.
"""

import json
from typing import Iterable

from .results import EcosystemResult, PackageResult, Report, VulnCount, VulnResult

IMPORTANT_DETAIL_KEYS = ("groupIds", "aliases")


def get_all_vulns(package_results: Iterable[PackageResult], called: bool) -> list[VulnResult]:
    results = []
    for package_result in package_results:
        results.extend(package_result.called_vulns if called else package_result.uncalled_vulns)
    return results


def get_all_package_results(ecosystem_results: Iterable[EcosystemResult]) -> list[PackageResult]:
    results = []
    for ecosystem_result in ecosystem_results:
        for source_result in ecosystem_result.sources:
            results.extend(source_result.package_results)
    return results


def format_severity_count(count: VulnCount) -> str:
    return (f"CRITICAL: {count.critical}, HIGH: {count.high}, MEDIUM: {count.medium}, "
            f"LOW: {count.low}, UNKNOWN: {count.unknown}")


def format_severity_count_short(count: VulnCount) -> str:
    return f"{count.critical} C, {count.high} H, {count.medium} M, {count.low} L, {count.unknown} U"


def important_detail_lines(detail: dict[str, str]) -> list[str]:
    lines = []
    if "groupIds" in detail:
        lines.append(f"Group IDs: {detail['groupIds']}")
    if "aliases" in detail:
        lines.append(f"Aliases: {detail['aliases']}")
    return lines


def vuln_detail_lines(detail: dict[str, str]) -> list[str]:
    """Every detail except group ids and aliases, with the description last."""
    lines = [
        f"{key}: {value}" for key, value in detail.items()
        if key not in IMPORTANT_DETAIL_KEYS and key != "description"
    ]
    if "description" in detail:
        lines.append(f"Description: {detail['description']}")
    return lines


def render_text(report: Report) -> str:
    lines = ["--- Vulnerability Report ---"]
    total = report.count
    if total.called + total.uncalled == 0:
        lines.append("No vulnerabilities found.")
    else:
        lines.append(f"Total: {total.called + total.uncalled} vulnerabilities "
                     f"({total.called} called, {total.uncalled} uncalled)")
        lines.append(f"Severity of called: {format_severity_count(total)}")
        lines.append(f"Fix available: {total.fixed}, no fix available: {total.unfixed}")

    for ecosystem_result in report.ecosystem_results:
        lines.append("")
        lines.append(f"== {ecosystem_result.ecosystem or 'Unknown ecosystem'} ==")
        for source_result in ecosystem_result.sources:
            called_pkgs, uncalled_pkgs = source_result.package_count
            lines.append(f"  Source: {source_result.source} "
                         f"[{format_severity_count_short(source_result.count)}] "
                         f"packages called/uncalled: {called_pkgs}/{uncalled_pkgs}")
            for package_result in source_result.package_results:
                if package_result.called_vulns:
                    lines.append(f"    - {package_result.name}=={package_result.installed_version} "
                                 f"-> {package_result.fixed_version}")
                else:
                    lines.append(f"    - {package_result.name} (uncalled only)")
                for vuln in package_result.called_vulns:
                    lines.append(f"        {vuln.summary.id} {vuln.summary.severity_rating} "
                                 f"({vuln.summary.severity_score or 'N/A'}) fixed: {vuln.summary.fixed_version}")
                    lines.extend(f"          {line}" for line in important_detail_lines(vuln.detail))
                for vuln in package_result.uncalled_vulns:
                    lines.append(f"        {vuln.summary.id} (uncalled)")

    if report.unregistered:
        lines.append("")
        lines.append(f"Warning: {report.unregistered} findings had no vulnerability group and were left out.")
    lines.append("--- End Report ---")
    return "\n".join(lines) + "\n"


def render_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2) + "\n"


RENDERERS = {
    "text": render_text,
    "json": render_json,
}
