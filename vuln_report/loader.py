# vuln_report/loader.py
"""
Reads osv-scanner style JSON results into the immutable input model.

Expected shape (optional keys may be absent):

    {"results": [{
        "source": {"path": ..., "type": ...},
        "packages": [{
            "package": {"name", "version", "ecosystem", "image_origin_details"?},
            "vulnerabilities": [{"id", "aliases"?, "details"?, "summary"?,
                                 "affected"?: [{"package": {"name", "ecosystem"},
                                                "ranges": [{"type", "events"}]}]}],
            "groups": [{"ids", "aliases"?, "max_severity"?, "experimentalAnalysis"?}]
        }]
    }]}
"""

import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import ResultsLoadError
from .models import (
    Affected, AffectedRange, Event, Group, ImageOrigin, Package, PackageSource,
    PackageVulns, SourceInfo, Vulnerability, VulnerabilityResults,
)

logger = logging.getLogger(__name__)


def _expect(value: Any, expected_type: type, where: str) -> Any:
    if not isinstance(value, expected_type):
        raise ResultsLoadError(f"{where}: expected {expected_type.__name__}, got {type(value).__name__}")
    return value


def _strings(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    items = _expect(value, list, where)
    return tuple(str(item) for item in items)


def _marker(event: dict, key: str, where: str) -> str | None:
    # Version markers occasionally arrive as JSON numbers
    value = event.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ResultsLoadError(f"{where}.{key}: expected str, got {type(value).__name__}")
    return str(value)


def parse_image_origin(data: dict | None) -> ImageOrigin | None:
    if not data:
        return None
    return ImageOrigin(
        layer_id=str(data.get("layer_id", "")),
        origin_command=str(data.get("origin_command", "")),
        in_base_image=bool(data.get("in_base_image", False)),
    )


def parse_package(data: Any, where: str) -> Package:
    data = _expect(data, dict, where)
    name = data.get("name")
    if not name:
        raise ResultsLoadError(f"{where}: package is missing 'name'")
    return Package(
        name=str(name),
        version=str(data.get("version", "")),
        ecosystem=str(data.get("ecosystem", "")),
        image_origin=parse_image_origin(data.get("image_origin_details") or data.get("image_origin")),
    )


def parse_affected(data: Any, where: str) -> Affected:
    data = _expect(data, dict, where)
    package = _expect(data.get("package") or {}, dict, f"{where}.package")
    ranges = []
    for r_index, range_data in enumerate(data.get("ranges") or []):
        range_where = f"{where}.ranges[{r_index}]"
        range_data = _expect(range_data, dict, range_where)
        events = tuple(
            Event(
                introduced=_marker(event, "introduced", f"{range_where}.events"),
                fixed=_marker(event, "fixed", f"{range_where}.events"),
                last_affected=_marker(event, "last_affected", f"{range_where}.events"),
                limit=_marker(event, "limit", f"{range_where}.events"),
            )
            for event in (_expect(e, dict, f"{range_where}.events") for e in range_data.get("events") or [])
        )
        ranges.append(AffectedRange(type=str(range_data.get("type", "")), events=events))
    return Affected(
        package_name=str(package.get("name", "")),
        ecosystem=str(package.get("ecosystem", "")),
        ranges=tuple(ranges),
    )


def parse_vulnerability(data: Any, where: str) -> Vulnerability:
    data = _expect(data, dict, where)
    vuln_id = data.get("id")
    if not vuln_id:
        raise ResultsLoadError(f"{where}: vulnerability is missing 'id'")
    return Vulnerability(
        id=str(vuln_id),
        aliases=_strings(data.get("aliases"), f"{where}.aliases"),
        details=str(data.get("details") or ""),
        summary=str(data.get("summary") or ""),
        affected=tuple(
            parse_affected(a, f"{where}.affected[{i}]") for i, a in enumerate(data.get("affected") or [])
        ),
    )


def is_group_called(ids: tuple[str, ...], analysis: dict | None) -> bool:
    # No call analysis at all means the group cannot be ruled out
    if not ids:
        return False
    if not analysis:
        return True
    return any(isinstance(result, dict) and bool(result.get("called")) for result in analysis.values())


def parse_group(data: Any, where: str) -> Group:
    data = _expect(data, dict, where)
    ids = _strings(data.get("ids"), f"{where}.ids")
    analysis = data.get("experimentalAnalysis") or data.get("experimental_analysis")
    if analysis is not None:
        _expect(analysis, dict, f"{where}.experimentalAnalysis")
    max_severity = data.get("max_severity", "")
    return Group(
        ids=ids,
        aliases=_strings(data.get("aliases"), f"{where}.aliases"),
        max_severity="" if max_severity is None else str(max_severity),
        called=is_group_called(ids, analysis),
    )


def parse_package_vulns(data: Any, where: str) -> PackageVulns:
    data = _expect(data, dict, where)
    return PackageVulns(
        package=parse_package(data.get("package"), f"{where}.package"),
        vulnerabilities=tuple(
            parse_vulnerability(v, f"{where}.vulnerabilities[{i}]")
            for i, v in enumerate(data.get("vulnerabilities") or [])
        ),
        groups=tuple(parse_group(g, f"{where}.groups[{i}]") for i, g in enumerate(data.get("groups") or [])),
    )


def parse_results(data: Any) -> VulnerabilityResults:
    data = _expect(data, dict, "document")
    sources = []
    for s_index, source_data in enumerate(_expect(data.get("results") or [], list, "results")):
        where = f"results[{s_index}]"
        source_data = _expect(source_data, dict, where)
        source = _expect(source_data.get("source") or {}, dict, f"{where}.source")
        packages = tuple(
            parse_package_vulns(p, f"{where}.packages[{p_index}]")
            for p_index, p in enumerate(_expect(source_data.get("packages") or [], list, f"{where}.packages"))
        )
        sources.append(PackageSource(
            source=SourceInfo(path=str(source.get("path", "")), type=str(source.get("type", ""))),
            packages=packages,
        ))
    return VulnerabilityResults(results=tuple(sources))


def load_results(path: Path | str) -> VulnerabilityResults:
    path = Path(path)
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ResultsLoadError(f"Could not read scan results {path}: {e}") from e
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ResultsLoadError(f"Scan results {path} are not valid JSON: {e}") from e

    results = parse_results(data)
    package_total = sum(len(source.packages) for source in results.results)
    logger.info(f"Loaded {len(results.results)} sources with {package_total} packages from {path}")
    return results
