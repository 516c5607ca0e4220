# vuln_report/fixes.py
"""
Fix version resolution.

resolve_fix() finds the closest version that remediates one finding;
resolve_max_fix() finds the version a package must reach to remediate every
finding against it. Both return UNFIXED when no such version is known.
"""

import logging
from typing import Iterable

from . import versions
from .exceptions import VersionError
from .models import Affected

logger = logging.getLogger(__name__)

UNFIXED = "No fix available"


def resolve_fix(affected: Iterable[Affected], installed_version: str, package_name: str, ecosystem: str) -> str:
    """
    Returns the lowest fixed version above installed_version across all ranges
    for this exact package and ecosystem.

    Fixed markers at or below the installed version are not pending fixes and
    are ignored. If any version cannot be parsed the finding is reported as
    UNFIXED rather than guessed at.
    """
    try:
        installed = versions.parse(installed_version, ecosystem)
        min_fix: versions.Version | None = None
        for entry in affected:
            if entry.package_name != package_name or entry.ecosystem != ecosystem:
                continue
            for affected_range in entry.ranges:
                for event in affected_range.events:
                    if not event.fixed or installed.compare_str(event.fixed) >= 0:
                        continue
                    candidate = versions.parse(event.fixed, ecosystem)
                    if min_fix is None or candidate.compare(min_fix) < 0:
                        min_fix = candidate
    except VersionError as e:
        logger.warning(f"Treating {package_name}@{installed_version} ({ecosystem}) as unfixed: {e}")
        return UNFIXED

    return min_fix.raw if min_fix is not None else UNFIXED


def resolve_max_fix(ecosystem: str, fixed_versions: Iterable[str]) -> str:
    """
    Returns the highest of the given fix versions, or UNFIXED if any of them
    is UNFIXED: a package is only remediated once every finding has a fix.
    An empty input returns an empty string.
    """
    max_fix: versions.Version | None = None
    for fixed_version in fixed_versions:
        if fixed_version == UNFIXED:
            return UNFIXED
        try:
            candidate = versions.parse(fixed_version, ecosystem)
        except VersionError as e:
            logger.warning(f"Cannot order fix version '{fixed_version}' ({ecosystem}): {e}")
            return UNFIXED
        if max_fix is None or max_fix.compare(candidate) < 0:
            max_fix = candidate

    return max_fix.raw if max_fix is not None else ""
