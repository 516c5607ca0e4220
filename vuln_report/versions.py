# vuln_report/versions.py
"""
Ecosystem-aware version parsing and comparison.

Each supported ecosystem maps to a parser that turns a version string into an
orderable key. Ecosystem names may carry a release suffix (``Debian:11``,
``Alpine:v3.18``); only the part before the first ``:`` selects the parser.

Unparseable input raises VersionParseError and unknown ecosystems raise
UnsupportedEcosystemError. Nothing here falls back to plain string ordering.
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any, Callable

from packaging.version import Version as PEP440Version, InvalidVersion
from debian.debian_support import Version as DebianVersion

from .exceptions import VersionParseError, UnsupportedEcosystemError


def ecosystem_prefix(ecosystem: str) -> str:
    return ecosystem.split(":", 1)[0]


# --- PyPI ---
def _parse_pypi(version: str) -> PEP440Version:
    try:
        return PEP440Version(version)
    except InvalidVersion as e:
        raise VersionParseError(version, "PyPI", str(e)) from e


# --- Debian / Ubuntu (dpkg ordering) ---
def _parse_debian(version: str) -> DebianVersion:
    try:
        return DebianVersion(version)
    except ValueError as e:
        raise VersionParseError(version, "Debian", str(e)) from e


# --- Alpine (apk ordering) ---
ALPINE_PATTERN = re.compile(
    r'^(\d+(?:\.\d+)*)([a-z]?)((?:_(?:alpha|beta|pre|rc|cvs|svn|git|hg|p)\d*)*)(?:~[0-9a-f]+)?(?:-r(\d+))?$'
)
ALPINE_SUFFIX_RANK = {
    "alpha": 0, "beta": 1, "pre": 2, "rc": 3,
    # 4 is the implicit "no suffix" slot
    "cvs": 5, "svn": 6, "git": 7, "hg": 8, "p": 9,
}
ALPINE_SUFFIX_PATTERN = re.compile(r'_([a-z]+)(\d*)')


def _parse_alpine(version: str) -> tuple:
    match = ALPINE_PATTERN.match(version)
    if not match:
        raise VersionParseError(version, "Alpine")
    numbers, letter, suffixes, revision = match.groups()
    suffix_key = [
        (ALPINE_SUFFIX_RANK[name], int(number) if number else 0)
        for name, number in ALPINE_SUFFIX_PATTERN.findall(suffixes)
    ]
    # Release sentinel: pre-release suffixes sort below it, patch suffixes above
    suffix_key.append((4, 0))
    return (
        tuple(int(part) for part in numbers.split(".")),
        letter,
        tuple(suffix_key),
        int(revision) if revision else 0,
    )


# --- SemVer family (npm, Go, crates.io, NuGet, ...) ---
SEMVER_PATTERN = re.compile(
    r'^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?'
    r'(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$'
)


def _prerelease_key(prerelease: str | None) -> tuple:
    if not prerelease:
        return (1,)
    identifiers = []
    for part in prerelease.split("."):
        if part.isdigit():
            identifiers.append((0, int(part), ""))
        else:
            identifiers.append((1, 0, part))
    return (0, tuple(identifiers))


def _parse_semver(version: str) -> tuple:
    match = SEMVER_PATTERN.match(version.strip())
    if not match:
        raise VersionParseError(version, "SemVer")
    major, minor, patch, revision, prerelease = match.groups()
    numbers = tuple(int(n) if n else 0 for n in (major, minor, patch, revision))
    return numbers + (_prerelease_key(prerelease),)


# --- Maven (ComparableVersion-style ordering) ---
MAVEN_TOKEN_PATTERN = re.compile(r'\d+|[a-zA-Z]+')
MAVEN_QUALIFIER_RANK = {
    "alpha": 0, "a": 0,
    "beta": 1, "b": 1,
    "milestone": 2, "m": 2,
    "rc": 3, "cr": 3,
    "snapshot": 4,
    "": 5, "ga": 5, "final": 5, "release": 5,
    "sp": 6,
}
MAVEN_RELEASE_RANK = 5


def _maven_qualifier_key(qualifier: str) -> tuple:
    rank = MAVEN_QUALIFIER_RANK.get(qualifier)
    if rank is None:
        return (7, qualifier)
    return (rank, "")


def _maven_token_compare(left: int | str | None, right: int | str | None) -> int:
    if left is None and right is None:
        return 0
    if right is None:
        return -_maven_token_compare(right, left)
    if left is None:
        if isinstance(right, int):
            return 0 if right == 0 else -1
        return _cmp((MAVEN_RELEASE_RANK, ""), _maven_qualifier_key(right))
    if isinstance(left, int) and isinstance(right, int):
        return _cmp(left, right)
    if isinstance(left, int):
        return 1
    if isinstance(right, int):
        return -1
    return _cmp(_maven_qualifier_key(left), _maven_qualifier_key(right))


@total_ordering
class MavenVersion:
    def __init__(self, version: str):
        tokens: list[int | str] = []
        for token in MAVEN_TOKEN_PATTERN.findall(version):
            tokens.append(int(token) if token.isdigit() else token.lower())
        if not tokens:
            raise VersionParseError(version, "Maven")
        while tokens and (tokens[-1] == 0 or (isinstance(tokens[-1], str)
                                               and MAVEN_QUALIFIER_RANK.get(tokens[-1]) == MAVEN_RELEASE_RANK)):
            tokens.pop()
        self.tokens = tuple(tokens)

    def _compare(self, other: "MavenVersion") -> int:
        for index in range(max(len(self.tokens), len(other.tokens))):
            left = self.tokens[index] if index < len(self.tokens) else None
            right = other.tokens[index] if index < len(other.tokens) else None
            result = _maven_token_compare(left, right)
            if result:
                return result
        return 0

    def __eq__(self, other):
        return isinstance(other, MavenVersion) and self._compare(other) == 0

    def __lt__(self, other):
        return self._compare(other) < 0

    def __hash__(self):
        return hash(self.tokens)


# --- RubyGems (Gem::Version ordering) ---
GEM_SEGMENT_PATTERN = re.compile(r'[0-9]+|[a-zA-Z]+')
GEM_VALID_PATTERN = re.compile(r'^[0-9]+(?:\.[0-9a-zA-Z]+)*(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$')


@total_ordering
class GemVersion:
    def __init__(self, version: str):
        version = version.strip()
        if not GEM_VALID_PATTERN.match(version):
            raise VersionParseError(version, "RubyGems")
        segments: list[int | str] = [
            int(s) if s.isdigit() else s for s in GEM_SEGMENT_PATTERN.findall(version)
        ]
        while len(segments) > 1 and segments[-1] == 0:
            segments.pop()
        self.segments = tuple(segments)

    def _compare(self, other: "GemVersion") -> int:
        for index in range(max(len(self.segments), len(other.segments))):
            left = self.segments[index] if index < len(self.segments) else 0
            right = other.segments[index] if index < len(other.segments) else 0
            if left == right:
                continue
            # Letters mark a pre-release and sort below any number
            if isinstance(left, str) and isinstance(right, int):
                return -1
            if isinstance(left, int) and isinstance(right, str):
                return 1
            return _cmp(left, right)
        return 0

    def __eq__(self, other):
        return isinstance(other, GemVersion) and self._compare(other) == 0

    def __lt__(self, other):
        return self._compare(other) < 0

    def __hash__(self):
        return hash(self.segments)


# --- RPM family (rpmvercmp ordering) ---
RPM_EVR_PATTERN = re.compile(r'^(?:(\d+):)?([^:\s-][^:\s]*?)(?:-([^:\s-]+))?$')
RPM_SEGMENT_PATTERN = re.compile(r'[0-9]+|[a-zA-Z]+|~|\^')


def rpmvercmp(left: str, right: str) -> int:
    """Compares two version or release strings segment by segment, as rpm does."""
    if left == right:
        return 0
    left_segments = RPM_SEGMENT_PATTERN.findall(left)
    right_segments = RPM_SEGMENT_PATTERN.findall(right)
    while left_segments or right_segments:
        a = left_segments.pop(0) if left_segments else None
        b = right_segments.pop(0) if right_segments else None
        # Tilde sorts before anything, even the end of the string
        if a == "~" or b == "~":
            if a != "~":
                return 1
            if b != "~":
                return -1
            continue
        # Caret sorts after the end of the string but before any other segment
        if a == "^" or b == "^":
            if a is None:
                return -1
            if b is None:
                return 1
            if a != "^":
                return 1
            if b != "^":
                return -1
            continue
        if a is None:
            return -1
        if b is None:
            return 1
        if a.isdigit() != b.isdigit():
            return 1 if a.isdigit() else -1
        if a.isdigit():
            result = _cmp(int(a), int(b))
        else:
            result = _cmp(a, b)
        if result:
            return result
    return 0


@total_ordering
class RpmVersion:
    def __init__(self, version: str):
        match = RPM_EVR_PATTERN.match(version.strip())
        if not match:
            raise VersionParseError(version, "RPM")
        epoch, self.version, self.release = match.groups()
        self.epoch = int(epoch) if epoch else 0
        self.release = self.release or ""

    def _compare(self, other: "RpmVersion") -> int:
        return (_cmp(self.epoch, other.epoch)
                or rpmvercmp(self.version, other.version)
                or rpmvercmp(self.release, other.release))

    def __eq__(self, other):
        return isinstance(other, RpmVersion) and self._compare(other) == 0

    def __lt__(self, other):
        return self._compare(other) < 0

    def __hash__(self):
        return hash((self.epoch, self.version, self.release))


# --- CRAN (R package_version ordering) ---
CRAN_PATTERN = re.compile(r'^\d+(?:[.-]\d+)+$')


def _parse_cran(version: str) -> tuple:
    version = version.strip()
    if not CRAN_PATTERN.match(version):
        raise VersionParseError(version, "CRAN")
    return tuple(int(part) for part in re.split(r'[.-]', version))


def _cmp(left: Any, right: Any) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


PARSERS: dict[str, Callable[[str], Any]] = {
    "PyPI": _parse_pypi,
    "Debian": _parse_debian,
    "Ubuntu": _parse_debian,
    "Alpine": _parse_alpine,
    "npm": _parse_semver,
    "Go": _parse_semver,
    "crates.io": _parse_semver,
    "NuGet": _parse_semver,
    "Hex": _parse_semver,
    "Pub": _parse_semver,
    "Packagist": _parse_semver,
    "SwiftURL": _parse_semver,
    "Maven": MavenVersion,
    "RubyGems": GemVersion,
    "Red Hat": RpmVersion,
    "Rocky Linux": RpmVersion,
    "AlmaLinux": RpmVersion,
    "SUSE": RpmVersion,
    "openSUSE": RpmVersion,
    "Mageia": RpmVersion,
    "openEuler": RpmVersion,
    "CRAN": _parse_cran,
}


@dataclass(frozen=True)
class Version:
    """A parsed version bound to the ecosystem it was parsed for."""
    raw: str
    ecosystem: str
    key: Any = field(compare=False, repr=False)

    def compare(self, other: "Version") -> int:
        return _cmp(self.key, other.key)

    def compare_str(self, other: str) -> int:
        """Compare against a raw version string of the same ecosystem."""
        return self.compare(parse(other, self.ecosystem))


def is_supported(ecosystem: str) -> bool:
    return ecosystem_prefix(ecosystem) in PARSERS


def parse(version: str, ecosystem: str) -> Version:
    prefix = ecosystem_prefix(ecosystem)
    parser = PARSERS.get(prefix)
    if parser is None:
        raise UnsupportedEcosystemError(ecosystem)
    if not version:
        raise VersionParseError(version, prefix, "empty version string")
    try:
        key = parser(version)
    except VersionParseError as e:
        # Re-raise under the caller's ecosystem name rather than the parser family
        raise VersionParseError(version, prefix, str(e.__cause__ or "")) from e
    return Version(raw=version, ecosystem=prefix, key=key)


def compare(ecosystem: str, left: str, right: str) -> int:
    """Returns -1 if left < right, 0 if equal, 1 if left > right."""
    return parse(left, ecosystem).compare(parse(right, ecosystem))
