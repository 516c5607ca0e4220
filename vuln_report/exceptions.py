# vuln_report/exceptions.py
"""Exception types raised by the report builder and its collaborators."""


class ReportError(Exception):
    """Base class for every error raised by vuln_report."""


class VersionError(ReportError, ValueError):
    """A version string could not be compared."""


class VersionParseError(VersionError):
    def __init__(self, version: str, ecosystem: str, reason: str = ""):
        self.version = version
        self.ecosystem = ecosystem
        message = f"Cannot parse {ecosystem} version '{version}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedEcosystemError(VersionError):
    def __init__(self, ecosystem: str):
        self.ecosystem = ecosystem
        super().__init__(f"No version comparator for ecosystem '{ecosystem}'")


class ResultsLoadError(ReportError):
    """The scan results document is missing or structurally invalid."""


class ConfigError(ReportError):
    """The configuration file cannot be read or holds invalid values."""
