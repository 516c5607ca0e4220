"""
vuln_report: turns vulnerability scan results into a deduplicated,
severity-annotated report with fix recommendations, grouped by ecosystem,
source and package.
"""

from .aggregator import build_report
from .config import Settings, load_settings
from .fixes import UNFIXED
from .loader import load_results, parse_results

__all__ = [
    "UNFIXED",
    "Settings",
    "build_report",
    "load_results",
    "load_settings",
    "parse_results",
]
