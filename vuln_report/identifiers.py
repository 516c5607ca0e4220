# vuln_report/identifiers.py
# Deterministic ordering of vulnerability ids, used to pick a group's representative.
from typing import Iterable

# Higher ranks sort first. DSA advisories bundle several CVEs and are the most
# precise for container scans; CVE is the best known; GHSA next.
PREFIX_RANK = {
    "DSA": 3,
    "CVE": 2,
    "GHSA": 1,
}


def id_prefix(vuln_id: str) -> str:
    return vuln_id.split("-", 1)[0]


def id_sort_key(vuln_id: str) -> tuple[int, str]:
    return (-PREFIX_RANK.get(id_prefix(vuln_id), 0), vuln_id)


def sort_ids(ids: Iterable[str]) -> list[str]:
    return sorted(ids, key=id_sort_key)
