# vuln_report/grouping.py
"""
Group deduplication.

Each group of aliased ids is represented in the report by exactly one id: the
first after sorting with identifiers.sort_ids(). GroupIndex accumulates the
groups of one scanned source and remembers which packages had called and
uncalled groups.
"""

from typing import Iterable

from .identifiers import sort_ids
from .models import Group


class GroupIndex:
    """Representative ids and call status for every group in one source."""

    def __init__(self):
        self.representatives: dict[str, Group] = {}
        self.uncalled_ids: set[str] = set()
        self.member_ids: set[str] = set()
        # dicts keep first-seen package order
        self.called_packages: dict[str, None] = {}
        self.uncalled_packages: dict[str, None] = {}

    def register(self, package_name: str | None, groups: Iterable[Group]) -> None:
        for group in groups:
            if not group.ids:
                continue
            ordered = sort_ids(group.ids)
            represent_id = ordered[0]
            # Upstream guarantees unique representatives; on collision the last group wins
            self.representatives[represent_id] = Group(
                ids=tuple(ordered),
                aliases=group.aliases,
                max_severity=group.max_severity,
                called=group.called,
            )
            self.member_ids.update(ordered)

            # An uncalled verdict sticks even if a later group with the same id is called
            if not group.called:
                self.uncalled_ids.add(represent_id)
                if package_name is not None:
                    self.uncalled_packages[package_name] = None
            elif package_name is not None:
                self.called_packages[package_name] = None

    def is_representative(self, vuln_id: str) -> bool:
        return vuln_id in self.representatives

    def is_alias(self, vuln_id: str) -> bool:
        """True for ids that belong to a group but do not represent it."""
        return vuln_id in self.member_ids and vuln_id not in self.representatives

    @property
    def package_count(self) -> tuple[int, int]:
        return len(self.called_packages), len(self.uncalled_packages)


def dedupe(groups: Iterable[Group]) -> tuple[dict[str, Group], set[str]]:
    """
    Collapses groups to one representative id each.
    Returns the representative -> group mapping and the set of representative
    ids whose group was not called.
    """
    index = GroupIndex()
    index.register(None, groups)
    return index.representatives, index.uncalled_ids
