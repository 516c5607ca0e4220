import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from vuln_report import versions
from vuln_report.fixes import UNFIXED, resolve_fix, resolve_max_fix
from vuln_report.models import Affected, AffectedRange, Event


def affected(name: str, ecosystem: str, *fixed: str) -> Affected:
    events = (Event(introduced="0"),) + tuple(Event(fixed=f) for f in fixed)
    return Affected(package_name=name, ecosystem=ecosystem,
                    ranges=(AffectedRange(type="ECOSYSTEM", events=events),))


class TestResolveFix(unittest.TestCase):
    def test_single_fixed_event(self):
        ranges = [affected("libfoo", "npm", "1.2.0")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), "1.2.0")

    def test_no_fixed_event_is_unfixed(self):
        ranges = [affected("libfoo", "npm")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), UNFIXED)
        self.assertEqual(resolve_fix([], "1.0.0", "libfoo", "npm"), UNFIXED)

    def test_lowest_pending_fix_across_ranges(self):
        ranges = [affected("libfoo", "npm", "1.5.0"), affected("libfoo", "npm", "1.2.0")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), "1.2.0")

    def test_fixes_at_or_below_installed_are_ignored(self):
        ranges = [affected("libfoo", "npm", "0.9.0", "1.0.0", "2.0.0")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), "2.0.0")
        self.assertEqual(resolve_fix([affected("libfoo", "npm", "1.0.0")], "1.0.0", "libfoo", "npm"), UNFIXED)

    def test_other_packages_and_ecosystems_are_ignored(self):
        ranges = [affected("libbar", "npm", "1.2.0"), affected("libfoo", "PyPI", "1.2.0")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), UNFIXED)

    def test_ordering_is_by_ecosystem_not_string(self):
        ranges = [affected("libfoo", "npm", "1.10.0", "1.9.0")]
        self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), "1.9.0")

    def test_debian_ecosystem_with_release(self):
        ranges = [affected("openssl", "Debian:12", "3.0.11-1~deb12u2")]
        self.assertEqual(resolve_fix(ranges, "3.0.11-1~deb12u1", "openssl", "Debian:12"), "3.0.11-1~deb12u2")

    def test_unparseable_installed_version_degrades_to_unfixed(self):
        ranges = [affected("requests", "PyPI", "2.31.0")]
        with self.assertLogs("vuln_report.fixes", level="WARNING"):
            self.assertEqual(resolve_fix(ranges, "not a version", "requests", "PyPI"), UNFIXED)

    def test_unparseable_fixed_version_degrades_to_unfixed(self):
        ranges = [affected("libfoo", "npm", "latest")]
        with self.assertLogs("vuln_report.fixes", level="WARNING"):
            self.assertEqual(resolve_fix(ranges, "1.0.0", "libfoo", "npm"), UNFIXED)

    def test_unsupported_ecosystem_degrades_to_unfixed(self):
        ranges = [affected("pkg", "NotAnEcosystem", "2.0")]
        with self.assertLogs("vuln_report.fixes", level="WARNING"):
            self.assertEqual(resolve_fix(ranges, "1.0", "pkg", "NotAnEcosystem"), UNFIXED)

    def test_monotonic_in_installed_version(self):
        ranges = [affected("libfoo", "npm", "1.2.0", "2.0.0", "3.0.0")]
        previous = None
        for installed in ("2.5.0", "1.5.0", "1.0.0", "0.1.0"):
            fix = resolve_fix(ranges, installed, "libfoo", "npm")
            self.assertNotEqual(fix, UNFIXED)
            if previous is not None:
                self.assertLessEqual(versions.compare("npm", fix, previous), 0)
            previous = fix
        self.assertEqual(previous, "1.2.0")


class TestResolveMaxFix(unittest.TestCase):
    def test_singleton_is_identity(self):
        self.assertEqual(resolve_max_fix("npm", ["1.2.0"]), "1.2.0")
        self.assertEqual(resolve_max_fix("npm", [UNFIXED]), UNFIXED)

    def test_any_unfixed_makes_package_unfixed(self):
        self.assertEqual(resolve_max_fix("npm", ["1.2.0", UNFIXED, "3.0.0"]), UNFIXED)
        self.assertEqual(resolve_max_fix("npm", [UNFIXED, "1.2.0"]), UNFIXED)

    def test_highest_fix_wins(self):
        self.assertEqual(resolve_max_fix("npm", ["1.2.0", "1.10.0", "1.9.0"]), "1.10.0")
        self.assertEqual(resolve_max_fix("Debian:12", ["3.0.11-1~deb12u2", "3.0.13-1~deb12u1"]), "3.0.13-1~deb12u1")

    def test_empty_input(self):
        self.assertEqual(resolve_max_fix("npm", []), "")

    def test_unorderable_fix_degrades_to_unfixed(self):
        with self.assertLogs("vuln_report.fixes", level="WARNING"):
            self.assertEqual(resolve_max_fix("npm", ["1.0.0", "latest"]), UNFIXED)


if __name__ == '__main__':
    unittest.main()
