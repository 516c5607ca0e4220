import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from vuln_report import severity
from vuln_report.identifiers import id_sort_key, sort_ids


class TestSeverityRating(unittest.TestCase):
    def test_numeric_scores(self):
        cases = {
            "10.0": "CRITICAL",
            "9.8": "CRITICAL",
            "9.0": "CRITICAL",
            "8.9": "HIGH",
            "7.5": "HIGH",
            "6.9": "MEDIUM",
            "4.0": "MEDIUM",
            "3.9": "LOW",
            "0.1": "LOW",
        }
        for score, expected in cases.items():
            rating, error = severity.calculate_rating(score)
            self.assertEqual(rating, expected, score)
            self.assertIsNone(error)

    def test_empty_score_is_unknown_without_error(self):
        self.assertEqual(severity.calculate_rating(""), ("UNKNOWN", None))
        self.assertEqual(severity.calculate_rating(None), ("UNKNOWN", None))

    def test_out_of_scale_scores_are_unknown(self):
        self.assertEqual(severity.calculate_rating("0")[0], "UNKNOWN")
        self.assertEqual(severity.calculate_rating("11")[0], "UNKNOWN")

    def test_cvss_vectors(self):
        rating, error = severity.calculate_rating("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H")
        self.assertEqual(rating, "CRITICAL")
        self.assertIsNone(error)
        rating, _ = severity.calculate_rating("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:N/A:N")
        self.assertEqual(rating, "MEDIUM")

    def test_garbage_score_returns_error_instead_of_raising(self):
        rating, error = severity.calculate_rating("not-a-score")
        self.assertEqual(rating, "UNKNOWN")
        self.assertIsNotNone(error)

    def test_every_rating_is_countable(self):
        for score in ("9.5", "7.0", "5.0", "1.0", "", "junk"):
            self.assertIn(severity.calculate_rating(score)[0], severity.RATINGS)


class TestIdentifierOrdering(unittest.TestCase):
    def test_same_prefix_sorts_by_string(self):
        self.assertEqual(sort_ids(["GHSA-2", "GHSA-1"]), ["GHSA-1", "GHSA-2"])

    def test_prefix_priority(self):
        ids = ["PYSEC-2020-1", "GHSA-xxxx", "CVE-2020-1", "DSA-5000-1"]
        self.assertEqual(sort_ids(ids), ["DSA-5000-1", "CVE-2020-1", "GHSA-xxxx", "PYSEC-2020-1"])

    def test_order_independent_of_input(self):
        ids = ["OSV-2", "CVE-2021-3", "GHSA-a", "CVE-2021-1", "OSV-1"]
        self.assertEqual(sort_ids(ids), sort_ids(reversed(ids)))
        self.assertLess(id_sort_key("CVE-2021-1"), id_sort_key("GHSA-a"))


if __name__ == '__main__':
    unittest.main()
