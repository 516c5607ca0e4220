import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

sys.path.append(str(Path(__file__).parent.parent))

from vuln_report.config import (
    CONFIG_PATH_ENV_VAR, DEFAULT_EXCLUDED_SOURCE_FRAGMENTS, DEFAULT_OS_IMAGE_PREFIXES, Settings,
    candidate_paths, load_settings,
)
from vuln_report.exceptions import ConfigError


class TestLoadSettings(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)

    def write_config(self, text: str) -> Path:
        path = self.dir / "vulnreport.yaml"
        path.write_text(text, encoding='utf-8')
        return path

    def test_explicit_file(self):
        path = self.write_config(
            "format: JSON\n"
            "output_file: report.json\n"
            "os_image_prefixes: [Debian, Wolfi]\n"
            "log_level: debug\n"
        )
        settings = load_settings(path)
        self.assertEqual(settings.format, "json")
        self.assertEqual(settings.output_file, "report.json")
        self.assertEqual(settings.os_image_prefixes, ("Debian", "Wolfi"))
        self.assertEqual(settings.excluded_source_fragments, DEFAULT_EXCLUDED_SOURCE_FRAGMENTS)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_empty_file_gives_defaults(self):
        self.assertEqual(load_settings(self.write_config("")), Settings())

    def test_missing_explicit_file_is_an_error(self):
        with self.assertRaises(ConfigError):
            load_settings(self.dir / "missing.yaml")

    def test_env_var_is_used(self):
        path = self.write_config("format: json\n")
        with mock.patch.dict(os.environ, {CONFIG_PATH_ENV_VAR: str(path)}):
            self.assertEqual(candidate_paths(), [path])
            self.assertEqual(load_settings().format, "json")

    def test_missing_env_var_file_is_an_error(self):
        with mock.patch.dict(os.environ, {CONFIG_PATH_ENV_VAR: str(self.dir / "missing.yaml")}):
            with self.assertRaises(ConfigError):
                load_settings()

    def test_no_file_found_gives_defaults(self):
        env = {k: v for k, v in os.environ.items() if k != CONFIG_PATH_ENV_VAR}
        with mock.patch.dict(os.environ, env, clear=True), \
                mock.patch("vuln_report.config.candidate_paths", return_value=[self.dir / "absent.yaml"]):
            settings = load_settings()
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.os_image_prefixes, DEFAULT_OS_IMAGE_PREFIXES)

    def test_invalid_documents(self):
        for text in ("format: [unclosed\n", "- just\n- a list\n", "format: xml\n",
                     "output_file: 12\n", "os_image_prefixes: Debian\n", "log_level: LOUD\n",
                     "excluded_source_fragments: ['']\n"):
            with self.subTest(text=text):
                with self.assertRaises(ConfigError):
                    load_settings(self.write_config(text))


if __name__ == '__main__':
    unittest.main()
