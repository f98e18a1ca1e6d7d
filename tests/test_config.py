"""配置加载测试。"""
from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest import mock

from alert_migrator.core.config import MigrationSettings, load_config

LOGGING_BLOCK = """
logging:
  log_dir: logs
  log_file: test.log
  level: DEBUG
  max_bytes: 1024
  backup_count: 1
"""


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "config.yaml"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _load(self, content: str):
        self.path.write_text(textwrap.dedent(content), encoding="utf-8")
        with mock.patch.dict(os.environ, {"CONFIG_FILE": str(self.path)}):
            return load_config()

    def test_defaults_when_migration_missing(self) -> None:
        raw, settings, channels = self._load(LOGGING_BLOCK)
        self.assertEqual(settings, MigrationSettings())
        self.assertEqual(channels, [])
        self.assertEqual(raw["logging"]["level"], "DEBUG")

    def test_migration_and_channels(self) -> None:
        _, settings, channels = self._load(LOGGING_BLOCK + """
migration:
  max_title_length: 50
  base_interval_seconds: 30
  unknown_key: ignored
channels:
  - id: 1
    uid: ops
    name: ops-email
    type: email
""")
        self.assertEqual(settings.max_title_length, 50)
        self.assertEqual(settings.base_interval_seconds, 30)
        self.assertEqual(settings.max_rule_group_name_length, 190)
        self.assertEqual([c.name for c in channels], ["ops-email"])

    def test_missing_logging_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self._load("migration: {}\n")

    def test_incomplete_logging_rejected(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            self._load("logging:\n  log_dir: logs\n")
        self.assertIn("log_file", str(ctx.exception))

    def test_non_positive_limit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self._load(LOGGING_BLOCK + "migration:\n  max_title_length: 0\n")

    def test_rule_group_limit_below_minimum_rejected(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            self._load(LOGGING_BLOCK + "migration:\n  max_rule_group_name_length: 4\n")
        self.assertIn("max_rule_group_name_length", str(ctx.exception))

    def test_channel_without_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self._load(LOGGING_BLOCK + "channels:\n  - id: 1\n")

    def test_missing_file(self) -> None:
        missing = Path(self.tmp.name) / "missing.yaml"
        with mock.patch("alert_migrator.core.config._config_path", return_value=missing):
            with self.assertRaises(FileNotFoundError):
                load_config()


if __name__ == "__main__":
    unittest.main()
