from __future__ import annotations

import io
import json
import logging
import unittest
from contextlib import redirect_stdout

from perizie.core import Settings
from perizie.core.logging import configure_logging


class SettingsTestCase(unittest.TestCase):
    def test_defaults(self) -> None:
        config = Settings()
        self.assertEqual(config.round_ordering, "numeric")
        self.assertEqual(config.round_header_template, "Variant no. {numero}")
        self.assertEqual(config.export_file_prefix, "Computo_Metrico_Aggiornato")
        self.assertEqual(config.export_capture_scale, 2.0)

    def test_landscape_geometry(self) -> None:
        self.assertEqual(Settings(export_landscape=True).page_geometry_mm, (297.0, 210.0))
        self.assertEqual(Settings(export_landscape=False).page_geometry_mm, (210.0, 297.0))

    def test_cors_origins_from_string(self) -> None:
        config = Settings(cors_origins="http://a.local, http://b.local")
        self.assertEqual(config.cors_origins, ["http://a.local", "http://b.local"])

    def test_database_url_fallback(self) -> None:
        config = Settings(database_url=None)
        self.assertTrue(config.effective_database_url.startswith("sqlite:///"))
        self.assertEqual(Settings(database_url="sqlite://").effective_database_url, "sqlite://")


class ConfigureLoggingTestCase(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)

    def test_json_records(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            configure_logging(level="INFO", structured=True)
            logging.getLogger("perizie.test").info("Export completato")
        lines = [json.loads(line) for line in buffer.getvalue().splitlines() if line]
        self.assertEqual(lines[0]["message"], "Logging configurato")
        record = lines[-1]
        self.assertEqual(record["message"], "Export completato")
        self.assertEqual(record["level"], "INFO")
        self.assertEqual(record["name"], "perizie.test")
        self.assertEqual(record["service"], "perizie-backend")

    def test_plain_records(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            configure_logging(level="WARNING", structured=False)
            logging.getLogger("perizie.test").info("nascosto")
            logging.getLogger("perizie.test").warning("visibile")
        output = buffer.getvalue()
        self.assertNotIn("nascosto", output)
        self.assertIn("perizie.test - WARNING - visibile", output)


if __name__ == "__main__":
    unittest.main()
