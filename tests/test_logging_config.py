import json
import logging
import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from config.logging_config import JsonFormatter, configure_logging, record_fields
from services.holding_repository import InMemoryHoldingRepository
from services.holding_service import create_holding
from services.portfolio.analytics_service import analyze_owner


class TestLoggingConfig(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._handlers = root.handlers[:]
        self._level = root.level

    def tearDown(self):
        root = logging.getLogger()
        for h in root.handlers[:]:
            root.removeHandler(h)
        for h in self._handlers:
            root.addHandler(h)
        root.setLevel(self._level)

    def test_json_mode_installs_single_handler(self):
        configure_logging(level_name="debug", use_json=True)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JsonFormatter)

    def test_plain_mode(self):
        configure_logging(level_name="WARNING", use_json=False)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.WARNING)
        self.assertNotIsInstance(root.handlers[0].formatter, JsonFormatter)

    def test_json_formatter_shape(self):
        record = logging.LogRecord(
            name="services.holding_service",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="holding created: id=%s",
            args=("abc",),
            exc_info=None,
        )
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["logger"], "services.holding_service")
        self.assertEqual(payload["message"], "holding created: id=abc")
        self.assertTrue(payload["ts"].endswith("Z"))

    def test_holding_log_line_carries_holding_id(self):
        repo = InMemoryHoldingRepository()
        with self.assertLogs("services.holding_service", level="INFO") as cm:
            h = create_holding(repo, "owner", {"name": "Gold ETF", "category": "Gold", "quantity": 1, "buy_price": 10})
        payload = json.loads(JsonFormatter().format(cm.records[0]))
        self.assertEqual(payload["holding_id"], h.id)
        self.assertEqual(payload["category"], "Gold")
        self.assertNotIn("owner", json.dumps(payload))

    def test_overview_log_line_carries_counts(self):
        repo = InMemoryHoldingRepository()
        create_holding(repo, "owner", {"name": "BTC", "category": "Crypto", "quantity": 1, "buy_price": 100})
        with self.assertLogs("services.portfolio.analytics_service", level="INFO") as cm:
            analyze_owner(repo, "owner")
        payload = json.loads(JsonFormatter().format(cm.records[-1]))
        self.assertEqual(payload["holdings"], 1)
        self.assertEqual(payload["alerts"], 2)
        self.assertIn("risk_score", payload)

    def test_record_fields_skips_standard_attributes(self):
        record = logging.makeLogRecord({"msg": "x", "holding_id": "abc"})
        self.assertEqual(record_fields(record), {"holding_id": "abc"})


if __name__ == "__main__":
    unittest.main()
