import sqlite3
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

from careerpilot.analytics import db as analytics_db
from careerpilot.core.config import settings


class AnalyticsDbTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "nested" / "analytics.db"
        patcher = patch.object(
            analytics_db,
            "settings",
            replace(settings, analytics_enabled=True, analytics_db_path=str(self.db_path), analytics_retention_days=30),
        )
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)
        analytics_db.init_db()

    def _log(self, **overrides):
        values = {
            "run_id": "run-1",
            "mode": "technical",
            "provider": "groq",
            "model": "test-model",
            "source": "llm",
            "status": "success",
            "attempts": 1,
            "latency_ms": 120,
        }
        values.update(overrides)
        analytics_db.log_generation_run(**values)

    def test_init_creates_database_file(self):
        self.assertTrue(self.db_path.exists())

    def test_summary_counts_sources_and_modes(self):
        self._log()
        self._log(run_id="run-2", latency_ms=80)
        self._log(run_id="run-3", mode="roadmap", source="fallback", status="degraded", error_kind="timeout")

        summary = analytics_db.get_summary()

        self.assertTrue(summary["enabled"])
        self.assertEqual(summary["total"], 3)
        self.assertEqual(summary["total_7d"], 3)
        self.assertEqual(summary["by_source"], {"llm": 2, "fallback": 1})
        self.assertEqual(summary["by_mode"], {"technical": 2, "roadmap": 1})
        self.assertEqual(summary["avg_llm_latency_ms"], 100)

    def test_latest_returns_newest_first(self):
        self._log(run_id="old")
        self._log(run_id="new", error_kind="rate_limited")

        rows = analytics_db.get_latest(limit=1)

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["run_id"], "new")
        self.assertEqual(rows[0]["error_kind"], "rate_limited")

    def test_purge_removes_expired_rows(self):
        self._log(run_id="fresh")
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT INTO generation_runs (created_at, run_id, mode, source, status, attempts) "
                "VALUES ('2000-01-01T00:00:00+00:00', 'stale', 'dsa', 'cache', 'success', 0)"
            )
            conn.commit()

        self.assertEqual(analytics_db.purge_old_records(), {"generation_runs": 1})
        self.assertEqual([row["run_id"] for row in analytics_db.get_latest()], ["fresh"])


if __name__ == "__main__":
    unittest.main()
