import os
import tempfile
import unittest

from sqlalchemy import create_engine

from charger_engine.ingestion.models import create_tables
from charger_engine.ingestion.normalize import StationRecord
from charger_engine.ingestion.storage import StationStore
from charger_engine.ingestion.verify_db import fetch_db_stats


class TestFetchDbStats(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.db_url = f"sqlite:///{os.path.join(self._tmpdir.name, 'test.db')}"
        engine = create_engine(self.db_url, future=True)
        create_tables(engine)
        StationStore(engine).put_batch([
            StationRecord(id="1", town="Belgrade", town_raw="Beograd"),
            StationRecord(id="2", town="Belgrade", town_raw="Zemun"),
            StationRecord(id="3", town="Novi Sad", town_raw="Novi Sad"),
        ])
        engine.dispose()

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_counts_per_town(self) -> None:
        total, stats = fetch_db_stats(self.db_url)
        self.assertEqual(total, 3)
        self.assertListEqual(list(stats.columns), ["town", "stations"])
        self.assertListEqual(stats["town"].tolist(), ["Belgrade", "Novi Sad"])
        self.assertListEqual(stats["stations"].tolist(), [2, 1])

    def test_single_town_filter(self) -> None:
        total, stats = fetch_db_stats(self.db_url, town="Novi Sad")
        self.assertEqual(total, 3)
        self.assertEqual(len(stats), 1)
        self.assertEqual(stats.iloc[0]["stations"], 1)


if __name__ == "__main__":
    unittest.main()
