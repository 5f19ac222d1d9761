import os
import tempfile
import unittest

from sqlalchemy import create_engine

from charger_engine.ingestion.errors import StoreReadError, StoreWriteError
from charger_engine.ingestion.models import create_tables
from charger_engine.ingestion.normalize import StationRecord
from charger_engine.ingestion.storage import MAX_BATCH_SIZE, StationStore


def _record(station_id: str, town: str = "Novi Sad", **fields) -> StationRecord:
    return StationRecord(id=station_id, town=town, town_raw=fields.pop("town_raw", town), **fields)


class TestStationStore(unittest.TestCase):
    def setUp(self) -> None:
        # Use a temporary sqlite file to avoid in-memory connection scoping issues
        self._tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self._tmpdir.name, "test.db")
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        create_tables(self._engine)
        self.store = StationStore(self._engine)

    def tearDown(self) -> None:
        self._engine.dispose()
        self._tmpdir.cleanup()

    def test_put_and_query_by_town(self) -> None:
        self.store.put_batch([
            _record("1", title="Promenada", latitude=45.24, point_count=2),
            _record("2"),
            _record("3", town="Belgrade", town_raw="Beograd"),
        ])

        found = self.store.query_by_town("Novi Sad")
        self.assertEqual([r.id for r in found], ["1", "2"])
        self.assertEqual(found[0].title, "Promenada")
        self.assertAlmostEqual(found[0].latitude, 45.24)
        self.assertEqual(found[0].point_count, 2)

        belgrade = self.store.query_by_town("Belgrade")
        self.assertEqual(len(belgrade), 1)
        self.assertEqual(belgrade[0].town_raw, "Beograd")

    def test_query_is_exact_match(self) -> None:
        self.store.put_batch([_record("1", town="Belgrade")])
        self.assertEqual(self.store.query_by_town("belgrade"), [])
        self.assertEqual(self.store.query_by_town("Belgr"), [])

    def test_put_overwrites_whole_record(self) -> None:
        self.store.put_batch([_record("1", title="Old title", postcode="21000")])
        self.store.put_batch([_record("1", town="Subotica", title="New title")])

        self.assertEqual(self.store.query_by_town("Novi Sad"), [])
        updated = self.store.query_by_town("Subotica")
        self.assertEqual(updated[0].title, "New title")
        self.assertIsNone(updated[0].postcode)
        self.assertEqual(self.store.count(), 1)

    def test_delete_batch(self) -> None:
        self.store.put_batch([_record(str(i)) for i in range(5)])
        self.store.delete_batch(["1", "3", "missing"])
        self.assertEqual(self.store.scan_ids(), {"0", "2", "4"})

    def test_scan_ids_pages_through_whole_table(self) -> None:
        ids = [f"{i:03d}" for i in range(60)]
        for start in range(0, len(ids), MAX_BATCH_SIZE):
            self.store.put_batch([_record(i) for i in ids[start:start + MAX_BATCH_SIZE]])

        self.assertEqual(self.store.scan_ids(page_size=7), set(ids))
        # page size dividing the row count exactly
        self.assertEqual(self.store.scan_ids(page_size=20), set(ids))

    def test_scan_ids_empty_table(self) -> None:
        self.assertEqual(self.store.scan_ids(), set())

    def test_batches_above_limit_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.store.put_batch([_record(str(i)) for i in range(MAX_BATCH_SIZE + 1)])
        with self.assertRaises(ValueError):
            self.store.delete_batch([str(i) for i in range(MAX_BATCH_SIZE + 1)])

    def test_town_counts(self) -> None:
        self.store.put_batch([
            _record("1", town="Belgrade"),
            _record("2", town="Belgrade"),
            _record("3", town="Niš"),
        ])
        self.assertEqual(self.store.town_counts(), {"Belgrade": 2, "Niš": 1})

    def test_missing_table_surfaces_store_errors(self) -> None:
        engine = create_engine(f"sqlite:///{os.path.join(self._tmpdir.name, 'empty.db')}", future=True)
        store = StationStore(engine)
        try:
            with self.assertRaises(StoreReadError):
                store.query_by_town("Belgrade")
            with self.assertRaises(StoreReadError):
                store.scan_ids()
            with self.assertRaises(StoreWriteError):
                store.put_batch([_record("1")])
            with self.assertRaises(StoreWriteError):
                store.delete_batch(["1"])
        finally:
            engine.dispose()


if __name__ == "__main__":
    unittest.main()
