import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from shared_state import SharedSnapshot, SnapshotDecodeError, SnapshotStore, SnapshotStoreError

T0 = 1_700_000_000.0


class SnapshotStoreTests(unittest.TestCase):
    def test_missing_slot_reads_as_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SnapshotStore(temp_dir)

            self.assertIsNone(store.read())
            self.assertIsNone(store.read_raw())

    def test_write_replaces_whole_record(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SnapshotStore(Path(temp_dir) / "nested", slot="state")
            first = SharedSnapshot.idle(T0)
            second = SharedSnapshot.idle(T0 + 1, run_interval_setting=90)

            store.write(first)
            store.write(second)

            self.assertEqual(second, store.read())
            self.assertEqual(Path(temp_dir) / "nested" / "state.json", store.path)
            self.assertEqual(["state.json"], os.listdir(Path(temp_dir) / "nested"))

    def test_failed_replace_leaves_previous_record_and_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SnapshotStore(temp_dir)
            store.write(SharedSnapshot.idle(T0))

            with patch("shared_state.store.os.replace", side_effect=OSError("read-only")):
                with self.assertRaises(SnapshotStoreError):
                    store.write(SharedSnapshot.idle(T0 + 5))

            self.assertEqual(T0, store.read().last_update)
            self.assertEqual([store.path.name], os.listdir(temp_dir))

    def test_corrupt_record_raises_decode_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SnapshotStore(temp_dir)
            store.path.write_text("garbage", encoding="utf-8")

            with self.assertRaises(SnapshotDecodeError):
                store.read()

    def test_clear_removes_slot_and_tolerates_missing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = SnapshotStore(temp_dir)
            store.write(SharedSnapshot.idle(T0))

            store.clear()
            store.clear()

            self.assertIsNone(store.read())

    def test_rejects_slot_names_with_path_separators(self) -> None:
        for slot in ("", "a/b", "..", "a\\b"):
            with self.subTest(slot=slot):
                with self.assertRaises(ValueError):
                    SnapshotStore("/tmp", slot=slot)


if __name__ == "__main__":
    unittest.main()
