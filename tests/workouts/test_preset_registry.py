import json
import logging
import tempfile
import unittest
from pathlib import Path

from intervals import BUILTIN_PRESETS, IntervalConfigurationError
from workouts import PresetError, PresetRegistry


class PresetRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.path = Path(temp_dir.name) / "data" / "presets.json"
        self.registry = PresetRegistry(self.path, logger=logging.getLogger("test.presets"))

    def test_builtin_presets_are_available_without_a_file(self) -> None:
        self.assertEqual(len(BUILTIN_PRESETS), len(self.registry.presets()))
        self.assertTrue(self.registry.preset_exists("Race Prep"))
        self.assertEqual([], self.registry.user_presets())
        self.assertFalse(self.path.exists())

    def test_user_presets_take_the_next_sort_order(self) -> None:
        first = self.registry.create_user_preset("Hills", 60, 30)
        second = self.registry.create_user_preset("  Long   Run ", 600, 60)

        self.assertEqual(0, first.sort_order)
        self.assertEqual(1, second.sort_order)
        self.assertEqual("Long Run", second.name)
        self.assertFalse(second.built_in)
        self.assertEqual("My Presets", second.category)
        self.assertEqual(["Long Run", "Hills"], [p.name for p in self.registry.user_presets()])
        self.assertEqual(["Hills", "Long Run"], [p.name for p in self.registry.presets()[-2:]])

    def test_names_are_unique_ignoring_case_and_spacing(self) -> None:
        self.registry.create_user_preset("Hills", 60, 30)

        for name in ("hills", " HILLS ", "easy  start", ""):
            with self.subTest(name=name):
                with self.assertRaises(PresetError):
                    self.registry.create_user_preset(name, 60, 30)

    def test_invalid_durations_are_rejected(self) -> None:
        with self.assertRaises(IntervalConfigurationError):
            self.registry.create_user_preset("Broken", 0, 30)
        self.assertFalse(self.registry.preset_exists("Broken"))

    def test_rename_and_delete_user_preset(self) -> None:
        self.registry.create_user_preset("Hills", 60, 30)

        self.assertTrue(self.registry.rename_preset("hills", "Hill Sprints"))
        self.assertFalse(self.registry.preset_exists("Hills"))
        self.assertEqual(60, self.registry.get("hill sprints").run_seconds)

        self.assertTrue(self.registry.delete_preset("Hill Sprints"))
        self.assertFalse(self.registry.preset_exists("Hill Sprints"))

    def test_rename_to_an_existing_name_is_rejected(self) -> None:
        self.registry.create_user_preset("Hills", 60, 30)
        self.registry.create_user_preset("Flats", 90, 30)

        with self.assertRaises(PresetError):
            self.registry.rename_preset("Flats", "Beginner")
        with self.assertRaises(PresetError):
            self.registry.rename_preset("Flats", "HILLS")
        self.assertTrue(self.registry.rename_preset("Flats", "flats"))

    def test_builtin_presets_cannot_be_renamed_or_deleted(self) -> None:
        with self.assertLogs("test.presets", level="WARNING"):
            self.assertFalse(self.registry.rename_preset("Easy Start", "Mine"))
        with self.assertLogs("test.presets", level="WARNING"):
            self.assertFalse(self.registry.delete_preset("Easy Start"))
        self.assertTrue(self.registry.preset_exists("Easy Start"))

    def test_unknown_preset_operations_raise(self) -> None:
        with self.assertRaises(PresetError):
            self.registry.rename_preset("Nope", "Other")
        with self.assertRaises(PresetError):
            self.registry.delete_preset("Nope")

    def test_user_presets_survive_a_reload(self) -> None:
        self.registry.create_user_preset("Hills", 60, 30)
        self.registry.create_user_preset("Flats", 90, 30)
        self.registry.delete_preset("Hills")

        reloaded = PresetRegistry(self.path)

        self.assertEqual(["Flats"], [p.name for p in reloaded.user_presets()])
        self.assertEqual(2, reloaded.create_user_preset("Tempo", 120, 60).sort_order)

    def test_malformed_records_are_skipped(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            json.dumps(
                [
                    {"name": "Good", "runSeconds": 60, "walkSeconds": 30, "sortOrder": 4},
                    {"name": "No Walk", "runSeconds": 60},
                    {"name": "Zero", "runSeconds": 0, "walkSeconds": 30},
                ]
            ),
            encoding="utf-8",
        )

        with self.assertLogs("test.presets", level="WARNING") as logs:
            registry = PresetRegistry(self.path, logger=logging.getLogger("test.presets"))

        self.assertEqual(["Good"], [p.name for p in registry.user_presets()])
        self.assertEqual(2, len(logs.records))

    def test_unreadable_file_raises(self) -> None:
        self.path.parent.mkdir(parents=True)
        for content in ("{not json", '{"name": "Hills"}'):
            with self.subTest(content=content):
                self.path.write_text(content, encoding="utf-8")
                with self.assertRaises(PresetError):
                    PresetRegistry(self.path)

    def test_in_memory_registry_writes_nothing(self) -> None:
        registry = PresetRegistry()

        registry.create_user_preset("Hills", 60, 30)

        self.assertIsNone(registry.path)
        self.assertTrue(registry.preset_exists("Hills"))


if __name__ == "__main__":
    unittest.main()
