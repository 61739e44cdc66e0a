import unittest

from intervals import IntervalConfiguration
from runtime import IntentError, resolve_intent
from workouts import PresetRegistry

DEFAULT = IntervalConfiguration(run_seconds=45, walk_seconds=75)


class ResolveIntentTests(unittest.TestCase):
    def test_start_uses_default_configuration(self) -> None:
        self.assertIs(DEFAULT, resolve_intent("runwalk://start", DEFAULT))

    def test_start_with_custom_intervals_is_clamped(self) -> None:
        config = resolve_intent("runwalk://start?run=5&walk=4000", DEFAULT)

        self.assertEqual(IntervalConfiguration(run_seconds=10, walk_seconds=1800), config)

    def test_start_with_one_value_keeps_the_other_default(self) -> None:
        config = resolve_intent("runwalk://start?run=90", DEFAULT)

        self.assertEqual(IntervalConfiguration(run_seconds=90, walk_seconds=75), config)

    def test_preset_intent_resolves_builtin_preset(self) -> None:
        config = resolve_intent("runwalk://preset?name=Race%20Prep", DEFAULT)

        self.assertEqual(IntervalConfiguration(run_seconds=300, walk_seconds=60), config)

    def test_preset_intent_looks_up_user_presets_in_the_registry(self) -> None:
        presets = PresetRegistry()
        presets.create_user_preset("Tempo Mix", 240, 90)

        user = resolve_intent("runwalk://preset?name=Tempo%20Mix", DEFAULT, presets)
        builtin = resolve_intent("runwalk://preset?name=easy%20start", DEFAULT, presets)

        self.assertEqual(IntervalConfiguration(run_seconds=240, walk_seconds=90), user)
        self.assertEqual(IntervalConfiguration(run_seconds=30, walk_seconds=60), builtin)
        with self.assertRaises(IntentError):
            resolve_intent("runwalk://preset?name=Tempo%20Mix", DEFAULT)

    def test_invalid_intents_raise(self) -> None:
        for url in (
            "https://start",
            "runwalk://stop",
            "runwalk://preset",
            "runwalk://preset?name=Unknown",
            "runwalk://start?run=fast",
        ):
            with self.subTest(url=url):
                with self.assertRaises(IntentError):
                    resolve_intent(url, DEFAULT)


if __name__ == "__main__":
    unittest.main()
