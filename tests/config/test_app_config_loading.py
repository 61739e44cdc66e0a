import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    load_app_config,
    resolve_config_path,
)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [shared_state]
                    store_dir = "state"

                    [history]
                    path = "data/workouts.jsonl"

                    [presets]
                    path = "data/presets.json"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertEqual(str((root / "state").resolve()), app_config.shared_state.store_dir)
            self.assertEqual(
                str((root / "data/workouts.jsonl").resolve()),
                app_config.history.path,
            )
            self.assertEqual(
                str((root / "data/presets.json").resolve()),
                app_config.presets.path,
            )

    def test_load_app_config_reads_every_section(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [session]
                    run_seconds = 90
                    walk_seconds = 45
                    tick_interval_seconds = 0.5

                    [shared_state]
                    enabled = false
                    slot = "watchState"
                    publish_interval_seconds = 2
                    staleness_seconds = 8.5

                    [cues]
                    voice_enabled = true
                    haptics_enabled = "off"

                    [history]
                    enabled = false

                    [ui_server]
                    enabled = true
                    host = "0.0.0.0"
                    port = 9001
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(90, app_config.session.run_seconds)
            self.assertEqual(45, app_config.session.walk_seconds)
            self.assertEqual(0.5, app_config.session.tick_interval_seconds)
            self.assertFalse(app_config.shared_state.enabled)
            self.assertEqual("watchState", app_config.shared_state.slot)
            self.assertEqual(2.0, app_config.shared_state.publish_interval_seconds)
            self.assertEqual(8.5, app_config.shared_state.staleness_seconds)
            self.assertTrue(app_config.cues.voice_enabled)
            self.assertFalse(app_config.cues.haptics_enabled)
            self.assertTrue(app_config.cues.bells_enabled)
            self.assertFalse(app_config.history.enabled)
            self.assertTrue(app_config.ui_server.enabled)
            self.assertEqual(9001, app_config.ui_server.port)

    def test_invalid_values_name_the_field(self) -> None:
        cases = {
            "[session]\nrun_seconds = 0": "session.run_seconds",
            "[session]\nwalk_seconds = 1801": "session.walk_seconds",
            "[session]\ntick_interval_seconds = 0": "session.tick_interval_seconds",
            "[session]\ntick_interval_seconds = 5": "session.tick_interval_seconds",
            "[shared_state]\npublish_interval_seconds = 6": "shared_state.publish_interval_seconds",
            "[presets]\npath = 3": "presets.path",
            "[cues]\nvoice_enabled = 3": "cues.voice_enabled",
            "[ui_server]\nport = \"high\"": "ui_server.port",
            "[shared_state]\nstaleness_seconds = -1": "shared_state.staleness_seconds",
            "[history]\npath = \"\"": "history.path",
            "session = 5": "[session]",
        }
        for content, field in cases.items():
            with self.subTest(field=field):
                with tempfile.TemporaryDirectory() as temp_dir:
                    config_path = Path(temp_dir) / "config.toml"
                    _write_text(config_path, content)

                    with self.assertRaises(AppConfigurationError) as context:
                        load_app_config(str(config_path))

                    self.assertIn(field, str(context.exception))

    def test_invalid_toml_raises_configuration_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(config_path, "[session\n")

            with self.assertRaises(AppConfigurationError):
                load_app_config(str(config_path))

    def test_missing_explicit_config_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(Path(temp_dir) / "missing.toml"))

    def test_missing_default_config_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=Path(temp_dir)):
                    app_config = load_app_config()

            self.assertEqual(30, app_config.session.run_seconds)
            self.assertEqual(60, app_config.session.walk_seconds)
            self.assertEqual("", app_config.source_file)

    def test_resolve_config_path_prefers_environment_variable(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            env_config = Path(temp_dir) / "custom.toml"

            with patch.dict(os.environ, {"APP_CONFIG_FILE": str(env_config)}, clear=True):
                resolved = resolve_config_path()

            self.assertEqual(env_config, resolved)


if __name__ == "__main__":
    unittest.main()
