"""Registry of built-in and user-created workout presets."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Optional

from intervals import BUILTIN_PRESETS, IntervalConfiguration, WorkoutPreset, sorted_presets
from intervals.configuration import CUSTOM_PRESET_CATEGORY


class PresetError(ValueError):
    """Raised for invalid preset operations or unreadable preset storage."""


def preset_key(name: str) -> str:
    return " ".join(name.split()).casefold()


class PresetRegistry:
    """Built-in presets plus user presets, optionally persisted as a JSON file.

    Names are unique ignoring case and repeated whitespace. Built-in presets
    cannot be renamed or deleted. A new user preset takes the next sort order
    after the highest existing user preset.
    """

    def __init__(
        self,
        path: Optional[str | Path] = None,
        *,
        builtins: Iterable[WorkoutPreset] = BUILTIN_PRESETS,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path).expanduser() if path else None
        self._logger = logger or logging.getLogger("presets")
        self._lock = threading.Lock()
        self._builtins = tuple(builtins)
        self._user: list[WorkoutPreset] = self._load()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def presets(self) -> list[WorkoutPreset]:
        with self._lock:
            return sorted_presets(self._builtins + tuple(self._user))

    def user_presets(self) -> list[WorkoutPreset]:
        """User presets, most recently created first."""
        with self._lock:
            return sorted(self._user, key=lambda preset: preset.sort_order, reverse=True)

    def get(self, name: str) -> Optional[WorkoutPreset]:
        with self._lock:
            return self._find_locked(name)

    def preset_exists(self, name: str) -> bool:
        return self.get(name) is not None

    def create_user_preset(self, name: str, run_seconds: int, walk_seconds: int) -> WorkoutPreset:
        clean_name = _clean_name(name)
        IntervalConfiguration(run_seconds=run_seconds, walk_seconds=walk_seconds)
        with self._lock:
            if self._find_locked(clean_name) is not None:
                raise PresetError(f"A preset named {clean_name!r} already exists")
            next_sort_order = max((preset.sort_order for preset in self._user), default=-1) + 1
            preset = WorkoutPreset(
                name=clean_name,
                run_seconds=run_seconds,
                walk_seconds=walk_seconds,
                category=CUSTOM_PRESET_CATEGORY,
                built_in=False,
                sort_order=next_sort_order,
            )
            self._save_locked(self._user + [preset])
            self._user.append(preset)
        self._logger.info("Created user preset '%s' (%s)", clean_name, preset.interval_summary)
        return preset

    def rename_preset(self, name: str, new_name: str) -> bool:
        """Rename a user preset; returns ``False`` for a built-in preset."""
        clean_name = _clean_name(new_name)
        with self._lock:
            preset = self._require_locked(name)
            if preset.built_in:
                self._logger.warning("Cannot rename built-in preset '%s'", preset.name)
                return False
            existing = self._find_locked(clean_name)
            if existing is not None and existing is not preset:
                raise PresetError(f"A preset named {clean_name!r} already exists")
            renamed = replace(preset, name=clean_name)
            updated = [renamed if item is preset else item for item in self._user]
            self._save_locked(updated)
            self._user = updated
        self._logger.info("Renamed preset '%s' to '%s'", preset.name, clean_name)
        return True

    def delete_preset(self, name: str) -> bool:
        """Delete a user preset; returns ``False`` for a built-in preset."""
        with self._lock:
            preset = self._require_locked(name)
            if preset.built_in:
                self._logger.warning("Cannot delete built-in preset '%s'", preset.name)
                return False
            updated = [item for item in self._user if item is not preset]
            self._save_locked(updated)
            self._user = updated
        self._logger.info("Deleted user preset '%s'", preset.name)
        return True

    def _find_locked(self, name: str) -> Optional[WorkoutPreset]:
        wanted = preset_key(name)
        for preset in self._builtins + tuple(self._user):
            if preset_key(preset.name) == wanted:
                return preset
        return None

    def _require_locked(self, name: str) -> WorkoutPreset:
        preset = self._find_locked(name)
        if preset is None:
            raise PresetError(f"Unknown preset: {name}")
        return preset

    def _load(self) -> list[WorkoutPreset]:
        if self._path is None:
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as error:
            raise PresetError(f"Failed to read presets from {self._path}: {error}") from error
        if not isinstance(raw, list):
            raise PresetError(f"Preset file {self._path} must contain a JSON list")

        presets = []
        for index, record in enumerate(raw):
            try:
                presets.append(_preset_from_dict(record))
            except (KeyError, TypeError, ValueError) as error:
                self._logger.warning("Skipping malformed preset #%d in %s: %s", index, self._path, error)
        return presets

    def _save_locked(self, presets: list[WorkoutPreset]) -> None:
        if self._path is None:
            return
        data = json.dumps([_preset_to_dict(preset) for preset in presets], indent=2)
        temp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(temp_name, self._path)
            temp_name = None
        except OSError as error:
            raise PresetError(f"Failed to write presets to {self._path}: {error}") from error
        finally:
            if temp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)


def _clean_name(name: str) -> str:
    clean = " ".join(str(name).split())
    if not clean:
        raise PresetError("Preset name cannot be empty")
    return clean


def _preset_to_dict(preset: WorkoutPreset) -> dict[str, Any]:
    return {
        "name": preset.name,
        "runSeconds": preset.run_seconds,
        "walkSeconds": preset.walk_seconds,
        "sortOrder": preset.sort_order,
    }


def _preset_from_dict(record: dict[str, Any]) -> WorkoutPreset:
    IntervalConfiguration(run_seconds=record["runSeconds"], walk_seconds=record["walkSeconds"])
    return WorkoutPreset(
        name=_clean_name(record["name"]),
        run_seconds=record["runSeconds"],
        walk_seconds=record["walkSeconds"],
        category=CUSTOM_PRESET_CATEGORY,
        built_in=False,
        sort_order=int(record.get("sortOrder", 0)),
    )
