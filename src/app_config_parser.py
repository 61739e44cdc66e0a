"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    MAX_INTERVAL_SECONDS,
    AppConfig,
    AppConfigurationError,
    CueSettings,
    HistorySettings,
    PresetSettings,
    SessionSettings,
    SharedStateSettings,
    UIServerSettings,
)


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    session = _parse_session_settings(_section(raw, "session"))
    shared_state = _parse_shared_state_settings(
        _section(raw, "shared_state"),
        base_dir=base_dir,
    )
    _check_companion_freshness(session, shared_state)
    return AppConfig(
        session=session,
        shared_state=shared_state,
        cues=_parse_cue_settings(_section(raw, "cues")),
        history=_parse_history_settings(_section(raw, "history"), base_dir=base_dir),
        presets=_parse_preset_settings(_section(raw, "presets"), base_dir=base_dir),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server")),
        source_file=source_file,
    )


def _check_companion_freshness(
    session: SessionSettings,
    shared_state: SharedStateSettings,
) -> None:
    # A running session must refresh the slot before companions call it stale.
    staleness = shared_state.staleness_seconds
    if session.tick_interval_seconds >= staleness:
        raise AppConfigurationError(
            "session.tick_interval_seconds must be less than "
            f"shared_state.staleness_seconds ({staleness:g})."
        )
    if shared_state.publish_interval_seconds >= staleness:
        raise AppConfigurationError(
            "shared_state.publish_interval_seconds must be less than "
            f"shared_state.staleness_seconds ({staleness:g})."
        )


def _parse_session_settings(section: Mapping[str, Any]) -> SessionSettings:
    defaults = SessionSettings()
    tick_interval = _as_float(
        section.get("tick_interval_seconds", defaults.tick_interval_seconds),
        "session.tick_interval_seconds",
    )
    if tick_interval <= 0:
        raise AppConfigurationError("session.tick_interval_seconds must be positive.")
    run_seconds = _as_interval(
        section.get("run_seconds", defaults.run_seconds),
        "session.run_seconds",
    )
    walk_seconds = _as_interval(
        section.get("walk_seconds", defaults.walk_seconds),
        "session.walk_seconds",
    )
    return SessionSettings(
        run_seconds=run_seconds,
        walk_seconds=walk_seconds,
        tick_interval_seconds=tick_interval,
    )


def _parse_shared_state_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> SharedStateSettings:
    defaults = SharedStateSettings()
    store_dir = _as_str(section.get("store_dir", defaults.store_dir), "shared_state.store_dir")
    if not store_dir:
        raise AppConfigurationError("shared_state.store_dir cannot be empty.")
    slot = _as_str(section.get("slot", defaults.slot), "shared_state.slot")
    if not slot:
        raise AppConfigurationError("shared_state.slot cannot be empty.")
    staleness = _as_float(
        section.get("staleness_seconds", defaults.staleness_seconds),
        "shared_state.staleness_seconds",
    )
    if staleness <= 0:
        raise AppConfigurationError("shared_state.staleness_seconds must be positive.")
    publish_interval = _as_float(
        section.get("publish_interval_seconds", defaults.publish_interval_seconds),
        "shared_state.publish_interval_seconds",
    )
    if publish_interval < 0:
        raise AppConfigurationError(
            "shared_state.publish_interval_seconds must not be negative."
        )
    return SharedStateSettings(
        enabled=_as_bool(section.get("enabled", defaults.enabled), "shared_state.enabled"),
        store_dir=_resolve_path(base_dir, store_dir),
        slot=slot,
        publish_interval_seconds=publish_interval,
        staleness_seconds=staleness,
    )


def _parse_cue_settings(section: Mapping[str, Any]) -> CueSettings:
    defaults = CueSettings()
    return CueSettings(
        voice_enabled=_as_bool(
            section.get("voice_enabled", defaults.voice_enabled),
            "cues.voice_enabled",
        ),
        haptics_enabled=_as_bool(
            section.get("haptics_enabled", defaults.haptics_enabled),
            "cues.haptics_enabled",
        ),
        bells_enabled=_as_bool(
            section.get("bells_enabled", defaults.bells_enabled),
            "cues.bells_enabled",
        ),
    )


def _parse_history_settings(section: Mapping[str, Any], *, base_dir: Path) -> HistorySettings:
    defaults = HistorySettings()
    enabled = _as_bool(section.get("enabled", defaults.enabled), "history.enabled")
    path = _as_str(section.get("path", defaults.path), "history.path")
    if enabled and not path:
        raise AppConfigurationError("history.path cannot be empty when history is enabled.")
    return HistorySettings(enabled=enabled, path=_resolve_path(base_dir, path))


def _parse_preset_settings(section: Mapping[str, Any], *, base_dir: Path) -> PresetSettings:
    defaults = PresetSettings()
    path = _as_str(section.get("path", defaults.path), "presets.path")
    return PresetSettings(path=_resolve_path(base_dir, path))


def _parse_ui_server_settings(section: Mapping[str, Any]) -> UIServerSettings:
    defaults = UIServerSettings()
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", defaults.enabled), "ui_server.enabled"),
        host=_as_str(section.get("host", defaults.host), "ui_server.host"),
        port=_as_int(section.get("port", defaults.port), "ui_server.port"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_interval(value: Any, field: str) -> int:
    seconds = _as_int(value, field)
    if not 1 <= seconds <= MAX_INTERVAL_SECONDS:
        raise AppConfigurationError(
            f"{field} must be in [1, {MAX_INTERVAL_SECONDS}], got: {seconds}"
        )
    return seconds


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
