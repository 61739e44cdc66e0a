"""Deep-link intents that start a workout (``runwalk://...``)."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlsplit

from intervals import IntervalConfiguration, builtin_preset
from workouts import PresetRegistry

INTENT_SCHEME = "runwalk"
INTENT_START = "start"
INTENT_PRESET = "preset"


class IntentError(ValueError):
    """Raised when a deep link cannot be mapped to a workout configuration."""


def resolve_intent(
    url: str,
    default_config: IntervalConfiguration,
    presets: Optional[PresetRegistry] = None,
) -> IntervalConfiguration:
    """Map a deep link to the configuration the session should start with.

    ``runwalk://start`` uses ``default_config``; ``run``/``walk`` query values
    override it and are clamped into the custom interval range.
    ``runwalk://preset?name=...`` looks the name up in ``presets`` (user and
    built-in presets), or among the built-in presets when no registry is given.
    """
    parts = urlsplit(url.strip())
    if parts.scheme.lower() != INTENT_SCHEME:
        raise IntentError(f"Unsupported intent scheme: {parts.scheme or '<none>'}")

    query = parse_qs(parts.query)
    action = parts.netloc.lower()

    if action == INTENT_START:
        run = _query_seconds(query, "run")
        walk = _query_seconds(query, "walk")
        if run is None and walk is None:
            return default_config
        return IntervalConfiguration.clamped(
            run if run is not None else default_config.run_seconds,
            walk if walk is not None else default_config.walk_seconds,
        )

    if action == INTENT_PRESET:
        names = query.get("name")
        if not names or not names[0].strip():
            raise IntentError("Preset intent requires a name")
        preset = presets.get(names[0]) if presets is not None else builtin_preset(names[0])
        if preset is None:
            raise IntentError(f"Unknown preset: {names[0]}")
        return preset.configuration

    raise IntentError(f"Unsupported intent: {action or '<none>'}")


def _query_seconds(query: dict[str, list[str]], key: str) -> Optional[int]:
    values = query.get(key)
    if not values:
        return None
    raw = values[0].strip()
    try:
        return int(raw)
    except ValueError as error:
        raise IntentError(f"Intent parameter '{key}' must be an integer, got: {raw!r}") from error
