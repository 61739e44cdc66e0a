"""Runtime engine exports."""

from .intents import IntentError, resolve_intent
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks

__all__ = [
    "IntentError",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "RuntimeHooks",
    "resolve_intent",
]
