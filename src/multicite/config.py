# ABOUTME: User-level preferences for the enrichment pipeline and the in-memory store used by default.
# ABOUTME: Hosts with their own preference system plug in through the PreferenceStore protocol.

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

PREF_ENABLE = "enable"
PREF_HARDCODED_TITLES = "hardcoded_titles"
PREF_TITLE_STYLE = "hardcoded_title_style"
PREF_TITLE_PRESETS = "hardcoded_title_presets"
PREF_COMPENSATE_DOWNGRADE = "compensate_downgrade"

DEFAULT_PRESETS_JSON = json.dumps(
    {
        "chicago": {
            "order": ["romanized", "original", "english"],
            "italicize": {"romanized": False, "original": True, "english": True},
        },
        "mla": {
            "order": ["romanized", "original", "english"],
            "italicize": {"romanized": False, "original": True, "english": True},
        },
        "apa": {
            "order": ["romanized"],
            "italicize": {"romanized": False, "original": False, "english": False},
        },
    }
)

DEFAULT_PREFERENCES: dict[str, Any] = {
    PREF_ENABLE: True,
    PREF_HARDCODED_TITLES: False,
    PREF_TITLE_STYLE: "chicago",
    PREF_TITLE_PRESETS: DEFAULT_PRESETS_JSON,
    PREF_COMPENSATE_DOWNGRADE: True,
}


@runtime_checkable
class PreferenceStore(Protocol):
    """Key/value preference storage owned by the host."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def register_observer(self, key: str, callback: Callable[[Any], None]) -> object: ...

    def unregister_observer(self, token: object) -> None: ...


class InMemoryPreferences:
    """Dict-backed PreferenceStore seeded with DEFAULT_PREFERENCES."""

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(DEFAULT_PREFERENCES)
        if overrides:
            self._values.update(overrides)
        self._observers: dict[object, tuple[str, Callable[[Any], None]]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        for observed_key, callback in list(self._observers.values()):
            if observed_key != key:
                continue
            try:
                callback(value)
            except Exception:
                logger.exception("Preference observer for %r failed", key)

    def register_observer(self, key: str, callback: Callable[[Any], None]) -> object:
        token = object()
        self._observers[token] = (key, callback)
        return token

    def unregister_observer(self, token: object) -> None:
        self._observers.pop(token, None)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


def load_preferences(path: Path | None = None) -> InMemoryPreferences:
    """Build a preference store from defaults plus an optional JSON file of overrides.

    Raises:
        ValueError: If the file is not a JSON object.
    """
    if path is None:
        return InMemoryPreferences()
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"Preferences file must contain a JSON object: {path}"
        raise ValueError(msg)
    # Presets may be given inline as an object; the store keeps them as JSON text.
    presets = data.get(PREF_TITLE_PRESETS)
    if isinstance(presets, dict):
        data[PREF_TITLE_PRESETS] = json.dumps(presets)
    return InMemoryPreferences(data)
