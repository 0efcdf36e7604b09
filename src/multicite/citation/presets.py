# ABOUTME: Title presets: which field variants to print, in what order, and which to emphasize.
# ABOUTME: Presets live in the preference store as JSON; the active one is chosen by a user setting.

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from multicite.config import (
    DEFAULT_PRESETS_JSON,
    PREF_TITLE_PRESETS,
    PREF_TITLE_STYLE,
    PreferenceStore,
)
from multicite.metadata.types import FieldVariants

logger = logging.getLogger(__name__)

TITLE_VARIANTS = ("romanized", "original", "english")


@dataclass
class TitlePreset:
    """Ordered variants to print plus a per-variant emphasis flag.

    Emphasis is written as ``<i>`` markup. Styles that already italicize a
    title flip nested emphasis back to roman, so emphasizing the original and
    the translation inside an italic title keeps only the romanization italic.
    """

    order: list[str]
    italicize: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": list(self.order),
            "italicize": {v: bool(self.italicize.get(v, False)) for v in TITLE_VARIANTS},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TitlePreset":
        return cls(order=list(data["order"]), italicize=dict(data["italicize"]))


def validate_preset(preset: Any) -> bool:
    """Check a preset dict (or TitlePreset) against the expected shape."""
    if isinstance(preset, TitlePreset):
        preset = preset.to_dict()
    if not isinstance(preset, dict):
        return False
    order = preset.get("order")
    if not isinstance(order, list) or any(v not in TITLE_VARIANTS for v in order):
        return False
    italicize = preset.get("italicize")
    if not isinstance(italicize, dict):
        return False
    return all(isinstance(italicize.get(v), bool) for v in TITLE_VARIANTS)


def default_presets() -> dict[str, TitlePreset]:
    return {name: TitlePreset.from_dict(data) for name, data in json.loads(DEFAULT_PRESETS_JSON).items()}


def all_presets(prefs: PreferenceStore) -> dict[str, TitlePreset]:
    """Every stored preset; the defaults if the stored JSON is unreadable."""
    raw = prefs.get(PREF_TITLE_PRESETS)
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        return {
            name: TitlePreset.from_dict(value)
            for name, value in data.items()
            if validate_preset(value)
        }
    except (TypeError, ValueError, AttributeError, KeyError) as exc:
        logger.warning("Stored title presets are unreadable, using defaults: %s", exc)
        return default_presets()


def _store(prefs: PreferenceStore, presets: dict[str, TitlePreset]) -> None:
    prefs.set(PREF_TITLE_PRESETS, json.dumps({k: v.to_dict() for k, v in presets.items()}))


def get_preset(prefs: PreferenceStore, name: str) -> TitlePreset | None:
    return all_presets(prefs).get(name)


def current_preset(prefs: PreferenceStore) -> TitlePreset | None:
    """The preset named by the active title-style setting."""
    return get_preset(prefs, prefs.get(PREF_TITLE_STYLE) or "")


def preset_names(prefs: PreferenceStore) -> list[str]:
    return list(all_presets(prefs))


def add_or_update_preset(prefs: PreferenceStore, name: str, preset: TitlePreset) -> bool:
    if not validate_preset(preset):
        logger.warning("Invalid title preset configuration for %r", name)
        return False
    presets = all_presets(prefs)
    presets[name] = preset
    _store(prefs, presets)
    logger.info("Saved title preset %r", name)
    return True


def set_active_preset(prefs: PreferenceStore, name: str) -> bool:
    if get_preset(prefs, name) is None:
        logger.warning("Title preset not found: %r", name)
        return False
    prefs.set(PREF_TITLE_STYLE, name)
    return True


def delete_preset(prefs: PreferenceStore, name: str) -> bool:
    """Delete a preset; if it was active, the first remaining preset becomes active."""
    presets = all_presets(prefs)
    if name not in presets:
        logger.warning("Title preset not found: %r", name)
        return False
    del presets[name]
    _store(prefs, presets)
    if prefs.get(PREF_TITLE_STYLE) == name and presets:
        set_active_preset(prefs, next(iter(presets)))
    return True


def reset_presets(prefs: PreferenceStore) -> None:
    prefs.set(PREF_TITLE_PRESETS, DEFAULT_PRESETS_JSON)


def format_title_field(variants: FieldVariants, preset: TitlePreset) -> str:
    """Join a field's variants in preset order.

    The English translation is bracketed. Returns an empty string when none
    of the preset's variants is present.
    """
    parts: list[str] = []
    for variant in preset.order:
        text = variants.get(variant) or ""
        if not text:
            continue
        if variant == "english":
            text = f"[{text}]"
        if preset.italicize.get(variant):
            text = f"<i>{text}</i>"
        parts.append(text)
    return " ".join(parts)
