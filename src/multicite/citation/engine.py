# ABOUTME: Applies a resolved StyleConfig to a host citation engine instance.
# ABOUTME: Sets the active name slots once per engine and keeps them in force across host resets.

import functools
import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from multicite.citation.style_config import (
    StyleConfig,
    StyleConfigError,
    default_style_config,
    extract_config_from_style,
)
from multicite.citation.variants import NATURAL_VARIANT, PUNCTUATED_VARIANT

logger = logging.getLogger(__name__)

CONFIGURED_FLAG = "_multicite_configured"
CONFIG_ATTR = "_multicite_config"
OVERRIDE_ATTR = "_multicite_lang_override"
PATCH_MARKER = "_multicite_lang_pref_patch"

LANG_PREFS_KEY = "cite-lang-prefs"


@runtime_checkable
class CitationEngine(Protocol):
    """The slice of the host's citation engine we drive."""

    opt: dict[str, Any]

    def set_lang_prefs_for_cites(self, prefs: dict[str, list[str]]) -> None: ...


def _lang_pref_targets(engine: Any) -> list[dict[str, Any]]:
    """Every cite-lang-prefs mapping the engine is known to keep."""
    targets = []
    opt = getattr(engine, "opt", None)
    if isinstance(opt, dict) and isinstance(opt.get(LANG_PREFS_KEY), dict):
        targets.append(opt[LANG_PREFS_KEY])
    state = getattr(engine, "state", None)
    state_opt = getattr(state, "opt", None)
    if isinstance(state_opt, dict) and isinstance(state_opt.get(LANG_PREFS_KEY), dict):
        targets.append(state_opt[LANG_PREFS_KEY])
    return targets


def _enforce_persons(engine: Any, persons: list[str]) -> None:
    """Overwrite the persons slot list in place wherever the engine keeps it."""
    for prefs in _lang_pref_targets(engine):
        current = prefs.get("persons")
        if isinstance(current, list):
            current[:] = persons
        else:
            prefs["persons"] = list(persons)


def transliteration_tags(config: StyleConfig) -> list[str]:
    """Pick which romanized name variant the engine should read for the translit slot."""
    if config.separator == "comma":
        return [PUNCTUATED_VARIANT]
    return [NATURAL_VARIANT]


def configure_engine(engine: Any, config: StyleConfig) -> None:
    """Apply a style config to one engine.

    Engines without ``set_lang_prefs_for_cites`` are left alone. Faults from
    the engine are logged, never raised: a misbehaving engine must still
    render the host's plain citations.
    """
    setter = getattr(engine, "set_lang_prefs_for_cites", None)
    if not callable(setter):
        logger.debug("Engine has no set_lang_prefs_for_cites, skipping configuration")
        return

    prefs: dict[str, list[str]] = {}
    if config.persons:
        prefs["persons"] = list(config.persons)

    try:
        if "persons" in prefs:
            snapshot = list(prefs["persons"])
            setattr(engine, OVERRIDE_ATTR, lambda: _enforce_persons(engine, snapshot))
        else:
            setattr(engine, OVERRIDE_ATTR, None)

        setter(prefs)
        override = getattr(engine, OVERRIDE_ATTR, None)
        if override is not None:
            override()
    except Exception:
        logger.exception("Failed to set name slots on citation engine")
        return

    tags = transliteration_tags(config)
    tag_setter = getattr(engine, "set_lang_tags_for_csl_transliteration", None)
    if callable(tag_setter):
        try:
            tag_setter(tags)
        except Exception:
            logger.exception("Failed to set transliteration tags on citation engine")

    logger.debug("Configured engine: persons=%s, transliteration=%s", prefs.get("persons"), tags)


def resolve_style_config(style: Any) -> StyleConfig:
    """Config for a host style, falling back to the default when absent or malformed."""
    try:
        config = extract_config_from_style(style)
    except StyleConfigError as exc:
        logger.error("Malformed name-rendering directive in style %r: %s", style, exc)
        return default_style_config()
    except Exception:
        logger.exception("Could not read directive from style %r, using default", style)
        return default_style_config()
    return config if config is not None else default_style_config()


def configure_once(engine: Any, style: Any) -> StyleConfig | None:
    """Configure an engine for its style unless this instance was already configured.

    Returns the config that was applied, or None when the engine was already done.
    """
    if getattr(engine, CONFIGURED_FLAG, False):
        return None
    config = resolve_style_config(style)
    configure_engine(engine, config)
    try:
        setattr(engine, CONFIG_ATTR, config)
        setattr(engine, CONFIGURED_FLAG, True)
    except AttributeError:
        logger.warning("Engine %r does not accept attributes, configuration will repeat", engine)
    return config


def install_lang_pref_patch(engine_cls: type) -> bool:
    """Make later host calls to ``set_lang_prefs_for_cites`` re-assert our persons list.

    The host may reset the engine's language preferences after we configure
    it. Wrapping the class method runs the per-instance override afterwards.
    Returns False when the class is already patched or has no such method.
    """
    original: Callable[..., Any] | None = getattr(engine_cls, "set_lang_prefs_for_cites", None)
    if original is None:
        return False
    if getattr(original, PATCH_MARKER, False):
        return False

    @functools.wraps(original)
    def patched(self: Any, *args: Any, **kwargs: Any) -> Any:
        result = original(self, *args, **kwargs)
        override = getattr(self, OVERRIDE_ATTR, None)
        if override is not None:
            try:
                override()
            except Exception:
                logger.exception("Failed to re-apply name slots after host reset")
        return result

    setattr(patched, PATCH_MARKER, True)
    setattr(patched, "__multicite_original__", original)
    engine_cls.set_lang_prefs_for_cites = patched
    logger.debug("Patched %s.set_lang_prefs_for_cites", engine_cls.__name__)
    return True


def remove_lang_pref_patch(engine_cls: type) -> bool:
    current = getattr(engine_cls, "set_lang_prefs_for_cites", None)
    if current is None or not getattr(current, PATCH_MARKER, False):
        return False
    engine_cls.set_lang_prefs_for_cites = current.__multicite_original__
    return True
