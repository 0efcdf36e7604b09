# ABOUTME: Orchestrates the conversion and engine-creation hooks into one switchable enrichment pipeline.
# ABOUTME: Registers the field, name, and title callbacks and follows the "enable" preference.

import logging
from collections.abc import MutableMapping, Sequence
from typing import Any

from multicite.citation.callbacks import (
    enrich_creator_names,
    enrich_title_fields,
    inject_csl_variables,
)
from multicite.citation.presets import current_preset
from multicite.config import (
    PREF_COMPENSATE_DOWNGRADE,
    PREF_ENABLE,
    PREF_HARDCODED_TITLES,
    InMemoryPreferences,
    PreferenceStore,
)
from multicite.pipeline.hooks import (
    ConversionCallback,
    ConversionHook,
    EngineCreationHook,
    run_callbacks,
)

logger = logging.getLogger(__name__)


class EnrichmentPipeline:
    """Parallel-language enrichment for a host's citation generation.

    Args:
        host_root: Object (or module) the hook paths are resolved against.
            None resolves them by import.
        convert_path: Dotted path of the record-to-CSL conversion function,
            or None to leave conversion unhooked.
        engine_path: Dotted path of the per-style engine factory, or None.
        preferences: Preference store; an in-memory one with defaults if omitted.
        additional_convert_paths: Other places holding a reference to the
            same conversion function that must be wrapped too.
    """

    def __init__(
        self,
        host_root: Any = None,
        convert_path: str | None = None,
        engine_path: str | None = None,
        preferences: PreferenceStore | None = None,
        additional_convert_paths: Sequence[str] = (),
    ) -> None:
        self.preferences: PreferenceStore = (
            preferences if preferences is not None else InMemoryPreferences()
        )
        self.conversion_hook: ConversionHook | None = None
        if convert_path is not None:
            self.conversion_hook = ConversionHook(
                convert_path,
                root=host_root,
                additional_paths=additional_convert_paths,
            )
        self.engine_hook: EngineCreationHook | None = None
        if engine_path is not None:
            self.engine_hook = EngineCreationHook(engine_path, root=host_root)
        self._active = False
        self._observer_token: object | None = None

    def _hooks(self) -> list[ConversionHook | EngineCreationHook]:
        return [hook for hook in (self.conversion_hook, self.engine_hook) if hook is not None]

    def enrichment_callbacks(self) -> list[ConversionCallback]:
        """The conversion callbacks, in the order they run."""
        return [inject_csl_variables, self._enrich_names, self._enrich_titles]

    def _enrich_names(self, item: Any, csl_item: MutableMapping[str, Any]) -> None:
        compensate = self.preferences.get(PREF_COMPENSATE_DOWNGRADE, True)
        enrich_creator_names(item, csl_item, compensate_downgrade=compensate is not False)

    def _enrich_titles(self, item: Any, csl_item: MutableMapping[str, Any]) -> None:
        if not self.preferences.get(PREF_HARDCODED_TITLES, False):
            return
        enrich_title_fields(item, csl_item, preset=current_preset(self.preferences))

    def install(self) -> bool:
        """Wrap both host functions. Returns False if already active or nothing could be wrapped."""
        if self._active:
            logger.debug("Enrichment pipeline already installed")
            return False

        if self.conversion_hook is not None:
            self.conversion_hook.install()
            self.conversion_hook.clear_callbacks()
            for callback in self.enrichment_callbacks():
                self.conversion_hook.register(callback)
        if self.engine_hook is not None:
            self.engine_hook.install()

        self._active = any(hook.is_installed() for hook in self._hooks())
        if self._active:
            logger.info("Enrichment pipeline installed")
        else:
            logger.warning("Enrichment pipeline could not wrap any host function")
        return self._active

    def remove(self) -> bool:
        if not self._active:
            logger.debug("Enrichment pipeline not installed, nothing to remove")
            return False
        if self.conversion_hook is not None:
            self.conversion_hook.remove()
            self.conversion_hook.clear_callbacks()
        if self.engine_hook is not None:
            self.engine_hook.remove()
        self._active = False
        logger.info("Enrichment pipeline removed")
        return True

    def is_installed(self) -> bool:
        return self._active

    def set_enabled(self, enabled: bool) -> None:
        if enabled and not self._active:
            self.install()
        elif not enabled and self._active:
            self.remove()

    def _on_enable_changed(self, value: Any) -> None:
        self.set_enabled(value is not False)

    def watch_preference(self) -> object:
        """Install or remove the hooks whenever the enable preference changes."""
        if self._observer_token is None:
            self._observer_token = self.preferences.register_observer(
                PREF_ENABLE, self._on_enable_changed
            )
        return self._observer_token

    def unwatch_preference(self) -> None:
        if self._observer_token is None:
            return
        self.preferences.unregister_observer(self._observer_token)
        self._observer_token = None

    def start(self) -> None:
        """Follow the enable preference from now on, installing if it is currently on."""
        self.set_enabled(self.preferences.get(PREF_ENABLE, True) is not False)
        self.watch_preference()

    def stop(self) -> None:
        self.unwatch_preference()
        self.set_enabled(False)

    def enrich(self, item: Any, csl_item: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Run the enrichment callbacks on one conversion result without any hooks installed."""
        run_callbacks(self.enrichment_callbacks(), item, csl_item)
        return csl_item
