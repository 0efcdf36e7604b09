# ABOUTME: The two host hooks: record-to-CSL conversion with ordered enrichment callbacks, and engine creation.
# ABOUTME: Each callback runs in its own failure boundary so the host's own conversion always completes.

import logging
from collections.abc import Callable, MutableMapping, Sequence
from typing import Any

from multicite.citation.engine import configure_once, install_lang_pref_patch, remove_lang_pref_patch
from multicite.pipeline.interceptor import DEFAULT_MARKER, Interceptor, InterceptorState

logger = logging.getLogger(__name__)

ConversionCallback = Callable[[Any, MutableMapping[str, Any]], None]
PreConversionCallback = Callable[[Any], None]


_NO_RECORD = object()


def _record_argument(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    """Find the host record among a conversion call's arguments."""
    if args:
        return args[0]
    if "item" in kwargs:
        return kwargs["item"]
    return next(iter(kwargs.values()), _NO_RECORD)


def _callback_name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


def run_callbacks(
    callbacks: Sequence[ConversionCallback],
    item: Any,
    csl_item: MutableMapping[str, Any],
) -> None:
    """Run conversion callbacks in order. A failing callback is logged and skipped."""
    for index, callback in enumerate(callbacks):
        try:
            callback(item, csl_item)
        except Exception:
            logger.exception("Callback %d (%s) failed", index, _callback_name(callback))


class ConversionHook:
    """Wraps the host's record-to-CSL conversion function.

    Pre-conversion callbacks see the host record before the original
    function runs; conversion callbacks see the record and the converted CSL
    item afterwards and modify the item in place. Both lists run in
    registration order. The host record is the wrapped call's first
    positional argument; a record passed by keyword is found as ``item=``
    or, failing that, the first keyword argument.
    """

    def __init__(
        self,
        target_path: str,
        *,
        root: Any = None,
        additional_paths: Sequence[str] = (),
        marker: str = DEFAULT_MARKER,
    ) -> None:
        self._callbacks: list[ConversionCallback] = []
        self._pre_callbacks: list[PreConversionCallback] = []
        self.interceptor = Interceptor(
            target_path,
            root=root,
            before_call=self._before_conversion,
            after_call=self._after_conversion,
            marker=marker,
            additional_paths=additional_paths,
        )

    def install(self) -> bool:
        return self.interceptor.install()

    def remove(self) -> bool:
        return self.interceptor.remove()

    def is_installed(self) -> bool:
        return self.interceptor.is_installed()

    def register(self, callback: ConversionCallback) -> None:
        self._callbacks.append(callback)
        logger.debug("Registered conversion callback, total: %d", len(self._callbacks))

    def register_pre_conversion(self, callback: PreConversionCallback) -> None:
        self._pre_callbacks.append(callback)
        logger.debug("Registered pre-conversion callback, total: %d", len(self._pre_callbacks))

    def clear_callbacks(self) -> None:
        self._callbacks.clear()
        self._pre_callbacks.clear()

    @property
    def callbacks(self) -> tuple[ConversionCallback, ...]:
        return tuple(self._callbacks)

    def status(self) -> dict[str, Any]:
        return {
            "state": self.interceptor.state.value,
            "installed": self.is_installed(),
            "callback_count": len(self._callbacks),
            "pre_conversion_callback_count": len(self._pre_callbacks),
        }

    def apply_callbacks(self, item: Any, csl_item: MutableMapping[str, Any]) -> None:
        run_callbacks(self._callbacks, item, csl_item)

    def _before_conversion(self, *args: Any, **kwargs: Any) -> None:
        item = _record_argument(args, kwargs)
        if item is _NO_RECORD:
            return
        for index, callback in enumerate(self._pre_callbacks):
            try:
                callback(item)
            except Exception:
                logger.exception(
                    "Pre-conversion callback %d (%s) failed", index, _callback_name(callback)
                )

    def _after_conversion(self, result: Any, *args: Any, **kwargs: Any) -> Any:
        item = _record_argument(args, kwargs)
        if item is not _NO_RECORD and isinstance(result, MutableMapping):
            self.apply_callbacks(item, result)
        return result


class EngineCreationHook:
    """Wraps the host's per-style engine factory and configures each new engine once.

    The first positional argument of the wrapped call is taken to be the
    style (the instance, when the factory is a method on the style class).
    The engine's class gets the language-preference patch the first time an
    engine of that class is seen.
    """

    def __init__(
        self,
        target_path: str,
        *,
        root: Any = None,
        marker: str = DEFAULT_MARKER,
        patch_engine_class: bool = True,
    ) -> None:
        self.patch_engine_class = patch_engine_class
        self._patched_classes: list[type] = []
        self.interceptor = Interceptor(
            target_path,
            root=root,
            after_call=self._after_creation,
            marker=marker,
        )

    @property
    def state(self) -> InterceptorState:
        return self.interceptor.state

    def install(self) -> bool:
        return self.interceptor.install()

    def remove(self) -> bool:
        removed = self.interceptor.remove()
        for engine_cls in self._patched_classes:
            remove_lang_pref_patch(engine_cls)
        self._patched_classes.clear()
        return removed

    def is_installed(self) -> bool:
        return self.interceptor.is_installed()

    def _after_creation(self, engine: Any, *args: Any, **kwargs: Any) -> Any:
        if engine is None:
            return engine
        style = args[0] if args else kwargs.get("style")

        engine_cls = type(engine)
        if self.patch_engine_class and engine_cls not in self._patched_classes:
            if install_lang_pref_patch(engine_cls):
                self._patched_classes.append(engine_cls)

        config = configure_once(engine, style)
        if config is not None:
            logger.info("Configured citation engine: %s", config.to_dict())
        return engine
