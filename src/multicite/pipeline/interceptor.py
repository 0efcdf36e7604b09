# ABOUTME: Installs a pass-through wrapper around a host function named by a dotted path.
# ABOUTME: Tracks an explicit install state, refuses to stack wrappers, and restores the original on removal.

import enum
import functools
import importlib
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "_multicite_intercepted"

_MISSING = object()


class InterceptorState(enum.Enum):
    UNINSTALLED = "uninstalled"
    INSTALLED = "installed"
    REMOVED = "removed"


def _lookup(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def resolve_owner(path: str, root: Any = None) -> tuple[Any, str] | None:
    """Find the object that owns the last component of a dotted path.

    With a ``root`` the path is walked attribute by attribute from it.
    Without one, the longest importable module prefix is imported and the
    remainder walked from there. Returns None if any step is missing.
    """
    parts = path.split(".")
    if len(parts) < 2 and root is None:
        return None
    attr = parts[-1]
    owner_parts = parts[:-1]

    if root is not None:
        owner = root
        remaining = owner_parts
    else:
        owner = _MISSING
        remaining = []
        for split in range(len(owner_parts), 0, -1):
            module_name = ".".join(owner_parts[:split])
            try:
                owner = importlib.import_module(module_name)
            except ImportError:
                continue
            remaining = owner_parts[split:]
            break
        if owner is _MISSING:
            return None

    for part in remaining:
        owner = _lookup(owner, part)
        if owner is _MISSING or owner is None:
            return None
    return owner, attr


class _Slot:
    """One installed location: the owner, the attribute, and what was there before."""

    def __init__(self, path: str, owner: Any, attr: str) -> None:
        self.path = path
        self.owner = owner
        self.attr = attr
        # What the owner itself held, so an inherited attribute can be un-shadowed on restore.
        if isinstance(owner, type):
            self.own_value = vars(owner).get(attr, _MISSING)
        elif isinstance(owner, Mapping):
            self.own_value = owner.get(attr, _MISSING)
        else:
            self.own_value = getattr(owner, "__dict__", {}).get(attr, _MISSING)

    def current(self) -> Any:
        return _lookup(self.owner, self.attr)

    def put(self, wrapper: Callable[..., Any]) -> None:
        value: Any = wrapper
        if isinstance(self.owner, type) and isinstance(
            inspect.getattr_static(self.owner, self.attr, None), (staticmethod, classmethod)
        ):
            # The wrapped callable is already bound (or static); keep the class from binding again.
            value = staticmethod(wrapper)
        self._assign(value)

    def restore(self) -> None:
        if self.own_value is _MISSING:
            if isinstance(self.owner, Mapping):
                self.owner.pop(self.attr, None)  # type: ignore[attr-defined]
            else:
                delattr(self.owner, self.attr)
            return
        self._assign(self.own_value)

    def _assign(self, value: Any) -> None:
        if isinstance(self.owner, Mapping):
            self.owner[self.attr] = value  # type: ignore[index]
        else:
            setattr(self.owner, self.attr, value)


class Interceptor:
    """Wraps one host function (and optional aliases of it) with before/after callbacks.

    The wrapper passes every positional and keyword argument through
    unchanged, so it keeps working when the host adds parameters.
    ``before_call`` receives the call's arguments; ``after_call`` receives
    the result followed by the arguments and returns the value handed back
    to the caller. A fault in either is logged and the original result is
    returned.

    A wrapper carries ``marker`` as an attribute. Installing over a
    function that already has the marker is refused, so reloading a module
    that re-runs setup never stacks wrappers.
    """

    def __init__(
        self,
        target_path: str,
        *,
        root: Any = None,
        before_call: Callable[..., None] | None = None,
        after_call: Callable[..., Any] | None = None,
        marker: str = DEFAULT_MARKER,
        additional_paths: Sequence[str] = (),
    ) -> None:
        self.target_path = target_path
        self.root = root
        self.before_call = before_call
        self.after_call = after_call
        self.marker = marker
        self.additional_paths = tuple(additional_paths)
        self._state = InterceptorState.UNINSTALLED
        self._slots: list[_Slot] = []
        self._original: Callable[..., Any] | None = None

    @property
    def state(self) -> InterceptorState:
        return self._state

    @property
    def original(self) -> Callable[..., Any] | None:
        return self._original

    def is_installed(self) -> bool:
        return self._state is InterceptorState.INSTALLED

    def _slot(self, path: str) -> _Slot | None:
        resolved = resolve_owner(path, self.root)
        if resolved is None:
            logger.warning("Cannot resolve path: %s", path)
            return None
        owner, attr = resolved
        return _Slot(path, owner, attr)

    def _make_wrapper(self, original: Callable[..., Any]) -> Callable[..., Any]:
        before_call = self.before_call
        after_call = self.after_call
        path = self.target_path

        @functools.wraps(original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if before_call is not None:
                try:
                    before_call(*args, **kwargs)
                except Exception:
                    logger.exception("before_call failed for %s", path)

            result = original(*args, **kwargs)

            if after_call is not None:
                try:
                    return after_call(result, *args, **kwargs)
                except Exception:
                    logger.exception("after_call failed for %s", path)
            return result

        setattr(wrapper, self.marker, True)
        return wrapper

    def _restore(self, slots: Iterable[_Slot]) -> None:
        for slot in slots:
            try:
                slot.restore()
            except (AttributeError, TypeError):
                logger.exception("Could not restore %s", slot.path)
                continue
            logger.info("Removed from %s", slot.path)

    def install(self) -> bool:
        """Wrap the target. Returns False (and changes nothing) if that is not possible."""
        if self._state is InterceptorState.INSTALLED:
            logger.debug("Already installed on %s", self.target_path)
            return False

        primary = self._slot(self.target_path)
        if primary is None:
            return False

        current = primary.current()
        if current is _MISSING or not callable(current):
            logger.warning("Target %s is not callable, skipping", self.target_path)
            return False
        if getattr(current, self.marker, False):
            logger.warning("%s is already wrapped, skipping", self.target_path)
            return False

        wrapper = self._make_wrapper(current)
        slots = [primary]
        for path in self.additional_paths:
            slot = self._slot(path)
            if slot is None:
                continue
            if getattr(slot.current(), self.marker, False):
                logger.warning("%s is already wrapped, skipping", path)
                continue
            slots.append(slot)

        written: list[_Slot] = []
        for slot in slots:
            try:
                slot.put(wrapper)
            except (AttributeError, TypeError):
                logger.exception("Could not install on %s, rolling back", slot.path)
                self._restore(reversed(written))
                return False
            written.append(slot)
        for slot in written:
            logger.info("Installed on %s", slot.path)

        self._original = current
        self._slots = slots
        self._state = InterceptorState.INSTALLED
        return True

    def remove(self) -> bool:
        """Put back what each wrapped location held. Returns False when nothing was installed."""
        if self._state is not InterceptorState.INSTALLED:
            logger.debug("Not installed on %s, nothing to remove", self.target_path)
            return False

        self._restore(self._slots)
        self._slots = []
        self._original = None
        self._state = InterceptorState.REMOVED
        return True
