# ABOUTME: Binds a MetadataRecord to a host record object through its free-text "extra" field.
# ABOUTME: Loads on demand, saves back without disturbing foreign lines, never caches stale decodes.

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from multicite.metadata.codec import parse_metadata, serialize_metadata
from multicite.metadata.types import MetadataRecord

logger = logging.getLogger(__name__)

EXTRA_FIELD = "extra"


@runtime_checkable
class HostRecord(Protocol):
    """The host's bibliographic record: a generic field accessor pair."""

    def get_field(self, name: str) -> Any: ...

    def set_field(self, name: str, value: str) -> None: ...


def read_extra(item: Any, csl_item: Mapping[str, Any] | None = None) -> str:
    """Read the free-text field from whatever shape the host hands us.

    Tries ``item.get_field("extra")``, then an ``extra`` attribute or mapping
    key, then the CSL ``note`` property (some conversions move the field
    there). Returns an empty string when nothing is found.
    """
    getter = getattr(item, "get_field", None)
    if callable(getter):
        value = getter(EXTRA_FIELD)
        if value:
            return str(value)
    if isinstance(item, Mapping):
        value = item.get(EXTRA_FIELD)
    else:
        value = getattr(item, EXTRA_FIELD, None)
    if value:
        return str(value)
    if csl_item is not None and csl_item.get("note"):
        return str(csl_item["note"])
    return ""


class ItemMetadata:
    """Parallel-language metadata attached to one host record.

    ``record`` is what an editor binds to. ``save()`` writes it back into the
    host's free-text field, preserving every foreign line.
    """

    def __init__(self, item: HostRecord) -> None:
        self._item = item
        self.record = self._load()

    @property
    def item(self) -> HostRecord:
        return self._item

    def _load(self) -> MetadataRecord:
        return parse_metadata(read_extra(self._item))

    def reload(self) -> None:
        """Re-derive the record from the field's current text."""
        self.record = self._load()

    def save(self) -> None:
        """Serialize the record into the host's field and persist the host record if it can."""
        current = read_extra(self._item)
        self._item.set_field(EXTRA_FIELD, serialize_metadata(current, self.record))
        persist = getattr(self._item, "save", None)
        if callable(persist):
            persist()
        logger.debug("Saved parallel-language metadata")

    def has_data(self) -> bool:
        return self.record.has_data()

    def clear(self) -> None:
        self.record.clear()
