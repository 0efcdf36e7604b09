# ABOUTME: Metadata package for the parallel-language micro-format and its decoded record.
# ABOUTME: Exports MetadataRecord and the parse/serialize/strip operations used throughout multicite.

from multicite.metadata.codec import (
    NAMESPACE,
    has_metadata,
    parse_metadata,
    serialize_metadata,
    strip_metadata,
)
from multicite.metadata.item import HostRecord, ItemMetadata, read_extra
from multicite.metadata.types import (
    FIELD_NAMES,
    FIELD_VARIANTS,
    CreatorVariant,
    FieldVariants,
    MetadataRecord,
)

__all__ = [
    "FIELD_NAMES",
    "FIELD_VARIANTS",
    "NAMESPACE",
    "CreatorVariant",
    "FieldVariants",
    "HostRecord",
    "ItemMetadata",
    "MetadataRecord",
    "has_metadata",
    "parse_metadata",
    "read_extra",
    "serialize_metadata",
    "strip_metadata",
]
