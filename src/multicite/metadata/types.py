# ABOUTME: Core data structures for parallel-language bibliographic metadata.
# ABOUTME: MetadataRecord is the decoded view of the namespaced lines in a record's free-text field.

from dataclasses import dataclass, field, fields

# Fields that can carry parallel-language variants, in canonical emission order.
FIELD_NAMES: tuple[str, ...] = ("title", "container-title", "publisher", "journal", "series")

# Variant names as they appear on the wire, in canonical emission order.
FIELD_VARIANTS: tuple[str, ...] = ("original", "romanized", "romanizedShort", "english")

# Wire variant name -> FieldVariants attribute.
_VARIANT_ATTRS = {
    "original": "original",
    "romanized": "romanized",
    "romanizedShort": "romanized_short",
    "english": "english",
}


def _clean(value: str | None) -> str | None:
    """Collapse empty and whitespace-only strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class FieldVariants:
    """Alternate renderings of one text field (title, publisher, ...)."""

    original: str | None = None
    romanized: str | None = None
    romanized_short: str | None = None
    english: str | None = None

    def get(self, variant: str) -> str | None:
        """Return the value for a wire variant name like 'romanizedShort'."""
        return getattr(self, _VARIANT_ATTRS[variant])

    def set(self, variant: str, value: str | None) -> None:
        """Set a wire variant; empty values clear it."""
        setattr(self, _VARIANT_ATTRS[variant], _clean(value))

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))


@dataclass
class CreatorVariant:
    """Parallel-language name data for one creator, aligned by position with the host's creators.

    Position, not role, is the join key: creator 0 here is creator 0 in the
    host record whatever its type (author, editor, director, ...).
    """

    last_romanized: str | None = None
    first_romanized: str | None = None
    last_original: str | None = None
    first_original: str | None = None
    options_original_spacing: bool | None = None
    options_force_comma: bool | None = None

    def has_names(self) -> bool:
        """Whether any name part (romanized or original) is present."""
        return bool(
            self.last_romanized
            or self.first_romanized
            or self.last_original
            or self.first_original
        )

    def is_empty(self) -> bool:
        return not self.has_names() and (
            self.options_original_spacing is None and self.options_force_comma is None
        )

    def original_name(self) -> str:
        """Original-script name, family first; spaced only when the option asks for it."""
        last = self.last_original or ""
        first = self.first_original or ""
        if self.options_original_spacing and last and first:
            return f"{last} {first}"
        return f"{last}{first}"

    def romanized_name(self) -> str:
        """Romanized name in 'Last, First' form."""
        last = self.last_romanized or ""
        first = self.first_romanized or ""
        if last and first:
            return f"{last}, {first}"
        return last or first

    def display_name(self) -> str:
        """Romanized and original forms together, e.g. 'Hao, Chunwen 郝春文'."""
        return " ".join(part for part in (self.romanized_name(), self.original_name()) if part)


@dataclass
class MetadataRecord:
    """Decoded parallel-language metadata for one bibliographic item.

    A MetadataRecord is a derived view: it is rebuilt from the free-text field
    on every read and never cached. Fields with no variants are absent from
    ``fields``; creators without data are ``None`` gaps in ``creators``.
    """

    fields: dict[str, FieldVariants] = field(default_factory=dict)
    creators: list[CreatorVariant | None] = field(default_factory=list)
    original_language: str | None = None

    def get_field_variant(self, field_name: str, variant: str) -> str | None:
        variants = self.fields.get(field_name)
        return variants.get(variant) if variants else None

    def set_field_variant(self, field_name: str, variant: str, value: str | None) -> None:
        """Set one variant of a field. Empty values clear it; a field left empty is dropped."""
        if field_name not in FIELD_NAMES:
            msg = f"unknown field {field_name!r}, expected one of {', '.join(FIELD_NAMES)}"
            raise ValueError(msg)
        variants = self.fields.setdefault(field_name, FieldVariants())
        variants.set(variant, value)
        if variants.is_empty():
            del self.fields[field_name]

    def creator(self, index: int) -> CreatorVariant | None:
        """Creator data at a host position, or None for gaps and out-of-range positions."""
        if 0 <= index < len(self.creators):
            return self.creators[index]
        return None

    def has_field_data(self, field_name: str) -> bool:
        variants = self.fields.get(field_name)
        return variants is not None and not variants.is_empty()

    def filled_field_count(self) -> int:
        return sum(1 for name in FIELD_NAMES if self.has_field_data(name))

    def has_data(self) -> bool:
        """Whether the record holds anything worth rendering."""
        if self.original_language:
            return True
        if self.filled_field_count():
            return True
        return any(c is not None and c.has_names() for c in self.creators)

    def clear(self) -> None:
        self.fields = {}
        self.creators = []
        self.original_language = None
