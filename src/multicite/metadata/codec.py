# ABOUTME: Parser and serializer for the namespaced micro-format stored in a record's free-text field.
# ABOUTME: Namespaced lines decode into a MetadataRecord; every other line is preserved verbatim.

import re
from dataclasses import dataclass

from multicite.metadata.types import (
    FIELD_NAMES,
    FIELD_VARIANTS,
    CreatorVariant,
    FieldVariants,
    MetadataRecord,
)

# Prefix marking a line as ours. Anything else in the field belongs to the user.
NAMESPACE = "cne"
ORIGINAL_LANGUAGE_KEY = "original-language"

_FIELDS_ALT = "|".join(re.escape(name) for name in FIELD_NAMES)
# romanized-short is accepted on read; the canonical spelling is romanizedShort.
_VARIANTS_ALT = "romanized-short|" + "|".join(FIELD_VARIANTS)

_FIELD_RE = re.compile(
    rf"^{NAMESPACE}-(?P<field>{_FIELDS_ALT})-(?P<variant>{_VARIANTS_ALT}):(?P<value>.*)$",
    re.IGNORECASE,
)
_LANGUAGE_RE = re.compile(
    rf"^{NAMESPACE}-{ORIGINAL_LANGUAGE_KEY}:(?P<value>.*)$",
    re.IGNORECASE,
)
_CREATOR_NAME_RE = re.compile(
    rf"^{NAMESPACE}-creator-(?P<index>\d+)-(?P<part>last|first)-(?P<form>romanized|original):"
    r"(?P<value>.*)$",
    re.IGNORECASE,
)
_CREATOR_OPTION_RE = re.compile(
    rf"^{NAMESPACE}-creator-(?P<index>\d+)-options-(?P<option>original-spacing|force-comma):"
    r"(?P<value>.*)$",
    re.IGNORECASE,
)

_LINE_PATTERNS = (_FIELD_RE, _LANGUAGE_RE, _CREATOR_NAME_RE, _CREATOR_OPTION_RE)

_CANONICAL_VARIANTS = {v.lower(): v for v in FIELD_VARIANTS}
_CANONICAL_VARIANTS["romanized-short"] = "romanizedShort"

_CREATOR_NAME_ATTRS = {
    ("last", "romanized"): "last_romanized",
    ("first", "romanized"): "first_romanized",
    ("last", "original"): "last_original",
    ("first", "original"): "first_original",
}
_CREATOR_OPTION_ATTRS = {
    "original-spacing": "options_original_spacing",
    "force-comma": "options_force_comma",
}
_TRUE_VALUES = frozenset({"true", "1"})


@dataclass
class _Line:
    """One line of the free-text field after classification."""

    raw: str
    match: re.Match[str] | None

    @property
    def is_namespaced(self) -> bool:
        return self.match is not None


def _classify(line: str) -> _Line:
    """Match a line against each decoding pattern in order."""
    stripped = line.strip()
    for pattern in _LINE_PATTERNS:
        m = pattern.match(stripped)
        if m:
            return _Line(raw=line, match=m)
    return _Line(raw=line, match=None)


def _split_lines(text: str | None) -> list[_Line]:
    if not text or not text.strip():
        return []
    return [_classify(line) for line in text.split("\n")]


def _apply_line(record: MetadataRecord, creators: dict[int, CreatorVariant], line: _Line) -> None:
    """Decode a namespaced line into the record. Empty values set nothing."""
    m = line.match
    assert m is not None
    value = m.group("value").strip()
    if not value:
        return

    if m.re is _FIELD_RE:
        field_name = m.group("field").lower()
        variant = _CANONICAL_VARIANTS[m.group("variant").lower()]
        record.fields.setdefault(field_name, FieldVariants()).set(variant, value)
    elif m.re is _LANGUAGE_RE:
        record.original_language = value
    elif m.re is _CREATOR_NAME_RE:
        key = (m.group("part").lower(), m.group("form").lower())
        creator = creators.setdefault(int(m.group("index")), CreatorVariant())
        setattr(creator, _CREATOR_NAME_ATTRS[key], value)
    else:
        creator = creators.setdefault(int(m.group("index")), CreatorVariant())
        attr = _CREATOR_OPTION_ATTRS[m.group("option").lower()]
        setattr(creator, attr, value.lower() in _TRUE_VALUES)


def parse_metadata(text: str | None) -> MetadataRecord:
    """Decode the namespaced lines of a free-text field into a MetadataRecord.

    Unrecognized lines are ignored. Keys match case-insensitively and values
    are trimmed; when a key repeats, the last line wins. Creator indices need
    not be contiguous: the list is ``max(index) + 1`` long with ``None`` gaps.
    """
    record = MetadataRecord()
    creators: dict[int, CreatorVariant] = {}

    for line in _split_lines(text):
        if line.is_namespaced:
            _apply_line(record, creators, line)

    if creators:
        size = max(creators) + 1
        record.creators = [creators.get(i) for i in range(size)]

    return record


def _render_creator_lines(index: int, creator: CreatorVariant) -> list[str]:
    lines: list[str] = []
    prefix = f"{NAMESPACE}-creator-{index}"
    for (part, form), attr in _CREATOR_NAME_ATTRS.items():
        value = (getattr(creator, attr) or "").strip()
        if value:
            lines.append(f"{prefix}-{part}-{form}: {value}")
    for option, attr in _CREATOR_OPTION_ATTRS.items():
        flag = getattr(creator, attr)
        if flag is not None:
            lines.append(f"{prefix}-options-{option}: {'true' if flag else 'false'}")
    return lines


def render_lines(record: MetadataRecord) -> list[str]:
    """Render a record as namespaced lines in canonical order.

    Language first, then fields in FIELD_NAMES order (variants in
    FIELD_VARIANTS order), then creators by index.
    """
    lines: list[str] = []

    language = (record.original_language or "").strip()
    if language:
        lines.append(f"{NAMESPACE}-{ORIGINAL_LANGUAGE_KEY}: {language}")

    for field_name in FIELD_NAMES:
        variants = record.fields.get(field_name)
        if variants is None:
            continue
        for variant in FIELD_VARIANTS:
            value = (variants.get(variant) or "").strip()
            if value:
                lines.append(f"{NAMESPACE}-{field_name}-{variant}: {value}")

    for index, creator in enumerate(record.creators):
        if creator is not None:
            lines.extend(_render_creator_lines(index, creator))

    return lines


def serialize_metadata(text: str | None, record: MetadataRecord) -> str:
    """Write a record back into a free-text field.

    Every namespaced line is removed from ``text``; the remaining lines keep
    their content and order. The record's lines are appended after them in
    canonical order, and blank lines are dropped.
    """
    preserved = [line.raw for line in _split_lines(text) if not line.is_namespaced]
    all_lines = preserved + render_lines(record)
    return "\n".join(line for line in all_lines if line.strip())


def has_metadata(text: str | None) -> bool:
    """Whether the text contains at least one namespaced line."""
    return any(line.is_namespaced for line in _split_lines(text))


def strip_metadata(text: str | None) -> str:
    """Remove all namespaced lines, keeping everything else."""
    return serialize_metadata(text, MetadataRecord())
