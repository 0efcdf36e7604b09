# ABOUTME: Extracts and validates the name-rendering directive embedded in a CSL style definition.
# ABOUTME: Prefers a <?cne-config?> processing instruction, falls back to a CNE-CONFIG: summary marker.

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lxml import etree

logger = logging.getLogger(__name__)

PI_TARGET = "cne-config"
SUMMARY_MARKER = "CNE-CONFIG:"

MAX_SLOTS = 3
VALID_SLOTS = ("orig", "translit", "translat")
VALID_FIELD_TYPES = ("persons",)
VALID_ORDERS = ("last-name-first", "first-name-first")
VALID_SEPARATORS = ("comma", "space")


class StyleConfigError(ValueError):
    """Raised when a style's configuration directive is malformed."""


@dataclass(frozen=True)
class RomanizedNameFormatting:
    """Layout of romanized CJK names: component order and family/given separator."""

    order: str | None = None
    separator: str | None = None


@dataclass(frozen=True)
class NameFormatting:
    romanized_cjk: RomanizedNameFormatting | None = None


@dataclass(frozen=True)
class StyleConfig:
    """Which language slots a style renders for personal names, and how.

    ``persons`` is an ordered tuple of 1-3 slots: ``orig`` (original script),
    ``translit`` (romanization) and ``translat`` (translation).
    """

    persons: tuple[str, ...] | None = None
    name_formatting: NameFormatting | None = None

    @property
    def separator(self) -> str | None:
        if self.name_formatting and self.name_formatting.romanized_cjk:
            return self.name_formatting.romanized_cjk.separator
        return None

    def to_dict(self) -> dict[str, Any]:
        """Render in the directive's JSON shape."""
        out: dict[str, Any] = {}
        if self.persons is not None:
            out["persons"] = list(self.persons)
        if self.name_formatting is not None:
            formatting: dict[str, Any] = {}
            cjk = self.name_formatting.romanized_cjk
            if cjk is not None:
                formatting["romanizedCJK"] = {
                    k: v for k, v in (("order", cjk.order), ("separator", cjk.separator)) if v
                }
            out["nameFormatting"] = formatting
        return out


def default_style_config() -> StyleConfig:
    """Romanized names only: the safe choice when a style says nothing."""
    return StyleConfig(persons=("translit",))


def _validate_slots(field_type: str, slots: Any) -> tuple[str, ...]:
    if not isinstance(slots, list):
        raise StyleConfigError(
            f"Field {field_type!r} must be a list of slot values, got {type(slots).__name__}"
        )
    if not slots:
        raise StyleConfigError(f"Field {field_type!r} needs at least one slot")
    for slot in slots:
        if slot not in VALID_SLOTS:
            raise StyleConfigError(
                f"Invalid slot value: {slot!r}. Valid values: {', '.join(VALID_SLOTS)}"
            )
    if len(slots) > MAX_SLOTS:
        raise StyleConfigError(
            f"Too many slots for {field_type!r}: {len(slots)}. Maximum is {MAX_SLOTS}"
        )
    return tuple(slots)


def _validate_field_type(field_type: str) -> None:
    if field_type not in VALID_FIELD_TYPES:
        raise StyleConfigError(
            f"Invalid field type: {field_type!r}. Valid types: {', '.join(VALID_FIELD_TYPES)}"
        )


def _validate_enum(name: str, value: Any, valid: tuple[str, ...]) -> str:
    if not isinstance(value, str):
        raise StyleConfigError(f"{name} must be a string, got {type(value).__name__}")
    if value not in valid:
        raise StyleConfigError(f"Invalid {name}: {value!r}. Valid values: {', '.join(valid)}")
    return value


def _require_object(name: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise StyleConfigError(f"{name} must be an object, got {type(value).__name__}")
    return value


def _parse_name_formatting(value: Any) -> NameFormatting:
    formatting = _require_object("nameFormatting", value)
    unknown = set(formatting) - {"romanizedCJK"}
    if unknown:
        raise StyleConfigError(f"Unknown nameFormatting key(s): {', '.join(sorted(unknown))}")
    if "romanizedCJK" not in formatting:
        return NameFormatting()

    cjk = _require_object("nameFormatting.romanizedCJK", formatting["romanizedCJK"])
    unknown = set(cjk) - {"order", "separator"}
    if unknown:
        raise StyleConfigError(
            f"Unknown nameFormatting.romanizedCJK key(s): {', '.join(sorted(unknown))}"
        )
    order = None
    separator = None
    if "order" in cjk:
        order = _validate_enum("nameFormatting.romanizedCJK.order", cjk["order"], VALID_ORDERS)
    if "separator" in cjk:
        separator = _validate_enum(
            "nameFormatting.romanizedCJK.separator", cjk["separator"], VALID_SEPARATORS
        )
    return NameFormatting(romanized_cjk=RomanizedNameFormatting(order=order, separator=separator))


def _parse_json(text: str) -> StyleConfig:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StyleConfigError(f"Invalid JSON in style directive: {exc}") from exc
    data = _require_object("Style directive", parsed)

    persons = None
    name_formatting = None
    for key, value in data.items():
        if key == "nameFormatting":
            name_formatting = _parse_name_formatting(value)
            continue
        _validate_field_type(key)
        persons = _validate_slots(key, value)
    return StyleConfig(persons=persons, name_formatting=name_formatting)


def _parse_legacy(text: str) -> StyleConfig:
    persons = None
    for assignment in text.split():
        parts = assignment.split("=")
        if len(parts) != 2:
            raise StyleConfigError(
                f"Invalid directive syntax: {assignment!r}. Expected 'field=slot1,slot2'"
            )
        field_type, slots_text = parts
        _validate_field_type(field_type)
        slots = [s.strip() for s in slots_text.split(",")]
        persons = _validate_slots(field_type, slots)
    return StyleConfig(persons=persons)


def parse_config_string(text: str) -> StyleConfig:
    """Parse a directive in JSON form (``{"persons": [...]}``) or legacy form (``persons=a,b``).

    Raises:
        StyleConfigError: On any syntax or vocabulary error.
    """
    if not isinstance(text, str) or not text.strip():
        raise StyleConfigError("Style directive must be a non-empty string")
    trimmed = text.strip()
    if trimmed.startswith("{"):
        return _parse_json(trimmed)
    return _parse_legacy(trimmed)


def _localname(node: Any) -> str | None:
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


def _find_info(root: Any) -> Any | None:
    for element in root.iter():
        if _localname(element) == "info":
            return element
    return None


def _config_from_pi(info: Any) -> StyleConfig | None:
    for node in info:
        if isinstance(node, etree._ProcessingInstruction) and node.target == PI_TARGET:
            logger.debug("Found <?%s?> processing instruction", PI_TARGET)
            return parse_config_string(node.text or "")
    return None


def _config_from_summary(info: Any) -> StyleConfig | None:
    summary = next((child for child in info if _localname(child) == "summary"), None)
    if summary is None:
        return None
    text = "".join(summary.itertext())
    marker_at = text.find(SUMMARY_MARKER)
    if marker_at == -1:
        return None
    directive = text[marker_at + len(SUMMARY_MARKER):].split("\n", 1)[0].strip()
    if not directive:
        logger.debug("Empty directive after %s marker", SUMMARY_MARKER)
        return None
    logger.debug("Found legacy summary directive: %r", directive)
    return parse_config_string(directive)


def extract_style_config(style_xml: str | bytes) -> StyleConfig | None:
    """Find the name-rendering directive in a CSL style definition.

    The processing instruction inside ``<info>`` wins; the ``CNE-CONFIG:``
    marker in ``<info><summary>`` is the backward-compatible fallback.

    Returns:
        The parsed config, or None when the style carries no directive.

    Raises:
        StyleConfigError: If the XML cannot be parsed or the directive is malformed.
    """
    data = style_xml.encode("utf-8") if isinstance(style_xml, str) else style_xml
    try:
        root = etree.fromstring(data, parser=etree.XMLParser(resolve_entities=False))
    except etree.XMLSyntaxError as exc:
        raise StyleConfigError(f"Style XML could not be parsed: {exc}") from exc

    info = _find_info(root)
    if info is None:
        logger.debug("Style has no <info> element")
        return None

    config = _config_from_pi(info)
    if config is not None:
        return config
    return _config_from_summary(info)


def extract_config_from_style(style: Any) -> StyleConfig | None:
    """Resolve a directive from a host style object.

    Tries ``style.get_xml()``, then ``style.xml``, then the file at
    ``style.path``. The first source that yields a directive wins.
    """
    sources = []
    get_xml = getattr(style, "get_xml", None)
    if callable(get_xml):
        sources.append(("get_xml()", get_xml))
    if getattr(style, "xml", None):
        sources.append(("xml", lambda: style.xml))
    path = getattr(style, "path", None)
    if path:
        sources.append(("path", lambda: Path(path).read_text(encoding="utf-8")))

    for label, load in sources:
        try:
            xml = load()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read style via %s: %s", label, exc)
            continue
        if not xml:
            continue
        config = extract_style_config(xml)
        if config is not None:
            logger.debug("Style directive resolved via %s", label)
            return config
    return None


def is_valid_style_config(config: Any) -> bool:
    """Check an already-built object against the directive's vocabulary."""
    if not isinstance(config, StyleConfig):
        return False
    if config.persons is None:
        return True
    try:
        _validate_slots("persons", list(config.persons))
    except StyleConfigError:
        return False
    return True
