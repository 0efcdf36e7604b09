# ABOUTME: Conversion callbacks that write parallel-language metadata into a CSL-JSON item in place.
# ABOUTME: Injects field variables, attaches per-name language overrides, and formats titles by preset.

import logging
from collections.abc import MutableMapping
from typing import Any

from multicite.citation.presets import TitlePreset, format_title_field
from multicite.citation.variants import (
    FALLBACK_LANGUAGE,
    NATIVE_LANGUAGE,
    NATURAL_VARIANT,
    PUNCTUATED_VARIANT,
    build_variant,
    compute_override,
)
from multicite.metadata.codec import NAMESPACE, parse_metadata
from multicite.metadata.item import read_extra
from multicite.metadata.types import FIELD_NAMES, FIELD_VARIANTS, CreatorVariant, MetadataRecord

logger = logging.getLogger(__name__)

CslItem = MutableMapping[str, Any]

# CSL name variables. Only these properties of a converted item hold creators.
NAME_VARIABLES = frozenset(
    {
        "author",
        "chair",
        "collection-editor",
        "compiler",
        "composer",
        "container-author",
        "contributor",
        "curator",
        "director",
        "editor",
        "editorial-director",
        "executive-producer",
        "guest",
        "host",
        "illustrator",
        "interviewer",
        "narrator",
        "organizer",
        "original-author",
        "performer",
        "producer",
        "recipient",
        "reviewed-author",
        "script-writer",
        "series-creator",
        "translator",
    }
)

# Wire variant -> suffix of the injected CSL variable.
_VARIABLE_SUFFIXES = {
    "original": "original",
    "romanized": "romanized",
    "romanizedShort": "romanized-short",
    "english": "english",
}

# Field -> CSL property rewritten by preset title formatting.
_TITLE_TARGETS = (
    ("title", "title"),
    ("journal", "container-title"),
    ("container-title", "container-title"),
    ("series", "collection-title"),
    ("publisher", "publisher"),
)


def csl_variable_name(field_name: str, variant: str) -> str:
    """Name of the injected variable, e.g. ``cne-title-romanized-short``."""
    return f"{NAMESPACE}-{field_name}-{_VARIABLE_SUFFIXES[variant]}"


def inject_csl_variables(item: Any, csl_item: CslItem) -> None:
    """Add every field variant to the CSL item as its own variable.

    Styles reference these (``cne-title-original`` etc.) directly; decoding
    here keeps them correct whatever order the lines sit in.
    """
    record = parse_metadata(read_extra(item, csl_item))
    injected = 0
    for field_name in FIELD_NAMES:
        variants = record.fields.get(field_name)
        if variants is None:
            continue
        for variant in FIELD_VARIANTS:
            value = variants.get(variant)
            if value:
                csl_item[csl_variable_name(field_name, variant)] = value
                injected += 1
    if injected:
        logger.debug("Injected %d field variable(s)", injected)


def _name_lists(csl_item: CslItem) -> list[tuple[str, list[Any]]]:
    """Creator lists in the order they appear in the converted item."""
    return [
        (key, value)
        for key, value in csl_item.items()
        if key in NAME_VARIABLES and isinstance(value, list)
    ]


def _apply_variants(
    name: dict[str, Any],
    role: str,
    creator: CreatorVariant,
    original_language: str,
    compensate_downgrade: bool,
) -> None:
    """Rewrite one CSL name that has parallel-language data."""
    multi = name.setdefault("multi", {})
    multi.setdefault("_key", {})
    multi["main"] = original_language

    has_romanized = bool(creator.last_romanized or creator.first_romanized)

    if name.get("literal") and has_romanized:
        del name["literal"]
        name["family"] = creator.last_romanized or ""
        name["given"] = creator.first_romanized or ""

    # Main fields carry the original script (the 'orig' slot).
    if creator.last_original:
        name["family"] = creator.last_original
    if creator.first_original:
        name["given"] = creator.first_original

    if not has_romanized:
        return

    for variant_tag in (NATURAL_VARIANT, PUNCTUATED_VARIANT):
        override = compute_override(
            role,
            original_language,
            True,
            variant_tag,
            compensate_downgrade=compensate_downgrade,
        )
        multi["_key"][variant_tag] = build_variant(
            override,
            creator.last_romanized or "",
            creator.first_romanized or "",
            force_comma=bool(creator.options_force_comma),
        )


def enrich_creator_names(
    item: Any,
    csl_item: CslItem,
    *,
    compensate_downgrade: bool = True,
    record: MetadataRecord | None = None,
) -> None:
    """Attach language overrides and romanized variants to every creator.

    Creators are matched to the record by position: the name lists are walked
    in item order and each name consumes the next creator index. Names with
    no data get the native tag so the engine keeps them in direct order even
    on a record declared as Chinese or Japanese.

    A record without any creator entries (title-only metadata, or no
    metadata at all) leaves every name untouched, native tag included: the
    engine then lays names out from the item language as it would without
    this callback.
    """
    if record is None:
        text = read_extra(item, csl_item)
        if not text:
            return
        record = parse_metadata(text)
    if not record.creators:
        return

    original_language = (
        record.original_language or csl_item.get("language") or FALLBACK_LANGUAGE
    )

    index = 0
    enriched = 0
    for role, names in _name_lists(csl_item):
        for name in names:
            creator = record.creator(index)
            index += 1
            if not isinstance(name, dict):
                continue

            if creator is None or not creator.has_names():
                multi = name.setdefault("multi", {})
                multi.setdefault("_key", {})
                multi["main"] = NATIVE_LANGUAGE
                continue

            _apply_variants(name, role, creator, original_language, compensate_downgrade)
            enriched += 1

    if enriched:
        logger.debug("Enriched %d creator name(s), language %s", enriched, original_language)


def enrich_title_fields(
    item: Any,
    csl_item: CslItem,
    *,
    preset: TitlePreset | None,
    record: MetadataRecord | None = None,
) -> None:
    """Rewrite title-like properties as preset-formatted markup.

    ``container-title`` comes from the journal variants when present, else
    from the container-title variants. ``title-short`` is set from the short
    romanized title whenever one exists.
    """
    if preset is None:
        logger.warning("No active title preset, skipping title formatting")
        return
    if record is None:
        text = read_extra(item, csl_item)
        if not text:
            return
        record = parse_metadata(text)

    written: set[str] = set()
    for field_name, target in _TITLE_TARGETS:
        if target in written:
            continue
        variants = record.fields.get(field_name)
        if variants is None:
            continue
        formatted = format_title_field(variants, preset)
        if formatted:
            csl_item[target] = formatted
            written.add(target)

    short = record.get_field_variant("title", "romanizedShort")
    if short:
        csl_item["title-short"] = f"<i>{short}</i>"
        written.add("title-short")

    if written:
        logger.debug("Formatted title field(s): %s", ", ".join(sorted(written)))
