# ABOUTME: Name-ordering control: picks per-name language tags that steer the citation engine's formatting.
# ABOUTME: Builds the natural (no comma) and punctuated (style-controlled) romanized name variants.

"""Name-ordering control for romanized names.

The citation engine decides how to lay out a name from a "romanesque" level it
computes from two inputs: the script of the name's characters, and the name's
language tag (``multi.main``, falling back to the item's language). For names
in Latin script it normally respects the style's ``name-as-sort-order``
attribute (level 2). When the language tag's primary subtag is ``zh`` or
``ja`` it downgrades the name to level 1, which renders family-first with no
comma and ignores the style's inversion. Korean is not in that list.

The engine itself is not ours to change, so this module chooses the language
tag per name to land it in the bucket we want:

* natural variant (``en`` slot): family-first, no comma ("Du Weisheng").
  Tag = ``zh`` for every non-native family, so Korean behaves like Chinese
  and Japanese. The tag is a formatting-bucket selector only.
* punctuated variant (``en-x-western`` slot): primary creators get ``en`` so
  the style's inversion attributes decide ("Du, W."); container creators
  (editors, translators) get the record's original language so they stay
  family-first even though styles rarely invert them ("Lin S.").
"""

from typing import Any

# Tag the engine treats as its own language: direct order, style-controlled punctuation.
NATIVE_LANGUAGE = "en"
# Primary subtag that triggers the engine's downgrade to family-first, no comma.
DOWNGRADE_LANGUAGE = "zh"
# Record language assumed when neither the metadata nor the item declares one.
FALLBACK_LANGUAGE = "zh"

NATURAL_VARIANT = "en"
PUNCTUATED_VARIANT = "en-x-western"
NAME_VARIANTS: tuple[str, ...] = (NATURAL_VARIANT, PUNCTUATED_VARIANT)

# Roles printed in a subordinate position ("In X (ed.), Y").
CONTAINER_ROLES = frozenset({"editor", "translator", "collection-editor"})


def is_container_role(role: str) -> bool:
    return role in CONTAINER_ROLES


def compute_override(
    role: str,
    original_language: str,
    has_variant_data: bool,
    target_variant: str,
    *,
    compensate_downgrade: bool = True,
) -> str | None:
    """Pick the language tag to attach to one rendering of a creator's name.

    Args:
        role: CSL name variable the creator sits in (author, editor, ...).
            Unrecognized roles are treated as primary creators.
        original_language: The record's language tag, e.g. ``zh-CN``.
        has_variant_data: Whether the creator has parallel-language name data.
        target_variant: ``NATURAL_VARIANT`` or ``PUNCTUATED_VARIANT``.
        compensate_downgrade: Apply the downgrade tag to every non-native
            family. Turn off for engines without the ja/zh-only downgrade.

    Returns:
        The tag to set as ``multi.main``, or None to inherit the record's language.
    """
    if not has_variant_data:
        return NATIVE_LANGUAGE

    if target_variant == NATURAL_VARIANT:
        return DOWNGRADE_LANGUAGE if compensate_downgrade else None

    if target_variant == PUNCTUATED_VARIANT:
        if is_container_role(role):
            return original_language
        return NATIVE_LANGUAGE

    return None


def build_variant(
    override: str | None,
    family: str,
    given: str,
    force_comma: bool = False,
) -> dict[str, Any]:
    """Build a ``multi._key`` entry for one romanized rendering.

    With ``force_comma`` the comma is written into the family string itself
    ("Kim," + " " + "Minsoo"). The engine concatenates the parts in every
    bucket, so the comma survives even where it would not add one.
    """
    if force_comma and family:
        family = f"{family},"

    variant: dict[str, Any] = {"family": family or "", "given": given or ""}
    if override:
        variant["multi"] = {"main": override}
    return variant
