# ABOUTME: Test double for the host citation engine, including its romanesque name-layout heuristic.
# ABOUTME: Renders a CSL name the way the engine would so name-ordering can be asserted on strings.

from types import SimpleNamespace
from typing import Any

LANG_PREFS_KEY = "cite-lang-prefs"

# Primary language subtags the engine downgrades to family-first, no comma.
DOWNGRADED_LANGUAGES = frozenset({"ja", "zh"})


def _is_latin(text: str) -> bool:
    return all(ord(ch) < 0x250 for ch in text if ch.isalpha())


def _initials(given: str) -> str:
    return " ".join(f"{part[0]}." for part in given.split() if part)


class FakeCiteproc:
    """Minimal engine: language preferences plus the name layout rules.

    Romanesque levels:
        0: non-Latin script, family and given run together ("杜伟生").
        1: Latin script in a downgraded language, family first with no comma.
        2: Latin script otherwise, the style's inversion decides.
    """

    def __init__(self) -> None:
        prefs = {"persons": ["orig"]}
        self.opt: dict[str, Any] = {LANG_PREFS_KEY: prefs}
        self.state = SimpleNamespace(opt={LANG_PREFS_KEY: prefs})
        self.transliteration_tags: list[str] = []
        self.lang_pref_calls: list[dict[str, list[str]]] = []

    def set_lang_prefs_for_cites(self, prefs: dict[str, list[str]]) -> None:
        self.lang_pref_calls.append(prefs)
        for key, slots in prefs.items():
            # The engine replaces the list, it does not edit it.
            self.opt[LANG_PREFS_KEY][key] = list(slots)

    def set_lang_tags_for_csl_transliteration(self, tags: list[str]) -> None:
        self.transliteration_tags = list(tags)

    def reset_lang_prefs(self) -> None:
        """What the host does between documents: back to original script only."""
        self.set_lang_prefs_for_cites({"persons": ["orig"]})

    @property
    def persons(self) -> list[str]:
        return self.opt[LANG_PREFS_KEY]["persons"]

    def _select(self, name: dict[str, Any], item_language: str | None) -> tuple[str, str, str | None]:
        multi = name.get("multi") or {}
        name_language = multi.get("main") or item_language
        if self.persons and self.persons[0] == "translit":
            for tag in self.transliteration_tags:
                variant = (multi.get("_key") or {}).get(tag)
                if variant:
                    language = (variant.get("multi") or {}).get("main") or name_language
                    return variant.get("family", ""), variant.get("given", ""), language
        if "literal" in name:
            return name["literal"], "", name_language
        return name.get("family", ""), name.get("given", ""), name_language

    def romanesque_level(self, family: str, given: str, language: str | None) -> int:
        if not _is_latin(family + given):
            return 0
        primary = (language or "").split("-")[0].lower()
        if primary in DOWNGRADED_LANGUAGES:
            return 1
        return 2

    def render_name(
        self,
        name: dict[str, Any],
        *,
        item_language: str | None = None,
        invert: bool = False,
        initialize: bool = False,
    ) -> str:
        family, given, language = self._select(name, item_language)
        if not given:
            return family
        level = self.romanesque_level(family, given, language)
        if level == 0:
            return f"{family}{given}"
        if initialize:
            given = _initials(given)
        if level == 1:
            return f"{family} {given}"
        if invert:
            return f"{family}, {given}"
        return f"{given} {family}"
