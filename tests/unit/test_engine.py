# ABOUTME: Unit tests for applying style configuration to a citation engine instance.
# ABOUTME: Covers name slots, transliteration tags, once-per-engine caching, and the host-reset patch.

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from multicite.citation.engine import (
    CONFIG_ATTR,
    CONFIGURED_FLAG,
    CitationEngine,
    configure_engine,
    configure_once,
    install_lang_pref_patch,
    remove_lang_pref_patch,
    resolve_style_config,
    transliteration_tags,
)
from multicite.citation.style_config import StyleConfig, default_style_config, parse_config_string
from tests.fixtures.fake_citeproc import FakeCiteproc
from tests.fixtures.styles import PLAIN_STYLE, TRANSLIT_COMMA_STYLE, style_with_pi


def _engine_class() -> type[FakeCiteproc]:
    class Engine(FakeCiteproc):
        pass

    return Engine


class TestTransliterationTags:
    def test_comma_separator_uses_punctuated_variant(self) -> None:
        config = parse_config_string(
            '{"persons": ["translit"], "nameFormatting": {"romanizedCJK": {"separator": "comma"}}}'
        )
        assert transliteration_tags(config) == ["en-x-western"]

    def test_default_uses_natural_variant(self) -> None:
        assert transliteration_tags(default_style_config()) == ["en"]


class TestConfigureEngine:
    """Tests for configure_engine()."""

    def test_fake_engine_satisfies_protocol(self) -> None:
        assert isinstance(FakeCiteproc(), CitationEngine)

    def test_sets_persons_and_tags(self) -> None:
        engine = FakeCiteproc()
        configure_engine(engine, StyleConfig(persons=("orig", "translit")))
        assert engine.persons == ["orig", "translit"]
        assert engine.state.opt["cite-lang-prefs"]["persons"] == ["orig", "translit"]
        assert engine.transliteration_tags == ["en"]

    def test_config_without_persons_leaves_slots(self) -> None:
        engine = FakeCiteproc()
        configure_engine(engine, StyleConfig())
        assert engine.persons == ["orig"]
        assert engine.lang_pref_calls == [{}]

    def test_engine_without_lang_prefs_is_skipped(self) -> None:
        engine = SimpleNamespace()
        configure_engine(engine, default_style_config())
        assert not hasattr(engine, "_multicite_lang_override")

    def test_engine_fault_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(prefs: dict[str, list[str]]) -> None:
            raise RuntimeError("engine exploded")

        engine = SimpleNamespace(set_lang_prefs_for_cites=broken, opt={})
        with caplog.at_level(logging.ERROR, logger="multicite.citation.engine"):
            configure_engine(engine, default_style_config())
        assert "Failed to set name slots" in caplog.text


class TestConfigureOnce:
    """Tests for configure_once() and resolve_style_config()."""

    def test_configures_once_per_engine(self) -> None:
        engine = FakeCiteproc()
        style = SimpleNamespace(xml=TRANSLIT_COMMA_STYLE)
        config = configure_once(engine, style)
        assert config is not None
        assert getattr(engine, CONFIGURED_FLAG) is True
        assert getattr(engine, CONFIG_ATTR) == config
        assert engine.transliteration_tags == ["en-x-western"]
        assert configure_once(engine, style) is None
        assert len(engine.lang_pref_calls) == 1

    def test_separate_engines_do_not_share_configuration(self) -> None:
        first, second = FakeCiteproc(), FakeCiteproc()
        configure_once(first, SimpleNamespace(xml=TRANSLIT_COMMA_STYLE))
        configure_once(second, SimpleNamespace(xml=style_with_pi('{"persons": ["orig"]}')))
        assert first.persons == ["translit"]
        assert second.persons == ["orig"]

    def test_style_without_directive_gets_default(self) -> None:
        assert resolve_style_config(SimpleNamespace(xml=PLAIN_STYLE)) == default_style_config()

    def test_malformed_directive_logs_and_defaults(self, caplog: pytest.LogCaptureFixture) -> None:
        style = SimpleNamespace(xml=style_with_pi('{"persons": ["bogus"]}'))
        with caplog.at_level(logging.ERROR, logger="multicite.citation.engine"):
            config = resolve_style_config(style)
        assert config == default_style_config()
        assert "Malformed" in caplog.text

    def test_undecodable_style_file_gets_default(self, tmp_path: Path) -> None:
        """A style file that is not UTF-8 still leaves the engine on the default slots."""
        path = tmp_path / "latin1.csl"
        path.write_bytes(TRANSLIT_COMMA_STYLE.replace("Chicago", "Chicago \xe9").encode("latin-1"))
        engine = FakeCiteproc()
        config = configure_once(engine, SimpleNamespace(path=str(path)))
        assert config == default_style_config()
        assert engine.persons == ["translit"]

    def test_failing_style_accessor_gets_default(self, caplog: pytest.LogCaptureFixture) -> None:
        """An exception from the host style object is logged and the default applied."""

        class BrokenStyle:
            def get_xml(self) -> str:
                raise RuntimeError("style store closed")

        engine = FakeCiteproc()
        with caplog.at_level(logging.ERROR, logger="multicite.citation.engine"):
            config = configure_once(engine, BrokenStyle())
        assert config == default_style_config()
        assert engine.persons == ["translit"]
        assert "style store closed" in caplog.text


class TestLangPrefPatch:
    """Tests for install_lang_pref_patch() and remove_lang_pref_patch()."""

    def test_host_reset_is_undone(self) -> None:
        engine_cls = _engine_class()
        assert install_lang_pref_patch(engine_cls)
        engine = engine_cls()
        configure_engine(engine, default_style_config())
        engine.reset_lang_prefs()
        assert engine.persons == ["translit"]

    def test_without_patch_reset_wins(self) -> None:
        engine = _engine_class()()
        configure_engine(engine, default_style_config())
        engine.reset_lang_prefs()
        assert engine.persons == ["orig"]

    def test_unconfigured_engines_unaffected(self) -> None:
        engine_cls = _engine_class()
        install_lang_pref_patch(engine_cls)
        engine = engine_cls()
        engine.set_lang_prefs_for_cites({"persons": ["translat"]})
        assert engine.persons == ["translat"]

    def test_patch_installed_once(self) -> None:
        engine_cls = _engine_class()
        assert install_lang_pref_patch(engine_cls)
        assert not install_lang_pref_patch(engine_cls)

    def test_remove_restores(self) -> None:
        engine_cls = _engine_class()
        original = engine_cls.set_lang_prefs_for_cites
        install_lang_pref_patch(engine_cls)
        assert remove_lang_pref_patch(engine_cls)
        assert engine_cls.set_lang_prefs_for_cites is original
        assert not remove_lang_pref_patch(engine_cls)

    def test_class_without_method(self) -> None:
        class NoPrefs:
            pass

        assert not install_lang_pref_patch(NoPrefs)
