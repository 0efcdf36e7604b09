# ABOUTME: Unit tests for the per-name language override rules and romanized variant builder.
# ABOUTME: Covers every branch of compute_override and the force-comma string workaround.

import pytest

from multicite.citation.variants import (
    NATIVE_LANGUAGE,
    NATURAL_VARIANT,
    PUNCTUATED_VARIANT,
    build_variant,
    compute_override,
    is_container_role,
)


class TestComputeOverride:
    """Tests for compute_override()."""

    @pytest.mark.parametrize("variant", [NATURAL_VARIANT, PUNCTUATED_VARIANT])
    def test_no_variant_data_gets_native_tag(self, variant: str) -> None:
        """Creators without data are forced to direct order whatever the record language."""
        assert compute_override("author", "zh-CN", False, variant) == NATIVE_LANGUAGE
        assert compute_override("editor", "ja", False, variant) == NATIVE_LANGUAGE

    @pytest.mark.parametrize("language", ["zh-CN", "ja", "ko"])
    def test_natural_variant_uses_downgrade_tag(self, language: str) -> None:
        """Korean lands in the same bucket as Chinese and Japanese."""
        assert compute_override("author", language, True, NATURAL_VARIANT) == "zh"

    def test_natural_variant_without_compensation_inherits(self) -> None:
        assert (
            compute_override("author", "ko", True, NATURAL_VARIANT, compensate_downgrade=False)
            is None
        )

    def test_punctuated_primary_role_gets_native_tag(self) -> None:
        assert compute_override("author", "zh-CN", True, PUNCTUATED_VARIANT) == "en"
        assert compute_override("director", "ja", True, PUNCTUATED_VARIANT) == "en"

    @pytest.mark.parametrize("role", ["editor", "translator", "collection-editor"])
    def test_punctuated_container_role_gets_original_language(self, role: str) -> None:
        assert compute_override(role, "ko", True, PUNCTUATED_VARIANT) == "ko"

    def test_unknown_role_is_primary(self) -> None:
        assert compute_override("illustrator", "zh", True, PUNCTUATED_VARIANT) == "en"

    def test_unknown_variant_inherits(self) -> None:
        assert compute_override("author", "zh", True, "fr") is None


class TestIsContainerRole:
    def test_roles(self) -> None:
        assert is_container_role("editor")
        assert is_container_role("collection-editor")
        assert not is_container_role("author")
        assert not is_container_role("container-author")


class TestBuildVariant:
    """Tests for build_variant()."""

    def test_with_override(self) -> None:
        assert build_variant("zh", "Du", "Weisheng") == {
            "family": "Du",
            "given": "Weisheng",
            "multi": {"main": "zh"},
        }

    def test_without_override(self) -> None:
        assert build_variant(None, "Du", "Weisheng") == {"family": "Du", "given": "Weisheng"}

    def test_force_comma_suffixes_family(self) -> None:
        variant = build_variant("zh", "Kim", "Minsoo", force_comma=True)
        assert variant["family"] == "Kim,"
        assert variant["given"] == "Minsoo"

    def test_force_comma_skips_empty_family(self) -> None:
        assert build_variant("en", "", "Minsoo", force_comma=True)["family"] == ""
