# ABOUTME: Citation package: name-variant rules, style directives, engine configuration, and callbacks.
# ABOUTME: Exports the pieces a host integration needs without importing submodules directly.

from multicite.citation.callbacks import (
    NAME_VARIABLES,
    csl_variable_name,
    enrich_creator_names,
    enrich_title_fields,
    inject_csl_variables,
)
from multicite.citation.engine import (
    CitationEngine,
    configure_engine,
    configure_once,
    install_lang_pref_patch,
    remove_lang_pref_patch,
    resolve_style_config,
    transliteration_tags,
)
from multicite.citation.presets import TitlePreset, format_title_field
from multicite.citation.style_config import (
    StyleConfig,
    StyleConfigError,
    default_style_config,
    extract_config_from_style,
    extract_style_config,
    is_valid_style_config,
    parse_config_string,
)
from multicite.citation.variants import (
    CONTAINER_ROLES,
    NATURAL_VARIANT,
    PUNCTUATED_VARIANT,
    build_variant,
    compute_override,
    is_container_role,
)

__all__ = [
    "CONTAINER_ROLES",
    "NAME_VARIABLES",
    "NATURAL_VARIANT",
    "PUNCTUATED_VARIANT",
    "CitationEngine",
    "StyleConfig",
    "StyleConfigError",
    "TitlePreset",
    "build_variant",
    "compute_override",
    "configure_engine",
    "configure_once",
    "csl_variable_name",
    "default_style_config",
    "enrich_creator_names",
    "enrich_title_fields",
    "extract_config_from_style",
    "extract_style_config",
    "format_title_field",
    "inject_csl_variables",
    "install_lang_pref_patch",
    "is_container_role",
    "is_valid_style_config",
    "parse_config_string",
    "remove_lang_pref_patch",
    "resolve_style_config",
    "transliteration_tags",
]
