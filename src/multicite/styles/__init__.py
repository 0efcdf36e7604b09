# ABOUTME: Style definition sources for multicite.
# ABOUTME: Re-exports the HTTP fetcher used to resolve configuration from remote styles.

from multicite.styles.http import (
    HttpClient,
    StyleClient,
    StyleFetchError,
    check_csl_document,
    fetch_style,
)

__all__ = ["HttpClient", "StyleClient", "StyleFetchError", "check_csl_document", "fetch_style"]
