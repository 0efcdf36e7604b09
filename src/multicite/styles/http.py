# ABOUTME: Downloads CSL style definitions from a style repository over HTTP.
# ABOUTME: Rejects responses that are not CSL (HTML landing pages, JSON, empty or non-style XML).

import logging
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx
from lxml import etree

logger = logging.getLogger(__name__)

CSL_NAMESPACE = "http://purl.org/net/xbiblio/csl"

USER_AGENT = "multicite/0.1.0"
ACCEPT = "application/vnd.citationstyles.style+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.1"

# Repositories serve CSL as the CSL media type, generic XML, or raw text; these never hold a style.
_REJECTED_MEDIA_TYPES = frozenset({"text/html", "application/xhtml+xml", "application/json"})


class StyleFetchError(Exception):
    """Raised when a style definition cannot be downloaded or is not a CSL style."""


@runtime_checkable
class HttpClient(Protocol):
    """Anything that can GET a URL and return the body as text."""

    def get_text(self, url: str) -> str: ...


def _media_type(response: httpx.Response) -> str:
    return response.headers.get("content-type", "").split(";", 1)[0].strip().lower()


class StyleClient:
    """httpx client for style repositories.

    Redirects are followed (repositories point short style URLs at a raw
    file host). Connection failures are retried by the transport; HTTP
    error statuses are not, a missing style stays missing.

    Args:
        retries: Connection retries for the default transport.
        timeout: Seconds per request.
        transport: Replacement transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        *,
        retries: int = 2,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": ACCEPT},
            timeout=timeout,
            follow_redirects=True,
            transport=transport if transport is not None else httpx.HTTPTransport(retries=retries),
        )

    def get_text(self, url: str) -> str:
        """GET a style document.

        Raises:
            StyleFetchError: On transport failure, a non-2xx status, or a
                response whose media type cannot hold a style.
        """
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StyleFetchError(f"HTTP {exc.response.status_code} from {url}") from exc
        except httpx.HTTPError as exc:
            raise StyleFetchError(f"Request failed: {url}: {exc}") from exc

        media_type = _media_type(response)
        if media_type in _REJECTED_MEDIA_TYPES:
            raise StyleFetchError(f"Expected a CSL style from {url}, got {media_type}")
        if str(response.url) != url:
            logger.debug("Style %s served from %s", url, response.url)
        return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StyleClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def check_csl_document(text: str, source: str) -> None:
    """Raise StyleFetchError unless ``text`` is XML rooted at a CSL ``<style>``."""
    if not text.strip():
        raise StyleFetchError(f"Empty style definition from {source}")
    try:
        root = etree.fromstring(
            text.encode("utf-8"), parser=etree.XMLParser(resolve_entities=False)
        )
    except etree.XMLSyntaxError as exc:
        raise StyleFetchError(f"Style from {source} is not well-formed XML: {exc}") from exc
    qname = etree.QName(root)
    if qname.localname != "style" or qname.namespace not in (CSL_NAMESPACE, None):
        raise StyleFetchError(f"Document from {source} is not a CSL style (root <{qname.localname}>)")


def fetch_style(url: str, client: HttpClient | None = None) -> str:
    """Download a style definition and return its XML text.

    A client passed in is left open; one created here is closed.

    Raises:
        StyleFetchError: If the download fails or the body is not a CSL style.
    """
    logger.debug("Fetching style from %s", url)
    if client is None:
        with StyleClient() as owned:
            text = owned.get_text(url)
    else:
        text = client.get_text(url)
    check_csl_document(text, url)
    return text
