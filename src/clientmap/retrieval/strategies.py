"""
Concrete retrieval strategies and source reference handling.
"""

import re
from collections.abc import Sequence
from urllib.parse import quote, urlsplit

from clientmap.normalization.values import extract_sheet_id
from clientmap.retrieval.base import RetrievalStrategy

SHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"

DEFAULT_PROXY_TEMPLATES: tuple[str, ...] = (
    "https://corsproxy.io/?{url}",
    "https://api.allorigins.win/raw?url={url}",
)

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)
# Editor links of a sheet; published (/d/e/...) and export links are fetchable as-is
_SHEET_EDITOR_URL = re.compile(
    r"docs\.google\.com/spreadsheets/d/(?!e/)[^/]+/?(?:edit|view)?(?:[?#].*)?$"
)


class DirectStrategy(RetrievalStrategy):
    """Request the source document itself."""

    def __init__(self) -> None:
        super().__init__("direct")

    def build_url(self, source_url: str) -> str:
        return source_url


class ProxyStrategy(RetrievalStrategy):
    """
    Request the source document through a relay.

    Args:
        template: Relay URL with a ``{url}`` placeholder for the
            percent-encoded source URL.
        name: Strategy name used in logs and diagnostics.
    """

    def __init__(self, template: str, name: str | None = None) -> None:
        if "{url}" not in template:
            msg = f"Proxy template must contain '{{url}}': {template}"
            raise ValueError(msg)
        super().__init__(name or f"proxy:{urlsplit(template).netloc or template}")
        self.template = template

    def build_url(self, source_url: str) -> str:
        return self.template.format(url=quote(source_url, safe=""))


def build_strategies(proxy_templates: Sequence[str] = DEFAULT_PROXY_TEMPLATES) -> list[RetrievalStrategy]:
    """
    Build the ordered strategy list: direct first, then each proxy.

    Args:
        proxy_templates: Relay URL templates, in fallback order.

    Returns:
        Strategies in the order they should be tried.
    """
    strategies: list[RetrievalStrategy] = [DirectStrategy()]
    strategies.extend(ProxyStrategy(template) for template in proxy_templates)
    return strategies


def resolve_source_url(reference: str) -> str:
    """
    Turn a configured source reference into a fetchable URL.

    Args:
        reference: An http(s) URL, a spreadsheet editor link, or a bare
            spreadsheet document id. Editor links and ids become the CSV
            export URL; other URLs are used as-is.

    Returns:
        Source URL.

    Raises:
        ValueError: If the reference is blank.
    """
    reference = reference.strip()
    if not reference:
        msg = "Source reference is empty"
        raise ValueError(msg)
    if not _HTTP_URL.match(reference):
        return SHEET_EXPORT_URL.format(sheet_id=reference)
    if _SHEET_EDITOR_URL.search(reference):
        sheet_id = extract_sheet_id(reference)
        if sheet_id:
            return SHEET_EXPORT_URL.format(sheet_id=sheet_id)
    return reference
