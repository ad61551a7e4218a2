"""
Attribute-based link matching via BeautifulSoup.
"""

import urllib.parse

from bs4 import BeautifulSoup

_BS4_PARSER = "lxml"

_LINK_ATTRS: dict[str, list[str]] = {
    "a":      ["href"],
    "area":   ["href"],
    "link":   ["href"],
    "iframe": ["src"],
    "frame":  ["src"],
    "form":   ["action"],
}


class HtmlLinkMatcher:
    """
    Stricter alternative to the regex matcher: only URLs that appear in
    link-bearing HTML attributes are returned, in document order.

    Relative references are ignored rather than resolved against the page,
    so both matchers see the same kind of absolute URLs.
    """

    def __init__(self, parser: str = _BS4_PARSER) -> None:
        self.parser = parser

    def find_all(self, body: str) -> list[str]:
        soup = BeautifulSoup(body, self.parser)
        found: list[str] = []
        for tag in soup.find_all(list(_LINK_ATTRS)):
            for attr in _LINK_ATTRS[tag.name]:
                value = tag.get(attr)
                if not value:
                    continue
                value = value.strip()
                if urllib.parse.urlparse(value).scheme in ("http", "https"):
                    found.append(value)
        return found

    def __repr__(self) -> str:
        return f"HtmlLinkMatcher(parser={self.parser!r})"
