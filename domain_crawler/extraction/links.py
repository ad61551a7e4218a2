"""
Domain-scoped link extraction.

The extractor itself only filters; finding URL-shaped strings in a page
is delegated to a *matcher* object with a ``find_all(body)`` method, so
the permissive regex can be swapped for a stricter strategy without
touching the crawler.
"""

import re
from typing import Protocol

from domain_crawler.config import LINK_PATTERN


class LinkMatcher(Protocol):
    def find_all(self, body: str) -> list[str]:
        ...


class RegexLinkMatcher:
    """Find URLs in raw text with a single regular expression."""

    def __init__(self, pattern: "str | re.Pattern[str]" = LINK_PATTERN) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.IGNORECASE | re.MULTILINE)
        self.pattern = pattern

    def find_all(self, body: str) -> list[str]:
        return [m.group(0) for m in self.pattern.finditer(body)]

    def __repr__(self) -> str:
        return f"RegexLinkMatcher({self.pattern.pattern!r})"


def as_matcher(pattern: "LinkMatcher | str | re.Pattern[str] | None") -> LinkMatcher:
    """Coerce a configured link pattern into a matcher object."""
    if pattern is None:
        return RegexLinkMatcher()
    if isinstance(pattern, (str, re.Pattern)):
        return RegexLinkMatcher(pattern)
    if callable(getattr(pattern, "find_all", None)):
        return pattern
    raise TypeError(f"Unsupported link pattern: {pattern!r}")


def extract_links(
    body: str,
    target_domain: str,
    matcher: LinkMatcher | None = None,
) -> list[str]:
    """
    Return every URL in *body* that belongs to *target_domain*.

    A match is kept when its lowercased form starts with
    ``https://{target_domain}``; relative links, other schemes and other
    hosts are dropped. Order of first appearance is preserved and
    duplicates are kept, since deduplication happens at admission.
    """
    if matcher is None:
        matcher = RegexLinkMatcher()
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    prefix = f"https://{target_domain.lower()}"
    return [url for url in matcher.find_all(body) if url.lower().startswith(prefix)]
