"""Link extraction: domain filter plus swappable URL matchers."""

from domain_crawler.extraction.links import (
    LinkMatcher,
    RegexLinkMatcher,
    as_matcher,
    extract_links,
)
from domain_crawler.extraction.html_parser import HtmlLinkMatcher

__all__ = [
    "LinkMatcher",
    "RegexLinkMatcher",
    "HtmlLinkMatcher",
    "as_matcher",
    "extract_links",
]
