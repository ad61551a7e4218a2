"""
Immutable crawl configuration.
"""

import re
from dataclasses import dataclass, field

from domain_crawler.config import DEFAULT_CRAWL_LIMIT
from domain_crawler.errors import InvalidConfigError
from domain_crawler.extraction.links import LinkMatcher, RegexLinkMatcher, as_matcher
from domain_crawler.utils.url import normalise_domain, normalise_start_page


@dataclass(frozen=True)
class CrawlConfig:
    """What to crawl.  Build it with :meth:`create` to get normalisation."""

    target_domain: str
    start_page: str
    crawl_limit: int = DEFAULT_CRAWL_LIMIT
    link_matcher: LinkMatcher = field(default_factory=RegexLinkMatcher)

    def __post_init__(self) -> None:
        if not self.target_domain:
            raise InvalidConfigError("Invalid domain format: empty domain")
        if self.crawl_limit < -1:
            raise InvalidConfigError(
                f"Invalid crawl limit {self.crawl_limit}: use -1 for unbounded"
            )

    @classmethod
    def create(
        cls,
        target_domain: str,
        start_page: str | None = None,
        crawl_limit: int | None = None,
        link_pattern: "LinkMatcher | str | re.Pattern[str] | None" = None,
    ) -> "CrawlConfig":
        """
        Normalise raw settings into a config.

        * ``target_domain`` loses any ``http(s)://`` prefix and is lowercased.
        * ``start_page`` defaults to ``https://{target_domain}``.
        * ``crawl_limit`` defaults to ``-1`` (unbounded).
        * ``link_pattern`` may be a regex (string or compiled) or any
          object with a ``find_all(body)`` method.
        """
        domain = normalise_domain(target_domain)
        page = normalise_start_page(start_page) if start_page else f"https://{domain}"
        limit = DEFAULT_CRAWL_LIMIT if crawl_limit is None else int(crawl_limit)
        return cls(
            target_domain=domain,
            start_page=page,
            crawl_limit=limit,
            link_matcher=as_matcher(link_pattern),
        )

    @property
    def unbounded(self) -> bool:
        return self.crawl_limit == -1
