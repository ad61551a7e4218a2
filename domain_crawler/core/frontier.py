"""
The frontier: every URL admitted for crawling during one run.
"""

import threading

from domain_crawler.config import DEFAULT_CRAWL_LIMIT


class Frontier:
    """
    Thread-safe dedup ledger with a global admission cap.

    A URL is admitted at most once.  Once the ledger holds ``crawl_limit``
    URLs it stops admitting new ones, but URLs already admitted keep being
    processed, so a single page can still push the crawl past the limit
    only up to the slots that were free when its links were offered.
    """

    def __init__(self, crawl_limit: int = DEFAULT_CRAWL_LIMIT) -> None:
        self.crawl_limit = crawl_limit
        self._urls: set[str] = set()
        self._lock = threading.Lock()

    def try_admit(self, url: str) -> bool:
        """Record *url* and return ``True`` if it is new and a slot is free."""
        with self._lock:
            if url in self._urls:
                return False
            if self._full():
                return False
            self._urls.add(url)
            return True

    def mark_visited(self, url: str) -> None:
        """Record *url* regardless of the limit (idempotent)."""
        with self._lock:
            self._urls.add(url)

    def discard(self, url: str) -> None:
        with self._lock:
            self._urls.discard(url)

    def reset(self) -> None:
        with self._lock:
            self._urls.clear()

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._urls)

    @property
    def is_closed(self) -> bool:
        """``True`` once no further URL can be admitted."""
        with self._lock:
            return self._full()

    def _full(self) -> bool:
        return self.crawl_limit != -1 and len(self._urls) >= self.crawl_limit

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls
