"""
Crawl observers.

The crawler hands each processed page and, at the end, the full visited
set to a :class:`Reporter`.  :class:`LogReporter` writes both to the
package logger and shows a live progress bar when ``tqdm`` is installed.
"""

import threading
from collections.abc import Iterable

from domain_crawler.utils.log import ci_section, log

try:
    from tqdm import tqdm as _tqdm
    _TQDM_AVAILABLE = True
except ImportError:
    _TQDM_AVAILABLE = False


class Reporter:
    """No-op base reporter."""

    def page_crawled(self, url: str, links: list[str], admitted: list[str]) -> None:
        pass

    def crawl_finished(self, visited: Iterable[str]) -> None:
        pass


class LogReporter(Reporter):

    def __init__(self, progress: bool = True) -> None:
        self.progress = progress and _TQDM_AVAILABLE
        self.pages = 0
        self._bar = None
        self._lock = threading.Lock()

    def page_crawled(self, url: str, links: list[str], admitted: list[str]) -> None:
        with self._lock:
            self.pages += 1
            self._update_bar(len(admitted))
        log.info("[PAGE] %s (%d in-domain link(s), %d new)", url, len(links), len(admitted))
        for link in links:
            log.debug("    %s", link)

    def crawl_finished(self, visited: Iterable[str]) -> None:
        with self._lock:
            if self._bar is not None:
                self._bar.close()
                self._bar = None
        urls = sorted(visited)
        with ci_section(f"Visited URLs ({len(urls)})"):
            for url in urls:
                log.info("  %s", url)
        log.info("[DONE] %d page(s) processed, %d URL(s) visited", self.pages, len(urls))

    def _update_bar(self, new_items: int) -> None:
        if not self.progress:
            return
        if self._bar is None:
            self._bar = _tqdm(desc="Crawling", unit="page", total=1, dynamic_ncols=True)
        self._bar.total += new_items
        self._bar.update(1)
