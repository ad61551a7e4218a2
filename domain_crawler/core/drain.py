"""
Decides whether a drained queue means the crawl is over.
"""

import threading
import time
from typing import Callable

from domain_crawler.config import DEFAULT_SETTLE_INTERVAL
from domain_crawler.queue.base import JobCounts
from domain_crawler.utils.log import log


def is_finished(counts: JobCounts) -> bool:
    """No job is active, waiting or delayed."""
    return counts.outstanding == 0


class DrainMonitor:
    """
    Handle the queue's "nothing runnable" notification.

    Each trigger waits *settle_interval* seconds, so children submitted by a
    job that just finished are counted, then reads the queue counts once.
    Zero outstanding jobs calls *on_finished* (at most once per monitor);
    anything else is a no-op, since the next drained notification will
    trigger again.

    Only one settling wait runs at a time.  A trigger that arrives while
    one is in flight is remembered in a single slot and replayed once
    afterwards if the in-flight check did not finish the crawl.
    """

    def __init__(
        self,
        counts: Callable[[], JobCounts],
        on_finished: Callable[[], None],
        settle_interval: float = DEFAULT_SETTLE_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._counts = counts
        self._on_finished = on_finished
        self.settle_interval = settle_interval
        self._sleep = sleep
        self._lock = threading.Lock()
        self._running = False
        self._pending = False
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._running and not self._finished

    def trigger(self) -> bool:
        """Run a settle-and-check cycle; ``True`` if the crawl finished."""
        with self._lock:
            if self._finished:
                return True
            if self._running:
                self._pending = True
                log.debug("[DRAIN] Check already in flight – re-check queued")
                return False
            self._running = True
        try:
            while True:
                if self._check():
                    return True
                with self._lock:
                    if not self._pending:
                        self._running = False
                        return False
                    self._pending = False
        except BaseException:
            with self._lock:
                self._running = False
            raise

    def _check(self) -> bool:
        log.debug("[DRAIN] Settling for %.1f s", self.settle_interval)
        self._sleep(self.settle_interval)
        counts = self._counts()
        if not is_finished(counts):
            log.info("[DRAIN] Still busy: active=%d waiting=%d delayed=%d",
                     counts.active, counts.waiting, counts.delayed)
            return False
        self._finished = True
        self._on_finished()
        return True
