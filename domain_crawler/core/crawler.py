"""
Single-domain crawler orchestration.

The crawler owns the frontier and drives the queue:

* ``start()`` resets the queue and admits the start page
* the worker calls ``process_job()`` for every queued URL:
  fetch → extract in-domain links → admit each one
* the worker's ``drained`` notification runs the drain monitor, which
  ends the crawl once nothing is active, waiting or delayed

Admission is the only way work enters the queue: a URL is recorded in the
frontier and submitted as a job together, or not at all.
"""

import enum
import threading

import requests

from domain_crawler.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_CONCURRENCY,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SETTLE_INTERVAL,
)
from domain_crawler.core.dispatcher import JobDispatcher
from domain_crawler.core.drain import DrainMonitor
from domain_crawler.core.frontier import Frontier
from domain_crawler.core.models import CrawlConfig
from domain_crawler.errors import CrawlStartError, CrawlStateError, QueueError
from domain_crawler.extraction.links import extract_links
from domain_crawler.queue.base import Job, JobQueue
from domain_crawler.queue.worker import Worker
from domain_crawler.reporting import Reporter
from domain_crawler.session import build_session, fetch_page
from domain_crawler.utils.log import log


class CrawlState(enum.Enum):
    IDLE = "idle"
    STARTED = "started"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class Crawler:
    """
    Breadth-first crawler restricted to ``config.target_domain``.
    """

    def __init__(
        self,
        config: CrawlConfig,
        queue: JobQueue,
        session: requests.Session | None = None,
        reporter: Reporter | None = None,
        concurrency: int = DEFAULT_CONCURRENCY,
        settle_interval: float = DEFAULT_SETTLE_INTERVAL,
        attempts: int = DEFAULT_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.config = config
        self.queue = queue
        self.session = session if session is not None else build_session()
        self.reporter = reporter if reporter is not None else Reporter()

        self.frontier = Frontier(config.crawl_limit)
        self.dispatcher = JobDispatcher(queue, attempts=attempts)
        self.worker = Worker(
            queue, self.process_job,
            concurrency=concurrency, poll_interval=poll_interval,
        )
        self.worker.on_drained(self.on_drained)
        self.monitor = DrainMonitor(
            queue.counts, self._finish, settle_interval=settle_interval,
        )

        self._state = CrawlState.IDLE
        self._state_lock = threading.RLock()
        self._terminated = threading.Event()
        self._closed = False
        self.exit_code: int | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> CrawlState:
        return self._state

    @property
    def visited(self) -> frozenset[str]:
        return self.frontier.snapshot()

    def start(self) -> None:
        """Reset the queue and admit the start page.

        Raises :class:`CrawlStartError` when the queue cannot be cleared,
        typically because jobs from an earlier run are still active.
        """
        with self._state_lock:
            if self._state is not CrawlState.IDLE:
                raise CrawlStateError(f"Cannot start a crawl in state {self._state.value}")
            self._state = CrawlState.STARTED

        try:
            self.queue.pause()
            self.queue.obliterate()
        except QueueError as exc:
            log.error("[ERR] Error while obliterating the queue. "
                      "This may be because there are active jobs.")
            log.error("[ERR] %s", exc)
            with self._state_lock:
                self._state = CrawlState.IDLE
            raise CrawlStartError(f"Could not reset queue '{self.queue.name}': {exc}") from exc

        self.frontier.reset()
        self.queue.resume()
        if self._admit(self.config.start_page):
            log.info("[QUEUE] Start page queued: %s", self.config.start_page)
        else:
            log.warning("[LIMIT] Crawl limit %d leaves no room for the start page",
                        self.config.crawl_limit)
        with self._state_lock:
            self._state = CrawlState.RUNNING

    def process_job(self, job: Job) -> None:
        """Crawl one page: fetch it, extract in-domain links, admit them.

        Fetch errors propagate so the queue records the job as failed.
        """
        url = job.data["url"]
        log.debug("Processing job %s", job.id[:12])
        self.frontier.mark_visited(url)

        body = fetch_page(self.session, url)
        links = extract_links(body, self.config.target_domain, self.config.link_matcher)

        admitted = [link for link in links if self._admit(link)]
        if len(admitted) < len(links) and self.frontier.is_closed:
            log.debug("[LIMIT] Crawl limit %d reached – links from %s not admitted",
                      self.config.crawl_limit, url)
        self.reporter.page_crawled(url, links, admitted)

    def on_drained(self) -> None:
        """Queue reported nothing runnable: check whether the crawl is over."""
        with self._state_lock:
            if self._state not in (CrawlState.RUNNING, CrawlState.DRAINING):
                return
            self._state = CrawlState.DRAINING
        if not self.monitor.trigger():
            with self._state_lock:
                if self._state is CrawlState.DRAINING and not self.monitor.in_flight:
                    self._state = CrawlState.RUNNING

    def run(self, timeout: float | None = None) -> int:
        """Start the crawl, process jobs until it drains, return the exit code.

        Raises :class:`CrawlStartError` if the queue could not be reset and
        ``TimeoutError`` if *timeout* seconds pass without the crawl
        finishing.
        """
        self.start()
        self.worker.start()
        if not self._terminated.wait(timeout):
            self.close()
            raise TimeoutError(f"Crawl did not finish within {timeout} s")
        return self.exit_code if self.exit_code is not None else 0

    def close(self) -> None:
        """Release the worker and the queue connection, exactly once."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        self.worker.close()
        self.queue.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _admit(self, url: str) -> bool:
        if not self.frontier.try_admit(url):
            return False
        try:
            self.dispatcher.submit(url)
        except Exception:
            self.frontier.discard(url)
            raise
        return True

    def _finish(self) -> None:
        with self._state_lock:
            if self._state is CrawlState.TERMINATED:
                return
            self._state = CrawlState.TERMINATED
        log.info("[DONE] All jobs processed. Closing...")
        self.reporter.crawl_finished(self.visited)
        self.close()
        self.exit_code = 0
        self._terminated.set()
