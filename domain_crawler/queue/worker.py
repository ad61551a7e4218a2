"""
Thread-pool worker that drains a :class:`JobQueue`.
"""

import threading
from typing import Callable

from domain_crawler.config import DEFAULT_CONCURRENCY, DEFAULT_POLL_INTERVAL
from domain_crawler.errors import QueueError
from domain_crawler.queue.base import Job, JobQueue
from domain_crawler.utils.log import log


class Worker:
    """
    Run *processor* for every job reserved from *queue* on
    *concurrency* threads.

    A processor that returns normally completes the job; any exception
    fails it, and the queue's own retry policy decides what happens next.

    ``drained`` listeners are notified, each time on a fresh thread, when a
    poll finds nothing runnable for the first time after startup or after
    some job finished.  The notification is edge-triggered: an idle worker
    does not repeat it until another job has run.
    """

    def __init__(
        self,
        queue: JobQueue,
        processor: Callable[[Job], None],
        concurrency: int = DEFAULT_CONCURRENCY,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.queue = queue
        self.processor = processor
        self.concurrency = max(1, concurrency)
        self.poll_interval = poll_interval

        self._threads: list[threading.Thread] = []
        self._drained_listeners: list[Callable[[], None]] = []
        self._closing = threading.Event()
        self._lock = threading.Lock()
        self._armed = True
        self._closed = False

    def on_drained(self, callback: Callable[[], None]) -> None:
        self._drained_listeners.append(callback)

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        if self._threads:
            return
        for n in range(self.concurrency):
            t = threading.Thread(
                target=self._loop, name=f"worker-{n + 1}", daemon=True
            )
            self._threads.append(t)
            t.start()
        log.debug("[QUEUE] Worker started with %d thread(s) on '%s'",
                  self.concurrency, self.queue.name)

    def close(self) -> None:
        """Stop polling and wait for in-flight jobs.  Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._closing.set()
        current = threading.current_thread()
        for t in self._threads:
            if t is not current:
                t.join()
        log.debug("[QUEUE] Worker closed")

    # ------------------------------------------------------------------

    def _loop(self) -> None:
        while not self._closing.is_set():
            try:
                job = self.queue.reserve()
            except QueueError as exc:
                log.warning("[ERR] Could not reserve from queue '%s': %s",
                            self.queue.name, exc)
                self._closing.wait(self.poll_interval)
                continue
            if job is None:
                self._maybe_emit_drained()
                self._closing.wait(self.poll_interval)
                continue
            self._run(job)

    def _run(self, job: Job) -> None:
        try:
            self.processor(job)
        except Exception as exc:
            attempt = job.attempts_made + 1
            if attempt < job.attempts:
                log.warning("[RETRY] Job %s failed (attempt %d/%d): %s",
                            job.id[:12], attempt, job.attempts, exc)
            else:
                log.warning("[ERR] Job %s failed (attempt %d/%d): %s",
                            job.id[:12], attempt, job.attempts, exc)
            self._acknowledge(self.queue.fail, job, exc)
        else:
            self._acknowledge(self.queue.complete, job)
        finally:
            with self._lock:
                self._armed = True

    def _acknowledge(self, record: Callable[..., None], job: Job, *args) -> None:
        """Call *record* until the queue accepts it or the worker closes.

        Until then the job stays active, which keeps the crawl from
        draining.
        """
        while True:
            try:
                record(job, *args)
                return
            except QueueError as exc:
                log.warning("[ERR] Could not record job %s on queue '%s': %s",
                            job.id[:12], self.queue.name, exc)
            if self._closing.wait(self.poll_interval):
                log.error("[ERR] Worker closed before job %s was recorded", job.id[:12])
                return

    def _maybe_emit_drained(self) -> None:
        with self._lock:
            if not self._armed or self._closed:
                return
            self._armed = False
        threading.Thread(target=self._emit_drained, name="drained", daemon=True).start()

    def _emit_drained(self) -> None:
        log.debug("[DRAIN] Queue '%s' has no runnable jobs", self.queue.name)
        for callback in list(self._drained_listeners):
            try:
                callback()
            except Exception:
                log.exception("[ERR] drained listener %r raised", callback)
