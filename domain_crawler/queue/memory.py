"""
In-process job queue.

Everything lives in the current process, so nothing survives a restart;
used when no Redis URL is configured and in tests.
"""

import heapq
import threading
import time
from collections import deque
from typing import Any

from domain_crawler.config import QUEUE_NAME
from domain_crawler.errors import QueueBusyError, QueueError
from domain_crawler.queue.base import Job, JobCounts, JobOptions, JobQueue
from domain_crawler.utils.log import log


class MemoryQueue(JobQueue):

    def __init__(self, name: str = QUEUE_NAME, clock=time.monotonic) -> None:
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()
        self._jobs: dict[str, Job] = {}
        self._waiting: deque[str] = deque()
        self._active: set[str] = set()
        self._delayed: list[tuple[float, str]] = []  # heap of (due, job_id)
        self._completed: list[str] = []
        self._failed: set[str] = set()
        self._paused = False
        self._closed = False

    def add(self, name: str, data: dict[str, Any], options: JobOptions) -> bool:
        with self._lock:
            self._check_open()
            if options.job_id in self._jobs:
                return False
            self._jobs[options.job_id] = Job.from_options(name, data, options)
            self._waiting.append(options.job_id)
            return True

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            self._paused = False

    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    def obliterate(self) -> None:
        with self._lock:
            self._check_open()
            if self._active:
                raise QueueBusyError(
                    f"Cannot obliterate queue '{self.name}': "
                    f"{len(self._active)} job(s) are active"
                )
            self._jobs.clear()
            self._waiting.clear()
            self._delayed.clear()
            self._completed.clear()
            self._failed.clear()
            self._paused = False
        log.debug("[QUEUE] Obliterated in-memory queue '%s'", self.name)

    def counts(self) -> JobCounts:
        with self._lock:
            return JobCounts(
                active=len(self._active),
                waiting=len(self._waiting),
                delayed=len(self._delayed),
                completed=len(self._completed),
                failed=len(self._failed),
            )

    def reserve(self) -> Job | None:
        with self._lock:
            if self._paused or self._closed:
                return None
            self._promote_delayed()
            if not self._waiting:
                return None
            job_id = self._waiting.popleft()
            self._active.add(job_id)
            return self._jobs[job_id]

    def complete(self, job: Job) -> None:
        with self._lock:
            self._active.discard(job.id)
            if job.remove_on_complete:
                self._jobs.pop(job.id, None)
            else:
                self._completed.append(job.id)

    def fail(self, job: Job, exc: BaseException) -> None:
        with self._lock:
            self._active.discard(job.id)
            job.attempts_made += 1
            job.failed_reason = str(exc)
            if job.can_retry:
                heapq.heappush(self._delayed, (self._clock() + job.retry_delay(), job.id))
            elif job.remove_on_fail:
                self._jobs.pop(job.id, None)
            else:
                self._failed.add(job.id)

    def completed_ids(self) -> list[str]:
        with self._lock:
            return list(self._completed)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def _promote_delayed(self) -> None:
        now = self._clock()
        while self._delayed and self._delayed[0][0] <= now:
            _, job_id = heapq.heappop(self._delayed)
            self._waiting.append(job_id)

    def _check_open(self) -> None:
        if self._closed:
            raise QueueError(f"Queue '{self.name}' is closed")
