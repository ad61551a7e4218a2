"""
Job queue interface shared by the in-process and Redis backends.

A queue stores jobs under caller-chosen ids and moves them through
``waiting -> active -> (completed | failed)``, with ``delayed`` for jobs
waiting out a retry backoff. Adding a job whose id already exists is a
no-op, which is what makes URL admission idempotent at this level.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from domain_crawler.config import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF


@dataclass(frozen=True)
class JobOptions:
    job_id: str
    remove_on_complete: bool = False
    remove_on_fail: bool = True
    attempts: int = DEFAULT_ATTEMPTS
    backoff: float = DEFAULT_BACKOFF


@dataclass
class Job:
    id: str
    name: str
    data: dict[str, Any] = field(default_factory=dict)
    attempts: int = DEFAULT_ATTEMPTS
    attempts_made: int = 0
    backoff: float = DEFAULT_BACKOFF
    remove_on_complete: bool = False
    remove_on_fail: bool = True
    failed_reason: str | None = None

    @classmethod
    def from_options(cls, name: str, data: dict[str, Any], options: JobOptions) -> "Job":
        return cls(
            id=options.job_id,
            name=name,
            data=dict(data),
            attempts=max(1, options.attempts),
            backoff=options.backoff,
            remove_on_complete=options.remove_on_complete,
            remove_on_fail=options.remove_on_fail,
        )

    def retry_delay(self) -> float:
        """Exponential backoff before the next attempt."""
        return self.backoff * (2 ** max(0, self.attempts_made - 1))

    @property
    def can_retry(self) -> bool:
        return self.attempts_made < self.attempts


@dataclass(frozen=True)
class JobCounts:
    active: int = 0
    waiting: int = 0
    delayed: int = 0
    completed: int = 0
    failed: int = 0

    @property
    def outstanding(self) -> int:
        """Jobs that may still run: active + waiting + delayed."""
        return self.active + self.waiting + self.delayed


class JobQueue(ABC):
    """Abstract job queue.  Implementations must be thread-safe."""

    name: str

    @abstractmethod
    def add(self, name: str, data: dict[str, Any], options: JobOptions) -> bool:
        """Store a new waiting job.  Returns ``False`` if the id exists."""

    @abstractmethod
    def pause(self) -> None:
        """Stop handing out jobs from :meth:`reserve`."""

    @abstractmethod
    def resume(self) -> None:
        ...

    @abstractmethod
    def is_paused(self) -> bool:
        ...

    @abstractmethod
    def obliterate(self) -> None:
        """Delete every job and all queue state.

        Raises :class:`~domain_crawler.errors.QueueBusyError` while any job
        is active.
        """

    @abstractmethod
    def counts(self) -> JobCounts:
        ...

    @abstractmethod
    def reserve(self) -> Job | None:
        """Move the next runnable job to *active* and return it.

        Returns ``None`` when paused or when nothing is runnable.  Delayed
        jobs whose backoff has elapsed are promoted first.
        """

    @abstractmethod
    def complete(self, job: Job) -> None:
        ...

    @abstractmethod
    def fail(self, job: Job, exc: BaseException) -> None:
        """Record a failed attempt.

        The job is re-scheduled as delayed while attempts remain, otherwise
        it is discarded (``remove_on_fail``) or kept as failed.
        """

    @abstractmethod
    def completed_ids(self) -> list[str]:
        ...

    @abstractmethod
    def close(self) -> None:
        ...
