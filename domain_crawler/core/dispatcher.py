"""
Turns admitted URLs into queue jobs.
"""

from domain_crawler.config import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF, JOB_NAME
from domain_crawler.queue.base import JobOptions, JobQueue
from domain_crawler.utils.log import log
from domain_crawler.utils.url import url_hash


def job_id_for(url: str) -> str:
    """Deterministic job id for *url*; the same URL always maps to the same job."""
    return url_hash(url)


class JobDispatcher:
    """
    Submit one crawl job per URL.

    Completed jobs are kept (the drain check and the final report read
    them); failed jobs are discarded rather than left for manual replay.
    """

    def __init__(
        self,
        queue: JobQueue,
        attempts: int = DEFAULT_ATTEMPTS,
        backoff: float = DEFAULT_BACKOFF,
    ) -> None:
        self.queue = queue
        self.attempts = attempts
        self.backoff = backoff

    def options_for(self, url: str) -> JobOptions:
        return JobOptions(
            job_id=job_id_for(url),
            remove_on_complete=False,
            remove_on_fail=True,
            attempts=self.attempts,
            backoff=self.backoff,
        )

    def submit(self, url: str) -> bool:
        """Push ``{"url": url}``; ``False`` means the job already existed."""
        created = self.queue.add(JOB_NAME, {"url": url}, self.options_for(url))
        if created:
            log.debug("[QUEUE] + %s", url)
        else:
            log.debug("[DUP] Job for %s already queued", url)
        return created
