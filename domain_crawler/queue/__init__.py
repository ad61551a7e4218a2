"""Job queue backends and the worker that consumes them."""

from domain_crawler.queue.base import Job, JobCounts, JobOptions, JobQueue
from domain_crawler.queue.memory import MemoryQueue
from domain_crawler.queue.redis_queue import RedisQueue
from domain_crawler.queue.worker import Worker

__all__ = [
    "Job",
    "JobCounts",
    "JobOptions",
    "JobQueue",
    "MemoryQueue",
    "RedisQueue",
    "Worker",
]
