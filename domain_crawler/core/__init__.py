"""Core crawler logic – frontier, dispatch, drain detection, orchestration."""

from domain_crawler.core.crawler import Crawler, CrawlState
from domain_crawler.core.dispatcher import JobDispatcher, job_id_for
from domain_crawler.core.drain import DrainMonitor, is_finished
from domain_crawler.core.frontier import Frontier
from domain_crawler.core.models import CrawlConfig

__all__ = [
    "Crawler",
    "CrawlState",
    "CrawlConfig",
    "DrainMonitor",
    "Frontier",
    "JobDispatcher",
    "is_finished",
    "job_id_for",
]
