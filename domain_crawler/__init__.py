"""
domain_crawler
==============
Breadth-first crawler that visits every page reachable from a start URL
without leaving one target domain, driven by a job queue.

Package structure
-----------------
domain_crawler/
├── __init__.py       – package init and public API
├── config.py         – configuration constants
├── errors.py         – exception hierarchy
├── session.py        – requests.Session factory and page fetch
├── reporting.py      – crawl observers (log + progress bar)
├── cli.py            – argparse CLI (``python -m domain_crawler``)
├── core/             – frontier, dispatcher, drain monitor, Crawler
├── extraction/       – domain-scoped link extraction and matchers
├── queue/            – in-process and Redis job queues, worker pool
└── utils/            – URL normalisation, logging

Quick start
-----------
    from domain_crawler import Crawler, CrawlConfig, MemoryQueue

    config = CrawlConfig.create("example.com", crawl_limit=100)
    crawler = Crawler(config, MemoryQueue(), concurrency=4)
    crawler.run()
    print(sorted(crawler.visited))
"""

from .core import Crawler, CrawlConfig, CrawlState, Frontier
from .extraction import HtmlLinkMatcher, RegexLinkMatcher, extract_links
from .queue import MemoryQueue, RedisQueue
from .reporting import LogReporter, Reporter

__version__ = "1.0.0"

__all__ = [
    "Crawler",
    "CrawlConfig",
    "CrawlState",
    "Frontier",
    "HtmlLinkMatcher",
    "RegexLinkMatcher",
    "extract_links",
    "MemoryQueue",
    "RedisQueue",
    "LogReporter",
    "Reporter",
]
