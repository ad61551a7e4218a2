"""Utility helpers for URL normalisation and logging."""

from domain_crawler.utils.url import normalise_domain, normalise_start_page, url_hash
from domain_crawler.utils.log import setup_logging, log

__all__ = [
    "normalise_domain",
    "normalise_start_page",
    "url_hash",
    "setup_logging",
    "log",
]
