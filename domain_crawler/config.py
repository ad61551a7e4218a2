"""
Configuration constants for the single-domain crawler.
"""

import re

# ---------------------------------------------------------------------------
# Crawl defaults
# ---------------------------------------------------------------------------
DEFAULT_CRAWL_LIMIT = -1          # -1 = unbounded
DEFAULT_SETTLE_INTERVAL = 10.0    # seconds to wait after a drained signal
DEFAULT_CONCURRENCY = 1           # worker threads
DEFAULT_POLL_INTERVAL = 0.5       # seconds between polls of an idle queue

# ---------------------------------------------------------------------------
# Job queue
# ---------------------------------------------------------------------------
QUEUE_NAME = "crawler"
JOB_NAME = "Crawler"
QUEUE_KEY_PREFIX = "bull-lite"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# Attempts per job at the substrate level (1 = never retried)
DEFAULT_ATTEMPTS = 1
# Base delay for exponential backoff between attempts (seconds)
DEFAULT_BACKOFF = 1.0

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT = 15              # seconds
MAX_RETRIES = 3                   # urllib3 retries on 5xx
USER_AGENT = "DomainCrawler/1.0 (+https://pypi.org/project/domain-crawler/)"

# ---------------------------------------------------------------------------
# Link matching
# ---------------------------------------------------------------------------

# Permissive "URL somewhere in a string" pattern. Runs over the raw page
# text, so it also finds URLs outside anchor tags (scripts, JSON, comments).
LINK_PATTERN = re.compile(
    r"(?:(?:https?|ftp|file)://|www\.|ftp\.)"
    r"(?:\([-A-Z0-9+&@#/%=~_|$?!:,.]*\)|[-A-Z0-9+&@#/%=~_|$?!:,.])*"
    r"(?:\([-A-Z0-9+&@#/%=~_|$?!:,.]*\)|[A-Z0-9+&@#/%=~_|$])",
    re.IGNORECASE | re.MULTILINE,
)

# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

DOMAIN_RE = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z0-9][a-z0-9-]{0,61}[a-z0-9]$"
)

START_PAGE_RE = re.compile(
    r"^(?:https?://)?(?:[\w-]+\.)+[\w-]+(?::\d+)?(?:/[^\s]*)?$",
    re.IGNORECASE,
)
