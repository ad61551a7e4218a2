"""
HTTP session creation and page fetching.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from domain_crawler.config import MAX_RETRIES, REQUEST_TIMEOUT, USER_AGENT


def build_session(user_agent: str = USER_AGENT, verify_ssl: bool = True) -> requests.Session:
    """Return a ``requests.Session`` with retry logic on 5xx errors and
    keep-alive connection pooling sized for a small worker pool."""
    session = requests.Session()
    retry = Retry(
        total=MAX_RETRIES,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
    )
    adapter = HTTPAdapter(
        max_retries=retry,
        pool_connections=20,
        pool_maxsize=20,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Connection": "keep-alive",
    })
    return session


def fetch_page(session: requests.Session, url: str, timeout: float = REQUEST_TIMEOUT) -> str:
    """GET *url* and return the decoded body.

    Transport errors and 4xx/5xx responses raise
    ``requests.RequestException``; nothing is caught here.
    """
    resp = session.get(url, timeout=timeout, allow_redirects=True)
    resp.raise_for_status()
    return resp.text
