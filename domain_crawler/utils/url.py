"""
Domain and start-page normalisation helpers.
"""

import hashlib

from domain_crawler.config import DOMAIN_RE, SCHEME_RE, START_PAGE_RE
from domain_crawler.errors import InvalidConfigError


def normalise_domain(raw: str) -> str:
    """
    Return *raw* as a bare lowercase host name.

    A leading ``http://`` or ``https://`` (in any case) and a trailing
    slash are stripped, so ``HTTPS://Example.COM/`` becomes
    ``example.com``.

    Raises :class:`InvalidConfigError` for empty or malformed domains.
    """
    if not raw or not raw.strip():
        raise InvalidConfigError("Invalid domain format: empty domain")
    domain = SCHEME_RE.sub("", raw.strip()).rstrip("/").lower()
    if not DOMAIN_RE.match(domain):
        raise InvalidConfigError(f"Invalid domain format: {raw!r}")
    return domain


def normalise_start_page(raw: str) -> str:
    """
    Return *raw* as a lowercase absolute URL, adding ``https://`` when no
    scheme is present.

    Raises :class:`InvalidConfigError` when *raw* does not look like a URL.
    """
    raw = (raw or "").strip()
    if not START_PAGE_RE.match(raw):
        raise InvalidConfigError(f"Invalid start page format: {raw!r}")
    url = raw.lower()
    return url if url.startswith("http") else f"https://{url}"


def url_hash(url: str) -> str:
    """SHA-256 hex digest of *url*, used as a stable job identity."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()
