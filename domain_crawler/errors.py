"""Exception hierarchy for the crawler."""


class CrawlerError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfigError(CrawlerError, ValueError):
    """Raised for a malformed domain, start page or crawl limit."""


class CrawlStateError(CrawlerError):
    """Raised when a lifecycle method is called in the wrong state."""


class CrawlStartError(CrawlerError):
    """Raised when the queue cannot be reset before a crawl.

    The underlying queue error is available as ``__cause__``.
    """


class QueueError(CrawlerError):
    """Raised by a job queue backend."""


class QueueBusyError(QueueError):
    """Raised when a queue cannot be obliterated because jobs are active."""
