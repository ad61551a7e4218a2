"""
Command-line interface for the single-domain crawler.
"""

import argparse
import sys
import time

from domain_crawler.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_CONCURRENCY,
    DEFAULT_SETTLE_INTERVAL,
    QUEUE_NAME,
)
from domain_crawler.core.crawler import Crawler
from domain_crawler.core.models import CrawlConfig
from domain_crawler.errors import CrawlStartError, InvalidConfigError
from domain_crawler.extraction.html_parser import HtmlLinkMatcher
from domain_crawler.queue.base import JobQueue
from domain_crawler.queue.memory import MemoryQueue
from domain_crawler.queue.redis_queue import RedisQueue
from domain_crawler.reporting import LogReporter
from domain_crawler.utils.log import log, setup_logging
from domain_crawler.utils.url import normalise_domain, normalise_start_page


def _domain(value: str) -> str:
    try:
        return normalise_domain(value)
    except InvalidConfigError:
        raise argparse.ArgumentTypeError("Invalid domain format")


def _start_page(value: str) -> str:
    try:
        return normalise_start_page(value)
    except InvalidConfigError:
        raise argparse.ArgumentTypeError("Invalid start page format")


def _limit(value: str) -> int:
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid limit: {value!r}")
    if limit < -1:
        raise argparse.ArgumentTypeError("limit must be -1 (unbounded) or >= 0")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="domain-crawler",
        description="Breadth-first crawler that visits every page reachable "
                    "from a start URL without leaving the target domain.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  domain-crawler --domain example.com\n"
            "  domain-crawler --domain example.com --limit 100\n"
            "  domain-crawler --domain example.com --start-page example.com/blog\n"
            "  domain-crawler --domain example.com --redis-url redis://localhost:6379/0 "
            "--concurrency 8\n"
        ),
    )
    parser.add_argument(
        "--domain", required=True, type=_domain,
        help="The domain to crawl (e.g. example.com)",
    )
    parser.add_argument(
        "--limit", type=_limit, default=None,
        help="Number of pages after which no more jobs are added. Not a hard "
             "limit: jobs already queued are still processed (default: none)",
    )
    parser.add_argument(
        "--start-page", type=_start_page, default=None,
        help="The page to start crawling from (default: https://DOMAIN)",
    )
    parser.add_argument(
        "--redis-url", default=None,
        help="Run the job queue on this Redis server instead of in-process "
             "(e.g. redis://localhost:6379/0)",
    )
    parser.add_argument(
        "--queue-name", default=QUEUE_NAME,
        help=f"Queue name, used as the Redis key namespace (default: {QUEUE_NAME})",
    )
    parser.add_argument(
        "--concurrency", type=int, default=DEFAULT_CONCURRENCY, metavar="N",
        help=f"Number of worker threads (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--settle", type=float, default=DEFAULT_SETTLE_INTERVAL, metavar="SECONDS",
        help="Wait this long after the queue drains before deciding the crawl "
             f"is finished (default: {DEFAULT_SETTLE_INTERVAL:g})",
    )
    parser.add_argument(
        "--attempts", type=int, default=DEFAULT_ATTEMPTS,
        help=f"Fetch attempts per page before its job is dropped (default: {DEFAULT_ATTEMPTS})",
    )
    parser.add_argument(
        "--matcher", choices=("regex", "html"), default="regex",
        help="How links are found: regex over the raw text, or HTML "
             "attributes parsed with BeautifulSoup (default: regex)",
    )
    parser.add_argument(
        "--no-progress", dest="progress", action="store_false", default=True,
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Write detailed logs to this file (always at DEBUG level)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_queue(args: argparse.Namespace) -> JobQueue:
    if args.redis_url:
        log.info("Job queue        : Redis %s (queue '%s')", args.redis_url, args.queue_name)
        return RedisQueue(name=args.queue_name, url=args.redis_url)
    log.info("Job queue        : in-process (queue '%s')", args.queue_name)
    return MemoryQueue(name=args.queue_name)


def run(args: argparse.Namespace) -> int:
    config = CrawlConfig.create(
        target_domain=args.domain,
        start_page=args.start_page,
        crawl_limit=args.limit,
        link_pattern=HtmlLinkMatcher() if args.matcher == "html" else None,
    )
    limit = "none" if config.unbounded else config.crawl_limit
    log.info("Crawling %s, starting from %s with the following limit: %s.",
             config.target_domain, config.start_page, limit)

    crawler = Crawler(
        config,
        build_queue(args),
        reporter=LogReporter(progress=args.progress),
        concurrency=args.concurrency,
        settle_interval=args.settle,
        attempts=args.attempts,
    )

    t0 = time.monotonic()
    try:
        code = crawler.run()
    except CrawlStartError as exc:
        log.error("Crawl not started: %s", exc.__cause__ or exc)
        return 1
    except KeyboardInterrupt:
        log.warning("Interrupted – %d URL(s) admitted so far", len(crawler.visited))
        return 130
    finally:
        crawler.close()
    log.info("Total elapsed time: %.1f s", time.monotonic() - t0)
    return code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    setup_logging(
        debug=args.debug,
        log_file=args.log_file,
        show_threads=args.concurrency > 1,
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
