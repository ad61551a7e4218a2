"""
Tests for argument parsing and the CLI run loop.
"""

import contextlib
import io
import unittest
from unittest.mock import MagicMock, patch

from domain_crawler import cli
from domain_crawler.errors import CrawlStartError, QueueBusyError
from domain_crawler.extraction.html_parser import HtmlLinkMatcher
from domain_crawler.queue.memory import MemoryQueue
from domain_crawler.queue.redis_queue import RedisQueue


def _parse_error(argv):
    """Return argparse's error output for *argv*, which must be rejected."""
    stderr = io.StringIO()
    with contextlib.redirect_stderr(stderr):
        try:
            cli.parse_args(argv)
        except SystemExit as exc:
            if exc.code != 2:
                raise
        else:
            raise AssertionError(f"argparse accepted {argv!r}")
    return stderr.getvalue()


class TestParseArgs(unittest.TestCase):

    def test_domain_only_defaults(self):
        args = cli.parse_args(["--domain", "Example.COM"])
        self.assertEqual(args.domain, "example.com")
        self.assertIsNone(args.start_page)
        self.assertIsNone(args.limit)
        self.assertIsNone(args.redis_url)
        self.assertEqual(args.matcher, "regex")

    def test_strips_protocol(self):
        self.assertEqual(cli.parse_args(["--domain", "https://Example.COM"]).domain, "example.com")

    def test_limit(self):
        self.assertEqual(cli.parse_args(["--domain", "example.com", "--limit", "5"]).limit, 5)

    def test_start_page_normalised(self):
        args = cli.parse_args(["--domain", "example.com", "--start-page", "EXAMPLE.com/Page"])
        self.assertEqual(args.start_page, "https://example.com/page")

    def test_invalid_domain(self):
        self.assertIn("Invalid domain format", _parse_error(["--domain", "invalid_domain"]))

    def test_invalid_start_page(self):
        err = _parse_error(["--domain", "example.com", "--start-page", "not a url"])
        self.assertIn("Invalid start page format", err)

    def test_invalid_limit(self):
        self.assertIn("limit", _parse_error(["--domain", "example.com", "--limit", "-5"]))

    def test_domain_required(self):
        self.assertIn("--domain", _parse_error([]))


class TestBuildQueue(unittest.TestCase):

    def test_memory_queue_by_default(self):
        queue = cli.build_queue(cli.parse_args(["--domain", "example.com"]))
        self.assertIsInstance(queue, MemoryQueue)

    def test_redis_queue_when_url_given(self):
        args = cli.parse_args([
            "--domain", "example.com",
            "--redis-url", "redis://localhost:6379/0",
            "--queue-name", "site",
        ])
        with patch("domain_crawler.queue.redis_queue.redis.Redis.from_url") as from_url:
            queue = cli.build_queue(args)
        self.assertIsInstance(queue, RedisQueue)
        self.assertEqual(queue.name, "site")
        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)


class TestRun(unittest.TestCase):

    def _run(self, argv, crawler):
        with patch.object(cli, "Crawler", return_value=crawler) as cls:
            code = cli.run(cli.parse_args(argv))
        return code, cls

    def test_successful_crawl(self):
        crawler = MagicMock()
        crawler.run.return_value = 0
        code, cls = self._run(["--domain", "example.com", "--limit", "3", "--concurrency", "4"], crawler)
        self.assertEqual(code, 0)
        config = cls.call_args.args[0]
        self.assertEqual(config.target_domain, "example.com")
        self.assertEqual(config.start_page, "https://example.com")
        self.assertEqual(config.crawl_limit, 3)
        self.assertEqual(cls.call_args.kwargs["concurrency"], 4)
        crawler.close.assert_called_once_with()

    def test_unbounded_limit_logged_as_none(self):
        crawler = MagicMock()
        crawler.run.return_value = 0
        with self.assertLogs("domain-crawler", level="INFO") as logs:
            self._run(["--domain", "example.org"], crawler)
        self.assertIn(
            "Crawling example.org, starting from https://example.org "
            "with the following limit: none.",
            "\n".join(logs.output),
        )

    def test_html_matcher(self):
        crawler = MagicMock()
        crawler.run.return_value = 0
        _, cls = self._run(["--domain", "example.com", "--matcher", "html"], crawler)
        self.assertIsInstance(cls.call_args.args[0].link_matcher, HtmlLinkMatcher)

    def test_start_failure_exit_code(self):
        crawler = MagicMock()
        try:
            raise CrawlStartError("could not reset") from QueueBusyError("2 active")
        except CrawlStartError as exc:
            crawler.run.side_effect = exc
        code, _ = self._run(["--domain", "example.com"], crawler)
        self.assertEqual(code, 1)
        crawler.close.assert_called_once_with()

    def test_interrupt_exit_code(self):
        crawler = MagicMock()
        crawler.run.side_effect = KeyboardInterrupt
        crawler.visited = frozenset({"https://example.com"})
        code, _ = self._run(["--domain", "example.com"], crawler)
        self.assertEqual(code, 130)
        crawler.close.assert_called_once_with()

    def test_main_exits_with_run_code(self):
        with patch.object(cli, "run", return_value=0), patch.object(cli, "setup_logging"):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--domain", "example.com"])
        self.assertEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
