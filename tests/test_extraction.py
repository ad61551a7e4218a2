"""
Tests for the link extraction module.
"""

import unittest

from domain_crawler.extraction.html_parser import HtmlLinkMatcher
from domain_crawler.extraction.links import RegexLinkMatcher, extract_links


DOMAIN = "example.com"

PAGE = """
<html><body>
  <a href="https://example.com/page1">Link 1</a>
  <a href="https://example.com/page2">Link 2</a>
  <a href="https://other.com/page3">Link 3</a>
</body></html>
"""


class TestExtractLinks(unittest.TestCase):

    def test_keeps_only_target_domain(self):
        urls = extract_links(PAGE, DOMAIN)
        self.assertEqual(urls, ["https://example.com/page1", "https://example.com/page2"])

    def test_no_urls(self):
        self.assertEqual(extract_links("<html><body>No links here</body></html>", DOMAIN), [])

    def test_order_of_first_appearance_and_duplicates_kept(self):
        body = (
            "https://example.com/b https://example.com/a "
            "<a href='https://example.com/b'>again</a>"
        )
        self.assertEqual(
            extract_links(body, DOMAIN),
            ["https://example.com/b", "https://example.com/a", "https://example.com/b"],
        )

    def test_case_insensitive_prefix(self):
        body = '<a href="HTTPS://EXAMPLE.COM/About">x</a>'
        self.assertEqual(extract_links(body, DOMAIN), ["HTTPS://EXAMPLE.COM/About"])

    def test_http_and_relative_links_dropped(self):
        body = (
            '<a href="http://example.com/insecure">x</a>'
            '<a href="/relative">y</a>'
            '<a href="ftp://example.com/file">z</a>'
            '<a href="www.example.com/bare">w</a>'
        )
        self.assertEqual(extract_links(body, DOMAIN), [])

    def test_urls_outside_anchors_found(self):
        body = '<script>var next = "https://example.com/api/next";</script>'
        self.assertEqual(extract_links(body, DOMAIN), ["https://example.com/api/next"])

    def test_query_string_kept(self):
        body = '<a href="https://example.com/search?q=a&page=2">x</a>'
        self.assertEqual(extract_links(body, DOMAIN), ["https://example.com/search?q=a&page=2"])

    def test_every_result_on_domain(self):
        body = PAGE + " https://evil.com/https://example.com https://example.com/ok"
        for url in extract_links(body, DOMAIN):
            self.assertTrue(url.lower().startswith("https://example.com"))

    def test_bytes_body_decoded(self):
        self.assertEqual(
            extract_links(b"see https://example.com/x", DOMAIN), ["https://example.com/x"]
        )

    def test_custom_matcher(self):
        class Fixed:
            def find_all(self, body):
                return ["https://example.com/fixed", "https://other.com/no"]

        self.assertEqual(extract_links("ignored", DOMAIN, Fixed()), ["https://example.com/fixed"])


class TestRegexLinkMatcher(unittest.TestCase):

    def test_trailing_punctuation_not_captured(self):
        urls = RegexLinkMatcher().find_all("Visit https://example.com/page.")
        self.assertEqual(urls, ["https://example.com/page"])

    def test_parenthesised_segment(self):
        urls = RegexLinkMatcher().find_all("https://example.com/wiki/A_(b)")
        self.assertEqual(urls, ["https://example.com/wiki/A_(b)"])

    def test_string_pattern(self):
        matcher = RegexLinkMatcher(r"https://example\.com/\d+")
        self.assertEqual(
            matcher.find_all("https://example.com/12 https://example.com/abc"),
            ["https://example.com/12"],
        )


class TestHtmlLinkMatcher(unittest.TestCase):

    def test_attribute_links_in_document_order(self):
        html = """
        <html><head><link rel="canonical" href="https://example.com/"></head>
        <body>
          <a href="https://example.com/one">1</a>
          <a href="/relative">r</a>
          <a href="mailto:someone@example.com">m</a>
          <iframe src="https://example.com/frame"></iframe>
          <p>https://example.com/text-only</p>
        </body></html>
        """
        urls = HtmlLinkMatcher().find_all(html)
        self.assertEqual(
            urls,
            ["https://example.com/", "https://example.com/one", "https://example.com/frame"],
        )

    def test_with_domain_filter(self):
        urls = extract_links(PAGE, DOMAIN, HtmlLinkMatcher())
        self.assertEqual(urls, ["https://example.com/page1", "https://example.com/page2"])


if __name__ == "__main__":
    unittest.main()
