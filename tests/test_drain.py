"""
Tests for the drain monitor.
"""

import threading
import unittest
from unittest.mock import MagicMock

from domain_crawler.core.drain import DrainMonitor, is_finished
from domain_crawler.queue.base import JobCounts


class TestIsFinished(unittest.TestCase):

    def test_zero_outstanding(self):
        self.assertTrue(is_finished(JobCounts(completed=10, failed=2)))

    def test_any_outstanding_state(self):
        for counts in (JobCounts(active=1), JobCounts(waiting=1), JobCounts(delayed=1)):
            with self.subTest(counts=counts):
                self.assertFalse(is_finished(counts))


class TestDrainMonitor(unittest.TestCase):

    def test_finishes_when_nothing_outstanding(self):
        sleep = MagicMock()
        on_finished = MagicMock()
        monitor = DrainMonitor(lambda: JobCounts(), on_finished, settle_interval=10, sleep=sleep)
        self.assertTrue(monitor.trigger())
        sleep.assert_called_once_with(10)
        on_finished.assert_called_once_with()
        self.assertTrue(monitor.finished)

    def test_busy_queue_is_a_no_op(self):
        on_finished = MagicMock()
        monitor = DrainMonitor(lambda: JobCounts(active=1), on_finished,
                               settle_interval=0, sleep=lambda s: None)
        self.assertFalse(monitor.trigger())
        on_finished.assert_not_called()
        self.assertFalse(monitor.finished)
        self.assertFalse(monitor.in_flight)

    def test_settles_before_counting(self):
        events = []
        monitor = DrainMonitor(
            lambda: events.append("count") or JobCounts(),
            lambda: events.append("finish"),
            settle_interval=3,
            sleep=lambda s: events.append(("sleep", s)),
        )
        monitor.trigger()
        self.assertEqual(events, [("sleep", 3), "count", "finish"])

    def test_finishes_only_once(self):
        on_finished = MagicMock()
        monitor = DrainMonitor(lambda: JobCounts(), on_finished, settle_interval=0,
                               sleep=lambda s: None)
        monitor.trigger()
        self.assertTrue(monitor.trigger())
        on_finished.assert_called_once_with()

    def test_later_trigger_can_finish(self):
        counts = iter([JobCounts(waiting=3), JobCounts()])
        on_finished = MagicMock()
        monitor = DrainMonitor(lambda: next(counts), on_finished, settle_interval=0,
                               sleep=lambda s: None)
        self.assertFalse(monitor.trigger())
        self.assertTrue(monitor.trigger())
        on_finished.assert_called_once_with()

    def test_overlapping_trigger_is_replayed_once(self):
        entered = threading.Event()
        release = threading.Event()
        sleeps = []

        def sleep(seconds):
            sleeps.append(seconds)
            if len(sleeps) == 1:
                entered.set()
                release.wait(5)

        counts = iter([JobCounts(active=1), JobCounts()])
        on_finished = MagicMock()
        monitor = DrainMonitor(lambda: next(counts), on_finished, settle_interval=1, sleep=sleep)

        result = {}
        first = threading.Thread(target=lambda: result.setdefault("first", monitor.trigger()))
        first.start()
        self.assertTrue(entered.wait(5))
        self.assertTrue(monitor.in_flight)

        # Two overlapping triggers fill the same single slot.
        self.assertFalse(monitor.trigger())
        self.assertFalse(monitor.trigger())

        release.set()
        first.join(5)
        self.assertTrue(result["first"])
        self.assertEqual(len(sleeps), 2)
        on_finished.assert_called_once_with()

    def test_exception_releases_monitor(self):
        def broken_counts():
            raise RuntimeError("redis down")

        monitor = DrainMonitor(broken_counts, MagicMock(), settle_interval=0, sleep=lambda s: None)
        with self.assertRaises(RuntimeError):
            monitor.trigger()
        self.assertFalse(monitor.in_flight)


if __name__ == "__main__":
    unittest.main()
