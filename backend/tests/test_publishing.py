"""
Result Publisher Tests

Sinks stand in for the audit history store and advisory generators.
"""

import logging
from datetime import date

import pytest

from app.services.publishing import PublishedResult, ResultPublisher


@pytest.fixture
def received():
    return []


@pytest.fixture
def publisher(received):
    return ResultPublisher([received.append])


class TestResultPublisher:

    def test_delivers_to_sinks(self, publisher, received):
        delivered = publisher.publish("content_scan", {"score": 90}, user_id="u1", check_date=date(2026, 1, 15))
        assert delivered == 1
        assert received == [PublishedResult("content_scan", {"score": 90}, "u1", date(2026, 1, 15))]

    def test_anonymous_results_not_published(self, publisher, received):
        assert publisher.publish("content_scan", {"score": 90}) == 0
        assert received == []

    def test_failing_sink_is_isolated(self, publisher, received, caplog):
        def broken_sink(event):
            raise RuntimeError("history store unavailable")

        publisher.add_sink(broken_sink)
        publisher.add_sink(received.append)

        with caplog.at_level(logging.ERROR):
            delivered = publisher.publish("list_hygiene", {"cleanListCount": 3}, user_id="u1")

        assert delivered == 2
        assert len(received) == 2
        assert "broken_sink" in caplog.text

    def test_no_sinks(self):
        assert ResultPublisher().publish("vendor_check", {}, user_id="u1") == 0
