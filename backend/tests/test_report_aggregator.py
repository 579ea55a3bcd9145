"""
Report Aggregator Tests

Covers bucket partitioning, the 12-month consent expiry timeline and
the per-source quality rollup.
"""

import pytest
from datetime import date

from app.errors import InputError
from app.models.ssot import (
    Bucket, ConsentAuditConfig, ConsentAuditResult, ContactRecord, SourceRating,
)
from app.services.consent import audit_consent
from app.services.reporting import (
    aggregate, consent_expiry, expiry_timeline, rating_for, round_half_up, source_quality,
)


EVALUATION_DATE = date(2026, 1, 15)


def result_for(score, source=None, consent_date=None, email="x@example.com"):
    return ConsentAuditResult(
        contact=ContactRecord(email=email, source=source),
        score=score,
        category="test",
        consent_date=consent_date,
    )


@pytest.fixture
def config():
    return ConsentAuditConfig(evaluation_date=EVALUATION_DATE)


@pytest.fixture
def timeline_contacts():
    return [
        # 75 probably, lapses Mar 2026
        ContactRecord("a@example.com", "2024-03-10", "Web form", None),
        # 70 probably, lapses on the evaluation date itself
        ContactRecord("b@example.com", "2024-01-15", "Web form", "Website"),
        # 55 risky, already lapsed
        ContactRecord("c@example.com", "2024-01-01", "Web form", None),
        # 60 risky, lapses after the window
        ContactRecord("d@example.com", "2025-06-01", None, None),
        # 90 safe, never counted
        ContactRecord("e@example.com", "2024-05-01", "Web form", "Website"),
        # 65 risky, lapses Dec 2026
        ContactRecord("f@example.com", "2024-12-20", None, "Website"),
    ]


# =============================================================================
# TEST: Bucket partition
# =============================================================================

class TestBuckets:

    def test_buckets_partition_results(self, config, timeline_contacts):
        report = audit_consent(timeline_contacts, config)
        assert report.total == len(timeline_contacts)
        assert sum(report.counts.values()) == report.total
        assert report.counts == {"safe": 1, "probably": 2, "risky": 3, "danger": 0}

    def test_buckets_keep_input_order(self):
        results = [result_for(50, email="1@x.com"), result_for(95), result_for(45, email="2@x.com")]
        report = aggregate(results, EVALUATION_DATE)
        assert [r.contact.email for r in report.risky] == ["1@x.com", "2@x.com"]

    def test_empty_batch(self, config):
        report = audit_consent([], config)
        assert report.total == 0
        assert report.counts == {"safe": 0, "probably": 0, "risky": 0, "danger": 0}
        assert report.expiry_timeline.data == (0,) * 12
        assert report.source_quality == ()

    @pytest.mark.parametrize("contacts", [None, "a@b.com", {"email": "a@b.com"}])
    def test_non_list_contacts_rejected(self, config, contacts):
        with pytest.raises(InputError):
            audit_consent(contacts, config)


# =============================================================================
# TEST: Expiry timeline
# =============================================================================

class TestExpiryTimeline:

    def test_labels_start_at_evaluation_month(self):
        timeline = expiry_timeline([], EVALUATION_DATE)
        assert timeline.labels[0] == "Jan 2026"
        assert timeline.labels[-1] == "Dec 2026"
        assert len(timeline.labels) == len(timeline.data) == 12

    def test_labels_cross_year_boundary(self):
        timeline = expiry_timeline([], date(2026, 10, 18))
        assert timeline.labels[:4] == ("Oct 2026", "Nov 2026", "Dec 2026", "Jan 2027")

    def test_counts_only_upcoming_risky_and_probably(self, config, timeline_contacts):
        report = audit_consent(timeline_contacts, config)
        data = report.expiry_timeline.data
        assert data[0] == 1   # Jan 2026, lapses today
        assert data[2] == 1   # Mar 2026
        assert data[11] == 1  # Dec 2026
        assert sum(data) == 3

    def test_timeline_never_exceeds_eligible_contacts(self, config, timeline_contacts):
        report = audit_consent(timeline_contacts, config)
        assert sum(report.expiry_timeline.data) <= len(report.risky) + len(report.probably)

    def test_danger_contacts_never_counted(self):
        results = [result_for(10, consent_date=date(2024, 6, 1))]
        assert sum(expiry_timeline(results, EVALUATION_DATE).data) == 0

    def test_consent_expiry_handles_leap_day(self):
        assert consent_expiry(date(2024, 2, 29)) == date(2026, 2, 28)


# =============================================================================
# TEST: Source quality
# =============================================================================

class TestSourceQuality:

    def test_rollup_sorted_by_average(self):
        results = [
            result_for(40, source="Event"),
            result_for(100, source="Website"),
            result_for(75),
            result_for(10, source="Referral"),
            result_for(90, source="Website"),
            result_for(76, source=""),
            result_for(60, source="Event"),
        ]
        rollup = source_quality(results)
        assert [(q.source, q.total, q.avg_score, q.rating) for q in rollup] == [
            ("Website", 2, 95, SourceRating.EXCELLENT),
            ("Unknown", 2, 76, SourceRating.GOOD),
            ("Event", 2, 50, SourceRating.POOR),
            ("Referral", 1, 10, SourceRating.CRITICAL),
        ]

    def test_totals_match_contacts(self):
        results = [result_for(50, source=s) for s in ("A", "B", "A", None)]
        assert sum(q.total for q in source_quality(results)) == len(results)

    def test_ties_keep_first_seen_order(self):
        results = [result_for(80, source="B"), result_for(80, source="A")]
        assert [q.source for q in source_quality(results)] == ["B", "A"]

    def test_round_half_up(self):
        assert round_half_up(75.5) == 76
        assert round_half_up(84.5) == 85
        assert round_half_up(84.4) == 84

    @pytest.mark.parametrize("avg,rating", [
        (85, SourceRating.EXCELLENT), (84, SourceRating.GOOD), (70, SourceRating.GOOD),
        (69, SourceRating.POOR), (50, SourceRating.POOR), (49, SourceRating.CRITICAL),
    ])
    def test_rating_thresholds(self, avg, rating):
        assert rating_for(avg) == rating

    def test_buckets_in_report(self):
        report = aggregate([result_for(95), result_for(5)], EVALUATION_DATE)
        assert report.safe[0].bucket == Bucket.SAFE
        assert report.danger[0].bucket == Bucket.DANGER
