"""
Sendwize Compliance Engine - Report Aggregator

Folds per-contact ConsentAuditResults into summary statistics:
bucket counts, a 12-month consent expiry projection and a per-source
quality rollup.
"""
from __future__ import annotations
import logging
import math
from collections import OrderedDict
from datetime import date
from typing import Dict, List, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from ...models.ssot import (
    AggregateReport, Bucket, ConsentAuditResult, ExpiryTimeline, SourceQuality,
    SourceRating,
)

logger = logging.getLogger(__name__)

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

TIMELINE_MONTHS = 12
CONSENT_LIFETIME = relativedelta(years=2)
UNKNOWN_SOURCE = "Unknown"

# Only contacts that are neither clearly fine nor already lost need re-consenting
TIMELINE_BUCKETS = (Bucket.RISKY, Bucket.PROBABLY)

SOURCE_RATING_THRESHOLDS: List[Tuple[int, SourceRating]] = [
    (85, SourceRating.EXCELLENT),
    (70, SourceRating.GOOD),
    (50, SourceRating.POOR),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rating_for(avg_score: int) -> SourceRating:
    for threshold, rating in SOURCE_RATING_THRESHOLDS:
        if avg_score >= threshold:
            return rating
    return SourceRating.CRITICAL


def bucket_results(
    results: Sequence[ConsentAuditResult],
) -> Dict[Bucket, List[ConsentAuditResult]]:
    """Split results by bucket, preserving input order within each bucket."""
    buckets: Dict[Bucket, List[ConsentAuditResult]] = {bucket: [] for bucket in Bucket}
    for result in results:
        buckets[result.bucket].append(result)
    return buckets


def bucket_counts(results: Sequence[ConsentAuditResult]) -> Dict[str, int]:
    return {bucket.value: len(items) for bucket, items in bucket_results(results).items()}


def consent_expiry(consent_date: date) -> date:
    """Consent is treated as stale two years after it was given."""
    return consent_date + CONSENT_LIFETIME


def expiry_timeline(
    results: Sequence[ConsentAuditResult], evaluation_date: date
) -> ExpiryTimeline:
    """
    Count risky and probably contacts whose consent lapses in each of the
    next 12 months, starting with the evaluation month.

    Consent that has already lapsed, or lapses beyond the window, is not
    counted.
    """
    month_start = evaluation_date.replace(day=1)
    months: "OrderedDict[Tuple[int, int], int]" = OrderedDict()
    for offset in range(TIMELINE_MONTHS):
        month = month_start + relativedelta(months=offset)
        months[(month.year, month.month)] = 0

    for result in results:
        if result.bucket not in TIMELINE_BUCKETS or result.consent_date is None:
            continue
        expiry = consent_expiry(result.consent_date)
        if expiry < evaluation_date:
            continue
        key = (expiry.year, expiry.month)
        if key in months:
            months[key] += 1

    labels = tuple(f"{MONTH_LABELS[month - 1]} {year}" for year, month in months)
    return ExpiryTimeline(labels=labels, data=tuple(months.values()))


def source_quality(results: Sequence[ConsentAuditResult]) -> List[SourceQuality]:
    """
    Average score per contact source, best sources first.

    Contacts without a source are grouped under "Unknown". Ties keep the
    order in which sources were first seen.
    """
    scores_by_source: "OrderedDict[str, List[int]]" = OrderedDict()
    for result in results:
        source = result.contact.source or UNKNOWN_SOURCE
        scores_by_source.setdefault(source, []).append(result.score)

    rollup = []
    for source, scores in scores_by_source.items():
        avg_score = round_half_up(sum(scores) / len(scores))
        rollup.append(SourceQuality(
            source=source,
            total=len(scores),
            avg_score=avg_score,
            rating=rating_for(avg_score),
        ))
    rollup.sort(key=lambda item: item.avg_score, reverse=True)
    return rollup


def aggregate(
    results: Sequence[ConsentAuditResult], evaluation_date: date
) -> AggregateReport:
    buckets = bucket_results(results)
    report = AggregateReport(
        total=len(results),
        safe=tuple(buckets[Bucket.SAFE]),
        probably=tuple(buckets[Bucket.PROBABLY]),
        risky=tuple(buckets[Bucket.RISKY]),
        danger=tuple(buckets[Bucket.DANGER]),
        expiry_timeline=expiry_timeline(results, evaluation_date),
        source_quality=tuple(source_quality(results)),
    )
    logger.debug(
        f"Aggregated {report.total} results into {len(report.source_quality)} sources, "
        f"{sum(report.expiry_timeline.data)} expiring in the next {TIMELINE_MONTHS} months"
    )
    return report
