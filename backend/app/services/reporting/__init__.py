"""Sendwize Compliance Engine - Report Aggregator"""
from .aggregator import (
    aggregate,
    bucket_results,
    bucket_counts,
    consent_expiry,
    expiry_timeline,
    source_quality,
    rating_for,
    round_half_up,
)

__all__ = [
    "aggregate",
    "bucket_results",
    "bucket_counts",
    "consent_expiry",
    "expiry_timeline",
    "source_quality",
    "rating_for",
    "round_half_up",
]
