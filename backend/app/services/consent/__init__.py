"""Sendwize Compliance Engine - Consent Record Auditor

Scores each contact's marketing consent against PECR and outputs
ConsentAuditResult, folded into an AggregateReport per batch.
"""
from .engine import ConsentRecordAuditor, audit_consent, clamp, resolve_category
from .rules import (
    HardRules,
    ScoringRules,
    ContactFacts,
    ScoreEffect,
    ScoreOp,
    DateState,
    parse_consent_date,
    CONSUMER_DOMAINS,
)

__all__ = [
    "ConsentRecordAuditor",
    "audit_consent",
    "clamp",
    "resolve_category",
    "HardRules",
    "ScoringRules",
    "ContactFacts",
    "ScoreEffect",
    "ScoreOp",
    "DateState",
    "parse_consent_date",
    "CONSUMER_DOMAINS",
]
