"""
Sendwize Compliance Engine - Consent Record Auditor

Runs the consent rules against each ContactRecord.
Output is ConsentAuditResult - downstream modules CANNOT re-score.
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from ...models.ssot import (
    ContactRecord, ConsentAuditConfig, ConsentAuditResult, AggregateReport,
)
from ...errors import require_list
from ..reporting import aggregate
from .rules import (
    ContactFacts, HARD_RULE_ORDER, SCORING_RULE_ORDER, EXPRESS_CONSENT,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


def clamp(value: int, lo: int = MIN_SCORE, hi: int = MAX_SCORE) -> int:
    return max(lo, min(hi, value))


def resolve_category(candidates: Iterable[str], reasons: Sequence[str]) -> str:
    """First category candidate wins; otherwise describe the reasons."""
    for candidate in candidates:
        if candidate:
            return candidate
    if reasons:
        return ", ".join(reasons)
    return EXPRESS_CONSENT


class ConsentRecordAuditor:
    """
    Scores one contact's marketing-consent validity.

    Hard rules short-circuit with score 0. Scoring rules are applied in
    order; categories they propose are resolved once at the end.
    """

    def __init__(self, hard_rules=HARD_RULE_ORDER, scoring_rules=SCORING_RULE_ORDER):
        self.hard_rules = tuple(hard_rules)
        self.scoring_rules = tuple(scoring_rules)

    def evaluate(self, contact: ContactRecord, config: ConsentAuditConfig) -> ConsentAuditResult:
        facts = ContactFacts.build(contact, config)

        for rule in self.hard_rules:
            category = rule(facts)
            if category:
                logger.debug(f"{facts.email}: hard rule {rule.__name__} fired")
                return ConsentAuditResult(
                    contact=contact,
                    score=MIN_SCORE,
                    category=category,
                    consent_date=facts.consent_date,
                )

        score = MAX_SCORE
        reasons: List[str] = []
        categories: List[str] = []
        for rule in self.scoring_rules:
            effect = rule(facts)
            if effect is None:
                continue
            score = effect.apply(score)
            if effect.reason:
                reasons.append(effect.reason)
            if effect.category:
                categories.append(effect.category)

        return ConsentAuditResult(
            contact=contact,
            score=clamp(score),
            category=resolve_category(categories, reasons),
            reasons=tuple(reasons),
            consent_date=facts.consent_date,
        )

    def evaluate_all(
        self, contacts: Sequence[ContactRecord], config: ConsentAuditConfig
    ) -> List[ConsentAuditResult]:
        return [self.evaluate(contact, config) for contact in contacts]


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def audit_consent(
    contacts: Sequence[ContactRecord],
    config: ConsentAuditConfig,
    auditor: Optional[ConsentRecordAuditor] = None,
) -> AggregateReport:
    """
    Audit a batch of contacts and fold the results into an AggregateReport.

    Raises:
        InputError: if contacts is not a list
    """
    require_list(contacts, "contacts")
    auditor = auditor or ConsentRecordAuditor()

    logger.info(
        f"Starting consent audit of {len(contacts)} contacts "
        f"(customers={config.customer_type.value}, products={config.product_type.value}, "
        f"emails={config.email_type.value}, as of {config.evaluation_date.isoformat()})"
    )
    results = auditor.evaluate_all(contacts, config)
    report = aggregate(results, config.evaluation_date)

    counts = report.counts
    logger.info(
        f"Consent audit complete: {report.total} contacts, "
        f"{counts['safe']} safe, {counts['probably']} probably, "
        f"{counts['risky']} risky, {counts['danger']} danger"
    )
    return report
