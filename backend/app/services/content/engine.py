"""
Sendwize Compliance Engine - Content Rule Auditor

Runs every content rule against one EmailDocument.
Output is ContentAuditResult - downstream modules CANNOT re-score.
"""
from __future__ import annotations
import logging
from typing import List, Sequence

from ...models.ssot import CheckEntry, ContentAuditResult, EmailDocument
from .rules import CONTENT_RULES, ContentRule, EmailSnapshot

logger = logging.getLogger(__name__)

BASE_SCORE = 100


class ContentRuleAuditor:
    """
    Scores an email's subject and HTML for deliverability and compliance risk.

    Never raises on arbitrary markup: a missing pattern is a finding, not
    an error.
    """

    def __init__(self, rules: Sequence[ContentRule] = CONTENT_RULES):
        self.rules = tuple(rules)

    def evaluate(self, document: EmailDocument) -> ContentAuditResult:
        snapshot = EmailSnapshot.build(document)

        checks: List[CheckEntry] = []
        score = BASE_SCORE
        for rule in self.rules:
            finding = rule.check(snapshot)
            if finding is None:
                continue
            checks.append(finding.entry)
            score -= finding.penalty
            if finding.penalty:
                logger.debug(f"Content rule {rule.name} fired: -{finding.penalty}")

        result = ContentAuditResult(score=max(0, min(BASE_SCORE, score)), checks=tuple(checks))
        summary = result.summary
        logger.info(
            f"Content scan complete: score {result.score}, "
            f"{summary['passed']} passed, {summary['warnings']} warnings, "
            f"{summary['failed']} failed"
        )
        return result


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def audit_content(document: EmailDocument) -> ContentAuditResult:
    return ContentRuleAuditor().evaluate(document)
