"""
Sendwize Compliance Engine - Consent Rules

Deterministic rule-based consent classification.
NO LLMs used here - pure logic only.

Rule Categories:
1. Hard Rules - PECR violations that zero the score and stop evaluation
2. Scoring Rules - age decay, soft opt-in, B2B and documentation gaps,
   applied in a fixed order to a starting score of 100
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple, Union

from dateutil import parser as date_parser

from ...models.ssot import (
    ContactRecord, ConsentAuditConfig, CustomerType, ProductType, EmailType,
)

logger = logging.getLogger(__name__)


CONSUMER_DOMAINS = frozenset({
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "icloud.com",
    "aol.com", "live.com", "me.com", "googlemail.com",
})

INVALID_METHOD_MARKERS = ("pre-ticked", "preticked", "pre-tick", "assumed", "implied")
PURCHASED_SOURCE_MARKERS = ("purchased", "bought", "third party", "third-party", "broker")

DAYS_PER_YEAR = 365

# Category labels
NO_CONSENT_DATE = "No consent date – CRITICAL"
INVALID_DATE = "Invalid date – CRITICAL"
INVALID_METHOD = "Pre-ticked/Invalid method – PECR violation"
PURCHASED_LIST = "Purchased list – No valid consent"
SOFT_OPT_IN_SIMILAR = "Soft opt-in (similar products)"
SOFT_OPT_IN_DIFFERENT = "Soft opt-in INVALID (different products) – Need express consent"
SOFT_OPT_IN_MIXED = "Soft opt-in (verify product similarity)"
B2B_CORPORATE = "B2B corporate email"
EXPRESS_CONSENT = "Express consent"


class DateState(str, Enum):
    MISSING = "missing"
    INVALID = "invalid"
    VALID = "valid"


def parse_consent_date(
    value: Optional[Union[str, date, datetime]],
    evaluation_date: date,
) -> Tuple[DateState, Optional[date]]:
    """
    Parse a consent date supplied as ISO-8601 text or a date object.

    Missing fields in partial strings ("March 2023") are filled from the
    first of January of the evaluation year, never from the wall clock.
    """
    if value is None:
        return DateState.MISSING, None
    if isinstance(value, datetime):
        return DateState.VALID, value.date()
    if isinstance(value, date):
        return DateState.VALID, value
    if not isinstance(value, str):
        return DateState.INVALID, None
    if not value.strip():
        return DateState.MISSING, None

    default = datetime(evaluation_date.year, 1, 1)
    try:
        parsed = date_parser.parse(value.strip(), default=default)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparsable consent date {value!r}: {e}")
        return DateState.INVALID, None
    return DateState.VALID, parsed.date()


# =============================================================================
# CONTACT FACTS
# =============================================================================

@dataclass(frozen=True)
class ContactFacts:
    """Everything the rules need, derived once from a contact and its config."""
    contact: ContactRecord
    config: ConsentAuditConfig
    email: str
    local_part: str
    domain: str
    method: str
    source: str
    date_state: DateState
    consent_date: Optional[date]

    @classmethod
    def build(cls, contact: ContactRecord, config: ConsentAuditConfig) -> "ContactFacts":
        email = (contact.email or "").strip().lower()
        local_part, _, domain = email.partition("@")
        date_state, consent_date = parse_consent_date(contact.consent_date, config.evaluation_date)
        return cls(
            contact=contact,
            config=config,
            email=email,
            local_part=local_part,
            domain=domain,
            method=(contact.consent_method or "").lower(),
            source=(contact.source or "").lower(),
            date_state=date_state,
            consent_date=consent_date,
        )

    @property
    def age_years(self) -> float:
        if self.consent_date is None:
            return 0.0
        return (self.config.evaluation_date - self.consent_date).days / DAYS_PER_YEAR

    @property
    def is_consumer_domain(self) -> bool:
        return self.domain in CONSUMER_DOMAINS

    @property
    def is_customer(self) -> bool:
        customer_type = self.config.customer_type
        return customer_type == CustomerType.ALL or (
            customer_type == CustomerType.SOME and "purchase" in self.source
        )

    @property
    def is_b2b(self) -> bool:
        email_type = self.config.email_type
        return email_type == EmailType.B2B or (
            email_type == EmailType.MIXED and not self.is_consumer_domain
        )

    @property
    def looks_personal(self) -> bool:
        # Heuristic only: "john.smith@company.com" style addresses
        return "." in self.local_part and not self.is_consumer_domain


# =============================================================================
# HARD RULES
# =============================================================================

class HardRules:
    """
    Rules that invalidate consent outright.
    Each returns the category label when it fires, else None.
    """

    @staticmethod
    def check_missing_consent_date(facts: ContactFacts) -> Optional[str]:
        if facts.date_state == DateState.MISSING:
            return NO_CONSENT_DATE
        return None

    @staticmethod
    def check_invalid_consent_date(facts: ContactFacts) -> Optional[str]:
        if facts.date_state == DateState.INVALID:
            return INVALID_DATE
        return None

    @staticmethod
    def check_invalid_method(facts: ContactFacts) -> Optional[str]:
        """Pre-ticked boxes and assumed consent are not consent under PECR Reg 22(2)."""
        if any(marker in facts.method for marker in INVALID_METHOD_MARKERS):
            return INVALID_METHOD
        return None

    @staticmethod
    def check_purchased_source(facts: ContactFacts) -> Optional[str]:
        """Consent given to a list seller does not transfer to the buyer."""
        if any(marker in facts.source for marker in PURCHASED_SOURCE_MARKERS):
            return PURCHASED_LIST
        return None


# =============================================================================
# SCORING RULES
# =============================================================================

class ScoreOp(str, Enum):
    SUBTRACT = "subtract"
    FLOOR = "floor"  # raise score to at least value
    SET = "set"


@dataclass(frozen=True)
class ScoreEffect:
    """What one fired scoring rule does to the running score."""
    op: ScoreOp
    value: int
    reason: Optional[str] = None
    category: Optional[str] = None

    def apply(self, score: int) -> int:
        if self.op == ScoreOp.SUBTRACT:
            return score - self.value
        if self.op == ScoreOp.FLOOR:
            return max(score, self.value)
        return self.value


class ScoringRules:
    """
    Rules applied after the hard rules pass.
    Each returns a ScoreEffect when it fires, else None.
    """

    @staticmethod
    def check_consent_age(facts: ContactFacts) -> Optional[ScoreEffect]:
        """ICO guidance treats consent as decaying; older brackets take precedence."""
        age = facts.age_years
        if age > 3:
            return ScoreEffect(ScoreOp.SUBTRACT, 50, reason="3+ years old")
        if age > 2:
            return ScoreEffect(ScoreOp.SUBTRACT, 30, reason="2-3 years old")
        if age > 1:
            return ScoreEffect(ScoreOp.SUBTRACT, 10, reason="1-2 years old")
        return None

    @staticmethod
    def check_soft_opt_in(facts: ContactFacts) -> Optional[ScoreEffect]:
        """
        PECR Reg 22(3) soft opt-in.

        Existing customers may be marketed similar products without fresh
        consent. Different products need express consent.
        """
        if not facts.is_customer:
            return None

        product_type = facts.config.product_type
        if product_type == ProductType.SIMILAR:
            return ScoreEffect(ScoreOp.FLOOR, 85, category=SOFT_OPT_IN_SIMILAR)
        if product_type == ProductType.DIFFERENT:
            return ScoreEffect(
                ScoreOp.SET, 30,
                reason="Marketing different products",
                category=SOFT_OPT_IN_DIFFERENT,
            )
        return ScoreEffect(
            ScoreOp.SUBTRACT, 20,
            reason="Unclear if products similar",
            category=SOFT_OPT_IN_MIXED,
        )

    @staticmethod
    def check_b2b_address(facts: ContactFacts) -> Optional[ScoreEffect]:
        """Corporate subscribers fall outside PECR Reg 22 unless the address is personal."""
        if not facts.is_b2b:
            return None
        if facts.looks_personal:
            return ScoreEffect(
                ScoreOp.SUBTRACT, 15, reason="Looks like personal email at work domain"
            )
        return ScoreEffect(ScoreOp.FLOOR, 75, category=B2B_CORPORATE)

    @staticmethod
    def check_missing_method(facts: ContactFacts) -> Optional[ScoreEffect]:
        method = facts.contact.consent_method
        if method is None or not method.strip() or facts.method == "n/a":
            return ScoreEffect(ScoreOp.SUBTRACT, 25, reason="No consent method documented")
        return None

    @staticmethod
    def check_missing_source(facts: ContactFacts) -> Optional[ScoreEffect]:
        source = facts.contact.source
        if source is None or not source.strip():
            return ScoreEffect(ScoreOp.SUBTRACT, 15, reason="Source not documented")
        return None


HARD_RULE_ORDER = (
    HardRules.check_missing_consent_date,
    HardRules.check_invalid_consent_date,
    HardRules.check_invalid_method,
    HardRules.check_purchased_source,
)

SCORING_RULE_ORDER = (
    ScoringRules.check_consent_age,
    ScoringRules.check_soft_opt_in,
    ScoringRules.check_b2b_address,
    ScoringRules.check_missing_method,
    ScoringRules.check_missing_source,
)
