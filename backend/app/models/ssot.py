"""
Sendwize Compliance Engine - Single Source of Truth Models

These models are the ONLY data structures passed between the audit engines
and the service boundary. Every model is immutable once built; an audit call
wraps its input records instead of modifying them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from ..errors import InputError


# =============================================================================
# ENUMS
# =============================================================================

class CustomerType(str, Enum):
    """How many contacts on the list are existing customers."""
    ALL = "all"
    SOME = "some"
    NONE = "none"


class ProductType(str, Enum):
    """Whether marketed products are similar to what the customer bought."""
    SIMILAR = "similar"
    DIFFERENT = "different"
    MIXED = "mixed"


class EmailType(str, Enum):
    B2B = "b2b"
    B2C = "b2c"
    MIXED = "mixed"


class Bucket(str, Enum):
    """Consent risk buckets, highest score first."""
    SAFE = "safe"
    PROBABLY = "probably"
    RISKY = "risky"
    DANGER = "danger"


class SourceRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    POOR = "Poor"
    CRITICAL = "Critical"


class CheckStatus(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"
    INFO = "info"  # vendor details only


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# =============================================================================
# SSOT #1: CONSENT AUDIT
# =============================================================================

@dataclass(frozen=True)
class ContactRecord:
    """One marketing contact as supplied by the caller."""
    email: str
    consent_date: Optional[Union[str, date, datetime]] = None
    consent_method: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class ConsentAuditConfig:
    """
    List-level answers that drive the soft opt-in and B2B rules.

    evaluation_date is the audit's notion of "today" and must be supplied by
    the caller. The list answers also accept their plain string values
    ("all", "similar", "b2b").
    """
    evaluation_date: date
    customer_type: CustomerType = CustomerType.NONE
    product_type: ProductType = ProductType.MIXED
    email_type: EmailType = EmailType.B2C

    def __post_init__(self):
        for name, enum_type in (
            ("customer_type", CustomerType),
            ("product_type", ProductType),
            ("email_type", EmailType),
        ):
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, enum_type(value))
            except ValueError:
                allowed = [e.value for e in enum_type]
                raise InputError(f"{name} must be one of {allowed}, got {value!r}")
        if not isinstance(self.evaluation_date, date):
            raise InputError(
                f"evaluation_date must be a date, got {type(self.evaluation_date).__name__}"
            )


@dataclass(frozen=True)
class ConsentAuditResult:
    """Per-contact outcome. bucket is derived from score, never set directly."""
    contact: ContactRecord
    score: int
    category: str
    reasons: Tuple[str, ...] = ()
    consent_date: Optional[date] = None  # parsed, None when missing/invalid

    @property
    def bucket(self) -> Bucket:
        return bucket_for(self.score)


@dataclass(frozen=True)
class ExpiryTimeline:
    labels: Tuple[str, ...] = ()
    data: Tuple[int, ...] = ()


@dataclass(frozen=True)
class SourceQuality:
    source: str
    total: int
    avg_score: int
    rating: SourceRating


@dataclass(frozen=True)
class AggregateReport:
    """Folded view over a batch of ConsentAuditResults."""
    total: int
    safe: Tuple[ConsentAuditResult, ...] = ()
    probably: Tuple[ConsentAuditResult, ...] = ()
    risky: Tuple[ConsentAuditResult, ...] = ()
    danger: Tuple[ConsentAuditResult, ...] = ()
    expiry_timeline: ExpiryTimeline = field(default_factory=ExpiryTimeline)
    source_quality: Tuple[SourceQuality, ...] = ()

    @property
    def counts(self) -> Dict[str, int]:
        return {
            Bucket.SAFE.value: len(self.safe),
            Bucket.PROBABLY.value: len(self.probably),
            Bucket.RISKY.value: len(self.risky),
            Bucket.DANGER.value: len(self.danger),
        }


# =============================================================================
# SSOT #2: LIST HYGIENE
# =============================================================================

@dataclass(frozen=True)
class HygieneWarning:
    severity: Severity
    message: str


@dataclass(frozen=True)
class SuppressionCheckResult:
    send_list_count: int
    suppression_list_count: int
    matches: Tuple[str, ...] = ()
    duplicates: Tuple[str, ...] = ()
    invalid_emails: Tuple[str, ...] = ()
    role_emails: Tuple[str, ...] = ()
    clean_list: Tuple[str, ...] = ()
    warnings: Tuple[HygieneWarning, ...] = ()
    recommendation: str = ""
    duplicate_preview: Tuple[str, ...] = ()
    invalid_preview: Tuple[str, ...] = ()
    role_preview: Tuple[str, ...] = ()

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid_emails)

    @property
    def role_email_count(self) -> int:
        return len(self.role_emails)

    @property
    def clean_list_count(self) -> int:
        return len(self.clean_list)

    @property
    def removed_count(self) -> int:
        return self.send_list_count - len(self.clean_list)

    @property
    def is_clean(self) -> bool:
        return not (self.matches or self.duplicates or self.invalid_emails)


# =============================================================================
# SSOT #3: CONTENT AUDIT
# =============================================================================

@dataclass(frozen=True)
class EmailDocument:
    subject: str
    html: str


@dataclass(frozen=True)
class CheckEntry:
    status: CheckStatus
    title: str
    description: str


@dataclass(frozen=True)
class ContentAuditResult:
    score: int
    checks: Tuple[CheckEntry, ...] = ()

    def count(self, status: CheckStatus) -> int:
        return sum(1 for c in self.checks if c.status == status)

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "passed": self.count(CheckStatus.PASS),
            "warnings": self.count(CheckStatus.WARNING),
            "failed": self.count(CheckStatus.FAIL),
        }


# =============================================================================
# SSOT #4: VENDOR PROFILES
# =============================================================================

DEFAULT_VENDOR_SCORE = 75


@dataclass(frozen=True)
class VendorProfile:
    """Stored facts about a known marketing vendor."""
    name: str
    category: Optional[str] = None
    score: Optional[int] = None
    dpa_link: Optional[str] = None
    data_location: Optional[str] = None
    certifications: Optional[str] = None
    recent_breaches: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class VendorDetail:
    status: CheckStatus
    label: str
    description: str


@dataclass(frozen=True)
class VendorAssessment:
    name: str
    category: Optional[str]
    score: int
    details: Tuple[VendorDetail, ...] = ()
    action_items: Tuple[str, ...] = ()
    dpa_link: Optional[str] = None


# =============================================================================
# BUCKETING
# =============================================================================

BUCKET_THRESHOLDS: List[Tuple[int, Bucket]] = [
    (90, Bucket.SAFE),
    (70, Bucket.PROBABLY),
    (40, Bucket.RISKY),
]


def bucket_for(score: int) -> Bucket:
    """Map a 0..100 consent score to its bucket."""
    for threshold, bucket in BUCKET_THRESHOLDS:
        if score >= threshold:
            return bucket
    return Bucket.DANGER
