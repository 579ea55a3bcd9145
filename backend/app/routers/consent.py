"""
Sendwize Compliance Engine - Consent Audit API Router

Scores a batch of marketing contacts for PECR consent validity.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..errors import InputError
from ..models import (
    AggregateReport, ConsentAuditConfig, ConsentAuditResult, ContactRecord,
    CustomerType, EmailType, ProductType,
)
from ..services.consent import audit_consent
from ..services.publishing import ResultPublisher
from .common import CamelModel, get_publisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/consent", tags=["consent"])


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class ContactIn(CamelModel):
    email: str
    consent_date: Optional[Any] = None
    consent_method: Optional[str] = None
    source: Optional[str] = None


class ConsentAuditRequest(CamelModel):
    contacts: List[ContactIn]
    customer_type: CustomerType = CustomerType.NONE
    product_type: ProductType = ProductType.MIXED
    email_type: EmailType = EmailType.B2C
    evaluation_date: Optional[date] = None
    user_id: Optional[str] = None


class ContactResultOut(CamelModel):
    email: str
    consent_date: Optional[Any] = None
    consent_method: Optional[str] = None
    source: Optional[str] = None
    score: int
    category: str
    bucket: str


class ExpiryTimelineOut(CamelModel):
    labels: List[str]
    data: List[int]


class SourceQualityOut(CamelModel):
    source: str
    total: int
    avg_score: int
    rating: str


class ConsentAuditResponse(CamelModel):
    total: int
    counts: Dict[str, int]
    safe: List[ContactResultOut]
    probably: List[ContactResultOut]
    risky: List[ContactResultOut]
    danger: List[ContactResultOut]
    expiry_timeline: ExpiryTimelineOut
    source_quality: List[SourceQualityOut]


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def serialize_result(result: ConsentAuditResult) -> ContactResultOut:
    contact = result.contact
    return ContactResultOut(
        email=contact.email,
        consent_date=contact.consent_date,
        consent_method=contact.consent_method,
        source=contact.source,
        score=result.score,
        category=result.category,
        bucket=result.bucket.value,
    )


def serialize_report(report: AggregateReport) -> ConsentAuditResponse:
    return ConsentAuditResponse(
        total=report.total,
        counts=report.counts,
        safe=[serialize_result(r) for r in report.safe],
        probably=[serialize_result(r) for r in report.probably],
        risky=[serialize_result(r) for r in report.risky],
        danger=[serialize_result(r) for r in report.danger],
        expiry_timeline=ExpiryTimelineOut(
            labels=list(report.expiry_timeline.labels),
            data=list(report.expiry_timeline.data),
        ),
        source_quality=[
            SourceQualityOut(
                source=q.source, total=q.total, avg_score=q.avg_score, rating=q.rating.value,
            )
            for q in report.source_quality
        ],
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("/audit", response_model=ConsentAuditResponse)
async def audit_contacts(
    payload: ConsentAuditRequest,
    publisher: ResultPublisher = Depends(get_publisher),
):
    """
    Audit a contact list's consent records.

    evaluationDate defaults to today when omitted.
    """
    config = ConsentAuditConfig(
        customer_type=payload.customer_type,
        product_type=payload.product_type,
        email_type=payload.email_type,
        evaluation_date=payload.evaluation_date or date.today(),
    )
    contacts = [
        ContactRecord(
            email=c.email,
            consent_date=c.consent_date,
            consent_method=c.consent_method,
            source=c.source,
        )
        for c in payload.contacts
    ]

    try:
        report = audit_consent(contacts, config)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response = serialize_report(report)
    publisher.publish(
        "consent_audit",
        response.model_dump(by_alias=True, mode="json"),
        user_id=payload.user_id,
        check_date=config.evaluation_date,
    )
    return response
