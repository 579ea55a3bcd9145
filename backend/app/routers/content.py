"""
Sendwize Compliance Engine - Email Content API Router

Scans an email subject and HTML body for deliverability and compliance issues.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..models import ContentAuditResult, EmailDocument
from ..services.content import audit_content
from ..services.publishing import ResultPublisher
from .common import CamelModel, get_publisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


class ContentScanRequest(CamelModel):
    subject: Optional[str] = None
    html: Optional[str] = None
    user_id: Optional[str] = None


class CheckEntryOut(CamelModel):
    status: str
    title: str
    description: str


class ContentScanResponse(CamelModel):
    score: int
    checks: List[CheckEntryOut]
    summary: Dict[str, int]


def serialize_scan(result: ContentAuditResult) -> ContentScanResponse:
    return ContentScanResponse(
        score=result.score,
        checks=[
            CheckEntryOut(status=c.status.value, title=c.title, description=c.description)
            for c in result.checks
        ],
        summary=result.summary,
    )


@router.post("/scan", response_model=ContentScanResponse)
async def scan_email(
    payload: ContentScanRequest,
    publisher: ResultPublisher = Depends(get_publisher),
):
    """Score one email. Both subject and html are required."""
    if not payload.subject or not payload.html:
        raise HTTPException(status_code=400, detail="Subject and HTML required")

    result = audit_content(EmailDocument(subject=payload.subject, html=payload.html))

    response = serialize_scan(result)
    publisher.publish(
        "content_scan",
        {"subject": payload.subject, **response.model_dump(by_alias=True, mode="json")},
        user_id=payload.user_id,
        check_date=date.today(),
    )
    return response
