"""
Sendwize Compliance Engine - List Hygiene API Router

Checks a send list against a suppression list before a campaign goes out.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..errors import InputError
from ..models import SuppressionCheckResult
from ..services.hygiene import check_list_hygiene
from ..services.publishing import ResultPublisher
from .common import CamelModel, get_publisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hygiene", tags=["hygiene"])


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class HygieneCheckRequest(CamelModel):
    # Left untyped so malformed lists surface as InputError (400), not 422
    send_list: Optional[Any] = None
    suppression_list: Optional[Any] = None
    user_id: Optional[str] = None


class HygieneWarningOut(CamelModel):
    severity: str
    message: str


class HygieneCheckResponse(CamelModel):
    send_list_count: int
    suppression_list_count: int
    matches: List[str]
    match_count: int
    duplicates: List[str]
    duplicate_count: int
    duplicate_preview: List[str]
    invalid_emails: List[str]
    invalid_count: int
    invalid_preview: List[str]
    role_emails: List[str]
    role_email_count: int
    role_preview: List[str]
    clean_list: List[str]
    clean_list_count: int
    removed_count: int
    warnings: List[HygieneWarningOut]
    recommendation: str


def serialize_check(result: SuppressionCheckResult) -> HygieneCheckResponse:
    return HygieneCheckResponse(
        send_list_count=result.send_list_count,
        suppression_list_count=result.suppression_list_count,
        matches=list(result.matches),
        match_count=result.match_count,
        duplicates=list(result.duplicates),
        duplicate_count=result.duplicate_count,
        duplicate_preview=list(result.duplicate_preview),
        invalid_emails=list(result.invalid_emails),
        invalid_count=result.invalid_count,
        invalid_preview=list(result.invalid_preview),
        role_emails=list(result.role_emails),
        role_email_count=result.role_email_count,
        role_preview=list(result.role_preview),
        clean_list=list(result.clean_list),
        clean_list_count=result.clean_list_count,
        removed_count=result.removed_count,
        warnings=[
            HygieneWarningOut(severity=w.severity.value, message=w.message)
            for w in result.warnings
        ],
        recommendation=result.recommendation,
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("/check", response_model=HygieneCheckResponse)
async def check_lists(
    payload: HygieneCheckRequest,
    publisher: ResultPublisher = Depends(get_publisher),
):
    """Reconcile sendList against suppressionList and return a clean list."""
    try:
        result = check_list_hygiene(payload.send_list, payload.suppression_list)
    except InputError as e:
        logger.warning(f"Rejected hygiene check: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    response = serialize_check(result)
    publisher.publish(
        "list_hygiene",
        response.model_dump(by_alias=True, mode="json"),
        user_id=payload.user_id,
        check_date=date.today(),
    )
    return response
