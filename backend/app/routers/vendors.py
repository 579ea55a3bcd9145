"""
Sendwize Compliance Engine - Vendor Check API Router

Assesses marketing vendors (processors) from their stored profiles.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..models import VendorAssessment, VendorProfile
from ..services.publishing import ResultPublisher
from ..services.vendors import VendorProfileAssessor
from .common import CamelModel, get_publisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendors", tags=["vendors"])


class VendorIn(CamelModel):
    name: str
    category: Optional[str] = None
    score: Optional[int] = None
    dpa_link: Optional[str] = None
    data_location: Optional[str] = None
    certifications: Optional[str] = None
    recent_breaches: Optional[str] = None
    notes: Optional[str] = None
    # Custom vendors have no stored profile
    is_custom: bool = False


class VendorCheckRequest(CamelModel):
    vendors: Optional[List[VendorIn]] = None
    user_id: Optional[str] = None


class VendorDetailOut(CamelModel):
    status: str
    label: str
    description: str


class VendorResultOut(CamelModel):
    name: str
    category: Optional[str] = None
    score: int
    details: List[VendorDetailOut]
    action_items: List[str]
    links: Dict[str, Optional[str]]


class VendorCheckResponse(CamelModel):
    results: List[VendorResultOut]


def serialize_assessment(assessment: VendorAssessment) -> VendorResultOut:
    return VendorResultOut(
        name=assessment.name,
        category=assessment.category,
        score=assessment.score,
        details=[
            VendorDetailOut(status=d.status.value, label=d.label, description=d.description)
            for d in assessment.details
        ],
        action_items=list(assessment.action_items),
        links={"dpa": assessment.dpa_link, "privacy": None},
    )


@router.post("/check", response_model=VendorCheckResponse)
async def check_vendors(
    payload: VendorCheckRequest,
    publisher: ResultPublisher = Depends(get_publisher),
):
    """
    Assess each vendor.

    Custom vendors cannot be researched here; they get an "Analysis
    Incomplete" placeholder with manual follow-up actions.
    """
    if payload.vendors is None:
        raise HTTPException(status_code=400, detail="Invalid vendors provided")

    assessor = VendorProfileAssessor()
    results = []
    for vendor in payload.vendors:
        if vendor.is_custom:
            assessment = assessor.assess_unverified(vendor.name)
        else:
            assessment = assessor.assess(VendorProfile(
                name=vendor.name,
                category=vendor.category,
                score=vendor.score,
                dpa_link=vendor.dpa_link,
                data_location=vendor.data_location,
                certifications=vendor.certifications,
                recent_breaches=vendor.recent_breaches,
                notes=vendor.notes,
            ))
        results.append(serialize_assessment(assessment))

    logger.info(f"Checked {len(results)} vendors")
    response = VendorCheckResponse(results=results)
    publisher.publish(
        "vendor_check",
        response.model_dump(by_alias=True, mode="json"),
        user_id=payload.user_id,
        check_date=date.today(),
    )
    return response
