"""
Sendwize Compliance Engine - Vendor Profile Assessor

Turns a stored profile of a known marketing vendor (ESP, CRM, analytics)
into GDPR processor evidence: DPA availability, data residency,
certifications and breach history, plus follow-up action items.
"""
from __future__ import annotations
import logging
import re
from typing import List, Sequence

from ...errors import require_list
from ...models.ssot import (
    CheckStatus, DEFAULT_VENDOR_SCORE, VendorAssessment, VendorDetail, VendorProfile,
)

logger = logging.getLogger(__name__)

EU_LOCATION = re.compile(r"\b(?:EU|UK|Europe\w*)\b", re.IGNORECASE)
US_LOCATION = re.compile(r"\b(?:US|USA|United States)\b", re.IGNORECASE)

NO_BREACHES = "no"

UNVERIFIED_VENDOR_SCORE = 50
UNVERIFIED_VENDOR_CATEGORY = "Marketing Tool"


class VendorProfileAssessor:
    """Builds a VendorAssessment from a VendorProfile. Pure, no lookups."""

    def assess_unverified(self, name: str) -> VendorAssessment:
        """Placeholder assessment for a vendor with no stored profile."""
        return VendorAssessment(
            name=name,
            category=UNVERIFIED_VENDOR_CATEGORY,
            score=UNVERIFIED_VENDOR_SCORE,
            details=(VendorDetail(
                CheckStatus.WARNING, "Analysis Incomplete",
                "Unable to fully analyze this vendor automatically. "
                "Please verify compliance manually with the vendor.",
            ),),
            action_items=(
                "Contact vendor for Data Processing Agreement",
                "Verify GDPR compliance claims",
                "Confirm data storage location",
            ),
        )

    def assess(self, profile: VendorProfile) -> VendorAssessment:
        details: List[VendorDetail] = []
        actions: List[str] = []
        location = (profile.data_location or "").strip()
        in_eu = bool(EU_LOCATION.search(location))
        in_us = bool(US_LOCATION.search(location))

        # DPA
        if profile.dpa_link:
            details.append(VendorDetail(
                CheckStatus.PASS, "DPA Available",
                "Data Processing Agreement is publicly available",
            ))
            actions.append("Download and review Data Processing Agreement")
        else:
            details.append(VendorDetail(
                CheckStatus.WARNING, "DPA Not Found",
                "Could not locate publicly available DPA",
            ))

        # Data location (UK GDPR Chapter V transfers)
        if in_eu and not in_us:
            details.append(VendorDetail(
                CheckStatus.PASS, "Data Location", f"Data stored in: {location}",
            ))
        elif in_us:
            details.append(VendorDetail(
                CheckStatus.WARNING, "Data Location",
                f"Data stored in: {location}. Standard Contractual Clauses required.",
            ))
            actions.append("Ensure Standard Contractual Clauses are in place")
        else:
            details.append(VendorDetail(
                CheckStatus.INFO, "Data Location", location or "Not specified",
            ))

        if profile.certifications:
            details.append(VendorDetail(
                CheckStatus.PASS, "Certifications", profile.certifications,
            ))

        breaches = (profile.recent_breaches or "").strip()
        if breaches.lower() == NO_BREACHES:
            details.append(VendorDetail(
                CheckStatus.PASS, "Recent Breaches",
                "No data breaches in last 24 months",
            ))
        elif breaches:
            details.append(VendorDetail(CheckStatus.WARNING, "Recent Breaches", breaches))

        if profile.notes:
            actions.append(profile.notes)

        # A stored score of 0 means "not yet scored"
        score = profile.score or DEFAULT_VENDOR_SCORE
        return VendorAssessment(
            name=profile.name,
            category=profile.category,
            score=score,
            details=tuple(details),
            action_items=tuple(actions),
            dpa_link=profile.dpa_link or None,
        )


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def assess_vendors(profiles: Sequence[VendorProfile]) -> List[VendorAssessment]:
    """
    Raises:
        InputError: if profiles is not a list
    """
    require_list(profiles, "vendors")
    assessor = VendorProfileAssessor()
    results = [assessor.assess(profile) for profile in profiles]
    logger.info(f"Vendor check complete: {len(results)} vendors assessed")
    return results
