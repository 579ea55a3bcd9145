"""Sendwize Compliance Engine - Data Models"""
from .ssot import (
    # Enums
    CustomerType, ProductType, EmailType, Bucket, SourceRating, CheckStatus, Severity,
    # SSOT #1: Consent audit
    ContactRecord, ConsentAuditConfig, ConsentAuditResult,
    ExpiryTimeline, SourceQuality, AggregateReport,
    # SSOT #2: List hygiene
    HygieneWarning, SuppressionCheckResult,
    # SSOT #3: Content audit
    EmailDocument, CheckEntry, ContentAuditResult,
    # SSOT #4: Vendor profiles
    VendorProfile, VendorDetail, VendorAssessment, DEFAULT_VENDOR_SCORE,
    bucket_for,
)

__all__ = [
    "CustomerType", "ProductType", "EmailType", "Bucket", "SourceRating", "CheckStatus", "Severity",
    "ContactRecord", "ConsentAuditConfig", "ConsentAuditResult",
    "ExpiryTimeline", "SourceQuality", "AggregateReport",
    "HygieneWarning", "SuppressionCheckResult",
    "EmailDocument", "CheckEntry", "ContentAuditResult",
    "VendorProfile", "VendorDetail", "VendorAssessment", "DEFAULT_VENDOR_SCORE",
    "bucket_for",
]
