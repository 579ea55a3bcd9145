"""Sendwize Compliance Engine - Vendor Profile Assessor"""
from .assessor import VendorProfileAssessor, assess_vendors

__all__ = [
    "VendorProfileAssessor",
    "assess_vendors",
]
