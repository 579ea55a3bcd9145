"""Sendwize Compliance Engine - List Hygiene Checker"""
from .checker import (
    ListHygieneChecker,
    check_list_hygiene,
    normalize_email,
    is_valid_email,
    is_role_email,
    ROLE_LOCAL_PARTS,
)

__all__ = [
    "ListHygieneChecker",
    "check_list_hygiene",
    "normalize_email",
    "is_valid_email",
    "is_role_email",
    "ROLE_LOCAL_PARTS",
]
