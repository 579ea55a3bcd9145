"""Sendwize Compliance Engine - API Routers"""
from .consent import router as consent_router
from .hygiene import router as hygiene_router
from .content import router as content_router
from .vendors import router as vendors_router

__all__ = [
    "consent_router",
    "hygiene_router",
    "content_router",
    "vendors_router",
]
