"""
Sendwize Compliance Engine - FastAPI Application

Main entry point for the compliance engine backend.

Architecture:
- ContactRecord[] → ConsentRecordAuditor → ConsentAuditResult[] → ReportAggregator → AggregateReport
- sendList + suppressionList → ListHygieneChecker → SuppressionCheckResult
- EmailDocument → ContentRuleAuditor → ContentAuditResult
- VendorProfile → VendorProfileAssessor → VendorAssessment
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .routers import consent_router, hygiene_router, content_router, vendors_router
from .services.publishing import ResultPublisher

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Attach an empty result publisher; deployments register their sinks on it."""
    if getattr(app.state, "publisher", None) is None:
        app.state.publisher = ResultPublisher()
    logger.info(f"Sendwize Compliance Engine {VERSION} started")
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Sendwize Compliance Engine",
    description="""
    Sendwize Compliance Engine - UK Email Marketing Compliance Checks

    Audits marketing contact data and email content against PECR,
    the ASA CAP Code and UK GDPR, and returns scores with evidence.

    ## Engines
    1. **Consent Audit**: contacts → per-contact consent score, buckets, expiry timeline
    2. **List Hygiene**: send list vs suppression list → clean list
    3. **Content Scan**: subject + HTML → deliverability/compliance score
    4. **Vendor Check**: vendor profiles → processor evidence

    ## Key Principles
    - Every result is immutable once created
    - Scores are computed deterministically (no LLMs)
    - "Today" is an explicit input to consent scoring
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(consent_router)
app.include_router(hygiene_router)
app.include_router(content_router)
app.include_router(vendors_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Sendwize Compliance Engine",
        "version": VERSION,
        "docs": "/docs",
        "endpoints": {
            "consent": "/consent/audit",
            "hygiene": "/hygiene/check",
            "content": "/content/scan",
            "vendors": "/vendors/check",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


# For running with: python -m app.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
