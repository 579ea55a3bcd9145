"""
Sendwize Compliance Engine - Configuration
Environment-driven settings for the service boundary and engine limits
"""
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated; "*" allows any origin
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

# Gmail clips messages above ~102KB
CONTENT_MAX_BYTES = int(os.getenv("CONTENT_MAX_BYTES", "102000"))

HYGIENE_DUPLICATE_PREVIEW = int(os.getenv("HYGIENE_DUPLICATE_PREVIEW", "20"))
HYGIENE_ISSUE_PREVIEW = int(os.getenv("HYGIENE_ISSUE_PREVIEW", "10"))
