"""Sendwize Compliance Engine - Content Rule Auditor

Scores an email subject and HTML body against PECR, the ASA CAP Code and
common deliverability rules.
"""
from .engine import ContentRuleAuditor, audit_content
from .rules import (
    CONTENT_RULES,
    ContentRule,
    RuleGroup,
    EmailSnapshot,
    Finding,
    find_spam_words,
    caps_ratio,
    SPAM_WORDS,
)

__all__ = [
    "ContentRuleAuditor",
    "audit_content",
    "CONTENT_RULES",
    "ContentRule",
    "RuleGroup",
    "EmailSnapshot",
    "Finding",
    "find_spam_words",
    "caps_ratio",
    "SPAM_WORDS",
]
