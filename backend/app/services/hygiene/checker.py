"""
Sendwize Compliance Engine - List Hygiene Checker

Reconciles a send list against a suppression list and flags structural
defects (duplicates, bad syntax, role mailboxes) before a campaign goes out.
"""
from __future__ import annotations
import logging
import re
from dataclasses import replace
from typing import List, Sequence

from ... import config
from ...errors import require_string_list
from ...models.ssot import HygieneWarning, Severity, SuppressionCheckResult

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ROLE_LOCAL_PARTS = (
    "info", "sales", "admin", "support", "contact", "hello", "help",
    "service", "team", "marketing", "hr", "office", "reception",
)
ROLE_PATTERN = re.compile(r"^(?:" + "|".join(ROLE_LOCAL_PARTS) + r")@", re.IGNORECASE)

CLEAN_RECOMMENDATION = "Your send list is clean! Safe to proceed."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def is_role_email(email: str) -> bool:
    return ROLE_PATTERN.match(email) is not None


def dedupe(items: Sequence[str]) -> List[str]:
    seen = set()
    return [item for item in items if not (item in seen or seen.add(item))]


class ListHygieneChecker:
    """
    Produces a SuppressionCheckResult for one send/suppression list pair.

    "First occurrence" is always relative to the send list's original
    order, so clean_list and duplicates are stable for a given input.
    """

    def __init__(
        self,
        duplicate_preview: int = config.HYGIENE_DUPLICATE_PREVIEW,
        issue_preview: int = config.HYGIENE_ISSUE_PREVIEW,
    ):
        self.duplicate_preview = duplicate_preview
        self.issue_preview = issue_preview

    def evaluate(
        self, send_list: Sequence[str], suppression_list: Sequence[str]
    ) -> SuppressionCheckResult:
        """
        Raises:
            InputError: if either list is not a list of strings
        """
        require_string_list(send_list, "send_list")
        require_string_list(suppression_list, "suppression_list")

        sends = [normalize_email(email) for email in send_list]
        suppressed = {normalize_email(email) for email in suppression_list}

        matches = [email for email in sends if email in suppressed]
        invalid = [email for email in sends if not is_valid_email(email)]
        roles = [email for email in sends if is_role_email(email)]

        seen = set()
        repeats: List[str] = []
        clean: List[str] = []
        for email in sends:
            if email in seen:
                repeats.append(email)
                continue
            seen.add(email)
            if email not in suppressed and is_valid_email(email):
                clean.append(email)
        duplicates = dedupe(repeats)

        result = SuppressionCheckResult(
            send_list_count=len(sends),
            suppression_list_count=len(suppression_list),
            matches=tuple(matches),
            duplicates=tuple(duplicates),
            invalid_emails=tuple(invalid),
            role_emails=tuple(roles),
            clean_list=tuple(clean),
            duplicate_preview=tuple(duplicates[:self.duplicate_preview]),
            invalid_preview=tuple(invalid[:self.issue_preview]),
            role_preview=tuple(roles[:self.issue_preview]),
        )
        result = _with_findings(result)

        logger.info(
            f"List hygiene complete: {result.send_list_count} send vs "
            f"{result.suppression_list_count} suppression, "
            f"{result.match_count} matches, {result.duplicate_count} duplicates, "
            f"{result.invalid_count} invalid, {result.clean_list_count} clean"
        )
        return result


def build_warnings(result: SuppressionCheckResult) -> List[HygieneWarning]:
    warnings = []
    if result.match_count:
        warnings.append(HygieneWarning(
            Severity.CRITICAL,
            f"{result.match_count} emails found in suppression list. Sending to these "
            f"could result in spam complaints and damage sender reputation.",
        ))
    if result.duplicate_count:
        warnings.append(HygieneWarning(
            Severity.WARNING,
            f"{result.duplicate_count} duplicate emails found. Sending duplicates "
            f"wastes resources and annoys recipients.",
        ))
    if result.invalid_count:
        warnings.append(HygieneWarning(
            Severity.WARNING,
            f"{result.invalid_count} emails have invalid syntax (e.g., missing @, .com). "
            f"These will hard bounce.",
        ))
    if result.role_email_count:
        warnings.append(HygieneWarning(
            Severity.INFO,
            f"{result.role_email_count} role-based emails detected (info@, sales@). "
            f"These typically have lower engagement rates.",
        ))
    return warnings


def build_recommendation(result: SuppressionCheckResult) -> str:
    if result.is_clean:
        return CLEAN_RECOMMENDATION
    return f"Clean your list before sending. Remove {result.removed_count} problematic emails."


def _with_findings(result: SuppressionCheckResult) -> SuppressionCheckResult:
    return replace(
        result,
        warnings=tuple(build_warnings(result)),
        recommendation=build_recommendation(result),
    )


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def check_list_hygiene(
    send_list: Sequence[str], suppression_list: Sequence[str]
) -> SuppressionCheckResult:
    return ListHygieneChecker().evaluate(send_list, suppression_list)
