"""
List Hygiene Checker Tests

Covers suppression matching, duplicate detection, syntax and role-address
flags, the clean list, warnings and the recommendation text.
"""

import pytest

from app.errors import InputError
from app.models.ssot import Severity
from app.services.hygiene import (
    ListHygieneChecker, check_list_hygiene, is_role_email, is_valid_email, normalize_email,
)
from app.services.hygiene.checker import CLEAN_RECOMMENDATION


@pytest.fixture
def checker():
    return ListHygieneChecker()


# =============================================================================
# TEST: Core reconciliation
# =============================================================================

class TestReconciliation:

    def test_case_and_whitespace_duplicates(self, checker):
        result = checker.evaluate(["A@B.com", "a@b.com "], [])
        assert result.duplicates == ("a@b.com",)
        assert result.clean_list == ("a@b.com",)
        assert result.removed_count == 1
        assert not result.is_clean

    def test_suppressed_addresses_removed(self, checker):
        result = checker.evaluate(
            ["one@example.com", "Two@Example.com", "three@example.com"],
            [" two@example.com", "nobody@example.com"],
        )
        assert result.matches == ("two@example.com",)
        assert result.clean_list == ("one@example.com", "three@example.com")
        assert result.suppression_list_count == 2
        assert result.warnings[0].severity == Severity.CRITICAL

    def test_every_suppressed_occurrence_counted(self, checker):
        result = checker.evaluate(["x@example.com", "X@example.com"], ["x@example.com"])
        assert result.match_count == 2
        assert result.clean_list == ()

    def test_invalid_syntax_excluded(self, checker):
        result = checker.evaluate(["good@example.com", "bad-address", "no@tld", "sp ace@x.com"], [])
        assert result.invalid_emails == ("bad-address", "no@tld", "sp ace@x.com")
        assert result.clean_list == ("good@example.com",)

    def test_role_addresses_flagged_but_kept(self, checker):
        result = checker.evaluate(["info@shop.co.uk", "Sales@shop.co.uk", "jo@shop.co.uk"], [])
        assert result.role_emails == ("info@shop.co.uk", "sales@shop.co.uk")
        assert result.clean_list == ("info@shop.co.uk", "sales@shop.co.uk", "jo@shop.co.uk")
        assert result.is_clean
        assert result.warnings[0].severity == Severity.INFO
        assert result.recommendation == CLEAN_RECOMMENDATION

    def test_clean_list_keeps_send_order(self, checker):
        sends = ["c@x.com", "a@x.com", "b@x.com", "a@x.com", "d@x.com"]
        result = checker.evaluate(sends, ["b@x.com"])
        assert result.clean_list == ("c@x.com", "a@x.com", "d@x.com")

    def test_empty_lists(self, checker):
        result = checker.evaluate([], [])
        assert result.send_list_count == 0
        assert result.clean_list == ()
        assert result.warnings == ()
        assert result.recommendation == CLEAN_RECOMMENDATION


# =============================================================================
# TEST: Invariants
# =============================================================================

class TestInvariants:

    @pytest.fixture
    def messy_result(self, checker):
        sends = [
            "Alice@Example.com", "alice@example.com", "bob@example.com", "broken",
            "info@example.com", "carol@example.com", "BOB@example.com", "broken",
        ]
        return checker.evaluate(sends, ["carol@example.com"])

    def test_clean_list_is_subset_and_unique(self, messy_result):
        clean = messy_result.clean_list
        assert len(set(clean)) == len(clean)
        assert not set(clean) & set(messy_result.matches)
        assert all(is_valid_email(email) for email in clean)

    def test_clean_list_bounded_by_send_list(self, messy_result):
        assert messy_result.clean_list_count <= messy_result.send_list_count
        assert messy_result.removed_count == messy_result.send_list_count - messy_result.clean_list_count

    def test_duplicates_listed_once(self, messy_result):
        assert messy_result.duplicates == ("alice@example.com", "bob@example.com", "broken")

    def test_recommendation_mentions_removed_count(self, messy_result):
        assert messy_result.recommendation == (
            f"Clean your list before sending. Remove {messy_result.removed_count} problematic emails."
        )

    def test_warning_order(self, messy_result):
        assert [w.severity for w in messy_result.warnings] == [
            Severity.CRITICAL, Severity.WARNING, Severity.WARNING, Severity.INFO,
        ]


# =============================================================================
# TEST: Previews
# =============================================================================

class TestPreviews:

    def test_duplicate_preview_truncated(self, checker):
        sends = [f"user{i}@example.com" for i in range(25)] * 2
        result = checker.evaluate(sends, [])
        assert result.duplicate_count == 25
        assert len(result.duplicate_preview) == 20

    def test_issue_previews_truncated(self):
        checker = ListHygieneChecker(duplicate_preview=5, issue_preview=3)
        sends = [f"bad{i}" for i in range(6)] + [f"info@x{i}.com" for i in range(6)]
        result = checker.evaluate(sends, [])
        assert len(result.invalid_preview) == 3
        assert len(result.role_preview) == 3
        assert result.invalid_count == 6


# =============================================================================
# TEST: Input validation
# =============================================================================

class TestInputValidation:

    @pytest.mark.parametrize("send_list", [None, "a@b.com", 42, {"a@b.com"}])
    def test_send_list_must_be_a_list(self, checker, send_list):
        with pytest.raises(InputError):
            checker.evaluate(send_list, [])

    def test_suppression_list_must_be_a_list(self, checker):
        with pytest.raises(InputError):
            checker.evaluate([], None)

    def test_non_string_entries_rejected(self, checker):
        with pytest.raises(InputError, match=r"send_list\[1\]"):
            checker.evaluate(["a@b.com", 7], [])

    def test_factory_function(self):
        result = check_list_hygiene(("a@b.com",), ())
        assert result.clean_list == ("a@b.com",)


class TestHelpers:

    def test_normalize(self):
        assert normalize_email("  Jo@Example.COM ") == "jo@example.com"

    @pytest.mark.parametrize("email,valid", [
        ("a@b.co", True), ("a@b", False), ("@b.com", False), ("a b@c.com", False), ("", False),
    ])
    def test_is_valid_email(self, email, valid):
        assert is_valid_email(email) is valid

    def test_role_match_requires_exact_local_part(self):
        assert is_role_email("support@x.com")
        assert not is_role_email("support.team@x.com")
        assert not is_role_email("jo.info@x.com")
