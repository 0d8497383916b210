"""
Unit tests for the validity filter (deny-list + keyword gates).
"""
import pytest

from verification_codes.config.profile import default_profile
from verification_codes.models.candidate import Candidate
from verification_codes.postprocessing.validity_filter import is_valid


def _check(text: str, code: str, tier: str = "high", profile=None):
    candidate = Candidate(code=code, tier=tier, position=text.index(code))
    return is_valid(candidate, text, profile)


class TestDenyList:
    """Structural shapes that are never codes, even next to a keyword."""

    @pytest.mark.parametrize("code", ["0000", "111111", "99999999"])
    def test_repeated_digits(self, code):
        verdict = _check(f"Your verification code: {code}", code)
        assert not verdict.valid
        assert verdict.reason == "Repeated digits"

    @pytest.mark.parametrize("code", ["1234", "123456", "12345678"])
    def test_ascending_sequence(self, code):
        verdict = _check(f"Your verification code: {code}", code)
        assert verdict.reason == "Ascending sequence"

    @pytest.mark.parametrize("code", ["2015", "2024", "2035"])
    def test_year(self, code):
        verdict = _check(f"Your verification code: {code}", code)
        assert verdict.reason == "Looks like a year"

    def test_year_outside_range_is_allowed(self):
        assert _check("Your verification code: 1987", "1987").valid

    def test_year_range_configurable(self):
        profile = default_profile(year_min=1900, year_max=2100)
        assert _check("Your verification code: 1987", "1987", profile=profile).reason == "Looks like a year"

    def test_five_digit_zip_shape(self):
        assert _check("Your verification code: 90210", "90210").reason == "ZIP code shape"

    def test_five_digit_allowed_when_disabled(self):
        profile = default_profile(reject_five_digit=False)
        assert _check("Your verification code: 90210", "90210", profile=profile).valid

    @pytest.mark.parametrize("code", ["8005550", "8881234", "9001234", "5559876"])
    def test_service_number_prefix(self, code):
        assert _check(f"Your verification code: {code}", code).reason == "Service number prefix"

    def test_phone_number_groups(self):
        text = "Verification code questions? Call 415-555-0199 anytime."
        verdict = _check(text, "0199", tier="low")
        assert verdict.reason == "Phone number shape"

    def test_phone_with_parentheses(self):
        text = "Verification code help: (415) 555-0199"
        assert _check(text, "0199", tier="low").reason == "Phone number shape"

    @pytest.mark.parametrize("prefix", ["Order #", "Invoice No. ", "Ticket ID: ", "Ref: ", "订单号："])
    def test_reference_identifiers(self, prefix):
        text = f"Verification code sent. {prefix}482913"
        assert _check(text, "482913", tier="low").reason == "Reference or order identifier"

    def test_price(self):
        assert _check("Verify your purchase of $4999 today", "4999", tier="medium").reason == "Price"
        assert _check("Verify your purchase of 4999.00 EUR", "4999", tier="medium").reason == "Price"

    def test_percentage(self):
        assert _check("Verify: 7520% growth", "7520", tier="medium").reason == "Percentage"


class TestKeywordGates:
    """Keyword presence gates."""

    def test_no_keyword_rejected(self):
        verdict = _check("Your package 483920 shipped yesterday.", "483920", tier="low")
        assert verdict.reason == "No verification context found"

    def test_low_only_keyword_rejects_low_tier(self):
        verdict = _check("Your tracking number is 483920", "483920", tier="low")
        assert verdict.reason == "Insufficient verification context"

    def test_low_only_keyword_keeps_high_tier(self):
        assert _check("Your code: 483920", "483920", tier="high").valid

    def test_medium_keyword_unlocks_low_tier(self):
        assert _check("Please verify this sign-in. 483920", "483920", tier="low").valid

    def test_keyword_anywhere_in_content(self):
        text = "Verification code below." + " " * 400 + "483920"
        assert _check(text, "483920", tier="low").valid

    def test_word_boundary_on_keywords(self):
        # "pin" inside "shipping" is not a keyword
        verdict = _check("Shipping update 483920", "483920", tier="low")
        assert verdict.reason == "No verification context found"


class TestVerdict:
    def test_valid_reason(self):
        verdict = _check("Your verification code: 483920", "483920")
        assert verdict.valid
        assert verdict.reason == "Valid verification code"

    def test_deny_list_wins_over_keywords(self):
        # Strong keywords do not rescue a deny-listed shape.
        verdict = _check("验证码 verification code: 2024 enter this code", "2024")
        assert not verdict.valid
