"""
Validity Filter — rejects candidates that match well but are not codes.

Checks, short-circuiting on the first failure:
    1. Length in [4, 8]
    2. Structural deny-list (repeated digits, sequences, years, ZIP shape,
       service numbers, phone groupings, reference/order/invoice IDs,
       prices and percentages)
    3. Keyword gate: some verification keyword anywhere in the content
    4. Low-trust gate: low-tier candidates need a medium/high keyword
"""
import logging
import re
from typing import Optional

from verification_codes.config.constants import (
    ASCENDING_SEQUENCES,
    CURRENCY_PREFIX_PATTERN,
    DECIMAL_SUFFIX_PATTERN,
    PERCENT_SUFFIX_PATTERN,
    PHONE_PATTERNS,
    REFERENCE_PREFIX_PATTERN,
    REPEATED_CHAR_PATTERN,
    SERVICE_NUMBER_PATTERN,
    TIER_HIGH,
    TIER_LOW,
    TIER_MEDIUM,
)
from verification_codes.config.profile import ExtractionProfile, default_profile
from verification_codes.models.candidate import Candidate
from verification_codes.models.validation import ValidityVerdict

logger = logging.getLogger(__name__)

_REPEATED_RE = re.compile(REPEATED_CHAR_PATTERN)
_SERVICE_RE = re.compile(SERVICE_NUMBER_PATTERN, re.ASCII)
_PHONE_RES = tuple(re.compile(p, re.ASCII) for p in PHONE_PATTERNS)
_REFERENCE_RE = re.compile(REFERENCE_PREFIX_PATTERN, re.IGNORECASE)
_CURRENCY_RE = re.compile(CURRENCY_PREFIX_PATTERN)
_DECIMAL_RE = re.compile(DECIMAL_SUFFIX_PATTERN, re.ASCII)
_PERCENT_RE = re.compile(PERCENT_SUFFIX_PATTERN)

# How far around the candidate the contextual deny rules look.
_PREFIX_SPAN = 30
_PHONE_SPAN = 16


def _deny_reason(candidate: Candidate, full_content: str, profile: ExtractionProfile) -> Optional[str]:
    """Return the deny-list rule *candidate* matches, or None."""
    code = candidate.code

    if _REPEATED_RE.match(code):
        return "Repeated digits"

    if not code.isdigit():
        # Alphanumeric codes only go through the repeated-character rule.
        return None

    if code in ASCENDING_SEQUENCES:
        return "Ascending sequence"
    if len(code) == 4 and profile.year_min <= int(code) <= profile.year_max:
        return "Looks like a year"
    if len(code) == 5 and profile.reject_five_digit:
        return "ZIP code shape"
    if _SERVICE_RE.match(code):
        return "Service number prefix"

    if full_content:
        start, end = candidate.position, candidate.end
        if full_content[start:end] == code:
            span_start = max(0, start - _PHONE_SPAN)
            span_text = full_content[span_start : end + _PHONE_SPAN]
            for phone_re in _PHONE_RES:
                for m in phone_re.finditer(span_text):
                    if m.start() + span_start < end and start < m.end() + span_start:
                        return "Phone number shape"

            before = full_content[max(0, start - _PREFIX_SPAN) : start]
            after = full_content[end : end + _PREFIX_SPAN]
            if _REFERENCE_RE.search(before):
                return "Reference or order identifier"
            if _CURRENCY_RE.search(before) or _DECIMAL_RE.match(after):
                return "Price"
            if _PERCENT_RE.match(after):
                return "Percentage"

    return None


def is_valid(
    candidate: Candidate,
    full_content: str,
    profile: Optional[ExtractionProfile] = None,
) -> ValidityVerdict:
    """
    Decide whether *candidate* is a plausible verification code.

    Args:
        candidate: Candidate (scored or not) found in *full_content*.
        full_content: Subject + clean body of the message.
        profile: Profile with keyword sets and deny-list settings.

    Returns:
        ValidityVerdict with the first failing rule as reason.
    """
    if profile is None:
        profile = default_profile()

    code = candidate.code
    if not code or not 4 <= len(code) <= 8:
        return ValidityVerdict.reject("Invalid length")

    reason = _deny_reason(candidate, full_content, profile)
    if reason is not None:
        logger.debug("Rejected candidate %s at %d: %s", code, candidate.position, reason)
        return ValidityVerdict.reject(reason)

    # has_strong: a medium- or high-trust keyword appears somewhere
    has_strong = (
        profile.keywords(TIER_HIGH).any_in(full_content)
        or profile.keywords(TIER_MEDIUM).any_in(full_content)
    )
    has_weak = profile.keywords(TIER_LOW).any_in(full_content)

    if not (has_strong or has_weak):
        return ValidityVerdict.reject("No verification context found")

    if not has_strong and candidate.tier == TIER_LOW:
        return ValidityVerdict.reject("Insufficient verification context")

    return ValidityVerdict(valid=True)
