"""
ValidityVerdict — outcome of the validity filter for one candidate.
"""
from dataclasses import dataclass

VALID_REASON: str = "Valid verification code"


@dataclass(frozen=True)
class ValidityVerdict:
    """Whether a candidate is a plausible code, and why (not)."""

    valid: bool
    reason: str = VALID_REASON

    @classmethod
    def reject(cls, reason: str) -> "ValidityVerdict":
        return cls(valid=False, reason=reason)
