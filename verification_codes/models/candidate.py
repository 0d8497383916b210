"""
Candidate model for verification codes found in a message.
A Candidate with a malformed code is never constructed.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from verification_codes.config.constants import TIERS

_CODE_SHAPE = re.compile(r"^[A-Za-z0-9]{4,8}$")


@dataclass
class Candidate:
    """A single code candidate with provenance and plausibility score."""

    code: str
    tier: str               # "high" | "medium" | "low"
    position: int           # offset of the code inside full_content
    context_window: str = ""
    score: float = 0.0
    pattern: str = ""
    factors: List[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not _CODE_SHAPE.match(self.code):
            raise ValueError(f"Candidate code must be 4-8 alphanumerics, got '{self.code}'")
        if self.tier not in TIERS:
            raise ValueError(f"Unknown tier '{self.tier}'")
        if self.position < 0:
            raise ValueError("position must be >= 0")

    @property
    def end(self) -> int:
        return self.position + len(self.code)

    def add_factor(self, factor_type: str, value: str, weight: float) -> None:
        """Record one additive scoring contribution."""
        self.score += weight
        self.factors.append({"type": factor_type, "value": value, "weight": weight})

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "tier": self.tier,
            "position": self.position,
            "score": self.score,
            "factors": list(self.factors),
        }

    def __repr__(self) -> str:
        return f"Candidate('{self.code}', {self.tier}, @{self.position}, score={self.score:.2f})"


@dataclass
class ScoredCandidate:
    """A scored, valid Candidate together with the message it came from."""

    candidate: Candidate
    sender: str
    subject: str
    received_at: datetime
    message_id: str

    @property
    def code(self) -> str:
        return self.candidate.code

    @property
    def score(self) -> float:
        return self.candidate.score

    @property
    def tier(self) -> str:
        return self.candidate.tier
