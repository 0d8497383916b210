"""
MessageOutcome — what happened to one message of a batch.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from verification_codes.models.candidate import ScoredCandidate


@dataclass
class MessageOutcome:
    """Per-message extraction record, used for the batch report."""

    index: int
    message_id: Optional[str]
    status: str = "processed"       # "processed" | "skipped"
    reason: str = ""
    candidates_found: int = 0
    accepted: List[ScoredCandidate] = field(default_factory=list)
    rejections: Dict[str, int] = field(default_factory=dict)

    @property
    def best_code(self) -> Optional[str]:
        """Highest-scoring valid code of this message (first found wins ties)."""
        if not self.accepted:
            return None
        return max(self.accepted, key=lambda item: item.score).code

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "message_id": self.message_id,
            "status": self.status,
            "reason": self.reason,
            "candidates_found": self.candidates_found,
            "valid_candidates": len(self.accepted),
            "best_code": self.best_code,
            "rejections": dict(self.rejections),
        }
