"""
RankedResult — the only object handed back to callers of the engine.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RankedResult:
    """One surviving unique code, after deduplication and ranking."""

    code: str
    sender: str
    subject: str
    received_at: datetime
    message_id: str
    score: float
    priority: str           # tier of the winning occurrence

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "sender": self.sender,
            "subject": self.subject,
            "received_at": self.received_at.isoformat(),
            "score": round(self.score, 4),
            "priority": self.priority,
            "message_id": self.message_id,
        }

    def __repr__(self) -> str:
        return f"RankedResult('{self.code}', {self.sender}, score={self.score:.2f}, {self.received_at.isoformat()})"
