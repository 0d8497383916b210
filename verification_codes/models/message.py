"""
RawMessage and NormalizedMessage — the engine's view of one mailbox message.

RawMessage is the validated input record produced by the adapter
(see extraction.adapter). NormalizedMessage is derived from it per
extraction call and discarded afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from verification_codes.config.constants import DEFAULT_SENDER


class RawMessage(BaseModel):
    """A message as supplied by the mail provider, after key-spelling mapping."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field("", description="Message subject, may be empty.")
    sender: str = Field(DEFAULT_SENDER, description="Display name or address of the sender.")
    body_content: str = Field("", description="Message body, plain text or HTML.")
    received_at: datetime = Field(..., description="Reception timestamp, required for ranking.")
    message_id: str = Field(..., min_length=1, description="Stable provider message identifier.")

    @field_validator("sender")
    @classmethod
    def default_sender(cls, v: str) -> str:
        v = v.strip()
        return v or DEFAULT_SENDER

    @field_validator("received_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are read as UTC so they compare with aware ones.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


@dataclass(frozen=True)
class NormalizedMessage:
    """Message with an HTML-free body, ready for pattern scanning."""

    subject: str
    sender: str
    received_at: datetime
    message_id: str
    clean_body: str

    @property
    def full_content(self) -> str:
        """The text scanned by the pattern matcher: subject, a space, then the body."""
        return f"{self.subject} {self.clean_body}"
