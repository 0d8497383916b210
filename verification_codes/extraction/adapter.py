"""
Message Adapter — maps provider message records onto RawMessage.

Upstream mail APIs expose the same message under different key
spellings:

    Outlook REST v2   Subject, From.EmailAddress.Name, Body.Content,
                      BodyPreview, ReceivedDateTime, Id
    Microsoft Graph   subject, from.emailAddress.name|address,
                      body.content, body.preview, bodyPreview,
                      receivedDateTime, id
    engine-native     subject, sender, body_content, received_at,
                      message_id

All spelling differences are resolved here, once, so the matching logic
only ever sees RawMessage.
"""
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from verification_codes.config.constants import DEFAULT_SENDER
from verification_codes.models.message import RawMessage


SUBJECT_KEYS = ("Subject", "subject")
SENDER_KEYS = ("From", "from", "Sender", "sender")
BODY_KEYS = ("Body", "body", "body_content")
PREVIEW_KEYS = ("BodyPreview", "bodyPreview")
RECEIVED_KEYS = ("ReceivedDateTime", "receivedDateTime", "received_at")
ID_KEYS = ("Id", "id", "message_id", "messageId")


class MalformedMessageError(ValueError):
    """Raised when a message record cannot be mapped onto RawMessage."""

    def __init__(self, reason: str, message_id: Optional[str] = None) -> None:
        self.reason = reason
        self.message_id = message_id
        super().__init__(f"Malformed message {message_id or '<no id>'}: {reason}")


def _first_present(raw: Mapping, keys) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _resolve_sender(raw: Mapping) -> str:
    sender = _first_present(raw, SENDER_KEYS)
    if sender is None:
        return DEFAULT_SENDER
    if isinstance(sender, str):
        return sender
    if isinstance(sender, Mapping):
        address = sender.get("EmailAddress") or sender.get("emailAddress") or sender
        if isinstance(address, Mapping):
            name = _first_present(address, ("Name", "name", "Address", "address"))
            if isinstance(name, str):
                return name
    return DEFAULT_SENDER


def _resolve_body(raw: Mapping) -> Optional[str]:
    body = _first_present(raw, BODY_KEYS)
    if isinstance(body, str):
        return body
    if isinstance(body, Mapping):
        content = _first_present(body, ("Content", "content", "Preview", "preview"))
        if content is not None:
            return content
    return _first_present(raw, PREVIEW_KEYS)


def adapt_message(raw: Any) -> RawMessage:
    """
    Map one provider message record onto a validated RawMessage.

    Args:
        raw: A RawMessage (returned as is), or a message mapping in any
             supported key spelling.

    Returns:
        The immutable RawMessage.

    Raises:
        MalformedMessageError: If the record is not a mapping, lacks an id
            or a parseable reception timestamp, or has neither subject nor body.
    """
    if isinstance(raw, RawMessage):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedMessageError(f"expected a mapping, got {type(raw).__name__}")

    message_id = _first_present(raw, ID_KEYS)
    if message_id is None:
        raise MalformedMessageError("missing message id")
    message_id = str(message_id)

    received_at = _first_present(raw, RECEIVED_KEYS)
    if received_at is None:
        raise MalformedMessageError("missing received timestamp", message_id)

    subject = _first_present(raw, SUBJECT_KEYS)
    body = _resolve_body(raw)
    if subject is None and body is None:
        raise MalformedMessageError("missing both subject and body", message_id)

    try:
        return RawMessage(
            subject=subject if subject is not None else "",
            sender=_resolve_sender(raw),
            body_content=body if body is not None else "",
            received_at=received_at,
            message_id=message_id,
        )
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MalformedMessageError(errors, message_id) from e
