"""
Shared test fixtures for the extraction test suite.
"""
from datetime import datetime, timezone

import pytest

from verification_codes.config.profile import default_profile
from verification_codes.models.engine_version import EngineVersion
from verification_codes.models.message import RawMessage


# ==========================================================================
# Profile & Version
# ==========================================================================

@pytest.fixture
def profile():
    return default_profile()


@pytest.fixture
def engine_version():
    return EngineVersion(profile_name="default")


# ==========================================================================
# Single messages, one per key spelling
# ==========================================================================

@pytest.fixture
def rest_message():
    """Outlook REST v2 spelling."""
    return {
        "Id": "AAMkAD-rest-001",
        "Subject": "Your Comet verification code",
        "From": {"EmailAddress": {"Name": "Perplexity", "Address": "noreply@perplexity.ai"}},
        "Body": {"ContentType": "Text", "Content": "Your verification code: 483920. Expires in 10 minutes."},
        "ReceivedDateTime": "2025-10-29T22:00:00Z",
    }


@pytest.fixture
def graph_message():
    """Microsoft Graph spelling."""
    return {
        "id": "AAMkAD-graph-001",
        "subject": "Your Comet verification code",
        "from": {"emailAddress": {"name": "Perplexity", "address": "noreply@perplexity.ai"}},
        "body": {"contentType": "html", "content": "<p>Your verification code: <b>483920</b></p>"},
        "bodyPreview": "Your verification code: 483920",
        "receivedDateTime": "2025-10-29T22:00:00Z",
    }


@pytest.fixture
def native_message():
    """Engine-native spelling."""
    return {
        "message_id": "native-001",
        "subject": "Your Comet verification code",
        "sender": "Perplexity",
        "body_content": "Your verification code: 483920. Expires in 10 minutes.",
        "received_at": "2025-10-29T22:00:00+00:00",
    }


@pytest.fixture
def raw_message():
    return RawMessage(
        subject="Your login code",
        sender="Acme",
        body_content="Use 739105 to sign in. Your verification code is 739105.",
        received_at=datetime(2025, 10, 29, 12, 0, tzinfo=timezone.utc),
        message_id="raw-001",
    )


# ==========================================================================
# Mailboxes
# ==========================================================================

def _perplexity(message_id: str, subject: str, paragraphs: list, received: str) -> dict:
    body = "\n".join(f"<p>{p}</p>" for p in paragraphs)
    return {
        "Id": message_id,
        "Subject": subject,
        "From": {"EmailAddress": {"Name": "Perplexity", "Address": "noreply@perplexity.ai"}},
        "Body": {"Content": f"<html>\n<body>\n{body}\n</body>\n</html>"},
        "ReceivedDateTime": received,
    }


@pytest.fixture
def comet_mailbox():
    """Five messages from one sender, each superseding the previous code."""
    return [
        _perplexity(
            "msg-1", "Welcome to Comet",
            [
                "Welcome to Comet!",
                "Your account has been created successfully.",
                "Your verification code: 1234",
                "Please use this code to verify your account.",
                "Generated on: 2025-10-28",
            ],
            "2025-10-28T18:30:00Z",
        ),
        _perplexity(
            "msg-2", "Your Comet Verification Code",
            [
                "Here is your new verification code for Comet:",
                "<strong>5678</strong>",
                "This code will expire in 10 minutes.",
                "If you didn't request this code, please ignore this email.",
            ],
            "2025-10-29T19:15:00Z",
        ),
        _perplexity(
            "msg-3", "Welcome to Comet",
            [
                "Welcome to Comet!",
                "Your account has been created successfully.",
                "Your verification code: 4138",
                "But the old code was: 5678",
                "Please use 4138 to proceed.",
                "Reference: 2025-10-29-4138",
            ],
            "2025-10-29T21:20:00Z",
        ),
        _perplexity(
            "msg-4", "Corrected Verification Code",
            [
                "There was an error in the previous verification code.",
                "Your verification code: 4138",
                "But the real code should be: 680616",
                "Please use 680616 to proceed.",
                "We apologize for the confusion.",
                "Reference: 2025-10-29-680616",
            ],
            "2025-10-29T21:46:28Z",
        ),
        _perplexity(
            "msg-5", "Final Verification Code",
            [
                "Your final verification code for Comet is:",
                "<strong>680616</strong>",
                "This is the correct code. Please ignore any previous codes.",
                "Generated on: 2025-10-29",
            ],
            "2025-10-29T22:00:00Z",
        ),
    ]


@pytest.fixture
def temporary_code_mailbox():
    """A welcome message whose only numbers are a placeholder, a date and a ticket id."""
    return [
        _perplexity(
            "jose-1", "Welcome to Comet",
            [
                "Welcome to Comet!",
                "Your account has been created successfully.",
                "Your temporary code: 000000",
                "Please use this code to verify your account.",
                "Generated on: 2025-10-29",
                "Ticket ID: 12345678",
            ],
            "2025-10-29T22:03:19Z",
        ),
    ]
