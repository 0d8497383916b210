"""
Content Normalizer — HTML stripping and whitespace canonicalization.

Block-level tags become newlines so that a code rendered on its own line
(e.g. ``<p><strong>123456</strong></p>``) stays isolated in the clean text.
"""
import html
import logging
import re

from verification_codes.models.message import NormalizedMessage, RawMessage

logger = logging.getLogger(__name__)

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_LINK_META_RE = re.compile(r"<(?:link|meta)\b[^>]*>", re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_TAG_RE = re.compile(
    r"</?(?:td|tr|div|p|li|ul|ol|table|h[1-6]|html|body)\b[^>]*>",
    re.IGNORECASE,
)
_BR_RE = re.compile(r"<br\b[^>]*>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]*>")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_NEWLINE_RUN_RE = re.compile(r"\s*\n\s*")
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")


def clean_email_content(content: str) -> str:
    """
    Strip markup from a message body and collapse whitespace.

    Steps:
        1. Drop <script>/<style> blocks, <link>/<meta> tags and comments
        2. Block tags and <br> become newlines
        3. Remaining tags are removed, entities unescaped
        4. Horizontal whitespace collapses to one space, any whitespace
           run containing a newline collapses to one newline
        5. Fullwidth digits (U+FF10..U+FF19) become ASCII digits

    Returns:
        Clean text (possibly empty). Never raises.
    """
    if not content:
        return ""

    text = _SCRIPT_STYLE_RE.sub("", content)
    text = _LINK_META_RE.sub("", text)
    text = _COMMENT_RE.sub("", text)

    text = _BLOCK_TAG_RE.sub("\n", text)
    text = _BR_RE.sub("\n", text)
    text = _ANY_TAG_RE.sub(" ", text)
    text = html.unescape(text)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HSPACE_RE.sub(" ", text)
    text = _NEWLINE_RUN_RE.sub("\n", text)
    text = text.translate(_FULLWIDTH_DIGITS)
    return text.strip()


def normalize(raw: RawMessage, max_body_chars: int = 50_000) -> NormalizedMessage:
    """
    Build the NormalizedMessage for *raw*.

    The clean body is truncated to *max_body_chars* to bound the cost of
    the regex passes on pathological input.
    """
    clean_body = clean_email_content(raw.body_content)
    if len(clean_body) > max_body_chars:
        logger.warning(
            "Message %s body truncated from %d to %d chars",
            raw.message_id,
            len(clean_body),
            max_body_chars,
        )
        clean_body = clean_body[:max_body_chars]

    return NormalizedMessage(
        subject=raw.subject.translate(_FULLWIDTH_DIGITS),
        sender=raw.sender,
        received_at=raw.received_at,
        message_id=raw.message_id,
        clean_body=clean_body,
    )
