"""
Message Extraction Pipeline — raw record to tier-tagged candidates.

Pipeline:
    1. Adapt provider record → RawMessage (key spellings, validation)
    2. Normalize body (HTML stripping, whitespace)
    3. Tiered pattern scan over subject + clean body
"""
from typing import Any, List, Optional, Tuple

from verification_codes.config.profile import ExtractionProfile, default_profile
from verification_codes.extraction.adapter import adapt_message
from verification_codes.extraction.normalizer import normalize
from verification_codes.extraction.pattern_matcher import find_candidates
from verification_codes.models.candidate import Candidate
from verification_codes.models.message import NormalizedMessage


def extract_message_candidates(
    raw: Any,
    profile: Optional[ExtractionProfile] = None,
) -> Tuple[NormalizedMessage, List[Candidate]]:
    """
    Run adapter, normalizer and matcher on a single message.

    Args:
        raw: A RawMessage, or a provider message mapping.
        profile: Extraction profile. Defaults to ``default_profile()``.

    Returns:
        (normalized message, unscored candidates in discovery order).

    Raises:
        MalformedMessageError: If *raw* cannot be adapted.
    """
    if profile is None:
        profile = default_profile()

    message = adapt_message(raw)
    normalized = normalize(message, max_body_chars=profile.max_body_chars)
    candidates = find_candidates(normalized, profile, normalized.full_content)
    return normalized, candidates
