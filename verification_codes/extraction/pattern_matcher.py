"""
Candidate Pattern Matcher — tiered regex scan over subject + body.

All tiers are evaluated (high -> medium -> low) so later stages see every
signal. The same (tier, code, position) triple is emitted once; the same
digits at the same position may come back once per tier and are collapsed
by the ranker.
"""
import logging
import re
from typing import List, Optional, Set, Tuple

from verification_codes.config.profile import ExtractionProfile
from verification_codes.models.candidate import Candidate
from verification_codes.models.message import NormalizedMessage

logger = logging.getLogger(__name__)

_DIGIT_CODE_RE = re.compile(r"^[0-9]{4,8}$")
_ALNUM_CODE_RE = re.compile(r"^(?=.*[0-9])[A-Z0-9]{4,8}$")


def context_window(full_content: str, position: int, code: str, radius: int) -> str:
    """Text from *radius* chars before the code to *radius* chars after it."""
    start = max(0, position - radius)
    end = min(len(full_content), position + len(code) + radius)
    return full_content[start:end]


def _code_from_match(match: "re.Match[str]") -> Tuple[str, int]:
    # Patterns with a capture group yield group 1; bare patterns the whole match.
    if match.re.groups and match.group(1) is not None:
        return match.group(1), match.start(1)
    return match.group(0), match.start()


def _accept_code(code: str, profile: ExtractionProfile) -> bool:
    if _DIGIT_CODE_RE.match(code):
        return True
    if profile.alphanumeric and _ALNUM_CODE_RE.match(code):
        return code.lower() not in profile.alphanumeric_blacklist
    return False


def find_candidates(
    msg: NormalizedMessage,
    profile: ExtractionProfile,
    full_content: Optional[str] = None,
) -> List[Candidate]:
    """
    Apply every tiered pattern of *profile* to the message text.

    Args:
        msg: Normalized message.
        profile: Extraction profile providing the pattern rules.
        full_content: Pre-computed ``msg.full_content`` (optional).

    Returns:
        Unscored, tier-tagged Candidates in discovery order.
    """
    text = msg.full_content if full_content is None else full_content
    candidates: List[Candidate] = []
    seen: Set[Tuple[str, str, int]] = set()

    for rule in profile.active_rules():
        for match in rule.compiled.finditer(text):
            code, position = _code_from_match(match)
            if not _accept_code(code, profile):
                logger.debug("Discarding malformed capture '%s' from %s", code, rule.pattern)
                continue

            key = (rule.tier, code, position)
            if key in seen:
                continue
            seen.add(key)

            candidates.append(
                Candidate(
                    code=code,
                    tier=rule.tier,
                    position=position,
                    context_window=context_window(text, position, code, profile.context_window),
                    pattern=rule.pattern,
                )
            )

    logger.debug("Message %s: %d raw candidates", msg.message_id, len(candidates))
    return candidates
