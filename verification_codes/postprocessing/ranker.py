"""
Deterministic Deduplicator & Ranker.

Collapses repeated codes across a batch with fixed rules:
1. Dedup key: (code, sender) by default, or code alone
2. Within a key the higher score wins
3. Scores closer than the tie tolerance → more recent message wins

Ordering is done in tie groups. Sorted by score, the best remaining
candidate opens a group holding every candidate less than the tolerance
below it; a group is ordered by received_at descending, then score, then
message_id and code. The next group starts below the tolerance, so a
candidate never trails one it beats by the tolerance or more.
"""
from collections import defaultdict
from typing import Dict, List, Tuple

from verification_codes.config.constants import (
    DEDUP_CODE,
    DEDUP_CODE_SENDER,
    DEDUP_MODES,
    SCORE_TIE_TOLERANCE,
)
from verification_codes.models.candidate import ScoredCandidate
from verification_codes.models.ranked_result import RankedResult


def dedup_key(item: ScoredCandidate, dedup_mode: str = DEDUP_CODE_SENDER) -> Tuple[str, ...]:
    if dedup_mode == DEDUP_CODE:
        return (item.code,)
    return (item.code, item.sender)


def _tie_group_key(item: ScoredCandidate) -> tuple:
    return (-item.received_at.timestamp(), -item.score, item.message_id, item.code)


def order_candidates(
    candidates: List[ScoredCandidate],
    tolerance: float = SCORE_TIE_TOLERANCE,
) -> List[ScoredCandidate]:
    """Return *candidates* best first, tie groups ordered by recency."""
    by_score = sorted(candidates, key=lambda i: (-i.score, i.message_id, i.code))

    ordered: List[ScoredCandidate] = []
    start = 0
    while start < len(by_score):
        head = by_score[start].score
        end = start + 1
        while end < len(by_score) and head - by_score[end].score < tolerance:
            end += 1
        ordered.extend(sorted(by_score[start:end], key=_tie_group_key))
        start = end
    return ordered


def rank_and_dedupe(
    candidates: List[ScoredCandidate],
    dedup_mode: str = DEDUP_CODE_SENDER,
    tie_tolerance: float = SCORE_TIE_TOLERANCE,
) -> List[RankedResult]:
    """
    Collapse duplicate codes and rank what is left.

    Args:
        candidates: Valid, scored candidates from any number of messages.
        dedup_mode: "code_sender" (default) or "code".
        tie_tolerance: Scores closer than this are considered equal.

    Returns:
        One RankedResult per dedup key, best first. Index 0 is the
        current code.
    """
    if dedup_mode not in DEDUP_MODES:
        raise ValueError(f"dedup_mode must be one of {DEDUP_MODES}, got '{dedup_mode}'")
    if not candidates:
        return []

    groups: Dict[Tuple[str, ...], List[ScoredCandidate]] = defaultdict(list)
    for item in candidates:
        groups[dedup_key(item, dedup_mode)].append(item)

    best = [order_candidates(items, tie_tolerance)[0] for items in groups.values()]
    ordered = order_candidates(best, tie_tolerance)

    return [
        RankedResult(
            code=item.code,
            sender=item.sender,
            subject=item.subject,
            received_at=item.received_at,
            message_id=item.message_id,
            score=item.score,
            priority=item.tier,
        )
        for item in ordered
    ]
