"""
Extraction Orchestrator — main entry point of the engine.

Executes the 5-stage pipeline over a batch of messages:
    1. Adaptation & filtering (malformed / already processed / too old)
    2. Normalization + tiered pattern scan
    3. Context scoring
    4. Validity filtering
    5. Deduplication & ranking

The engine is pure: messages are never mutated and the same batch always
yields the same ranked list, in the same order.
"""
import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

from verification_codes.config.profile import ExtractionProfile, default_profile
from verification_codes.extraction.adapter import MalformedMessageError, adapt_message
from verification_codes.extraction.pipeline import extract_message_candidates
from verification_codes.models.candidate import ScoredCandidate
from verification_codes.models.engine_version import EngineVersion
from verification_codes.models.outcome import MessageOutcome
from verification_codes.models.ranked_result import RankedResult
from verification_codes.postprocessing.context_scorer import ContextScorer
from verification_codes.postprocessing.metrics import (
    record_candidate,
    record_rejection,
    record_results,
    record_skipped_message,
    timed_stage,
)
from verification_codes.postprocessing.output_builder import build_extraction_output
from verification_codes.postprocessing.ranker import rank_and_dedupe
from verification_codes.postprocessing.validity_filter import is_valid

logger = logging.getLogger(__name__)


def _check_batch(messages: Any) -> None:
    if not isinstance(messages, (list, tuple)):
        raise TypeError(
            f"messages must be a list or tuple of message records, got {type(messages).__name__}"
        )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _process_message(
    index: int,
    record: Any,
    profile: ExtractionProfile,
    scorer: ContextScorer,
    skip_ids: frozenset,
    received_after: Optional[datetime],
) -> MessageOutcome:
    """Run stages 1-4 on one message record."""
    # Stage 1: Adaptation & filtering
    try:
        message = adapt_message(record)
    except MalformedMessageError as e:
        logger.warning("Skipping message #%d: %s", index, e)
        record_skipped_message("malformed")
        return MessageOutcome(index=index, message_id=e.message_id, status="skipped", reason=e.reason)

    if message.message_id in skip_ids:
        logger.debug("Skipping already processed message %s", message.message_id)
        record_skipped_message("already_processed")
        return MessageOutcome(
            index=index, message_id=message.message_id, status="skipped", reason="already processed"
        )

    if received_after is not None and message.received_at < received_after:
        logger.debug("Skipping message %s received before %s", message.message_id, received_after)
        record_skipped_message("too_old")
        return MessageOutcome(
            index=index, message_id=message.message_id, status="skipped", reason="received too early"
        )

    # Stage 2: Normalization + pattern scan
    with timed_stage("match"):
        normalized, candidates = extract_message_candidates(message, profile)
    full_content = normalized.full_content

    outcome = MessageOutcome(
        index=index,
        message_id=message.message_id,
        candidates_found=len(candidates),
    )
    rejections: Counter = Counter()

    for candidate in candidates:
        record_candidate(candidate.tier)

        # Stage 3: Context scoring
        scorer.score(candidate, full_content, normalized.subject)

        # Stage 4: Validity filtering
        verdict = is_valid(candidate, full_content, profile)
        if not verdict.valid:
            rejections[verdict.reason] += 1
            record_rejection(verdict.reason)
            continue

        outcome.accepted.append(
            ScoredCandidate(
                candidate=candidate,
                sender=normalized.sender,
                subject=normalized.subject,
                received_at=normalized.received_at,
                message_id=normalized.message_id,
            )
        )

    outcome.rejections = dict(rejections)
    logger.debug(
        "Message %s: %d candidates, %d valid",
        outcome.message_id,
        outcome.candidates_found,
        len(outcome.accepted),
    )
    return outcome


def _run_batch(
    messages: Sequence[Any],
    profile: ExtractionProfile,
    scorer: Optional[ContextScorer],
    skip_message_ids: Optional[Iterable[str]],
    received_after: Optional[datetime],
) -> List[MessageOutcome]:
    if scorer is None:
        scorer = ContextScorer(profile=profile)
    skip_ids = frozenset(str(i) for i in skip_message_ids) if skip_message_ids else frozenset()
    if received_after is not None:
        received_after = _as_utc(received_after)

    return [
        _process_message(index, record, profile, scorer, skip_ids, received_after)
        for index, record in enumerate(messages)
    ]


def _rank(outcomes: List[MessageOutcome], profile: ExtractionProfile) -> List[RankedResult]:
    accepted = [item for outcome in outcomes for item in outcome.accepted]
    with timed_stage("rank"):
        results = rank_and_dedupe(accepted, profile.dedup_mode, profile.tie_tolerance)
    record_results(len(results))
    return results


def extract(
    messages: Sequence[Any],
    profile: Optional[ExtractionProfile] = None,
    scorer: Optional[ContextScorer] = None,
    skip_message_ids: Optional[Iterable[str]] = None,
    received_after: Optional[datetime] = None,
) -> List[RankedResult]:
    """
    Extract, score, filter, deduplicate and rank verification codes.

    Args:
        messages: List of message records (RawMessage or provider mappings
                  in Outlook REST, Graph or engine-native key spelling).
        profile: ExtractionProfile. Defaults to ``default_profile()``.
        scorer: ContextScorer instance. Defaults to one built on *profile*.
        skip_message_ids: Ids of messages already processed by the caller.
        received_after: Ignore messages received before this instant
                        (naive values are read as UTC).

    Returns:
        Ranked, deduplicated results. Index 0 is the current code; an
        empty list means no plausible code was found.

    Raises:
        TypeError: If *messages* is not a list or tuple.
    """
    _check_batch(messages)
    if profile is None:
        profile = default_profile()

    outcomes = _run_batch(messages, profile, scorer, skip_message_ids, received_after)
    return _rank(outcomes, profile)


def latest_code(
    messages: Sequence[Any],
    profile: Optional[ExtractionProfile] = None,
    **kwargs,
) -> Optional[RankedResult]:
    """Shortcut for the top-ranked result of ``extract``, or None."""
    results = extract(messages, profile=profile, **kwargs)
    return results[0] if results else None


def extract_with_report(
    messages: Sequence[Any],
    profile: Optional[ExtractionProfile] = None,
    scorer: Optional[ContextScorer] = None,
    skip_message_ids: Optional[Iterable[str]] = None,
    received_after: Optional[datetime] = None,
) -> dict:
    """
    Same as ``extract`` but returns the full batch report.

    Returns:
        Dict conforming to EXTRACTION_OUTPUT_SCHEMA, with the ranked
        results, per-message summaries, diagnostics and timing.
    """
    start_time = time.monotonic()

    _check_batch(messages)
    if profile is None:
        profile = default_profile()

    outcomes = _run_batch(messages, profile, scorer, skip_message_ids, received_after)
    results = _rank(outcomes, profile)

    elapsed_ms = int((time.monotonic() - start_time) * 1000)

    return build_extraction_output(
        results,
        outcomes,
        EngineVersion(profile_name=profile.name),
        dedup_mode=profile.dedup_mode,
        elapsed_ms=elapsed_ms,
    )
