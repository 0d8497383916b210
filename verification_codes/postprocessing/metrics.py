"""
Prometheus Metrics — extraction observability.

Exposes counters and a histogram for:
- Candidates found per pattern tier
- Candidates rejected per validity rule
- Messages skipped (malformed, already processed, too old)
- Ranked results returned
- Stage processing latency

Usage
-----
    from verification_codes.postprocessing.metrics import (
        record_candidate,
        record_rejection,
        timed_stage,
    )

    with timed_stage("rank"):
        results = rank_and_dedupe(...)

    record_candidate("high")
    record_rejection("Looks like a year")
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Candidates produced by the pattern matcher, labelled by tier.
CANDIDATES_FOUND: Counter = Counter(
    "verification_codes_candidates_found_total",
    "Code candidates found by the pattern matcher, by tier",
    ["tier"],
)

# Candidates dropped by the validity filter, labelled by rule.
CANDIDATES_REJECTED: Counter = Counter(
    "verification_codes_candidates_rejected_total",
    "Code candidates rejected by the validity filter, by reason",
    ["reason"],
)

# Messages that never reached the matcher.
MESSAGES_SKIPPED: Counter = Counter(
    "verification_codes_messages_skipped_total",
    "Messages skipped before extraction, by reason",
    ["reason"],
)

RESULTS_RETURNED: Counter = Counter(
    "verification_codes_results_returned_total",
    "Ranked codes returned to callers",
)

# Processing latency per stage (seconds).
STAGE_LATENCY: Histogram = Histogram(
    "verification_codes_stage_processing_seconds",
    "Processing time per extraction stage in seconds",
    ["stage"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_candidate(tier: str) -> None:
    """Increment the candidate counter for *tier*."""
    CANDIDATES_FOUND.labels(tier=tier).inc()


def record_rejection(reason: str) -> None:
    """Increment the rejection counter for *reason*."""
    CANDIDATES_REJECTED.labels(reason=reason).inc()


def record_skipped_message(reason: str) -> None:
    """Increment the skipped-message counter for *reason*."""
    MESSAGES_SKIPPED.labels(reason=reason).inc()


def record_results(count: int) -> None:
    if count > 0:
        RESULTS_RETURNED.inc(count)


@contextmanager
def timed_stage(stage: str) -> Generator[None, None, None]:
    """
    Context manager that records stage processing latency.

    Usage::

        with timed_stage("normalize"):
            normalized = normalize(raw)
    """
    with STAGE_LATENCY.labels(stage=stage).time():
        yield
