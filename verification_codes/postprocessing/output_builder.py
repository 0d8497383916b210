"""
Output Normalization — internal batch state → EXTRACTION_OUTPUT_SCHEMA.

Converts ranked results and per-message outcomes into the final report
format and validates it against the schema.
"""
import logging
from typing import List

import numpy as np
from jsonschema import ValidationError, validate

from verification_codes.config.schemas import EXTRACTION_OUTPUT_SCHEMA
from verification_codes.models.engine_version import EngineVersion
from verification_codes.models.outcome import MessageOutcome
from verification_codes.models.ranked_result import RankedResult

logger = logging.getLogger(__name__)


def _score_stats(results: List[RankedResult]) -> dict:
    if not results:
        return {"score_mean": 0.0, "score_max": 0.0}
    scores = np.array([r.score for r in results], dtype=float)
    return {
        "score_mean": round(float(np.mean(scores)), 4),
        "score_max": round(float(np.max(scores)), 4),
    }


def build_extraction_output(
    results: List[RankedResult],
    outcomes: List[MessageOutcome],
    engine_version: EngineVersion,
    dedup_mode: str,
    elapsed_ms: int = 0,
) -> dict:
    """
    Build the batch report.

    Args:
        results: Ranked results, best first.
        outcomes: One MessageOutcome per input message, in input order.
        engine_version: Version contract of the profile used.
        dedup_mode: Dedup mode the ranker ran with.
        elapsed_ms: Wall time of the extraction.

    Returns:
        Report dict conforming to EXTRACTION_OUTPUT_SCHEMA.
    """
    skipped = [o for o in outcomes if o.status == "skipped"]
    warnings = [
        f"Message #{o.index} ({o.message_id or 'no id'}) skipped: {o.reason}"
        for o in skipped
    ]

    metadata = {
        "extraction_duration_ms": max(0, elapsed_ms),
        "messages_received": len(outcomes),
        "messages_processed": len(outcomes) - len(skipped),
        "candidates_found": sum(o.candidates_found for o in outcomes),
        "candidates_valid": sum(len(o.accepted) for o in outcomes),
        "results_returned": len(results),
    }
    metadata.update(_score_stats(results))

    return {
        "engine_version": engine_version.to_dict(),
        "results": [r.to_dict() for r in results],
        "messages": [o.to_dict() for o in outcomes],
        "diagnostics": {
            "warnings": warnings,
            "skipped_messages": len(skipped),
            "dedup_mode": dedup_mode,
        },
        "processing_metadata": metadata,
    }


def validate_extraction_output(report: dict) -> List[str]:
    """
    Check *report* against EXTRACTION_OUTPUT_SCHEMA.

    Returns:
        List of schema errors (empty when the report is valid).
    """
    try:
        validate(instance=report, schema=EXTRACTION_OUTPUT_SCHEMA)
    except ValidationError as e:
        logger.error("Extraction report failed schema validation: %s", e.message)
        return [f"Schema violation: {e.message}"]
    return []
