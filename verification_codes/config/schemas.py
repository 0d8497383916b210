"""
JSON Schemas for the engine's output.

Two schemas:
1. RANKED_RESULT_SCHEMA      — one ranked code, as handed to callers
2. EXTRACTION_OUTPUT_SCHEMA  — full batch report (results + diagnostics)
"""
from verification_codes.config.constants import DEDUP_MODES, TIERS

# =============================================================================
# 1. Ranked result
# =============================================================================
RANKED_RESULT_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["code", "sender", "subject", "received_at", "score", "priority", "message_id"],
    "properties": {
        "code": {
            "type": "string",
            "pattern": "^[A-Za-z0-9]{4,8}$",
            "description": "Extracted one-time code",
        },
        "sender": {"type": "string"},
        "subject": {"type": "string"},
        "received_at": {
            "type": "string",
            "description": "ISO-8601 reception timestamp of the winning message",
        },
        "score": {"type": "number", "minimum": 0},
        "priority": {
            "type": "string",
            "enum": list(TIERS),
            "description": "Tier of the pattern that produced the winning occurrence",
        },
        "message_id": {"type": "string", "minLength": 1},
    },
}


# =============================================================================
# 2. Batch report
# =============================================================================
EXTRACTION_OUTPUT_SCHEMA: dict = {
    "type": "object",
    "required": ["engine_version", "results", "messages", "diagnostics", "processing_metadata"],
    "properties": {
        "engine_version": {
            "type": "object",
            "required": ["profile_name", "patternsetversion", "keywordsetversion"],
        },
        "results": {
            "type": "array",
            "items": RANKED_RESULT_SCHEMA,
        },
        "messages": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["index", "message_id", "status", "candidates_found", "valid_candidates", "best_code"],
                "properties": {
                    "index": {"type": "integer", "minimum": 0},
                    "message_id": {"type": ["string", "null"]},
                    "status": {"type": "string", "enum": ["processed", "skipped"]},
                    "reason": {"type": "string"},
                    "candidates_found": {"type": "integer", "minimum": 0},
                    "valid_candidates": {"type": "integer", "minimum": 0},
                    "best_code": {"type": ["string", "null"]},
                    "rejections": {
                        "type": "object",
                        "additionalProperties": {"type": "integer"},
                    },
                },
            },
        },
        "diagnostics": {
            "type": "object",
            "required": ["warnings", "skipped_messages", "dedup_mode"],
            "properties": {
                "warnings": {"type": "array", "items": {"type": "string"}},
                "skipped_messages": {"type": "integer", "minimum": 0},
                "dedup_mode": {"type": "string", "enum": list(DEDUP_MODES)},
            },
        },
        "processing_metadata": {
            "type": "object",
            "required": [
                "extraction_duration_ms",
                "messages_received",
                "messages_processed",
                "candidates_found",
                "candidates_valid",
                "results_returned",
            ],
            "properties": {
                "extraction_duration_ms": {"type": "integer", "minimum": 0},
                "messages_received": {"type": "integer", "minimum": 0},
                "messages_processed": {"type": "integer", "minimum": 0},
                "candidates_found": {"type": "integer", "minimum": 0},
                "candidates_valid": {"type": "integer", "minimum": 0},
                "results_returned": {"type": "integer", "minimum": 0},
                "score_mean": {"type": "number"},
                "score_max": {"type": "number"},
            },
        },
    },
}
