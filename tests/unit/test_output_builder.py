"""
Unit tests for batch report construction and schema validation.
"""
from datetime import datetime, timezone

import pytest

from verification_codes.models.candidate import Candidate, ScoredCandidate
from verification_codes.models.outcome import MessageOutcome
from verification_codes.models.ranked_result import RankedResult
from verification_codes.postprocessing.output_builder import (
    build_extraction_output,
    validate_extraction_output,
)

T0 = datetime(2025, 10, 29, 22, 0, tzinfo=timezone.utc)


@pytest.fixture
def results():
    return [
        RankedResult("680616", "Perplexity", "Final Verification Code", T0, "msg-5", 9.0, "high"),
        RankedResult("5678", "Perplexity", "Welcome to Comet", T0, "msg-3", 7.0, "low"),
    ]


@pytest.fixture
def outcomes():
    accepted = ScoredCandidate(
        candidate=Candidate(code="680616", tier="high", position=10, score=9.0),
        sender="Perplexity",
        subject="Final Verification Code",
        received_at=T0,
        message_id="msg-5",
    )
    return [
        MessageOutcome(index=0, message_id=None, status="skipped", reason="missing message id"),
        MessageOutcome(
            index=1,
            message_id="msg-5",
            candidates_found=3,
            accepted=[accepted],
            rejections={"Looks like a year": 2},
        ),
    ]


class TestBuildExtractionOutput:
    """Tests for the report layout."""

    def test_sections_present(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender", 3)
        assert set(report) == {
            "engine_version", "results", "messages", "diagnostics", "processing_metadata",
        }

    def test_results_serialized_in_order(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender")
        assert [r["code"] for r in report["results"]] == ["680616", "5678"]
        assert report["results"][0]["received_at"] == "2025-10-29T22:00:00+00:00"
        assert report["results"][0]["priority"] == "high"

    def test_message_summaries(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender")
        skipped, processed = report["messages"]
        assert skipped["status"] == "skipped"
        assert skipped["best_code"] is None
        assert processed["best_code"] == "680616"
        assert processed["valid_candidates"] == 1
        assert processed["rejections"] == {"Looks like a year": 2}

    def test_diagnostics(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code")
        diag = report["diagnostics"]
        assert diag["skipped_messages"] == 1
        assert diag["dedup_mode"] == "code"
        assert "missing message id" in diag["warnings"][0]

    def test_processing_metadata(self, results, outcomes, engine_version):
        meta = build_extraction_output(results, outcomes, engine_version, "code_sender", 12)[
            "processing_metadata"
        ]
        assert meta["extraction_duration_ms"] == 12
        assert meta["messages_received"] == 2
        assert meta["messages_processed"] == 1
        assert meta["candidates_found"] == 3
        assert meta["candidates_valid"] == 1
        assert meta["results_returned"] == 2
        assert meta["score_mean"] == pytest.approx(8.0)
        assert meta["score_max"] == pytest.approx(9.0)

    def test_empty_batch(self, engine_version):
        report = build_extraction_output([], [], engine_version, "code_sender")
        assert report["results"] == []
        assert report["processing_metadata"]["score_mean"] == 0.0
        assert validate_extraction_output(report) == []


class TestValidateExtractionOutput:
    def test_valid_report(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender")
        assert validate_extraction_output(report) == []

    def test_bad_priority_rejected(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender")
        report["results"][0]["priority"] = "urgent"
        errors = validate_extraction_output(report)
        assert errors and errors[0].startswith("Schema violation")

    def test_missing_section_rejected(self, results, outcomes, engine_version):
        report = build_extraction_output(results, outcomes, engine_version, "code_sender")
        del report["diagnostics"]
        assert validate_extraction_output(report)
