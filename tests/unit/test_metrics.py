"""
Unit tests for verification_codes.postprocessing.metrics.
"""
from __future__ import annotations

import pytest
from prometheus_client import REGISTRY


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsModule:
    def test_all_public_helpers_present(self):
        from verification_codes.postprocessing import metrics as m
        for name in (
            "record_candidate",
            "record_rejection",
            "record_skipped_message",
            "record_results",
            "timed_stage",
            "CANDIDATES_FOUND",
            "CANDIDATES_REJECTED",
            "MESSAGES_SKIPPED",
            "RESULTS_RETURNED",
            "STAGE_LATENCY",
        ):
            assert hasattr(m, name), f"Missing public symbol: {name}"


class TestMetricHelpers:
    """Helpers increment the underlying prometheus metrics."""

    def test_record_candidate(self):
        from verification_codes.postprocessing.metrics import record_candidate
        name = "verification_codes_candidates_found_total"
        before = _sample(name, {"tier": "high"})
        record_candidate("high")
        assert _sample(name, {"tier": "high"}) == before + 1

    def test_record_rejection(self):
        from verification_codes.postprocessing.metrics import record_rejection
        name = "verification_codes_candidates_rejected_total"
        before = _sample(name, {"reason": "Looks like a year"})
        record_rejection("Looks like a year")
        assert _sample(name, {"reason": "Looks like a year"}) == before + 1

    def test_record_skipped_message(self):
        from verification_codes.postprocessing.metrics import record_skipped_message
        name = "verification_codes_messages_skipped_total"
        before = _sample(name, {"reason": "malformed"})
        record_skipped_message("malformed")
        assert _sample(name, {"reason": "malformed"}) == before + 1

    def test_record_results_ignores_zero(self):
        from verification_codes.postprocessing.metrics import record_results
        name = "verification_codes_results_returned_total"
        before = _sample(name)
        record_results(0)
        record_results(2)
        assert _sample(name) == before + 2

    def test_timed_stage_context_manager(self):
        from verification_codes.postprocessing.metrics import timed_stage
        name = "verification_codes_stage_processing_seconds_count"
        before = _sample(name, {"stage": "unit_test"})
        with timed_stage("unit_test"):
            x = 1 + 1  # noqa: F841
        assert _sample(name, {"stage": "unit_test"}) == before + 1

    def test_timed_stage_does_not_suppress_exceptions(self):
        from verification_codes.postprocessing.metrics import timed_stage
        with pytest.raises(ValueError, match="test error"):
            with timed_stage("unit_test_error"):
                raise ValueError("test error")
