"""Tests for engine invocation tracing."""

from datetime import date
from decimal import Decimal

from cashflow_engines.tracer import compute_input_fingerprint, traced_engine


@traced_engine("sample", "2.1", fingerprint_fields=("amount", "day"))
def _sample(*, amount, day):
    return amount * 2


class TestFingerprint:
    """Tests for input fingerprints."""

    def test_deterministic(self):
        kwargs = {"amount": Decimal("1.50"), "day": date(2024, 3, 1)}

        assert compute_input_fingerprint(("amount", "day"), kwargs) == compute_input_fingerprint(
            ("amount", "day"), dict(kwargs)
        )

    def test_sensitive_to_values(self):
        a = compute_input_fingerprint(("amount",), {"amount": Decimal("1")})
        b = compute_input_fingerprint(("amount",), {"amount": Decimal("2")})

        assert a != b

    def test_missing_field_recorded_as_null(self):
        assert compute_input_fingerprint(("x",), {}) == compute_input_fingerprint(("x",), {"x": None})


class TestTracedEngine:
    """Tests for the decorator."""

    def test_result_passed_through(self):
        assert _sample(amount=Decimal("3"), day=date(2024, 3, 1)) == Decimal("6")

    def test_trace_record(self, captured_logs):
        _sample(amount=Decimal("3"), day=date(2024, 3, 1))

        trace = [r for r in captured_logs() if r["message"] == "CASHFLOW_ENGINE_TRACE"][-1]
        assert trace["engine_name"] == "sample"
        assert trace["engine_version"] == "2.1"
        assert trace["function"] == "_sample"
        assert trace["duration_ms"] >= 0
