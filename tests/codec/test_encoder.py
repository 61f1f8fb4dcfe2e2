"""
Encoder Tests

Verifies the wire layout, the explicit error codes and the depth cap.
"""

from datetime import datetime, timezone

from activity_dna.codec import ActivityEncoder, encode
from activity_dna.codec.escaping import tokenize
from activity_dna.contracts.base import ErrorCode
from activity_dna.temporal.clock import LogicalClock


NOW = 1_700_000_000_000


def nested_list(levels):
    value = []
    for _ in range(levels - 1):
        value = [value]
    return value


# =============================================================================
# WIRE LAYOUT
# =============================================================================

class TestWireLayout:

    def test_scalar_record(self, encoder):
        result = encoder.encode("click", 42)
        assert result.is_success
        assert result.value == f"click::{NOW}::42::::1.1"

    def test_structured_context(self, encoder):
        result = encoder.encode("click", "button", {"page": "home"})
        assert result.value == f'click::{NOW}::button::{{"page":"home"}}::1.1'

    def test_bool_and_null_values(self, encoder):
        assert tokenize(encoder.encode("a", True).value)[2] == "true"
        assert tokenize(encoder.encode("a", False).value)[2] == "false"
        assert tokenize(encoder.encode("a", None).value)[2] == ""

    def test_float_value(self, encoder):
        assert tokenize(encoder.encode("a", 2.5).value)[2] == "2.5"

    def test_temporal_value_is_epoch_millis(self, encoder):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        fields = tokenize(encoder.encode("a", moment).value)
        assert fields[2] == "1704067200000"

    def test_structured_value_is_compact_json(self, encoder):
        fields = tokenize(encoder.encode("a", {"k": [1, 2]}).value)
        assert fields[2] == '{"k":[1,2]}'

    def test_text_context_passes_through(self, encoder):
        fields = tokenize(encoder.encode("a", 1, "free text").value)
        assert fields[3] == "free text"

    def test_delimiter_inside_value_is_escaped(self, encoder):
        encoded = encoder.encode("a", "x::y").value
        assert r"x\:y" in encoded
        assert tokenize(encoded)[2] == "x::y"

    def test_timestamp_override(self, encoder):
        assert encoder.encode("a", 1, timestamp=42).value == "a::42::1::::1.1"

    def test_custom_version(self, encoder):
        assert tokenize(encoder.encode("a", 1, version="2.0").value)[4] == "2.0"

    def test_same_clock_same_output(self):
        """Identical inputs and clock ticks give byte-identical text."""
        args = ("purchase", {"sku": "X1", "qty": 2}, {"cart": {"items": 3}})
        first = encode(*args, clock=LogicalClock.frozen(NOW))
        second = encode(*args, clock=LogicalClock.frozen(NOW))
        assert first.value == second.value

    def test_replay_clock_reproduces_live_session(self):
        live = LogicalClock.live(record=True)
        original = [encode("a", i, clock=live).value for i in range(3)]

        replay = LogicalClock.replay(live.recorded_ticks())
        replayed = [encode("a", i, clock=replay).value for i in range(3)]
        assert replayed == original


# =============================================================================
# ERROR CODES
# =============================================================================

class TestEncodeErrors:

    def test_empty_activity(self, encoder):
        result = encoder.encode("", 1)
        assert result.is_failure
        assert result.error.code == ErrorCode.INVALID_ACTIVITY

    def test_non_string_activity(self, encoder):
        assert encoder.encode(7, 1).error.code == ErrorCode.INVALID_ACTIVITY

    def test_unsupported_value_type(self, encoder):
        assert encoder.encode("a", object()).error.code == ErrorCode.SERIALIZATION_FAILED

    def test_non_finite_value(self, encoder):
        assert encoder.encode("a", float("nan")).error.code == ErrorCode.SERIALIZATION_FAILED
        assert encoder.encode("a", float("inf")).error.code == ErrorCode.SERIALIZATION_FAILED

    def test_non_finite_inside_context(self, encoder):
        result = encoder.encode("a", 1, {"x": float("inf")})
        assert result.error.code == ErrorCode.SERIALIZATION_FAILED

    def test_too_few_non_empty_fields(self, encoder):
        result = encoder.encode("a", None, None, "")
        assert result.error.code == ErrorCode.STRUCTURAL_ERROR

    def test_failures_never_raise(self, encoder):
        for bad in (object(), float("nan"), {1j}):
            assert encoder.encode("a", bad).is_failure


# =============================================================================
# DIAGNOSTICS
# =============================================================================

class TestEncodeDiagnostics:

    def test_depth_cap_truncates_and_reports(self, encoder, diagnostics):
        result = encoder.encode("a", nested_list(12))
        assert result.is_success
        assert diagnostics.has(ErrorCode.DEPTH_EXCEEDED)
        # Eleven nesting levels survive, the twelfth is replaced by "".
        assert tokenize(result.value)[2] == "[" * 11 + '""' + "]" * 11

    def test_shallow_value_is_not_truncated(self, encoder, diagnostics):
        encoder.encode("a", nested_list(5))
        assert not diagnostics.has(ErrorCode.DEPTH_EXCEEDED)

    def test_context_starts_one_level_deeper(self, diagnostics, clock, config):
        encoder = ActivityEncoder(
            config=config.with_overrides(max_encode_depth=2),
            clock=clock,
            diagnostics=diagnostics
        )
        encoder.encode("a", 1, {"b": {"c": {}}})
        assert diagnostics.has(ErrorCode.DEPTH_EXCEEDED)

    def test_unsupported_context_dropped(self, encoder, diagnostics):
        result = encoder.encode("a", 1, 12345)
        assert result.is_success
        assert tokenize(result.value) == ["a", str(NOW), "1", "", "1.1"]
        assert diagnostics.has(ErrorCode.CONTEXT_IGNORED)
