"""
Decoder Tests

Hard structural problems fail with an ErrorCode; malformed optional
fields degrade and are reported as diagnostics.
"""

import re

import pytest
from hypothesis import given, strategies as st

from activity_dna.codec import ActivityDecoder, decode, encode
from activity_dna.contracts.base import ErrorCode
from activity_dna.contracts.records import EnvelopeStatus
from activity_dna.temporal.clock import LogicalClock


NOW = 1_700_000_000_000

_NUMERIC = re.compile(r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def looks_coercible(text):
    """Text the decoder would turn into a number, boolean or JSON."""
    return (
        _NUMERIC.fullmatch(text) is not None
        or text in ("true", "false")
        or (text[:1] in "{[" and text[-1:] in "}]" and text != "")
    )


# =============================================================================
# STRUCTURAL FAILURES
# =============================================================================

class TestStructuralFailures:

    @pytest.mark.parametrize("text", [None, 42, "", "abc", "a::b"])
    def test_too_short(self, text):
        result = decode(text)
        assert result.is_failure
        assert result.error.code == ErrorCode.TOO_SHORT

    def test_too_few_fields(self):
        assert decode("click::1700").error.code == ErrorCode.TOO_SHORT

    def test_empty_activity(self):
        assert decode("::1700::v").error.code == ErrorCode.INVALID_ACTIVITY


# =============================================================================
# FIELD PARSING
# =============================================================================

class TestFieldParsing:

    def test_minimal_record(self):
        record = decode("click::1700::v").value
        assert record.activity == "click"
        assert record.timestamp == 1700
        assert record.value == "v"
        assert record.context is None
        assert record.version == "1.1"
        assert record.is_current_version

    @pytest.mark.parametrize("raw,expected", [
        ("42", 42),
        ("-7", -7),
        ("4.5", 4.5),
        ("1e3", 1000.0),
        ("true", True),
        ("false", False),
        ("[1,2]", [1, 2]),
        ('{"a":1}', {"a": 1}),
        ("{broken", "{broken"),
        ("[NaN]", "[NaN]"),
        ("NaN", "NaN"),
        ("hello", "hello"),
    ])
    def test_value_coercion(self, raw, expected):
        assert decode(f"x::1::{raw}").value.value == expected

    def test_non_integer_timestamp_degrades(self, diagnostics):
        result = ActivityDecoder(diagnostics).decode("click::yesterday::5")
        assert result.is_success
        assert result.value.timestamp is None
        assert diagnostics.has(ErrorCode.INVALID_TIMESTAMP)

    def test_float_timestamp_is_not_an_integer(self):
        assert decode("click::1700.5::5").value.timestamp is None

    def test_raw_text_context(self):
        record = decode("x::1::v::not json").value
        assert record.context == "not json"
        assert not record.has_structured_context

    def test_json_array_context_stays_raw(self):
        assert decode("x::1::v::[1,2]").value.context == "[1,2]"

    def test_object_context(self):
        record = decode('x::1::v::{"page":"home"}').value
        assert record.context == {"page": "home"}
        assert record.envelope == EnvelopeStatus.NONE

    def test_legacy_version(self):
        record = decode("x::1::v::::1.0").value
        assert record.context is None
        assert record.version == "1.0"
        assert not record.is_current_version

    def test_extra_fields_ignored_with_diagnostic(self, diagnostics):
        result = ActivityDecoder(diagnostics).decode("x::1::v::{}::1.1::extra")
        assert result.is_success
        assert result.value.version == "1.1"
        assert diagnostics.has(ErrorCode.EXTRA_FIELDS)

    def test_escaped_fields_unescaped(self):
        record = decode(r"a\:b::1::c\.").value
        assert record.activity == "a::b"
        assert record.value == "c:"


# =============================================================================
# ROUND TRIP PROPERTIES
# =============================================================================

@given(
    activity=st.text(min_size=1),
    value=st.text().filter(lambda t: not looks_coercible(t)),
)
def test_text_round_trip(activity, value):
    encoded = encode(activity, value, clock=LogicalClock.frozen(NOW)).value
    record = decode(encoded).value
    assert record.activity == activity
    assert record.timestamp == NOW
    assert record.value == value
    assert record.version == "1.1"


@given(st.integers() | st.floats(allow_nan=False, allow_infinity=False))
def test_number_round_trip(number):
    encoded = encode("n", number, clock=LogicalClock.frozen(NOW)).value
    decoded = decode(encoded).value.value
    assert decoded == number
    assert type(decoded) is type(number)


@given(st.dictionaries(
    st.text(max_size=8),
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    max_size=8
))
def test_context_round_trip(context):
    encoded = encode("c", 1, context, clock=LogicalClock.frozen(NOW)).value
    assert decode(encoded).value.context == context
