"""
Context Injector Tests

Precedence, lowest to highest: existing context, additional keys,
the _metadata block.
"""

from activity_dna.codec import decode, encode
from activity_dna.contracts.base import ErrorCode
from activity_dna.transforms import (
    ContextInjector, InjectionOptions, METADATA_KEY, RAW_CONTEXT_KEY
)


EVENT_TIME = 1_600_000_000_000
NOW = 1_700_000_000_000


def event(context):
    return encode("purchase", 19.99, context, timestamp=EVENT_TIME).value


def injected_context(injector, text, additional=None, options=None):
    result = injector.inject(text, additional, options)
    assert result.is_success
    return decode(result.value).value


class TestContextInjector:

    def test_additional_keys_override_existing(self, clock):
        record = injected_context(
            ContextInjector(clock=clock), event({"a": 1, "b": 2}), {"b": 3, "c": 4}
        )
        assert record.context["a"] == 1
        assert record.context["b"] == 3
        assert record.context["c"] == 4

    def test_metadata_block(self, clock):
        record = injected_context(ContextInjector(clock=clock), event({"a": 1}))
        assert record.context[METADATA_KEY] == {
            "injected": NOW,
            "source": "activity_dna",
            "version": "1.1",
        }
        assert list(record.context)[-1] == METADATA_KEY

    def test_metadata_cannot_be_overridden(self, clock):
        record = injected_context(
            ContextInjector(clock=clock), event({}), {METADATA_KEY: "forged"}
        )
        assert record.context[METADATA_KEY]["source"] == "activity_dna"

    def test_source_option(self, clock):
        record = injected_context(
            ContextInjector(clock=clock), event(None), {"x": 1}, InjectionOptions(source="crm")
        )
        assert record.context[METADATA_KEY]["source"] == "crm"

    def test_raw_text_context_is_preserved(self, clock):
        record = injected_context(ContextInjector(clock=clock), event("legacy notes"), {"x": 1})
        assert record.context[RAW_CONTEXT_KEY] == "legacy notes"
        assert record.context["x"] == 1

    def test_record_fields_kept(self, clock):
        record = injected_context(ContextInjector(clock=clock), event({"a": 1}))
        assert record.activity == "purchase"
        assert record.value == 19.99
        assert record.timestamp == EVENT_TIME

    def test_non_mapping_additional_rejected(self, clock):
        result = ContextInjector(clock=clock).inject(event({}), ["not", "a", "map"])
        assert result.error.code == ErrorCode.SERIALIZATION_FAILED

    def test_decode_failure_propagates(self, clock):
        result = ContextInjector(clock=clock).inject("::1::x", {"a": 1})
        assert result.error.code == ErrorCode.INVALID_ACTIVITY
