"""
Activity Encoder

Turns (activity, value, context, version) into the delimited wire text

    activity::timestamp::value::context::version

BOUNDARY ENFORCEMENT:
- Pure apart from one clock read for the timestamp
- Never raises for bad input; returns Result.failure with an ErrorCode
- Depth-capped recursion, so cyclic or hostile nesting always terminates
"""

from __future__ import annotations
from collections.abc import Mapping
from numbers import Integral
from typing import Any, Optional
import math

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.base import CURRENT_VERSION, ErrorCode, Result
from ..contracts.values import ValueKind, UnsupportedValue, kind_of, epoch_millis
from ..domain.serialization import compact_dumps
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS
from ..temporal.clock import LogicalClock
from . import envelope
from .escaping import join_fields


COMPONENT = "codec.encoder"

# Replacement for a subtree cut off by the depth cap.
TRUNCATED = ""


class ActivityEncoder:
    """
    Encode activity records into wire text.

    One encoder may be reused for any number of records; it keeps no
    state between calls other than its injected collaborators.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[LogicalClock] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self._config = config or DEFAULT_CONFIG
        self._clock = clock or LogicalClock.live()
        self._diagnostics = diagnostics or NULL_DIAGNOSTICS

    def encode(
        self,
        activity: Any,
        value: Any,
        context: Any = None,
        version: Optional[str] = CURRENT_VERSION,
        *,
        timestamp: Optional[int] = None
    ) -> Result:
        """
        Encode one record.

        timestamp overrides the clock; transforms use it to keep the
        original event time when they rewrite a record.
        """
        if not isinstance(activity, str) or not activity:
            return Result.fail(
                ErrorCode.INVALID_ACTIVITY,
                "Activity must be a non-empty string",
                received=type(activity).__name__
            )

        if timestamp is None:
            timestamp = self._clock.now_ms()

        try:
            value_text = self._encode_value(value)
            context_text = self._encode_context(context, timestamp)
        except UnsupportedValue as e:
            return Result.fail(ErrorCode.SERIALIZATION_FAILED, str(e), activity=activity)
        except (TypeError, ValueError) as e:
            return Result.fail(
                ErrorCode.SERIALIZATION_FAILED,
                f"Structured serialization failed: {e}",
                activity=activity
            )

        version_text = CURRENT_VERSION if version is None else str(version)
        fields = [activity, str(int(timestamp)), value_text, context_text, version_text]

        non_empty = sum(1 for f in fields if f)
        if non_empty < 3:
            return Result.fail(
                ErrorCode.STRUCTURAL_ERROR,
                "Encoded record needs at least 3 non-empty fields",
                non_empty=non_empty
            )

        return Result.success(join_fields(fields))

    # =========================================================================
    # VALUE ENCODING
    # =========================================================================

    def _encode_value(self, value: Any) -> str:
        """Render the value field (before escaping)."""
        kind = kind_of(value)
        if kind is ValueKind.NULL:
            return ""
        if kind is ValueKind.BOOL:
            return "true" if value else "false"
        if kind is ValueKind.NUMBER:
            return _number_text(value)
        if kind is ValueKind.TEXT:
            return value
        if kind is ValueKind.TEMPORAL:
            return str(epoch_millis(value))
        # LIST / MAP
        return compact_dumps(self._structure(value, 0))

    def _encode_context(self, context: Any, timestamp: int) -> str:
        if context is None:
            return ""
        if isinstance(context, str):
            return context
        if not isinstance(context, Mapping):
            self._diagnostics.emit(
                ErrorCode.CONTEXT_IGNORED,
                "Context must be a mapping or text; dropped",
                COMPONENT,
                received=type(context).__name__
            )
            return ""

        structure = self._structure(context, 1)
        serialized = compact_dumps(structure)
        if len(serialized) > self._config.envelope_threshold:
            return compact_dumps(envelope.wrap(structure, serialized, timestamp))
        return serialized

    def _structure(self, value: Any, depth: int) -> Any:
        """
        Convert a value into JSON-ready data, capping container depth.

        A container deeper than max_encode_depth becomes TRUNCATED and
        a DEPTH_EXCEEDED diagnostic is emitted.
        """
        kind = kind_of(value)
        if kind in (ValueKind.NULL, ValueKind.BOOL, ValueKind.TEXT):
            return value
        if kind is ValueKind.NUMBER:
            return _json_number(value)
        if kind is ValueKind.TEMPORAL:
            return epoch_millis(value)

        if depth > self._config.max_encode_depth:
            self._diagnostics.emit(
                ErrorCode.DEPTH_EXCEEDED,
                "Maximum context depth exceeded; subtree dropped",
                COMPONENT,
                depth=depth,
                limit=self._config.max_encode_depth
            )
            return TRUNCATED

        if kind is ValueKind.MAP:
            return {
                (k if isinstance(k, str) else str(k)): self._structure(v, depth + 1)
                for k, v in value.items()
            }
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=repr)
        return [self._structure(item, depth + 1) for item in value]


def _number_text(value: Any) -> str:
    number = _json_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError(f"Non-finite number {number!r} cannot be encoded")
    return str(number) if isinstance(number, int) else repr(number)


def _json_number(value: Any):
    if isinstance(value, Integral):
        return int(value)
    return float(value)


def encode(
    activity: Any,
    value: Any,
    context: Any = None,
    version: Optional[str] = CURRENT_VERSION,
    *,
    timestamp: Optional[int] = None,
    clock: Optional[LogicalClock] = None,
    config: Optional[EngineConfig] = None,
    diagnostics: Optional[DiagnosticsSink] = None
) -> Result:
    """Module-level convenience around ActivityEncoder.encode."""
    encoder = ActivityEncoder(config=config, clock=clock, diagnostics=diagnostics)
    return encoder.encode(activity, value, context, version, timestamp=timestamp)
