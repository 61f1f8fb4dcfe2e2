"""
Activity Decoder

Turns wire text back into an ActivityRecord.

PROPAGATION POLICY:
===================
- Missing structure (fewer than 3 fields, empty activity) is a hard
  failure returned as Result.failure
- Malformed OPTIONAL fields never fail the decode: an unparseable value
  stays text, an unparseable context stays raw text, a missing version
  becomes CURRENT_VERSION, a non-integer timestamp becomes None
- Every degradation is reported to the diagnostics sink
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Optional, Tuple
import json
import re

from ..contracts.base import CURRENT_VERSION, ErrorCode, Result, Severity
from ..contracts.records import ActivityRecord, EnvelopeStatus
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS
from . import envelope
from .escaping import tokenize


COMPONENT = "codec.decoder"

MIN_TEXT_LENGTH = 5
MIN_FIELDS = 3
MAX_FIELDS = 5

_INT_RE = re.compile(r"-?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_BOOL_LITERALS = {"true": True, "false": False}


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Any:
    """json.loads that refuses NaN/Infinity tokens."""
    return json.loads(text, parse_constant=_reject_constant)


class ActivityDecoder:
    """Decode wire text into ActivityRecord values."""

    def __init__(self, diagnostics: Optional[DiagnosticsSink] = None):
        self._diagnostics = diagnostics or NULL_DIAGNOSTICS

    def decode(self, text: Any) -> Result:
        if not isinstance(text, str) or len(text) < MIN_TEXT_LENGTH:
            return Result.fail(
                ErrorCode.TOO_SHORT,
                "Input is not a string of at least 5 characters",
                received=type(text).__name__
            )

        fields = tokenize(text)
        if len(fields) < MIN_FIELDS:
            return Result.fail(
                ErrorCode.TOO_SHORT,
                "Invalid structure: fewer than 3 delimited fields",
                field_count=len(fields)
            )

        if len(fields) > MAX_FIELDS:
            self._diagnostics.emit(
                ErrorCode.EXTRA_FIELDS,
                "Fields beyond the version field were ignored",
                COMPONENT,
                field_count=len(fields)
            )

        activity = fields[0]
        if not activity:
            return Result.fail(ErrorCode.INVALID_ACTIVITY, "Activity field is empty")

        timestamp = self._parse_timestamp(fields[1])
        value = self._coerce_value(fields[2])

        context = None
        status = EnvelopeStatus.NONE
        if len(fields) > 3 and fields[3]:
            context, status = self._parse_context(fields[3])

        version = fields[4] if len(fields) > 4 and fields[4] else CURRENT_VERSION

        return Result.success(ActivityRecord(
            activity=activity,
            timestamp=timestamp,
            value=value,
            context=context,
            version=version,
            envelope=status
        ))

    # =========================================================================
    # FIELD PARSERS (never raise)
    # =========================================================================

    def _parse_timestamp(self, text: str) -> Optional[int]:
        if _INT_RE.fullmatch(text):
            return int(text)
        self._diagnostics.emit(
            ErrorCode.INVALID_TIMESTAMP,
            "Timestamp field is not an integer",
            COMPONENT,
            raw=text[:64]
        )
        return None

    def _coerce_value(self, text: str) -> Any:
        """
        Coercion order: JSON object, JSON list, number, boolean literal,
        then plain text.
        """
        if (text.startswith("{") and text.endswith("}")) or \
                (text.startswith("[") and text.endswith("]")):
            try:
                return _loads(text)
            except (ValueError, RecursionError):
                return text
        if _INT_RE.fullmatch(text):
            return int(text)
        if _FLOAT_RE.fullmatch(text):
            return float(text)
        if text in _BOOL_LITERALS:
            return _BOOL_LITERALS[text]
        return text

    def _parse_context(self, text: str) -> Tuple[Any, EnvelopeStatus]:
        try:
            parsed = _loads(text)
        except (ValueError, RecursionError):
            return text, EnvelopeStatus.NONE

        if not isinstance(parsed, Mapping):
            return text, EnvelopeStatus.NONE

        context, status = envelope.unwrap(parsed)
        if status is EnvelopeStatus.MISMATCH:
            self._diagnostics.emit(
                ErrorCode.INTEGRITY_MISMATCH,
                "Context envelope checksum does not match its data",
                COMPONENT,
                severity=Severity.WARNING
            )
        return context, status


def decode(
    text: Any,
    *,
    diagnostics: Optional[DiagnosticsSink] = None
) -> Result:
    """Module-level convenience around ActivityDecoder.decode."""
    return ActivityDecoder(diagnostics=diagnostics).decode(text)
