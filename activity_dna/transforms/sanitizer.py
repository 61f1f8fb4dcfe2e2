"""
Context Sanitizer

Produces a NEW encoded record whose context has sensitive keys redacted.

Redaction recurses through nested maps only. Maps inside lists are
left untouched; callers that store secrets inside lists must flatten
them first.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Iterable, Optional

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.base import REDACTION_MARKER, Result
from ..codec.decoder import ActivityDecoder
from ..codec.encoder import ActivityEncoder
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS
from ..temporal.clock import LogicalClock


class ContextSanitizer:
    """Decode -> redact -> re-encode, never mutating the decoded context."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[LogicalClock] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self._config = config or DEFAULT_CONFIG
        diagnostics = diagnostics or NULL_DIAGNOSTICS
        self._decoder = ActivityDecoder(diagnostics=diagnostics)
        self._encoder = ActivityEncoder(config=self._config, clock=clock, diagnostics=diagnostics)

    def sanitize(self, event_text: str, sensitive_keys: Optional[Iterable[str]] = None) -> Result:
        """
        Redact sensitive keys and re-encode.

        Activity, value, version and the original timestamp are kept.
        A context that did not parse as a map is passed through as-is.
        """
        decoded = self._decoder.decode(event_text)
        if decoded.is_failure:
            return decoded
        record = decoded.value

        keys = frozenset(self._config.sensitive_keys if sensitive_keys is None else sensitive_keys)
        context = record.context
        if isinstance(context, Mapping):
            context = redact(context, keys, self._config.max_encode_depth)

        return self._encoder.encode(
            record.activity,
            record.value,
            context,
            record.version,
            timestamp=record.timestamp
        )


def redact(mapping: Mapping, keys: frozenset, max_depth: int, depth: int = 0) -> dict:
    """
    Return a copy of mapping with every key in `keys` replaced by the
    redaction marker, recursing into nested maps up to max_depth.
    """
    cleaned = {}
    for key, value in mapping.items():
        if key in keys:
            cleaned[key] = REDACTION_MARKER
        elif isinstance(value, Mapping) and depth < max_depth:
            cleaned[key] = redact(value, keys, max_depth, depth + 1)
        else:
            cleaned[key] = value
    return cleaned
