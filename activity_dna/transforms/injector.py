"""
Context Injector

Produces a NEW encoded record whose context is the existing context
merged with caller-supplied keys, plus an injection metadata block.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.base import CURRENT_VERSION, ErrorCode, Result
from ..codec.decoder import ActivityDecoder
from ..codec.encoder import ActivityEncoder
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS
from ..temporal.clock import LogicalClock


METADATA_KEY = "_metadata"
RAW_CONTEXT_KEY = "_raw_context"


@dataclass(frozen=True)
class InjectionOptions:
    """Options for a single injection; source defaults to the config."""
    source: Optional[str] = None


class ContextInjector:
    """Decode -> merge -> stamp metadata -> re-encode."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[LogicalClock] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self._config = config or DEFAULT_CONFIG
        self._clock = clock or LogicalClock.live()
        diagnostics = diagnostics or NULL_DIAGNOSTICS
        self._decoder = ActivityDecoder(diagnostics=diagnostics)
        self._encoder = ActivityEncoder(config=self._config, clock=self._clock, diagnostics=diagnostics)

    def inject(
        self,
        event_text: str,
        additional: Optional[Mapping] = None,
        options: Optional[InjectionOptions] = None
    ) -> Result:
        """
        Merge `additional` over the existing context and re-encode.

        Precedence, lowest to highest: existing context, `additional`,
        the _metadata block. A raw-text context is kept under
        _raw_context so it is not lost.
        """
        if additional is not None and not isinstance(additional, Mapping):
            return Result.fail(
                ErrorCode.SERIALIZATION_FAILED,
                "Additional context must be a mapping",
                received=type(additional).__name__
            )

        decoded = self._decoder.decode(event_text)
        if decoded.is_failure:
            return decoded
        record = decoded.value
        options = options or InjectionOptions()

        merged = {}
        if isinstance(record.context, Mapping):
            merged.update(record.context)
        elif record.context is not None:
            merged[RAW_CONTEXT_KEY] = record.context
        merged.update(additional or {})
        merged.pop(METADATA_KEY, None)
        merged[METADATA_KEY] = {
            'injected': self._clock.now_ms(),
            'source': options.source or self._config.injection_source,
            'version': CURRENT_VERSION,
        }

        return self._encoder.encode(
            record.activity,
            record.value,
            merged,
            record.version,
            timestamp=record.timestamp
        )
