"""
Engine Orchestration Module

This module provides the unified interface for the codec, the
analyzers and the transforms while keeping each one independent.

DESIGN PRINCIPLES:
==================
1. Components communicate ONLY through contracts
2. One config, one clock and one diagnostics sink per engine
3. Engines share nothing; run as many side by side as needed
"""

from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional, Sequence

from .config import EngineConfig
from .contracts.base import CURRENT_VERSION, Result
from .contracts.records import Prediction, TemporalStats
from .codec.decoder import ActivityDecoder
from .codec.encoder import ActivityEncoder
from .analytics.complexity import ComplexityAnalyzer
from .analytics.impact import ImpactCalculator
from .analytics.temporal import TemporalAnalyzer
from .analytics.transitions import TransitionPredictor
from .transforms.sanitizer import ContextSanitizer
from .transforms.injector import ContextInjector, InjectionOptions
from .facade import BatchAnalytics, BatchOptions
from .observability import DiagnosticsSink, NULL_DIAGNOSTICS
from .temporal.clock import LogicalClock


class ActivityEngine:
    """
    Unified entry point.

    FLOW:
    =====
    1. Codec: text <-> ActivityRecord
    2. Analyzers: ActivityRecord -> scores, Prediction, TemporalStats
    3. Transforms: text -> decode -> modify -> encode -> text
    4. Facade: many texts -> BatchReport
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[LogicalClock] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self._config = config or EngineConfig()
        self._clock = clock or LogicalClock.live()
        self._diagnostics = diagnostics or NULL_DIAGNOSTICS

        deps = dict(config=self._config, clock=self._clock, diagnostics=self._diagnostics)
        self._encoder = ActivityEncoder(**deps)
        self._decoder = ActivityDecoder(diagnostics=self._diagnostics)
        self._complexity = ComplexityAnalyzer(self._config)
        self._impact = ImpactCalculator(self._config)
        self._predictor = TransitionPredictor(self._config, diagnostics=self._diagnostics)
        self._temporal = TemporalAnalyzer(diagnostics=self._diagnostics)
        self._sanitizer = ContextSanitizer(**deps)
        self._injector = ContextInjector(**deps)
        self._batch = BatchAnalytics(**deps)

    @classmethod
    def from_env(
        cls,
        clock: Optional[LogicalClock] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ) -> ActivityEngine:
        return cls(config=EngineConfig.from_env(), clock=clock, diagnostics=diagnostics)

    # =========================================================================
    # CODEC INTERFACE
    # =========================================================================

    def encode(
        self,
        activity: Any,
        value: Any,
        context: Any = None,
        version: Optional[str] = CURRENT_VERSION,
        *,
        timestamp: Optional[int] = None
    ) -> Result:
        return self._encoder.encode(activity, value, context, version, timestamp=timestamp)

    def decode(self, text: Any) -> Result:
        return self._decoder.decode(text)

    # =========================================================================
    # ANALYTICS INTERFACE
    # =========================================================================

    def complexity(self, context: Any) -> float:
        return self._complexity.measure(context)

    def impact(self, value: Any) -> float:
        return self._impact.measure(value)

    def predict_next(self, events: Sequence[str], lookback: Optional[int] = None) -> Prediction:
        return self._predictor.predict(events, lookback)

    def temporal(self, events: Sequence[str]) -> Optional[TemporalStats]:
        return self._temporal.analyze(events)

    def analyze_batch(self, events: Sequence[str], options: Optional[BatchOptions] = None) -> Result:
        return self._batch.analyze(events, options)

    def event_analytics(self, event_text: str) -> Result:
        return self._batch.event_analytics(event_text)

    # =========================================================================
    # TRANSFORM INTERFACE
    # =========================================================================

    def sanitize(self, event_text: str, sensitive_keys: Optional[Iterable[str]] = None) -> Result:
        return self._sanitizer.sanitize(event_text, sensitive_keys)

    def inject_context(
        self,
        event_text: str,
        additional: Optional[Mapping] = None,
        options: Optional[InjectionOptions] = None
    ) -> Result:
        return self._injector.inject(event_text, additional, options)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def clock(self) -> LogicalClock:
        return self._clock

    @property
    def diagnostics(self) -> DiagnosticsSink:
        return self._diagnostics
