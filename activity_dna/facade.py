"""
Batch Analytics Facade

Orchestrates the codec and every analyzer over a collection of encoded
records and folds the results into one BatchReport.

ERROR POLICY:
=============
- Batch-level failures are returned as Result.failure with a stable
  ErrorCode; nothing is raised
- Individual records that fail to decode are counted, not fatal
- An empty batch is a valid, all-zero report
"""

from __future__ import annotations
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import EngineConfig, DEFAULT_CONFIG
from .contracts.base import ErrorCode, Result
from .contracts.records import (
    ActivityRecord, BatchReport, EventAnalytics, Level, Prediction, TemporalStats
)
from .codec.decoder import ActivityDecoder
from .analytics.complexity import ComplexityAnalyzer
from .analytics.impact import ImpactCalculator
from .analytics.statistics import clamp
from .analytics.temporal import TemporalAnalyzer
from .analytics.transitions import TransitionPredictor
from .observability import DiagnosticsSink, NULL_DIAGNOSTICS
from .temporal.clock import LogicalClock


# (upper bound exclusive, level); anything above the last bound is HIGH
IMPACT_LEVELS = ((1.0, Level.MINIMAL), (10.0, Level.LOW), (100.0, Level.MEDIUM))
COMPLEXITY_LEVELS = ((5.0, Level.MINIMAL), (20.0, Level.LOW), (50.0, Level.MEDIUM))

HIGH_IMPACT = 10.0
HIGH_COMPLEXITY = 20.0
RISKY_COMPLEXITY = 50.0
VERBOSE_CONTEXT_KEYS = 10
MAX_QUALITY_SCORE = 10.0

NO_ACTIONS = "No actions required"


@dataclass(frozen=True)
class BatchOptions:
    """Per-call overrides; None falls back to the engine config."""
    max_events: Optional[int] = None
    lookback: Optional[int] = None


def level_for(value: float, bounds) -> Level:
    for upper, level in bounds:
        if value < upper:
            return level
    return Level.HIGH


class BatchAnalytics:
    """
    Batch and per-event analytics over encoded records.

    BOUNDARY ENFORCEMENT:
    - Reads the clock only for per-event age
    - Never re-encodes or mutates records
    """

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
        self._complexity = ComplexityAnalyzer(self._config)
        self._impact = ImpactCalculator(self._config)
        self._temporal = TemporalAnalyzer(diagnostics=diagnostics)
        self._predictor = TransitionPredictor(self._config, diagnostics=diagnostics)

    # =========================================================================
    # BATCH REPORT
    # =========================================================================

    def analyze(self, events: Sequence[str], options: Optional[BatchOptions] = None) -> Result:
        options = options or BatchOptions()
        max_events = (
            self._config.max_batch_events if options.max_events is None else options.max_events
        )

        if not isinstance(events, (list, tuple)):
            return Result.fail(
                ErrorCode.INVALID_EVENTS,
                "Events must be a list of encoded records",
                received=type(events).__name__
            )
        if len(events) > max_events:
            return Result.fail(
                ErrorCode.EXCEEDED_LIMIT,
                f"Batch of {len(events)} events exceeds the limit of {max_events}",
                event_count=len(events),
                max_events=max_events
            )
        if not events:
            return Result.success(BatchReport.empty())

        records: List[ActivityRecord] = []
        for text in events:
            decoded = self._decoder.decode(text)
            if decoded.is_success:
                records.append(decoded.value)

        if not records:
            return Result.fail(
                ErrorCode.NO_VALID_EVENTS,
                "No event in the batch could be decoded",
                event_count=len(events)
            )

        return Result.success(self._build_report(events, records, options))

    def _build_report(
        self,
        events: Sequence[str],
        records: List[ActivityRecord],
        options: BatchOptions
    ) -> BatchReport:
        valid = len(records)
        valid_ratio = valid / len(events)

        impacts = [self._impact.measure(r.value) for r in records]
        complexities = [self._complexity.measure(r.context) for r in records]
        total_impact = sum(impacts)
        average_impact = total_impact / valid
        average_complexity = sum(complexities) / valid

        timestamps = [r.timestamp for r in records if r.timestamp is not None]
        timespan = timestamps[-1] - timestamps[0] if len(timestamps) > 1 else 0

        frequency = Counter(r.activity for r in records)
        prediction = self._predictor.predict(list(events), options.lookback)
        temporal = self._temporal.analyze_records(records)

        return BatchReport(
            event_count=len(events),
            valid_count=valid,
            invalid_count=len(events) - valid,
            valid_ratio=round(valid_ratio, 4),
            unique_activities=len(frequency),
            activity_frequency=tuple(frequency.items()),
            timespan_ms=timespan,
            total_impact=total_impact,
            average_impact=average_impact,
            impact_level=level_for(average_impact, IMPACT_LEVELS),
            average_complexity=average_complexity,
            max_complexity=max(complexities),
            complexity_level=level_for(average_complexity, COMPLEXITY_LEVELS),
            prediction=prediction,
            temporal=temporal,
            quality_score=quality_score(valid_ratio, prediction, temporal)
        )

    # =========================================================================
    # PER-EVENT ANALYTICS
    # =========================================================================

    def event_analytics(self, event_text: str) -> Result:
        decoded = self._decoder.decode(event_text)
        if decoded.is_failure:
            return decoded
        record = decoded.value

        impact = self._impact.measure(record.value)
        complexity = self._complexity.measure(record.context)
        age = None
        if record.timestamp is not None:
            age = self._clock.now_ms() - record.timestamp

        return Result.success(EventAnalytics(
            event_strength=impact,
            context_complexity=complexity,
            data_quality_score=min(impact + complexity * 0.1, MAX_QUALITY_SCORE),
            age_ms=age,
            is_recent=age is not None and age < self._config.recent_window_ms,
            recommendations=recommendations(record, impact, complexity),
            risk_assessment=(
                'high_context_complexity' if complexity > RISKY_COMPLEXITY else 'normal'
            ),
            version_compatibility='current' if record.is_current_version else 'legacy',
            estimated_size_bytes=len(event_text.encode('utf-8'))
        ))


def quality_score(
    valid_ratio: float,
    prediction: Prediction,
    temporal: Optional[TemporalStats]
) -> float:
    """
    Composite in [0, 100]: half decode health, a quarter predictability,
    a quarter temporal consistency.
    """
    consistency = temporal.consistency if temporal else 0.0
    raw = 100 * (0.5 * valid_ratio + 0.25 * prediction.confidence + 0.25 * consistency)
    return round(clamp(raw, 0.0, 100.0), 2)


def recommendations(record: ActivityRecord, impact: float, complexity: float):
    advice = []
    if impact > HIGH_IMPACT:
        advice.append("Consider user notification")
    if complexity > HIGH_COMPLEXITY:
        advice.append("Optimize context data structure")
    if isinstance(record.context, Mapping) and len(record.context) > VERBOSE_CONTEXT_KEYS:
        advice.append("Context may be too verbose")
    if not record.is_current_version:
        advice.append("Consider updating to latest format")
    return tuple(advice) if advice else (NO_ACTIONS,)
