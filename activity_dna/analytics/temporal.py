"""
Temporal Rhythm Analyzer

Inter-arrival statistics over decoded timestamps.

Intervals are taken between consecutive records in the order given,
not sorted: an out-of-order batch shows up as negative intervals rather
than being silently corrected.
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Sequence

from ..contracts.records import ActivityRecord, TemporalStats, Trend
from ..codec.decoder import ActivityDecoder
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS
from .statistics import intervals, mean, population_std


MS_PER_MINUTE = 60000


class TemporalAnalyzer:
    """Stateless temporal statistics; None when there is too little data."""

    def __init__(self, diagnostics: Optional[DiagnosticsSink] = None):
        self._decoder = ActivityDecoder(diagnostics=diagnostics or NULL_DIAGNOSTICS)

    def analyze(self, events: Sequence[str]) -> Optional[TemporalStats]:
        """Decode events and analyze the ones that carry a timestamp."""
        if not isinstance(events, (list, tuple)):
            return None
        records = []
        for text in events:
            result = self._decoder.decode(text)
            if result.is_success:
                records.append(result.value)
        return self.analyze_records(records)

    def analyze_records(self, records: Iterable[ActivityRecord]) -> Optional[TemporalStats]:
        timestamps = [r.timestamp for r in records if r.timestamp is not None]
        return self.analyze_timestamps(timestamps)

    def analyze_timestamps(self, timestamps: List[int]) -> Optional[TemporalStats]:
        if len(timestamps) < 2:
            return None

        gaps = intervals(timestamps)
        average = mean(gaps)

        if average > 0:
            frequency = MS_PER_MINUTE / average
            consistency = max(0.0, 1 - population_std(gaps) / average)
        else:
            frequency = 0.0
            consistency = 0.0

        duration = timestamps[-1] - timestamps[0]
        density = len(timestamps) * MS_PER_MINUTE / duration if duration > 0 else 0.0

        return TemporalStats(
            event_count=len(timestamps),
            average_interval_ms=average,
            frequency_per_minute=frequency,
            consistency=consistency,
            trend=Trend.ACCELERATING if gaps[-1] < average else Trend.DECELERATING,
            total_duration_ms=duration,
            event_density_per_minute=density
        )
