"""
Record and Result Contracts

These contracts define the explicit data passed between the codec and
the analytics layers. Every analyzer consumes ActivityRecord and
produces one of the frozen result types below; nothing here holds
behavior beyond trivial derived properties and dict conversion.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .base import CURRENT_VERSION


# =============================================================================
# CODEC CONTRACTS
# =============================================================================

class EnvelopeStatus(Enum):
    """Whether the context travelled inside an integrity envelope."""
    NONE = "none"
    VERIFIED = "verified"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class ActivityRecord:
    """
    IMMUTABLE decoded activity record.

    timestamp is None when the wire field was not an integer; the
    record is still usable for activity and value analysis.

    context is a mapping when the context field parsed as a JSON
    object, the raw unescaped text when it did not, or None when
    the field was absent.
    """
    activity: str
    timestamp: Optional[int]
    value: Any
    context: Any = None
    version: str = CURRENT_VERSION
    envelope: EnvelopeStatus = EnvelopeStatus.NONE

    @property
    def has_structured_context(self) -> bool:
        return isinstance(self.context, Mapping)

    @property
    def is_current_version(self) -> bool:
        return self.version == CURRENT_VERSION

    def to_dict(self) -> dict:
        return {
            'activity': self.activity,
            'timestamp': self.timestamp,
            'value': self.value,
            'context': self.context,
            'version': self.version,
            'envelope': self.envelope.value,
        }


# =============================================================================
# PREDICTION CONTRACTS
# =============================================================================

class SequencePattern(Enum):
    """Explicit pattern labels produced by the transition predictor."""
    STRONG_SEQUENCE = "strong_sequence"
    MODERATE_SEQUENCE = "moderate_sequence"
    WEAK_SEQUENCE = "weak_sequence"
    HIGH_DIVERSITY = "high_diversity"
    REPETITIVE = "repetitive"
    RANDOM = "random"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class Alternative:
    """A candidate next activity other than the predicted one."""
    activity: str
    probability: float


@dataclass(frozen=True)
class Prediction:
    """
    Immutable next-activity prediction.

    next_activity is None when there was not enough data, or when the
    last observed activity never had a successor inside the window.
    """
    next_activity: Optional[str]
    confidence: float
    pattern: SequencePattern
    alternatives: Tuple[Alternative, ...] = field(default_factory=tuple)
    most_frequent: Optional[str] = None
    sample_size: int = 0
    lookback: int = 0

    @property
    def has_prediction(self) -> bool:
        return self.next_activity is not None

    @staticmethod
    def insufficient(sample_size: int = 0, lookback: int = 0) -> Prediction:
        return Prediction(
            next_activity=None,
            confidence=0.0,
            pattern=SequencePattern.INSUFFICIENT_DATA,
            sample_size=sample_size,
            lookback=lookback
        )

    def to_dict(self) -> dict:
        return {
            'next': self.next_activity,
            'confidence': self.confidence,
            'pattern': self.pattern.value,
            'alternatives': [
                {'activity': a.activity, 'probability': a.probability}
                for a in self.alternatives
            ],
            'most_frequent': self.most_frequent,
            'sample_size': self.sample_size,
            'lookback': self.lookback,
        }


# =============================================================================
# TEMPORAL CONTRACTS
# =============================================================================

class Trend(Enum):
    ACCELERATING = "accelerating"
    DECELERATING = "decelerating"


@dataclass(frozen=True)
class TemporalStats:
    """Inter-arrival statistics over decoded timestamps."""
    event_count: int
    average_interval_ms: float
    frequency_per_minute: float
    consistency: float
    trend: Trend
    total_duration_ms: int
    event_density_per_minute: float

    def to_dict(self) -> dict:
        return {
            'event_count': self.event_count,
            'average_interval_ms': self.average_interval_ms,
            'frequency_per_minute': self.frequency_per_minute,
            'consistency': self.consistency,
            'trend': self.trend.value,
            'total_duration_ms': self.total_duration_ms,
            'event_density_per_minute': self.event_density_per_minute,
        }


# =============================================================================
# REPORT CONTRACTS
# =============================================================================

class Level(Enum):
    """Categorical label shared by impact and complexity aggregates."""
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class BatchReport:
    """
    Immutable aggregate report over a batch of encoded records.

    An empty batch yields a report with every metric at zero rather
    than an error.
    """
    event_count: int
    valid_count: int
    invalid_count: int
    valid_ratio: float
    unique_activities: int
    activity_frequency: Tuple[Tuple[str, int], ...]
    timespan_ms: int
    total_impact: float
    average_impact: float
    impact_level: Level
    average_complexity: float
    max_complexity: float
    complexity_level: Level
    prediction: Prediction
    temporal: Optional[TemporalStats]
    quality_score: float

    @staticmethod
    def empty() -> BatchReport:
        return BatchReport(
            event_count=0,
            valid_count=0,
            invalid_count=0,
            valid_ratio=0.0,
            unique_activities=0,
            activity_frequency=(),
            timespan_ms=0,
            total_impact=0.0,
            average_impact=0.0,
            impact_level=Level.MINIMAL,
            average_complexity=0.0,
            max_complexity=0.0,
            complexity_level=Level.MINIMAL,
            prediction=Prediction.insufficient(),
            temporal=None,
            quality_score=0.0
        )

    def frequency_of(self, activity: str) -> int:
        return dict(self.activity_frequency).get(activity, 0)

    def to_dict(self) -> dict:
        return {
            'event_count': self.event_count,
            'valid_count': self.valid_count,
            'invalid_count': self.invalid_count,
            'valid_ratio': self.valid_ratio,
            'unique_activities': self.unique_activities,
            'activity_frequency': dict(self.activity_frequency),
            'timespan_ms': self.timespan_ms,
            'impact': {
                'total': self.total_impact,
                'average': self.average_impact,
                'level': self.impact_level.value,
            },
            'complexity': {
                'average': self.average_complexity,
                'max': self.max_complexity,
                'level': self.complexity_level.value,
            },
            'prediction': self.prediction.to_dict(),
            'temporal': self.temporal.to_dict() if self.temporal else None,
            'quality_score': self.quality_score,
        }


@dataclass(frozen=True)
class EventAnalytics:
    """Per-record analytics for a single encoded event."""
    event_strength: float
    context_complexity: float
    data_quality_score: float
    age_ms: Optional[int]
    is_recent: bool
    recommendations: Tuple[str, ...]
    risk_assessment: str
    version_compatibility: str
    estimated_size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_strength': self.event_strength,
            'context_complexity': self.context_complexity,
            'data_quality_score': self.data_quality_score,
            'age_ms': self.age_ms,
            'is_recent': self.is_recent,
            'recommendations': list(self.recommendations),
            'risk_assessment': self.risk_assessment,
            'version_compatibility': self.version_compatibility,
            'estimated_size_bytes': self.estimated_size_bytes,
        }
