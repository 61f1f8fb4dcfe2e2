"""
Contracts Package

Immutable types shared by every layer. Layers import from here and
never from each other's implementations.
"""

from .base import (
    SEPARATOR, CURRENT_VERSION, REDACTION_MARKER,
    ErrorCode, Severity, Error, Result,
)
from .values import ValueKind, UnsupportedValue, kind_of, kind_or_none, epoch_millis
from .records import (
    ActivityRecord, EnvelopeStatus,
    SequencePattern, Alternative, Prediction,
    Trend, TemporalStats,
    Level, BatchReport, EventAnalytics,
)

__all__ = [
    'SEPARATOR', 'CURRENT_VERSION', 'REDACTION_MARKER',
    'ErrorCode', 'Severity', 'Error', 'Result',
    'ValueKind', 'UnsupportedValue', 'kind_of', 'kind_or_none', 'epoch_millis',
    'ActivityRecord', 'EnvelopeStatus',
    'SequencePattern', 'Alternative', 'Prediction',
    'Trend', 'TemporalStats',
    'Level', 'BatchReport', 'EventAnalytics',
]
