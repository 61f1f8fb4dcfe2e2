"""
Activity DNA

Compact delimiter-joined encoding for activity records plus a small,
stateless analytics engine over sequences of them.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable records, results, error codes, the value variant
   - MUST NOT: contain behavior

2. CODEC (codec/)
   - Responsibility: text <-> ActivityRecord, escaping, integrity envelope
   - MUST NOT: analyze or aggregate

3. ANALYTICS (analytics/)
   - Responsibility: complexity, impact, transition prediction, temporal rhythm
   - MUST NOT: mutate or encode records

4. TRANSFORMS (transforms/)
   - Responsibility: sanitized / enriched copies of records
   - MUST NOT: modify the input record

5. FACADE (facade.py, engine.py)
   - Responsibility: orchestrate the above into reports
   - MUST NOT: bypass the codec

6. OBSERVABILITY (observability/)
   - Responsibility: collect non-fatal diagnostics
   - MUST NOT: print, or change behavior

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: every result is a frozen dataclass
- Deterministic: identical inputs and clock ticks give identical output
- Explicit errors: Result + ErrorCode, no silent sentinels
- Bounded: every traversal has a depth, cycle and iteration cap
"""

from .config import EngineConfig
from .contracts import (
    SEPARATOR, CURRENT_VERSION, ErrorCode, Error, Result,
    ActivityRecord, Prediction, TemporalStats, BatchReport, EventAnalytics,
)
from .codec import encode, decode
from .engine import ActivityEngine
from .facade import BatchOptions
from .transforms import InjectionOptions
from .temporal import LogicalClock
from .observability import DiagnosticsCollector

__version__ = "1.1.0"

__all__ = [
    'EngineConfig',
    'SEPARATOR', 'CURRENT_VERSION', 'ErrorCode', 'Error', 'Result',
    'ActivityRecord', 'Prediction', 'TemporalStats', 'BatchReport', 'EventAnalytics',
    'encode', 'decode',
    'ActivityEngine', 'BatchOptions', 'InjectionOptions',
    'LogicalClock', 'DiagnosticsCollector',
]
