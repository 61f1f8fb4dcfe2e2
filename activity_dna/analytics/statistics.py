"""
Numeric Helpers
===============

Pure functions over sequences of numbers. Nothing here touches shared
state or patches built-ins; analyzers import what they need.
"""

from __future__ import annotations
from typing import List, Sequence
import numpy as np


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0); 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def intervals(timestamps: Sequence[int]) -> List[int]:
    """Differences between consecutive timestamps, in input order."""
    # Plain ints: decoded timestamps are unbounded and may not fit int64.
    return [later - earlier for earlier, later in zip(timestamps, timestamps[1:])]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
