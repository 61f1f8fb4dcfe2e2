"""
Impact Calculator

Scalar magnitude of a decoded value, dispatched over ValueKind:

    NUMBER    |x| capped at 1000 (NaN -> 0)
    TEXT      length * 0.1 capped at 100
    BOOL      0 or 1
    TEMPORAL  1
    NULL      0
    LIST      sum over the first 100 items
    MAP       sum over the first 50 values

Nested lists and maps are guarded the same way the complexity analyzer
guards contexts: a depth cap, a cycle guard and a work budget, so a
hostile value cannot make the calculation unbounded.
"""

from __future__ import annotations
from itertools import islice
from typing import Any, Optional, Set
import math

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.values import ValueKind, kind_or_none


class _Budget:
    """Mutable step counter shared by one measurement."""

    def __init__(self, steps: int):
        self.remaining = steps

    def spend(self) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


class ImpactCalculator:
    """Pure, variant-dispatched impact scoring."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or DEFAULT_CONFIG

    def measure(self, value: Any) -> float:
        budget = _Budget(self._config.impact_max_steps)
        return self._measure(value, 0, set(), budget)

    def _measure(self, value: Any, depth: int, ancestors: Set[int], budget: _Budget) -> float:
        if not budget.spend():
            return 0.0

        cfg = self._config
        kind = kind_or_none(value)

        if kind is ValueKind.NUMBER:
            magnitude = abs(value)
            if isinstance(magnitude, float) and math.isnan(magnitude):
                return 0.0
            return float(min(magnitude, cfg.impact_number_cap))
        if kind is ValueKind.TEXT:
            return min(len(value) * 0.1, cfg.impact_text_cap)
        if kind is ValueKind.BOOL:
            return 1.0 if value else 0.0
        if kind is ValueKind.TEMPORAL:
            return 1.0
        if kind is ValueKind.LIST:
            items = islice(value, cfg.impact_list_items)
        elif kind is ValueKind.MAP:
            items = islice(value.values(), cfg.impact_map_values)
        else:
            # NULL, or a type outside the variant set
            return 0.0

        if depth > cfg.impact_max_depth or id(value) in ancestors:
            return 0.0

        ancestors.add(id(value))
        try:
            return float(sum(
                self._measure(item, depth + 1, ancestors, budget) for item in items
            ))
        finally:
            ancestors.discard(id(value))
