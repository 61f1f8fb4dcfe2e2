"""
Context Complexity Analyzer

Scores the structural complexity of a decoded context in [0, 100].

TERMINATION GUARANTEES:
=======================
- Iterative traversal with an explicit stack (no recursion)
- Maps deeper than the depth cap add a fixed overflow penalty and are
  not descended
- A map seen before (by identity) adds a fixed cycle penalty and is not
  descended again, so self-references cannot loop
- A global iteration cap bounds total work for any input shape

Only maps are nodes. Lists, temporal values and scalars are leaves.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Set, Tuple

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.values import ValueKind, kind_or_none
from .statistics import clamp


MIN_SCORE = 0.0
MAX_SCORE = 100.0


@dataclass(frozen=True)
class ComplexityBreakdown:
    """How a complexity score was assembled."""
    score: float
    nodes_visited: int
    overflow_hits: int
    cycle_hits: int
    iterations: int
    truncated: bool


class ComplexityAnalyzer:
    """Bounded structural scoring of nested context maps."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or DEFAULT_CONFIG

    def measure(self, context: Any) -> float:
        """Complexity score in [0, 100]; 0 for anything that is not a map."""
        return self.breakdown(context).score

    def breakdown(self, context: Any) -> ComplexityBreakdown:
        cfg = self._config
        if kind_or_none(context) is not ValueKind.MAP:
            return ComplexityBreakdown(0.0, 0, 0, 0, 0, False)

        total = 0.0
        nodes = overflow = cycles = iterations = 0
        seen: Set[int] = set()
        stack: List[Tuple[Mapping, int]] = [(context, 0)]

        while stack:
            if iterations >= cfg.complexity_max_iterations:
                break
            iterations += 1

            node, depth = stack.pop()

            if depth > cfg.complexity_max_depth:
                total += cfg.complexity_overflow_penalty
                overflow += 1
                continue

            node_id = id(node)
            if node_id in seen:
                total += cfg.complexity_cycle_penalty
                cycles += 1
                continue
            seen.add(node_id)

            nodes += 1
            total += 1 + min(cfg.complexity_key_weight * len(node), cfg.complexity_key_cap)

            for child in node.values():
                if kind_or_none(child) is ValueKind.MAP:
                    stack.append((child, depth + 1))

        return ComplexityBreakdown(
            score=clamp(total, MIN_SCORE, MAX_SCORE),
            nodes_visited=nodes,
            overflow_hits=overflow,
            cycle_hits=cycles,
            iterations=iterations,
            truncated=bool(stack)
        )
