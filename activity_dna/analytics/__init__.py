"""
Analytics Package

RESPONSIBILITY: Complexity, impact, transition prediction and temporal
rhythm over decoded records

WHAT THIS PACKAGE MUST NOT DO:
==============================
- Mutate records or encode new ones (that's transforms/)
- Keep state between calls
- Read the wall clock

BOUNDARY ENFORCEMENT:
=====================
- Consumes ActivityRecord or wire text via the codec
- Produces frozen result contracts
- Every traversal is capped (depth, cycles, iterations, window size)
"""

from .complexity import ComplexityAnalyzer, ComplexityBreakdown
from .impact import ImpactCalculator
from .transitions import TransitionModel, TransitionPredictor, classify_pattern
from .temporal import TemporalAnalyzer
from .statistics import mean, population_std, intervals, clamp

__all__ = [
    'ComplexityAnalyzer', 'ComplexityBreakdown',
    'ImpactCalculator',
    'TransitionModel', 'TransitionPredictor', 'classify_pattern',
    'TemporalAnalyzer',
    'mean', 'population_std', 'intervals', 'clamp',
]
