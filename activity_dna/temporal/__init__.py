"""
Temporal Package
================

Injectable time source shared by the codec and analytics layers.
"""

from .clock import LogicalClock, ClockExhausted

__all__ = [
    'LogicalClock',
    'ClockExhausted',
]
