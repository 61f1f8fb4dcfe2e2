"""
Logical Clock for Deterministic Encoding
========================================

Injectable clock that enables deterministic execution and replay.
Reading the wall clock is the only side effect in the codec and the
analytics layers, and every such read goes through this clock.

GUARANTEES:
- Same inputs + same clock sequence = byte-identical encodings
- Never reads system time implicitly in frozen or replay mode
- A recording live clock keeps its ticks so the session can be replayed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import time


class ClockExhausted(Exception):
    """Raised when replay clock runs out of ticks."""
    pass


@dataclass
class LogicalClock:
    """
    Injectable millisecond clock.

    MODES:
    ======
    1. LIVE mode: Uses real system time, records ticks only when asked
    2. REPLAY mode: Uses pre-recorded tick sequence
    3. FROZEN mode: Always returns the same instant

    Values are epoch milliseconds, the unit of the wire format.
    """
    _ticks: List[int] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True
    _record: bool = False
    _frozen_at: Optional[int] = None

    def now_ms(self) -> int:
        """
        Get current logical time in epoch milliseconds.

        In LIVE mode: reads system time, recording it if enabled
        In REPLAY mode: returns next tick from recorded sequence
        In FROZEN mode: returns the frozen instant
        """
        if self._frozen_at is not None:
            return self._frozen_at
        if self._is_live:
            current = time.time_ns() // 1_000_000
            if self._record:
                self._ticks.append(current)
                self._current_index = len(self._ticks)
            return current
        if self._current_index >= len(self._ticks):
            raise ClockExhausted(
                f"Replay clock exhausted at index {self._current_index}. "
                f"Original execution had {len(self._ticks)} ticks."
            )
        tick = self._ticks[self._current_index]
        self._current_index += 1
        return tick

    def tick_count(self) -> int:
        """Number of ticks recorded/consumed."""
        return self._current_index

    def is_live(self) -> bool:
        """Whether clock is in live mode."""
        return self._is_live and self._frozen_at is None

    def recorded_ticks(self) -> List[int]:
        """Copy of the ticks recorded so far, for replay."""
        return list(self._ticks)

    @classmethod
    def live(cls, record: bool = False) -> LogicalClock:
        """
        Create clock in LIVE mode (uses system time).

        With record=True every tick is kept for a later replay; a
        long-running service leaves it off.
        """
        return cls(_is_live=True, _record=record)

    @classmethod
    def frozen(cls, epoch_ms: int) -> LogicalClock:
        """Create a clock that always reports epoch_ms."""
        return cls(_is_live=False, _frozen_at=int(epoch_ms))

    @classmethod
    def replay(cls, ticks: Iterable[int]) -> LogicalClock:
        """Create clock in REPLAY mode from a recorded tick sequence."""
        return cls(_ticks=[int(t) for t in ticks], _current_index=0, _is_live=False)

    def __repr__(self) -> str:
        if self._frozen_at is not None:
            return f"LogicalClock(FROZEN, at={self._frozen_at})"
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"
