"""
Observability & Diagnostics Layer

RESPONSIBILITY: Record non-fatal diagnostics raised by the codec and
analyzers (depth caps hit, unparseable timestamps, checksum mismatches).
ALLOWED INPUTS: Diagnostic records from any layer
OUTPUTS: Read-only, filterable diagnostic lists

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Print to a console or assume one exists
- Filter or interpret diagnostics on collection (only record them)
- Make decisions based on recorded data

BOUNDARY ENFORCEMENT:
=====================
- Sinks are injected; the default sink discards everything
- Collectors are append-only and bounded; the oldest entries roll off
- Diagnostics are frozen values, safe to keep after the call returns
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from ..contracts.base import ErrorCode, Severity


DEFAULT_MAX_ENTRIES = 1000


@dataclass(frozen=True)
class Diagnostic:
    """Immutable non-fatal event emitted by a component."""
    code: ErrorCode
    message: str
    component: str
    severity: Severity = Severity.WARNING
    details: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def detail(self, key: str) -> Optional[str]:
        return dict(self.details).get(key)

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'message': self.message,
            'component': self.component,
            'severity': self.severity.value,
            'details': dict(self.details),
        }


class DiagnosticsSink:
    """
    Base sink interface.

    Components call collect() and never read back; what happens to the
    diagnostic afterwards is the caller's business.
    """

    def collect(self, diagnostic: Diagnostic) -> None:
        raise NotImplementedError

    def emit(
        self,
        code: ErrorCode,
        message: str,
        component: str,
        severity: Severity = Severity.WARNING,
        **details: object
    ) -> None:
        """Build and collect a diagnostic in one call."""
        self.collect(Diagnostic(
            code=code,
            message=message,
            component=component,
            severity=severity,
            details=tuple((k, str(v)) for k, v in details.items())
        ))


class NullDiagnostics(DiagnosticsSink):
    """Sink that drops every diagnostic."""

    def collect(self, diagnostic: Diagnostic) -> None:
        return None


class DiagnosticsCollector(DiagnosticsSink):
    """
    Append-only diagnostic collector holding at most max_entries
    diagnostics; once full, the oldest entry is dropped for each new one.

    Each engine (or each test) owns its own collector; nothing is
    shared between instances.
    """

    def __init__(self, name: str = "activity_dna", max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._name = name
        self._entries: Deque[Diagnostic] = deque(maxlen=max_entries)

    def collect(self, diagnostic: Diagnostic) -> None:
        """Collect a diagnostic (append-only)."""
        self._entries.append(diagnostic)

    def get_entries(
        self,
        code: Optional[ErrorCode] = None,
        severity: Optional[Severity] = None,
        component: Optional[str] = None
    ) -> List[Diagnostic]:
        """Get entries, optionally filtered."""
        entries = list(self._entries)

        if code:
            entries = [e for e in entries if e.code == code]

        if severity:
            entries = [e for e in entries if e.severity == severity]

        if component:
            entries = [e for e in entries if e.component == component]

        return entries

    def has(self, code: ErrorCode) -> bool:
        return any(e.code == code for e in self._entries)

    @property
    def name(self) -> str:
        return self._name

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    @property
    def entry_count(self) -> int:
        return len(self._entries)


NULL_DIAGNOSTICS = NullDiagnostics()


__all__ = [
    'Diagnostic',
    'DiagnosticsSink',
    'NullDiagnostics',
    'DiagnosticsCollector',
    'NULL_DIAGNOSTICS',
]
