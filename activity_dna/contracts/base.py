"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.
No behavior, no side effects, no dependencies.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- All types are frozen dataclasses for immutability guarantee
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
from enum import Enum


# =============================================================================
# FORMAT CONSTANTS (Wire format, never changed in place)
# =============================================================================

SEPARATOR = "::"
CURRENT_VERSION = "1.1"
REDACTION_MARKER = "[REDACTED]"


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.

    The string values are stable and machine-readable; API callers
    branch on them.
    """
    # Encoding errors
    INVALID_ACTIVITY = "invalid_activity"
    DEPTH_EXCEEDED = "depth_exceeded"
    SERIALIZATION_FAILED = "serialization_failed"
    STRUCTURAL_ERROR = "structural_error"

    # Decoding errors
    TOO_SHORT = "too_short"

    # Batch errors
    EXCEEDED_LIMIT = "exceeded_limit"
    NO_VALID_EVENTS = "no_valid_events"
    INVALID_EVENTS = "invalid_events"

    # Diagnostic-only codes (never returned as a failure)
    INVALID_TIMESTAMP = "invalid_timestamp"
    CONTEXT_IGNORED = "context_ignored"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    EXTRA_FIELDS = "extra_fields"
    LOOKBACK_CLAMPED = "lookback_clamped"


class Severity(Enum):
    """Severity of a non-fatal diagnostic."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            context=self.context + ((key, value),)
        )

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'message': self.message,
            'context': dict(self.context),
        }


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)

    @staticmethod
    def fail(code: ErrorCode, message: str, **context: object) -> Result:
        """Shorthand for a failure carrying string-valued context pairs."""
        return Result.failure(Error(
            code=code,
            message=message,
            context=tuple((k, str(v)) for k, v in context.items())
        ))
