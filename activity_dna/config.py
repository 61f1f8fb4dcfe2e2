"""
Engine Configuration

Every cap, threshold and default used by the codec and analyzers lives
here, in one frozen dataclass. Components receive the config instead of
reading module constants, so tests can tighten limits without patching.

Environment overrides use the ACTIVITY_DNA_ prefix, e.g.
ACTIVITY_DNA_MAX_BATCH_EVENTS=500 or
ACTIVITY_DNA_SENSITIVE_KEYS=email,token.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import FrozenSet, Mapping, Optional
import os


ENV_PREFIX = "ACTIVITY_DNA_"

DEFAULT_SENSITIVE_KEYS: FrozenSet[str] = frozenset({
    'user_id', 'email', 'password', 'token', 'ssn',
})


@dataclass(frozen=True)
class EngineConfig:
    """Unified configuration for the codec and analytics layers."""
    # Codec
    max_encode_depth: int = 10
    envelope_threshold: int = 1000

    # Complexity analyzer
    complexity_max_depth: int = 8
    complexity_overflow_penalty: float = 10.0
    complexity_cycle_penalty: float = 5.0
    complexity_max_iterations: int = 1000
    complexity_key_weight: float = 0.5
    complexity_key_cap: float = 20.0

    # Impact calculator
    impact_max_depth: int = 8
    impact_max_steps: int = 10000
    impact_number_cap: float = 1000.0
    impact_text_cap: float = 100.0
    impact_list_items: int = 100
    impact_map_values: int = 50

    # Transition predictor
    default_lookback: int = 10
    min_lookback: int = 3
    max_lookback: int = 50

    # Batch facade
    max_batch_events: int = 10000
    recent_window_ms: int = 60000

    # Observability
    diagnostics_capacity: int = 1000

    # Transforms
    sensitive_keys: FrozenSet[str] = DEFAULT_SENSITIVE_KEYS
    injection_source: str = "activity_dna"

    def __post_init__(self):
        if self.max_encode_depth < 1:
            raise ValueError("max_encode_depth must be at least 1")
        if self.envelope_threshold < 0:
            raise ValueError("envelope_threshold must be non-negative")
        if not 1 <= self.min_lookback <= self.max_lookback:
            raise ValueError("lookback bounds must satisfy 1 <= min <= max")
        if not self.min_lookback <= self.default_lookback <= self.max_lookback:
            raise ValueError("default_lookback must lie within the lookback bounds")
        if self.max_batch_events < 0:
            raise ValueError("max_batch_events must be non-negative")
        if self.diagnostics_capacity < 1:
            raise ValueError("diagnostics_capacity must be at least 1")
        if self.complexity_max_iterations < 1 or self.impact_max_steps < 1:
            raise ValueError("iteration caps must be positive")

    def with_overrides(self, **changes) -> EngineConfig:
        """Return a new config with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        """
        Build a config from ACTIVITY_DNA_* variables.

        Unknown variables are ignored; malformed values raise ValueError
        so a misconfigured deployment fails at startup.
        """
        environ = os.environ if environ is None else environ
        changes = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = f.default
            if isinstance(default, frozenset):
                changes[f.name] = frozenset(
                    k.strip() for k in raw.split(",") if k.strip()
                )
            elif isinstance(default, bool):
                changes[f.name] = raw.strip().lower() in ("1", "true", "yes")
            elif isinstance(default, int):
                changes[f.name] = int(raw)
            elif isinstance(default, float):
                changes[f.name] = float(raw)
            else:
                changes[f.name] = raw
        return cls(**changes)


DEFAULT_CONFIG = EngineConfig()
