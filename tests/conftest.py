"""
Shared fixtures.

Every fixture builds fresh collaborators; nothing is shared between tests.
"""

import pytest

from activity_dna import ActivityEngine, DiagnosticsCollector, EngineConfig, LogicalClock
from activity_dna.codec import ActivityEncoder


FIXED_NOW = 1_700_000_000_000


@pytest.fixture
def clock():
    return LogicalClock.frozen(FIXED_NOW)


@pytest.fixture
def diagnostics():
    return DiagnosticsCollector("test")


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def encoder(config, clock, diagnostics):
    return ActivityEncoder(config=config, clock=clock, diagnostics=diagnostics)


@pytest.fixture
def engine(config, clock, diagnostics):
    return ActivityEngine(config=config, clock=clock, diagnostics=diagnostics)


@pytest.fixture
def spaced_events():
    """Factory for wire texts at a fixed spacing, built without the encoder."""
    def build(activities, start=FIXED_NOW, step=1000, value=1):
        return [
            f"{activity}::{start + i * step}::{value}"
            for i, activity in enumerate(activities)
        ]
    return build
