"""
Transition Predictor
====================

First-order Markov prediction of the next activity.

A TransitionModel is built per call from the trailing lookback window
and thrown away afterwards. It wraps a networkx DiGraph: nodes are
activity labels, an edge a -> b carries the number of times b directly
followed a inside the window.

TIE-BREAK:
==========
Successors are kept in first-observed order (networkx preserves edge
insertion order), and argmax keeps the first maximum it sees. Equal
probabilities therefore resolve to the successor observed first.
"""

from __future__ import annotations
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple
import networkx as nx

from ..config import EngineConfig, DEFAULT_CONFIG
from ..contracts.base import ErrorCode
from ..contracts.records import Alternative, Prediction, SequencePattern
from ..codec.decoder import ActivityDecoder
from ..observability import DiagnosticsSink, NULL_DIAGNOSTICS


COMPONENT = "analytics.transitions"

MAX_ALTERNATIVES = 3

STRONG_THRESHOLD = 0.8
MODERATE_THRESHOLD = 0.6
WEAK_THRESHOLD = 0.4
HIGH_DIVERSITY_THRESHOLD = 0.7
REPETITIVE_THRESHOLD = 0.3


class TransitionModel:
    """
    Ephemeral transition counts over one window of activities.

    Wraps NetworkX; only counting and per-node probability lookups are
    exposed.
    """

    def __init__(self):
        self._graph = nx.DiGraph()

    @classmethod
    def from_activities(cls, activities: Sequence[str]) -> TransitionModel:
        model = cls()
        for current, following in zip(activities, activities[1:]):
            model.observe(current, following)
        return model

    def observe(self, current: str, following: str) -> None:
        """Record one current -> following transition."""
        if self._graph.has_edge(current, following):
            self._graph[current][following]['count'] += 1
        else:
            self._graph.add_edge(current, following, count=1)

    def count(self, current: str, following: str) -> int:
        if not self._graph.has_edge(current, following):
            return 0
        return self._graph[current][following]['count']

    def successors(self, current: str) -> List[Tuple[str, int]]:
        """(next_activity, count) pairs in first-observed order."""
        if current not in self._graph:
            return []
        return [
            (following, data['count'])
            for following, data in self._graph.adj[current].items()
        ]

    def probabilities(self, current: str) -> List[Tuple[str, float]]:
        """(next_activity, count / total outgoing) in first-observed order."""
        successors = self.successors(current)
        total = sum(count for _, count in successors)
        if total == 0:
            return []
        return [(following, count / total) for following, count in successors]

    def as_table(self) -> dict:
        """Plain nested dict {activity: {next_activity: count}}."""
        return {
            current: {f: data['count'] for f, data in self._graph.adj[current].items()}
            for current in self._graph.nodes
            if self._graph.out_degree(current) > 0
        }

    @property
    def transition_count(self) -> int:
        return sum(data['count'] for _, _, data in self._graph.edges(data=True))


class TransitionPredictor:
    """
    Predict the next activity from a sequence of encoded records.

    BOUNDARY ENFORCEMENT:
    - Deterministic: same events = same prediction
    - No state carried between calls
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self._config = config or DEFAULT_CONFIG
        self._diagnostics = diagnostics or NULL_DIAGNOSTICS
        self._decoder = ActivityDecoder(diagnostics=self._diagnostics)

    def predict(self, events: Sequence[str], lookback: Optional[int] = None) -> Prediction:
        """
        Predict from the trailing `lookback` events.

        Events that fail to decode are dropped from the window, they do
        not widen it.
        """
        window_size = self._resolve_lookback(lookback)
        if not isinstance(events, (list, tuple)):
            return Prediction.insufficient(lookback=window_size)

        activities = []
        for text in events[-window_size:]:
            result = self._decoder.decode(text)
            if result.is_success and result.value.activity:
                activities.append(result.value.activity)

        return self.predict_activities(activities, lookback=window_size)

    def predict_activities(self, activities: Sequence[str], lookback: int = 0) -> Prediction:
        """Predict from an already-decoded, chronological activity window."""
        activities = list(activities)
        if len(activities) < 2:
            return Prediction.insufficient(sample_size=len(activities), lookback=lookback)

        model = TransitionModel.from_activities(activities)
        last = activities[-1]
        ranked = model.probabilities(last)

        next_activity = None
        best = 0.0
        for candidate, probability in ranked:
            if probability > best:
                next_activity, best = candidate, probability

        alternatives = tuple(
            Alternative(activity=a, probability=round(p, 2))
            for a, p in sorted(
                ((a, p) for a, p in ranked if a != next_activity),
                key=lambda pair: -pair[1]
            )[:MAX_ALTERNATIVES]
        )

        return Prediction(
            next_activity=next_activity,
            confidence=round(best, 2),
            pattern=classify_pattern(best, activities),
            alternatives=alternatives,
            most_frequent=Counter(activities).most_common(1)[0][0],
            sample_size=len(activities),
            lookback=lookback
        )

    def _resolve_lookback(self, lookback: Optional[int]) -> int:
        cfg = self._config
        if lookback is None:
            return cfg.default_lookback
        try:
            requested = int(lookback)
        except (TypeError, ValueError, OverflowError):
            self._diagnostics.emit(
                ErrorCode.LOOKBACK_CLAMPED,
                "Non-numeric lookback replaced by the default",
                COMPONENT,
                requested=lookback,
                used=cfg.default_lookback
            )
            return cfg.default_lookback
        clamped = max(cfg.min_lookback, min(cfg.max_lookback, requested))
        if clamped != lookback:
            self._diagnostics.emit(
                ErrorCode.LOOKBACK_CLAMPED,
                "Lookback outside the allowed range was clamped",
                COMPONENT,
                requested=lookback,
                used=clamped
            )
        return clamped


def classify_pattern(probability: float, activities: Iterable[str]) -> SequencePattern:
    """
    Label a prediction by its probability, falling back to the
    diversity ratio (unique / total) of the window.
    """
    if probability > STRONG_THRESHOLD:
        return SequencePattern.STRONG_SEQUENCE
    if probability > MODERATE_THRESHOLD:
        return SequencePattern.MODERATE_SEQUENCE
    if probability > WEAK_THRESHOLD:
        return SequencePattern.WEAK_SEQUENCE

    activities = list(activities)
    if not activities:
        return SequencePattern.INSUFFICIENT_DATA
    diversity = len(set(activities)) / len(activities)
    if diversity > HIGH_DIVERSITY_THRESHOLD:
        return SequencePattern.HIGH_DIVERSITY
    if diversity < REPETITIVE_THRESHOLD:
        return SequencePattern.REPETITIVE
    return SequencePattern.RANDOM
