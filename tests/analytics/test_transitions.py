"""
Transition Predictor Tests

Verifies first-order prediction, the first-seen tie-break and the
lookback window bounds.
"""

from activity_dna.analytics import TransitionModel, TransitionPredictor, classify_pattern
from activity_dna.contracts.base import ErrorCode
from activity_dna.contracts.records import SequencePattern


# =============================================================================
# MODEL
# =============================================================================

class TestTransitionModel:

    def test_counts_direct_successors(self):
        model = TransitionModel.from_activities(["A", "B", "A", "B", "A", "C"])
        assert model.count("A", "B") == 2
        assert model.count("B", "A") == 2
        assert model.count("A", "C") == 1
        assert model.count("C", "A") == 0
        assert model.transition_count == 5

    def test_successors_in_first_observed_order(self):
        model = TransitionModel.from_activities(["A", "C", "A", "B", "A", "B"])
        assert [a for a, _ in model.successors("A")] == ["C", "B"]

    def test_probabilities(self):
        model = TransitionModel.from_activities(["A", "B", "A", "C", "A", "B"])
        assert dict(model.probabilities("A")) == {"B": 2 / 3, "C": 1 / 3}
        assert model.probabilities("unknown") == []

    def test_as_table(self):
        model = TransitionModel.from_activities(["A", "B", "A"])
        assert model.as_table() == {"A": {"B": 1}, "B": {"A": 1}}


# =============================================================================
# PREDICTION
# =============================================================================

class TestPrediction:

    def test_alternating_sequence(self, spaced_events):
        prediction = TransitionPredictor().predict(spaced_events(["A", "B", "A", "B", "A"]))
        assert prediction.next_activity == "B"
        assert prediction.confidence == 1.0
        assert prediction.pattern == SequencePattern.STRONG_SEQUENCE
        assert prediction.alternatives == ()
        assert prediction.most_frequent == "A"
        assert prediction.sample_size == 5

    def test_tie_resolves_to_first_seen(self, spaced_events):
        prediction = TransitionPredictor().predict(spaced_events(["A", "B", "A", "C", "A"]))
        assert prediction.next_activity == "B"
        assert prediction.confidence == 0.5
        assert prediction.pattern == SequencePattern.WEAK_SEQUENCE
        assert [a.activity for a in prediction.alternatives] == ["C"]

    def test_alternatives_sorted_and_capped(self):
        activities = ["A", "B", "A", "B", "A", "B", "A", "C", "A", "C", "A", "D", "A", "E", "A"]
        prediction = TransitionPredictor().predict_activities(activities, lookback=15)
        assert prediction.next_activity == "B"
        assert [a.activity for a in prediction.alternatives] == ["C", "D", "E"]
        assert len(prediction.alternatives) == 3

    def test_single_event_is_insufficient(self, spaced_events):
        prediction = TransitionPredictor().predict(spaced_events(["A"]))
        assert prediction.next_activity is None
        assert prediction.confidence == 0.0
        assert prediction.pattern == SequencePattern.INSUFFICIENT_DATA

    def test_non_list_input_is_insufficient(self):
        assert TransitionPredictor().predict("A::1::1").pattern == SequencePattern.INSUFFICIENT_DATA

    def test_last_activity_without_successor(self, spaced_events):
        prediction = TransitionPredictor().predict(spaced_events(["A", "B", "C"]))
        assert prediction.next_activity is None
        assert prediction.confidence == 0.0
        assert prediction.pattern == SequencePattern.HIGH_DIVERSITY

    def test_undecodable_events_are_skipped(self, spaced_events):
        events = spaced_events(["A", "B"]) + ["garbage", None] + spaced_events(["A"])
        prediction = TransitionPredictor().predict(events)
        assert prediction.next_activity == "B"
        assert prediction.sample_size == 3

    def test_only_trailing_window_is_used(self, spaced_events):
        events = spaced_events(["X", "Y"] * 10 + ["A", "B", "A"])
        prediction = TransitionPredictor().predict(events, lookback=3)
        assert prediction.next_activity == "B"
        assert prediction.most_frequent == "A"

    def test_deterministic(self, spaced_events):
        events = spaced_events(["A", "B", "C", "A", "C", "B", "A"])
        predictor = TransitionPredictor()
        assert predictor.predict(events) == predictor.predict(events)


class TestLookbackBounds:

    def test_default_lookback(self, spaced_events):
        prediction = TransitionPredictor().predict(spaced_events(["A", "B"] * 20))
        assert prediction.lookback == 10
        assert prediction.sample_size == 10

    def test_small_lookback_clamped(self, spaced_events, diagnostics):
        predictor = TransitionPredictor(diagnostics=diagnostics)
        prediction = predictor.predict(spaced_events(["A", "B"] * 5), lookback=1)
        assert prediction.lookback == 3
        assert diagnostics.has(ErrorCode.LOOKBACK_CLAMPED)

    def test_large_lookback_clamped(self, spaced_events, diagnostics):
        predictor = TransitionPredictor(diagnostics=diagnostics)
        prediction = predictor.predict(spaced_events(["A", "B"] * 40), lookback=500)
        assert prediction.lookback == 50
        assert prediction.sample_size == 50

    def test_in_range_lookback_not_reported(self, spaced_events, diagnostics):
        TransitionPredictor(diagnostics=diagnostics).predict(spaced_events(["A", "B"]), lookback=5)
        assert not diagnostics.has(ErrorCode.LOOKBACK_CLAMPED)

    def test_non_numeric_lookback_falls_back_to_default(self, spaced_events, diagnostics):
        predictor = TransitionPredictor(diagnostics=diagnostics)
        prediction = predictor.predict(spaced_events(["A", "B"] * 10), lookback="ten")
        assert prediction.lookback == 10
        assert diagnostics.get_entries(code=ErrorCode.LOOKBACK_CLAMPED)[0].detail("used") == "10"


class TestPatternLabels:

    def test_probability_bands(self):
        assert classify_pattern(0.9, ["A"]) == SequencePattern.STRONG_SEQUENCE
        assert classify_pattern(0.7, ["A"]) == SequencePattern.MODERATE_SEQUENCE
        assert classify_pattern(0.5, ["A"]) == SequencePattern.WEAK_SEQUENCE

    def test_band_edges_are_exclusive(self):
        assert classify_pattern(0.8, ["A", "B"]) == SequencePattern.MODERATE_SEQUENCE

    def test_diversity_fallback(self):
        assert classify_pattern(0.0, ["A", "B", "C", "D"]) == SequencePattern.HIGH_DIVERSITY
        assert classify_pattern(0.0, ["A"] * 9 + ["B"]) == SequencePattern.REPETITIVE
        assert classify_pattern(0.0, ["A", "A", "B", "B"]) == SequencePattern.RANDOM
