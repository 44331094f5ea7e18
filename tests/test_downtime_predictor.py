"""Tests for downtime pattern extraction and forecasting."""

import pytest

from models.downtime import DowntimePattern
from optimizers.downtime_predictor import DowntimePredictor


# ---------------------------------------------------------------------------
# Empty history
# ---------------------------------------------------------------------------


class TestEmptyHistory:
    """Empty input yields a zero-risk prediction."""

    def test_empty_prediction(self):
        prediction = DowntimePredictor().predict([])
        assert prediction.predicted_events == []
        assert prediction.risk_score == 0
        assert prediction.confidence_level == 0
        assert prediction.preventive_actions == []
        assert prediction.patterns == {}

    def test_empty_pattern_defaults(self):
        pattern = DowntimePredictor().calculate_pattern([])
        assert pattern.frequency == 0
        assert pattern.avg_interval == 30.0
        assert pattern.trend == "stable"


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class TestPatterns:
    """Test per-type statistics."""

    def test_basic_pattern(self, make_event):
        events = [make_event(0), make_event(10), make_event(20)]
        pattern = DowntimePredictor().analyze_patterns(events)["unplanned"]

        assert pattern.frequency == 3
        assert pattern.avg_duration == pytest.approx(1.0)
        assert pattern.avg_interval == pytest.approx(10.0)
        assert pattern.trend == "stable"
        assert pattern.severity == "low"

    def test_events_sorted_by_timestamp(self, make_event):
        """Intervals are measured after sorting, so input order does not matter."""
        events = [make_event(20), make_event(0), make_event(10)]
        pattern = DowntimePredictor().analyze_patterns(events)["unplanned"]
        assert pattern.avg_interval == pytest.approx(10.0)

    def test_single_event_uses_default_interval(self, make_event):
        pattern = DowntimePredictor().analyze_patterns([make_event(0)])["unplanned"]
        assert pattern.avg_interval == 30.0

    def test_types_in_first_appearance_order(self, make_event):
        events = [make_event(0, "setup"), make_event(1, "quality"), make_event(2, "setup")]
        assert list(DowntimePredictor().analyze_patterns(events)) == ["setup", "quality"]

    @pytest.mark.parametrize("durations, expected", [
        ([1, 1, 3, 3], "increasing"),
        ([3, 3, 1, 1], "decreasing"),
        ([2, 2, 2.1, 2.1], "stable"),
        ([1, 1, 9], "stable"),              # fewer than 4 events
        ([1, 1, 100, 1, 1], "stable"),      # middle event skipped
        ([0, 0, 1, 1], "increasing"),       # zero earlier average
    ])
    def test_trend(self, make_event, durations, expected):
        events = [make_event(day, duration=d) for day, d in enumerate(durations)]
        assert DowntimePredictor().calculate_trend(events) == expected

    @pytest.mark.parametrize("durations, severities, expected", [
        ([0.5, 0.5], ["low", "low"], "low"),
        ([1.5, 1.5], ["low", "low"], "medium"),
        ([3.0, 3.0], ["low", "low"], "high"),
        ([5.0, 5.0], ["low", "low"], "critical"),
        ([0.5, 0.5, 0.5], ["critical", "low", "low"], "critical"),
    ])
    def test_severity(self, make_event, durations, severities, expected):
        events = [make_event(i, duration=d, severity=s)
                  for i, (d, s) in enumerate(zip(durations, severities))]
        avg = sum(durations) / len(durations)
        assert DowntimePredictor.calculate_severity(events, avg) == expected


# ---------------------------------------------------------------------------
# Forecasts
# ---------------------------------------------------------------------------


class TestForecasts:
    """Test probabilities, timeframes, risk and confidence."""

    def test_full_prediction(self, make_event):
        prediction = DowntimePredictor().predict([make_event(0), make_event(10), make_event(20)])

        event = prediction.predicted_events[0]
        assert event.type == "unplanned"
        assert event.probability == 30
        assert event.timeframe == "Within 1 month"
        assert event.risk_factors == ["Frequent occurrences", "Equipment aging", "Maintenance gaps"]
        assert prediction.risk_score == 8      # 0.30 * 1 * 25 = 7.5 rounds up
        assert prediction.confidence_level == 6
        assert prediction.preventive_actions == []

    def test_trend_scales_probability(self, make_event):
        events = [make_event(day, duration=d) for day, d in enumerate([1, 1, 3, 3])]
        event = DowntimePredictor().predict(events).predicted_events[0]
        assert event.probability == 52
        assert "Increasing frequency trend" in event.risk_factors

    def test_probability_capped(self, make_event):
        events = [make_event(day, duration=1 + day) for day in range(10)]
        event = DowntimePredictor().predict(events).predicted_events[0]
        assert event.probability == 95

    def test_predictions_sorted_by_probability(self, make_event):
        events = ([make_event(i, "quality") for i in range(2)]
                  + [make_event(i, "setup") for i in range(6)]
                  + [make_event(i, "operator") for i in range(2)])
        prediction = DowntimePredictor().predict(events)

        probabilities = [p.probability for p in prediction.predicted_events]
        assert probabilities == sorted(probabilities, reverse=True)
        assert all(0 <= p <= 95 for p in probabilities)
        assert [p.type for p in prediction.predicted_events] == ["setup", "quality", "operator"]

    def test_preventive_actions(self, make_event):
        events = ([make_event(i, "unplanned") for i in range(8)]
                  + [make_event(i, "material") for i in range(6)])
        actions = DowntimePredictor().predict(events).preventive_actions

        assert [a.priority for a in actions] == ["urgent", "high"]
        assert actions[0].action == "Implement preventive measures for unplanned downtime"
        assert actions[1].timeframe == "Within 1 week"

    @pytest.mark.parametrize("interval, expected", [
        (3, "Within 1 week"),
        (7.4, "Within 1 week"),
        (7.5, "Within 1 month"),
        (30, "Within 1 month"),
        (60, "Within 3 months"),
        (120, "Within 6 months"),
    ])
    def test_timeframe(self, interval, expected):
        assert DowntimePredictor.calculate_timeframe(DowntimePattern(avg_interval=interval)) == expected

    def test_confidence_bonus_for_frequent_events(self, make_event):
        events = [make_event(i) for i in range(30)]
        assert DowntimePredictor().predict(events).confidence_level == 70

    def test_confidence_capped(self, make_event):
        events = [make_event(i) for i in range(50)]
        assert DowntimePredictor().predict(events).confidence_level == 95

    def test_risk_score_bounds(self, make_event):
        events = [make_event(i, duration=6.0, severity="critical") for i in range(12)]
        prediction = DowntimePredictor().predict(events)
        assert 0 <= prediction.risk_score <= 100
        assert prediction.risk_score == 90     # 0.90 * 4 * 25
