"""
Downtime Predictor

Extracts per-type statistical patterns from historical downtime events and
turns them into near-future forecasts with a probability, a timeframe, risk
factors, an overall risk score, preventive actions and a confidence level.

Forecasting is elementary statistics: event counts, mean durations, mean
intervals and a first-half/second-half duration trend.
"""

import logging
import math
from typing import Dict, List, Optional

from models.downtime import (
    DowntimeEvent,
    DowntimePattern,
    DowntimePrediction,
    PredictedDowntime,
    PreventiveAction,
)
from models.policy import SchedulingPolicy
from utils.deadline import Deadline

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24

# Risk factors that always apply to a downtime type
TYPE_RISK_FACTORS = {
    "unplanned": ["Equipment aging", "Maintenance gaps"],
    "setup": ["Process complexity", "Operator training"],
    "material": ["Supply chain issues", "Quality variations"],
    "operator": ["Training needs", "Workload management"],
    "quality": ["Process control", "Equipment calibration"],
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class DowntimePredictor:
    """
    Forecasts downtime from history.

    Example:
        >>> predictor = DowntimePredictor()
        >>> prediction = predictor.predict(events)
        >>> prediction.predicted_events[0].type
        'unplanned'
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def predict(self, history: List[DowntimeEvent], deadline: Optional[Deadline] = None) -> DowntimePrediction:
        """
        Run the full prediction.

        Args:
            history: Historical downtime events (any order)
            deadline: Optional call deadline

        Returns:
            DowntimePrediction; empty history yields an empty, zero-risk result
        """
        deadline = deadline or Deadline.unbounded()

        if not history:
            logger.warning("No downtime history supplied, returning empty prediction")
            return DowntimePrediction()

        patterns = self.analyze_patterns(history)
        deadline.check("downtime_patterns")

        predictions = self.predict_events(patterns)
        risk_score = self.calculate_risk_score(patterns, predictions)
        actions = self.generate_preventive_actions(predictions)
        confidence = self.calculate_confidence(len(history), patterns)

        logger.info("Downtime prediction: %d types, risk %d, confidence %d%%",
                    len(patterns), risk_score, confidence)

        return DowntimePrediction(
            predicted_events=predictions,
            risk_score=risk_score,
            preventive_actions=actions,
            confidence_level=confidence,
            patterns=patterns,
        )

    # ---------------------------------------------------------------
    # Pattern extraction
    # ---------------------------------------------------------------

    def analyze_patterns(self, history: List[DowntimeEvent]) -> Dict[str, DowntimePattern]:
        """Group events by type (first appearance order) and summarize each group."""
        by_type: Dict[str, List[DowntimeEvent]] = {}
        for event in history:
            by_type.setdefault(event.type, []).append(event)

        return {event_type: self.calculate_pattern(events) for event_type, events in by_type.items()}

    def calculate_pattern(self, events: List[DowntimeEvent]) -> DowntimePattern:
        """
        Summarize the events of one type.

        Args:
            events: Events of a single type

        Returns:
            DowntimePattern; a safe default when events is empty
        """
        if not events:
            return DowntimePattern(avg_interval=self.policy.default_event_interval_days)

        ordered = sorted(events, key=lambda e: e.timestamp)
        avg_duration = _mean([e.duration for e in ordered])

        intervals = [
            (current.timestamp - previous.timestamp).total_seconds() / SECONDS_PER_DAY
            for previous, current in zip(ordered, ordered[1:])
        ]
        avg_interval = _mean(intervals) if intervals else self.policy.default_event_interval_days

        return DowntimePattern(
            avg_duration=avg_duration,
            frequency=len(ordered),
            avg_interval=avg_interval,
            trend=self.calculate_trend(ordered),
            severity=self.calculate_severity(ordered, avg_duration),
        )

    def calculate_trend(self, ordered_events: List[DowntimeEvent]) -> str:
        """
        Compare mean duration of the later half against the earlier half.

        Needs at least 4 events; with an odd count the middle event is skipped.
        """
        if len(ordered_events) < 4:
            return "stable"

        half = len(ordered_events) // 2
        earlier_avg = _mean([e.duration for e in ordered_events[:half]])
        recent_avg = _mean([e.duration for e in ordered_events[-half:]])

        if earlier_avg == 0:
            return "increasing" if recent_avg > 0 else "stable"

        change = (recent_avg - earlier_avg) / earlier_avg
        if change > self.policy.trend_change_threshold:
            return "increasing"
        if change < -self.policy.trend_change_threshold:
            return "decreasing"
        return "stable"

    @staticmethod
    def calculate_severity(events: List[DowntimeEvent], avg_duration: float) -> str:
        critical_events = sum(1 for e in events if e.severity == "critical")

        if critical_events > len(events) * 0.2 or avg_duration > 4:
            return "critical"
        if avg_duration > 2:
            return "high"
        if avg_duration > 1:
            return "medium"
        return "low"

    # ---------------------------------------------------------------
    # Forecasting
    # ---------------------------------------------------------------

    def predict_events(self, patterns: Dict[str, DowntimePattern]) -> List[PredictedDowntime]:
        predictions = [
            PredictedDowntime(
                type=event_type,
                probability=self.calculate_probability(pattern),
                estimated_duration=pattern.avg_duration,
                timeframe=self.calculate_timeframe(pattern),
                risk_factors=self.identify_risk_factors(pattern, event_type),
            )
            for event_type, pattern in patterns.items()
        ]
        # Stable: equal probabilities keep first-appearance order
        return sorted(predictions, key=lambda p: -p.probability)

    def calculate_probability(self, pattern: DowntimePattern) -> int:
        """Frequency-based probability scaled by trend, capped at 95."""
        if pattern.frequency <= 0:
            return 0
        base_probability = min(90, pattern.frequency * 10)
        base_probability *= self.policy.trend_factors[pattern.trend]
        return min(95, _round_half_up(base_probability))

    @staticmethod
    def calculate_timeframe(pattern: DowntimePattern) -> str:
        days = _round_half_up(pattern.avg_interval)

        if days <= 7:
            return "Within 1 week"
        if days <= 30:
            return "Within 1 month"
        if days <= 90:
            return "Within 3 months"
        return "Within 6 months"

    def identify_risk_factors(self, pattern: DowntimePattern, event_type: str) -> List[str]:
        factors = []

        if pattern.trend == "increasing":
            factors.append("Increasing frequency trend")

        if pattern.severity in ("high", "critical"):
            factors.append("High severity events")

        if pattern.avg_interval < self.policy.frequent_interval_days:
            factors.append("Frequent occurrences")

        factors.extend(TYPE_RISK_FACTORS.get(event_type, []))
        return factors

    def calculate_risk_score(self, patterns: Dict[str, DowntimePattern],
                             predictions: List[PredictedDowntime]) -> int:
        """Mean probability (as a fraction) x mean severity score x 25, capped at 100."""
        if not predictions or not patterns:
            return 0

        mean_probability = _mean([p.probability for p in predictions])
        mean_severity = _mean([self.policy.severity_scores[p.severity] for p in patterns.values()])

        return min(100, _round_half_up(mean_probability / 100 * mean_severity * 25))

    @staticmethod
    def generate_preventive_actions(predictions: List[PredictedDowntime]) -> List[PreventiveAction]:
        actions = []

        for prediction in predictions:
            if prediction.probability > 70:
                actions.append(PreventiveAction(
                    action=f"Implement preventive measures for {prediction.type} downtime",
                    priority="urgent",
                    timeframe="Immediate",
                    expected_impact=f"Reduce {prediction.type} downtime by 30-50%",
                ))
            elif prediction.probability > 50:
                actions.append(PreventiveAction(
                    action=f"Monitor and prepare for potential {prediction.type} issues",
                    priority="high",
                    timeframe="Within 1 week",
                    expected_impact="Early detection and faster resolution",
                ))

        return actions

    @staticmethod
    def calculate_confidence(data_points: int, patterns: Dict[str, DowntimePattern]) -> int:
        """More data and more frequent events give higher confidence, capped at 95."""
        if data_points <= 0 or not patterns:
            return 0

        confidence = min(90, data_points * 2)

        mean_frequency = _mean([p.frequency for p in patterns.values()])
        if mean_frequency > 5:
            confidence += 10

        return min(95, confidence)
