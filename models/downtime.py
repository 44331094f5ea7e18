"""
Downtime Model - Historical downtime events and forecasts

This module defines the raw DowntimeEvent record supplied by the caller and
the derived structures produced by the downtime predictor.

Key Features:
    - Immutable historical events
    - Per-type statistical patterns
    - Probability-ranked forecasts with preventive actions
"""

from datetime import datetime
from typing import List, Dict, Any
from dataclasses import dataclass, field

from models.policy import SEVERITY_LEVELS
from optimizers.errors import InvalidInputError


DOWNTIME_TYPES = ("planned", "unplanned", "setup", "material", "operator", "quality")
TREND_TYPES = ("increasing", "decreasing", "stable")


@dataclass(frozen=True)
class DowntimeEvent:
    """
    A single historical downtime occurrence.

    Example:
        >>> event = DowntimeEvent(
        ...     timestamp=datetime(2026, 1, 5, 9, 30),
        ...     type="unplanned",
        ...     duration=2.5,
        ...     cause="Chiller fault",
        ...     severity="high",
        ... )
    """

    timestamp: datetime
    type: str                # One of DOWNTIME_TYPES
    duration: float          # Hours
    cause: str = ""
    severity: str = "low"    # One of SEVERITY_LEVELS
    resolved: bool = True

    def __post_init__(self):
        """Validate event data after initialization."""
        if self.type not in DOWNTIME_TYPES:
            raise InvalidInputError(f"Downtime type must be one of {DOWNTIME_TYPES}, got: {self.type}")

        if self.severity not in SEVERITY_LEVELS:
            raise InvalidInputError(f"Severity must be one of {SEVERITY_LEVELS}, got: {self.severity}")

        if self.duration < 0:
            raise InvalidInputError(f"Duration cannot be negative, got: {self.duration}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "type": self.type,
            "duration": self.duration,
            "cause": self.cause,
            "severity": self.severity,
            "resolved": self.resolved,
        }


@dataclass
class DowntimePattern:
    """Statistical summary of one downtime type. Recomputed on every call."""
    avg_duration: float = 0.0        # Hours
    frequency: int = 0               # Event count
    avg_interval: float = 30.0       # Days between consecutive events
    trend: str = "stable"
    severity: str = "low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg_duration": round(self.avg_duration, 2),
            "frequency": self.frequency,
            "avg_interval": round(self.avg_interval, 2),
            "trend": self.trend,
            "severity": self.severity,
        }


@dataclass
class PredictedDowntime:
    """Forecast for one downtime type."""
    type: str
    probability: int                 # Percent, 0-95
    estimated_duration: float        # Hours
    timeframe: str                   # e.g. "Within 1 week"
    risk_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "probability": self.probability,
            "estimated_duration": round(self.estimated_duration, 2),
            "timeframe": self.timeframe,
            "risk_factors": self.risk_factors,
        }


@dataclass
class PreventiveAction:
    """Action suggested to reduce a forecast downtime risk."""
    action: str
    priority: str                    # "low", "medium", "high" or "urgent"
    timeframe: str
    expected_impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "priority": self.priority,
            "timeframe": self.timeframe,
            "expected_impact": self.expected_impact,
        }


@dataclass
class DowntimePrediction:
    """
    Complete downtime forecast.

    predicted_events are sorted by probability, highest first.
    """

    predicted_events: List[PredictedDowntime] = field(default_factory=list)
    risk_score: int = 0              # 0-100
    preventive_actions: List[PreventiveAction] = field(default_factory=list)
    confidence_level: int = 0        # 0-95
    patterns: Dict[str, DowntimePattern] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert prediction to dictionary."""
        return {
            "predicted_events": [event.to_dict() for event in self.predicted_events],
            "risk_score": self.risk_score,
            "preventive_actions": [action.to_dict() for action in self.preventive_actions],
            "confidence_level": self.confidence_level,
            "patterns": {key: pattern.to_dict() for key, pattern in self.patterns.items()},
        }

    def __str__(self) -> str:
        return (f"DowntimePrediction({len(self.predicted_events)} event types, "
                f"risk {self.risk_score}, confidence {self.confidence_level}%)")
