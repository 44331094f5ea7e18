"""
Policy Model - Tunable constants for the scheduling engine

This module defines the SchedulingPolicy dataclass which gathers every number
the engine's heuristics depend on: setup time rules, priority weights,
forecasting thresholds, batch sizing parameters and bottleneck thresholds.

Key Features:
    - Defaults reproduce the shop's standard rules
    - Loaded from YAML/JSON by utils.config_loader
    - Validated after initialization
"""

from typing import Dict, Any
from dataclasses import dataclass, field, asdict, fields

from optimizers.errors import InvalidInputError


PRIORITY_LEVELS = ("low", "medium", "high", "urgent")
COMPLEXITY_LEVELS = ("simple", "medium", "complex")
SEVERITY_LEVELS = ("low", "medium", "high", "critical")


@dataclass
class SchedulingPolicy:
    """
    Scheduling and analysis policy for one engine instance.

    Example:
        >>> policy = SchedulingPolicy(initial_setup_time=20.0)
        >>> policy.complexity_factors["complex"]
        1.5
    """

    # Setup time model (minutes)
    initial_setup_time: float = 15.0
    base_setup_time: float = 5.0
    material_change_time: float = 10.0
    thickness_change_time: float = 5.0
    complexity_factors: Dict[str, float] = field(
        default_factory=lambda: {"simple": 1.0, "medium": 1.2, "complex": 1.5}
    )

    # Sequencing
    priority_weights: Dict[str, int] = field(
        default_factory=lambda: {"urgent": 4, "high": 3, "medium": 2, "low": 1}
    )
    complexity_order: Dict[str, int] = field(
        default_factory=lambda: {"simple": 1, "medium": 2, "complex": 3}
    )
    worst_case_setup_per_job: float = 20.0   # Naive baseline for setup reductions
    material_change_threshold: float = 0.3   # Share of jobs allowed to change material

    # Setup time matrix
    default_matrix_setup_time: float = 15.0
    compatible_setup_threshold: float = 5.0
    optimization_setup_threshold: float = 20.0
    high_difficulty_setup_threshold: float = 30.0
    optimization_saving_ratio: float = 0.3

    # Downtime prediction
    trend_change_threshold: float = 0.1
    trend_factors: Dict[str, float] = field(
        default_factory=lambda: {"increasing": 1.3, "decreasing": 0.7, "stable": 1.0}
    )
    severity_scores: Dict[str, int] = field(
        default_factory=lambda: {"low": 1, "medium": 2, "high": 3, "critical": 4}
    )
    default_event_interval_days: float = 30.0
    frequent_interval_days: float = 14.0

    # Batch optimization
    batch_setup_cost: float = 30.0          # Setup minutes per batch
    min_batch_size: int = 10
    max_batch_size: int = 200
    low_utilization_threshold: float = 70.0  # Percent
    small_remainder_ratio: float = 0.2

    # Bottleneck analysis
    critical_bottleneck_potential: float = 0.8
    medium_bottleneck_potential: float = 0.6
    low_availability_threshold: float = 0.8
    improvement_gain_ratio: float = 0.3

    def __post_init__(self):
        """Validate policy data after initialization."""
        missing = set(COMPLEXITY_LEVELS) - set(self.complexity_factors)
        if missing:
            raise InvalidInputError(f"complexity_factors missing levels: {sorted(missing)}")

        missing = set(PRIORITY_LEVELS) - set(self.priority_weights)
        if missing:
            raise InvalidInputError(f"priority_weights missing levels: {sorted(missing)}")

        missing = set(SEVERITY_LEVELS) - set(self.severity_scores)
        if missing:
            raise InvalidInputError(f"severity_scores missing levels: {sorted(missing)}")

        if self.min_batch_size <= 0 or self.min_batch_size > self.max_batch_size:
            raise InvalidInputError(
                f"Invalid batch size bounds: [{self.min_batch_size}, {self.max_batch_size}]"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchedulingPolicy':
        """
        Create a policy from a dictionary, ignoring unknown keys.

        Args:
            data: Flat dictionary of policy values

        Returns:
            SchedulingPolicy instance
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        """Convert policy to dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        return (f"SchedulingPolicy(initial setup {self.initial_setup_time}min, "
                f"batch setup {self.batch_setup_cost}min, "
                f"batch size {self.min_batch_size}-{self.max_batch_size})")
