"""
Workflow Model - Process steps and bottleneck analysis results

This module defines WorkflowStep records (nodes of a dependency DAG) and the
derived Bottleneck / BottleneckAnalysis structures.

Key Features:
    - Steps with durations, dependencies and resources
    - Per-step bottleneck severity with causes and solutions
    - Critical path and improvement opportunities
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field

from models.policy import SEVERITY_LEVELS
from optimizers.errors import InvalidInputError


RESOURCE_TYPES = ("operator", "equipment", "material", "tool")


@dataclass
class Resource:
    """A resource a workflow step needs."""
    type: str                    # "operator", "equipment", "material" or "tool"
    resource_id: str
    availability: float = 1.0    # Share of time available, 0-1

    def __post_init__(self):
        if self.type not in RESOURCE_TYPES:
            raise InvalidInputError(f"Resource type must be one of {RESOURCE_TYPES}, got: {self.type}")


@dataclass
class WorkflowStep:
    """
    One step of a production workflow.

    dependencies lists the step_ids that must finish before this step starts.

    Example:
        >>> cut = WorkflowStep("cut", "Laser cutting", 20, dependencies=["prep"])
    """

    step_id: str
    name: str
    duration: float                          # Minutes
    dependencies: List[str] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    bottleneck_potential: float = 0.0        # 0-1

    def __post_init__(self):
        if self.duration < 0:
            raise InvalidInputError(f"Step {self.step_id} duration cannot be negative")
        if not 0.0 <= self.bottleneck_potential <= 1.0:
            raise InvalidInputError(
                f"Step {self.step_id} bottleneck potential must be within [0, 1], "
                f"got: {self.bottleneck_potential}"
            )


@dataclass
class Bottleneck:
    """Bottleneck assessment of one step."""
    step_id: str
    step_name: str
    severity: str                # One of SEVERITY_LEVELS
    impact: float                # Percent of the critical path duration
    causes: List[str] = field(default_factory=list)
    solutions: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.severity not in SEVERITY_LEVELS:
            raise InvalidInputError(f"Unknown bottleneck severity: {self.severity}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "step_name": self.step_name,
            "severity": self.severity,
            "impact": self.impact,
            "causes": self.causes,
            "solutions": self.solutions,
        }


@dataclass
class WorkflowImprovement:
    """An improvement opportunity for a constraining step."""
    area: str
    description: str
    potential_gain: float        # Minutes
    complexity: str              # "low", "medium" or "high"
    timeline: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.area,
            "description": self.description,
            "potential_gain": round(self.potential_gain, 2),
            "complexity": self.complexity,
            "timeline": self.timeline,
        }


@dataclass
class BottleneckAnalysis:
    """Result of workflow bottleneck analysis."""

    bottlenecks: List[Bottleneck] = field(default_factory=list)
    critical_path: List[str] = field(default_factory=list)
    critical_path_duration: float = 0.0
    improvement_opportunities: List[WorkflowImprovement] = field(default_factory=list)
    efficiency_score: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bottlenecks": [b.to_dict() for b in self.bottlenecks],
            "critical_path": self.critical_path,
            "critical_path_duration": self.critical_path_duration,
            "improvement_opportunities": [i.to_dict() for i in self.improvement_opportunities],
            "efficiency_score": self.efficiency_score,
        }

    def __str__(self) -> str:
        return (f"BottleneckAnalysis(path {' -> '.join(self.critical_path)}, "
                f"{self.critical_path_duration}min, efficiency {self.efficiency_score})")
