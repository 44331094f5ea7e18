"""
Job Model - Represents a cutting job waiting to be sequenced

This module defines the Job class which encapsulates everything the
sequencing pipeline needs to know about a pending laser-cutting job:
material, sheet thickness, duration, priority, due date and complexity.

Key Attributes:
    - job_id: Unique identifier
    - material_type: Sheet material (e.g., "steel", "aluminum")
    - thickness: Sheet thickness in mm
    - estimated_duration: Cutting time in minutes
    - priority: "low", "medium", "high" or "urgent"
    - complexity: "simple", "medium" or "complex"
"""

from datetime import datetime
from typing import List, Dict, Any, Tuple
from dataclasses import dataclass, field
import json

from models.policy import PRIORITY_LEVELS, COMPLEXITY_LEVELS
from optimizers.errors import InvalidInputError


SETUP_REQUIREMENT_TYPES = ("material", "tooling", "program", "fixture")


def material_group_id(material_type: str, thickness: float) -> str:
    """
    Readable key for a material/thickness pair (e.g., "steel_3").

    Falls back to full precision when the short form would merge
    distinct thicknesses (1.0000001 and 1.0000002 both print as "1").
    """
    label = f"{thickness:g}"
    if float(label) != thickness:
        label = repr(float(thickness))
    return f"{material_type}_{label}"


@dataclass(frozen=True)
class SetupRequirement:
    """A single machine preparation step needed before a job can run."""

    type: str             # "material", "tooling", "program" or "fixture"
    value: str            # What has to be loaded or configured
    change_time: float    # Minutes needed for the change

    def __post_init__(self):
        if self.type not in SETUP_REQUIREMENT_TYPES:
            raise InvalidInputError(f"Unknown setup requirement type: {self.type}")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value, "change_time": self.change_time}


@dataclass(frozen=True)
class Job:
    """
    Represents a single cutting job. Jobs are never mutated by the engine.

    Example:
        >>> job = Job(
        ...     job_id="J001",
        ...     material_type="steel",
        ...     thickness=3.0,
        ...     estimated_duration=30,
        ...     priority="urgent",
        ...     due_date=datetime(2026, 3, 2, 12, 0),
        ... )
    """

    job_id: str                          # Unique job identifier (e.g., "J001")
    material_type: str                   # Sheet material (e.g., "steel")
    thickness: float                     # Sheet thickness in mm
    estimated_duration: float            # Cutting duration in minutes
    priority: str                        # "low", "medium", "high" or "urgent"
    due_date: datetime                   # Delivery deadline
    complexity: str = "simple"           # "simple", "medium" or "complex"
    setup_requirements: List[SetupRequirement] = field(default_factory=list, hash=False)

    def __post_init__(self):
        """Validate job data after initialization."""
        if self.priority not in PRIORITY_LEVELS:
            raise InvalidInputError(
                f"Priority must be one of {PRIORITY_LEVELS}, got: {self.priority}"
            )

        if self.complexity not in COMPLEXITY_LEVELS:
            raise InvalidInputError(
                f"Complexity must be one of {COMPLEXITY_LEVELS}, got: {self.complexity}"
            )

        if self.estimated_duration < 0:
            raise InvalidInputError(
                f"Estimated duration cannot be negative, got: {self.estimated_duration}"
            )

        if self.thickness <= 0:
            raise InvalidInputError(f"Thickness must be positive, got: {self.thickness}")

    @property
    def material_key(self) -> Tuple[str, float]:
        """Material and thickness pair that determines changeovers."""
        return (self.material_type, self.thickness)

    @property
    def group_id(self) -> str:
        """Human readable material group key (e.g., "steel_3")."""
        return material_group_id(self.material_type, self.thickness)

    @property
    def is_urgent(self) -> bool:
        return self.priority == "urgent"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert job to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the job
        """
        return {
            "job_id": self.job_id,
            "material_type": self.material_type,
            "thickness": self.thickness,
            "estimated_duration": self.estimated_duration,
            "priority": self.priority,
            "due_date": self.due_date.isoformat(),
            "complexity": self.complexity,
            "setup_requirements": [req.to_dict() for req in self.setup_requirements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Job':
        """
        Create a Job instance from a dictionary.

        Args:
            data: Dictionary containing job data

        Returns:
            Job instance
        """
        data = dict(data)
        if isinstance(data.get('due_date'), str):
            data['due_date'] = datetime.fromisoformat(data['due_date'])

        data['setup_requirements'] = [
            req if isinstance(req, SetupRequirement) else SetupRequirement(**req)
            for req in data.get('setup_requirements', [])
        ]

        return cls(**data)

    def __str__(self) -> str:
        """String representation for logging and debugging."""
        urgent_flag = " [URGENT]" if self.is_urgent else ""
        return (f"Job({self.job_id}: {self.group_id}, {self.complexity}, "
                f"{self.estimated_duration}min, due {self.due_date:%Y-%m-%d %H:%M}{urgent_flag})")


# Example usage and testing
if __name__ == "__main__":
    urgent_job = Job(
        job_id="J001",
        material_type="steel",
        thickness=3.0,
        estimated_duration=30,
        priority="urgent",
        due_date=datetime(2026, 3, 2, 12, 0),
        setup_requirements=[SetupRequirement("tooling", "nozzle_1.5", 4)],
    )

    print(urgent_job)
    print(f"Group: {urgent_job.group_id}")

    job_dict = urgent_job.to_dict()
    print(f"\nAs dict: {json.dumps(job_dict, indent=2)}")

    reconstructed = Job.from_dict(job_dict)
    print(f"\nReconstructed: {reconstructed}")
