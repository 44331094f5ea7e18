"""
Schedule Model - Represents a sequenced, timed cutting schedule

This module defines the ScheduledJob class (a job placed on the machine
timeline) and the OptimizedSchedule class which bundles the timeline with
its efficiency metrics and recommendations.

Key Features:
    - Timeline positions and timestamps per job
    - Setup and production time totals
    - Efficiency and setup reduction metrics
    - Human-readable scheduling recommendations
"""

from datetime import datetime
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from models.job import Job


@dataclass
class ScheduledJob:
    """
    Represents a job placed on the machine timeline.
    """
    job: Job
    scheduled_start: datetime
    scheduled_end: datetime
    setup_time: float            # Setup minutes before this job
    position: int                # 1-based rank in the cut sequence
    group_id: Optional[str] = None

    @property
    def job_id(self) -> str:
        return self.job.job_id

    @property
    def material_type(self) -> str:
        return self.job.material_type

    @property
    def estimated_duration(self) -> float:
        return self.job.estimated_duration

    @property
    def priority(self) -> str:
        return self.job.priority

    def get_duration_minutes(self) -> float:
        """Calculate total duration including setup."""
        return self.job.estimated_duration + self.setup_time

    def is_late(self) -> bool:
        """Check if job finishes after its due date."""
        return self.scheduled_end > self.job.due_date

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "job_id": self.job.job_id,
            "material_type": self.job.material_type,
            "thickness": self.job.thickness,
            "priority": self.job.priority,
            "complexity": self.job.complexity,
            "position": self.position,
            "group_id": self.group_id,
            "scheduled_start": self.scheduled_start.isoformat(),
            "scheduled_end": self.scheduled_end.isoformat(),
            "setup_time": round(self.setup_time, 2),
            "estimated_duration": self.job.estimated_duration,
            "is_late": self.is_late(),
        }


@dataclass
class SchedulingRecommendation:
    """A suggestion for improving the cut sequence."""
    type: str                    # "grouping", "sequencing", "timing" or "resource"
    description: str
    impact: str
    effort: str                  # "low", "medium" or "high"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "impact": self.impact,
            "effort": self.effort,
        }


@dataclass
class OptimizedSchedule:
    """
    Represents a complete optimized cut sequence with its metrics.

    Derived, read-only result of the sequencing pipeline.
    """

    jobs: List[ScheduledJob] = field(default_factory=list)
    total_setup_time: float = 0.0         # Minutes
    total_production_time: float = 0.0   # Minutes
    efficiency: float = 0.0               # Production share of busy time, 0-100
    setup_reductions: float = 0.0         # Minutes saved against the naive baseline
    recommendations: List[SchedulingRecommendation] = field(default_factory=list)

    @property
    def makespan_minutes(self) -> float:
        """Minutes from the first start to the last end."""
        if not self.jobs:
            return 0.0
        return (self.jobs[-1].scheduled_end - self.jobs[0].scheduled_start).total_seconds() / 60

    @property
    def material_changes(self) -> int:
        """Number of adjacent positions where the material type changes."""
        return sum(
            1 for previous, current in zip(self.jobs, self.jobs[1:])
            if previous.material_type != current.material_type
        )

    def get_late_jobs(self) -> List[ScheduledJob]:
        return [job for job in self.jobs if job.is_late()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert schedule to dictionary."""
        return {
            "jobs": [job.to_dict() for job in self.jobs],
            "total_setup_time": round(self.total_setup_time, 2),
            "total_production_time": round(self.total_production_time, 2),
            "efficiency": self.efficiency,
            "setup_reductions": round(self.setup_reductions, 2),
            "recommendations": [rec.to_dict() for rec in self.recommendations],
        }

    def __str__(self) -> str:
        return (f"OptimizedSchedule({len(self.jobs)} jobs, "
                f"setup {self.total_setup_time:.1f}min, "
                f"production {self.total_production_time:.1f}min, "
                f"efficiency {self.efficiency}%)")
