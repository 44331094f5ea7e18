"""
Setup Matrix Model - Observed changeovers and the derived setup time matrix

Key Features:
    - JobTransition records of observed setup times
    - Square material-to-material setup matrix
    - Material clusters with cheap internal changeovers
    - Flagged expensive transitions worth improving
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field

from models.job import Job


@dataclass
class JobTransition:
    """An observed changeover from one job to the next."""
    from_job: Job
    to_job: Job
    setup_time: float            # Observed minutes
    complexity: float = 1.0


@dataclass
class MaterialGroup:
    """Materials that can follow each other with minimal setup."""
    group_id: str
    materials: List[str] = field(default_factory=list)
    avg_setup_time: float = 0.0
    compatibility: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "materials": self.materials,
            "avg_setup_time": round(self.avg_setup_time, 2),
            "compatibility": self.compatibility,
        }


@dataclass
class SetupOptimization:
    """A transition whose setup time is high enough to warrant improvement."""
    from_material: str
    to_material: str
    description: str
    potential_saving: float      # Minutes
    difficulty: str              # "low", "medium" or "high"
    implementation: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_material": self.from_material,
            "to_material": self.to_material,
            "description": self.description,
            "potential_saving": round(self.potential_saving, 2),
            "difficulty": self.difficulty,
            "implementation": self.implementation,
        }


@dataclass
class SetupTimeMatrix:
    """
    Square setup time matrix over a fixed, ordered material list.

    matrix[i][j] is the setup in minutes when switching from materials[i]
    to materials[j]. The diagonal is always 0.
    """

    materials: List[str] = field(default_factory=list)
    matrix: List[List[float]] = field(default_factory=list)
    material_groups: List[MaterialGroup] = field(default_factory=list)
    optimization_opportunities: List[SetupOptimization] = field(default_factory=list)

    def setup_time(self, from_material: str, to_material: str) -> float:
        """
        Look up the setup time between two materials.

        Args:
            from_material: Material currently loaded
            to_material: Material of the next job

        Returns:
            Setup time in minutes

        Raises:
            KeyError: If either material is not part of the matrix
        """
        try:
            i = self.materials.index(from_material)
            j = self.materials.index(to_material)
        except ValueError:
            raise KeyError(f"Unknown material transition {from_material} -> {to_material}") from None
        return self.matrix[i][j]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "materials": self.materials,
            "matrix": self.matrix,
            "material_groups": [group.to_dict() for group in self.material_groups],
            "optimization_opportunities": [opt.to_dict() for opt in self.optimization_opportunities],
        }

    def __str__(self) -> str:
        return (f"SetupTimeMatrix({len(self.materials)} materials, "
                f"{len(self.material_groups)} groups, "
                f"{len(self.optimization_opportunities)} opportunities)")
