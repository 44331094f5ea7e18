"""
Setup Time Matrix Builder

Builds a material-to-material setup matrix from observed job transitions,
clusters materials that can follow each other cheaply and flags expensive
transitions as optimization opportunities.

Key Responsibilities:
    - Extract the ordered set of materials seen in the transitions
    - Fill the matrix from observations, defaulting unobserved cells
    - Greedily cluster compatible materials
    - Flag high setup cells with potential savings
"""

import logging
from typing import List, Optional

from models.policy import SchedulingPolicy
from models.setup_matrix import JobTransition, MaterialGroup, SetupOptimization, SetupTimeMatrix
from utils.deadline import Deadline

logger = logging.getLogger(__name__)

IMPLEMENTATION_STEPS = [
    "Standardize tooling",
    "Improve changeover procedures",
    "Implement quick-change systems",
]


class SetupTimeMatrixBuilder:
    """Builds SetupTimeMatrix results from observed transitions."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def build(self, transitions: List[JobTransition], deadline: Optional[Deadline] = None) -> SetupTimeMatrix:
        """
        Build the full matrix result.

        Args:
            transitions: Observed changeovers
            deadline: Optional call deadline

        Returns:
            SetupTimeMatrix with groups and optimization opportunities
        """
        deadline = deadline or Deadline.unbounded()

        materials = self.extract_unique_materials(transitions)
        matrix = self.build_matrix(materials, transitions)
        deadline.check("setup_matrix")

        groups = self.identify_material_groups(materials, matrix)
        deadline.check("material_groups")

        opportunities = self.find_optimizations(materials, matrix)

        logger.info("Setup matrix: %d materials, %d groups, %d opportunities",
                    len(materials), len(groups), len(opportunities))

        return SetupTimeMatrix(
            materials=materials,
            matrix=matrix,
            material_groups=groups,
            optimization_opportunities=opportunities,
        )

    @staticmethod
    def extract_unique_materials(transitions: List[JobTransition]) -> List[str]:
        """Materials in order of first appearance (from, then to)."""
        materials: List[str] = []
        for transition in transitions:
            for material in (transition.from_job.material_type, transition.to_job.material_type):
                if material not in materials:
                    materials.append(material)
        return materials

    def build_matrix(self, materials: List[str], transitions: List[JobTransition]) -> List[List[float]]:
        """
        Fill the square matrix. The first matching observation wins.

        Args:
            materials: Ordered material list
            transitions: Observed changeovers

        Returns:
            Matrix of setup minutes
        """
        observed = {}
        for transition in transitions:
            key = (transition.from_job.material_type, transition.to_job.material_type)
            observed.setdefault(key, transition.setup_time)

        matrix = []
        for from_material in materials:
            row = []
            for to_material in materials:
                if from_material == to_material:
                    row.append(0)
                else:
                    row.append(observed.get((from_material, to_material),
                                            self.policy.default_matrix_setup_time))
            matrix.append(row)
        return matrix

    def identify_material_groups(self, materials: List[str], matrix: List[List[float]]) -> List[MaterialGroup]:
        """
        Greedy clustering: each unvisited material seeds a group and pulls in
        every other unvisited material reachable within the compatibility threshold.
        """
        groups: List[MaterialGroup] = []
        processed = set()

        for i, material in enumerate(materials):
            if i in processed:
                continue

            members = [i]
            for j in range(len(materials)):
                if i != j and j not in processed and matrix[i][j] <= self.policy.compatible_setup_threshold:
                    members.append(j)
                    processed.add(j)
            processed.add(i)

            total_setup_time = 0.0
            pairs = 0
            for a in members:
                for b in members:
                    if a != b:
                        total_setup_time += matrix[a][b]
                        pairs += 1

            groups.append(MaterialGroup(
                group_id=f"group_{len(groups) + 1}",
                materials=[materials[m] for m in members],
                avg_setup_time=total_setup_time / pairs if pairs else 0.0,
                compatibility=100.0,
            ))

        return groups

    def find_optimizations(self, materials: List[str], matrix: List[List[float]]) -> List[SetupOptimization]:
        """Flag every transition above the optimization threshold."""
        optimizations = []

        for i, row in enumerate(matrix):
            for j, setup_time in enumerate(row):
                if setup_time <= self.policy.optimization_setup_threshold:
                    continue

                difficulty = "high" if setup_time > self.policy.high_difficulty_setup_threshold else "medium"
                optimizations.append(SetupOptimization(
                    from_material=materials[i],
                    to_material=materials[j],
                    description=f"Reduce setup time between {materials[i]} and {materials[j]}",
                    potential_saving=setup_time * self.policy.optimization_saving_ratio,
                    difficulty=difficulty,
                    implementation=list(IMPLEMENTATION_STEPS),
                ))

        return optimizations
