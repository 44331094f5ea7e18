"""
Job Sequencing - Priority ordering, material grouping and cut sequence

This module turns an unordered job list into a cut sequence in three steps:

    1. JobPrioritizer sorts jobs by priority weight, then due date
    2. MaterialGrouper partitions them by material and thickness, creating
       each group where its first (highest priority) job appears
    3. GroupedPrioritySequencer resorts every group by complexity and due
       date and concatenates the groups in creation order

Urgent work therefore decides which material runs first, while jobs of the
same material stay together. The result is not the same as one global sort.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from models.job import Job
from models.policy import SchedulingPolicy

logger = logging.getLogger(__name__)

MaterialKey = Tuple[str, float]


class JobPrioritizer:
    """Orders jobs by priority weight (highest first), ties by earliest due date."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def prioritize(self, jobs: List[Job]) -> List[Job]:
        """
        Return a new, stably sorted list. The input list is left untouched.

        Args:
            jobs: Jobs to order

        Returns:
            Jobs in priority order
        """
        weights = self.policy.priority_weights
        return sorted(jobs, key=lambda job: (-weights[job.priority], job.due_date))


class MaterialGrouper:
    """Partitions prioritized jobs by (material_type, thickness)."""

    def group(self, jobs: List[Job]) -> Dict[MaterialKey, List[Job]]:
        """
        Group jobs, preserving the order in which keys first appear.

        Args:
            jobs: Jobs in priority order

        Returns:
            Insertion-ordered mapping of material key to jobs
        """
        groups: Dict[MaterialKey, List[Job]] = {}
        for job in jobs:
            groups.setdefault(job.material_key, []).append(job)
        return groups


class GroupedPrioritySequencer:
    """
    Builds the final cut sequence from material groups.

    Example:
        >>> sequencer = GroupedPrioritySequencer()
        >>> sequence = sequencer.sequence(jobs)
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None, max_workers: int = 1):
        """
        Args:
            policy: Scheduling policy (defaults if omitted)
            max_workers: Threads used to sort groups; 1 sorts inline
        """
        self.policy = policy or SchedulingPolicy()
        self.max_workers = max_workers
        self.prioritizer = JobPrioritizer(self.policy)
        self.grouper = MaterialGrouper()

    def sort_group(self, jobs: List[Job]) -> List[Job]:
        """Sort one group by complexity (simple first), then due date."""
        order = self.policy.complexity_order
        return sorted(jobs, key=lambda job: (order[job.complexity], job.due_date))

    def order_groups(self, groups: Dict[MaterialKey, List[Job]]) -> List[Job]:
        """
        Resort each group and concatenate the groups in insertion order.

        Args:
            groups: Insertion-ordered material groups

        Returns:
            Flat cut sequence
        """
        group_jobs = list(groups.values())

        if self.max_workers > 1 and len(group_jobs) > 1:
            # map() yields results in submission order
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                sorted_groups = list(pool.map(self.sort_group, group_jobs))
        else:
            sorted_groups = [self.sort_group(jobs) for jobs in group_jobs]

        sequence: List[Job] = []
        for jobs in sorted_groups:
            sequence.extend(jobs)
        return sequence

    def sequence(self, jobs: List[Job]) -> List[Job]:
        """
        Run prioritization, grouping and group ordering.

        Args:
            jobs: Unordered jobs

        Returns:
            Cut sequence
        """
        prioritized = self.prioritizer.prioritize(jobs)
        groups = self.grouper.group(prioritized)
        logger.debug("Sequencing %d jobs in %d material groups", len(jobs), len(groups))
        return self.order_groups(groups)
