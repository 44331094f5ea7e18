"""
Schedule Builder & Efficiency Analyzer

ScheduleBuilder walks a cut sequence with a running clock and assigns each job
its setup time, start, end and position. EfficiencyAnalyzer turns the timed
sequence into an OptimizedSchedule with totals, efficiency, setup reductions
and recommendations.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from models.job import Job
from models.policy import SchedulingPolicy
from models.schedule import ScheduledJob, OptimizedSchedule, SchedulingRecommendation
from optimizers.setup_time_model import SetupTimeModel

logger = logging.getLogger(__name__)


class ScheduleBuilder:
    """Assigns timestamps to a cut sequence. Pure apart from the setup cache."""

    def __init__(self, setup_model: SetupTimeModel):
        self.setup_model = setup_model

    def build(self, sequence: List[Job], start_time: Optional[datetime] = None) -> List[ScheduledJob]:
        """
        Place jobs back to back on the machine timeline.

        Each end time is the anchor plus the running total of minutes, so the
        summed job spans equal setup plus production time to within one
        microsecond (timedelta resolution).

        Args:
            sequence: Jobs in cut order
            start_time: Clock anchor (defaults to now)

        Returns:
            One ScheduledJob per input job, positions 1..N
        """
        anchor = start_time if start_time is not None else datetime.now()
        clock = anchor
        elapsed_minutes = 0.0
        previous_job: Optional[Job] = None
        scheduled: List[ScheduledJob] = []

        for index, job in enumerate(sequence):
            setup_time = self.setup_model.setup_time(previous_job, job)
            elapsed_minutes += setup_time + job.estimated_duration
            scheduled_end = anchor + timedelta(minutes=elapsed_minutes)

            scheduled.append(ScheduledJob(
                job=job,
                scheduled_start=clock,
                scheduled_end=scheduled_end,
                setup_time=setup_time,
                position=index + 1,
                group_id=job.group_id,
            ))

            clock = scheduled_end
            previous_job = job

        return scheduled


class EfficiencyAnalyzer:
    """Derives aggregate metrics and recommendations from a timed sequence."""

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def analyze(self, scheduled_jobs: List[ScheduledJob]) -> OptimizedSchedule:
        """
        Build the OptimizedSchedule result.

        Args:
            scheduled_jobs: Output of ScheduleBuilder.build

        Returns:
            OptimizedSchedule with metrics and recommendations
        """
        total_setup_time = sum(job.setup_time for job in scheduled_jobs)
        total_production_time = sum(job.estimated_duration for job in scheduled_jobs)

        schedule = OptimizedSchedule(
            jobs=scheduled_jobs,
            total_setup_time=total_setup_time,
            total_production_time=total_production_time,
            efficiency=self.calculate_efficiency(total_production_time, total_setup_time),
            setup_reductions=self.calculate_setup_reductions(len(scheduled_jobs), total_setup_time),
        )
        schedule.recommendations = self.generate_recommendations(schedule)

        logger.debug("Analyzed %d jobs: setup %.1f min, efficiency %.1f%%",
                     len(scheduled_jobs), total_setup_time, schedule.efficiency)
        return schedule

    @staticmethod
    def calculate_efficiency(total_production_time: float, total_setup_time: float) -> float:
        """Production share of busy time in percent, one decimal."""
        busy_time = total_production_time + total_setup_time
        if busy_time <= 0:
            return 0.0
        return round(total_production_time / busy_time * 100, 1)

    def calculate_setup_reductions(self, num_jobs: int, total_setup_time: float) -> float:
        """Minutes saved against a naive worst case of a full setup per job."""
        worst_case = num_jobs * self.policy.worst_case_setup_per_job
        return max(0.0, worst_case - total_setup_time)

    def generate_recommendations(self, schedule: OptimizedSchedule) -> List[SchedulingRecommendation]:
        recommendations = []
        num_jobs = len(schedule.jobs)

        material_changes = schedule.material_changes
        threshold = num_jobs * self.policy.material_change_threshold
        if material_changes > threshold:
            recommendations.append(SchedulingRecommendation(
                type="grouping",
                description="Consider better material grouping to reduce setup times",
                impact=f"Could reduce {material_changes - math.floor(threshold)} material changes",
                effort="medium",
            ))

        if any(job.job.is_urgent for job in schedule.jobs):
            recommendations.append(SchedulingRecommendation(
                type="timing",
                description="Prioritize urgent jobs while maintaining material grouping",
                impact="Improved on-time delivery",
                effort="low",
            ))

        return recommendations
