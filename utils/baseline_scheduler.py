"""
Baseline Scheduler - Simple FIFO Implementation

This provides a baseline for comparison against the grouped priority
sequencer. Jobs are cut in the order they were received, with the same setup
time model and metrics, so the difference shows what grouping saves.
"""

from datetime import datetime
from typing import List, Optional

from models.job import Job
from models.schedule import OptimizedSchedule
from optimizers.setup_time_model import SetupTimeModel
from optimizers.schedule_builder import ScheduleBuilder, EfficiencyAnalyzer


class BaselineScheduler:
    """
    Simple FIFO (First-In-First-Out) baseline scheduler.

    This scheduler uses minimal intelligence:
    - Cuts jobs in the order they appear
    - No priority ordering
    - No material grouping

    Used as a baseline to demonstrate the improvement
    achieved by the grouped priority sequencer.
    """

    def __init__(self, setup_model: Optional[SetupTimeModel] = None,
                 analyzer: Optional[EfficiencyAnalyzer] = None):
        """Initialize baseline scheduler."""
        self.name = "Baseline FIFO Scheduler"
        self.setup_model = setup_model or SetupTimeModel()
        self.builder = ScheduleBuilder(self.setup_model)
        self.analyzer = analyzer or EfficiencyAnalyzer(self.setup_model.policy)

    def schedule(self, jobs: List[Job], start_time: Optional[datetime] = None) -> OptimizedSchedule:
        """
        Create a FIFO schedule without optimization.

        Args:
            jobs: Jobs in arrival order
            start_time: Clock anchor (defaults to now)

        Returns:
            OptimizedSchedule for the unmodified order
        """
        scheduled_jobs = self.builder.build(list(jobs), start_time)
        return self.analyzer.analyze(scheduled_jobs)

    def __str__(self) -> str:
        return "BaselineScheduler(algorithm=FIFO, optimization=None)"


# Quick test
if __name__ == "__main__":
    from utils.data_generator import generate_random_jobs

    print("Testing Baseline FIFO Scheduler...")

    test_jobs = generate_random_jobs(10, urgent_probability=0.3, seed=1)
    schedule = BaselineScheduler().schedule(test_jobs)

    print(f"\n{schedule}")
    print(f"Material changes: {schedule.material_changes}")
    print(f"Setup time: {schedule.total_setup_time:.1f} min")
