"""Tests for the FIFO baseline scheduler."""

from utils.baseline_scheduler import BaselineScheduler


class TestBaselineScheduler:
    """FIFO keeps arrival order and uses the same setup rules."""

    def test_arrival_order_kept(self, sample_jobs, base_time):
        schedule = BaselineScheduler().schedule(sample_jobs, base_time)
        assert [s.job_id for s in schedule.jobs] == ["J1", "J2", "J3"]

    def test_priority_ignored(self, make_job, base_time):
        jobs = [make_job("low", priority="low"), make_job("urgent", priority="urgent")]
        schedule = BaselineScheduler().schedule(jobs, base_time)
        assert [s.job_id for s in schedule.jobs] == ["low", "urgent"]

    def test_alternating_materials(self, make_job, base_time):
        jobs = [make_job(material_type=m, thickness=t)
                for m, t in [("steel", 3.0), ("aluminum", 5.0), ("steel", 3.0)]]
        schedule = BaselineScheduler().schedule(jobs, base_time)

        assert [s.setup_time for s in schedule.jobs] == [15.0, 20.0, 20.0]
        assert schedule.material_changes == 2
