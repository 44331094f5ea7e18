"""Pytest configuration with shared factories for scheduling engine tests."""

import itertools
from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from models.downtime import DowntimeEvent
from models.job import Job
from models.order import Order, Part
from models.workflow import Resource, WorkflowStep


# Monday 08:00, fixed so timestamps are deterministic
BASE_TIME = datetime(2026, 3, 2, 8, 0)


# ---------------------------------------------------------------------------
# Test Data Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_job():
    """Factory for Job instances with sequential ids."""
    counter = itertools.count(1)

    def _make(
        job_id: Optional[str] = None,
        material_type: str = "steel",
        thickness: float = 3.0,
        estimated_duration: float = 30,
        priority: str = "medium",
        due_in_days: float = 2,
        complexity: str = "simple",
    ) -> Job:
        return Job(
            job_id=job_id or f"J{next(counter)}",
            material_type=material_type,
            thickness=thickness,
            estimated_duration=estimated_duration,
            priority=priority,
            due_date=BASE_TIME + timedelta(days=due_in_days),
            complexity=complexity,
        )

    return _make


@pytest.fixture
def make_event():
    """Factory for DowntimeEvent instances placed `day` days after BASE_TIME."""

    def _make(
        day: float,
        type: str = "unplanned",
        duration: float = 1.0,
        severity: str = "low",
    ) -> DowntimeEvent:
        return DowntimeEvent(
            timestamp=BASE_TIME + timedelta(days=day),
            type=type,
            duration=duration,
            cause="test",
            severity=severity,
        )

    return _make


@pytest.fixture
def make_order():
    """Factory for single-part orders."""
    counter = itertools.count(1)

    def _make(
        quantity: int,
        processing_time: float,
        material_type: str = "steel",
        thickness: float = 3.0,
        due_in_days: float = 5,
        priority: int = 1,
        order_id: Optional[str] = None,
    ) -> Order:
        return Order(
            order_id=order_id or f"O{next(counter)}",
            parts=[Part(material_type, thickness, quantity, processing_time)],
            due_date=BASE_TIME + timedelta(days=due_in_days),
            priority=priority,
        )

    return _make


@pytest.fixture
def make_step():
    """Factory for WorkflowStep instances."""

    def _make(
        step_id: str,
        duration: float,
        dependencies: Optional[List[str]] = None,
        bottleneck_potential: float = 0.0,
        resources: Optional[List[Resource]] = None,
    ) -> WorkflowStep:
        return WorkflowStep(
            step_id=step_id,
            name=f"Step {step_id}",
            duration=duration,
            dependencies=dependencies or [],
            resources=resources or [],
            bottleneck_potential=bottleneck_potential,
        )

    return _make


@pytest.fixture
def sample_jobs(make_job) -> List[Job]:
    """Urgent steel, medium steel, high aluminum."""
    return [
        make_job("J1", "steel", 3.0, 30, "urgent", due_in_days=2),
        make_job("J2", "steel", 3.0, 45, "medium", due_in_days=5),
        make_job("J3", "aluminum", 5.0, 20, "high", due_in_days=1),
    ]
