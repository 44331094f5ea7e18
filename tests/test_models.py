"""Tests for input validation and serialization of the data models."""

from datetime import datetime

import pytest

from models.downtime import DowntimeEvent
from models.job import Job, SetupRequirement, material_group_id
from models.order import Order, Part
from models.policy import SchedulingPolicy
from models.setup_matrix import SetupTimeMatrix
from models.workflow import Bottleneck, Resource, WorkflowStep
from optimizers.errors import InvalidInputError, SchedulingEngineError


# ---------------------------------------------------------------------------
# Job
# ---------------------------------------------------------------------------


class TestJob:
    """Test Job validation and helpers."""

    def test_unknown_priority_rejected(self, make_job):
        """Priorities outside the closed set raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            make_job(priority="rush")

    def test_unknown_complexity_is_value_error(self, make_job):
        """InvalidInputError is also a ValueError."""
        with pytest.raises(ValueError):
            make_job(complexity="extreme")

    def test_negative_duration_rejected(self, make_job):
        with pytest.raises(InvalidInputError):
            make_job(estimated_duration=-1)

    def test_group_id_formats_thickness(self, make_job):
        """Group ids drop trailing zeros from the thickness."""
        assert make_job(material_type="steel", thickness=3.0).group_id == "steel_3"
        assert make_job(material_type="aluminum", thickness=1.5).group_id == "aluminum_1.5"

    def test_dict_round_trip(self, make_job):
        """from_dict restores ISO dates and setup requirements."""
        job = Job(
            job_id="J9",
            material_type="stainless",
            thickness=2.0,
            estimated_duration=25,
            priority="high",
            due_date=datetime(2026, 3, 4, 12, 0),
            complexity="complex",
            setup_requirements=[SetupRequirement("tooling", "nozzle_2.0", 4)],
        )
        assert Job.from_dict(job.to_dict()) == job

    def test_unknown_setup_requirement_type(self):
        with pytest.raises(InvalidInputError):
            SetupRequirement("coolant", "x", 1)


# ---------------------------------------------------------------------------
# Other inputs
# ---------------------------------------------------------------------------


class TestInputRecords:
    """Test validation of downtime, order and workflow records."""

    def test_downtime_type_validated(self, base_time):
        with pytest.raises(InvalidInputError):
            DowntimeEvent(timestamp=base_time, type="weather", duration=1.0)

    def test_downtime_severity_validated(self, base_time):
        with pytest.raises(InvalidInputError):
            DowntimeEvent(timestamp=base_time, type="planned", duration=1.0, severity="severe")

    def test_part_negative_quantity(self):
        with pytest.raises(InvalidInputError):
            Part("steel", 3.0, -5, 0.5)

    def test_order_total_quantity(self, base_time):
        order = Order("O1", [Part("steel", 3.0, 10, 0.5), Part("aluminum", 5.0, 15, 0.2)], base_time)
        assert order.total_quantity == 25

    def test_order_customer_type_validated(self, base_time):
        with pytest.raises(InvalidInputError):
            Order("O1", [], base_time, customer_type="vip")

    def test_bottleneck_potential_range(self):
        """Potential must be within [0, 1]."""
        with pytest.raises(InvalidInputError):
            WorkflowStep("a", "A", 10, bottleneck_potential=1.5)

    def test_resource_type_validated(self):
        with pytest.raises(InvalidInputError):
            Resource("robot", "r1")

    def test_bottleneck_severity_validated(self):
        with pytest.raises(InvalidInputError):
            Bottleneck("a", "A", "extreme", 10.0)

    def test_errors_share_base_class(self):
        assert issubclass(InvalidInputError, SchedulingEngineError)


# ---------------------------------------------------------------------------
# Policy & matrix lookups
# ---------------------------------------------------------------------------


class TestPolicyAndMatrix:
    """Test SchedulingPolicy validation and matrix lookups."""

    def test_policy_requires_all_complexity_levels(self):
        with pytest.raises(InvalidInputError):
            SchedulingPolicy(complexity_factors={"simple": 1.0})

    def test_policy_batch_bounds(self):
        with pytest.raises(InvalidInputError):
            SchedulingPolicy(min_batch_size=300, max_batch_size=200)

    def test_policy_from_dict_ignores_unknown_keys(self):
        policy = SchedulingPolicy.from_dict({"batch_setup_cost": 45.0, "colour": "red"})
        assert policy.batch_setup_cost == 45.0

    def test_matrix_lookup(self):
        matrix = SetupTimeMatrix(materials=["steel", "aluminum"], matrix=[[0, 25], [15, 0]])
        assert matrix.setup_time("steel", "aluminum") == 25
        assert matrix.setup_time("aluminum", "steel") == 15

    def test_matrix_lookup_unknown_material(self):
        matrix = SetupTimeMatrix(materials=["steel"], matrix=[[0]])
        with pytest.raises(KeyError):
            matrix.setup_time("steel", "copper")


class TestMaterialGroupId:
    """Group ids are unique per material/thickness pair."""

    def test_short_form_when_exact(self):
        assert material_group_id("steel", 3.0) == "steel_3"
        assert material_group_id("steel", 2.5) == "steel_2.5"

    def test_full_precision_when_short_form_collides(self, make_job):
        first = make_job(thickness=1.0000001)
        second = make_job(thickness=1.0000002)
        assert first.group_id == "steel_1.0000001"
        assert first.group_id != second.group_id
