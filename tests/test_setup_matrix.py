"""Tests for the setup time matrix builder."""

import pytest

from models.setup_matrix import JobTransition
from optimizers.setup_matrix_builder import SetupTimeMatrixBuilder


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def transition(make_job):
    def _make(from_material, to_material, setup_time):
        return JobTransition(make_job(material_type=from_material),
                             make_job(material_type=to_material),
                             setup_time)
    return _make


# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------


class TestMatrix:
    """Test matrix construction."""

    def test_single_transition(self, transition):
        """Unobserved cells default to 15 and the 25 minute cell is flagged."""
        result = SetupTimeMatrixBuilder().build([transition("steel", "aluminum", 25)])

        assert result.materials == ["steel", "aluminum"]
        assert result.matrix == [[0, 25], [15, 0]]
        assert len(result.optimization_opportunities) == 1

        opportunity = result.optimization_opportunities[0]
        assert (opportunity.from_material, opportunity.to_material) == ("steel", "aluminum")
        assert opportunity.potential_saving == pytest.approx(7.5)
        assert opportunity.difficulty == "medium"
        assert opportunity.description == "Reduce setup time between steel and aluminum"

    def test_first_observation_wins(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("steel", "aluminum", 12),
            transition("steel", "aluminum", 40),
        ])
        assert result.matrix[0][1] == 12

    def test_material_order_from_then_to(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("stainless", "steel", 5),
            transition("aluminum", "steel", 5),
        ])
        assert result.materials == ["stainless", "steel", "aluminum"]

    def test_square_with_zero_diagonal(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("steel", "aluminum", 25),
            transition("aluminum", "stainless", 8),
            transition("stainless", "steel", 3),
        ])
        size = len(result.materials)
        assert len(result.matrix) == size
        assert all(len(row) == size for row in result.matrix)
        assert all(result.matrix[i][i] == 0 for i in range(size))

    def test_same_material_transition_keeps_zero_diagonal(self, transition):
        result = SetupTimeMatrixBuilder().build([transition("steel", "steel", 9)])
        assert result.matrix == [[0]]

    def test_empty(self):
        result = SetupTimeMatrixBuilder().build([])
        assert result.materials == []
        assert result.matrix == []
        assert result.material_groups == []
        assert result.optimization_opportunities == []


# ---------------------------------------------------------------------------
# Groups & optimizations
# ---------------------------------------------------------------------------


class TestGroupsAndOptimizations:
    """Test greedy clustering and flagged transitions."""

    def test_compatible_materials_grouped(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("steel", "stainless", 4),
            transition("stainless", "steel", 5),
            transition("steel", "aluminum", 25),
        ])

        groups = result.material_groups
        assert [g.group_id for g in groups] == ["group_1", "group_2"]
        assert groups[0].materials == ["steel", "stainless"]
        assert groups[0].avg_setup_time == pytest.approx(4.5)
        assert groups[1].materials == ["aluminum"]
        assert groups[1].avg_setup_time == 0.0

    def test_every_material_in_exactly_one_group(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("steel", "stainless", 2),
            transition("aluminum", "copper", 3),
            transition("brass", "steel", 30),
        ])
        members = [m for group in result.material_groups for m in group.materials]
        assert sorted(members) == sorted(result.materials)

    def test_high_difficulty_above_thirty(self, transition):
        result = SetupTimeMatrixBuilder().build([transition("steel", "aluminum", 35)])
        steel_to_aluminum = [o for o in result.optimization_opportunities if o.to_material == "aluminum"]
        assert steel_to_aluminum[0].difficulty == "high"
        assert steel_to_aluminum[0].potential_saving == pytest.approx(10.5)

    def test_threshold_is_exclusive(self, transition):
        result = SetupTimeMatrixBuilder().build([
            transition("steel", "aluminum", 20),
            transition("aluminum", "steel", 20),
        ])
        assert result.optimization_opportunities == []
