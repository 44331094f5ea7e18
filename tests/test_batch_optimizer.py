"""Tests for economic batching of orders."""

import pytest

from models.order import Order, Part
from models.policy import SchedulingPolicy
from optimizers.batch_optimizer import BatchOptimizer


# ---------------------------------------------------------------------------
# Batch sizing
# ---------------------------------------------------------------------------


class TestBatchSizing:
    """Test the economic batch size and its clamps."""

    def test_economic_size(self, make_order):
        """sqrt(2 * 30 * 100 / 0.6) = 100."""
        config = BatchOptimizer().optimize([make_order(100, 0.6)])

        assert config.recommended_batch_sizes == {"steel_3": 100}
        assert config.total_batches == 1
        batch = config.batches[0]
        assert batch.total_quantity == 100
        assert batch.estimated_time == pytest.approx(90.0)
        assert batch.efficiency == 66.7
        assert config.utilization_rate == 100.0

    def test_clamped_to_minimum(self, make_order):
        config = BatchOptimizer().optimize([make_order(1, 6.0)])
        assert config.recommended_batch_sizes["steel_3"] == 10
        assert config.utilization_rate == 10.0

    def test_clamped_to_maximum(self, make_order):
        config = BatchOptimizer().optimize([make_order(5000, 0.01)])
        assert config.recommended_batch_sizes["steel_3"] == 200
        assert config.total_batches == 25

    def test_zero_processing_time_uses_maximum(self, make_order):
        config = BatchOptimizer().optimize([make_order(50, 0.0)])
        assert config.recommended_batch_sizes["steel_3"] == 200

    def test_policy_bounds(self, make_order):
        policy = SchedulingPolicy(min_batch_size=5, max_batch_size=50)
        config = BatchOptimizer(policy).optimize([make_order(5000, 0.01)])
        assert config.recommended_batch_sizes["steel_3"] == 50


# ---------------------------------------------------------------------------
# Grouping & splitting
# ---------------------------------------------------------------------------


class TestGroupingAndSplitting:
    """Test material grouping and sequential batch filling."""

    def test_orders_with_same_material_share_a_batch(self, make_order):
        config = BatchOptimizer().optimize([make_order(50, 0.6), make_order(50, 0.6)])

        assert config.total_batches == 1
        assert [o.order_id for o in config.batches[0].orders] == ["O1", "O2"]
        assert config.time_reduction == pytest.approx(30.0)

    def test_due_date_orders_first(self, make_order):
        later = make_order(50, 0.6, due_in_days=9, order_id="later")
        sooner = make_order(50, 0.6, due_in_days=2, order_id="sooner")
        config = BatchOptimizer().optimize([later, sooner])
        assert [o.order_id for o in config.batches[0].orders] == ["sooner", "later"]

    def test_priority_breaks_due_date_ties(self, make_order):
        normal = make_order(50, 0.6, priority=1, order_id="normal")
        important = make_order(50, 0.6, priority=5, order_id="important")
        config = BatchOptimizer().optimize([normal, important])
        assert [o.order_id for o in config.batches[0].orders] == ["important", "normal"]

    def test_thickness_splits_groups(self, make_order):
        config = BatchOptimizer().optimize([make_order(100, 0.6, thickness=3.0),
                                            make_order(100, 0.6, thickness=5.0)])
        assert set(config.recommended_batch_sizes) == {"steel_3", "steel_5"}
        assert [b.batch_id for b in config.batches] == ["B001", "B002"]

    def test_split_conserves_quantity(self, make_order):
        orders = [make_order(130, 0.4), make_order(95, 0.4), make_order(260, 0.4)]
        config = BatchOptimizer().optimize(orders)

        size = config.recommended_batch_sizes["steel_3"]
        assert sum(b.total_quantity for b in config.batches) == 485
        assert all(b.total_quantity <= size for b in config.batches)
        assert all(b.total_quantity == size for b in config.batches[:-1])

    def test_order_spanning_batches_listed_in_each(self, make_order):
        config = BatchOptimizer().optimize([make_order(210, 1.26, order_id="big")])
        assert config.recommended_batch_sizes["steel_3"] == 100
        assert [b.total_quantity for b in config.batches] == [100, 100, 10]
        assert all([o.order_id for o in b.orders] == ["big"] for b in config.batches)

    def test_zero_quantity_parts_skipped(self, base_time):
        order = Order("O1", [Part("steel", 3.0, 0, 0.5)], base_time)
        config = BatchOptimizer().optimize([order])
        assert config.batches == []
        assert config.recommended_batch_sizes == {}


# ---------------------------------------------------------------------------
# Metrics & recommendations
# ---------------------------------------------------------------------------


class TestMetricsAndRecommendations:
    """Test utilization, time reduction and recommendations."""

    def test_empty_orders(self):
        config = BatchOptimizer().optimize([])
        assert config.total_batches == 0
        assert config.utilization_rate == 0.0
        assert config.time_reduction == 0.0
        assert config.recommendations == []

    def test_small_remainder_recommendation(self, make_order):
        config = BatchOptimizer().optimize([make_order(210, 1.26)])
        sequence = [r for r in config.recommendations if r.type == "sequence"]

        assert len(sequence) == 1
        assert "absorb" in sequence[0].description
        assert sequence[0].implementation == "Run batch B002 with 110 units"

    def test_low_utilization_recommendation_first(self, make_order):
        config = BatchOptimizer().optimize([make_order(1, 6.0)])
        assert config.recommendations[0].type == "size"

    def test_no_recommendations_for_full_batch(self, make_order):
        config = BatchOptimizer().optimize([make_order(100, 0.6)])
        assert config.recommendations == []

    def test_time_reduction_never_negative(self, make_order):
        """One order split across several batches saves nothing."""
        config = BatchOptimizer().optimize([make_order(5000, 0.01)])
        assert config.time_reduction == 0

    def test_utilization_bounds(self, make_order):
        orders = [make_order(q, 0.5, thickness=t) for q, t in [(40, 3.0), (300, 5.0), (7, 6.0)]]
        config = BatchOptimizer().optimize(orders)
        assert 0 <= config.utilization_rate <= 100


# ---------------------------------------------------------------------------
# Group identity
# ---------------------------------------------------------------------------


class TestNearlyEqualThicknesses:
    """Thicknesses that print alike in short form stay separate groups."""

    def test_sizes_and_utilization_per_group(self, make_order):
        """A 12-unit group and a 200-unit group each fill their own batches."""
        small = make_order(12, 5.0, thickness=1.0000001, due_in_days=1)
        large = make_order(1000, 0.1, thickness=1.0000002, due_in_days=2)

        config = BatchOptimizer().optimize([small, large])

        assert config.recommended_batch_sizes == {"steel_1.0000001": 12, "steel_1.0000002": 200}
        assert config.total_batches == 6
        assert [b.total_quantity for b in config.batches] == [12, 200, 200, 200, 200, 200]
        assert config.utilization_rate == 100.0
