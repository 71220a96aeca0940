"""
Tests for media grid planning.
"""

import pytest

from inspectdoc.engine.text_metrics import TextMetrics
from inspectdoc.layout.media_grid import GridPlan, plan_grid


class TestPlanGrid:
    """Test cases for plan_grid."""

    def test_zero_items_have_no_height(self):
        plan = plan_grid(0, None, 523, 100)

        assert plan.total_height == 0
        assert plan.row_heights == []
        assert plan.row_count == 0

    def test_five_items_in_four_columns_make_two_rows(self):
        plan = plan_grid(5, None, 523, 100, columns=4)

        assert len(plan.row_heights) == 2
        assert plan.tile_width == pytest.approx((523 - 8 * 3) / 4)
        assert plan.total_height == pytest.approx(100 + 8 + 100)

    def test_columns_are_configurable(self):
        plan = plan_grid(5, None, 300, 64, columns=2)

        assert plan.row_count == 3
        assert plan.tile_width == pytest.approx((300 - 8) / 2)

    def test_caption_adds_gap_and_wrapped_height(self):
        plan = plan_grid(5, [None, None, None, None, "Hinge"], 523, 100)

        assert plan.row_heights[0] == pytest.approx(100)
        assert plan.row_heights[1] == pytest.approx(100 + 4 + 8 * 1.2)

    def test_long_caption_wraps_at_tile_width(self):
        caption = "Water stain spreading from the upper corner of the frame towards the hinge"
        plan = plan_grid(1, [caption], 200, 100, columns=4)
        lines = TextMetrics().wrap(caption, plan.tile_width, "Helvetica", 8)

        assert len(lines) > 1
        assert plan.row_heights[0] == pytest.approx(100 + 4 + len(lines) * 8 * 1.2)


class TestGridPlan:
    """Test cases for GridPlan helpers."""

    @pytest.fixture
    def plan(self):
        return GridPlan(tile_width=100, row_heights=[100, 100, 100], total_height=316, columns=4, gutter=8)

    def test_rows_fitting_counts_whole_rows(self, plan):
        assert plan.rows_fitting(0, 250) == 2
        assert plan.rows_fitting(0, 316) == 3
        assert plan.rows_fitting(0, 99) == 0

    def test_rows_fitting_from_offset(self, plan):
        assert plan.rows_fitting(2, 1000) == 1
        assert plan.rows_fitting(3, 1000) == 0

    def test_span_height_includes_inner_gutters(self, plan):
        assert plan.span_height(0, 2) == pytest.approx(208)
        assert plan.span_height(1, 1) == pytest.approx(100)
        assert plan.span_height(0, 0) == 0
