"""
Tests for menu column planning and the layout policy heuristics.
"""

import pytest

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants
from models.menu import AutoOptimizationsConfig, ColumnControlConfig, FontScalingConfig, ManualOverrideConfig
from services.menu_layout import MenuLayoutEngine
from services.menu_layout.capacity import column_units, font_units
from services.menu_layout.column_planner import ColumnPlanner
from services.menu_layout.layout_policy import (
    EMPTY_COLUMNS,
    FULL_WIDTH,
    MODE_AUTO,
    MODE_MANUAL,
    MODE_NONE,
    OVERFLOW,
    LayoutPolicy,
    describe_decision,
)


def control(manual=None, empty=False, overflow=False, full_width=False, threshold=0.80):
    return ColumnControlConfig(
        manual_override=ManualOverrideConfig(enabled=manual is not None, adjustment=manual or 0),
        auto_optimizations=AutoOptimizationsConfig(
            prevent_empty_columns=empty,
            prevent_overflow=overflow,
            optimize_for_full_width=full_width,
            density_threshold=threshold,
        ),
    )


def test_header_weights_stay_distinct():
    assert column_units(10, 2) == 14.0
    assert font_units(10, 2) == 13.0


@pytest.mark.parametrize("group_count,expected", [
    (0, 2), (2, 2), (3, 3), (4, 3), (5, 4), (6, 4), (7, 5), (9, 5), (10, 6), (20, 6),
])
def test_baseline_steps(group_count, expected):
    assert LAYOUT_CONSTANTS.baseline_columns(group_count) == expected


@pytest.mark.parametrize("group_count,products,expected", [
    (2, 10, 2),    # baseline and demand both 2
    (10, 80, 6),   # capped at the maximum
    (0, 0, 2),
    (3, 20, 3),
    (3, 25, 4),    # 31 units > 90% of 3 x 11
    (2, 30, 4),    # demand 3, then the safety margin
    (5, 20, 4),
    (7, 10, 5),
])
def test_planned_columns(group_count, products, expected):
    assert ColumnPlanner().calculate_column_count(group_count, products) == expected


def test_plan_exposes_intermediate_values():
    plan = ColumnPlanner().plan(2, 30)
    assert plan.effective_units == 34.0
    assert plan.baseline_columns == 2
    assert plan.capacity_per_column == 12
    assert plan.columns_by_demand == 3
    assert plan.safety_margin_applied is True
    assert plan.columns == 4


def test_columns_stay_in_bounds_across_content_range():
    planner = ColumnPlanner()
    for groups in range(0, 21):
        for products in range(0, 201):
            assert 2 <= planner.calculate_column_count(groups, products) <= 6


def test_alternative_constants_change_the_plan():
    no_headers = MenuLayoutConstants(COLUMN_HEADER_WEIGHT=0.0)
    assert ColumnPlanner().calculate_column_count(2, 20) == 3
    assert ColumnPlanner(no_headers).calculate_column_count(2, 20) == 2


def test_overflow_adds_column():
    """Two groups, thirty products on two columns is far denser than 85%."""
    units = font_units(30, 2)
    decision = LayoutPolicy().decide(2, units, control(overflow=True, threshold=0.85), 1920)
    assert decision.adjustments == {OVERFLOW: 1}
    assert decision.final_columns == 3


def test_manual_override_skips_heuristics():
    decision = LayoutPolicy().decide(
        3, 16.0, control(manual=1, empty=True, overflow=True, full_width=True, threshold=0.01), 1920
    )
    assert decision.mode == MODE_MANUAL
    assert decision.final_columns == 4


@pytest.mark.parametrize("auto,adjustment,expected", [(3, 5, 6), (3, -3, 2), (6, 1, 6), (2, -1, 2)])
def test_manual_override_is_clamped(auto, adjustment, expected):
    assert LayoutPolicy().apply(auto, 20.0, control(manual=adjustment), 1920) == expected


def test_no_column_control_keeps_planned_count():
    decision = LayoutPolicy().decide(5, 40.0, None, 1920)
    assert decision.mode == MODE_NONE
    assert decision.final_columns == 5
    assert decision.adjustments == {}


@pytest.mark.parametrize("auto,units", [
    (3, 13.0),    # 13 / 3 is not exact in floating point
    (4, 12.5),
    (4, 16.5),
    (6, 0.1),
    (2, 0.0),
])
def test_empty_column_check_ignores_rounding_noise(auto, units):
    decision = LayoutPolicy().decide(auto, units, control(empty=True), 1920)
    assert EMPTY_COLUMNS not in decision.adjustments
    assert decision.final_columns == auto


def test_empty_column_check_never_grows_font_size():
    engine = MenuLayoutEngine(default_screen_width=1920, font_bounds=(12, 48))
    scaling = FontScalingConfig(auto_scale=True, min_font_size=12, max_font_size=48)
    empty_only = control(empty=True)
    for groups in range(0, 21):
        sizes = [engine.calculate_layout(groups, products, scaling, empty_only).font_size_px
                 for products in range(0, 201)]
        assert sizes == sorted(sizes, reverse=True), f"{groups} groups"


@pytest.mark.parametrize("auto,width,expected", [
    (2, 1920, 1),    # 960px columns are too wide
    (6, 3840, 0),    # wide, but already at the maximum
    (6, 1200, -1),   # 200px columns are too narrow
    (2, 400, 0),     # narrow, but already at the minimum
    (4, 1600, 0),
])
def test_full_width_heuristic(auto, width, expected):
    decision = LayoutPolicy().decide(auto, 10.0, control(full_width=True), width)
    assert decision.adjustments.get(FULL_WIDTH, 0) == expected


def test_heuristics_are_summed_before_clamping():
    policy = LayoutPolicy()
    both = policy.decide(4, 13.0, control(overflow=True, full_width=True, threshold=0.2), 1920)
    assert both.adjustments == {OVERFLOW: 1, FULL_WIDTH: 1}
    assert both.final_columns == 6
    assert both.mode == MODE_AUTO

    opposed = policy.decide(6, 60.0, control(overflow=True, full_width=True), 1200)
    assert opposed.adjustments == {OVERFLOW: 1, FULL_WIDTH: -1}
    assert opposed.final_columns == 6

    capped = policy.decide(6, 80.0, control(overflow=True, full_width=True), 3840)
    assert capped.final_columns == 6


def test_describe_decision():
    policy = LayoutPolicy()
    assert describe_decision(policy.decide(3, 10.0, control(manual=1), 1920)) == "Manual override active: +1 column"
    assert describe_decision(policy.decide(3, 10.0, control(manual=0), 1920)) == \
        "Manual override active: using the automatic column count"
    assert describe_decision(policy.decide(2, 33.0, control(overflow=True), 1920)) == "Auto adjustment: +1 (overflow)"
    assert describe_decision(policy.decide(4, 20.0, control(), 1920)) == "Auto optimizations: no adjustments"
