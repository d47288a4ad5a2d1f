"""
Column Planner - picks how many display columns a menu board needs.

Greedy, table-driven bin estimation: a baseline from the group count, a
products-per-column capacity for that baseline, the columns the content
demands, and one extra column when the result would be 90%+ full. TV
displays cannot scroll or reflow, so predictability beats precision.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants
from services.menu_layout.capacity import column_units
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ColumnPlan:
    """Intermediate values of a column plan."""
    group_count: int
    total_product_count: int
    effective_units: float
    baseline_columns: int
    capacity_per_column: int
    columns_by_demand: int
    safety_margin_applied: bool
    columns: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_count": self.group_count,
            "total_product_count": self.total_product_count,
            "effective_units": self.effective_units,
            "baseline_columns": self.baseline_columns,
            "capacity_per_column": self.capacity_per_column,
            "columns_by_demand": self.columns_by_demand,
            "safety_margin_applied": self.safety_margin_applied,
            "columns": self.columns,
        }


class ColumnPlanner:
    """Computes the auto column count before any layout policy is applied."""

    def __init__(self, constants: Optional[MenuLayoutConstants] = None):
        self.constants = constants or LAYOUT_CONSTANTS

    def plan(self, group_count: int, total_product_count: int) -> ColumnPlan:
        """
        Plan columns for the given content volume.

        Args:
            group_count: Number of groups on the slide
            total_product_count: Products across all of those groups

        Returns:
            ColumnPlan whose `columns` is within the configured column bounds
        """
        c = self.constants
        units = column_units(total_product_count, group_count, c)

        baseline = c.baseline_columns(group_count)
        capacity = c.column_capacity(baseline)
        by_demand = math.ceil(units / capacity)

        columns = max(baseline, by_demand)

        # Content filling a column past the margin would overflow on screen
        safety = units > c.SAFETY_MARGIN_RATIO * columns * capacity
        if safety:
            columns = min(c.MAX_COLUMNS, columns + 1)

        columns = c.clamp_columns(columns)

        logger.debug(
            f"Column plan: groups={group_count}, products={total_product_count}, units={units:.1f}, "
            f"baseline={baseline}, capacity={capacity}, demand={by_demand}, safety={safety} -> {columns}"
        )

        return ColumnPlan(
            group_count=group_count,
            total_product_count=total_product_count,
            effective_units=units,
            baseline_columns=baseline,
            capacity_per_column=capacity,
            columns_by_demand=by_demand,
            safety_margin_applied=safety,
            columns=columns,
        )

    def calculate_column_count(self, group_count: int, total_product_count: int = 0) -> int:
        return self.plan(group_count, total_product_count).columns
