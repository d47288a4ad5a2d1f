"""
Layout Policy - final say over the planned column count.

Priority 1 is the administrator's manual override, which skips every
heuristic. Otherwise each enabled auto-optimization proposes an adjustment
on its own; the proposals are summed and clamped once.
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Optional

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants
from models.menu import AutoOptimizationsConfig, ColumnControlConfig
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

MODE_NONE = "none"
MODE_MANUAL = "manual"
MODE_AUTO = "auto"

EMPTY_COLUMNS = "empty_columns"
OVERFLOW = "overflow"
FULL_WIDTH = "full_width"

# Reason labels for the admin summary, in evaluation order
HEURISTIC_LABELS = {
    EMPTY_COLUMNS: "empty columns",
    OVERFLOW: "overflow",
    FULL_WIDTH: "full width",
}


@dataclass(frozen=True)
class ColumnDecision:
    """How the final column count was reached from the planned one."""
    auto_columns: int
    final_columns: int
    mode: str
    adjustments: Dict[str, int] = field(default_factory=dict)

    @property
    def total_adjustment(self) -> int:
        return self.final_columns - self.auto_columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auto_columns": self.auto_columns,
            "final_columns": self.final_columns,
            "mode": self.mode,
            "adjustments": dict(self.adjustments),
        }


class LayoutPolicy:
    """Applies manual override or auto-optimization heuristics to a column count."""

    def __init__(self, constants: Optional[MenuLayoutConstants] = None):
        self.constants = constants or LAYOUT_CONSTANTS

    def decide(
        self,
        auto_columns: int,
        effective_units: float,
        column_control: Optional[ColumnControlConfig],
        screen_width: float
    ) -> ColumnDecision:
        """
        Decide the final column count.

        Args:
            auto_columns: Column count from the planner
            effective_units: Content volume (font-weight variant)
            column_control: Slide column settings, None for no adjustments
            screen_width: Viewport width in pixels

        Returns:
            ColumnDecision with final_columns inside the column bounds
        """
        c = self.constants

        if column_control is None:
            return ColumnDecision(auto_columns, c.clamp_columns(auto_columns), MODE_NONE)

        override = column_control.manual_override
        if override.enabled:
            final = c.clamp_columns(auto_columns + override.adjustment)
            logger.debug(f"Manual column override: {auto_columns} {override.adjustment:+d} -> {final}")
            return ColumnDecision(auto_columns, final, MODE_MANUAL, {MODE_MANUAL: override.adjustment})

        adjustments = self._auto_adjustments(
            auto_columns, effective_units, column_control.auto_optimizations, screen_width
        )
        final = c.clamp_columns(auto_columns + sum(adjustments.values()))
        logger.debug(f"Auto column optimizations {adjustments}: {auto_columns} -> {final}")
        return ColumnDecision(auto_columns, final, MODE_AUTO, adjustments)

    def apply(
        self,
        auto_columns: int,
        effective_units: float,
        column_control: Optional[ColumnControlConfig],
        screen_width: float
    ) -> int:
        return self.decide(auto_columns, effective_units, column_control, screen_width).final_columns

    def _auto_adjustments(
        self,
        auto_columns: int,
        effective_units: float,
        options: AutoOptimizationsConfig,
        screen_width: float
    ) -> Dict[str, int]:
        adjustments: Dict[str, int] = {}

        if options.prevent_empty_columns:
            delta = self._empty_column_adjustment(auto_columns, effective_units)
            if delta:
                adjustments[EMPTY_COLUMNS] = delta

        if options.prevent_overflow:
            delta = self._overflow_adjustment(auto_columns, effective_units, options.density_threshold)
            if delta:
                adjustments[OVERFLOW] = delta

        if options.optimize_for_full_width:
            delta = self._full_width_adjustment(auto_columns, screen_width)
            if delta:
                adjustments[FULL_WIDTH] = delta

        return adjustments

    def _empty_column_adjustment(self, auto_columns: int, effective_units: float) -> int:
        """-1 when the last column would hold less than two items."""
        if effective_units <= 0 or auto_columns <= 0:
            return 0
        # Exact arithmetic: float division leaves a tiny remainder for units
        # like 13 / 3, which would trip the check on rounding noise alone
        units = Fraction(effective_units)
        avg_items_per_column = units / auto_columns
        remainder = units % avg_items_per_column
        if 0 < remainder < self.constants.EMPTY_COLUMN_MIN_ITEMS:
            return -1
        return 0

    def _overflow_adjustment(self, auto_columns: int, effective_units: float, density_threshold: float) -> int:
        """+1 when the average column is denser than the threshold."""
        if auto_columns <= 0:
            return 0
        avg_items_per_column = effective_units / auto_columns
        density = avg_items_per_column / self.constants.IDEAL_ITEMS_PER_COLUMN
        return 1 if density > density_threshold else 0

    def _full_width_adjustment(self, auto_columns: int, screen_width: float) -> int:
        c = self.constants
        if auto_columns <= 0 or screen_width <= 0:
            return 0
        column_width = screen_width / auto_columns
        if column_width > c.REFERENCE_COLUMN_WIDTH * c.WIDE_COLUMN_FACTOR and auto_columns < c.MAX_COLUMNS:
            return 1
        if column_width < c.REFERENCE_COLUMN_WIDTH * c.NARROW_COLUMN_FACTOR and auto_columns > c.MIN_COLUMNS:
            return -1
        return 0


def describe_decision(decision: ColumnDecision) -> str:
    """Human-readable summary of a column decision for the admin panel."""
    adjustment = decision.total_adjustment
    if decision.mode == MODE_NONE:
        return "Column control off: using the automatic column count"

    if decision.mode == MODE_MANUAL:
        if adjustment == 0:
            return "Manual override active: using the automatic column count"
        return f"Manual override active: {adjustment:+d} column{'s' if abs(adjustment) != 1 else ''}"

    if adjustment == 0:
        return "Auto optimizations: no adjustments"

    reasons = [label for key, label in HEURISTIC_LABELS.items() if decision.adjustments.get(key)]
    return f"Auto adjustment: {adjustment:+d} ({', '.join(reasons)})"
