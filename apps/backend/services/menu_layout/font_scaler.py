"""
Font Scaler - one font size for the whole board from its content volume.

The size follows a concave compression curve over effective units: it drops
quickly as a sparse menu grows, then flattens out so dense menus still get
readable text. Narrow columns and overloaded wide columns take a further
fixed penalty.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants, get_layout_settings
from models.menu import FontScalingConfig
from services.menu_layout.capacity import font_units
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FontScaleResult:
    """Font size with the intermediate values that produced it."""
    font_size_px: int
    manual: bool
    min_font_size: float
    max_font_size: float
    effective_units: Optional[float] = None
    normalized_units: Optional[float] = None
    scale_factor: Optional[float] = None
    base_size: Optional[float] = None
    column_penalty: int = 0
    density_penalty: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "font_size_px": self.font_size_px,
            "manual": self.manual,
            "bounds": [self.min_font_size, self.max_font_size],
            "effective_units": self.effective_units,
            "normalized_units": self.normalized_units,
            "scale_factor": self.scale_factor,
            "base_size": self.base_size,
            "column_penalty": self.column_penalty,
            "density_penalty": self.density_penalty,
        }


class FontScaler:
    """Chooses an integer font size within the configured bounds."""

    def __init__(
        self,
        constants: Optional[MenuLayoutConstants] = None,
        global_bounds: Optional[Tuple[float, float]] = None
    ):
        self.constants = constants or LAYOUT_CONSTANTS
        if global_bounds is None:
            settings = get_layout_settings()
            global_bounds = (settings.global_min_font_size, settings.global_max_font_size)
        self.global_min, self.global_max = global_bounds

    def effective_bounds(self, font_scaling: FontScalingConfig) -> Tuple[int, int]:
        """
        Configured bounds as whole pixels, forced inside the global bound.

        A malformed configuration (min >= max, out-of-range values) still
        yields a usable range instead of an out-of-bound size.
        """
        low = math.ceil(self._clamp(font_scaling.min_font_size, self.global_min, self.global_max))
        high = math.floor(self._clamp(font_scaling.max_font_size, self.global_min, self.global_max))
        if low > high:
            low, high = high, low
        return low, high

    def scale(
        self,
        group_count: int,
        total_product_count: int,
        font_scaling: FontScalingConfig,
        column_count: Optional[int] = None
    ) -> FontScaleResult:
        """
        Calculate the font size for the given content volume.

        Args:
            group_count: Number of groups to display
            total_product_count: Total number of products across all groups
            font_scaling: Auto/manual settings and min/max bounds
            column_count: Final column count; None skips the column penalties

        Returns:
            FontScaleResult with an integer size inside the bounds
        """
        c = self.constants
        min_size, max_size = self.effective_bounds(font_scaling)

        # A non-finite manual size counts as absent
        manual_size = font_scaling.manual_font_size
        if not font_scaling.auto_scale and manual_size and math.isfinite(manual_size):
            return FontScaleResult(
                font_size_px=self._round_within(manual_size, min_size, max_size),
                manual=True,
                min_font_size=min_size,
                max_font_size=max_size,
            )

        units = font_units(total_product_count, group_count, c)
        clamped = self._clamp(units, c.MIN_UNITS, c.MAX_UNITS)
        normalized = (clamped - c.MIN_UNITS) / (c.MAX_UNITS - c.MIN_UNITS)
        scale_factor = 1 - normalized ** c.CURVE_EXPONENT

        base_size = min_size + (max_size - min_size) * scale_factor
        size = base_size

        column_penalty = 0
        density_penalty = 0
        if column_count:
            column_penalty = c.column_font_penalty(column_count)
            size -= column_penalty

            if column_count <= c.DENSITY_MAX_COLUMNS and total_product_count > c.DENSITY_MIN_PRODUCTS:
                products_per_column = total_product_count / column_count
                if products_per_column > c.DENSITY_PRODUCTS_PER_COLUMN:
                    overload = products_per_column - c.DENSITY_PRODUCTS_PER_COLUMN
                    density_penalty = min(c.DENSITY_MAX_PENALTY, int(overload * c.DENSITY_PENALTY_RATE))
                    size -= density_penalty

        final_size = self._round_within(size, min_size, max_size)

        logger.debug(
            f"Font scale: units={units:.1f}, normalized={normalized:.2f}, factor={scale_factor:.2f}, "
            f"base={base_size:.1f}px, column_penalty={column_penalty}, density_penalty={density_penalty} "
            f"-> {final_size}px (bounds {min_size}-{max_size})"
        )

        return FontScaleResult(
            font_size_px=final_size,
            manual=False,
            min_font_size=min_size,
            max_font_size=max_size,
            effective_units=units,
            normalized_units=normalized,
            scale_factor=scale_factor,
            base_size=base_size,
            column_penalty=column_penalty,
            density_penalty=density_penalty,
        )

    def calculate_font_size(
        self,
        group_count: int,
        total_product_count: int,
        font_scaling: FontScalingConfig,
        column_count: Optional[int] = None
    ) -> int:
        return self.scale(group_count, total_product_count, font_scaling, column_count).font_size_px

    @staticmethod
    def _round_within(value: float, low: int, high: int) -> int:
        # Half-up rounding; round() would send 30.5 to 30
        return int(max(low, min(high, math.floor(value + 0.5))))

    @staticmethod
    def _clamp(value: float, low: float, high: float) -> float:
        return max(low, min(high, value))
