"""
Tuning table and runtime settings for the menu board layout engine.

All heuristic constants live in MenuLayoutConstants so they can be re-tuned
in one place and swapped out wholesale in tests:
- Header weights (column fit vs. font curve)
- Baseline column steps and products-per-column capacity
- Font compression curve and column penalties
- Auto-optimization thresholds
"""

import os
from dataclasses import dataclass, field, asdict
from functools import lru_cache
from typing import Dict, Any, Tuple


@dataclass(frozen=True)
class MenuLayoutConstants:
    """Named constants for the column and font heuristics."""

    # A group header occupies about as much height as this many products.
    # The planner counts discrete slots, the font curve a continuous density.
    COLUMN_HEADER_WEIGHT: float = 2.0
    FONT_HEADER_WEIGHT: float = 1.5

    MIN_COLUMNS: int = 2
    MAX_COLUMNS: int = 6

    # (max group count, baseline columns); anything above the last step gets MAX_COLUMNS
    BASELINE_COLUMN_STEPS: Tuple[Tuple[int, int], ...] = ((2, 2), (4, 3), (6, 4), (9, 5))

    # Products per column by baseline column count; narrower columns hold less
    COLUMN_CAPACITY: Dict[int, int] = field(default_factory=lambda: {2: 12, 3: 11, 4: 9})
    DEFAULT_COLUMN_CAPACITY: int = 8

    # Add a column once the plan is more than this full
    SAFETY_MARGIN_RATIO: float = 0.90

    # Font compression curve
    MIN_UNITS: float = 5.0
    MAX_UNITS: float = 55.0
    CURVE_EXPONENT: float = 0.3

    # px subtracted per column count; counts above the table use the largest entry
    COLUMN_FONT_PENALTY: Dict[int, int] = field(
        default_factory=lambda: {2: 0, 3: 1, 4: 2, 5: 3, 6: 4}
    )

    # Density compensation for few, overloaded columns
    DENSITY_MAX_COLUMNS: int = 3
    DENSITY_MIN_PRODUCTS: int = 30
    DENSITY_PRODUCTS_PER_COLUMN: float = 12.0
    DENSITY_PENALTY_RATE: float = 0.3
    DENSITY_MAX_PENALTY: int = 3

    # Layout policy
    IDEAL_ITEMS_PER_COLUMN: float = 12.0
    EMPTY_COLUMN_MIN_ITEMS: float = 2.0
    REFERENCE_COLUMN_WIDTH: float = 350.0
    WIDE_COLUMN_FACTOR: float = 1.3
    NARROW_COLUMN_FACTOR: float = 0.7

    MISSING_DISPLAY_ORDER: int = 999

    def baseline_columns(self, group_count: int) -> int:
        for max_groups, columns in self.BASELINE_COLUMN_STEPS:
            if group_count <= max_groups:
                return columns
        return self.MAX_COLUMNS

    def column_capacity(self, columns: int) -> int:
        return self.COLUMN_CAPACITY.get(columns, self.DEFAULT_COLUMN_CAPACITY)

    def column_font_penalty(self, columns: int) -> int:
        if columns in self.COLUMN_FONT_PENALTY:
            return self.COLUMN_FONT_PENALTY[columns]
        if columns > max(self.COLUMN_FONT_PENALTY):
            return self.COLUMN_FONT_PENALTY[max(self.COLUMN_FONT_PENALTY)]
        return 0

    def clamp_columns(self, columns: int) -> int:
        return max(self.MIN_COLUMNS, min(self.MAX_COLUMNS, columns))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # JSON object keys must be strings
        data["COLUMN_CAPACITY"] = {str(k): v for k, v in self.COLUMN_CAPACITY.items()}
        data["COLUMN_FONT_PENALTY"] = {str(k): v for k, v in self.COLUMN_FONT_PENALTY.items()}
        data["BASELINE_COLUMN_STEPS"] = [list(step) for step in self.BASELINE_COLUMN_STEPS]
        return data


LAYOUT_CONSTANTS = MenuLayoutConstants()


@dataclass
class LayoutEngineSettings:
    """Environment-driven settings for the layout engine"""
    default_screen_width: int = field(default_factory=lambda: int(os.getenv('MENU_SCREEN_WIDTH', '1920')))
    global_min_font_size: int = field(default_factory=lambda: int(os.getenv('MENU_GLOBAL_MIN_FONT', '12')))
    global_max_font_size: int = field(default_factory=lambda: int(os.getenv('MENU_GLOBAL_MAX_FONT', '48')))
    trace_layout: bool = field(default_factory=lambda: os.getenv('MENU_TRACE_LAYOUT', 'false').lower() == 'true')

    def validate(self) -> None:
        """Validate settings values"""
        if self.default_screen_width <= 0:
            raise ValueError(f"default_screen_width must be positive, got {self.default_screen_width}")

        if self.global_min_font_size < 1:
            raise ValueError(f"global_min_font_size must be at least 1, got {self.global_min_font_size}")

        if self.global_min_font_size >= self.global_max_font_size:
            raise ValueError(
                f"global_min_font_size ({self.global_min_font_size}) must be below "
                f"global_max_font_size ({self.global_max_font_size})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_screen_width': self.default_screen_width,
            'global_font_bounds': [self.global_min_font_size, self.global_max_font_size],
            'trace_layout': self.trace_layout,
        }


@lru_cache(maxsize=1)
def get_layout_settings() -> LayoutEngineSettings:
    """Get singleton settings instance"""
    settings = LayoutEngineSettings()
    settings.validate()
    return settings
