"""Adaptive menu board layout engine"""

from .column_planner import ColumnPlan, ColumnPlanner
from .config_validator import (
    FieldError,
    MenuConfigValidator,
    ValidationResult,
    ensure_valid_config,
    validate_menu_config
)
from .content_selector import (
    filter_groups_by_selection,
    find_product_by_id,
    get_total_product_count,
    resolve_background_image
)
from .engine import MenuLayoutEngine, MenuSlideLayout
from .exceptions import MenuConfigValidationError, MenuLayoutError, SlideNotFoundError
from .font_scaler import FontScaler, FontScaleResult
from .layout_policy import ColumnDecision, LayoutPolicy, describe_decision

__all__ = [
    'ColumnPlan',
    'ColumnPlanner',
    'FieldError',
    'MenuConfigValidator',
    'ValidationResult',
    'ensure_valid_config',
    'validate_menu_config',
    'filter_groups_by_selection',
    'find_product_by_id',
    'get_total_product_count',
    'resolve_background_image',
    'MenuLayoutEngine',
    'MenuSlideLayout',
    'MenuConfigValidationError',
    'MenuLayoutError',
    'SlideNotFoundError',
    'FontScaler',
    'FontScaleResult',
    'ColumnDecision',
    'LayoutPolicy',
    'describe_decision'
]
