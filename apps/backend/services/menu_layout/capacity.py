"""Effective units: one scalar for the vertical space a menu demands."""

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants


def effective_units(total_product_count: int, group_count: int, header_weight: float) -> float:
    """Products plus group headers, each header counted as `header_weight` products."""
    return total_product_count + group_count * header_weight


def column_units(total_product_count: int, group_count: int,
                 constants: MenuLayoutConstants = LAYOUT_CONSTANTS) -> float:
    """Effective units for column fitting (discrete slots)."""
    return effective_units(total_product_count, group_count, constants.COLUMN_HEADER_WEIGHT)


def font_units(total_product_count: int, group_count: int,
               constants: MenuLayoutConstants = LAYOUT_CONSTANTS) -> float:
    """Effective units for the font curve and density estimates."""
    return effective_units(total_product_count, group_count, constants.FONT_HEADER_WEIGHT)
