"""
Content selection for menu slides.

Narrows the catalog snapshot down to the groups and products a slide
selected, in the slide's display order. Products that no longer exist are
dropped silently: a partial menu beats a broken board.
"""

from typing import Dict, List, Optional, Sequence

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants
from models.menu import (
    DEFAULT_BACKGROUND_IMAGE,
    GroupSelection,
    MenuSlide,
    MenuTemplateConfig,
    Product,
    ProductGroup,
)
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


def filter_groups_by_selection(
    all_groups: Sequence[ProductGroup],
    selections: Optional[Sequence[GroupSelection]],
    constants: MenuLayoutConstants = LAYOUT_CONSTANTS
) -> List[ProductGroup]:
    """
    Filter groups and products based on a slide's selections.

    Args:
        all_groups: All available groups with their products
        selections: The slide's group selections
        constants: Tuning table (for the missing display-order sentinel)

    Returns:
        New group objects holding only the selected products, sorted by
        display order. Groups with equal order keep their catalog order.
    """
    if not selections:
        return []

    selection_map: Dict[str, GroupSelection] = {}
    for selection in selections:
        selection_map[_group_key(selection.group_id)] = selection

    filtered = []
    for group in all_groups:
        selection = selection_map.get(_group_key(group.id))
        if selection is None:
            continue

        wanted = set(selection.product_ids)
        products = [product for product in group.products if product.id in wanted]
        missing = len(wanted) - len({product.id for product in products})
        if missing:
            logger.debug(f"Group {group.id}: {missing} selected products not in catalog, skipped")

        filtered.append(group.model_copy(update={"products": products}))

    def display_order(group: ProductGroup) -> int:
        order = selection_map[_group_key(group.id)].display_order
        return constants.MISSING_DISPLAY_ORDER if order is None else order

    # sorted() is stable, so ties keep catalog order
    return sorted(filtered, key=display_order)


def select_slide_content(all_groups: Sequence[ProductGroup], slide: MenuSlide,
                         constants: MenuLayoutConstants = LAYOUT_CONSTANTS) -> List[ProductGroup]:
    """Groups and products shown on `slide`."""
    return filter_groups_by_selection(all_groups, slide.group_selections, constants)


def get_total_product_count(groups: Sequence[ProductGroup]) -> int:
    return sum(len(group.products) for group in groups)


def find_product_by_id(groups: Sequence[ProductGroup], product_id: str) -> Optional[Product]:
    for group in groups:
        for product in group.products:
            if product.id == product_id:
                return product
    return None


def resolve_background_image(
    all_groups: Sequence[ProductGroup],
    slide: MenuSlide,
    config: MenuTemplateConfig
) -> str:
    """
    Image URL for the slide background.

    The slide's own background product wins over the template-wide one.
    Falls back to the default background when the product is missing or has
    no image.
    """
    product_id = slide.background_product_id or config.background_product_id
    if not product_id:
        logger.warning("No background product ID specified, using default background")
        return DEFAULT_BACKGROUND_IMAGE

    product = find_product_by_id(all_groups, product_id)
    if product and product.image_url:
        return product.image_url

    logger.warning(f"Background product {product_id} not found or has no image, using default")
    return DEFAULT_BACKGROUND_IMAGE


def _group_key(group_id) -> str:
    # Catalog ids arrive as ints, admin payloads sometimes as strings
    return str(group_id)
