"""
Menu board data model.

Wire payloads are camelCase (groupId, productIds, minFontSize, ...); the
models accept either the camelCase alias or the Python field name.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MENU_SCHEMA_VERSION = 1
DEFAULT_BACKGROUND_IMAGE = "/assets/images/menu-default-background.jpg"

GroupId = Union[int, str]


class MenuModel(BaseModel):
    """Base for menu models: camelCase aliases, population by field name, finite numbers only."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Product(MenuModel):
    """A product as delivered by the catalog data source"""
    id: str
    name: str = ""
    price: float = 0.0
    image_url: Optional[str] = Field(None, description="High-resolution product image URL")


class ProductGroup(MenuModel):
    """A product group snapshot with its products"""
    id: GroupId
    name: str = ""
    products: List[Product] = Field(
        default_factory=list,
        validation_alias=AliasChoices("products", "group_products", "groupProducts"),
    )


class GroupSelection(MenuModel):
    """Which products of a group a slide shows, and where the group goes"""
    group_id: GroupId
    product_ids: List[str] = Field(default_factory=list)
    display_order: Optional[int] = Field(None, description="Position of the group on the board (left to right)")


class MenuSlide(MenuModel):
    """A single menu board slide"""
    slide_id: str
    name: str = ""
    group_selections: List[GroupSelection] = Field(default_factory=list)
    background_product_id: Optional[str] = Field(
        None, description="Slide-specific background product (overrides the template background)"
    )


class FontScalingConfig(MenuModel):
    """Controls how font size adapts to content volume"""
    auto_scale: bool = True
    manual_font_size: Optional[float] = None
    min_font_size: float = 16
    max_font_size: float = 48


class ManualOverrideConfig(MenuModel):
    enabled: bool = False
    adjustment: int = 0


class AutoOptimizationsConfig(MenuModel):
    prevent_empty_columns: bool = True
    prevent_overflow: bool = True
    optimize_for_full_width: bool = False
    density_threshold: float = 0.80


class ColumnControlConfig(MenuModel):
    """Administrator control over the auto-computed column count"""
    manual_override: ManualOverrideConfig = Field(default_factory=ManualOverrideConfig)
    auto_optimizations: AutoOptimizationsConfig = Field(default_factory=AutoOptimizationsConfig)


class MenuTemplateConfig(MenuModel):
    """
    Versioned configuration of the menu template.

    Attributes:
        schema_version: Schema version tag, only version 1 is understood
        template_type: Template tag, always "menu"
        layout: Single slide or multi-slide rotation
        background_product_id: Product whose image is the board background
        slides: Slide configurations
        font_scaling: Font size settings
        column_control: Column adjustments; None uses the planned count as-is
    """
    schema_version: Literal[1] = MENU_SCHEMA_VERSION
    template_type: Literal["menu"] = "menu"
    layout: Literal["single-slide", "multi-slide"] = "single-slide"
    background_product_id: str = ""
    slides: List[MenuSlide] = Field(default_factory=list)
    font_scaling: FontScalingConfig = Field(default_factory=FontScalingConfig)
    column_control: Optional[ColumnControlConfig] = None


class LayoutResult(MenuModel):
    """Engine output for one slide. Never mutated after construction."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False, frozen=True)

    # Bounds come from the constants table the engine ran with
    column_count: int = Field(..., ge=1)
    font_size_px: int
    grid_template_columns: str

    @classmethod
    def build(cls, column_count: int, font_size_px: int) -> "LayoutResult":
        return cls(
            column_count=column_count,
            font_size_px=font_size_px,
            grid_template_columns=f"repeat({column_count}, 1fr)",
        )

    def to_style_variables(self) -> Dict[str, str]:
        """CSS custom properties that drive the grid and text size"""
        return {
            "--menu-columns": str(self.column_count),
            "--menu-font-size": f"{self.font_size_px}px",
        }


def default_menu_config() -> MenuTemplateConfig:
    """Configuration used when the menu template is first selected"""
    return MenuTemplateConfig(
        layout="single-slide",
        background_product_id="",
        slides=[MenuSlide(slide_id="slide-1", name="Slide 1", group_selections=[])],
        font_scaling=FontScalingConfig(auto_scale=True, min_font_size=16, max_font_size=48),
    )


DEFAULT_MENU_CONFIG = default_menu_config()


def dump_menu_model(model: BaseModel) -> Dict[str, Any]:
    """Serialize a menu model to its camelCase wire shape"""
    return model.model_dump(by_alias=True, mode="json")
