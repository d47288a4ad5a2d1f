"""
Menu Layout Engine - column count and font size for a menu board slide.

Pipeline per slide:
    content selection -> column plan -> layout policy -> font scale -> LayoutResult

The engine is a pure function of its arguments. It holds only immutable
collaborators, so one instance can serve concurrent callers; observers are
passed per call.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from config.menu_layout import LAYOUT_CONSTANTS, MenuLayoutConstants, get_layout_settings
from models.menu import (
    ColumnControlConfig,
    FontScalingConfig,
    LayoutResult,
    MenuSlide,
    MenuTemplateConfig,
    ProductGroup,
    dump_menu_model,
)
from services.menu_layout.capacity import font_units
from services.menu_layout.column_planner import ColumnPlanner
from services.menu_layout.content_selector import (
    get_total_product_count,
    resolve_background_image,
    select_slide_content,
)
from services.menu_layout.exceptions import SlideNotFoundError
from services.menu_layout.font_scaler import FontScaler
from services.menu_layout.layout_policy import ColumnDecision, LayoutPolicy, describe_decision
from setup_logging_optimized import get_logger
from utils.layout_trace import (
    STAGE_COLUMN_PLAN,
    STAGE_CONTENT_SELECTION,
    STAGE_FONT_SCALE,
    STAGE_LAYOUT_POLICY,
    STAGE_RESULT,
    LayoutObserver,
    emit_stage,
    logging_observer,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class MenuSlideLayout:
    """Everything the rendering layer needs for one slide."""
    slide_id: str
    groups: List[ProductGroup]
    layout: LayoutResult
    column_decision: ColumnDecision
    total_product_count: int
    background_image_url: str

    @property
    def column_summary(self) -> str:
        return describe_decision(self.column_decision)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slideId": self.slide_id,
            "layout": dump_menu_model(self.layout),
            "styleVariables": self.layout.to_style_variables(),
            "groups": [dump_menu_model(group) for group in self.groups],
            "totalProducts": self.total_product_count,
            "backgroundImageUrl": self.background_image_url,
            "columnDecision": self.column_decision.to_dict(),
            "columnSummary": self.column_summary,
        }


class MenuLayoutEngine:
    """Adaptive layout for menu board slides."""

    def __init__(
        self,
        constants: Optional[MenuLayoutConstants] = None,
        default_screen_width: Optional[int] = None,
        font_bounds: Optional[tuple] = None
    ):
        settings = get_layout_settings()
        self.constants = constants or LAYOUT_CONSTANTS
        self.default_screen_width = default_screen_width or settings.default_screen_width
        self.trace_layout = settings.trace_layout
        self.planner = ColumnPlanner(self.constants)
        self.policy = LayoutPolicy(self.constants)
        self.font_scaler = FontScaler(self.constants, font_bounds)

    def calculate_layout(
        self,
        group_count: int,
        total_product_count: int,
        font_scaling: FontScalingConfig,
        column_control: Optional[ColumnControlConfig] = None,
        screen_width: Optional[float] = None,
        observer: Optional[LayoutObserver] = None
    ) -> LayoutResult:
        """
        Layout from bare content counts.

        Args:
            group_count: Number of groups on the slide
            total_product_count: Products across those groups
            font_scaling: Font settings
            column_control: Column settings, None to use the planned count as-is
            screen_width: Viewport width in pixels, defaults to the configured width
            observer: Optional callable receiving LayoutStageEvents

        Returns:
            A fresh LayoutResult
        """
        result, _ = self._calculate(
            group_count, total_product_count, font_scaling, column_control,
            screen_width, self._observer(observer)
        )
        return result

    def compute_layout(
        self,
        all_groups: Sequence[ProductGroup],
        config: MenuTemplateConfig,
        screen_width: Optional[float] = None,
        slide_index: int = 0,
        observer: Optional[LayoutObserver] = None
    ) -> LayoutResult:
        """LayoutResult for one slide of `config`."""
        return self.render_slide(all_groups, config, slide_index, screen_width, observer).layout

    def render_slide(
        self,
        all_groups: Sequence[ProductGroup],
        config: MenuTemplateConfig,
        slide_index: int = 0,
        screen_width: Optional[float] = None,
        observer: Optional[LayoutObserver] = None
    ) -> MenuSlideLayout:
        """
        Select content for a slide and lay it out.

        Raises:
            SlideNotFoundError: slide_index is outside the template's slides
        """
        if not 0 <= slide_index < len(config.slides):
            raise SlideNotFoundError(slide_index, len(config.slides))

        slide = config.slides[slide_index]
        observer = self._observer(observer)

        groups = select_slide_content(all_groups, slide, self.constants)
        group_count = len(groups)
        product_count = get_total_product_count(groups)
        emit_stage(
            observer, STAGE_CONTENT_SELECTION,
            {"slide_id": slide.slide_id, "available_groups": len(all_groups),
             "selections": len(slide.group_selections)},
            {"group_ids": [group.id for group in groups], "group_count": group_count,
             "total_product_count": product_count},
        )

        result, decision = self._calculate(
            group_count, product_count, config.font_scaling, config.column_control,
            screen_width, observer
        )

        logger.info(
            f"Menu slide {slide.slide_id}: {group_count} groups, {product_count} products -> "
            f"{result.column_count} columns, {result.font_size_px}px"
        )

        return MenuSlideLayout(
            slide_id=slide.slide_id,
            groups=groups,
            layout=result,
            column_decision=decision,
            total_product_count=product_count,
            background_image_url=resolve_background_image(all_groups, slide, config),
        )

    def render_all(
        self,
        all_groups: Sequence[ProductGroup],
        config: MenuTemplateConfig,
        screen_width: Optional[float] = None,
        observer: Optional[LayoutObserver] = None
    ) -> List[MenuSlideLayout]:
        """Render every slide of the template, in order."""
        return [
            self.render_slide(all_groups, config, index, screen_width, observer)
            for index in range(len(config.slides))
        ]

    def estimate_font_size(self, group_count: int, total_product_count: int,
                           font_scaling: Optional[FontScalingConfig] = None) -> int:
        """Admin preview: font size for bare counts with the planned column count."""
        font_scaling = font_scaling or FontScalingConfig()
        columns = self.planner.calculate_column_count(group_count, total_product_count)
        return self.font_scaler.calculate_font_size(group_count, total_product_count, font_scaling, columns)

    def _calculate(
        self,
        group_count: int,
        total_product_count: int,
        font_scaling: FontScalingConfig,
        column_control: Optional[ColumnControlConfig],
        screen_width: Optional[float],
        observer: Optional[LayoutObserver]
    ):
        width = screen_width or self.default_screen_width

        plan = self.planner.plan(group_count, total_product_count)
        emit_stage(
            observer, STAGE_COLUMN_PLAN,
            {"group_count": group_count, "total_product_count": total_product_count},
            plan.to_dict(),
        )

        units = font_units(total_product_count, group_count, self.constants)
        decision = self.policy.decide(plan.columns, units, column_control, width)
        emit_stage(
            observer, STAGE_LAYOUT_POLICY,
            {"auto_columns": plan.columns, "effective_units": units, "screen_width": width,
             "column_control": dump_menu_model(column_control) if column_control else None},
            decision.to_dict(),
        )

        font = self.font_scaler.scale(group_count, total_product_count, font_scaling, decision.final_columns)
        emit_stage(
            observer, STAGE_FONT_SCALE,
            {"group_count": group_count, "total_product_count": total_product_count,
             "column_count": decision.final_columns, "font_scaling": dump_menu_model(font_scaling)},
            font.to_dict(),
        )

        result = LayoutResult.build(decision.final_columns, font.font_size_px)
        emit_stage(observer, STAGE_RESULT, {}, dump_menu_model(result))
        return result, decision

    def _observer(self, observer: Optional[LayoutObserver]) -> Optional[LayoutObserver]:
        if observer is None and self.trace_layout:
            return logging_observer
        return observer
