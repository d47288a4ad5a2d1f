"""
API endpoints for menu board layout
"""
from fastapi import APIRouter, Body, HTTPException
from pydantic import Field
from typing import Any, Dict, List, Optional
import logging

from config.menu_layout import LAYOUT_CONSTANTS
from models.menu import DEFAULT_MENU_CONFIG, MenuModel, ProductGroup, dump_menu_model
from services.menu_layout import (
    MenuConfigValidationError,
    MenuLayoutEngine,
    SlideNotFoundError,
    ensure_valid_config,
    validate_menu_config
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"])

engine = MenuLayoutEngine()


class MenuLayoutRequest(MenuModel):
    """Request to lay out one slide of a menu board"""
    groups: List[ProductGroup] = Field(default_factory=list, description="Catalog groups with their products")
    config: Dict[str, Any] = Field(..., description="Menu template configuration")
    viewport_width: Optional[float] = Field(None, gt=0, description="Screen width in pixels")
    slide_index: int = Field(0, ge=0, description="Slide to render")


class MenuValidationResponse(MenuModel):
    is_valid: bool
    errors: List[Dict[str, str]]


@router.post("/layout")
async def menu_layout(request: MenuLayoutRequest) -> Dict[str, Any]:
    """
    Compute columns and font size for a menu slide
    """
    try:
        config = ensure_valid_config(request.config)
    except MenuConfigValidationError as e:
        logger.warning(f"Rejected menu layout request: {e}")
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid menu configuration", "errors": [str(err) for err in e.errors]}
        )

    try:
        slide = engine.render_slide(
            request.groups,
            config,
            slide_index=request.slide_index,
            screen_width=request.viewport_width
        )
    except SlideNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"success": True, **slide.to_dict()}


@router.post("/validate")
async def menu_validate(config: Any = Body(...)) -> MenuValidationResponse:
    """
    Validate a menu configuration without rendering it
    """
    result = validate_menu_config(config)
    return MenuValidationResponse(**result.to_dict())


@router.get("/defaults")
async def menu_defaults() -> Dict[str, Any]:
    """
    Default menu configuration and the layout tuning table
    """
    return {
        "config": dump_menu_model(DEFAULT_MENU_CONFIG),
        "constants": LAYOUT_CONSTANTS.to_dict(),
    }
