"""
Menu Config Validator - structural checks run before any layout work.

Never raises for a bad configuration: every problem becomes a field-scoped
FieldError and the caller decides whether to block rendering. Raw payloads
are parsed through the versioned pydantic schema first, and schema errors
are reported the same way.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from config.menu_layout import get_layout_settings
from models.menu import MenuTemplateConfig
from services.menu_layout.exceptions import MenuConfigValidationError
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldError:
    """One validation problem, scoped to a camelCase field path."""
    field: str
    message: str

    def __str__(self):
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)
    config: Optional[MenuTemplateConfig] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [{"field": e.field, "message": e.message} for e in self.errors],
        }


class MenuConfigValidator:
    """Validates menu template configurations against the layout engine's needs."""

    def __init__(self, font_bounds: Optional[Tuple[float, float]] = None):
        if font_bounds is None:
            settings = get_layout_settings()
            font_bounds = (settings.global_min_font_size, settings.global_max_font_size)
        self.global_min, self.global_max = font_bounds

    def validate(self, config: Any) -> ValidationResult:
        """
        Validate a menu configuration.

        Args:
            config: A parsed MenuTemplateConfig or the raw JSON payload (any shape)

        Returns:
            ValidationResult; `config` holds the parsed model when parsing succeeded
        """
        if config is None:
            return ValidationResult([FieldError("config", "Menu configuration not found")])

        if not isinstance(config, MenuTemplateConfig):
            try:
                config = MenuTemplateConfig.model_validate(config)
            except ValidationError as e:
                errors = [self._schema_error(error) for error in e.errors()]
                logger.info(f"Menu config failed schema parsing with {len(errors)} errors")
                return ValidationResult(errors)

        errors: List[FieldError] = []
        self._check_slides(config, errors)
        self._check_background(config, errors)
        self._check_font_scaling(config, errors)
        self._check_column_control(config, errors)

        if errors:
            logger.info(f"Menu config invalid: {'; '.join(str(e) for e in errors)}")
        return ValidationResult(errors, config)

    def _check_slides(self, config: MenuTemplateConfig, errors: List[FieldError]) -> None:
        if not config.slides:
            errors.append(FieldError("slides", "At least one slide is required"))
            return

        for index, slide in enumerate(config.slides):
            path = f"slides[{index}]"
            if not slide.slide_id or not slide.slide_id.strip():
                errors.append(FieldError(f"{path}.slideId", "Slide ID is required"))

            if not slide.group_selections:
                errors.append(FieldError(f"{path}.groupSelections", "At least one group must be selected"))

            for group_index, selection in enumerate(slide.group_selections):
                sel_path = f"{path}.groupSelections[{group_index}].productIds"
                if not selection.product_ids:
                    errors.append(FieldError(sel_path, "At least one product must be selected"))
                elif len(set(selection.product_ids)) != len(selection.product_ids):
                    errors.append(FieldError(sel_path, "Product IDs must be unique"))

    def _check_background(self, config: MenuTemplateConfig, errors: List[FieldError]) -> None:
        if config.background_product_id and config.background_product_id.strip():
            return
        if not config.slides:
            errors.append(FieldError("backgroundProductId", "Background product ID is required"))
            return
        # Without a template background every slide needs its own
        for index, slide in enumerate(config.slides):
            if not slide.background_product_id or not slide.background_product_id.strip():
                errors.append(FieldError(
                    f"slides[{index}].backgroundProductId", "Background product ID is required"
                ))

    def _check_font_scaling(self, config: MenuTemplateConfig, errors: List[FieldError]) -> None:
        scaling = config.font_scaling
        low, high = self.global_min, self.global_max
        bound_text = f"between {low:g} and {high:g} pixels"

        if not low <= scaling.min_font_size <= high:
            errors.append(FieldError("fontScaling.minFontSize", f"Minimum font size must be {bound_text}"))

        if not low <= scaling.max_font_size <= high:
            errors.append(FieldError("fontScaling.maxFontSize", f"Maximum font size must be {bound_text}"))

        if scaling.min_font_size >= scaling.max_font_size:
            errors.append(FieldError(
                "fontScaling.minFontSize", "Minimum font size must be less than maximum font size"
            ))

        if not scaling.auto_scale and scaling.manual_font_size is not None:
            if not low <= scaling.manual_font_size <= high:
                errors.append(FieldError("fontScaling.manualFontSize", f"Manual font size must be {bound_text}"))

    def _check_column_control(self, config: MenuTemplateConfig, errors: List[FieldError]) -> None:
        if config.column_control is None:
            return
        threshold = config.column_control.auto_optimizations.density_threshold
        if threshold <= 0:
            errors.append(FieldError(
                "columnControl.autoOptimizations.densityThreshold", "Density threshold must be positive"
            ))

    @staticmethod
    def _schema_error(error: Dict[str, Any]) -> FieldError:
        path = ""
        for part in error.get("loc", ()):
            if isinstance(part, int):
                path += f"[{part}]"
            else:
                path += f".{part}" if path else str(part)
        return FieldError(path or "config", error.get("msg", "Invalid value"))


def validate_menu_config(config: Any) -> ValidationResult:
    return MenuConfigValidator().validate(config)


def ensure_valid_config(config: Any) -> MenuTemplateConfig:
    """Parse and validate, raising MenuConfigValidationError when rendering must be blocked."""
    result = validate_menu_config(config)
    if not result.is_valid:
        raise MenuConfigValidationError(result.errors, context={"error_count": len(result.errors)})
    return result.config
