"""
Exception hierarchy for the menu layout engine.

Layout computation itself never raises; these are for callers that decide a
configuration must block rendering, and for addressing a slide that does not
exist.
"""

from typing import Optional, Dict, Any, List


class MenuLayoutError(Exception):
    """Base exception for all menu layout errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


class MenuConfigValidationError(MenuLayoutError):
    """Menu configuration is structurally unusable"""

    def __init__(self, errors: List[Any], **kwargs):
        self.errors = list(errors)
        summary = "; ".join(str(error) for error in self.errors) or "invalid configuration"
        super().__init__(f"Invalid menu configuration: {summary}", **kwargs)


class SlideNotFoundError(MenuLayoutError):
    """Requested slide index is outside the template"""

    def __init__(self, slide_index: int, slide_count: int, **kwargs):
        super().__init__(
            f"Slide {slide_index} does not exist (template has {slide_count} slides)",
            **kwargs
        )
        self.slide_index = slide_index
        self.slide_count = slide_count
