"""
Layout trace utilities.
Structured per-stage events from the menu layout engine, for tests and for
diagnosing sizing decisions in production.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

STAGE_CONTENT_SELECTION = "content_selection"
STAGE_COLUMN_PLAN = "column_plan"
STAGE_LAYOUT_POLICY = "layout_policy"
STAGE_FONT_SCALE = "font_scale"
STAGE_RESULT = "result"

LAYOUT_STAGES = (
    STAGE_CONTENT_SELECTION,
    STAGE_COLUMN_PLAN,
    STAGE_LAYOUT_POLICY,
    STAGE_FONT_SCALE,
    STAGE_RESULT,
)


@dataclass(frozen=True)
class LayoutStageEvent:
    """What one engine stage was given and what it produced."""
    stage: str
    inputs: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "inputs": round_numbers(self.inputs),
            "outputs": round_numbers(self.outputs),
        }


LayoutObserver = Callable[[LayoutStageEvent], None]


class LayoutTraceRecorder:
    """Observer that keeps every event it receives."""

    def __init__(self):
        self.events: List[LayoutStageEvent] = []

    def __call__(self, event: LayoutStageEvent) -> None:
        self.events.append(event)

    @property
    def stages(self) -> List[str]:
        return [event.stage for event in self.events]

    def get(self, stage: str) -> Optional[LayoutStageEvent]:
        """Last event recorded for `stage`."""
        for event in reversed(self.events):
            if event.stage == stage:
                return event
        return None

    def clear(self) -> None:
        self.events = []


def logging_observer(event: LayoutStageEvent) -> None:
    logger.debug(f"Layout stage: {event.to_dict()}")


def emit_stage(observer: Optional[LayoutObserver], stage: str,
               inputs: Dict[str, Any], outputs: Dict[str, Any]) -> None:
    """Send a stage event to `observer`; observer failures never affect the layout."""
    if observer is None:
        return
    try:
        observer(LayoutStageEvent(stage, inputs, outputs))
    except Exception as e:
        logger.error(f"Layout observer failed on stage {stage}: {e}")


def round_numbers(obj):
    """Round floats to 2 decimals throughout nested dicts and lists"""
    if isinstance(obj, float):
        return round(obj, 2)
    elif isinstance(obj, dict):
        return {k: round_numbers(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [round_numbers(item) for item in obj]
    else:
        return obj
