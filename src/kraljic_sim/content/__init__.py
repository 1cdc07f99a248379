"""Scenario content: the choices participants pick and their raw scores"""

from kraljic_sim.content.models import (
    Choice,
    ChoiceFeedback,
    EventContent,
    EventResponseContent,
    ScenarioContent,
    Step,
)
from kraljic_sim.content.store import (
    ContentStore,
    StaticContentStore,
    default_content_store,
    require_event_score,
    require_step_score,
)

__all__ = [
    "Choice",
    "ChoiceFeedback",
    "ContentStore",
    "EventContent",
    "EventResponseContent",
    "ScenarioContent",
    "StaticContentStore",
    "Step",
    "default_content_store",
    "require_event_score",
    "require_step_score",
]
