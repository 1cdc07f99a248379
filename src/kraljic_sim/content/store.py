"""
Content Store - read-only lookup of choices and their raw scores

The scoring engine depends only on the ContentStore protocol, so a different
catalog (a translated one, a classroom variant) can be plugged in without
touching the calculators.
"""

from typing import Protocol

from kraljic_sim.content.catalog import EVENT, SCENARIOS
from kraljic_sim.content.models import Choice, EventContent, ScenarioContent
from kraljic_sim.kernel.errors import ContentNotFound
from kraljic_sim.kernel.logging import get_logger
from kraljic_sim.kernel.metrics import content_lookup_misses_total
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.quadrants.registry import get_quadrant
from kraljic_sim.scoring.models import RawScore, round_half_up

logger = get_logger(__name__)


class ContentStore(Protocol):
    """Lookup interface the scoring engine needs from content"""

    event: EventContent

    def scenario(self, quadrant: QuadrantId | str) -> ScenarioContent:
        """Layer 1 scenario of a quadrant"""
        ...

    def find_step_choice(self, quadrant: QuadrantId, step: int, choice_id: str) -> Choice | None:
        """Choice for (quadrant, step, choice_id), or None"""
        ...

    def find_event_choice(self, quadrant: QuadrantId, choice_id: str) -> Choice | None:
        """Event response choice for (quadrant, choice_id), or None"""
        ...

    def achievable_max(self, quadrant: QuadrantId) -> float:
        """Best quadrant total reachable by picking the best choice at every step"""
        ...


class StaticContentStore:
    """
    ContentStore backed by in-memory scenario data

    Defaults to the built-in catalog.
    """

    def __init__(
        self,
        scenarios: dict[QuadrantId, ScenarioContent] | None = None,
        event: EventContent | None = None,
    ) -> None:
        self.scenarios = scenarios if scenarios is not None else SCENARIOS
        self.event = event if event is not None else EVENT

    def scenario(self, quadrant: QuadrantId | str) -> ScenarioContent:
        quadrant = QuadrantId(quadrant)
        try:
            return self.scenarios[quadrant]
        except KeyError:
            raise ContentNotFound(quadrant.value, "*") from None

    def find_step_choice(self, quadrant: QuadrantId, step: int, choice_id: str) -> Choice | None:
        scenario = self.scenarios.get(QuadrantId(quadrant))
        if scenario is None or not 0 <= step < len(scenario.steps):
            return None
        return scenario.steps[step].find_choice(choice_id)

    def find_event_choice(self, quadrant: QuadrantId, choice_id: str) -> Choice | None:
        quadrant = QuadrantId(quadrant)
        for response in self.event.responses:
            if response.quadrant == quadrant:
                return response.find_choice(choice_id)
        return None

    def achievable_max(self, quadrant: QuadrantId) -> float:
        weights = get_quadrant(quadrant).weights
        scenario = self.scenario(quadrant)
        total = 0.0
        for step in scenario.steps:
            best = step.best_choice(weights).scores
            total += best.ce * weights.ce + best.ss * weights.ss + best.sv * weights.sv
        return round_half_up(total, 2)


# ============================================================================
# Required Lookups
# ============================================================================


def require_step_score(
    store: ContentStore, quadrant: QuadrantId, step: int, choice_id: str
) -> RawScore:
    """
    Raw score of a Layer 1 choice

    Raises:
        ContentNotFound: If the content store has no such choice
    """
    choice = store.find_step_choice(quadrant, step, choice_id)
    if choice is None:
        content_lookup_misses_total.labels(quadrant=QuadrantId(quadrant).value).inc()
        logger.warning("Unknown step choice", quadrant=str(quadrant), step=step, choice_id=choice_id)
        raise ContentNotFound(QuadrantId(quadrant).value, choice_id, step=step)
    return choice.scores


def require_event_score(store: ContentStore, quadrant: QuadrantId, choice_id: str) -> RawScore:
    """
    Raw score of a Layer 2 event response

    Raises:
        ContentNotFound: If the content store has no such response
    """
    choice = store.find_event_choice(quadrant, choice_id)
    if choice is None:
        content_lookup_misses_total.labels(quadrant=QuadrantId(quadrant).value).inc()
        logger.warning("Unknown event choice", quadrant=str(quadrant), choice_id=choice_id)
        raise ContentNotFound(QuadrantId(quadrant).value, choice_id)
    return choice.scores


default_content_store = StaticContentStore()
