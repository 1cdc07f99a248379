"""
Dimension Profile Builder - where a participant's instincts lie

Sums the raw ce/ss/sv values of every Layer 1 step and names the strongest
and weakest dimension.
"""

from collections.abc import Sequence

from kraljic_sim.quadrants.models import DIMENSION_ORDER, Dimension
from kraljic_sim.scoring.models import (
    DimensionProfile,
    DimensionStat,
    ProfileType,
    QuadrantResult,
    round_half_up,
)


def _pick(totals: dict[Dimension, int], *, highest: bool) -> Dimension:
    """
    Dimension with the highest (or lowest) total

    Dimensions are ranked by total descending, declaration order (CE, SS, SV)
    breaking ties. The strongest is the head of that ranking and the weakest
    its tail, so a tie for the top goes to the dimension declared first and a
    tie for the bottom to the one declared last.
    """
    best = DIMENSION_ORDER[0]
    for dimension in DIMENSION_ORDER[1:]:
        if highest:
            better = totals[dimension] > totals[best]
        else:
            better = totals[dimension] <= totals[best]
        if better:
            best = dimension
    return best


def strongest_and_weakest(totals: dict[Dimension, int]) -> tuple[Dimension, Dimension]:
    """Classify the strongest and weakest dimension from raw totals"""
    return _pick(totals, highest=True), _pick(totals, highest=False)


def build_profile(quadrant_results: Sequence[QuadrantResult]) -> DimensionProfile:
    """
    Aggregate raw dimension totals across all quadrants

    Args:
        quadrant_results: Quadrant results (normally four, up to 16 steps)

    Returns:
        DimensionProfile with totals, averages (2dp), strongest and weakest.
        With no steps at all every total ties at 0, giving strongest=CE
        and weakest=SV.

    Example:
        Totals ce=50, ss=62, sv=48 give strongest=ss, weakest=sv.
    """
    totals = {dimension: 0 for dimension in DIMENSION_ORDER}
    step_count = 0

    for result in quadrant_results:
        for score in result.step_scores:
            for dimension in DIMENSION_ORDER:
                totals[dimension] += score.raw.get(dimension)
            step_count += 1

    def stat(dimension: Dimension) -> DimensionStat:
        average = totals[dimension] / step_count if step_count > 0 else 0.0
        return DimensionStat(total=totals[dimension], average=round_half_up(average, 2))

    strongest, weakest = strongest_and_weakest(totals)

    return DimensionProfile(
        ce=stat(Dimension.CE),
        ss=stat(Dimension.SS),
        sv=stat(Dimension.SV),
        strongest=strongest,
        weakest=weakest,
        step_count=step_count,
        profile_type=ProfileType.from_dimension(strongest),
    )
