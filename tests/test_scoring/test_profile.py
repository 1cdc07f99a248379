"""
Tests for the dimension profile builder
"""

from kraljic_sim.quadrants.models import Dimension, QuadrantId
from kraljic_sim.scoring.calculator import aggregate_quadrant, compute_weighted
from kraljic_sim.scoring.models import ProfileType, RawScore
from kraljic_sim.scoring.profile import build_profile, strongest_and_weakest


def test_strongest_and_weakest_example() -> None:
    """ce=50, ss=62, sv=48 -> strongest ss, weakest sv"""
    totals = {Dimension.CE: 50, Dimension.SS: 62, Dimension.SV: 48}
    assert strongest_and_weakest(totals) == (Dimension.SS, Dimension.SV)


def test_top_tie_goes_to_first_declared_dimension() -> None:
    top_tie = {Dimension.CE: 10, Dimension.SS: 40, Dimension.SV: 40}
    assert strongest_and_weakest(top_tie) == (Dimension.SS, Dimension.CE)


def test_bottom_tie_goes_to_last_declared_dimension() -> None:
    bottom_tie = {Dimension.CE: 40, Dimension.SS: 10, Dimension.SV: 10}
    assert strongest_and_weakest(bottom_tie) == (Dimension.CE, Dimension.SV)

    ce_ss_tie = {Dimension.CE: 50, Dimension.SS: 50, Dimension.SV: 60}
    assert strongest_and_weakest(ce_ss_tie) == (Dimension.SV, Dimension.SS)


def test_all_equal_totals_give_ce_and_sv() -> None:
    all_equal = {Dimension.CE: 40, Dimension.SS: 40, Dimension.SV: 40}
    assert strongest_and_weakest(all_equal) == (Dimension.CE, Dimension.SV)


def test_profile_sums_raw_values_across_quadrants() -> None:
    bottleneck = aggregate_quadrant(
        [
            compute_weighted(RawScore(ce=2, ss=5, sv=4), QuadrantId.BOTTLENECK),
            compute_weighted(RawScore(ce=3, ss=4, sv=4), QuadrantId.BOTTLENECK),
        ],
        QuadrantId.BOTTLENECK,
    )
    leverage = aggregate_quadrant(
        [compute_weighted(RawScore(ce=5, ss=2, sv=4), QuadrantId.LEVERAGE)],
        QuadrantId.LEVERAGE,
    )

    profile = build_profile([bottleneck, leverage])

    assert profile.step_count == 3
    assert profile.ce.total == 10
    assert profile.ss.total == 11
    assert profile.sv.total == 12
    assert profile.ce.average == 3.33
    assert profile.ss.average == 3.67
    assert profile.sv.average == 4.0
    assert profile.strongest == Dimension.SV
    assert profile.weakest == Dimension.CE
    assert profile.profile_type == ProfileType.STRATEGY_FOCUSED


def test_profile_with_no_steps() -> None:
    empty = [aggregate_quadrant([], quadrant) for quadrant in QuadrantId]

    profile = build_profile(empty)

    assert profile.step_count == 0
    assert profile.ce.average == 0.0
    assert profile.strongest == Dimension.CE
    assert profile.weakest == Dimension.SV
    assert profile.profile_type == ProfileType.COST_FOCUSED
