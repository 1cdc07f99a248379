"""
Tests for the rank calculator and leaderboard
"""

from kraljic_sim.kernel.metrics import rank_computations_total
from kraljic_sim.kernel.scoring_policy import ScoringPolicy
from kraljic_sim.scoring.models import Grade, RankDirection
from kraljic_sim.scoring.ranking import build_leaderboard, compute_rank
from tests.helpers import make_record


def test_rank_before_example() -> None:
    """Layer 1 scores 70, 55, 80 -> the 70 session is second"""
    records = [
        make_record("target", 4.375),  # 16 * 4.375 = 70
        make_record("low", 3.4375),  # 55
        make_record("high", 5.0),  # 80
    ]

    rank = compute_rank("target", records)

    assert rank is not None
    assert rank.before == 2
    assert rank.after == 2
    assert rank.total == 3


def test_event_round_moves_rank() -> None:
    records = [
        make_record("target", 3.75, event_weighted=5.0),  # 60 + 20 = 80
        make_record("rival", 4.0, event_weighted=1.0),  # 64 + 4 = 68
    ]

    rank = compute_rank("target", records)

    assert rank.before == 2
    assert rank.after == 1
    assert rank.movement == 1
    assert rank.direction == RankDirection.UP


def test_ties_go_to_earlier_session() -> None:
    records = [
        make_record("late", 4.0, created_offset_minutes=10),
        make_record("early", 4.0, created_offset_minutes=0),
    ]

    assert compute_rank("early", records).before == 1
    assert compute_rank("late", records).before == 2


def test_full_tie_uses_session_id() -> None:
    records = [make_record("b", 4.0), make_record("a", 4.0)]

    assert compute_rank("a", records).after == 1
    assert compute_rank("b", records).after == 2


def test_sessions_without_submissions_do_not_count() -> None:
    records = [
        make_record("target", 4.0),
        make_record("other", 3.0),
        make_record("idle", None),
    ]

    assert compute_rank("target", records).total == 2
    assert compute_rank("idle", records) is None


def test_rank_omitted_below_minimum() -> None:
    before = rank_computations_total.labels(outcome="omitted")._value.get()

    assert compute_rank("only", [make_record("only", 4.0)]) is None
    assert compute_rank("only", [make_record("only", 4.0), make_record("idle", None)]) is None

    after = rank_computations_total.labels(outcome="omitted")._value.get()
    assert after == before + 2


def test_rank_minimum_follows_policy() -> None:
    policy = ScoringPolicy(min_ranked_sessions=3)
    records = [make_record("a", 4.0), make_record("b", 3.0)]

    assert compute_rank("a", records, policy) is None


def test_unknown_target_is_not_ranked() -> None:
    records = [make_record("a", 4.0), make_record("b", 3.0)]
    assert compute_rank("missing", records) is None


def test_leaderboard_orders_by_final_score() -> None:
    records = [
        make_record("mid", 3.75, event_weighted=3.0, participant_name="Mid"),  # 72
        make_record("top", 4.5, event_weighted=4.0, participant_name="Top"),  # 88
        make_record("bottom", 2.0, participant_name="Bottom"),  # 32
        make_record("idle", None),
    ]

    entries = build_leaderboard(records)

    assert [e.session_id for e in entries] == ["top", "mid", "bottom"]
    assert entries[0].final == 88.0
    assert entries[0].layer1 == 72.0
    assert entries[0].grade == Grade.EXCELLENT
    assert entries[2].grade == Grade.POOR
