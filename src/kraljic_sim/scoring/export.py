"""
Results Export - a dashboard flattened into a JSON-serialisable payload

Used to hand results to an external collector (a spreadsheet, a class
roster database). Keys are camelCase to match what such collectors already
expect from the web client.
"""

from datetime import datetime
from typing import Any

from kraljic_sim.quadrants.models import Dimension
from kraljic_sim.quadrants.registry import get_quadrant
from kraljic_sim.scoring.models import DashboardResult, QuadrantResult


def _quadrant_summary(result: QuadrantResult) -> dict[str, Any]:
    raw_sum = {
        dimension: sum(score.raw.get(dimension) for score in result.step_scores)
        for dimension in Dimension
    }
    return {
        "quadrant": result.quadrant.value,
        "nameKo": get_quadrant(result.quadrant).name_ko,
        "totalWeighted": result.total_weighted,
        "percentOfOptimal": result.percent_of_optimal,
        "rawCe": raw_sum[Dimension.CE],
        "rawSs": raw_sum[Dimension.SS],
        "rawSv": raw_sum[Dimension.SV],
        "choices": list(result.choice_ids),
    }


def build_export_payload(dashboard: DashboardResult, submitted_at: datetime) -> dict[str, Any]:
    """
    Flatten a dashboard for export

    profileType is the strongest dimension id ("ce", "ss" or "sv").
    """
    return {
        "sessionId": dashboard.session_id,
        "participantName": dashboard.participant_name,
        "layer1Score": dashboard.layer1_score,
        "layer2Score": dashboard.layer2_score,
        "finalScore": dashboard.final_score,
        "grade": dashboard.grade.value,
        "profileType": dashboard.dimension_profile.strongest.value,
        "quadrants": [_quadrant_summary(result) for result in dashboard.quadrant_results],
        "submittedAt": submitted_at.isoformat(),
    }
