"""
Tests for the JSON HTTP API and health probes

Exercises the Flask routes through the test client, including the mapping
of domain errors to status codes.

Fun fact: the browser client still speaks camelCase, so every snake_case
field in a dashboard is renamed on its way out of the matrix.
"""

from pathlib import Path

import pytest

import kraljic_sim.api_server as api_server
from kraljic_sim.api_server import app, camelize, initialize_api_server
from kraljic_sim.simulation import KraljicSimulation


@pytest.fixture
def client(temp_db: Path, simulation: KraljicSimulation):
    """Flask test client serving a fresh simulation"""
    initialize_api_server(temp_db, simulation)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
    api_server._db_path = None
    api_server._simulation = None


@pytest.fixture
def session(client) -> str:
    response = client.post("/api/session", json={"sessionId": "kim", "participantName": "Kim"})
    assert response.status_code == 201
    return "kim"


# =============================================================================
# Sessions
# =============================================================================


def test_create_session(client) -> None:
    response = client.post("/api/session", json={"sessionId": "s-1", "participantName": "Lee"})

    assert response.status_code == 201
    assert response.get_json() == {"ok": True, "sessionId": "s-1"}


def test_create_session_missing_fields(client) -> None:
    response = client.post("/api/session", json={"participantName": "Lee"})

    assert response.status_code == 400
    assert response.get_json()["fields"] == ["sessionId"]


def test_create_duplicate_session(client, session: str) -> None:
    response = client.post("/api/session", json={"sessionId": session, "participantName": "Kim"})
    assert response.status_code == 409


# =============================================================================
# Submissions
# =============================================================================


def test_submit(client, session: str) -> None:
    response = client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A"},
    )

    body = response.get_json()
    assert response.status_code == 201
    assert body["ok"] is True
    assert isinstance(body["id"], int)
    assert body["weightedScore"] == 3.7


def test_submit_with_matching_echo(client, session: str) -> None:
    response = client.post(
        "/api/submit",
        json={
            "sessionId": session, "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A",
            "ceScore": 4, "ssScore": 4, "svScore": 3, "weightedScore": 3.7,
        },
    )
    assert response.status_code == 201


def test_submit_with_tampered_score(client, session: str) -> None:
    response = client.post(
        "/api/submit",
        json={
            "sessionId": session, "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A",
            "weightedScore": 5.0,
        },
    )
    assert response.status_code == 400


def test_submit_out_of_range_raw_score(client, session: str) -> None:
    response = client.post(
        "/api/submit",
        json={
            "sessionId": session, "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A",
            "ceScore": 6, "ssScore": 4, "svScore": 3,
        },
    )
    assert response.status_code == 400


def test_submit_missing_fields(client, session: str) -> None:
    response = client.post("/api/submit", json={"sessionId": session, "quadrant": "bottleneck"})

    assert response.status_code == 400
    assert set(response.get_json()["fields"]) == {"step", "choiceId"}


def test_submit_unknown_quadrant(client, session: str) -> None:
    response = client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "tactical", "step": 0, "choiceId": "x"},
    )
    assert response.status_code == 400


def test_submit_unknown_session_and_choice(client, session: str) -> None:
    unknown_session = client.post(
        "/api/submit",
        json={"sessionId": "ghost", "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A"},
    )
    unknown_choice = client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "bottleneck", "step": 0, "choiceId": "nope"},
    )

    assert unknown_session.status_code == 404
    assert unknown_choice.status_code == 404


# =============================================================================
# Event Round
# =============================================================================


def test_event_round(client, session: str) -> None:
    payload = {
        "sessionId": session,
        "responses": [
            {"quadrant": "bottleneck", "choiceId": "event_bottleneck_A"},
            {"quadrant": "leverage", "choiceId": "event_leverage_A"},
        ],
    }

    first = client.post("/api/event", json=payload)
    second = client.post("/api/event", json=payload)

    assert first.status_code == 201
    assert first.get_json() == {"ok": True, "recorded": 2}
    assert second.status_code == 409


def test_event_round_requires_responses(client, session: str) -> None:
    response = client.post("/api/event", json={"sessionId": session, "responses": []})
    assert response.status_code == 400


def test_event_round_with_non_object_response_writes_nothing(
    client, session: str, simulation: KraljicSimulation
) -> None:
    response = client.post(
        "/api/event",
        json={
            "sessionId": session,
            "responses": [
                {"quadrant": "bottleneck", "choiceId": "event_bottleneck_A"},
                "leverage=event_leverage_A",
            ],
        },
    )

    assert response.status_code == 400
    assert response.get_json()["fields"] == ["responses[1]"]
    assert simulation.get_session(session).completed_at is None
    assert simulation.store.load_record(session).events == []


# =============================================================================
# Results
# =============================================================================


def test_results_are_camel_case(client, session: str) -> None:
    client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "leverage", "step": 0, "choiceId": "leverage_step1_B"},
    )

    response = client.get(f"/api/results?sessionId={session}")

    body = response.get_json()
    assert response.status_code == 200
    assert body["sessionId"] == session
    assert body["layer1Score"] == 3.5
    assert body["grade"] == "Poor"
    assert body["quadrantResults"][1]["percentOfOptimal"] == 17.5
    assert body["dimensionProfile"]["profileType"] == "cost_focused"
    assert body["rank"] is None


def test_results_include_rank_movement(client, session: str) -> None:
    client.post("/api/session", json={"sessionId": "lee", "participantName": "Lee"})
    client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "leverage", "step": 0, "choiceId": "leverage_step1_B"},
    )
    client.post(
        "/api/submit",
        json={"sessionId": "lee", "quadrant": "bottleneck", "step": 0, "choiceId": "bottleneck_step1_A"},
    )

    rank = client.get("/api/results?sessionId=kim").get_json()["rank"]

    assert rank == {"before": 2, "after": 2, "total": 2, "movement": 0, "direction": "same"}


def test_results_errors(client) -> None:
    assert client.get("/api/results").status_code == 400
    assert client.get("/api/results?sessionId=ghost").status_code == 404


def test_leaderboard(client, session: str) -> None:
    client.post(
        "/api/submit",
        json={"sessionId": session, "quadrant": "strategic", "step": 0, "choiceId": "strategic_step1_B"},
    )

    body = client.get("/api/leaderboard?limit=5").get_json()

    assert [entry["sessionId"] for entry in body] == [session]
    assert body[0]["participantName"] == "Kim"


def test_camelize_nested() -> None:
    assert camelize({"final_score": 1, "quadrant_results": [{"total_weighted": 2}]}) == {
        "finalScore": 1,
        "quadrantResults": [{"totalWeighted": 2}],
    }


# =============================================================================
# Health Probes
# =============================================================================


def test_liveness(client) -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.get_json()["status"] == "alive"


def test_readiness(client, session: str) -> None:
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.get_json()["session_count"] == 1


def test_readiness_when_not_initialized() -> None:
    api_server._db_path = None
    api_server._simulation = None
    app.config["TESTING"] = True

    with app.test_client() as client:
        response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.get_json()["reason"] == "not_initialized"


def test_readiness_when_database_missing(client, temp_db: Path) -> None:
    temp_db.unlink()

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.get_json()["reason"] == "database_file_not_found"
