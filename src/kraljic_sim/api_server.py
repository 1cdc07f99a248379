"""
JSON HTTP API for the simulation, plus liveness and readiness probes.

Routes keep the camelCase bodies the browser client already sends:

    POST /api/session   {sessionId, participantName}
    POST /api/submit    {sessionId, quadrant, step, choiceId, ceScore?, ssScore?, svScore?, weightedScore?}
    POST /api/event     {sessionId, responses: [{quadrant, choiceId, ...scores?}]}
    GET  /api/results?sessionId=...
    GET  /api/leaderboard
"""

import sqlite3
from pathlib import Path
from typing import Any

import pydantic
from flask import Flask, jsonify, request
from pydantic.alias_generators import to_camel

from kraljic_sim.kernel.errors import (
    KraljicError,
    NotFoundError,
    PersistenceError,
    SessionAlreadyCompleted,
    SessionAlreadyExists,
    ValidationError,
)
from kraljic_sim.kernel.logging import (
    generate_correlation_id,
    get_logger,
    is_production,
    set_correlation_id,
)
from kraljic_sim.simulation import KraljicSimulation

logger = get_logger(__name__)

app = Flask(__name__)

# Global state - will be set by initialize_api_server()
_db_path: Path | None = None
_simulation: KraljicSimulation | None = None


def initialize_api_server(
    db_path: str | Path, simulation: KraljicSimulation | None = None
) -> KraljicSimulation:
    """
    Initialize the API server with a simulation instance.

    Args:
        db_path: Path to SQLite database
        simulation: Existing simulation to serve (created from db_path if None)

    Returns:
        The simulation being served
    """
    global _db_path, _simulation
    _db_path = Path(db_path)
    _simulation = simulation or KraljicSimulation(_db_path)
    logger.info("API server initialized", db_path=str(_db_path))
    return _simulation


def _get_simulation() -> KraljicSimulation:
    if _simulation is None:
        raise PersistenceError("API server not initialized")
    return _simulation


def camelize(value: Any) -> Any:
    """Recursively convert snake_case dict keys to camelCase"""
    if isinstance(value, dict):
        return {to_camel(key): camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [camelize(item) for item in value]
    return value


def _raw_from_body(body: dict[str, Any]) -> dict[str, int] | None:
    keys = ("ceScore", "ssScore", "svScore")
    if all(body.get(key) is None for key in keys):
        return None
    return {"ce": body.get("ceScore"), "ss": body.get("ssScore"), "sv": body.get("svScore")}


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _missing(body: dict[str, Any], *fields: str) -> list[str]:
    return [field for field in fields if body.get(field) in (None, "")]


# ============================================================================
# Error Mapping
# ============================================================================


def _error(status: int, error: str, **details: Any) -> tuple[Any, int]:
    return jsonify({"error": error, **details}), status


@app.before_request
def bind_correlation_id() -> None:
    set_correlation_id(request.headers.get("X-Correlation-ID") or generate_correlation_id())


@app.errorhandler(pydantic.ValidationError)
def handle_schema_error(exc: pydantic.ValidationError) -> tuple[Any, int]:
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    return _error(400, "Invalid request", fields=fields)


@app.errorhandler(KraljicError)
def handle_domain_error(exc: KraljicError) -> tuple[Any, int]:
    if isinstance(exc, (SessionAlreadyExists, SessionAlreadyCompleted)):
        return _error(409, str(exc))
    if isinstance(exc, ValidationError):
        return _error(400, str(exc))
    if isinstance(exc, NotFoundError):
        return _error(404, str(exc))

    logger.error("Request failed", path=request.path, error=str(exc))
    message = "Internal storage error" if is_production() else str(exc)
    return _error(500, message)


# ============================================================================
# Simulation Routes
# ============================================================================


@app.route("/api/session", methods=["POST"])
def create_session() -> tuple[Any, int]:
    body = _json_body()
    missing = _missing(body, "sessionId", "participantName")
    if missing:
        return _error(400, "sessionId and participantName are required", fields=missing)

    session = _get_simulation().create_session(body["participantName"], session_id=body["sessionId"])
    return jsonify({"ok": True, "sessionId": session.session_id}), 201


@app.route("/api/submit", methods=["POST"])
def submit() -> tuple[Any, int]:
    body = _json_body()
    missing = _missing(body, "sessionId", "quadrant", "step", "choiceId")
    if missing:
        return _error(400, "Missing required fields", fields=missing)

    submission = _get_simulation().record_submission(
        body["sessionId"],
        body["quadrant"],
        body["step"],
        body["choiceId"],
        raw_score=_raw_from_body(body),
        weighted=body.get("weightedScore"),
    )
    return (
        jsonify(
            {
                "ok": True,
                "id": submission.row_id,
                "weightedScore": submission.score.weighted,
            }
        ),
        201,
    )


@app.route("/api/event", methods=["POST"])
def submit_event() -> tuple[Any, int]:
    body = _json_body()
    responses = body.get("responses")
    if not body.get("sessionId") or not isinstance(responses, list) or not responses:
        return _error(400, "sessionId and responses array are required")

    malformed = [f"responses[{index}]" for index, item in enumerate(responses) if not isinstance(item, dict)]
    if malformed:
        return _error(400, "Each response must be an object", fields=malformed)

    specs = [
        {
            "quadrant": item.get("quadrant"),
            "choice_id": item.get("choiceId"),
            "raw_score": _raw_from_body(item),
            "weighted": item.get("weightedScore"),
        }
        for item in responses
    ]
    stored = _get_simulation().record_event_responses(body["sessionId"], specs)
    return jsonify({"ok": True, "recorded": len(stored)}), 201


@app.route("/api/results", methods=["GET"])
def results() -> tuple[Any, int]:
    session_id = request.args.get("sessionId")
    if not session_id:
        return _error(400, "sessionId is required")

    dashboard = _get_simulation().get_dashboard(session_id)
    payload = camelize(dashboard.model_dump(mode="json"))
    if dashboard.rank is not None:
        payload["rank"]["movement"] = dashboard.rank.movement
        payload["rank"]["direction"] = dashboard.rank.direction.value
    return jsonify(payload), 200


@app.route("/api/leaderboard", methods=["GET"])
def leaderboard() -> tuple[Any, int]:
    limit = request.args.get("limit", type=int)
    entries = _get_simulation().leaderboard(limit=limit)
    return jsonify([camelize(entry.model_dump(mode="json")) for entry in entries]), 200


# ============================================================================
# Health Probes
# ============================================================================


@app.route("/health/live", methods=["GET"])
def liveness() -> tuple[Any, int]:
    """Liveness probe - the process is running"""
    return jsonify({"status": "alive", "service": "kraljic-sim"}), 200


@app.route("/health/ready", methods=["GET"])
def readiness() -> tuple[Any, int]:
    """
    Readiness probe - the database is reachable

    Returns:
        200 with the session count if ready, 503 if not
    """
    if _db_path is None or _simulation is None:
        logger.error("Readiness check failed: server not initialized")
        return jsonify({"status": "not_ready", "reason": "not_initialized"}), 503

    if not _db_path.exists():
        logger.error("Readiness check failed: DB file does not exist", db_path=str(_db_path))
        return (
            jsonify({"status": "not_ready", "reason": "database_file_not_found", "db_path": str(_db_path)}),
            503,
        )

    try:
        session_count = _simulation.store.count_sessions()
    except sqlite3.Error as e:
        logger.error("Readiness check failed: DB error", error=str(e))
        return jsonify({"status": "not_ready", "reason": "database_error", "error": str(e)}), 503

    return jsonify({"status": "ready", "database": "accessible", "session_count": session_count}), 200


def run_api_server(port: int = 8080, debug: bool = False) -> None:
    """
    Run the API server.

    Args:
        port: Port to listen on (default: 8080)
        debug: Enable Flask debug mode (default: False)
    """
    logger.info("Starting API server", port=port)
    app.run(host="0.0.0.0", port=port, debug=debug)
