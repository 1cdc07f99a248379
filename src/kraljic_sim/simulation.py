"""
KraljicSimulation - Main façade class

This is the primary interface for running the simulation. The HTTP API and
the CLI are thin wrappers around it.

Example:
    >>> from kraljic_sim import KraljicSimulation
    >>> sim = KraljicSimulation("kraljic.db")
    >>> session = sim.create_session("Kim", session_id="s-1")
    >>> sim.record_submission("s-1", "bottleneck", 0, "bottleneck_step1_A")
    >>> sim.record_event_responses("s-1", [{"quadrant": "bottleneck", "choice_id": "event_bottleneck_A"}])
    >>> dashboard = sim.get_dashboard("s-1")
"""

from pathlib import Path
from typing import Any

from kraljic_sim.content.models import EventContent, ScenarioContent
from kraljic_sim.content.store import ContentStore, StaticContentStore
from kraljic_sim.kernel.ids import IdFactory, SessionIdFactory
from kraljic_sim.kernel.logging import LogOperation, get_logger
from kraljic_sim.kernel.metrics import track_operation_duration
from kraljic_sim.kernel.scoring_policy import ScoringPolicy
from kraljic_sim.kernel.time import RealTimeProvider, TimeProvider
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.dashboard import build_dashboard
from kraljic_sim.scoring.export import build_export_payload
from kraljic_sim.scoring.models import DashboardResult, LeaderboardEntry, RawScore
from kraljic_sim.scoring.ranking import build_leaderboard, compute_rank
from kraljic_sim.session.commands import (
    CreateSession,
    EventResponseSpec,
    RecordEventResponses,
    RecordSubmission,
)
from kraljic_sim.session.handlers import SessionCommandHandlers
from kraljic_sim.session.models import EventSubmission, Session, Submission
from kraljic_sim.session.store import SQLiteSessionStore

logger = get_logger(__name__)


class KraljicSimulation:
    """
    Kraljic practice simulation façade

    Provides a unified API for:
    - Starting participant sessions
    - Recording Layer 1 choices and the Layer 2 event round
    - Computing dashboards, ranks and the leaderboard
    - Exporting results
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        scoring_policy: ScoringPolicy | None = None,
        time_provider: TimeProvider | None = None,
        content_store: ContentStore | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        """
        Initialize the simulation

        Args:
            sqlite_path: Path to SQLite database
            scoring_policy: Scoring policy (uses defaults if None)
            time_provider: Time provider (uses real time if None)
            content_store: Scenario content (uses the built-in catalog if None)
            id_factory: Session id generator (time-ordered ids if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.scoring_policy = scoring_policy or ScoringPolicy()
        self.time_provider = time_provider or RealTimeProvider()
        self.content_store = content_store or StaticContentStore()
        self.id_factory = id_factory or SessionIdFactory()

        self.store = SQLiteSessionStore(self.sqlite_path)
        self.handlers = SessionCommandHandlers(
            self.store,
            self.content_store,
            self.time_provider,
            self.id_factory,
            self.scoring_policy,
        )

    # Session operations

    @track_operation_duration("create_session")
    def create_session(self, participant_name: str, session_id: str | None = None) -> Session:
        """
        Start a new playthrough

        Args:
            participant_name: Name shown on the leaderboard
            session_id: Client-chosen id (generated if None)

        Returns:
            The created Session
        """
        command = CreateSession(session_id=session_id, participant_name=participant_name)
        with LogOperation(logger, "create_session", session_id=session_id, participant_name=participant_name):
            return self.handlers.handle_create_session(command)

    def get_session(self, session_id: str) -> Session:
        return self.store.get_session(session_id)

    @track_operation_duration("record_submission")
    def record_submission(
        self,
        session_id: str,
        quadrant: QuadrantId | str,
        step: int,
        choice_id: str,
        raw_score: RawScore | dict[str, int] | None = None,
        weighted: float | None = None,
    ) -> Submission:
        """
        Record one confirmed Layer 1 choice

        Args:
            session_id: Session answering
            quadrant: Quadrant of the scenario
            step: Zero-based step index
            choice_id: Chosen option id from the content catalog
            raw_score: Raw score the client displayed (checked, optional)
            weighted: Weighted score the client displayed (checked, optional)

        Returns:
            The stored Submission
        """
        command = RecordSubmission(
            session_id=session_id,
            quadrant=quadrant,
            step=step,
            choice_id=choice_id,
            raw_score=raw_score,
            weighted=weighted,
        )
        with LogOperation(
            logger,
            "record_submission",
            session_id=session_id,
            quadrant=command.quadrant.value,
            step=step,
            choice_id=choice_id,
        ):
            return self.handlers.handle_record_submission(command)

    @track_operation_duration("record_event_responses")
    def record_event_responses(
        self,
        session_id: str,
        responses: list[EventResponseSpec | dict[str, Any]],
    ) -> list[EventSubmission]:
        """
        Submit the event round and complete the session

        Args:
            session_id: Session answering
            responses: One response per quadrant, each with quadrant and choice_id

        Returns:
            The stored EventSubmissions
        """
        command = RecordEventResponses(session_id=session_id, responses=responses)
        with LogOperation(
            logger, "record_event_responses", session_id=session_id, responses=len(command.responses)
        ):
            return self.handlers.handle_record_event_responses(command)

    # Results

    @track_operation_duration("get_dashboard")
    def get_dashboard(self, session_id: str) -> DashboardResult:
        """
        Compute the results page for one session, ranked against all sessions

        Raises:
            SessionNotFound: If the session does not exist
        """
        with LogOperation(logger, "get_dashboard", session_id=session_id):
            record = self.store.load_record(session_id)
            rank = compute_rank(session_id, self.store.load_all_records(), self.scoring_policy)
            return build_dashboard(
                record,
                rank=rank,
                content_store=self.content_store,
                policy=self.scoring_policy,
            )

    @track_operation_duration("leaderboard")
    def leaderboard(self, limit: int | None = None) -> list[LeaderboardEntry]:
        """Every session with at least one submission, best final score first"""
        entries = build_leaderboard(self.store.load_all_records(), self.scoring_policy)
        return entries[:limit] if limit else entries

    def export_results(self, session_id: str) -> dict[str, Any]:
        """Dashboard of one session flattened for an external collector"""
        return build_export_payload(self.get_dashboard(session_id), self.time_provider.now())

    # Content

    def scenario(self, quadrant: QuadrantId | str) -> ScenarioContent:
        return self.content_store.scenario(quadrant)

    def event(self) -> EventContent:
        return self.content_store.event

    def get_scoring_policy(self) -> ScoringPolicy:
        return self.scoring_policy
