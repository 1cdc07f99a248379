"""
Session Command Handlers

Turn participant commands into stored rows. Every raw score is resolved from
the content catalog and weighted here, at write time, so stored rows always
satisfy weighted == dot(raw, quadrant weights).

Fun fact: in a classroom run the same step is often confirmed twice within a
second (double clicks) - the store keeps both rows and the newer one wins.
"""

from kraljic_sim.content.store import ContentStore, require_event_score, require_step_score
from kraljic_sim.kernel.errors import InvalidSubmission, ScoreMismatch
from kraljic_sim.kernel.ids import IdFactory
from kraljic_sim.kernel.logging import get_logger
from kraljic_sim.kernel.metrics import (
    event_responses_recorded_total,
    sessions_created_total,
    submissions_recorded_total,
)
from kraljic_sim.kernel.scoring_policy import ScoringPolicy
from kraljic_sim.kernel.time import TimeProvider
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.calculator import compute_weighted
from kraljic_sim.scoring.models import RawScore, WeightedScore
from kraljic_sim.session import commands
from kraljic_sim.session.models import EventSubmission, Session, Submission
from kraljic_sim.session.store import SQLiteSessionStore

logger = get_logger(__name__)

# Client echoes of weighted values are compared with this tolerance
WEIGHTED_TOLERANCE = 1e-3


class SessionCommandHandlers:
    """
    Command handlers for session operations

    Handlers validate against content and policy, then append to the store.
    They never compute dashboards; reads go through the scoring functions.
    """

    def __init__(
        self,
        store: SQLiteSessionStore,
        content_store: ContentStore,
        time_provider: TimeProvider,
        id_factory: IdFactory,
        scoring_policy: ScoringPolicy,
    ):
        """
        Initialize handlers

        Args:
            store: Session store
            content_store: Authoritative source of raw scores
            time_provider: Source of current time
            id_factory: Generator for session ids the client did not supply
            scoring_policy: Step count and raw score range
        """
        self.store = store
        self.content_store = content_store
        self.time_provider = time_provider
        self.id_factory = id_factory
        self.scoring_policy = scoring_policy

    def _authoritative_score(
        self,
        quadrant: QuadrantId,
        choice_id: str,
        raw: RawScore,
        supplied_raw: RawScore | None,
        supplied_weighted: float | None,
    ) -> WeightedScore:
        score = compute_weighted(raw, quadrant, self.scoring_policy)

        if supplied_raw is not None and supplied_raw != raw:
            raise ScoreMismatch(choice_id, str(raw.as_dict()), str(supplied_raw.as_dict()))
        if supplied_weighted is not None and abs(supplied_weighted - score.weighted) > WEIGHTED_TOLERANCE:
            raise ScoreMismatch(choice_id, str(score.weighted), str(supplied_weighted))

        return score

    def handle_create_session(self, command: commands.CreateSession) -> Session:
        """
        Create a new session

        Raises:
            SessionAlreadyExists: If the session id is taken
        """
        session = Session(
            session_id=command.session_id or self.id_factory.generate(),
            participant_name=command.participant_name,
            created_at=self.time_provider.now(),
        )
        self.store.create_session(session)
        sessions_created_total.inc()
        logger.info("Session created", session_id=session.session_id)
        return session

    def handle_record_submission(self, command: commands.RecordSubmission) -> Submission:
        """
        Record one confirmed Layer 1 choice

        Validates:
        - Step index within the policy's step count
        - Session exists and has not completed its event round
        - Choice exists in the content catalog
        - Client-echoed scores, if any, match the catalog

        Raises:
            InvalidSubmission: Step out of range
            SessionNotFound: Unknown session
            SessionAlreadyCompleted: Layer 1 is closed once the event round is in
            ContentNotFound: Unknown choice
            ScoreMismatch: Client scores disagree with the catalog
        """
        if command.step >= self.scoring_policy.steps_per_quadrant:
            raise InvalidSubmission(
                "step",
                f"{command.step} outside 0..{self.scoring_policy.steps_per_quadrant - 1}",
            )

        # Completion is enforced by the store inside the insert
        self.store.get_session(command.session_id)

        raw = require_step_score(self.content_store, command.quadrant, command.step, command.choice_id)
        score = self._authoritative_score(
            command.quadrant, command.choice_id, raw, command.raw_score, command.weighted
        )

        submission = self.store.append_submission(
            Submission(
                session_id=command.session_id,
                quadrant=command.quadrant,
                step=command.step,
                choice_id=command.choice_id,
                score=score,
                timestamp=self.time_provider.now(),
            )
        )
        submissions_recorded_total.labels(quadrant=command.quadrant.value).inc()
        return submission

    def handle_record_event_responses(
        self, command: commands.RecordEventResponses
    ) -> list[EventSubmission]:
        """
        Record the event round and complete the session

        All responses are resolved before anything is written, so an unknown
        choice leaves the session untouched.

        Raises:
            InvalidSubmission: Same quadrant answered twice in one request
            ContentNotFound: Unknown event choice
            ScoreMismatch: Client scores disagree with the catalog
            SessionNotFound: Unknown session
            SessionAlreadyCompleted: Event round already submitted
        """
        seen: set[QuadrantId] = set()
        for response in command.responses:
            if response.quadrant in seen:
                raise InvalidSubmission(
                    "responses", f"quadrant {response.quadrant.value} answered more than once"
                )
            seen.add(response.quadrant)

        now = self.time_provider.now()
        events = []
        for response in command.responses:
            raw = require_event_score(self.content_store, response.quadrant, response.choice_id)
            score = self._authoritative_score(
                response.quadrant, response.choice_id, raw, response.raw_score, response.weighted
            )
            events.append(
                EventSubmission(
                    session_id=command.session_id,
                    quadrant=response.quadrant,
                    choice_id=response.choice_id,
                    score=score,
                    timestamp=now,
                )
            )

        stored = self.store.append_event_responses(command.session_id, events, completed_at=now)
        for event in stored:
            event_responses_recorded_total.labels(quadrant=event.quadrant.value).inc()
        return stored
