"""
SQLite Session Store - append-only storage of sessions and responses

The store is the source of truth for every playthrough. It provides:
- Append-only semantics (submissions and event responses are never modified
  or deleted; a re-answered step simply adds a newer row)
- A single write that sets completed_at, exactly once per session
- Bulk loading of every session in three queries for ranking

Fun fact: SQLite's WAL mode lets a whole classroom read the leaderboard while
one participant is still writing their last answer.
"""

import sqlite3
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from kraljic_sim.kernel.errors import (
    PersistenceError,
    SessionAlreadyCompleted,
    SessionAlreadyExists,
    SessionNotFound,
)
from kraljic_sim.kernel.logging import get_logger
from kraljic_sim.kernel.metrics import store_errors_total
from kraljic_sim.kernel.retry import retry_on_sqlite_lock
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.models import RawScore, WeightedScore
from kraljic_sim.session.models import EventSubmission, Session, SessionRecord, Submission

logger = get_logger(__name__)


class SQLiteSessionStore:
    """
    SQLite-based session store

    Schema:
    - sessions: one row per playthrough, completed_at NULL until the event round
    - submissions: append-only Layer 1 answers
    - event_responses: append-only Layer 2 answers
    - Indices on session_id for both response tables
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize session store with SQLite database

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        """Create tables and indices if they don't exist"""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    session_id TEXT PRIMARY KEY,
                    participant_name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    completed_at TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS submissions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL REFERENCES sessions(session_id),
                    quadrant TEXT NOT NULL,
                    step INTEGER NOT NULL,
                    choice_id TEXT NOT NULL,
                    ce INTEGER NOT NULL,
                    ss INTEGER NOT NULL,
                    sv INTEGER NOT NULL,
                    weighted REAL NOT NULL,
                    timestamp TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS event_responses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL REFERENCES sessions(session_id),
                    quadrant TEXT NOT NULL,
                    choice_id TEXT NOT NULL,
                    ce INTEGER NOT NULL,
                    ss INTEGER NOT NULL,
                    sv INTEGER NOT NULL,
                    weighted REAL NOT NULL,
                    timestamp TEXT NOT NULL
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_submissions_session "
                "ON submissions(session_id, quadrant, step)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_event_responses_session "
                "ON event_responses(session_id)"
            )

            conn.commit()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager for database connections

        Ensures connections are closed; writers commit or roll back themselves.
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _fail(self, operation: str, error: sqlite3.Error) -> PersistenceError:
        store_errors_total.labels(operation=operation).inc()
        logger.error("Session store failure", operation=operation, error=str(error))
        return PersistenceError(f"Failed to {operation.replace('_', ' ')}: {error}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_session(self, session: Session) -> Session:
        """
        Insert a new session

        Raises:
            SessionAlreadyExists: If the session id is taken
            PersistenceError: On database failure
        """
        try:
            self._insert_session(session)
        except sqlite3.IntegrityError:
            raise SessionAlreadyExists(session.session_id) from None
        except sqlite3.Error as e:
            raise self._fail("create_session", e) from e
        return session

    @retry_on_sqlite_lock()
    def _insert_session(self, session: Session) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO sessions (session_id, participant_name, created_at, completed_at) "
                "VALUES (?, ?, ?, ?)",
                (
                    session.session_id,
                    session.participant_name,
                    session.created_at.isoformat(),
                    session.completed_at.isoformat() if session.completed_at else None,
                ),
            )
            conn.commit()

    def append_submission(self, submission: Submission) -> Submission:
        """
        Append one Layer 1 answer

        Returns:
            The submission with its storage row id

        Raises:
            SessionNotFound: If the session does not exist
            SessionAlreadyCompleted: If the event round is already recorded
            PersistenceError: On database failure
        """
        try:
            row_id = self._insert_submission(submission)
        except sqlite3.Error as e:
            raise self._fail("append_submission", e) from e
        return submission.model_copy(update={"row_id": row_id})

    @retry_on_sqlite_lock()
    def _insert_submission(self, submission: Submission) -> int:
        with self._connect() as conn:
            raw = submission.score.raw
            # Layer 1 is closed once completed_at is set
            cursor = conn.execute(
                """
                INSERT INTO submissions (
                    session_id, quadrant, step, choice_id,
                    ce, ss, sv, weighted, timestamp
                )
                SELECT ?, ?, ?, ?, ?, ?, ?, ?, ?
                WHERE EXISTS (
                    SELECT 1 FROM sessions
                    WHERE session_id = ? AND completed_at IS NULL
                )
            """,
                (
                    submission.session_id,
                    submission.quadrant.value,
                    submission.step,
                    submission.choice_id,
                    raw.ce,
                    raw.ss,
                    raw.sv,
                    submission.score.weighted,
                    submission.timestamp.isoformat(),
                    submission.session_id,
                ),
            )
            if cursor.rowcount == 0:
                conn.rollback()
                self._raise_closed_session(conn, submission.session_id)
            conn.commit()
            return cursor.lastrowid

    def append_event_responses(
        self,
        session_id: str,
        events: list[EventSubmission],
        completed_at: datetime,
    ) -> list[EventSubmission]:
        """
        Append the event round and mark the session completed, atomically

        Either every event row is written and completed_at is set, or nothing
        is written at all.

        Returns:
            The event submissions with their storage row ids

        Raises:
            SessionNotFound: If the session does not exist
            SessionAlreadyCompleted: If completed_at is already set
            PersistenceError: On database failure
        """
        try:
            row_ids = self._insert_event_responses(session_id, events, completed_at)
        except sqlite3.Error as e:
            raise self._fail("append_event_responses", e) from e
        return [
            event.model_copy(update={"row_id": row_id})
            for event, row_id in zip(events, row_ids)
        ]

    @retry_on_sqlite_lock()
    def _insert_event_responses(
        self,
        session_id: str,
        events: list[EventSubmission],
        completed_at: datetime,
    ) -> list[int]:
        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    "UPDATE sessions SET completed_at = ? "
                    "WHERE session_id = ? AND completed_at IS NULL",
                    (completed_at.isoformat(), session_id),
                )
                if cursor.rowcount == 0:
                    self._raise_closed_session(conn, session_id)

                row_ids = []
                for event in events:
                    raw = event.score.raw
                    cursor = conn.execute(
                        """
                        INSERT INTO event_responses (
                            session_id, quadrant, choice_id,
                            ce, ss, sv, weighted, timestamp
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                        (
                            session_id,
                            event.quadrant.value,
                            event.choice_id,
                            raw.ce,
                            raw.ss,
                            raw.sv,
                            event.score.weighted,
                            event.timestamp.isoformat(),
                        ),
                    )
                    row_ids.append(cursor.lastrowid)

                conn.commit()
                return row_ids

            except Exception:
                conn.rollback()
                raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> Session:
        """
        Raises:
            SessionNotFound: If the session does not exist
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM sessions WHERE session_id = ?", (session_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise self._fail("get_session", e) from e

        if row is None:
            raise SessionNotFound(session_id)
        return self._row_to_session(row)

    def load_record(self, session_id: str) -> SessionRecord:
        """
        Load one session with all of its rows, in insertion order

        Raises:
            SessionNotFound: If the session does not exist
        """
        session = self.get_session(session_id)
        try:
            with self._connect() as conn:
                submissions = conn.execute(
                    "SELECT * FROM submissions WHERE session_id = ? ORDER BY id ASC",
                    (session_id,),
                ).fetchall()
                events = conn.execute(
                    "SELECT * FROM event_responses WHERE session_id = ? ORDER BY id ASC",
                    (session_id,),
                ).fetchall()
        except sqlite3.Error as e:
            raise self._fail("load_record", e) from e

        return SessionRecord(
            session=session,
            submissions=[self._row_to_submission(row) for row in submissions],
            events=[self._row_to_event(row) for row in events],
        )

    def load_all_records(self) -> list[SessionRecord]:
        """
        Load every session with its rows (three queries, not one per session)

        Reads are not isolated from concurrent writers; a ranking may miss a
        row written a moment ago.
        """
        try:
            with self._connect() as conn:
                sessions = conn.execute(
                    "SELECT * FROM sessions ORDER BY created_at ASC, session_id ASC"
                ).fetchall()
                submissions = conn.execute("SELECT * FROM submissions ORDER BY id ASC").fetchall()
                events = conn.execute("SELECT * FROM event_responses ORDER BY id ASC").fetchall()
        except sqlite3.Error as e:
            raise self._fail("load_all_records", e) from e

        submissions_by_session: dict[str, list[Submission]] = defaultdict(list)
        for row in submissions:
            submissions_by_session[row["session_id"]].append(self._row_to_submission(row))

        events_by_session: dict[str, list[EventSubmission]] = defaultdict(list)
        for row in events:
            events_by_session[row["session_id"]].append(self._row_to_event(row))

        return [
            SessionRecord(
                session=self._row_to_session(row),
                submissions=submissions_by_session.get(row["session_id"], []),
                events=events_by_session.get(row["session_id"], []),
            )
            for row in sessions
        ]

    def count_sessions(self) -> int:
        """Get total number of sessions in store"""
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0]

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    def _raise_closed_session(self, conn: sqlite3.Connection, session_id: str) -> None:
        """Explain why a guarded write matched no open session"""
        row = conn.execute(
            "SELECT completed_at FROM sessions WHERE session_id = ?", (session_id,)
        ).fetchone()
        if row is None:
            raise SessionNotFound(session_id)
        raise SessionAlreadyCompleted(session_id, row["completed_at"])

    def _row_to_session(self, row: sqlite3.Row) -> Session:
        return Session(
            session_id=row["session_id"],
            participant_name=row["participant_name"],
            created_at=datetime.fromisoformat(row["created_at"]),
            completed_at=(
                datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None
            ),
        )

    def _row_to_score(self, row: sqlite3.Row) -> WeightedScore:
        return WeightedScore(
            raw=RawScore(ce=row["ce"], ss=row["ss"], sv=row["sv"]),
            weighted=row["weighted"],
        )

    def _row_to_submission(self, row: sqlite3.Row) -> Submission:
        return Submission(
            row_id=row["id"],
            session_id=row["session_id"],
            quadrant=QuadrantId(row["quadrant"]),
            step=row["step"],
            choice_id=row["choice_id"],
            score=self._row_to_score(row),
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )

    def _row_to_event(self, row: sqlite3.Row) -> EventSubmission:
        return EventSubmission(
            row_id=row["id"],
            session_id=row["session_id"],
            quadrant=QuadrantId(row["quadrant"]),
            choice_id=row["choice_id"],
            score=self._row_to_score(row),
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )
