"""
Pytest configuration and shared fixtures

Fun fact: every fixture here pins the clock to a Monday morning, so a whole
classroom of simulated buyers starts the matrix at the same minute.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from kraljic_sim.content.store import StaticContentStore
from kraljic_sim.kernel.ids import SessionIdFactory
from kraljic_sim.kernel.scoring_policy import ScoringPolicy
from kraljic_sim.kernel.time import TestTimeProvider
from kraljic_sim.session.handlers import SessionCommandHandlers
from kraljic_sim.session.store import SQLiteSessionStore
from kraljic_sim.simulation import KraljicSimulation


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup (WAL mode leaves side files behind)
    for path in (db_path, Path(f"{db_path}-wal"), Path(f"{db_path}-shm")):
        if path.exists():
            path.unlink()


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2025-03-10 09:00:00 UTC, a Monday morning class session.
    """
    return TestTimeProvider(datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def scoring_policy() -> ScoringPolicy:
    """Provide default scoring policy for tests"""
    return ScoringPolicy()


@pytest.fixture
def content_store() -> StaticContentStore:
    """Provide the built-in scenario catalog"""
    return StaticContentStore()


@pytest.fixture
def session_store(temp_db: Path) -> SQLiteSessionStore:
    """Provide a fresh session store for each test"""
    return SQLiteSessionStore(temp_db)


@pytest.fixture
def handlers(
    session_store: SQLiteSessionStore,
    content_store: StaticContentStore,
    test_time: TestTimeProvider,
    scoring_policy: ScoringPolicy,
) -> SessionCommandHandlers:
    """Provide session command handlers wired to the test store and clock"""
    return SessionCommandHandlers(
        session_store, content_store, test_time, SessionIdFactory(), scoring_policy
    )


@pytest.fixture
def simulation(temp_db: Path, test_time: TestTimeProvider) -> KraljicSimulation:
    """Provide a simulation façade on a fresh database with a controlled clock"""
    return KraljicSimulation(temp_db, time_provider=test_time)
