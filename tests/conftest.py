"""Pytest configuration and fixtures for recall tests."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from recall.database import Base, init_db  # noqa: E402
from recall.schemas import ReviewHistoryEntry  # noqa: E402


@pytest.fixture
def now():
    """Fixed reference time for deterministic schedules."""
    return datetime(2024, 1, 1, 9, 0)


@pytest.fixture
def make_history(now):
    """Build a newest-first history from recall scores listed newest-first."""
    def _make(scores, gap_days=1):
        return [
            ReviewHistoryEntry(
                date=now - timedelta(days=gap_days * (i + 1)),
                recall_score=score,
                retention_score=score
            )
            for i, score in enumerate(scores)
        ]
    return _make


@pytest.fixture
def session_factory():
    """Sessionmaker bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    """Database session for CRUD tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
