"""
pytest configuration - shared fixtures
"""
import os

# Settings are read at import time; configure before importing readsy
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from readsy.core import security
from readsy.database import Base
from readsy.models.leaderboard import LeaderboardEntry
from readsy.models.season import Season
from readsy.models.user import User


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """Create in-memory SQLite database for testing"""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(test_db):
    """Alias for test_db for clarity"""
    return test_db


@pytest.fixture
def make_user(test_db):
    """Factory creating users with a known password ("secret-pass")."""
    counter = {"n": 0}

    def _make_user(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "email": f"reader{n}@example.com",
            "username": f"reader{n}",
            "display_name": f"Reader {n}",
            "hashed_password": security.get_password_hash("secret-pass"),
        }
        data.update(overrides)
        user = User(**data)
        test_db.add(user)
        test_db.commit()
        test_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def reader(make_user) -> User:
    return make_user()


@pytest.fixture
def active_season(test_db) -> Season:
    """An active season covering today's date."""
    today = datetime.utcnow().date()
    season = Season(
        name="test-season",
        display_name="Test Season",
        start_date=date(today.year - 1, 1, 1),
        end_date=date(today.year + 1, 1, 1),
        is_active=True,
    )
    test_db.add(season)
    test_db.commit()
    return season


@pytest.fixture
def populated_leaderboard(test_db, make_user, active_season):
    """Three users with scores 300, 200 and 100 in the active season"""
    users = [make_user() for _ in range(3)]
    for user, score in zip(users, (300, 200, 100)):
        test_db.add(LeaderboardEntry(user_id=user.id, season=active_season.name, score=score))
    test_db.commit()
    return users
