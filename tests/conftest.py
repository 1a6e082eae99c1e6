"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import os
import tempfile
from datetime import date

# Settings are read once at import time, so point them at throwaway
# locations before anything from fbscore is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="fbscore-uploads-"))
os.environ.setdefault("MAIL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fbscore.accounts.passwords import hash_password
from fbscore.accounts.tokens import (
    ROLE_ADMIN,
    ROLE_OFFICIAL,
    ROLE_TEAM,
    ROLE_USER,
    issue_token,
)
from fbscore.db.models import Base, Match, MatchOfficial, Player, Team, User
from fbscore.db.session import get_db
from fbscore.match_statuses import UPCOMING
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services.accounts import create_or_update_admin_user

DEFAULT_PASSWORD = "secret1"
# Hashing is deliberately slow; reuse one hash for every fixture account
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)

TOKEN_HEADERS = {
    ROLE_USER: "auth-token",
    ROLE_TEAM: "team-token",
    ROLE_OFFICIAL: "matchofficial-token",
    ROLE_ADMIN: "admin-token",
}


def make_engine():
    """In-memory SQLite shared by every connection of the engine."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


def auth_headers(role: str, account_id: int) -> dict:
    """Request headers carrying a valid token for the given account."""
    return {TOKEN_HEADERS[role]: issue_token(account_id, role)}


class FakeMailer(Mailer):
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.fail = False

    def send(self, to_email: str, subject: str, body: str) -> bool:
        self.sent.append((to_email, subject, body))
        return not self.fail

    def subjects_to(self, to_email: str) -> list:
        return [subject for to, subject, _ in self.sent if to == to_email]


class Factory:
    """Builds rows with sensible defaults and flushes them."""

    def __init__(self, session):
        self.session = session
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _save(self, row):
        self.session.add(row)
        self.session.flush()
        return row

    def user(self, name=None, email=None, dob=date(2000, 1, 1), **extra) -> User:
        n = self._next()
        return self._save(
            User(
                name=name or f"User {n}",
                email=email or f"user{n}@example.com",
                dob=dob,
                gender=extra.pop("gender", "Male"),
                country=extra.pop("country", "India"),
                password_hash=DEFAULT_PASSWORD_HASH,
                position=extra.pop("position", "Forward"),
                foot=extra.pop("foot", "Right"),
                **extra,
            )
        )

    def team(self, teamname=None, email=None, **extra) -> Team:
        n = self._next()
        return self._save(
            Team(
                teamname=teamname or f"Team {n}",
                email=email or f"team{n}@example.com",
                country=extra.pop("country", "India"),
                created_by=extra.pop("created_by", "Owner"),
                password_hash=DEFAULT_PASSWORD_HASH,
                active=extra.pop("active", True),
                **extra,
            )
        )

    def official(self, name=None, email=None) -> MatchOfficial:
        n = self._next()
        return self._save(
            MatchOfficial(
                name=name or f"Official {n}",
                email=email or f"official{n}@example.com",
                password_hash=DEFAULT_PASSWORD_HASH,
            )
        )

    def admin(self, username="root"):
        return create_or_update_admin_user(self.session, username, DEFAULT_PASSWORD)

    def player(self, team: Team, user: User = None, player_no=None) -> Player:
        user = user or self.user()
        return self._save(
            Player(team_id=team.id, user_id=user.id, player_no=str(player_no or self._next()))
        )

    def match(
        self,
        official: MatchOfficial,
        team_a: Team,
        team_b: Team,
        status=UPCOMING,
        match_date=date(2030, 6, 1),
        match_time="18:00",
        **extra,
    ) -> Match:
        return self._save(
            Match(
                team_a_id=team_a.id,
                team_b_id=team_b.id,
                match_date=match_date,
                match_time=match_time,
                status=status,
                created_by_id=official.id,
                score_team_a=extra.pop("score_team_a", 0),
                score_team_b=extra.pop("score_team_b", 0),
                **extra,
            )
        )


# =============================================================================
# Unit test database
# =============================================================================

@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory for fast tests that don't need
    PostgreSQL-specific features.
    """
    return make_engine()


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other. Services only flush, so
    nothing escapes the outer transaction.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection, autoflush=False)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def factory(db_session):
    return Factory(db_session)


@pytest.fixture
def mailer():
    return FakeMailer()


# =============================================================================
# API tests
# =============================================================================

@pytest.fixture
def api_sessionmaker():
    """
    A fresh database per API test.

    Route handlers commit, so API tests cannot share the rollback-wrapped
    connection used by unit tests.
    """
    engine = make_engine()
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def api_db(api_sessionmaker):
    """Session for arranging and inspecting API test data. Commit after arranging."""
    session = api_sessionmaker()
    yield session
    session.close()


@pytest.fixture
def api_factory(api_db):
    return Factory(api_db)


@pytest.fixture
def client(api_sessionmaker, mailer):
    from fbscore.web.main import app

    def override_get_db():
        db = api_sessionmaker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
