"""
Database module for fbscore.

Provides SQLAlchemy ORM models and session management.

Usage:
    from fbscore.db import get_session, Match

    with get_session() as session:
        live = session.query(Match).filter(Match.status == "Live").all()
"""

from fbscore.db.models import (
    Base,
    User,
    Team,
    MatchOfficial,
    AdminUser,
    TeamRequest,
    MatchOfficialRequest,
    PlayerRequest,
    Player,
    Match,
    Goal,
    PlayerStats,
    PlayerStatsEntry,
    Post,
    PostLike,
    PostComment,
    OtpCode,
)
from fbscore.db.session import get_session, get_engine, SessionLocal

__all__ = [
    # Base
    "Base",
    # Accounts
    "User",
    "Team",
    "MatchOfficial",
    "AdminUser",
    # Pending approvals
    "TeamRequest",
    "MatchOfficialRequest",
    "PlayerRequest",
    # Roster, matches, stats
    "Player",
    "Match",
    "Goal",
    "PlayerStats",
    "PlayerStatsEntry",
    # Feed
    "Post",
    "PostLike",
    "PostComment",
    # Verification
    "OtpCode",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
