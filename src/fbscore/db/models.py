"""
SQLAlchemy ORM models for fbscore.

This module defines all database tables and their relationships.

Key design decisions:
- Every account type (user, team, match official, admin) keeps its own
  password hash; tokens carry the account id and role
- Pending registrations live in their own tables and are promoted to the
  live tables on approval
- A player is the join between a user and a team, with a jersey number
  unique inside that team
- Match goals are owned by the match; player stats are a denormalized
  aggregate maintained alongside them
- One-time codes are stored in the database so every API replica sees them

Tables:
- users, teams, match_officials, admin_users: Accounts
- team_requests, match_official_requests, player_requests: Pending approvals
- players: Roster membership
- matches, match_goals: Fixtures, live score and goal events
- player_stats, player_stats_matches: Per-player aggregates and per-match rows
- posts, post_likes, post_comments: Social feed
- otp_codes: Emailed verification codes
"""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Account Models
# =============================================================================

class User(Base):
    """
    A registered person. Becomes a player by joining a team's roster.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    dob: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(30), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[str] = mapped_column(String(50), nullable=False)
    foot: Mapped[str] = mapped_column(String(20), nullable=False)  # 'Right', 'Left', 'Both'

    # Disk path or base64 data URI, depending on upload_storage
    pic: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class Team(Base):
    """
    An approved team account. Teams sign in with their own email/password
    and manage their roster.
    """
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    teamname: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    teamlogo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    # Display name of the owner as entered on the registration form
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    players: Mapped[list["Player"]] = relationship(back_populates="team")

    __table_args__ = (
        Index("idx_teams_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.teamname}')>"


class MatchOfficial(Base):
    """Approved match official. Creates matches and records live events."""
    __tablename__ = "match_officials"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<MatchOfficial(id={self.id}, email='{self.email}')>"


class AdminUser(Base):
    """Admin account for approval workflows and moderation."""

    __tablename__ = "admin_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    pic: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_admin_users_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<AdminUser(username='{self.username}', active={self.is_active})>"


# =============================================================================
# Registration Models (pending approval)
# =============================================================================

class TeamRequest(Base):
    """Team registration awaiting admin approval."""
    __tablename__ = "team_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    teamname: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    teamlogo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<TeamRequest(id={self.id}, name='{self.teamname}')>"


class MatchOfficialRequest(Base):
    """Match official signup awaiting admin approval."""
    __tablename__ = "match_official_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<MatchOfficialRequest(id={self.id}, email='{self.email}')>"


class PlayerRequest(Base):
    """
    A team's invitation for a user to join its roster.

    Resolved by the invited user: accept creates the Player row,
    reject just deletes the invitation.
    """
    __tablename__ = "player_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    teamname: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    player_no: Mapped[str] = mapped_column(String(10), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    team: Mapped["Team"] = relationship()
    user: Mapped["User"] = relationship()

    __table_args__ = (
        Index("idx_player_requests_user", "user_id"),
        Index("idx_player_requests_team", "team_id"),
    )

    def __repr__(self) -> str:
        return f"<PlayerRequest(id={self.id}, team={self.team_id}, user={self.user_id})>"


# =============================================================================
# Roster Models
# =============================================================================

class Player(Base):
    """
    Roster membership linking a user to a team.

    A user may belong to at most one team at a time. That rule is checked by
    the roster service rather than by a constraint, matching how transfers
    are handled (remove from one team, then join another).
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    player_no: Mapped[str] = mapped_column(String(10), nullable=False)  # Jersey number

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    team: Mapped["Team"] = relationship(back_populates="players")
    user: Mapped["User"] = relationship()

    __table_args__ = (
        UniqueConstraint("team_id", "player_no", name="uq_players_team_number"),
        Index("idx_players_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, team={self.team_id}, user={self.user_id}, no='{self.player_no}')>"


# =============================================================================
# Match Models
# =============================================================================

class Match(Base):
    """
    A fixture between two teams, created and run by a match official.

    Score counters are kept on the row and goal events in match_goals.
    The intended invariant is score_team_a == goals scored by team A (and the
    same for B); both are written in the same transaction by the match service.
    """
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_a_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    team_b_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)

    score_team_a: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    score_team_b: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Kickoff as entered by the official: date plus 24h "HH:MM"
    match_date: Mapped[date] = mapped_column(Date, nullable=False)
    match_time: Mapped[str] = mapped_column(String(5), nullable=False)

    # See match_statuses.py for the allowed values
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Upcoming")

    created_by_id: Mapped[int] = mapped_column(ForeignKey("match_officials.id"), nullable=False)
    mvp_user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    team_a: Mapped["Team"] = relationship(foreign_keys=[team_a_id])
    team_b: Mapped["Team"] = relationship(foreign_keys=[team_b_id])
    created_by: Mapped["MatchOfficial"] = relationship()
    mvp: Mapped[Optional["User"]] = relationship()
    goals: Mapped[list["Goal"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="Goal.id",
    )

    __table_args__ = (
        Index("idx_matches_team_a", "team_a_id"),
        Index("idx_matches_team_b", "team_b_id"),
        Index("idx_matches_status", "status"),
        Index("idx_matches_created_by", "created_by_id"),
    )

    @property
    def kickoff(self) -> datetime:
        """Kickoff as a naive datetime built from match_date and match_time."""
        hours, minutes = (int(part) for part in self.match_time.split(":"))
        return datetime.combine(self.match_date, datetime.min.time()) + timedelta(
            hours=hours, minutes=minutes
        )

    def side_of(self, team_id: int) -> Optional[str]:
        """Return 'teamA' / 'teamB' for a participating team, else None."""
        if team_id == self.team_a_id:
            return "teamA"
        if team_id == self.team_b_id:
            return "teamB"
        return None

    def __repr__(self) -> str:
        return (
            f"<Match(id={self.id}, {self.team_a_id} vs {self.team_b_id}, "
            f"{self.score_team_a}-{self.score_team_b}, status='{self.status}')>"
        )


class Goal(Base):
    """A goal event inside a match, in the order it was recorded."""
    __tablename__ = "match_goals"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    # Nullable so removing a player keeps the match history intact
    scorer_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )
    assist_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    match: Mapped["Match"] = relationship(back_populates="goals")
    scorer: Mapped[Optional["Player"]] = relationship(foreign_keys=[scorer_id])
    assist: Mapped[Optional["Player"]] = relationship(foreign_keys=[assist_id])
    team: Mapped["Team"] = relationship()

    __table_args__ = (
        Index("idx_match_goals_match", "match_id"),
    )

    def __repr__(self) -> str:
        return f"<Goal(match={self.match_id}, scorer={self.scorer_id}, team={self.team_id})>"


# =============================================================================
# Stats Models
# =============================================================================

class PlayerStats(Base):
    """
    Running goal/assist totals for one roster membership.

    A user who moved between teams has one row per Player record; career
    figures are the sum across all of a user's rows. When a player leaves a
    team the row is kept (player_id becomes NULL) so the career sum survives.
    """
    __tablename__ = "player_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    total_goals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_assists: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    entries: Mapped[list["PlayerStatsEntry"]] = relationship(
        back_populates="stats",
        cascade="all, delete-orphan",
        order_by="PlayerStatsEntry.id",
    )

    __table_args__ = (
        Index("idx_player_stats_user", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<PlayerStats(player={self.player_id}, goals={self.total_goals}, "
            f"assists={self.total_assists})>"
        )


class PlayerStatsEntry(Base):
    """
    Per-match contribution row.

    Rows are appended per event rather than merged, so two goals by the same
    player in one match produce two rows.
    """
    __tablename__ = "player_stats_matches"

    id: Mapped[int] = mapped_column(primary_key=True)
    stats_id: Mapped[int] = mapped_column(
        ForeignKey("player_stats.id", ondelete="CASCADE"), nullable=False
    )
    match_id: Mapped[int] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    goals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assists: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    stats: Mapped["PlayerStats"] = relationship(back_populates="entries")

    __table_args__ = (
        Index("idx_player_stats_matches_match", "match_id"),
    )


# =============================================================================
# Feed Models
# =============================================================================

class Post(Base):
    """A feed post written by a user or by a team account."""
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    user: Mapped[Optional["User"]] = relationship()
    team: Mapped[Optional["Team"]] = relationship()
    likes: Mapped[list["PostLike"]] = relationship(
        back_populates="post", cascade="all, delete-orphan"
    )
    comments: Mapped[list["PostComment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
    )

    __table_args__ = (
        Index("idx_posts_date", "date"),
        Index("idx_posts_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user={self.user_id}, team={self.team_id})>"


class PostLike(Base):
    __tablename__ = "post_likes"

    id: Mapped[int] = mapped_column(primary_key=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    post: Mapped["Post"] = relationship(back_populates="likes")

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),
    )


class PostComment(Base):
    __tablename__ = "post_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    post: Mapped["Post"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship()


# =============================================================================
# Verification Models
# =============================================================================

class OtpCode(Base):
    """
    Emailed one-time code, keyed by purpose and address.

    Sending a new code for the same key replaces the previous one.
    """
    __tablename__ = "otp_codes"

    purpose: Mapped[str] = mapped_column(String(20), primary_key=True)  # 'user', 'team', 'official'
    email: Mapped[str] = mapped_column(String(255), primary_key=True)
    code: Mapped[str] = mapped_column(String(10), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_otp_codes_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<OtpCode(purpose='{self.purpose}', email='{self.email}')>"
