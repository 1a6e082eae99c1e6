"""
Admin listings and cascading deletes.

Deleting an account removes everything that only makes sense with it:

- user: roster entry, stats rows, pending invitations, posts, likes and
  comments. Goal events and MVP tags keep their rows with the reference
  cleared.
- team: pending invitations, every match it played (purged), its players and
  their stats, its posts.
- match official: every match they created (purged).

Purging a match also rebuilds the totals of every stats row that had an
entry for it (see stats.purge_matches).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from fbscore.db.models import (
    AdminUser,
    Goal,
    Match,
    MatchOfficial,
    Player,
    PlayerRequest,
    PlayerStats,
    PlayerStatsEntry,
    Post,
    PostComment,
    PostLike,
    Team,
    User,
)
from fbscore.errors import NotFound, ValidationFailed
from fbscore.services import stats
from fbscore.services.common import current_player

logger = logging.getLogger(__name__)

ENTITY_USER = "user"
ENTITY_TEAM = "team"
ENTITY_OFFICIAL = "matchofficial"
DELETABLE_ENTITIES = (ENTITY_USER, ENTITY_TEAM, ENTITY_OFFICIAL)

RECENT_MATCHES_PER_OFFICIAL = 5


@dataclass
class UserOverview:
    user: User
    player: Optional[Player] = None
    career: Optional[stats.CareerStats] = None


@dataclass
class OfficialOverview:
    official: MatchOfficial
    total_matches: int = 0
    recent_matches: list[Match] = field(default_factory=list)


class AdminService:
    """Read models for the admin screens plus account deletion."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Listings
    # =========================================================================

    def counts(self) -> dict[str, int]:
        def count(column) -> int:
            return self.db.query(func.count(column)).scalar() or 0

        return {
            "totalAdmins": count(AdminUser.id),
            "totalMatchOfficials": count(MatchOfficial.id),
            "totalTeams": count(Team.id),
            "totalUsers": count(User.id),
            "totalPlayers": count(Player.id),
            "usersWhoBecamePlayers": (
                self.db.query(func.count(func.distinct(Player.user_id))).scalar() or 0
            ),
        }

    def teams_with_records(self) -> list[tuple[Team, stats.TeamRecord]]:
        teams = self.db.query(Team).order_by(Team.id).all()
        return [(team, stats.team_record(self.db, team.id)) for team in teams]

    def users_overview(self) -> list[UserOverview]:
        """Every user with their roster entry and career figures, if a player."""
        players = {
            player.user_id: player
            for player in self.db.query(Player).options(joinedload(Player.team)).all()
        }
        overview = []
        for user in self.db.query(User).order_by(User.id).all():
            player = players.get(user.id)
            if player is None:
                overview.append(UserOverview(user=user))
            else:
                overview.append(
                    UserOverview(
                        user=user,
                        player=player,
                        career=stats.career_stats(self.db, user.id, player),
                    )
                )
        return overview

    def users_without_team(self) -> list[User]:
        on_roster = self.db.query(Player.user_id)
        return (
            self.db.query(User)
            .filter(User.id.not_in(on_roster.scalar_subquery()))
            .order_by(User.id)
            .all()
        )

    def officials_overview(self) -> list[OfficialOverview]:
        overview = []
        for official in self.db.query(MatchOfficial).order_by(MatchOfficial.id).all():
            total = (
                self.db.query(func.count(Match.id))
                .filter(Match.created_by_id == official.id)
                .scalar()
                or 0
            )
            recent = (
                self.db.query(Match)
                .options(joinedload(Match.team_a), joinedload(Match.team_b))
                .filter(Match.created_by_id == official.id)
                .order_by(Match.match_date.desc(), Match.id.desc())
                .limit(RECENT_MATCHES_PER_OFFICIAL)
                .all()
            )
            overview.append(
                OfficialOverview(official=official, total_matches=total, recent_matches=recent)
            )
        return overview

    # =========================================================================
    # Cascading deletes
    # =========================================================================

    def delete_entity(self, entity_type: str, entity_id: int) -> dict:
        """
        Delete a user, team or match official with its dependent rows.

        Returns a small summary of what was removed.

        Raises:
            ValidationFailed: Unknown entity type
            NotFound: No such record
        """
        kind = (entity_type or "").lower()
        if kind == ENTITY_USER:
            return self._delete_user(entity_id)
        if kind == ENTITY_TEAM:
            return self._delete_team(entity_id)
        if kind == ENTITY_OFFICIAL:
            return self._delete_official(entity_id)
        raise ValidationFailed("Invalid entity type specified!")

    def _clear_goal_refs(self, player_ids: list[int]) -> None:
        if not player_ids:
            return
        self.db.query(Goal).filter(Goal.scorer_id.in_(player_ids)).update(
            {Goal.scorer_id: None}, synchronize_session=False
        )
        self.db.query(Goal).filter(Goal.assist_id.in_(player_ids)).update(
            {Goal.assist_id: None}, synchronize_session=False
        )

    def _delete_stats(self, criterion) -> int:
        stats_ids = [row.id for row in self.db.query(PlayerStats.id).filter(criterion)]
        if not stats_ids:
            return 0
        self.db.query(PlayerStatsEntry).filter(
            PlayerStatsEntry.stats_id.in_(stats_ids)
        ).delete(synchronize_session=False)
        return (
            self.db.query(PlayerStats)
            .filter(PlayerStats.id.in_(stats_ids))
            .delete(synchronize_session=False)
        )

    def _delete_posts(self, criterion) -> int:
        post_ids = [row.id for row in self.db.query(Post.id).filter(criterion)]
        if not post_ids:
            return 0
        self.db.query(PostLike).filter(PostLike.post_id.in_(post_ids)).delete(
            synchronize_session=False
        )
        self.db.query(PostComment).filter(PostComment.post_id.in_(post_ids)).delete(
            synchronize_session=False
        )
        return self.db.query(Post).filter(Post.id.in_(post_ids)).delete(synchronize_session=False)

    def _delete_user(self, user_id: int) -> dict:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User", user_id, "User not found!")

        player = current_player(self.db, user_id)
        player_id = player.id if player is not None else None
        owned_stats = PlayerStats.user_id == user_id
        if player_id is not None:
            self._clear_goal_refs([player_id])
            owned_stats = or_(owned_stats, PlayerStats.player_id == player_id)
        stats_deleted = self._delete_stats(owned_stats)
        if player_id is not None:
            self.db.query(Player).filter(Player.id == player_id).delete(synchronize_session=False)

        self.db.query(PlayerRequest).filter(PlayerRequest.user_id == user_id).delete(
            synchronize_session=False
        )
        posts_deleted = self._delete_posts(Post.user_id == user_id)
        self.db.query(PostLike).filter(PostLike.user_id == user_id).delete(synchronize_session=False)
        self.db.query(PostComment).filter(PostComment.user_id == user_id).delete(
            synchronize_session=False
        )
        self.db.query(Match).filter(Match.mvp_user_id == user_id).update(
            {Match.mvp_user_id: None}, synchronize_session=False
        )

        self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self.db.flush()
        self.db.expire_all()

        logger.info(
            "Deleted user %d (player: %s, stats rows: %d, posts: %d)",
            user_id,
            player_id if player_id is not None else "none",
            stats_deleted,
            posts_deleted,
        )
        return {
            "userId": user_id,
            "playerId": player_id,
            "statsDeleted": stats_deleted,
            "postsDeleted": posts_deleted,
        }

    def _delete_team(self, team_id: int) -> dict:
        team = self.db.get(Team, team_id)
        if team is None:
            raise NotFound("Team", team_id, "Team not found!")

        self.db.query(PlayerRequest).filter(PlayerRequest.team_id == team_id).delete(
            synchronize_session=False
        )

        match_ids = [
            row.id
            for row in self.db.query(Match.id).filter(
                or_(Match.team_a_id == team_id, Match.team_b_id == team_id)
            )
        ]
        matches_deleted = stats.purge_matches(self.db, match_ids)

        player_ids = [row.id for row in self.db.query(Player.id).filter(Player.team_id == team_id)]
        self._clear_goal_refs(player_ids)
        if player_ids:
            self._delete_stats(PlayerStats.player_id.in_(player_ids))
            self.db.query(Player).filter(Player.id.in_(player_ids)).delete(
                synchronize_session=False
            )
        posts_deleted = self._delete_posts(Post.team_id == team_id)

        self.db.query(Team).filter(Team.id == team_id).delete(synchronize_session=False)
        self.db.flush()
        self.db.expire_all()

        logger.info(
            "Deleted team %d (matches: %d, players: %d, posts: %d)",
            team_id,
            matches_deleted,
            len(player_ids),
            posts_deleted,
        )
        return {
            "teamId": team_id,
            "matchesDeleted": matches_deleted,
            "playersAffected": len(player_ids),
            "postsDeleted": posts_deleted,
        }

    def _delete_official(self, official_id: int) -> dict:
        official = self.db.get(MatchOfficial, official_id)
        if official is None:
            raise NotFound("Match official", official_id, "Match Official not found!")

        match_ids = [
            row.id
            for row in self.db.query(Match.id).filter(Match.created_by_id == official_id)
        ]
        matches_deleted = stats.purge_matches(self.db, match_ids)

        self.db.query(MatchOfficial).filter(MatchOfficial.id == official_id).delete(
            synchronize_session=False
        )
        self.db.flush()
        self.db.expire_all()

        logger.info("Deleted match official %d (matches: %d)", official_id, matches_deleted)
        return {"officialId": official_id, "matchesDeleted": matches_deleted}
