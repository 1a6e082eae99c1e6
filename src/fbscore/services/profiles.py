"""Read-only views of users, players and teams shared by several routers."""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from fbscore.db.models import Match, Player, Team, User
from fbscore.errors import NotFound, ValidationFailed
from fbscore.services import stats
from fbscore.services.common import get_or_404
from fbscore.services.matches import MatchService


@dataclass
class UserProfile:
    user: User
    player: Optional[Player]
    career: stats.CareerStats
    teammates: list[Player] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)


@dataclass
class PlayerProfile:
    player: Player
    career: stats.CareerStats


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def user_profile(self, user_id: int) -> UserProfile:
        """The signed-in user's page: own details, team, teammates and fixtures."""
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User", user_id)

        player = (
            self.db.query(Player)
            .options(joinedload(Player.team))
            .filter(Player.user_id == user.id)
            .first()
        )
        profile = UserProfile(
            user=user,
            player=player,
            career=stats.career_stats(self.db, user.id, player),
        )
        if player is not None:
            profile.teammates = (
                self.db.query(Player)
                .options(joinedload(Player.user))
                .filter(Player.team_id == player.team_id, Player.user_id != user.id)
                .order_by(Player.id)
                .all()
            )
            profile.matches = MatchService(self.db).team_matches(player.team_id)
        return profile

    def player_profile(self, player_id: int) -> PlayerProfile:
        player = (
            self.db.query(Player)
            .options(joinedload(Player.team), joinedload(Player.user))
            .filter(Player.id == player_id)
            .first()
        )
        if player is None:
            raise NotFound("Player", player_id, "Player details not found..!")
        return PlayerProfile(
            player=player,
            career=stats.career_stats(self.db, player.user_id, player),
        )

    def team_with_roster(self, team_id: int) -> tuple[Team, list[Player]]:
        team = get_or_404(self.db, Team, team_id, "Team")
        return team, MatchService(self.db).roster(team.id)

    def search(self, term: Optional[str]) -> tuple[list[Team], list[User]]:
        """Teams by name and users by name, case-insensitive substring match."""
        term = (term or "").strip()
        if not term:
            raise ValidationFailed("Search term is required..!")
        pattern = f"%{term}%"
        teams = self.db.query(Team).filter(Team.teamname.ilike(pattern)).order_by(Team.teamname).all()
        users = self.db.query(User).filter(User.name.ilike(pattern)).order_by(User.name).all()
        return teams, users
