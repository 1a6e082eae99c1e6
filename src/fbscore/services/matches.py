"""
Match lifecycle and live scoring.

This is the core service for match officials. It handles:
- Creating fixtures and seeding per-match stats rows for both rosters
- Status changes, including the automatic switch to Delayed
- Recording goals and assists while a match is Live
- Naming the MVP once the match is over

Every write goes through the caller's session and is committed once by the
caller, so a goal either lands with its score and stats changes or not at all.
"""

import logging
import re
from datetime import date, datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from fbscore.db.models import Goal, Match, Player, Team, User
from fbscore.errors import NotFound, PermissionDenied, ValidationFailed
from fbscore.match_statuses import (
    FULL_TIME,
    DELAYED,
    LIVE,
    UPCOMING,
    get_status_group,
    is_overdue,
    is_valid_status,
)
from fbscore.services import stats
from fbscore.services.common import get_or_404

logger = logging.getLogger(__name__)

MATCH_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

# How many fixtures of each kind a profile page shows
PROFILE_COMPLETED_LIMIT = 7
PROFILE_OTHER_LIMIT = 10


def parse_match_date(value: str) -> date:
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationFailed("Invalid match_date format! Use YYYY-MM-DD.")


def parse_match_time(value: str) -> str:
    value = str(value).strip()
    if not MATCH_TIME_PATTERN.match(value):
        raise ValidationFailed("Invalid match_time format! Use HH:mm in 24-hour format.")
    return value


class MatchService:
    """
    Service for creating and running matches.

    Usage:
        service = MatchService(db_session)
        match = service.create_match(official_id, team_a_id, team_b_id, "2026-05-01", "18:30")
        service.update_status(match.id, official_id, "Live")
        service.record_goal(official_id, match.id, scorer_id=12, team_id=team_a_id)
        db_session.commit()
    """

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Fixtures
    # =========================================================================

    def create_match(
        self,
        official_id: int,
        team_a_id: int,
        team_b_id: int,
        match_date: str,
        match_time: str,
        now: Optional[datetime] = None,
    ) -> Match:
        """
        Create an Upcoming match between two existing teams.

        Every player on either roster gets an empty per-match stats row for
        the new match, creating their stats record if needed.

        Raises:
            ValidationFailed: Bad date/time format, kickoff in the past, or
                the same team on both sides
            NotFound: Either team does not exist
        """
        now = now or datetime.utcnow()
        parsed_date = parse_match_date(match_date)
        parsed_time = parse_match_time(match_time)

        match = Match(
            team_a_id=team_a_id,
            team_b_id=team_b_id,
            match_date=parsed_date,
            match_time=parsed_time,
            status=UPCOMING,
            created_by_id=official_id,
            score_team_a=0,
            score_team_b=0,
        )
        if match.kickoff < now:
            raise ValidationFailed("Match date and time cannot be in the past!")

        if self.db.get(Team, team_a_id) is None:
            raise NotFound("TeamA", team_a_id, "TeamA does not exist!")
        if self.db.get(Team, team_b_id) is None:
            raise NotFound("TeamB", team_b_id, "TeamB does not exist!")
        if team_a_id == team_b_id:
            raise ValidationFailed("A team cannot play against itself!")

        self.db.add(match)
        self.db.flush()

        players = (
            self.db.query(Player)
            .filter(Player.team_id.in_([team_a_id, team_b_id]))
            .all()
        )
        for player in players:
            stats.credit(self.db, player, match.id)

        logger.info(
            "Official %d created match %d: team %d vs team %d at %s %s (%d players seeded)",
            official_id,
            match.id,
            team_a_id,
            team_b_id,
            parsed_date.isoformat(),
            parsed_time,
            len(players),
        )
        return match

    def _owned_match(self, match_id: int, official_id: int, action: str) -> Match:
        match = get_or_404(self.db, Match, match_id, "Match")
        if match.created_by_id != official_id:
            raise PermissionDenied(f"You are not authorized to {action} this match")
        return match

    # =========================================================================
    # Status
    # =========================================================================

    def update_status(
        self,
        match_id: int,
        official_id: int,
        status: Optional[str],
        now: Optional[datetime] = None,
    ) -> tuple[Match, bool]:
        """
        Change a match's status.

        If the match is still Upcoming but its kickoff has passed, the match
        becomes Delayed no matter which status was requested.

        Returns:
            (match, auto_delayed) where auto_delayed tells the caller the
            requested status was overridden

        Raises:
            ValidationFailed: Status is not one of the known values
            NotFound: No such match
            PermissionDenied: Caller did not create the match
        """
        if not is_valid_status(status):
            raise ValidationFailed("Invalid status provided!")

        match = self._owned_match(match_id, official_id, "update the status of")
        now = now or datetime.utcnow()

        if is_overdue(match.status, match.kickoff, now):
            match.status = DELAYED
            self.db.flush()
            logger.info("Match %d passed kickoff while Upcoming; set to Delayed", match.id)
            return match, True

        previous = match.status
        match.status = status
        self.db.flush()
        logger.info("Match %d status %s -> %s", match.id, previous, status)
        return match, False

    # =========================================================================
    # Live scoring
    # =========================================================================

    def record_goal(
        self,
        official_id: int,
        match_id: Optional[int],
        scorer_id: Optional[int],
        team_id: Optional[int],
        assist_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Match:
        """
        Record one goal (and optional assist) in a Live match.

        Increments the scoring side, appends the goal event, and credits the
        scorer (and assister) with a goal (assist) plus a per-match stats row.

        Raises:
            ValidationFailed: Missing ids, team not in the match, or scorer /
                assister not on either roster
            NotFound: No such match
            PermissionDenied: Caller did not create the match, or the match
                is not Live
        """
        if not match_id or not scorer_id or not team_id:
            raise ValidationFailed("Match ID, scorer ID, and team ID are required!")

        match = self._owned_match(match_id, official_id, "update the stats of")
        if match.status not in get_status_group("scoring"):
            raise PermissionDenied(f"Match status must be '{LIVE}'!")

        side = match.side_of(team_id)
        if side is None:
            raise ValidationFailed("The team is not part of this match!")

        roster = {
            player.id: player
            for player in self.db.query(Player)
            .filter(Player.team_id.in_([match.team_a_id, match.team_b_id]))
            .all()
        }
        scorer = roster.get(scorer_id)
        if scorer is None:
            raise ValidationFailed("Scorer must be part of one of the teams!")
        assister = None
        if assist_id:
            assister = roster.get(assist_id)
            if assister is None:
                raise ValidationFailed("Assister must be part of one of the teams!")

        if side == "teamA":
            match.score_team_a = Match.score_team_a + 1
        else:
            match.score_team_b = Match.score_team_b + 1

        self.db.add(
            Goal(
                match_id=match.id,
                scorer_id=scorer.id,
                assist_id=assister.id if assister else None,
                team_id=team_id,
                timestamp=now or datetime.utcnow(),
            )
        )
        self.db.flush()

        stats.credit(self.db, scorer, match.id, goals=1)
        if assister is not None:
            stats.credit(self.db, assister, match.id, assists=1)

        self.db.refresh(match)
        logger.info(
            "Goal in match %d for %s by player %d (assist: %s); score %d-%d",
            match.id,
            side,
            scorer.id,
            assister.id if assister else "none",
            match.score_team_a,
            match.score_team_b,
        )
        return match

    def assign_mvp(self, match_id: int, official_id: int, user_id: int) -> Match:
        """
        Name the MVP of a finished match.

        Any existing user is accepted; participation in the match is not
        checked.

        Raises:
            NotFound: No such match or user
            PermissionDenied: Caller did not create the match, or the match
                is not Full Time
        """
        match = self._owned_match(match_id, official_id, "assign the MVP of")
        if match.status not in get_status_group("completed"):
            raise PermissionDenied(f"MVP can only be assigned once the match is '{FULL_TIME}'!")

        user = get_or_404(self.db, User, user_id, "User")
        match.mvp_user_id = user.id
        self.db.flush()
        logger.info("Match %d MVP set to user %d", match.id, user.id)
        return match

    # =========================================================================
    # Reads
    # =========================================================================

    def _base_query(self):
        return self.db.query(Match).options(
            joinedload(Match.team_a),
            joinedload(Match.team_b),
        )

    def get_match(self, match_id: int) -> Match:
        match = (
            self._base_query()
            .options(
                joinedload(Match.created_by),
                joinedload(Match.mvp),
                joinedload(Match.goals),
            )
            .filter(Match.id == match_id)
            .first()
        )
        if match is None:
            raise NotFound("Match", match_id)
        return match

    def list_matches(self) -> list[Match]:
        return self._base_query().order_by(Match.match_date, Match.match_time, Match.id).all()

    def search_by_team_name(self, teamname: Optional[str]) -> list[Match]:
        """
        Matches involving any team whose name contains ``teamname``
        (case-insensitive).

        Raises:
            ValidationFailed: Empty search term
            NotFound: No team or no match found
        """
        term = (teamname or "").strip()
        if not term:
            raise ValidationFailed("Team name is required!")

        team_ids = [
            row.id
            for row in self.db.query(Team.id).filter(Team.teamname.ilike(f"%{term}%")).all()
        ]
        if not team_ids:
            raise NotFound("Team", message=f"No teams found matching '{term}'!")

        matches = (
            self._base_query()
            .filter(or_(Match.team_a_id.in_(team_ids), Match.team_b_id.in_(team_ids)))
            .order_by(Match.match_date, Match.match_time, Match.id)
            .all()
        )
        if not matches:
            raise NotFound("Match", message=f"No matches found for '{term}'!")
        return matches

    def team_matches(
        self,
        team_id: Optional[int],
        completed_limit: int = PROFILE_COMPLETED_LIMIT,
        other_limit: int = PROFILE_OTHER_LIMIT,
    ) -> list[Match]:
        """Finished matches first, then the rest, each ordered by date."""
        if team_id is None:
            return []
        involving = or_(Match.team_a_id == team_id, Match.team_b_id == team_id)
        completed = (
            self._base_query()
            .filter(involving, Match.status == FULL_TIME)
            .order_by(Match.match_date, Match.match_time)
            .limit(completed_limit)
            .all()
        )
        others = (
            self._base_query()
            .filter(involving, Match.status != FULL_TIME)
            .order_by(Match.match_date, Match.match_time)
            .limit(other_limit)
            .all()
        )
        return completed + others

    def roster(self, team_id: int) -> list[Player]:
        return (
            self.db.query(Player)
            .options(joinedload(Player.user))
            .filter(Player.team_id == team_id)
            .order_by(Player.id)
            .all()
        )
