"""
Team roster management.

A user joins a team either directly (the team adds them) or by accepting an
invitation. Both paths enforce the same rules: the user must not already be
on a team, and the jersey number must be free inside the team.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from fbscore.db.models import Goal, Player, PlayerRequest, PlayerStats, Team, User
from fbscore.errors import NotFound, PermissionDenied, ValidationFailed
from fbscore.notifications.email import Mailer
from fbscore.services.common import (
    ACTION_ACCEPT,
    APPROVAL_ACTIONS,
    current_player,
    get_or_404,
    jersey_taken,
)

logger = logging.getLogger(__name__)


class RosterService:
    """
    Service for adding, inviting and removing players.

    Usage:
        service = RosterService(db_session, mailer)
        invitation = service.invite(team_id, user_id, "10")
        service.respond(invitation.id, user_id, "accept")
        db_session.commit()
    """

    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer

    def _check_joinable(self, team_id: int, user_id: int, player_no: str) -> tuple[Team, User]:
        team = get_or_404(self.db, Team, team_id, "Team")
        user = get_or_404(self.db, User, user_id, "User")
        if current_player(self.db, user.id) is not None:
            raise ValidationFailed("Player already belongs to a team..!")
        if jersey_taken(self.db, team.id, player_no):
            raise ValidationFailed("Player number already exists in the team..!")
        return team, user

    # =========================================================================
    # Direct roster changes
    # =========================================================================

    def add_player(self, team_id: int, user_id: int, player_no: str) -> Player:
        """
        Put a user straight onto the team's roster.

        Raises:
            NotFound: No such team or user
            ValidationFailed: User already on a team, or jersey number taken
        """
        player_no = str(player_no).strip()
        team, user = self._check_joinable(team_id, user_id, player_no)

        player = Player(team_id=team.id, user_id=user.id, player_no=player_no)
        self.db.add(player)
        self.db.flush()
        logger.info("Team %d added user %d as #%s", team.id, user.id, player_no)
        return player

    def remove_player(self, team_id: int, player_id: int) -> None:
        """
        Remove a player from the caller's roster.

        Goal events keep their rows with the player reference cleared, and
        the player's stats row is detached so it still counts towards the
        user's career totals.

        Raises:
            NotFound: No such player
            PermissionDenied: Player belongs to another team
        """
        player = get_or_404(self.db, Player, player_id, "Player")
        if player.team_id != team_id:
            raise PermissionDenied("You are not authorized to remove this player")

        self.db.query(Goal).filter(Goal.scorer_id == player.id).update(
            {Goal.scorer_id: None}, synchronize_session=False
        )
        self.db.query(Goal).filter(Goal.assist_id == player.id).update(
            {Goal.assist_id: None}, synchronize_session=False
        )
        self.db.query(PlayerStats).filter(PlayerStats.player_id == player.id).update(
            {PlayerStats.player_id: None}, synchronize_session=False
        )

        user, team = player.user, player.team
        self.db.delete(player)
        self.db.flush()

        self.mailer.send_player_removed(user.email, user.name, team.teamname)
        logger.info("Team %d removed player %d (user %d)", team.id, player_id, user.id)

    # =========================================================================
    # Invitations
    # =========================================================================

    def invite(self, team_id: int, user_id: int, player_no: str) -> PlayerRequest:
        """
        Invite a user to join the team with a jersey number.

        Raises:
            NotFound: No such team or user
            ValidationFailed: User already on a team, jersey number taken, or
                this team already has a pending invitation for the user
        """
        player_no = str(player_no).strip()
        team, user = self._check_joinable(team_id, user_id, player_no)

        pending = (
            self.db.query(PlayerRequest.id)
            .filter(PlayerRequest.team_id == team.id, PlayerRequest.user_id == user.id)
            .first()
        )
        if pending is not None:
            raise ValidationFailed("Invitation already sent to this user..!")

        request = PlayerRequest(
            team_id=team.id,
            teamname=team.teamname,
            user_id=user.id,
            email=user.email,
            player_no=player_no,
        )
        self.db.add(request)
        self.db.flush()

        self.mailer.send_player_invitation(user.email, team.teamname, player_no)
        logger.info("Team %d invited user %d as #%s (request %d)", team.id, user.id, player_no, request.id)
        return request

    def requests_for_user(self, user_id: int) -> list[PlayerRequest]:
        return (
            self.db.query(PlayerRequest)
            .options(joinedload(PlayerRequest.team))
            .filter(PlayerRequest.user_id == user_id)
            .order_by(PlayerRequest.created_at, PlayerRequest.id)
            .all()
        )

    def requests_for_team(self, team_id: int) -> list[PlayerRequest]:
        return (
            self.db.query(PlayerRequest)
            .options(joinedload(PlayerRequest.user))
            .filter(PlayerRequest.team_id == team_id)
            .order_by(PlayerRequest.created_at, PlayerRequest.id)
            .all()
        )

    def respond(self, request_id: int, user_id: int, action: Optional[str]) -> Optional[Player]:
        """
        The invited user accepts or rejects an invitation.

        Accepting creates the roster entry and drops every other pending
        invitation for the user. Rejecting drops only this one. The team is
        emailed either way.

        Returns the new Player on accept, None on reject.

        Raises:
            ValidationFailed: Unknown action, user already on a team, or the
                jersey number was taken in the meantime
            NotFound: No such pending invitation
            PermissionDenied: Invitation is addressed to someone else
        """
        if action not in APPROVAL_ACTIONS:
            raise ValidationFailed("Invalid action! Use 'accept' or 'reject'.")

        request = get_or_404(self.db, PlayerRequest, request_id, "Request")
        if request.user_id != user_id:
            raise PermissionDenied("This invitation is not addressed to you")

        team, user = request.team, request.user
        player = None
        if action == ACTION_ACCEPT:
            if current_player(self.db, user.id) is not None:
                raise ValidationFailed("You are already part of a team")
            if jersey_taken(self.db, team.id, request.player_no):
                raise ValidationFailed("Player number already exists in the team..!")

            player = Player(team_id=team.id, user_id=user.id, player_no=request.player_no)
            self.db.add(player)
            cleared = (
                self.db.query(PlayerRequest)
                .filter(PlayerRequest.user_id == user.id)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            logger.info(
                "User %d joined team %d as #%s; cleared %d pending invitation(s)",
                user.id,
                team.id,
                request.player_no,
                cleared,
            )
        else:
            self.db.delete(request)
            self.db.flush()
            logger.info("User %d rejected invitation %d from team %d", user.id, request_id, team.id)

        self.mailer.send_invitation_decision(
            team.email, user.name, team.teamname, accepted=player is not None
        )
        return player
