"""
OTP delivery and the admin-approved registration flows.

Teams and match officials cannot sign up directly: an emailed code proves
the address, a pending request is stored, and an admin accepts or rejects
it. Accepting promotes the request to a live account; either way the request
is deleted and the applicant is emailed.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fbscore.accounts.otp import (
    PURPOSE_OFFICIAL,
    PURPOSE_TEAM,
    PURPOSE_USER,
    DBOtpStore,
)
from fbscore.accounts.passwords import hash_password
from fbscore.db.models import MatchOfficial, MatchOfficialRequest, Team, TeamRequest
from fbscore.errors import ServiceUnavailable, ValidationFailed
from fbscore.notifications.email import Mailer
from fbscore.services.accounts import normalize_email
from fbscore.services.common import ACTION_ACCEPT, APPROVAL_ACTIONS, get_or_404

logger = logging.getLogger(__name__)

# Wording used in the OTP email for each purpose
PURPOSE_LABELS = {
    PURPOSE_USER: "signup verification",
    PURPOSE_TEAM: "team registration",
    PURPOSE_OFFICIAL: "match official registration",
}


class RegistrationService:
    """
    Service for OTP codes and pending team / match official registrations.

    Usage:
        service = RegistrationService(db_session, mailer)
        service.send_otp("team", "owner@example.com")
        request = service.request_team(...)
        team = service.resolve_team_request(request.id, "accept")
        db_session.commit()
    """

    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer
        self.otp_store = DBOtpStore(db)

    # =========================================================================
    # One-time codes
    # =========================================================================

    def send_otp(self, purpose: str, email: str) -> None:
        """
        Issue a fresh code for ``email`` and mail it.

        Raises:
            ServiceUnavailable: The mail relay refused the message
        """
        self.otp_store.purge_expired()
        code = self.otp_store.issue(purpose, email)
        delivered = self.mailer.send_otp(
            normalize_email(email),
            code,
            PURPOSE_LABELS.get(purpose, purpose),
            int(self.otp_store.ttl.total_seconds()),
        )
        if not delivered:
            raise ServiceUnavailable("Failed to send OTP")
        logger.info("Sent %s OTP to %s", purpose, normalize_email(email))

    @staticmethod
    def _check_action(action: Optional[str]) -> str:
        if action not in APPROVAL_ACTIONS:
            raise ValidationFailed("Invalid action! Use 'accept' or 'reject'.")
        return action

    # =========================================================================
    # Teams
    # =========================================================================

    def _teamname_taken(self, teamname: str) -> bool:
        lowered = teamname.lower()
        in_teams = (
            self.db.query(Team.id).filter(func.lower(Team.teamname) == lowered).first()
        )
        in_requests = (
            self.db.query(TeamRequest.id)
            .filter(func.lower(TeamRequest.teamname) == lowered)
            .first()
        )
        return in_teams is not None or in_requests is not None

    def request_team(
        self,
        teamname: str,
        country: str,
        created_by: str,
        email: str,
        password: str,
        otp: str,
        teamlogo: Optional[str] = None,
    ) -> TeamRequest:
        """
        Store a team registration for admin review.

        Raises:
            ValidationFailed: Bad/expired code, or the team name is already
                used by a team or another pending request
        """
        email = normalize_email(email)
        self.otp_store.verify(PURPOSE_TEAM, email, otp)

        teamname = teamname.strip()
        if self._teamname_taken(teamname):
            raise ValidationFailed("Team already exist..!")

        request = TeamRequest(
            teamname=teamname,
            teamlogo=teamlogo,
            country=country,
            created_by=created_by,
            email=email,
            password_hash=hash_password(password),
        )
        self.db.add(request)
        self.db.flush()
        logger.info("Team request %d submitted for '%s'", request.id, teamname)
        return request

    def list_team_requests(self) -> list[TeamRequest]:
        return self.db.query(TeamRequest).order_by(TeamRequest.created_at, TeamRequest.id).all()

    def resolve_team_request(self, request_id: int, action: Optional[str]) -> Optional[Team]:
        """
        Accept or reject a pending team registration.

        Returns the new Team on accept, None on reject.

        Raises:
            ValidationFailed: Unknown action, or the name was taken meanwhile
            NotFound: No such pending request
        """
        action = self._check_action(action)
        request = get_or_404(self.db, TeamRequest, request_id, "Request")

        team = None
        if action == ACTION_ACCEPT:
            taken = (
                self.db.query(Team.id)
                .filter(func.lower(Team.teamname) == request.teamname.lower())
                .first()
            )
            if taken is not None:
                raise ValidationFailed("Team already exist..!")
            team = Team(
                teamname=request.teamname,
                teamlogo=request.teamlogo,
                country=request.country,
                created_by=request.created_by,
                email=request.email,
                password_hash=request.password_hash,
                active=True,
            )
            self.db.add(team)

        email, teamname = request.email, request.teamname
        self.db.delete(request)
        self.db.flush()

        self.mailer.send_team_decision(email, teamname, accepted=team is not None)
        logger.info("Team request %d for '%s' %sed", request_id, teamname, action)
        return team

    # =========================================================================
    # Match officials
    # =========================================================================

    def request_official(self, name: str, email: str, password: str, otp: str) -> MatchOfficialRequest:
        """
        Store a match official signup for admin review.

        Raises:
            ValidationFailed: Bad/expired code, or already an official
        """
        email = normalize_email(email)
        self.otp_store.verify(PURPOSE_OFFICIAL, email, otp)

        if self.db.query(MatchOfficial.id).filter(MatchOfficial.email == email).first():
            raise ValidationFailed("Match official already exist!")

        request = MatchOfficialRequest(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
        )
        self.db.add(request)
        self.db.flush()
        logger.info("Match official request %d submitted for %s", request.id, email)
        return request

    def list_official_requests(self) -> list[MatchOfficialRequest]:
        return (
            self.db.query(MatchOfficialRequest)
            .order_by(MatchOfficialRequest.created_at, MatchOfficialRequest.id)
            .all()
        )

    def resolve_official_request(
        self, request_id: int, action: Optional[str]
    ) -> Optional[MatchOfficial]:
        """
        Accept or reject a pending match official signup.

        Returns the new MatchOfficial on accept, None on reject.

        Raises:
            ValidationFailed: Unknown action, or the email became an official
            NotFound: No such pending request
        """
        action = self._check_action(action)
        request = get_or_404(self.db, MatchOfficialRequest, request_id, "Match official request")

        official = None
        if action == ACTION_ACCEPT:
            exists = (
                self.db.query(MatchOfficial.id)
                .filter(MatchOfficial.email == request.email)
                .first()
            )
            if exists is not None:
                raise ValidationFailed("Match official already exist!")
            official = MatchOfficial(
                name=request.name,
                email=request.email,
                password_hash=request.password_hash,
            )
            self.db.add(official)

        email, name = request.email, request.name
        self.db.delete(request)
        self.db.flush()

        self.mailer.send_official_decision(email, name, accepted=official is not None)
        logger.info("Match official request %d for %s %sed", request_id, email, action)
        return official
