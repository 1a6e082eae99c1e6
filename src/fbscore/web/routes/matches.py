"""Match officials and live scoring (/api/match)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fbscore.accounts.otp import PURPOSE_OFFICIAL
from fbscore.accounts.tokens import ROLE_OFFICIAL, Principal, issue_token
from fbscore.db.models import MatchOfficial
from fbscore.db.session import get_db
from fbscore.errors import NotFound, ValidationFailed
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services import accounts
from fbscore.services.matches import MatchService
from fbscore.services.registrations import RegistrationService
from fbscore.web import serializers
from fbscore.web.dependencies import require_official
from fbscore.web.schemas import (
    AssignMvpRequest,
    CreateMatchRequest,
    MatchStatsRequest,
    OfficialSignupRequest,
    SendOtpRequest,
    SigninRequest,
    UpdateStatusRequest,
)

router = APIRouter()


# =============================================================================
# Match official accounts
# =============================================================================

@router.post("/sendotp")
async def send_otp(
    body: SendOtpRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    RegistrationService(db, mailer).send_otp(PURPOSE_OFFICIAL, body.email)
    db.commit()
    return {"message": "OTP sent to your email."}


@router.post("/matchOfficialSignup")
async def match_official_signup(
    body: OfficialSignupRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    request = RegistrationService(db, mailer).request_official(
        body.name, body.email, body.password, body.otp
    )
    db.commit()
    return {
        "message": "Match official request has been sent to admin.",
        "request": serializers.official_request(request),
    }


@router.post("/matchOfficialSignin")
async def match_official_signin(body: SigninRequest, db: Session = Depends(get_db)):
    official = accounts.authenticate_official(db, body.email, body.password)
    if official is None:
        raise ValidationFailed("Invalid email or password!")
    return {"matchOfficialtoken": issue_token(official.id, ROLE_OFFICIAL)}


@router.get("/getMatchOfficial")
async def get_match_official(
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    official = db.get(MatchOfficial, principal.id)
    if official is None:
        raise NotFound("Match official", principal.id, "No data found!")
    return {"response": {"name": official.name, "email": official.email}}


# =============================================================================
# Matches
# =============================================================================

@router.post("/createMatch", status_code=201)
async def create_match(
    body: CreateMatchRequest,
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    match = MatchService(db).create_match(
        principal.id, body.team_a, body.team_b, body.match_date, body.match_time
    )
    db.commit()
    return {"success": True, "match": serializers.match_summary(match)}


@router.put("/updateStatus/{match_id}")
async def update_status(
    match_id: int,
    body: UpdateStatusRequest,
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    match, auto_delayed = MatchService(db).update_status(match_id, principal.id, body.status)
    db.commit()
    message = (
        "Match status set to delayed automatically!"
        if auto_delayed
        else "Match status updated successfully!"
    )
    return {"message": message, "match": serializers.match_summary(match)}


@router.get("/searchMatch")
async def search_match(
    teamname: Optional[str] = Query(None, description="Part of a team name"),
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    matches = MatchService(db).search_by_team_name(teamname)
    return {"success": True, "matches": [serializers.match_summary(m) for m in matches]}


@router.put("/updateMatchStats")
async def update_match_stats(
    body: MatchStatsRequest,
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    match = MatchService(db).record_goal(
        principal.id,
        match_id=body.match_id,
        scorer_id=body.scorer_id,
        team_id=body.team_id,
        assist_id=body.assist_id,
    )
    db.commit()
    return {
        "message": "Stats and match updated successfully.",
        "score": {"teamA": match.score_team_a, "teamB": match.score_team_b},
    }


@router.put("/assignMVP/{match_id}")
async def assign_mvp(
    match_id: int,
    body: AssignMvpRequest,
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    match = MatchService(db).assign_mvp(match_id, principal.id, body.user_id)
    db.commit()
    return {"message": "MVP assigned successfully.", "match": serializers.match_summary(match)}


@router.get("/matchDetails/{match_id}")
async def match_details(
    match_id: int,
    principal: Principal = Depends(require_official),
    db: Session = Depends(get_db),
):
    service = MatchService(db)
    match = service.get_match(match_id)
    return {
        "message": "Data fetched successfully",
        "data": serializers.match_detail(
            match, service.roster(match.team_a_id), service.roster(match.team_b_id)
        ),
    }


@router.get("/matches")
async def list_matches(db: Session = Depends(get_db)):
    matches = MatchService(db).list_matches()
    return {
        "message": "Matches fetched successfully",
        "data": {"matches": [serializers.match_summary(m) for m in matches]},
    }
