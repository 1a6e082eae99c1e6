"""Team registration, sign-in, search and invitations (/api/team)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from fbscore.accounts.otp import PURPOSE_TEAM
from fbscore.accounts.tokens import ROLE_TEAM, Principal, issue_token
from fbscore.db.session import get_db
from fbscore.errors import ValidationFailed
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services import accounts
from fbscore.services.profiles import ProfileService
from fbscore.services.registrations import RegistrationService
from fbscore.services.roster import RosterService
from fbscore.web import serializers
from fbscore.web.dependencies import require_team, require_user
from fbscore.web.schemas import CreateTeamForm, PlayerInviteRequest, SendOtpRequest, SigninRequest
from fbscore.web.uploads import KIND_TEAM_LOGO, store_upload

router = APIRouter()


@router.post("/sendotp")
async def send_otp(
    body: SendOtpRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    RegistrationService(db, mailer).send_otp(PURPOSE_TEAM, body.email)
    db.commit()
    return {"message": "OTP sent to your email."}


@router.post("/createTeam")
async def create_team(
    teamname: str = Form(...),
    country: str = Form(...),
    createdBy: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    otp: str = Form(...),
    teamlogo: Optional[UploadFile] = File(None),
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    form = CreateTeamForm(
        teamname=teamname,
        country=country,
        createdBy=createdBy,
        email=email,
        password=password,
        otp=otp,
    )
    request = RegistrationService(db, mailer).request_team(
        teamname=form.teamname,
        country=form.country,
        created_by=form.created_by,
        email=form.email,
        password=form.password,
        otp=form.otp,
    )
    request.teamlogo = await store_upload(teamlogo, KIND_TEAM_LOGO)
    db.commit()
    return {
        "message": "Team request sent successfully..!",
        "request": serializers.team_request(request),
    }


@router.post("/teamSignin")
async def team_signin(body: SigninRequest, db: Session = Depends(get_db)):
    team = accounts.authenticate_team(db, body.email, body.password)
    if team is None:
        raise ValidationFailed("Invalid email or password.!")
    return {"teamtoken": issue_token(team.id, ROLE_TEAM)}


@router.get("/getTeamDetails/{team_id}")
async def get_team_details(
    team_id: int,
    principal: Principal = Depends(require_team),
    db: Session = Depends(get_db),
):
    team, players = ProfileService(db).team_with_roster(team_id)
    return {"message": "Team details fetched.", **serializers.team_detail(team, players)}


@router.get("/search")
async def search(
    searchquery: Optional[str] = Query(None, description="Part of a team or user name"),
    db: Session = Depends(get_db),
):
    teams, users = ProfileService(db).search(searchquery)
    return {
        "success": True,
        "teams_result": [
            {
                "teamId": team.id,
                "teamname": team.teamname,
                "teamlogo": serializers.media_url(team.teamlogo),
                "country": team.country,
            }
            for team in teams
        ],
        "user_result": [
            {
                "userId": user.id,
                "name": user.name,
                "pic": serializers.media_url(user.pic),
                "country": user.country,
            }
            for user in users
        ],
    }


@router.post("/playerRequest")
async def invite_player(
    body: PlayerInviteRequest,
    principal: Principal = Depends(require_team),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    request = RosterService(db, mailer).invite(principal.id, body.user_id, body.player_no)
    db.commit()
    return {
        "message": "Invitation sent successfully..!",
        "request": serializers.player_request(request),
    }


@router.get("/playerRequests")
async def team_player_requests(
    principal: Principal = Depends(require_team),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    requests = RosterService(db, mailer).requests_for_team(principal.id)
    return {
        "requests": [
            {
                **serializers.player_request(request),
                "user": serializers.user_public(request.user),
            }
            for request in requests
        ]
    }
