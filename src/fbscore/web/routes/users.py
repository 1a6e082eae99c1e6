"""User accounts: signup, sign-in, profile and team invitations (/api/auth)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from fbscore.accounts.otp import PURPOSE_USER
from fbscore.accounts.tokens import ROLE_USER, Principal, issue_token
from fbscore.db.session import get_db
from fbscore.errors import ValidationFailed
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services import accounts
from fbscore.services.matches import MatchService
from fbscore.services.profiles import ProfileService
from fbscore.services.registrations import RegistrationService
from fbscore.services.roster import RosterService
from fbscore.web import serializers
from fbscore.web.dependencies import require_user
from fbscore.web.schemas import (
    ActionRequest,
    ForgotPasswordRequest,
    SendOtpRequest,
    SigninRequest,
    SignupForm,
    UpdateUserRequest,
)
from fbscore.web.uploads import KIND_PROFILE, store_upload

router = APIRouter()


@router.post("/sendotp")
async def send_otp(
    body: SendOtpRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    RegistrationService(db, mailer).send_otp(PURPOSE_USER, body.email)
    db.commit()
    return {"message": "OTP sent to your email."}


@router.post("/signup", status_code=201)
async def signup(
    name: str = Form(...),
    email: str = Form(...),
    otp: str = Form(...),
    dob: str = Form(...),
    gender: str = Form(...),
    country: str = Form(...),
    password: str = Form(...),
    position: str = Form(...),
    foot: str = Form(...),
    pic: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    form = SignupForm(
        name=name,
        email=email,
        otp=otp,
        dob=dob,
        gender=gender,
        country=country,
        password=password,
        position=position,
        foot=foot,
    )
    user = accounts.register_user(db, **form.model_dump())
    user.pic = await store_upload(pic, KIND_PROFILE)
    db.commit()
    return {"usertoken": issue_token(user.id, ROLE_USER)}


@router.post("/signin")
async def signin(body: SigninRequest, db: Session = Depends(get_db)):
    user = accounts.authenticate_user(db, body.email, body.password)
    if user is None:
        raise ValidationFailed("Invalid email or password")
    return {"usertoken": issue_token(user.id, ROLE_USER)}


@router.get("/getuser")
async def get_user(
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    profile = ProfileService(db).user_profile(principal.id)
    return {"response": serializers.user_profile(profile)}


@router.put("/forgotpassword")
async def forgot_password(body: ForgotPasswordRequest, db: Session = Depends(get_db)):
    accounts.reset_password(db, body.email, body.otp, body.new_password)
    db.commit()
    return {"message": "Password updated successfully"}


@router.put("/updateUserDetails")
async def update_user_details(
    body: UpdateUserRequest,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = accounts.update_user(db, principal.id, body.model_dump(exclude_unset=True))
    db.commit()
    return {
        "message": "User details updated successfully.",
        "user": serializers.user_account(user),
    }


@router.get("/getTeamDetails/{team_id}")
async def get_team_details(
    team_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    team, players = ProfileService(db).team_with_roster(team_id)
    return {"message": "Team details fetched.", **serializers.team_detail(team, players)}


@router.get("/matchDetails/{match_id}")
async def match_details(
    match_id: int,
    principal: Principal = Depends(require_user),
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


@router.get("/getPlayerDetails/{player_id}")
async def get_player_details(
    player_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    profile = ProfileService(db).player_profile(player_id)
    return {"message": "Details fetched successfully!", "player": serializers.player_detail(profile)}


@router.get("/playerRequests")
async def my_player_requests(
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    requests = RosterService(db, mailer).requests_for_user(principal.id)
    return {"requests": [serializers.player_request(r) for r in requests]}


@router.post("/playerRequests/{request_id}")
async def respond_to_player_request(
    request_id: int,
    body: ActionRequest,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    player = RosterService(db, mailer).respond(request_id, principal.id, body.action)
    db.commit()
    if player is None:
        return {"message": "Request rejected."}
    return {
        "message": "Request accepted. You are now part of the team.",
        "player": {"playerId": player.id, "teamId": player.team_id, "playerNo": player.player_no},
    }
