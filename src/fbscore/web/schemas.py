"""
Request bodies.

Field names follow the JSON the clients send (camelCase where the API uses
it); Python attribute names are snake_case via aliases. Multipart forms are
validated by building the matching *Form model inside the route.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class SendOtpRequest(ApiModel):
    email: EmailStr


class SigninRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminSigninRequest(ApiModel):
    admin_id: str = Field(..., alias="adminId", min_length=1)
    password: str = Field(..., min_length=1)


class SignupForm(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    otp: str = Field(..., min_length=1)
    dob: date
    gender: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    password: str = Field(..., min_length=5, max_length=16)
    position: str = Field(..., min_length=1)
    foot: str = Field(..., min_length=1)


class ForgotPasswordRequest(ApiModel):
    email: EmailStr
    otp: str = Field(..., min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=5, max_length=16)

    @field_validator("otp")
    @classmethod
    def otp_is_numeric(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError("Otp is required..!")
        return v


class UpdateUserRequest(ApiModel):
    name: Optional[str] = None
    pic: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    position: Optional[str] = None
    foot: Optional[str] = None


class OfficialSignupRequest(ApiModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=18)
    otp: str = Field(..., min_length=1)


class CreateTeamForm(ApiModel):
    teamname: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1)
    created_by: str = Field(..., alias="createdBy", min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Approvals and roster
# ---------------------------------------------------------------------------

class ActionRequest(ApiModel):
    action: Optional[str] = None


class PlayerInviteRequest(ApiModel):
    user_id: int = Field(..., alias="userId")
    player_no: str = Field(..., alias="playerNo", min_length=1, max_length=10)

    @field_validator("player_no", mode="before")
    @classmethod
    def jersey_as_text(cls, v):
        return str(v) if isinstance(v, int) else v


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------

class CreateMatchRequest(ApiModel):
    team_a: int = Field(..., alias="teamA")
    team_b: int = Field(..., alias="teamB")
    match_date: str = Field(..., min_length=1)
    match_time: str = Field(..., min_length=1)


class UpdateStatusRequest(ApiModel):
    status: Optional[str] = None


class MatchStatsRequest(ApiModel):
    match_id: Optional[int] = Field(None, alias="matchId")
    scorer_id: Optional[int] = Field(None, alias="scorerId")
    assist_id: Optional[int] = Field(None, alias="assistId")
    team_id: Optional[int] = Field(None, alias="teamId")


class AssignMvpRequest(ApiModel):
    user_id: int = Field(..., alias="userId")


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------

class CommentRequest(ApiModel):
    comment: Optional[str] = None
