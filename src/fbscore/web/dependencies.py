"""
Request authentication.

Each account type sends its token in its own header:

    auth-token            user
    team-token            team
    matchofficial-token   match official
    admin-token           admin

``require_poster`` accepts any of admin, team or user and is used by the feed.
"""

from typing import Optional

from fastapi import Header

from fbscore.accounts.tokens import (
    ROLE_ADMIN,
    ROLE_OFFICIAL,
    ROLE_TEAM,
    ROLE_USER,
    Principal,
    read_token,
)
from fbscore.errors import AuthenticationFailed

NO_TOKEN_MESSAGE = "No token, authorization denied"


def _authenticate(token: Optional[str], role: str) -> Principal:
    if not token:
        raise AuthenticationFailed(NO_TOKEN_MESSAGE)
    return read_token(token, expected_role=role)


def require_user(auth_token: Optional[str] = Header(None, alias="auth-token")) -> Principal:
    return _authenticate(auth_token, ROLE_USER)


def require_team(team_token: Optional[str] = Header(None, alias="team-token")) -> Principal:
    return _authenticate(team_token, ROLE_TEAM)


def require_official(
    official_token: Optional[str] = Header(None, alias="matchofficial-token"),
) -> Principal:
    return _authenticate(official_token, ROLE_OFFICIAL)


def require_admin(admin_token: Optional[str] = Header(None, alias="admin-token")) -> Principal:
    return _authenticate(admin_token, ROLE_ADMIN)


def require_poster(
    admin_token: Optional[str] = Header(None, alias="admin-token"),
    team_token: Optional[str] = Header(None, alias="team-token"),
    auth_token: Optional[str] = Header(None, alias="auth-token"),
) -> Principal:
    """First header present wins, checked in admin, team, user order."""
    if admin_token:
        return read_token(admin_token, expected_role=ROLE_ADMIN)
    if team_token:
        return read_token(team_token, expected_role=ROLE_TEAM)
    if auth_token:
        return read_token(auth_token, expected_role=ROLE_USER)
    raise AuthenticationFailed(NO_TOKEN_MESSAGE)
