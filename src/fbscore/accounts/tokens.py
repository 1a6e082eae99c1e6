"""
Signed access tokens.

Every account type gets the same token shape, ``{"id": <account id>,
"role": <role>}``, signed with the shared ``secret_key``. Tokens are sent
back in a role-specific request header (see web/dependencies.py), and the
role inside the token must match the header it arrived in.

Expiry is optional: with ``token_max_age_seconds`` unset a token stays valid
until the secret changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from fbscore.config import settings
from fbscore.errors import AuthenticationFailed

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_TEAM = "team"
ROLE_OFFICIAL = "matchofficial"
ROLE_ADMIN = "admin"

ALL_ROLES = (ROLE_USER, ROLE_TEAM, ROLE_OFFICIAL, ROLE_ADMIN)

TOKEN_SALT = "fbscore-access-token"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""
    id: int
    role: str


def _serializer(secret_key: Optional[str] = None) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key or settings.secret_key, salt=TOKEN_SALT)


def issue_token(account_id: int, role: str, secret_key: Optional[str] = None) -> str:
    """Sign a token for an account."""
    if role not in ALL_ROLES:
        raise ValueError(f"Unknown role: {role}")
    return _serializer(secret_key).dumps({"id": account_id, "role": role})


def read_token(
    token: str,
    expected_role: Optional[str] = None,
    secret_key: Optional[str] = None,
    max_age: Optional[int] = None,
) -> Principal:
    """
    Verify a token and return its principal.

    Args:
        token: Token string from the request header
        expected_role: Reject tokens issued for any other role
        secret_key: Override the configured secret (tests, key rotation)
        max_age: Override ``settings.token_max_age_seconds``

    Raises:
        AuthenticationFailed: Bad signature, expired, malformed or wrong role.
            The message is the same in every case.
    """
    age_limit = max_age if max_age is not None else settings.token_max_age_seconds
    try:
        payload = _serializer(secret_key).loads(token, max_age=age_limit)
    except SignatureExpired:
        logger.info("Rejected expired %s token", expected_role or "access")
        raise AuthenticationFailed("Token is not valid")
    except BadSignature:
        raise AuthenticationFailed("Token is not valid")

    if not isinstance(payload, dict):
        raise AuthenticationFailed("Token is not valid")
    account_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(account_id, int) or role not in ALL_ROLES:
        raise AuthenticationFailed("Token is not valid")
    if expected_role is not None and role != expected_role:
        logger.info("Rejected %s token presented as %s", role, expected_role)
        raise AuthenticationFailed("Token is not valid")

    return Principal(id=account_id, role=role)
