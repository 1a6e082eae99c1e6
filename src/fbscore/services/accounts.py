"""Account creation, sign-in and profile updates for every account type."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from fbscore.accounts.otp import PURPOSE_USER, DBOtpStore
from fbscore.accounts.passwords import hash_password, verify_password
from fbscore.db.models import AdminUser, MatchOfficial, Team, User
from fbscore.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

# Fields a user may change on their own profile
USER_EDITABLE_FIELDS = ("name", "pic", "dob", "gender", "country", "position", "foot")


def normalize_email(email: str) -> str:
    return email.strip().lower()


# =============================================================================
# Users
# =============================================================================

def register_user(
    db: Session,
    name: str,
    email: str,
    otp: str,
    dob: date,
    gender: str,
    country: str,
    password: str,
    position: str,
    foot: str,
    pic: Optional[str] = None,
) -> User:
    """
    Create a user after checking the signup code sent to ``email``.

    Raises:
        ValidationFailed: Bad/expired code, or the email is already registered
    """
    email = normalize_email(email)
    DBOtpStore(db).verify(PURPOSE_USER, email, otp)

    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ValidationFailed("User already exists")

    user = User(
        name=name.strip(),
        email=email,
        dob=dob,
        gender=gender,
        country=country,
        password_hash=hash_password(password),
        position=position,
        foot=foot,
        pic=pic,
    )
    db.add(user)
    db.flush()
    logger.info("Registered user %d (%s)", user.id, email)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when credentials are valid."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def reset_password(db: Session, email: str, otp: str, new_password: str) -> User:
    """
    Set a new password after checking the code sent to ``email``.

    Raises:
        ValidationFailed: Bad/expired code, or no user with that email
    """
    email = normalize_email(email)
    DBOtpStore(db).verify(PURPOSE_USER, email, otp)

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise ValidationFailed("User not found..!")
    user.password_hash = hash_password(new_password)
    db.flush()
    logger.info("Password reset for user %d", user.id)
    return user


def update_user(db: Session, user_id: int, changes: dict[str, Any]) -> User:
    """
    Apply a partial profile update. Keys outside USER_EDITABLE_FIELDS are
    ignored and None values mean "not provided".

    Raises:
        ValidationFailed: Nothing to update
        NotFound: No such user
    """
    updates = {
        key: value
        for key, value in changes.items()
        if key in USER_EDITABLE_FIELDS and value is not None
    }
    if not updates:
        raise ValidationFailed("No fields provided to update.")

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User", user_id, "User not found.")

    for key, value in updates.items():
        setattr(user, key, value)
    db.flush()
    logger.info("Updated user %d: %s", user.id, ", ".join(sorted(updates)))
    return user


# =============================================================================
# Teams and match officials
# =============================================================================

def authenticate_team(db: Session, email: str, password: str) -> Optional[Team]:
    """
    Return the team when credentials are valid.

    Team emails are not unique (one owner may run several teams), so every
    active team registered to the address is tried.
    """
    teams = (
        db.query(Team)
        .filter(Team.email == normalize_email(email), Team.active.is_(True))
        .order_by(Team.id)
        .all()
    )
    for team in teams:
        if verify_password(password, team.password_hash):
            return team
    return None


def authenticate_official(db: Session, email: str, password: str) -> Optional[MatchOfficial]:
    official = (
        db.query(MatchOfficial)
        .filter(MatchOfficial.email == normalize_email(email))
        .first()
    )
    if not official or not verify_password(password, official.password_hash):
        return None
    return official


# =============================================================================
# Admins
# =============================================================================

def authenticate_admin(
    db: Session,
    username: str,
    password: str,
) -> Optional[AdminUser]:
    """Return active admin user when credentials are valid."""
    admin = db.query(AdminUser).filter(AdminUser.username == username.strip().lower()).first()
    if not admin or not admin.is_active:
        return None
    if not verify_password(password, admin.password_hash):
        return None
    return admin


def create_or_update_admin_user(
    db: Session,
    username: str,
    password: str,
    name: Optional[str] = None,
    is_active: bool = True,
) -> AdminUser:
    """Create a new admin user, or update an existing one by username."""
    normalized = username.strip().lower()
    if not normalized:
        raise ValueError("Username cannot be empty")

    admin = db.query(AdminUser).filter(AdminUser.username == normalized).first()
    password_hash = hash_password(password)
    if admin:
        admin.password_hash = password_hash
        admin.is_active = is_active
        if name is not None:
            admin.name = name
    else:
        admin = AdminUser(
            username=normalized,
            name=name or normalized,
            password_hash=password_hash,
            is_active=is_active,
        )
        db.add(admin)
    db.flush()
    return admin


def mark_admin_login(db: Session, admin: AdminUser) -> None:
    """Record login timestamp for auditability."""
    admin.last_login_at = datetime.utcnow()
    db.flush()
