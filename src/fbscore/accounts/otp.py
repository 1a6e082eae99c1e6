"""One-time code store backed by the database.

Codes are keyed by (purpose, email) so a user signup code can never be used
to register a team. Keeping them in the database rather than process memory
means every API replica sees the same codes and a restart does not drop them.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from fbscore.config import settings
from fbscore.db.models import OtpCode
from fbscore.errors import ValidationFailed

PURPOSE_USER = "user"
PURPOSE_TEAM = "team"
PURPOSE_OFFICIAL = "official"


def generate_code() -> str:
    """Four-digit numeric code (1000-9999)."""
    return str(1000 + secrets.randbelow(9000))


class DBOtpStore:
    """Simple expiring key/value store for one-time codes."""

    def __init__(self, session: Session, ttl_seconds: Optional[int] = None):
        self.session = session
        self.ttl = timedelta(
            seconds=ttl_seconds if ttl_seconds is not None else settings.otp_ttl_seconds
        )

    def issue(self, purpose: str, email: str, now: Optional[datetime] = None) -> str:
        """Create (or replace) the code for this purpose/email and return it."""
        now = now or datetime.utcnow()
        key = (purpose, email.strip().lower())
        code = generate_code()

        row = self.session.get(OtpCode, key)
        if row is None:
            row = OtpCode(purpose=key[0], email=key[1], code=code, expires_at=now + self.ttl)
            self.session.add(row)
        else:
            row.code = code
            row.expires_at = now + self.ttl

        self.session.flush()
        return code

    def verify(
        self,
        purpose: str,
        email: str,
        code: str,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Check a submitted code and consume it.

        Expired codes are left in place for purge_expired to remove.

        Raises:
            ValidationFailed: No code on record, wrong code, or expired
        """
        now = now or datetime.utcnow()
        row = self.session.get(OtpCode, (purpose, email.strip().lower()))
        if row is None:
            raise ValidationFailed("OTP not sent or expired")
        if row.code != str(code).strip():
            raise ValidationFailed("Invalid OTP")
        if now > row.expires_at:
            raise ValidationFailed("OTP expired")

        self.session.delete(row)
        self.session.flush()

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every expired code. Returns the number removed."""
        now = now or datetime.utcnow()
        removed = (
            self.session.query(OtpCode)
            .filter(OtpCode.expires_at < now)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return removed
