"""
Transactional email over SMTP.

All sends are best-effort: ``Mailer.send`` logs failures and returns False
instead of raising, so a flaky relay never rolls back an approval or a
roster change. Callers that must know about delivery (OTP codes) check the
return value.

Message bodies for every notification the API sends live here as small
helper methods so route handlers only pass the facts.
"""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from fbscore.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SITE_NAME = "fbscore"


class Mailer:
    """Thin SMTP client configured from settings."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def send(self, to_email: str, subject: str, body: str) -> bool:
        """Send a plain-text message. Returns True on success. Never raises."""
        if not self.config.mail_enabled:
            logger.info("Mail disabled; would send %r to %s", subject, to_email)
            return True

        msg = MIMEMultipart()
        msg["From"] = self.config.mail_from
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body.strip(), "plain"))

        try:
            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=30) as server:
                server.starttls()
                if self.config.smtp_username:
                    server.login(self.config.smtp_username, self.config.smtp_password or "")
                server.sendmail(self.config.mail_from, to_email, msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("Failed to send %r to %s: %s", subject, to_email, exc)
            return False

        logger.info("Sent %r to %s", subject, to_email)
        return True

    # ------------------------------------------------------------------
    # Notification templates
    # ------------------------------------------------------------------

    def send_otp(self, to_email: str, code: str, purpose_label: str, ttl_seconds: int) -> bool:
        minutes = max(1, ttl_seconds // 60)
        return self.send(
            to_email,
            f"Your {SITE_NAME} verification code",
            f"""
Dear User,

Your OTP for {purpose_label} is: {code}

This OTP is valid for {minutes} minute(s). Do not share it with anyone.
""",
        )

    def send_team_decision(self, to_email: str, teamname: str, accepted: bool) -> bool:
        if accepted:
            body = (
                f"Congratulations! Your registration for team '{teamname}' has been accepted by "
                f"{SITE_NAME}. Sign in with {to_email} and your password."
            )
        else:
            body = (
                f"Your registration for team '{teamname}' has been rejected by {SITE_NAME}. "
                "You can apply again later."
            )
        return self.send(to_email, "Team registration", body)

    def send_official_decision(self, to_email: str, name: str, accepted: bool) -> bool:
        if accepted:
            body = (
                f"Dear {name}, your match official request has been accepted by {SITE_NAME}. "
                f"Sign in with {to_email} and your password."
            )
        else:
            body = (
                f"Dear {name}, your match official request has been rejected by {SITE_NAME}. "
                "You can apply again later."
            )
        return self.send(to_email, "Match official request", body)

    def send_player_invitation(self, to_email: str, teamname: str, player_no: str) -> bool:
        return self.send(
            to_email,
            "Team invitation",
            f"{teamname} has invited you to join their roster wearing number {player_no}. "
            f"Sign in to {SITE_NAME} to accept or reject the invitation.",
        )

    def send_invitation_decision(
        self, to_email: str, player_name: str, teamname: str, accepted: bool
    ) -> bool:
        verdict = "accepted" if accepted else "rejected"
        return self.send(
            to_email,
            "Team invitation response",
            f"{player_name} has {verdict} the invitation to join {teamname}.",
        )

    def send_player_removed(self, to_email: str, player_name: str, teamname: str) -> bool:
        return self.send(
            to_email,
            "Removed from team",
            f"Dear {player_name}, you have been removed from the {teamname} roster.",
        )


_mailer: Optional[Mailer] = None


def get_mailer() -> Mailer:
    """FastAPI dependency returning the process-wide mailer."""
    global _mailer
    if _mailer is None:
        _mailer = Mailer()
    return _mailer
