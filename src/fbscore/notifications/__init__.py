"""Outbound notifications (transactional email)."""

from fbscore.notifications.email import Mailer, get_mailer

__all__ = ["Mailer", "get_mailer"]
