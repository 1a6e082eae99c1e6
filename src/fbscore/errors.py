"""
Error types raised by the service layer.

Services raise these instead of framework exceptions so they can be used from
scripts and tests without an HTTP context. The web app maps each type to its
status code in a single exception handler (see web/main.py).
"""

from __future__ import annotations

from typing import Any, Optional


class FbscoreError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(FbscoreError):
    """Malformed or inconsistent input (duplicate names, bad OTP, bad roster)."""

    status_code = 400


class AuthenticationFailed(FbscoreError):
    """Missing, malformed or rejected credentials."""

    status_code = 401


class PermissionDenied(FbscoreError):
    """Authenticated, but not the owner/creator of the resource or wrong state."""

    status_code = 403


class NotFound(FbscoreError):
    """A referenced record does not exist."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message or f"{resource_type} not found")


class ServiceUnavailable(FbscoreError):
    """A collaborator (mail relay) failed where the caller must be told."""

    status_code = 500
