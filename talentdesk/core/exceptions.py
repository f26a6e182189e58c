"""
Application error taxonomy.

Data-access and service code raises these; the handlers registered in
main.py turn them into JSON error responses with the matching status code.
"""

from typing import Dict, Optional


class TalentDeskError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code: int = 500

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(TalentDeskError):
    """Missing or malformed input, password policy failures."""
    status_code = 400


class AuthError(TalentDeskError):
    """Missing/invalid/expired token or wrong password."""
    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(TalentDeskError):
    status_code = 404


class ConflictError(TalentDeskError):
    """Duplicate email or slug, or a write that conflicts with current state."""
    status_code = 409


class InvalidTransitionError(ConflictError):
    """Requested pipeline stage is not reachable from the current stage."""


class FileTooLargeError(TalentDeskError):
    status_code = 413
