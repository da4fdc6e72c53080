"""
Error taxonomy for the lead intake backend.

Routers translate these into HTTP responses:
ValidationError -> 400, PersistenceError -> 500, AccessDenied -> 401,
ConfigError -> 500. NotifyError never reaches a submitter; the intake
pipeline downgrades it to a logged notification status.
"""

from typing import Dict, List, Optional


class IntakeError(Exception):
    """Base class for all errors raised by the intake backend."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(IntakeError):
    """Submitted fields failed the required-field or email-shape checks."""

    def __init__(self, message: str, issues: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.issues = issues or []


class PersistenceError(IntakeError):
    """The submission store was unavailable or rejected a read/write."""


class NotifyError(IntakeError):
    """The outbound mail channel failed to deliver a notification."""


class AccessDenied(IntakeError):
    """The supplied admin access code did not match."""


class ConfigError(IntakeError):
    """Server-side configuration required for the operation is missing."""
