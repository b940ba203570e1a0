"""
Error taxonomy shared by every module.

Each error carries the HTTP status class it surfaces as. The API layer
renders any TaskManagerError through a single exception handler, so modules
raise these instead of HTTPException.
"""


class TaskManagerError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "status": self.status_code}


class ValidationError(TaskManagerError):
    """Missing or malformed required field."""

    status_code = 400


class UnauthenticatedError(TaskManagerError):
    """No credential was presented."""

    status_code = 401


class ForbiddenError(TaskManagerError):
    """Credential presented but invalid, expired or blacklisted."""

    status_code = 403


class InvalidTokenError(ForbiddenError):
    """Token signature, shape or expiry check failed."""


class NotFoundError(TaskManagerError):
    """Resource absent, or not owned by the caller."""

    status_code = 404


class ConflictError(TaskManagerError):
    """Duplicate value for a unique field."""

    status_code = 409


class InternalError(TaskManagerError):
    """Store, hash or sign failure not caused by caller input."""

    status_code = 500


__all__ = [
    "TaskManagerError",
    "ValidationError",
    "UnauthenticatedError",
    "ForbiddenError",
    "InvalidTokenError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
]
