"""Content-safety error taxonomy.

Every error subclasses ``ValueError`` so service callers can keep catching the
broad type, and carries the HTTP status the API layer should answer with.
"""

from __future__ import annotations


class ContentSafetyError(ValueError):
    """Base class for report, block and moderation failures."""

    status_code: int = 400
    default_message: str = "The request could not be completed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotAuthenticated(ContentSafetyError):
    status_code = 401
    default_message = "You must be signed in to perform this action."


class InsufficientPermissions(ContentSafetyError):
    status_code = 403
    default_message = "You don't have permission to perform this action."


class AccountRestricted(ContentSafetyError):
    status_code = 403
    default_message = "Your account is restricted from posting."


class CannotReportOwnContent(ContentSafetyError):
    default_message = "You cannot report your own content."


class CannotBlockSelf(ContentSafetyError):
    default_message = "You cannot block yourself."


class AlreadyReported(ContentSafetyError):
    status_code = 409
    default_message = "You have already reported this content."


class AlreadyBlocked(ContentSafetyError):
    status_code = 409
    default_message = "This user is already blocked."


class InvalidStatusTransition(ContentSafetyError):
    status_code = 409
    default_message = "The report cannot move to that status."


class ReportNotFound(ContentSafetyError):
    status_code = 404
    default_message = "Report not found."


class ContentNotFound(ContentSafetyError):
    status_code = 404
    default_message = "The content you're trying to report was not found."


class UserNotFound(ContentSafetyError):
    status_code = 404
    default_message = "User not found."


class BlockNotFound(ContentSafetyError):
    status_code = 404
    default_message = "Block record not found."


class ValidationFailed(ContentSafetyError):
    status_code = 422
    default_message = "The request failed validation."


class StoreUnavailable(ContentSafetyError):
    status_code = 503
    default_message = "The data store is unavailable. Please try again."
