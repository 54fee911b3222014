"""Domain errors raised by the services and rendered by ApiErrorMiddleware.

Ownership failures use NotFoundOrUnauthorizedError (404) so callers cannot
probe for resources they do not own. Conflicts are reported as 400.
"""
from __future__ import annotations

from typing import Any


class JobnetError(Exception):
    status_code = 500
    code = "SERVER_ERROR"
    default_message = "Server error"

    def __init__(self, message: str | None = None, detail: Any | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


# -----------------------------
# 400: validation
# -----------------------------
class ValidationError(JobnetError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidPostTypeError(ValidationError):
    code = "INVALID_POST_TYPE"
    default_message = "Invalid post type"


class MissingCvError(ValidationError):
    code = "MISSING_CV"
    default_message = "CV is required for job seeking posts"


class InvalidCvError(ValidationError):
    code = "INVALID_CV"
    default_message = "CV not found or not active"


class ExpiredPostError(ValidationError):
    code = "POST_EXPIRED"
    default_message = "This job post has expired and no longer accepts applications"


class InvalidStatusError(ValidationError):
    code = "INVALID_STATUS"
    default_message = "Invalid status"


class SelfFollowError(ValidationError):
    code = "SELF_FOLLOW"
    default_message = "Cannot follow yourself"


# -----------------------------
# 400: conflicts
# -----------------------------
class ConflictError(JobnetError):
    status_code = 400
    code = "CONFLICT"
    default_message = "Conflict"


class AlreadyFollowingError(ConflictError):
    code = "ALREADY_FOLLOWING"
    default_message = "Already following this user"


class DuplicateApplicationError(ConflictError):
    code = "DUPLICATE_APPLICATION"
    default_message = "Already applied to this post"


class CvInUseError(ConflictError):
    code = "CV_IN_USE"
    default_message = "CV is used by applications or posts; deactivate it instead"


# -----------------------------
# 401 / 403
# -----------------------------
class AuthenticationError(JobnetError):
    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class AuthorizationError(JobnetError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Access denied"


class ForbiddenError(AuthorizationError):
    pass


# -----------------------------
# 404
# -----------------------------
class NotFoundError(JobnetError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class NotFoundOrUnauthorizedError(NotFoundError):
    code = "NOT_FOUND_OR_UNAUTHORIZED"
    default_message = "Not found or not authorized"


# -----------------------------
# 500
# -----------------------------
class UnexpectedError(JobnetError):
    pass
