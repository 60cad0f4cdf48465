"""
Domain exceptions for the voting application.

Services raise these; the error handlers registered in ``errors.py`` turn
them into JSON responses with the matching HTTP status.
"""

from typing import Any, Optional


class VotingAppError(Exception):
    """Base exception for all application errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class AuthenticationError(VotingAppError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AuthorizationError(VotingAppError):
    """Authenticated, but not allowed to do this."""

    status_code = 403


class NotFoundError(VotingAppError):
    status_code = 404


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User not found", code="USER_NOT_FOUND", details={"user_id": user_id})


class InvalidOptionError(VotingAppError):
    """Raised when a vote names an option outside the fixed option set."""

    def __init__(self, option_id: str):
        super().__init__("Invalid voting option", code="INVALID_OPTION", details={"option_id": option_id})


class DuplicateVoteError(VotingAppError):
    """Raised when a user that already voted tries to vote again."""

    def __init__(self, user_id: str):
        super().__init__("You have already voted", code="ALREADY_VOTED", details={"user_id": user_id})


class NotEligibleError(AuthorizationError):
    def __init__(self, user_id: str):
        super().__init__(
            "NFT ownership could not be confirmed",
            code="NOT_ELIGIBLE",
            details={"user_id": user_id},
        )
