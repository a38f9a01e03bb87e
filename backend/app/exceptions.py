"""Custom exception classes for Skill Profile Builder.

All exceptions follow the SPB error format:
{
    "error": {
        "code": "SPB_ERROR_CODE",
        "message": "Human-readable message",
        "details": {}  # optional
    }
}

Error messages must not contain PII (usernames, emails, tokens).
"""

from __future__ import annotations

from typing import Any


class SPBBaseError(Exception):
    """Base exception for Skill Profile Builder."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class GitHubAPIError(SPBBaseError):
    """GitHub API specific errors."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(
            code="GITHUB_API_ERROR",
            message=message,
            status_code=status_code,
        )


class GitHubNotFoundError(SPBBaseError):
    """A GitHub resource (repository, stats) does not exist."""

    def __init__(
        self,
        code: str = "GITHUB_NOT_FOUND",
        message: str = "GitHub resource not found",
    ) -> None:
        super().__init__(code=code, message=message, status_code=404)


class GitHubUserNotFoundError(GitHubNotFoundError):
    """GitHub user not found."""

    def __init__(self) -> None:
        super().__init__(
            code="GITHUB_USER_NOT_FOUND",
            message="GitHub user not found",
        )


class GitHubRateLimitError(SPBBaseError):
    """GitHub API rate limit exceeded."""

    def __init__(self, retry_after: int | None = None) -> None:
        details = {}
        if retry_after:
            details["retry_after_seconds"] = retry_after
        super().__init__(
            code="GITHUB_RATE_LIMIT",
            message="GitHub API rate limit exceeded. Try again later.",
            status_code=429,
            details=details,
        )


class LinkedAccountNotFoundError(SPBBaseError):
    """The application user has no linked GitHub account."""

    def __init__(self) -> None:
        super().__init__(
            code="LINKED_ACCOUNT_NOT_FOUND",
            message="No GitHub account is linked to this user",
            status_code=404,
        )


class SkillNotFoundError(SPBBaseError):
    """No learning progress record exists for the skill."""

    def __init__(self) -> None:
        super().__init__(
            code="SKILL_NOT_FOUND",
            message="Skill not found for this user",
            status_code=404,
        )


class PersistenceError(SPBBaseError):
    """A write to the profile store failed."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            code="PERSISTENCE_ERROR",
            message=f"Failed to persist {entity}",
            status_code=500,
            details={"entity": entity},
        )


class ValidationError(SPBBaseError):
    """Input validation error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


# GitHub failures that only affect a single repository during sync
REPOSITORY_SYNC_ERRORS: tuple[type[SPBBaseError], ...] = (
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
