"""
Custom exceptions for Task Sync.

Provides structured error handling for record validation, the integration
registry, and integration services.
"""

from dataclasses import dataclass
from typing import Any


class TaskSyncError(Exception):
    """Base exception for Task Sync."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


@dataclass(frozen=True)
class ValidationIssue:
    """A single violated constraint on one field."""

    path: str
    message: str
    type: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


class RecordValidationError(TaskSyncError):
    """
    Raised when an integration payload does not match its record schema.

    Carries every violated field rather than only the first, so callers can
    report the full set of problems with a provider response.
    """

    def __init__(
        self,
        record_type: str,
        issues: list[ValidationIssue],
        original_error: Exception | None = None,
    ):
        summary = "; ".join(str(issue) for issue in issues)
        super().__init__(
            f"{record_type} validation failed: {summary}",
            original_error=original_error,
        )
        self.record_type = record_type
        self.issues = issues

    @property
    def fields(self) -> list[str]:
        """Paths of the fields that failed validation, in report order."""
        return [issue.path for issue in self.issues]


class IntegrationNotFoundError(TaskSyncError):
    """Requested integration key is not registered."""

    def __init__(self, key: str):
        super().__init__(f"Integration '{key}' is not registered")
        self.key = key


class ScriptExecutionError(TaskSyncError):
    """
    An automation script (osascript) failed or returned unreadable output.

    Causes:
    - Automation permission denied for Reminders or Calendar
    - Application unavailable
    - Script timed out
    """


class GitHubError(TaskSyncError):
    """Base exception for GitHub API operations."""

    retryable: bool = False


class GitHubAuthError(GitHubError):
    """
    Authentication or authorization failure.

    Causes:
    - Missing or revoked personal access token
    - Token lacks repo scope
    """

    retryable = False


class GitHubNotFoundError(GitHubError):
    """Repository not found or not visible to the token."""

    retryable = False


class GitHubRateLimitError(GitHubError):
    """
    Rate limit hit (429, or 403 with exhausted quota).

    Retryable after exponential backoff.
    """

    retryable = True


class GitHubServerError(GitHubError):
    """GitHub returned a 5xx response. Retryable."""

    retryable = True
