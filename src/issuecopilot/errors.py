"""Application specific exception hierarchy."""
from __future__ import annotations

from typing import Any


class IssueCopilotError(RuntimeError):
    """Base exception that carries structured context."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class JiraRequestError(IssueCopilotError):
    """Raised when a Jira request fails for a reason other than auth or a missing issue."""


class JiraAuthError(JiraRequestError):
    """Raised when Jira rejects the supplied credentials."""


class JiraIssueNotFoundError(JiraRequestError):
    """Raised when the requested issue does not exist or is not visible."""


class JiraPayloadError(IssueCopilotError):
    """Raised when Jira returns an issue payload with an unexpected shape."""


__all__ = [
    "IssueCopilotError",
    "JiraRequestError",
    "JiraAuthError",
    "JiraIssueNotFoundError",
    "JiraPayloadError",
]
