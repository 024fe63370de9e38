"""Exception hierarchy for MCP Jira.

Every failure observed while serving a tool call is raised as one of these
classes. The request pipeline picks the most specific class for an HTTP
response; the dispatcher renders whatever reaches it into the error envelope.
"""

from typing import Any


class MCPJiraError(Exception):
    """Base exception for MCP-Jira errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        if retryable is not None:
            self.retryable = retryable

    def __str__(self) -> str:
        return self.message


class MCPJiraValidationError(MCPJiraError):
    """Raised when tool input fails validation. Never reaches the network."""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems = problems or []

    def __str__(self) -> str:
        if not self.problems:
            return self.message
        return "\n".join([self.message, *self.problems])


class MCPJiraAuthenticationError(MCPJiraError):
    """Raised when Jira rejects the credentials (401)."""


class MCPJiraPermissionError(MCPJiraError):
    """Raised when the account lacks permission for the resource (403)."""


class MCPJiraNotFoundError(MCPJiraError):
    """Raised when the resource does not exist or is not visible (404)."""


class MCPJiraRateLimitError(MCPJiraError):
    """Raised when Jira throttles the account (429)."""

    retryable = True


class MCPJiraNetworkError(MCPJiraError):
    """Raised when no HTTP response was received."""

    retryable = True


class MCPJiraFieldError(MCPJiraError):
    """Raised when Jira answers with per-field validation errors."""

    def __init__(
        self,
        field_errors: dict[str, Any],
        status_code: int | None = None,
        retryable: bool | None = None,
    ) -> None:
        self.field_errors = {str(k): str(v) for k, v in field_errors.items()}
        message = ", ".join(f"{k}: {v}" for k, v in self.field_errors.items())
        super().__init__(message, status_code=status_code, retryable=retryable)


class MCPJiraApiError(MCPJiraError):
    """Raised when Jira answers with a list of error messages."""

    def __init__(
        self,
        messages: list[str],
        status_code: int | None = None,
        retryable: bool | None = None,
    ) -> None:
        self.messages = [str(m) for m in messages]
        super().__init__(
            ", ".join(self.messages), status_code=status_code, retryable=retryable
        )


class MCPJiraUnknownError(MCPJiraError):
    """Raised for failures that fit no other category."""
