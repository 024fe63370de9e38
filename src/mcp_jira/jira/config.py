"""Configuration module for Jira API interactions."""

import os
from collections.abc import Callable
from dataclasses import dataclass, field

from ..exceptions import MCPJiraError
from ..utils.env import getenv_first, is_env_ssl_verify
from .constants import (
    AUTH_REQUIRED_MESSAGE,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded linear-backoff retry policy for one pipeline call.

    Attempt ``n`` (1-based) is preceded by a sleep of ``base_delay * (n - 1)``
    seconds; at most ``max_retries + 1`` attempts are made.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY_MS / 1000
    # Overrides retry eligibility; 401/403/404 are never retried regardless
    retry_condition: Callable[[MCPJiraError], bool] | None = field(
        default=None, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be a non-negative integer")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class JiraConfig:
    """Jira Cloud API configuration.

    Authentication is HTTP Basic with the account email as username and an
    API token as password.
    """

    url: str  # Base URL for Jira, without trailing slash
    email: str  # Account email (Basic auth username)
    api_token: str  # API token (Basic auth password)
    timeout: int = DEFAULT_TIMEOUT_SECONDS  # Per-request timeout in seconds
    ssl_verify: bool = True
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        self.url = self.url.rstrip("/")

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Create configuration from environment variables.

        Returns:
            JiraConfig with values from environment variables

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        url = getenv_first("JIRA_BASE_URL", "JIRA_URL")
        email = getenv_first("JIRA_EMAIL", "JIRA_USERNAME")
        api_token = os.getenv("JIRA_API_TOKEN")

        if not all([url, email, api_token]):
            raise ValueError(AUTH_REQUIRED_MESSAGE)

        retry_policy = RetryPolicy(
            max_retries=_int_env("JIRA_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            base_delay=_int_env("JIRA_RETRY_DELAY", DEFAULT_BASE_DELAY_MS) / 1000,
        )

        timeout = _int_env("JIRA_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
        if timeout <= 0:
            raise ValueError("JIRA_TIMEOUT must be a positive number of seconds")

        return cls(
            url=url,  # type: ignore[arg-type]
            email=email,  # type: ignore[arg-type]
            api_token=api_token,  # type: ignore[arg-type]
            timeout=timeout,
            ssl_verify=is_env_ssl_verify("JIRA_SSL_VERIFY"),
            retry_policy=retry_policy,
        )
