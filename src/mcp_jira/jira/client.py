"""Base client module for Jira API interactions.

Every outbound call goes through ``JiraClient.request``: authentication and
timeout come from the shared ``atlassian.Jira`` session, failures are
classified into the exception hierarchy, and retryable failures are retried
with linear backoff.
"""

import logging
import time
from typing import Any

import requests
from atlassian import Jira

from ..exceptions import (
    MCPJiraApiError,
    MCPJiraAuthenticationError,
    MCPJiraError,
    MCPJiraFieldError,
    MCPJiraNetworkError,
    MCPJiraNotFoundError,
    MCPJiraPermissionError,
    MCPJiraRateLimitError,
)
from ..utils.logging import mask_sensitive
from .cache import EpicLinkFieldCache
from .config import JiraConfig, RetryPolicy
from .constants import (
    API_BASE_PATH,
    INVALID_CREDENTIALS_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    PERMISSION_DENIED_MESSAGE,
    RATE_LIMIT_MESSAGE,
)

logger = logging.getLogger("mcp-jira.client")

# Statuses that are terminal no matter what a retry_condition says
NEVER_RETRY_STATUSES = frozenset({401, 403, 404})


def _error_payload(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def classify_response(response: requests.Response) -> MCPJiraError:
    """Map a non-2xx response to the most specific exception.

    Args:
        response: The failed HTTP response

    Returns:
        The exception describing the failure (not raised)
    """
    status = response.status_code
    payload = _error_payload(response)
    messages = [m for m in payload.get("errorMessages") or [] if m]
    detail = f" {', '.join(messages)}" if messages else ""

    if status == 401:
        return MCPJiraAuthenticationError(INVALID_CREDENTIALS_MESSAGE, status_code=401)
    if status == 403:
        return MCPJiraPermissionError(
            f"{PERMISSION_DENIED_MESSAGE}{detail}", status_code=403
        )
    if status == 404:
        return MCPJiraNotFoundError(f"{NOT_FOUND_MESSAGE}{detail}", status_code=404)
    if status == 429:
        return MCPJiraRateLimitError(RATE_LIMIT_MESSAGE, status_code=429)

    retryable = status >= 500
    field_errors = payload.get("errors")
    if isinstance(field_errors, dict) and field_errors:
        return MCPJiraFieldError(field_errors, status_code=status, retryable=retryable)
    if messages:
        return MCPJiraApiError(messages, status_code=status, retryable=retryable)
    reason = response.reason or "Request failed"
    return MCPJiraApiError(
        [f"HTTP {status}: {reason}"], status_code=status, retryable=retryable
    )


class JiraClient:
    """Base client for Jira API interactions."""

    def __init__(self, config: JiraConfig | None = None) -> None:
        """Initialize the Jira client with a given configuration.

        The underlying ``atlassian.Jira`` session is created on first use.

        Args:
            config: Jira configuration object. If None, will be loaded from
                environment variables.
        """
        self.config = config if config is not None else JiraConfig.from_env()
        self._jira: Jira | None = None
        self.epic_link_field_cache = EpicLinkFieldCache()

    @property
    def jira(self) -> Jira:
        if self._jira is None:
            logger.debug(
                f"Creating Jira session for {self.config.url} as {self.config.email} "
                f"(token {mask_sensitive(self.config.api_token)})"
            )
            self._jira = Jira(
                url=self.config.url,
                username=self.config.email,
                password=self.config.api_token,
                cloud=True,
                timeout=self.config.timeout,
                verify_ssl=self.config.ssl_verify,
            )
        return self._jira

    @jira.setter
    def jira(self, value: Jira) -> None:
        self._jira = value

    @staticmethod
    def _api_path(path: str) -> str:
        if path.startswith(("http://", "https://", "/")):
            return path
        return f"{API_BASE_PATH}/{path}"

    @staticmethod
    def _should_retry(error: MCPJiraError, policy: RetryPolicy) -> bool:
        if error.status_code in NEVER_RETRY_STATUSES:
            return False
        if policy.retry_condition is not None:
            return bool(policy.retry_condition(error))
        return error.retryable

    def request_raw(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> requests.Response:
        """Execute one API call with retries and return the raw 2xx response.

        Args:
            method: HTTP method
            path: Path relative to /rest/api/3, or an absolute path or URL
            params: Query parameters
            json: JSON body
            files: Multipart files (see requests)
            headers: Headers replacing the session's JSON defaults
            retry_policy: Overrides the configured policy for this call

        Returns:
            The successful response

        Raises:
            MCPJiraError: The last classified failure once retries are exhausted
        """
        policy = retry_policy or self.config.retry_policy
        api_path = self._api_path(path)
        max_attempts = policy.max_retries + 1
        last_error: MCPJiraError | None = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = policy.base_delay * (attempt - 1)
                logger.warning(
                    f"{method} {api_path} retry {attempt - 1}/{policy.max_retries} "
                    f"in {delay:.2f}s after: {last_error}"
                )
                time.sleep(delay)

            try:
                response = self.jira.request(
                    method=method,
                    path=api_path,
                    params=params,
                    json=json,
                    files=files,
                    headers=headers,
                    absolute=api_path.startswith(("http://", "https://")),
                    advanced_mode=True,
                )
            except requests.RequestException as e:
                error: MCPJiraError = MCPJiraNetworkError(
                    f"{NETWORK_ERROR_MESSAGE} {e}"
                )
            else:
                if response.ok:
                    logger.debug(
                        f"{method} {api_path} -> {response.status_code} "
                        f"(attempt {attempt})"
                    )
                    return response
                error = classify_response(response)

            last_error = error
            if attempt >= max_attempts or not self._should_retry(error, policy):
                break

        assert last_error is not None
        logger.error(
            f"{method} {api_path} failed"
            f"{f' with HTTP {last_error.status_code}' if last_error.status_code else ''}: "
            f"{last_error}"
        )
        raise last_error

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> Any:
        """Execute one API call and decode the JSON payload.

        Returns:
            Decoded JSON body, the raw text for non-JSON bodies, or None for
            an empty body (e.g. 204 No Content)
        """
        response = self.request_raw(
            method,
            path,
            params=params,
            json=json,
            files=files,
            headers=headers,
            retry_policy=retry_policy,
        )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def test_connection(self) -> bool:
        """Check that the configured credentials can reach Jira."""
        try:
            user = self.request("GET", "myself", retry_policy=RetryPolicy(max_retries=0))
        except MCPJiraError as e:
            logger.error(f"Jira connectivity check failed: {e}")
            return False
        name = user.get("displayName", "unknown") if isinstance(user, dict) else "unknown"
        logger.info(f"Connected to Jira as {name}")
        return True
