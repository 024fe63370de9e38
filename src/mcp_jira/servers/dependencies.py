"""Dependency provider for the process-wide JiraFetcher.

The fetcher, and with it the underlying HTTP session, is created on first
use and reused for the lifetime of the process.
"""

import logging
import threading

from mcp_jira.jira import JiraConfig, JiraFetcher
from mcp_jira.utils.logging import log_config_param

logger = logging.getLogger("mcp-jira.servers.dependencies")

_fetcher: JiraFetcher | None = None
_fetcher_lock = threading.Lock()


def get_jira_fetcher() -> JiraFetcher:
    """
    Return the shared JiraFetcher, creating it from the environment if needed.

    Raises:
        ValueError: If the Jira credentials are not configured
    """
    global _fetcher
    if _fetcher is not None:
        return _fetcher
    with _fetcher_lock:
        if _fetcher is None:
            config = JiraConfig.from_env()
            log_config_param(logger, "Jira", "URL", config.url)
            log_config_param(logger, "Jira", "Email", config.email)
            log_config_param(logger, "Jira", "API Token", config.api_token, sensitive=True)
            log_config_param(logger, "Jira", "Timeout", f"{config.timeout}s")
            log_config_param(
                logger,
                "Jira",
                "Retries",
                f"{config.retry_policy.max_retries} "
                f"(base delay {config.retry_policy.base_delay}s)",
            )
            _fetcher = JiraFetcher(config=config)
        return _fetcher


def set_jira_fetcher(fetcher: JiraFetcher | None) -> None:
    """Replace (or clear, with None) the shared fetcher."""
    global _fetcher
    with _fetcher_lock:
        _fetcher = fetcher
