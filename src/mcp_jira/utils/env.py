"""Environment variable utility functions for MCP Jira."""

import os


def is_env_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if environment variable is set to a standard truthy value.

    Considers 'true', '1', 'yes' as truthy values (case-insensitive).

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to a truthy value, False otherwise
    """
    return os.getenv(env_var_name, default).strip().lower() in ("true", "1", "yes")


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to a false value.
    """
    return os.getenv(env_var_name, default).strip().lower() not in (
        "false",
        "0",
        "no",
    )


def getenv_first(*env_var_names: str, default: str | None = None) -> str | None:
    """Return the first non-empty value among several environment variables.

    Used where a variable has a legacy alias (e.g. JIRA_BASE_URL / JIRA_URL).
    """
    for name in env_var_names:
        value = os.getenv(name)
        if value:
            return value
    return default


def is_redaction_enabled() -> bool:
    """Check whether PII redaction of formatted output is switched on."""
    return is_env_truthy("MCP_REDACT_SENSITIVE") or is_env_truthy("REDACT_SENSITIVE")


def is_dry_run() -> bool:
    """Check whether the startup connectivity check should be skipped."""
    return is_env_truthy("MCP_DRY_RUN")
