"""Utility functions for the MCP Jira integration."""

from .decorators import handle_tool_errors
from .env import getenv_first, is_dry_run, is_env_truthy, is_redaction_enabled
from .logging import log_config_param, mask_sensitive

__all__ = [
    "getenv_first",
    "handle_tool_errors",
    "is_dry_run",
    "is_env_truthy",
    "is_redaction_enabled",
    "log_config_param",
    "mask_sensitive",
]
