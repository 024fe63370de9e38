"""
Jira search result models.

This module provides Pydantic models for Jira search (JQL) results.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from .issue import JiraIssue

logger = logging.getLogger("mcp-jira.models.search")


class JiraSearchResult(ApiModel):
    """
    Model representing a Jira search (JQL) result.

    POST /search/jql pages with nextPageToken and usually omits ``total``;
    ``total`` is -1 when Jira did not report it.
    """

    total: int = -1
    start_at: int = 0
    max_results: int = 0
    issues: list[JiraIssue] = Field(default_factory=list)
    next_page_token: str | None = None
    is_last: bool = True

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraSearchResult":
        """
        Create a JiraSearchResult from a Jira API response.

        Args:
            data: The search result data from the Jira API
            **kwargs: ``max_results`` requested, used when the response
                omits maxResults

        Returns:
            A JiraSearchResult instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        issues = JiraIssue.from_api_list(data.get("issues"))

        def _int(value: Any, default: int) -> int:
            try:
                return int(value) if value is not None else default
            except (TypeError, ValueError):
                return default

        next_token = data.get("nextPageToken")
        return cls(
            total=_int(data.get("total"), -1),
            start_at=_int(data.get("startAt"), 0),
            max_results=_int(data.get("maxResults"), kwargs.get("max_results", 0)),
            issues=issues,
            next_page_token=next_token,
            is_last=bool(data.get("isLast", next_token is None)),
        )
