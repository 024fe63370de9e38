"""
Jira comment models.

This module provides Pydantic models for Jira comments.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID
from .adf import adf_to_text
from .common import JiraUser

logger = logging.getLogger("mcp-jira.models.comment")


class JiraCommentVisibility(ApiModel):
    type: str = EMPTY_STRING
    value: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCommentVisibility":
        if not isinstance(data, dict):
            return cls()
        return cls(
            type=str(data.get("type", EMPTY_STRING)),
            value=str(data.get("value", EMPTY_STRING)),
        )


class JiraComment(ApiModel):
    """
    Model representing a Jira issue comment.
    """

    id: str = JIRA_DEFAULT_ID
    body: str = EMPTY_STRING
    created: str = EMPTY_STRING
    updated: str = EMPTY_STRING
    author: JiraUser | None = None
    visibility: JiraCommentVisibility | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraComment":
        """
        Create a JiraComment from a Jira API response.

        Args:
            data: The comment data from the Jira API

        Returns:
            A JiraComment instance
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        author = None
        if isinstance(data.get("author"), dict):
            author = JiraUser.from_api_response(data["author"])

        visibility = None
        if isinstance(data.get("visibility"), dict):
            visibility = JiraCommentVisibility.from_api_response(data["visibility"])

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            body=adf_to_text(data.get("body")),
            created=str(data.get("created") or EMPTY_STRING),
            updated=str(data.get("updated") or EMPTY_STRING),
            author=author,
            visibility=visibility,
        )


class JiraCommentPage(ApiModel):
    """One page of GET /issue/{key}/comment."""

    comments: list[JiraComment] = Field(default_factory=list)
    start_at: int = 0
    max_results: int = 0
    total: int = 0

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCommentPage":
        if not isinstance(data, dict):
            return cls()
        comments = JiraComment.from_api_list(data.get("comments"))
        try:
            total = int(data.get("total", len(comments)))
            start_at = int(data.get("startAt", 0))
            max_results = int(data.get("maxResults", len(comments)))
        except (TypeError, ValueError):
            total, start_at, max_results = len(comments), 0, len(comments)
        return cls(
            comments=comments,
            start_at=start_at,
            max_results=max_results,
            total=total,
        )
