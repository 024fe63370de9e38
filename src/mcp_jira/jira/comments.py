"""Module for Jira comment operations."""

import logging
from typing import Any

from ..models.jira import JiraComment, JiraCommentPage, ensure_adf
from .client import JiraClient

logger = logging.getLogger("mcp-jira.comments")


class CommentsMixin(JiraClient):
    """Mixin for Jira comment operations."""

    def get_comments(
        self,
        issue_key: str,
        max_results: int | None = None,
        order_by: str | None = None,
        start_at: int | None = None,
    ) -> JiraCommentPage:
        """
        Get one page of comments for an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            max_results: Maximum number of comments to return
            order_by: 'created', '-created' or '+created'
            start_at: Index of the first comment to return

        Returns:
            The page of comments with bodies flattened to plain text
        """
        params: dict[str, Any] = {}
        if max_results is not None:
            params["maxResults"] = max_results
        if order_by is not None:
            params["orderBy"] = order_by
        if start_at is not None:
            params["startAt"] = start_at
        data = self.request("GET", f"issue/{issue_key}/comment", params=params or None)
        return JiraCommentPage.from_api_response(data)

    def add_comment(
        self,
        issue_key: str,
        body: str | dict[str, Any],
        visibility: dict[str, str] | None = None,
        body_format: str = "plain",
    ) -> JiraComment:
        """Add a comment to an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            body: Plain text, ADF JSON string or ADF object
            visibility: (optional) Restrict comment visibility
                (e.g. {"type": "group", "value": "jira-users"})
            body_format: 'markdown', 'plain' or 'adf'

        Returns:
            The created comment
        """
        data: dict[str, Any] = {"body": ensure_adf(body, body_format)}
        if visibility:
            data["visibility"] = visibility
        result = self.request("POST", f"issue/{issue_key}/comment", json=data)
        logger.info(f"Added comment to {issue_key}")
        return JiraComment.from_api_response(result)
