"""Module for Jira user operations."""

import logging
from typing import Any

from ..models.jira import JiraUser
from .client import JiraClient

logger = logging.getLogger("mcp-jira.users")


class UsersMixin(JiraClient):
    """Mixin for Jira user operations."""

    def get_current_user(self) -> JiraUser:
        return JiraUser.from_api_response(self.request("GET", "myself"))

    def get_users(
        self,
        query: str | None = None,
        username: str | None = None,
        account_id: str | None = None,
        start_at: int = 0,
        max_results: int = 50,
    ) -> list[JiraUser]:
        """
        Search users by name, email, username or account id.

        Args:
            query: Matches display name and email
            username: Exact username
            account_id: Exact account id
            start_at: Index of the first user to return
            max_results: Maximum number of users to return

        Returns:
            Matching users
        """
        params: dict[str, Any] = {"startAt": start_at, "maxResults": max_results}
        if query:
            params["query"] = query
        if username:
            params["username"] = username
        if account_id:
            params["accountId"] = account_id
        return JiraUser.from_api_list(self.request("GET", "user/search", params=params))
