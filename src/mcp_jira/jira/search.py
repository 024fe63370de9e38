"""Module for Jira search operations."""

import logging
from typing import Any

from ..models.jira import JiraSearchResult
from .client import JiraClient
from .constants import DEFAULT_SEARCH_MAX_RESULTS
from .utils import sanitize_jql

logger = logging.getLogger("mcp-jira.search")

MY_ISSUES_JQL = "assignee = currentUser() ORDER BY updated DESC"


class SearchMixin(JiraClient):
    """Mixin for Jira search operations."""

    def search_issues(
        self,
        jql: str,
        next_page_token: str | None = None,
        max_results: int = DEFAULT_SEARCH_MAX_RESULTS,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
    ) -> JiraSearchResult:
        """
        Search for issues using JQL (Jira Query Language).

        Args:
            jql: JQL query string; sanitized before it is sent
            next_page_token: Token of the page to fetch, from a previous result
            max_results: Maximum number of results to return
            fields: Specific fields to retrieve
            expand: Additional details to include

        Returns:
            One page of matching issues
        """
        body: dict[str, Any] = {
            "jql": sanitize_jql(jql),
            "maxResults": max_results,
        }
        if next_page_token:
            body["nextPageToken"] = next_page_token
        if fields:
            body["fields"] = list(fields)
        if expand:
            body["expand"] = ",".join(expand)

        logger.debug(f"Searching issues with JQL: {body['jql']}")
        data = self.request("POST", "search/jql", json=body)
        return JiraSearchResult.from_api_response(data, max_results=max_results)

    def get_my_issues(
        self,
        next_page_token: str | None = None,
        max_results: int = DEFAULT_SEARCH_MAX_RESULTS,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
    ) -> JiraSearchResult:
        """Get issues assigned to the current user, most recently updated first."""
        return self.search_issues(
            MY_ISSUES_JQL,
            next_page_token=next_page_token,
            max_results=max_results,
            fields=fields,
            expand=expand,
        )
