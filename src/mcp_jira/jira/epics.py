"""Module for Jira epic operations."""

import logging
import re

from ..exceptions import MCPJiraError
from ..models.jira import JiraField, JiraSearchResult
from .client import JiraClient
from .constants import (
    DEFAULT_SEARCH_MAX_RESULTS,
    EPIC_FIELD_NAME_HINTS,
    EPIC_FIELD_NOT_FOUND_MESSAGE,
    EPIC_FIELD_SCHEMA_HINTS,
)

logger = logging.getLogger("mcp-jira.epics")

_CUSTOM_FIELD_ID = re.compile(r"^customfield_(\d+)$")


def is_epic_link_field(field: JiraField) -> bool:
    """Check whether a field definition looks like the Epic Link field."""
    if not field.custom:
        return False
    name = field.name.lower()
    schema_custom = (field.schema_custom or "").lower()
    return any(hint in name for hint in EPIC_FIELD_NAME_HINTS) or any(
        hint in schema_custom for hint in EPIC_FIELD_SCHEMA_HINTS
    )


def build_epic_jql(
    field_id: str, epic_key: str, include_subtasks: bool = False, order_by: str = "created"
) -> str:
    """
    Build the JQL selecting the issues of an epic.

    Args:
        field_id: Epic Link field id, e.g. 'customfield_10014'
        epic_key: Epic issue key
        include_subtasks: Also match issues whose parent is the epic
        order_by: Field to sort by, ascending

    Returns:
        JQL such as ``cf[10014] = EPIC-1 OR parent = EPIC-1 ORDER BY created ASC``

    Raises:
        MCPJiraError: If the field id has no numeric suffix
    """
    match = _CUSTOM_FIELD_ID.match(field_id)
    if not match:
        raise MCPJiraError(f"Invalid Epic Link field ID format: {field_id}")
    jql = f"cf[{match.group(1)}] = {epic_key}"
    if include_subtasks:
        jql += f" OR parent = {epic_key}"
    return f"{jql} ORDER BY {order_by} ASC"


class EpicsMixin(JiraClient):
    """Mixin for Jira epic operations."""

    def _discover_epic_link_field(self) -> str:
        fields = self.get_fields()  # type: ignore[attr-defined]
        for field in fields:
            if is_epic_link_field(field):
                logger.info(f"Found Epic Link field: {field.name} ({field.id})")
                return field.id
        raise MCPJiraError(EPIC_FIELD_NOT_FOUND_MESSAGE)

    def find_epic_link_field_id(self) -> str:
        """Resolve the Epic Link custom field id, discovering it once."""
        return self.epic_link_field_cache.resolve(self._discover_epic_link_field)

    def search_by_epic(
        self,
        epic_key: str,
        include_subtasks: bool = False,
        order_by: str = "created",
        next_page_token: str | None = None,
        max_results: int = DEFAULT_SEARCH_MAX_RESULTS,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
    ) -> JiraSearchResult:
        """
        Find the issues linked to an epic.

        Args:
            epic_key: Epic issue key
            include_subtasks: Also include issues whose parent is the epic
            order_by: Sort field (ascending)
            next_page_token: Token of the page to fetch
            max_results: Maximum number of results to return
            fields: Specific fields to retrieve
            expand: Additional details to include

        Returns:
            One page of matching issues

        Raises:
            MCPJiraError: If the instance has no Epic Link field
        """
        jql = build_epic_jql(
            self.find_epic_link_field_id(), epic_key, include_subtasks, order_by
        )
        return self.search_issues(  # type: ignore[attr-defined]
            jql,
            next_page_token=next_page_token,
            max_results=max_results,
            fields=fields,
            expand=expand,
        )
