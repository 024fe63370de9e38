"""
Jira issue models.

This module provides the Pydantic model for Jira issues as returned by
GET /issue/{key} and by JQL search.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID
from .adf import adf_to_text
from .common import (
    JiraAttachment,
    JiraComponent,
    JiraIssueType,
    JiraPriority,
    JiraStatus,
    JiraUser,
)

logger = logging.getLogger("mcp-jira.models.issue")


class JiraIssueProject(ApiModel):
    key: str = EMPTY_STRING
    name: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueProject":
        if not isinstance(data, dict):
            return cls()
        return cls(
            key=str(data.get("key", EMPTY_STRING)),
            name=str(data.get("name", EMPTY_STRING)),
        )


class JiraIssue(ApiModel):
    """
    Model representing a Jira issue.

    The description is flattened from ADF to plain text on construction.
    """

    id: str = JIRA_DEFAULT_ID
    key: str = EMPTY_STRING
    summary: str = EMPTY_STRING
    description: str | None = None
    status: JiraStatus | None = None
    priority: JiraPriority | None = None
    assignee: JiraUser | None = None
    reporter: JiraUser | None = None
    project: JiraIssueProject | None = None
    issue_type: JiraIssueType | None = None
    labels: list[str] = Field(default_factory=list)
    components: list[JiraComponent] = Field(default_factory=list)
    attachments: list[JiraAttachment] = Field(default_factory=list)
    parent_key: str | None = None
    created: str = EMPTY_STRING
    updated: str = EMPTY_STRING

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraIssue":
        """
        Create a JiraIssue from a Jira API response.

        Args:
            data: The issue data from the Jira API

        Returns:
            A JiraIssue instance
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        fields = data.get("fields")
        if not isinstance(fields, dict):
            fields = {}

        def _model(model: type[ApiModel], key: str) -> Any:
            value = fields.get(key)
            return model.from_api_response(value) if isinstance(value, dict) else None

        description = adf_to_text(fields.get("description")) or None

        labels = fields.get("labels")
        parent = fields.get("parent")

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            key=str(data.get("key", EMPTY_STRING)),
            summary=str(fields.get("summary") or EMPTY_STRING),
            description=description,
            status=_model(JiraStatus, "status"),
            priority=_model(JiraPriority, "priority"),
            assignee=_model(JiraUser, "assignee"),
            reporter=_model(JiraUser, "reporter"),
            project=_model(JiraIssueProject, "project"),
            issue_type=_model(JiraIssueType, "issuetype"),
            labels=[str(label) for label in labels] if isinstance(labels, list) else [],
            components=JiraComponent.from_api_list(fields.get("components")),
            attachments=JiraAttachment.from_api_list(fields.get("attachment")),
            parent_key=parent.get("key") if isinstance(parent, dict) else None,
            created=str(fields.get("created") or EMPTY_STRING),
            updated=str(fields.get("updated") or EMPTY_STRING),
        )
