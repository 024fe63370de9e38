"""
Jira project models.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID, UNKNOWN
from .common import JiraComponent, JiraIssueType, JiraUser

logger = logging.getLogger("mcp-jira.models.project")


class JiraProjectInsight(ApiModel):
    total_issue_count: int = 0
    last_issue_update_time: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraProjectInsight":
        if not isinstance(data, dict):
            return cls()
        try:
            total = int(data.get("totalIssueCount") or 0)
        except (TypeError, ValueError):
            total = 0
        return cls(
            total_issue_count=total,
            last_issue_update_time=data.get("lastIssueUpdateTime"),
        )


class JiraProject(ApiModel):
    """
    Model representing a Jira project.

    Covers both the summary returned by GET /project/search and the detailed
    view of GET /project/{key}; detail-only attributes stay empty for the
    summary form.
    """

    id: str = JIRA_DEFAULT_ID
    key: str = EMPTY_STRING
    name: str = UNKNOWN
    description: str | None = None
    project_type_key: str | None = None
    is_private: bool = False
    lead: JiraUser | None = None
    components: list[JiraComponent] = Field(default_factory=list)
    versions: list[str] = Field(default_factory=list)
    issue_types: list[JiraIssueType] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    insight: JiraProjectInsight | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraProject":
        """
        Create a JiraProject from a Jira API response.

        Args:
            data: The project data from the Jira API

        Returns:
            A JiraProject instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        lead = None
        if isinstance(data.get("lead"), dict):
            lead = JiraUser.from_api_response(data["lead"])

        versions = [
            str(v.get("name"))
            for v in data.get("versions") or []
            if isinstance(v, dict) and v.get("name")
        ]
        roles = data.get("roles")
        insight = None
        if isinstance(data.get("insight"), dict):
            insight = JiraProjectInsight.from_api_response(data["insight"])

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            key=str(data.get("key", EMPTY_STRING)),
            name=str(data.get("name") or UNKNOWN),
            description=data.get("description") or None,
            project_type_key=data.get("projectTypeKey"),
            is_private=bool(data.get("isPrivate", False)),
            lead=lead,
            components=JiraComponent.from_api_list(data.get("components")),
            versions=versions,
            issue_types=JiraIssueType.from_api_list(data.get("issueTypes")),
            roles=list(roles.keys()) if isinstance(roles, dict) else [],
            insight=insight,
        )
