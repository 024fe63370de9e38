"""
Common Jira entity models.

Small building blocks shared by issues, projects and comments: users,
statuses, priorities, issue types, components and attachments.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID, UNKNOWN

logger = logging.getLogger("mcp-jira.models.common")


def _as_dict(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    if data:
        logger.debug("Received non-dictionary data, using defaults")
    return {}


class JiraUser(ApiModel):
    """Model representing a Jira user."""

    account_id: str | None = None
    display_name: str = UNKNOWN
    email: str | None = None
    active: bool = True
    account_type: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraUser":
        data = _as_dict(data)
        if not data:
            return cls()
        return cls(
            account_id=data.get("accountId"),
            display_name=str(data.get("displayName") or UNKNOWN),
            email=data.get("emailAddress"),
            active=bool(data.get("active", True)),
            account_type=data.get("accountType"),
        )


class JiraStatusCategory(ApiModel):
    id: int = 0
    key: str = EMPTY_STRING
    name: str = UNKNOWN

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraStatusCategory":
        data = _as_dict(data)
        if not data:
            return cls()
        try:
            category_id = int(data.get("id", 0))
        except (TypeError, ValueError):
            category_id = 0
        return cls(
            id=category_id,
            key=str(data.get("key", EMPTY_STRING)),
            name=str(data.get("name") or UNKNOWN),
        )


class JiraStatus(ApiModel):
    """Model representing a Jira workflow status."""

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    description: str | None = None
    category: JiraStatusCategory | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraStatus":
        data = _as_dict(data)
        if not data:
            return cls()
        category = None
        if isinstance(data.get("statusCategory"), dict):
            category = JiraStatusCategory.from_api_response(data["statusCategory"])
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name") or UNKNOWN),
            description=data.get("description") or None,
            category=category,
        )


class JiraPriority(ApiModel):
    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    description: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraPriority":
        data = _as_dict(data)
        if not data:
            return cls()
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name") or UNKNOWN),
            description=data.get("description") or None,
        )


class JiraIssueType(ApiModel):
    """Model representing a Jira issue type."""

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    description: str | None = None
    subtask: bool = False
    hierarchy_level: int | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueType":
        data = _as_dict(data)
        if not data:
            return cls()
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name") or UNKNOWN),
            description=data.get("description") or None,
            subtask=bool(data.get("subtask", False)),
            hierarchy_level=data.get("hierarchyLevel"),
        )


class JiraComponent(ApiModel):
    id: str | None = None
    name: str = UNKNOWN

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraComponent":
        data = _as_dict(data)
        return cls(id=data.get("id"), name=str(data.get("name") or UNKNOWN))


class JiraAttachment(ApiModel):
    """Model representing a file attached to an issue."""

    id: str = JIRA_DEFAULT_ID
    filename: str = EMPTY_STRING
    size: int = 0
    mime_type: str | None = None
    created: str = EMPTY_STRING
    author: JiraUser | None = None
    content_url: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraAttachment":
        data = _as_dict(data)
        if not data:
            return cls()
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            size = 0
        author = None
        if isinstance(data.get("author"), dict):
            author = JiraUser.from_api_response(data["author"])
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            filename=str(data.get("filename", EMPTY_STRING)),
            size=size,
            mime_type=data.get("mimeType"),
            created=str(data.get("created") or EMPTY_STRING),
            author=author,
            content_url=data.get("content"),
            thumbnail_url=data.get("thumbnail"),
        )


class JiraField(ApiModel):
    """Model representing a field definition from GET /field."""

    id: str = EMPTY_STRING
    name: str = EMPTY_STRING
    custom: bool = False
    schema_type: str | None = None
    schema_custom: str | None = None
    clause_names: list[str] = Field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraField":
        data = _as_dict(data)
        schema = data.get("schema") if isinstance(data.get("schema"), dict) else {}
        clause_names = data.get("clauseNames")
        return cls(
            id=str(data.get("id", EMPTY_STRING)),
            name=str(data.get("name", EMPTY_STRING)),
            custom=bool(data.get("custom", False)),
            schema_type=schema.get("type"),
            schema_custom=schema.get("custom"),
            clause_names=[str(c) for c in clause_names]
            if isinstance(clause_names, list)
            else [],
        )
