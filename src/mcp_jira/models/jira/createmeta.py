"""
Models for GET /issue/createmeta.
"""

from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID, UNKNOWN


class JiraCreateMetaField(ApiModel):
    id: str = EMPTY_STRING
    name: str = EMPTY_STRING
    required: bool = False
    schema_type: str | None = None
    allowed_values: list[str] = Field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCreateMetaField":
        if not isinstance(data, dict):
            return cls(id=kwargs.get("field_id", EMPTY_STRING))
        schema = data.get("schema") if isinstance(data.get("schema"), dict) else {}
        allowed = []
        for value in data.get("allowedValues") or []:
            if isinstance(value, dict):
                label = value.get("name") or value.get("value") or value.get("id")
                if label:
                    allowed.append(str(label))
        return cls(
            id=str(kwargs.get("field_id") or data.get("key") or EMPTY_STRING),
            name=str(data.get("name", EMPTY_STRING)),
            required=bool(data.get("required", False)),
            schema_type=schema.get("type"),
            allowed_values=allowed,
        )


class JiraCreateMetaIssueType(ApiModel):
    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    subtask: bool = False
    fields: list[JiraCreateMetaField] = Field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCreateMetaIssueType":
        if not isinstance(data, dict):
            return cls()
        raw_fields = data.get("fields") if isinstance(data.get("fields"), dict) else {}
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name") or UNKNOWN),
            subtask=bool(data.get("subtask", False)),
            fields=[
                JiraCreateMetaField.from_api_response(value, field_id=key)
                for key, value in raw_fields.items()
            ],
        )


class JiraCreateMetaProject(ApiModel):
    key: str = EMPTY_STRING
    name: str = UNKNOWN
    issue_types: list[JiraCreateMetaIssueType] = Field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCreateMetaProject":
        if not isinstance(data, dict):
            return cls()
        return cls(
            key=str(data.get("key", EMPTY_STRING)),
            name=str(data.get("name") or UNKNOWN),
            issue_types=JiraCreateMetaIssueType.from_api_list(data.get("issuetypes")),
        )


class JiraCreateMeta(ApiModel):
    projects: list[JiraCreateMetaProject] = Field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraCreateMeta":
        if not isinstance(data, dict):
            return cls()
        return cls(projects=JiraCreateMetaProject.from_api_list(data.get("projects")))
