"""Module for Jira issue operations."""

import logging
from typing import Any

from ..exceptions import MCPJiraError
from ..models.jira import JiraCreateMeta, JiraIssue, JiraIssueType, ensure_adf
from .client import JiraClient

logger = logging.getLogger("mcp-jira.issues")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Marks an update argument the caller did not supply (distinct from None)
UNSET: Any = _Unset()


def build_optional_fields(
    *,
    description: str | dict[str, Any] | None = None,
    description_format: str = "plain",
    priority: str | None = None,
    assignee: str | None = None,
    labels: list[str] | None = None,
    components: list[str] | None = None,
) -> dict[str, Any]:
    """Build the optional part of a create request.

    Only supplied values produce keys; empty label and component lists are
    omitted.
    """
    fields: dict[str, Any] = {}
    if description is not None:
        fields["description"] = ensure_adf(description, description_format)
    if priority:
        fields["priority"] = {"name": priority}
    if assignee:
        fields["assignee"] = {"accountId": assignee}
    if labels:
        fields["labels"] = list(labels)
    if components:
        fields["components"] = [{"name": name} for name in components]
    return fields


def merge_custom_fields(
    fields: dict[str, Any], custom_fields: dict[str, Any] | None
) -> dict[str, Any]:
    """Add custom fields without overwriting any key already present."""
    for key, value in (custom_fields or {}).items():
        if key in fields:
            logger.warning(f"Ignoring custom field '{key}': it is set by a standard field")
            continue
        fields[key] = value
    return fields


class IssuesMixin(JiraClient):
    """Mixin for Jira issue operations."""

    def get_issue(
        self,
        issue_key: str,
        expand: list[str] | None = None,
        fields: list[str] | None = None,
    ) -> JiraIssue:
        """
        Get a single issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            expand: Additional issue details to include
            fields: Specific fields to retrieve

        Returns:
            The issue
        """
        params: dict[str, Any] = {}
        if expand:
            params["expand"] = ",".join(expand)
        if fields:
            params["fields"] = ",".join(fields)
        data = self.request("GET", f"issue/{issue_key}", params=params or None)
        return JiraIssue.from_api_response(data)

    def create_issue(
        self,
        project_key: str,
        summary: str,
        issue_type: str,
        description: str | dict[str, Any] | None = None,
        priority: str | None = None,
        assignee: str | None = None,
        labels: list[str] | None = None,
        components: list[str] | None = None,
        custom_fields: dict[str, Any] | None = None,
        description_format: str = "plain",
        return_issue: bool = True,
    ) -> JiraIssue | str:
        """
        Create a new issue.

        Args:
            project_key: Project the issue is created in
            summary: Issue summary
            issue_type: Issue type name (e.g. 'Bug')
            description: Plain text, ADF JSON string or ADF object
            priority: Priority name
            assignee: Assignee account id
            labels: Labels to set
            components: Component names
            custom_fields: Extra fields merged into the request; standard
                field keys are never overwritten
            description_format: 'markdown', 'plain' or 'adf'
            return_issue: Fetch and return the created issue; when False only
                the new key is returned

        Returns:
            The created issue, or its key
        """
        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": issue_type},
        }
        fields.update(
            build_optional_fields(
                description=description,
                description_format=description_format,
                priority=priority,
                assignee=assignee,
                labels=labels,
                components=components,
            )
        )
        merge_custom_fields(fields, custom_fields)

        created = self.request("POST", "issue", json={"fields": fields}) or {}
        issue_key = created.get("key")
        if not issue_key:
            raise MCPJiraError("Jira did not return a key for the created issue")
        logger.info(f"Created issue {issue_key} in project {project_key}")

        if not return_issue:
            return issue_key
        return self.get_issue(issue_key)

    def update_issue(
        self,
        issue_key: str,
        *,
        summary: Any = UNSET,
        description: Any = UNSET,
        priority: Any = UNSET,
        assignee: Any = UNSET,
        labels: Any = UNSET,
        components: Any = UNSET,
        description_format: str = "plain",
    ) -> None:
        """
        Update fields of an existing issue.

        Only arguments that were passed are sent. ``assignee=None`` or an
        empty string unassigns the issue; empty ``labels`` or ``components``
        lists clear them.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
        """
        fields: dict[str, Any] = {}
        if summary is not UNSET:
            fields["summary"] = summary
        if description is not UNSET:
            fields["description"] = ensure_adf(description, description_format)
        if priority is not UNSET:
            fields["priority"] = {"name": priority} if priority else None
        if assignee is not UNSET:
            fields["assignee"] = {"accountId": assignee} if assignee else None
        if labels is not UNSET:
            fields["labels"] = list(labels or [])
        if components is not UNSET:
            fields["components"] = [{"name": name} for name in components or []]

        if not fields:
            logger.debug(f"No fields to update for {issue_key}")
            return
        self.request("PUT", f"issue/{issue_key}", json={"fields": fields})
        logger.info(f"Updated issue {issue_key}: {', '.join(fields)}")

    def create_subtask(
        self,
        parent_issue_key: str,
        summary: str,
        description: str | dict[str, Any] | None = None,
        priority: str | None = None,
        assignee: str | None = None,
        labels: list[str] | None = None,
        components: list[str] | None = None,
        description_format: str = "plain",
    ) -> JiraIssue:
        """
        Create a subtask under an existing issue.

        The project comes from the parent and the issue type is the first
        subtask type of that project.

        Raises:
            MCPJiraError: If the project has no subtask issue type; no create
                request is sent in that case
        """
        parent = self.request(
            "GET", f"issue/{parent_issue_key}", params={"fields": "project"}
        ) or {}
        project = (parent.get("fields") or {}).get("project") or {}
        project_key = project.get("key")
        if not project_key:
            raise MCPJiraError(
                f"Could not determine the project of parent issue {parent_issue_key}"
            )

        issue_types: list[JiraIssueType] = self.get_issue_types(project_key)  # type: ignore[attr-defined]
        subtask_type = next((t for t in issue_types if t.subtask), None)
        if subtask_type is None:
            raise MCPJiraError(f"No subtask issue type found for project {project_key}")

        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "parent": {"key": parent_issue_key},
            "summary": summary,
            "issuetype": {"id": subtask_type.id},
        }
        fields.update(
            build_optional_fields(
                description=description,
                description_format=description_format,
                priority=priority,
                assignee=assignee,
                labels=labels,
                components=components,
            )
        )

        created = self.request("POST", "issue", json={"fields": fields}) or {}
        subtask_key = created.get("key")
        if not subtask_key:
            raise MCPJiraError("Jira did not return a key for the created subtask")
        logger.info(f"Created subtask {subtask_key} under {parent_issue_key}")
        return self.get_issue(subtask_key)

    def get_create_meta(
        self, project_key: str, issue_type_name: str | None = None
    ) -> JiraCreateMeta:
        """Get the fields available when creating issues in a project."""
        params: dict[str, Any] = {
            "projectKeys": project_key,
            "expand": "projects.issuetypes.fields",
        }
        if issue_type_name:
            params["issuetypeNames"] = issue_type_name
        return JiraCreateMeta.from_api_response(
            self.request("GET", "issue/createmeta", params=params)
        )
