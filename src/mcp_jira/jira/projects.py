"""Module for Jira project operations."""

import logging
from typing import Any

from ..models.jira import JiraIssueType, JiraPriority, JiraProject, JiraStatus
from .client import JiraClient
from .constants import PROJECT_PAGE_SIZE

logger = logging.getLogger("mcp-jira.projects")


class ProjectsMixin(JiraClient):
    """Mixin for Jira project, issue type, priority and status lookups."""

    def get_visible_projects(
        self, expand: list[str] | None = None, recent: int | None = None
    ) -> list[JiraProject]:
        """
        Get all projects visible to the current user.

        Pages through GET /project/search until Jira reports the last page.

        Args:
            expand: Additional project details to include
            recent: Only return this many recently accessed projects

        Returns:
            List of projects
        """
        projects: list[JiraProject] = []
        start_at = 0
        while True:
            params: dict[str, Any] = {"startAt": start_at, "maxResults": PROJECT_PAGE_SIZE}
            if expand:
                params["expand"] = ",".join(expand)
            if recent is not None:
                params["recent"] = recent

            page = self.request("GET", "project/search", params=params) or {}
            values = page.get("values") or []
            projects.extend(JiraProject.from_api_list(values))

            if page.get("isLast", True) or not values:
                break
            start_at += len(values)

        logger.debug(f"Retrieved {len(projects)} visible project(s)")
        return projects

    def get_project_details(
        self, project_key: str, expand: list[str] | None = None
    ) -> JiraProject:
        params = {"expand": ",".join(expand)} if expand else None
        data = self.request("GET", f"project/{project_key}", params=params)
        return JiraProject.from_api_response(data)

    def get_issue_types(self, project_key: str | None = None) -> list[JiraIssueType]:
        """
        Get issue types, globally or for one project.

        Args:
            project_key: Restrict to the issue types of this project

        Returns:
            List of issue types
        """
        path = f"project/{project_key}/issuetype" if project_key else "issuetype"
        return JiraIssueType.from_api_list(self.request("GET", path))

    def get_priorities(self) -> list[JiraPriority]:
        return JiraPriority.from_api_list(self.request("GET", "priority"))

    def get_statuses(
        self, project_key: str | None = None, issue_type_id: str | None = None
    ) -> list[JiraStatus]:
        """
        Get workflow statuses.

        Without a project this is GET /status. With a project, statuses are
        taken from GET /project/{key}/statuses, which groups them by issue
        type: the group matching ``issue_type_id`` (by id or name) is used
        when given and found, otherwise all groups are flattened.

        Args:
            project_key: Project to read statuses for
            issue_type_id: Issue type id or name to narrow the result

        Returns:
            List of statuses
        """
        if not project_key:
            return JiraStatus.from_api_list(self.request("GET", "status"))

        groups = self.request("GET", f"project/{project_key}/statuses") or []
        groups = [g for g in groups if isinstance(g, dict)]

        if issue_type_id:
            for group in groups:
                if issue_type_id in (group.get("id"), group.get("name")):
                    return JiraStatus.from_api_list(group.get("statuses"))
            logger.debug(
                f"Issue type {issue_type_id} not found in {project_key}, "
                "returning all statuses"
            )

        statuses: list[JiraStatus] = []
        for group in groups:
            statuses.extend(JiraStatus.from_api_list(group.get("statuses")))
        return statuses
