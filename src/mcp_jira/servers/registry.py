"""Static tool registry and dispatch.

The name-to-handler table and the tool definitions are built once at import.
``dispatch`` never raises: unknown tools and anything a handler lets escape
come back as the error envelope.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

from mcp.types import TextContent, Tool
from pydantic import BaseModel

from ..formatters import format_error
from ..logging_config import log_operation
from . import jira as handlers
from . import schemas

logger = logging.getLogger("mcp-jira.servers.registry")

ToolHandler = Callable[[dict[str, Any]], Awaitable[list[TextContent]]]


class ToolSpec(NamedTuple):
    handler: ToolHandler
    input_model: type[BaseModel]
    description: str


_TOOL_SPECS: dict[str, ToolSpec] = {
    "jira_get_visible_projects": ToolSpec(
        handlers.get_visible_projects,
        schemas.GetVisibleProjectsInput,
        "Lists all Jira projects visible to the current user, with key, name, "
        "type and privacy.",
    ),
    "jira_get_issue": ToolSpec(
        handlers.get_issue,
        schemas.GetIssueInput,
        "Retrieves a Jira issue by key: status, priority, assignee, reporter, "
        "labels, components, dates and description.",
    ),
    "jira_search_issues": ToolSpec(
        handlers.search_issues,
        schemas.SearchIssuesInput,
        "Searches issues with JQL (e.g. 'project = PROJ AND status = Open'). "
        "Use nextPageToken from a previous result to page.",
    ),
    "jira_get_my_issues": ToolSpec(
        handlers.get_my_issues,
        schemas.GetMyIssuesInput,
        "Lists issues assigned to the current user, most recently updated first.",
    ),
    "jira_get_issue_types": ToolSpec(
        handlers.get_issue_types,
        schemas.GetIssueTypesInput,
        "Lists issue types, globally or for one project, including whether each "
        "is a subtask type.",
    ),
    "jira_get_users": ToolSpec(
        handlers.get_users,
        schemas.GetUsersInput,
        "Searches users by name, email, username or account ID. Use the "
        "returned account ID to assign issues.",
    ),
    "jira_get_priorities": ToolSpec(
        handlers.get_priorities,
        schemas.GetPrioritiesInput,
        "Lists the priority levels available in this Jira instance.",
    ),
    "jira_get_statuses": ToolSpec(
        handlers.get_statuses,
        schemas.GetStatusesInput,
        "Lists workflow statuses, globally or for a project and issue type.",
    ),
    "jira_create_issue": ToolSpec(
        handlers.create_issue,
        schemas.CreateIssueInput,
        "Creates a new issue. Plain-text descriptions are converted to rich "
        "text (labels, lists, stack traces, links). Set returnIssue=false to "
        "get only the new key.",
    ),
    "jira_update_issue": ToolSpec(
        handlers.update_issue,
        schemas.UpdateIssueInput,
        "Updates summary, description, priority, assignee, labels or "
        "components of an issue. Only supplied fields change; an empty "
        "assignee unassigns.",
    ),
    "jira_add_comment": ToolSpec(
        handlers.add_comment,
        schemas.AddCommentInput,
        "Adds a comment to an issue, optionally restricted to a group or role.",
    ),
    "jira_get_project_info": ToolSpec(
        handlers.get_project_info,
        schemas.GetProjectInfoInput,
        "Shows project details: lead, components, versions, issue types and roles.",
    ),
    "jira_create_subtask": ToolSpec(
        handlers.create_subtask,
        schemas.CreateSubtaskInput,
        "Creates a subtask under an existing issue. The project and subtask "
        "issue type are determined automatically.",
    ),
    "jira_get_create_meta": ToolSpec(
        handlers.get_create_meta,
        schemas.GetCreateMetaInput,
        "Shows the fields (required, types, allowed values) for creating "
        "issues in a project.",
    ),
    "jira_get_custom_fields": ToolSpec(
        handlers.get_custom_fields,
        schemas.GetCustomFieldsInput,
        "Lists custom fields with their IDs, for use in customFields of "
        "jira_create_issue.",
    ),
    "jira_create_issue_link": ToolSpec(
        handlers.create_issue_link,
        schemas.CreateIssueLinkInput,
        "Links two issues with a phrase such as 'blocks', 'is blocked by', "
        "'relates to', 'duplicates' or 'clones'.",
    ),
    "jira_get_comments": ToolSpec(
        handlers.get_comments,
        schemas.GetCommentsInput,
        "Lists comments of an issue with author and date, with pagination.",
    ),
    "jira_add_attachment": ToolSpec(
        handlers.add_attachment,
        schemas.AddAttachmentInput,
        "Uploads a file to an issue from filePath, fileUrl or inline content. "
        "Prefer filePath or fileUrl to save tokens.",
    ),
    "jira_get_attachments": ToolSpec(
        handlers.get_attachments,
        schemas.IssueKeyInput,
        "Lists attachments of an issue with size, type and download URI.",
    ),
    "jira_delete_attachment": ToolSpec(
        handlers.delete_attachment,
        schemas.DeleteAttachmentInput,
        "Deletes an attachment by ID.",
    ),
    "jira_search_by_epic": ToolSpec(
        handlers.search_by_epic,
        schemas.SearchByEpicInput,
        "Finds the issues linked to an epic through the Epic Link field, "
        "optionally including direct children.",
    ),
    "jira_link_issues": ToolSpec(
        handlers.link_issues,
        schemas.LinkIssuesInput,
        "Links an inward and an outward issue with a Jira link type name, "
        "with an optional comment.",
    ),
    "jira_list_issue_attachments": ToolSpec(
        handlers.get_attachments,
        schemas.IssueKeyInput,
        "Lists attachments of an issue with jira://attachment/{id} resource "
        "URIs for downloading their content.",
    ),
}

TOOL_HANDLERS: dict[str, ToolHandler] = {
    name: tool.handler for name, tool in _TOOL_SPECS.items()
}

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name=name,
        description=tool.description,
        inputSchema=tool.input_model.model_json_schema(by_alias=True),
    )
    for name, tool in _TOOL_SPECS.items()
]


async def dispatch(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """
    Run the handler registered under ``name``.

    Args:
        name: Tool name
        arguments: Raw tool arguments

    Returns:
        The handler's content, or an error envelope
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        logger.warning(f"Unknown tool requested: {name}")
        return [TextContent(type="text", text=format_error(f"Unknown tool: {name}"))]

    with log_operation(logger, name):
        try:
            return await handler(arguments or {})
        except Exception as e:  # noqa: BLE001
            logger.exception(f"Tool {name} raised")
            return [TextContent(type="text", text=format_error(e))]
