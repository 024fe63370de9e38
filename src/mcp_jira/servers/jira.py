"""Jira tool handlers.

Each handler takes the raw tool arguments, validates them, runs one domain
operation and renders the result as a single text content block. Errors are
rendered by ``handle_tool_errors``.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from mcp.types import TextContent

from ..exceptions import MCPJiraValidationError
from ..formatters import (
    format_attachment_uploaded,
    format_attachments,
    format_comment_added,
    format_comments,
    format_create_meta,
    format_custom_fields,
    format_issue,
    format_issue_types,
    format_priorities,
    format_project_details,
    format_projects,
    format_search_results,
    format_statuses,
    format_success,
    format_users,
)
from ..jira.constants import VALIDATION_ERROR_MESSAGE
from ..utils.decorators import handle_tool_errors
from .dependencies import get_jira_fetcher
from .schemas import (
    AddAttachmentInput,
    AddCommentInput,
    CreateIssueInput,
    CreateIssueLinkInput,
    CreateSubtaskInput,
    DeleteAttachmentInput,
    GetCommentsInput,
    GetCreateMetaInput,
    GetCustomFieldsInput,
    GetIssueInput,
    GetIssueTypesInput,
    GetMyIssuesInput,
    GetPrioritiesInput,
    GetProjectInfoInput,
    GetStatusesInput,
    GetUsersInput,
    GetVisibleProjectsInput,
    IssueKeyInput,
    LinkIssuesInput,
    SearchByEpicInput,
    SearchIssuesInput,
    UpdateIssueInput,
    validate_input,
)

logger = logging.getLogger("mcp-jira.servers.jira")

T = TypeVar("T")


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


async def _call(method: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking fetcher method in a worker thread."""
    return await asyncio.to_thread(method, *args, **kwargs)


@handle_tool_errors
async def get_visible_projects(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetVisibleProjectsInput, arguments)
    projects = await _call(
        get_jira_fetcher().get_visible_projects,
        expand=params.expand, recent=params.recent
    )
    return _text(format_projects(projects))


@handle_tool_errors
async def get_issue(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetIssueInput, arguments)
    issue = await _call(
        get_jira_fetcher().get_issue,
        params.issue_key, expand=params.expand, fields=params.fields
    )
    return _text(format_issue(issue))


@handle_tool_errors
async def search_issues(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(SearchIssuesInput, arguments)
    result = await _call(
        get_jira_fetcher().search_issues,
        params.jql,
        next_page_token=params.next_page_token,
        max_results=params.max_results,
        fields=params.fields,
        expand=params.expand,
    )
    return _text(format_search_results(result))


@handle_tool_errors
async def get_my_issues(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetMyIssuesInput, arguments)
    result = await _call(
        get_jira_fetcher().get_my_issues,
        next_page_token=params.next_page_token,
        max_results=params.max_results,
        fields=params.fields,
        expand=params.expand,
    )
    return _text(format_search_results(result))


@handle_tool_errors
async def get_issue_types(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetIssueTypesInput, arguments)
    issue_types = await _call(get_jira_fetcher().get_issue_types, params.project_key)
    return _text(format_issue_types(issue_types))


@handle_tool_errors
async def get_users(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetUsersInput, arguments)
    users = await _call(
        get_jira_fetcher().get_users,
        query=params.query,
        username=params.username,
        account_id=params.account_id,
        start_at=params.start_at,
        max_results=params.max_results,
    )
    return _text(format_users(users))


@handle_tool_errors
async def get_priorities(arguments: dict[str, Any]) -> list[TextContent]:
    validate_input(GetPrioritiesInput, arguments)
    return _text(format_priorities(await _call(get_jira_fetcher().get_priorities)))


@handle_tool_errors
async def get_statuses(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetStatusesInput, arguments)
    statuses = await _call(
        get_jira_fetcher().get_statuses,
        project_key=params.project_key, issue_type_id=params.issue_type_id
    )
    return _text(format_statuses(statuses))


@handle_tool_errors
async def create_issue(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(CreateIssueInput, arguments)
    result = await _call(
        get_jira_fetcher().create_issue,
        project_key=params.project_key,
        summary=params.summary,
        issue_type=params.issue_type,
        description=params.description,
        priority=params.priority,
        assignee=params.assignee,
        labels=params.labels,
        components=params.components,
        custom_fields=params.custom_fields,
        description_format=params.format,
        return_issue=params.return_issue,
    )
    if isinstance(result, str):
        return _text(format_success(f"Created issue {result}"))
    return _text(format_issue(result))


@handle_tool_errors
async def update_issue(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(UpdateIssueInput, arguments)
    changes = params.supplied_changes()
    if not changes:
        raise MCPJiraValidationError(
            VALIDATION_ERROR_MESSAGE, ["input: no fields to update were provided"]
        )
    jira = get_jira_fetcher()
    await _call(
        jira.update_issue, params.issue_key, description_format=params.format, **changes
    )
    return _text(format_issue(await _call(jira.get_issue, params.issue_key)))


@handle_tool_errors
async def add_comment(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(AddCommentInput, arguments)
    visibility = params.visibility.model_dump() if params.visibility else None
    comment = await _call(
        get_jira_fetcher().add_comment,
        params.issue_key, params.body, visibility=visibility, body_format=params.format
    )
    return _text(format_comment_added(comment))


@handle_tool_errors
async def get_project_info(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetProjectInfoInput, arguments)
    project = await _call(
        get_jira_fetcher().get_project_details,
        params.project_key, expand=params.expand
    )
    return _text(format_project_details(project))


@handle_tool_errors
async def create_subtask(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(CreateSubtaskInput, arguments)
    subtask = await _call(
        get_jira_fetcher().create_subtask,
        params.parent_issue_key,
        params.summary,
        description=params.description,
        priority=params.priority,
        assignee=params.assignee,
        labels=params.labels,
        components=params.components,
        description_format=params.format,
    )
    return _text(format_issue(subtask))


@handle_tool_errors
async def get_create_meta(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetCreateMetaInput, arguments)
    meta = await _call(
        get_jira_fetcher().get_create_meta,
        params.project_key, issue_type_name=params.issue_type_name
    )
    return _text(format_create_meta(meta))


@handle_tool_errors
async def get_custom_fields(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetCustomFieldsInput, arguments)
    fields = await _call(get_jira_fetcher().get_custom_fields)
    return _text(format_custom_fields(fields, params.project_key))


@handle_tool_errors
async def create_issue_link(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(CreateIssueLinkInput, arguments)
    await _call(
        get_jira_fetcher().create_issue_link,
        params.from_issue, params.to_issue, params.link_type
    )
    return _text(
        format_success(
            f"Link created: {params.from_issue} {params.link_type} {params.to_issue}"
        )
    )


@handle_tool_errors
async def link_issues(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(LinkIssuesInput, arguments)
    await _call(
        get_jira_fetcher().link_issues,
        params.inward_issue_key,
        params.outward_issue_key,
        params.link_type,
        comment=params.comment,
    )
    message = (
        f"Successfully linked {params.inward_issue_key} to "
        f"{params.outward_issue_key} ({params.link_type})"
    )
    if params.comment:
        message += " with comment"
    return _text(format_success(message))


@handle_tool_errors
async def get_comments(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(GetCommentsInput, arguments)
    page = await _call(
        get_jira_fetcher().get_comments,
        params.issue_key,
        max_results=params.max_results,
        order_by=params.order_by,
        start_at=params.start_at,
    )
    return _text(format_comments(page, params.issue_key))


@handle_tool_errors
async def add_attachment(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(AddAttachmentInput, arguments)
    jira = get_jira_fetcher()
    if params.file_path:
        attachment = await _call(
            jira.add_attachment_from_path,
            params.issue_key, params.file_path, filename=params.filename
        )
    elif params.file_url:
        attachment = await _call(
            jira.add_attachment_from_url,
            params.issue_key, params.file_url, filename=params.filename
        )
    elif params.content is not None:
        attachment = await _call(
            jira.add_attachment,
            params.issue_key, params.filename, params.content, is_base64=params.is_base64
        )
    else:
        raise MCPJiraValidationError(
            VALIDATION_ERROR_MESSAGE,
            ["input: one of filePath, fileUrl or content is required"],
        )
    return _text(format_attachment_uploaded(attachment, params.issue_key))


@handle_tool_errors
async def get_attachments(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(IssueKeyInput, arguments)
    attachments = await _call(get_jira_fetcher().get_attachments, params.issue_key)
    return _text(format_attachments(attachments, params.issue_key))


@handle_tool_errors
async def delete_attachment(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(DeleteAttachmentInput, arguments)
    await _call(get_jira_fetcher().delete_attachment, params.attachment_id)
    return _text(format_success(f"Successfully deleted attachment {params.attachment_id}"))


@handle_tool_errors
async def search_by_epic(arguments: dict[str, Any]) -> list[TextContent]:
    params = validate_input(SearchByEpicInput, arguments)
    result = await _call(
        get_jira_fetcher().search_by_epic,
        params.epic_key,
        include_subtasks=params.include_subtasks,
        order_by=params.order_by,
        next_page_token=params.next_page_token,
        max_results=params.max_results,
        fields=params.fields,
        expand=params.expand,
    )
    logger.info(
        f"Found {len(result.issues)} issue(s) linked to Epic {params.epic_key}"
    )
    return _text(format_search_results(result))
