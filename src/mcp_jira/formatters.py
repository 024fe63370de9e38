"""Formatting functions that turn Jira models into display text.

Every function is pure and tolerant of missing optional data: absent values
render as fallbacks such as "Unassigned" or "None" instead of raising.
"""

from datetime import datetime, timezone

from .exceptions import MCPJiraError
from .jira.utils import attachment_uri, format_file_size
from .models.constants import (
    NO_DESCRIPTION,
    NONE_VALUE,
    NOT_AVAILABLE,
    UNASSIGNED,
    UNKNOWN,
)
from .models.jira import (
    JiraAttachment,
    JiraComment,
    JiraCommentPage,
    JiraCreateMeta,
    JiraField,
    JiraIssue,
    JiraIssueType,
    JiraPriority,
    JiraProject,
    JiraSearchResult,
    JiraStatus,
    JiraUser,
)
from .utils.env import is_redaction_enabled

SUCCESS_MARKER = "✅"
ERROR_MARKER = "❌ Error:"

_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def redact_account_id(account_id: str | None) -> str:
    if not account_id:
        return NOT_AVAILABLE
    if not is_redaction_enabled():
        return account_id
    return f"{account_id[:4]}…"


def redact_email(email: str | None) -> str:
    if not email:
        return NOT_AVAILABLE
    return "hidden" if is_redaction_enabled() else email


def format_timestamp(value: str | None) -> str:
    """Render a Jira timestamp as ISO 8601 UTC, or as given if unparseable."""
    if not value:
        return NOT_AVAILABLE
    parsed = None
    for pattern in _TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(value, pattern)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return value
    if parsed.tzinfo is None:
        return parsed.isoformat(timespec="milliseconds")
    utc = parsed.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return utc.replace("+00:00", "Z")


def _user_label(user: JiraUser | None, fallback: str) -> str:
    if user is None:
        return fallback
    return f"{user.display_name} ({redact_account_id(user.account_id)})"


def _join_or_none(values: list[str]) -> str:
    return ", ".join(values) if values else NONE_VALUE


def format_success(message: str) -> str:
    return f"{SUCCESS_MARKER} {message}"


def format_error(error: BaseException | str) -> str:
    """Render an error with the leading error marker."""
    if isinstance(error, str):
        message = error
    elif isinstance(error, MCPJiraError):
        message = str(error)
    else:
        message = str(error) or "An unexpected error occurred."
    return f"{ERROR_MARKER} {message}"


def format_projects(projects: list[JiraProject]) -> str:
    if not projects:
        return "No visible projects found."
    entries = [
        f"• **{p.key}** - {p.name}\n"
        f"  {p.description or 'No description'}\n"
        f"  Type: {p.project_type_key or UNKNOWN} | Private: {'Yes' if p.is_private else 'No'}"
        for p in projects
    ]
    return f"Found {len(projects)} visible project(s):\n\n" + "\n\n".join(entries)


def format_project_details(project: JiraProject) -> str:
    issue_types = [
        f"{t.name}{' (Subtask)' if t.subtask else ''}" for t in project.issue_types
    ]
    text = (
        f"**{project.key}: {project.name}**\n\n"
        f"**Description:** {project.description or 'No description'}\n"
        f"**Type:** {project.project_type_key or UNKNOWN}\n"
        f"**Private:** {'Yes' if project.is_private else 'No'}\n"
        f"**Lead:** {_user_label(project.lead, 'No lead assigned')}\n\n"
        f"**Components:** {_join_or_none([c.name for c in project.components])}\n"
        f"**Versions:** {_join_or_none(project.versions)}\n"
        f"**Issue Types:** {_join_or_none(issue_types)}\n"
        f"**Roles:** {_join_or_none(project.roles)}"
    )
    if project.insight:
        text += (
            "\n\n**Project Insights:**\n"
            f"Total Issues: {project.insight.total_issue_count}\n"
            f"Last Updated: {format_timestamp(project.insight.last_issue_update_time)}"
        )
    return text


def format_issue(issue: JiraIssue) -> str:
    project = (
        f"{issue.project.name} ({issue.project.key})" if issue.project else UNKNOWN
    )
    lines = [
        f"**{issue.key}: {issue.summary}**",
        "",
        f"**Status:** {issue.status.name if issue.status else UNKNOWN}",
        f"**Priority:** {issue.priority.name if issue.priority else NONE_VALUE}",
        f"**Assignee:** {_user_label(issue.assignee, UNASSIGNED)}",
        f"**Reporter:** {_user_label(issue.reporter, UNKNOWN)}",
        f"**Project:** {project}",
        f"**Issue Type:** {issue.issue_type.name if issue.issue_type else UNKNOWN}",
    ]
    if issue.parent_key:
        lines.append(f"**Parent:** {issue.parent_key}")
    lines.extend(
        [
            f"**Labels:** {_join_or_none(issue.labels)}",
            f"**Components:** {_join_or_none([c.name for c in issue.components])}",
            f"**Created:** {format_timestamp(issue.created)}",
            f"**Updated:** {format_timestamp(issue.updated)}",
            "",
            "**Description:**",
            issue.description or NO_DESCRIPTION,
        ]
    )
    return "\n".join(lines)


def format_search_results(result: JiraSearchResult) -> str:
    """Render one page of search results with a hint for the next page."""
    if not result.issues:
        return "No issues found matching your search criteria."

    entries = []
    for issue in result.issues:
        assignee = issue.assignee.display_name if issue.assignee else UNASSIGNED
        status = issue.status.name if issue.status else UNKNOWN
        priority = issue.priority.name if issue.priority else NONE_VALUE
        entries.append(
            f"• **{issue.key}** - {issue.summary}\n"
            f"  Status: {status} | Assignee: {assignee} | Priority: {priority}"
        )

    total = result.total if result.total >= 0 else len(result.issues)
    text = f"Found {total} issue(s):\n\n" + "\n\n".join(entries)
    if result.total > result.max_results > 0:
        end = min(result.start_at + result.max_results, result.total)
        text += (
            f"\n\n*Showing {result.start_at + 1}-{end} of {result.total} results*"
        )
    if result.next_page_token and not result.is_last:
        text += (
            "\n\n*More results available. Pass nextPageToken "
            f"`{result.next_page_token}` to get the next page.*"
        )
    return text


def format_users(users: list[JiraUser]) -> str:
    if not users:
        return "No users found matching your search criteria."
    entries = [
        f"• **{u.display_name}** ({redact_account_id(u.account_id)})\n"
        f"  Email: {redact_email(u.email)} | Active: {'Yes' if u.active else 'No'} | "
        f"Type: {u.account_type or UNKNOWN}"
        for u in users
    ]
    return f"Found {len(users)} user(s):\n\n" + "\n\n".join(entries)


def format_issue_types(issue_types: list[JiraIssueType]) -> str:
    if not issue_types:
        return "No issue types found."
    entries = [
        f"• **{t.name}** (ID: {t.id})\n"
        f"  {t.description or 'No description'}\n"
        f"  Subtask: {'Yes' if t.subtask else 'No'}"
        for t in issue_types
    ]
    return f"Found {len(issue_types)} issue type(s):\n\n" + "\n\n".join(entries)


def format_priorities(priorities: list[JiraPriority]) -> str:
    if not priorities:
        return "No priorities found."
    entries = [
        f"• **{p.name}** (ID: {p.id})\n  {p.description or 'No description'}"
        for p in priorities
    ]
    return f"Found {len(priorities)} priority level(s):\n\n" + "\n\n".join(entries)


def format_statuses(statuses: list[JiraStatus]) -> str:
    if not statuses:
        return "No statuses found."
    entries = []
    for s in statuses:
        category = (
            f"{s.category.name} ({s.category.key})" if s.category else UNKNOWN
        )
        entries.append(
            f"• **{s.name}** (ID: {s.id})\n"
            f"  {s.description or 'No description'}\n"
            f"  Category: {category}"
        )
    return f"Found {len(statuses)} status(es):\n\n" + "\n\n".join(entries)


def format_comment_added(comment: JiraComment) -> str:
    author = comment.author.display_name if comment.author else UNKNOWN
    visibility = (
        f"\n**Visibility:** {comment.visibility.type} - {comment.visibility.value}"
        if comment.visibility
        else ""
    )
    return (
        "**Comment added successfully**\n\n"
        f"**Author:** {author}\n"
        f"**Created:** {format_timestamp(comment.created)}{visibility}\n\n"
        f"**Content:**\n{comment.body}"
    )


def format_comments(page: JiraCommentPage, issue_key: str) -> str:
    if not page.comments:
        return f"No comments found for {issue_key}."
    entries = []
    for comment in page.comments:
        author = comment.author.display_name if comment.author else UNKNOWN
        entries.append(
            f"• **{author}** - {format_timestamp(comment.created)} (ID: {comment.id})\n"
            f"{comment.body or '(empty)'}"
        )
    text = (
        f"Found {page.total} comment(s) for {issue_key}"
        f" (showing {len(page.comments)}):\n\n" + "\n\n".join(entries)
    )
    if page.start_at + len(page.comments) < page.total:
        text += f"\n\n*Use startAt={page.start_at + len(page.comments)} for more.*"
    return text


def format_create_meta(meta: JiraCreateMeta) -> str:
    if not meta.projects:
        return "No create metadata found."
    sections = []
    for project in meta.projects:
        lines = [f"**{project.key}: {project.name}**"]
        for issue_type in project.issue_types:
            lines.append("")
            lines.append(
                f"**{issue_type.name}** (ID: {issue_type.id})"
                f"{' (Subtask)' if issue_type.subtask else ''}"
            )
            for field in issue_type.fields:
                line = (
                    f"• {field.name} (`{field.id}`) - {field.schema_type or UNKNOWN}"
                    f"{' **required**' if field.required else ''}"
                )
                if field.allowed_values:
                    line += f"\n  Allowed: {', '.join(field.allowed_values)}"
                lines.append(line)
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def format_custom_fields(fields: list[JiraField], project_key: str | None = None) -> str:
    custom = [f for f in fields if f.custom]
    scope = f" (project {project_key})" if project_key else ""
    if not custom:
        return f"No custom fields found{scope}."
    entries = [
        f"• **{f.name}** (`{f.id}`)\n  Type: {f.schema_type or UNKNOWN}"
        f"{f' | Schema: {f.schema_custom}' if f.schema_custom else ''}"
        for f in custom
    ]
    return f"Found {len(custom)} custom field(s){scope}:\n\n" + "\n\n".join(entries)


def format_attachment_uploaded(attachment: JiraAttachment, issue_key: str) -> str:
    return format_success(
        f"Attachment uploaded to {issue_key}\n\n"
        f"**{attachment.filename}** (ID: {attachment.id})\n"
        f"Size: {format_file_size(attachment.size)} | "
        f"Type: {attachment.mime_type or UNKNOWN}\n"
        f"URI: {attachment_uri(attachment.id)}\n"
        f"Reference in wiki markup: !{attachment.filename}!"
    )


def format_attachments(attachments: list[JiraAttachment], issue_key: str) -> str:
    if not attachments:
        return f"No attachments found for {issue_key}."
    entries = []
    for a in attachments:
        author = a.author.display_name if a.author else UNKNOWN
        entry = (
            f"• **{a.filename}** (ID: {a.id})\n"
            f"  Size: {format_file_size(a.size)} | Type: {a.mime_type or UNKNOWN}\n"
            f"  Created: {format_timestamp(a.created)} by {author}\n"
            f"  URI: {attachment_uri(a.id)}"
        )
        if a.thumbnail_url:
            entry += f"\n  Thumbnail: {attachment_uri(a.id, thumbnail=True)}"
        entries.append(entry)
    return f"Found {len(attachments)} attachment(s) on {issue_key}:\n\n" + "\n\n".join(
        entries
    )
