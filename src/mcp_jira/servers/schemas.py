"""Input schemas for the Jira tools.

Each tool validates its raw arguments against one of these models before
any network call. Arguments use camelCase names (``issueKey``); snake_case
names are accepted too.
"""

from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from ..exceptions import MCPJiraValidationError
from ..jira.constants import VALIDATION_ERROR_MESSAGE
from ..jira.utils import extract_issue_key, is_valid_project_key

ModelT = TypeVar("ModelT", bound=BaseModel)


def _issue_key(value: str) -> str:
    key = extract_issue_key(value) if value else None
    if not key:
        raise ValueError(f"'{value}' is not a valid issue key (expected e.g. PROJ-123)")
    return key


def _project_key(value: str) -> str:
    key = value.strip().upper()
    if not is_valid_project_key(key):
        raise ValueError(f"'{value}' is not a valid project key (expected e.g. PROJ)")
    return key


def _non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


IssueKey = Annotated[str, AfterValidator(_issue_key)]
ProjectKey = Annotated[str, AfterValidator(_project_key)]
NonBlank = Annotated[str, AfterValidator(_non_blank)]
TextFormat = Literal["markdown", "plain", "adf"]


class ToolInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


def validate_input(model: type[ModelT], arguments: dict[str, Any] | None) -> ModelT:
    """
    Validate raw tool arguments.

    Raises:
        MCPJiraValidationError: With one ``path: message`` line per problem
    """
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MCPJiraValidationError(VALIDATION_ERROR_MESSAGE, problems) from e


class GetVisibleProjectsInput(ToolInput):
    expand: list[str] | None = Field(
        default=None,
        description="Additional project details to include (e.g. description, lead)",
    )
    recent: int | None = Field(
        default=None, ge=1, description="Limit to recently accessed projects"
    )


class GetIssueInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key (e.g., PROJECT-123) or issue URL")
    expand: list[str] | None = Field(
        default=None, description="Additional issue details to include"
    )
    fields: list[str] | None = Field(
        default=None, description="Specific fields to retrieve"
    )


class SearchIssuesInput(ToolInput):
    jql: NonBlank = Field(description="JQL query string")
    next_page_token: str | None = Field(
        default=None, description="Token from a previous result to fetch the next page"
    )
    max_results: int = Field(
        default=50, ge=1, le=100, description="Maximum number of results to return"
    )
    fields: list[str] | None = Field(
        default=None, description="Specific fields to retrieve"
    )
    expand: list[str] | None = Field(
        default=None, description="Additional details to include"
    )


class GetMyIssuesInput(ToolInput):
    next_page_token: str | None = Field(
        default=None, description="Token from a previous result to fetch the next page"
    )
    max_results: int = Field(
        default=50, ge=1, le=100, description="Maximum number of results to return"
    )
    fields: list[str] | None = Field(
        default=None, description="Specific fields to retrieve"
    )
    expand: list[str] | None = Field(
        default=None, description="Additional details to include"
    )


class GetIssueTypesInput(ToolInput):
    project_key: ProjectKey | None = Field(
        default=None, description="Project key to get issue types for specific project"
    )


class GetUsersInput(ToolInput):
    query: str | None = Field(
        default=None, description="Search query for user name or email"
    )
    username: str | None = Field(
        default=None, description="Specific username to search for"
    )
    account_id: str | None = Field(
        default=None, description="Specific account ID to search for"
    )
    start_at: int = Field(default=0, ge=0, description="Index of first result to return")
    max_results: int = Field(
        default=50, ge=1, le=50, description="Maximum number of results to return"
    )


class GetPrioritiesInput(ToolInput):
    pass


class GetStatusesInput(ToolInput):
    project_key: ProjectKey | None = Field(
        default=None, description="Project key to get statuses for specific project"
    )
    issue_type_id: str | None = Field(
        default=None,
        description="Issue type ID (or name) to get statuses for specific issue type",
    )


class CreateIssueInput(ToolInput):
    project_key: ProjectKey = Field(
        description="Project key where the issue will be created"
    )
    summary: NonBlank = Field(description="Issue summary/title")
    issue_type: NonBlank = Field(description="Issue type name (e.g., Bug, Story, Task, Epic)")
    description: str | dict[str, Any] | None = Field(
        default=None,
        description=(
            "Detailed issue description; text in the chosen format or an ADF document"
        ),
    )
    priority: str | None = Field(
        default=None, description="Issue priority name (e.g., High, Medium, Low)"
    )
    assignee: str | None = Field(default=None, description="Assignee account ID")
    labels: list[str] = Field(default_factory=list, description="Issue labels")
    components: list[str] = Field(default_factory=list, description="Component names")
    custom_fields: dict[str, Any] | None = Field(
        default=None,
        description=(
            'Additional Jira fields, e.g. { "customfield_10071": value }. '
            "Use this to set required custom fields."
        ),
    )
    format: TextFormat = Field(
        default="markdown",
        description=(
            'Description format: "markdown" (converted to ADF, default), '
            '"plain" (converted with line heuristics) or "adf" (ADF JSON)'
        ),
    )
    return_issue: bool = Field(
        default=True,
        description="If false, returns only the issue key without fetching full details",
    )


class UpdateIssueInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key to update")
    summary: NonBlank | None = Field(default=None, description="New summary")
    description: str | dict[str, Any] | None = Field(
        default=None,
        description="New description; text in the chosen format or an ADF document",
    )
    priority: str | None = Field(default=None, description="New priority")
    assignee: str | None = Field(
        default=None, description="New assignee account ID; empty string or null unassigns"
    )
    labels: list[str] | None = Field(
        default=None, description="New labels (replaces existing)"
    )
    components: list[str] | None = Field(
        default=None, description="New components (replaces existing)"
    )
    format: TextFormat = Field(default="markdown", description="Description format")

    def supplied_changes(self) -> dict[str, Any]:
        """Field changes the caller actually sent, keyed by update argument."""
        changes = self.model_dump(
            include={"summary", "description", "priority", "assignee", "labels", "components"}
        )
        return {name: value for name, value in changes.items() if name in self.model_fields_set}


class AddCommentVisibility(ToolInput):
    type: Literal["group", "role"] = Field(description="Visibility type")
    value: NonBlank = Field(description="Group name or role name")


class AddCommentInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key to add comment to")
    body: NonBlank | dict[str, Any] = Field(description="Comment body text")
    visibility: AddCommentVisibility | None = Field(
        default=None, description="Comment visibility restrictions"
    )
    format: TextFormat = Field(default="markdown", description="Body format")


class GetProjectInfoInput(ToolInput):
    project_key: ProjectKey = Field(
        description="Project key to get detailed information for"
    )
    expand: list[str] | None = Field(
        default=None, description="Additional project details to include"
    )


class CreateSubtaskInput(ToolInput):
    parent_issue_key: IssueKey = Field(description="Parent issue key")
    summary: NonBlank = Field(description="Subtask summary/title")
    description: str | dict[str, Any] | None = Field(
        default=None, description="Subtask description"
    )
    priority: str | None = Field(default=None, description="Subtask priority")
    assignee: str | None = Field(default=None, description="Assignee account ID")
    labels: list[str] = Field(default_factory=list, description="Subtask labels")
    components: list[str] = Field(default_factory=list, description="Component names")
    format: TextFormat = Field(default="markdown", description="Description format")


class GetCreateMetaInput(ToolInput):
    project_key: ProjectKey = Field(description="Project key to get create metadata for")
    issue_type_name: str | None = Field(
        default=None, description="Restrict to one issue type (e.g. Bug)"
    )


class GetCustomFieldsInput(ToolInput):
    project_key: ProjectKey | None = Field(
        default=None, description="Project key shown alongside the result"
    )


class CreateIssueLinkInput(ToolInput):
    from_issue: IssueKey = Field(description="Issue the link starts from")
    to_issue: IssueKey = Field(description="Issue the link points to")
    link_type: NonBlank = Field(
        description=(
            "Link phrase: blocks, is blocked by, relates to, duplicates, "
            "is duplicated by, clones, is cloned by"
        )
    )


class LinkIssuesInput(ToolInput):
    inward_issue_key: IssueKey = Field(description="Inward issue key")
    outward_issue_key: IssueKey = Field(description="Outward issue key")
    link_type: NonBlank = Field(description="Jira link type name (e.g. Blocks, Relates)")
    comment: str | None = Field(
        default=None, description="Optional comment added with the link"
    )


class GetCommentsInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key to get comments for")
    max_results: int | None = Field(
        default=None, ge=1, le=100, description="Maximum number of comments to return"
    )
    order_by: Literal["created", "-created", "+created"] | None = Field(
        default=None, description="Sort order of comments"
    )
    start_at: int | None = Field(
        default=None, ge=0, description="Index of first comment to return"
    )


class AddAttachmentInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key to attach the file to")
    filename: NonBlank = Field(description="Attachment file name (e.g. screenshot.png)")
    file_path: str | None = Field(
        default=None, description="Local file path to upload (preferred)"
    )
    file_url: str | None = Field(
        default=None, description="http(s) URL to download and upload"
    )
    content: str | None = Field(
        default=None, description="Inline file content, base64 unless isBase64 is false"
    )
    is_base64: bool = Field(
        default=True, description="Whether content is base64-encoded"
    )


class IssueKeyInput(ToolInput):
    issue_key: IssueKey = Field(description="Issue key (e.g., PROJECT-123)")


class DeleteAttachmentInput(ToolInput):
    attachment_id: NonBlank = Field(description="Attachment ID to delete")


class SearchByEpicInput(ToolInput):
    epic_key: IssueKey = Field(description="Epic issue key")
    include_subtasks: bool = Field(
        default=False, description="Also include issues whose parent is the epic"
    )
    next_page_token: str | None = Field(
        default=None, description="Token from a previous result to fetch the next page"
    )
    max_results: int = Field(
        default=50, ge=1, le=100, description="Maximum number of results to return per page"
    )
    fields: list[str] = Field(default_factory=list, description="Specific fields to retrieve")
    expand: list[str] | None = Field(default=None, description="Additional details to include")
    order_by: Literal["created", "updated", "priority", "status", "key"] = Field(
        default="created", description="Sort field (ascending)"
    )
