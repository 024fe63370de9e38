"""Tests for the tool registry, dispatch and the Jira tool handlers."""

import asyncio
import threading
from unittest.mock import MagicMock, patch

import pytest

from mcp_jira.exceptions import MCPJiraError, MCPJiraNotFoundError
from mcp_jira.models.jira import (
    JiraAttachment,
    JiraComment,
    JiraIssue,
    JiraSearchResult,
)
from mcp_jira.servers.registry import TOOL_DEFINITIONS, TOOL_HANDLERS, dispatch

EXPECTED_TOOLS = {
    "jira_get_visible_projects",
    "jira_get_issue",
    "jira_search_issues",
    "jira_get_my_issues",
    "jira_get_issue_types",
    "jira_get_users",
    "jira_get_priorities",
    "jira_get_statuses",
    "jira_create_issue",
    "jira_update_issue",
    "jira_add_comment",
    "jira_get_project_info",
    "jira_create_subtask",
    "jira_get_create_meta",
    "jira_get_custom_fields",
    "jira_create_issue_link",
    "jira_get_comments",
    "jira_add_attachment",
    "jira_get_attachments",
    "jira_delete_attachment",
    "jira_search_by_epic",
    "jira_link_issues",
    "jira_list_issue_attachments",
}


@pytest.fixture
def mock_fetcher():
    fetcher = MagicMock(name="JiraFetcher")
    with patch("mcp_jira.servers.jira.get_jira_fetcher", return_value=fetcher):
        yield fetcher


def _text(result):
    assert len(result) == 1
    assert result[0].type == "text"
    return result[0].text


class TestRegistry:
    def test_all_tools_registered(self):
        assert set(TOOL_HANDLERS) == EXPECTED_TOOLS
        assert {t.name for t in TOOL_DEFINITIONS} == EXPECTED_TOOLS
        assert len(TOOL_DEFINITIONS) == 23

    def test_definitions_use_camel_case_schemas(self):
        tools = {t.name: t for t in TOOL_DEFINITIONS}
        schema = tools["jira_create_issue"].inputSchema
        assert schema["type"] == "object"
        assert {"projectKey", "summary", "issueType"} <= set(schema["required"])
        assert "customFields" in schema["properties"]

    def test_every_tool_has_description(self):
        assert all(t.description for t in TOOL_DEFINITIONS)


@pytest.mark.asyncio
class TestDispatch:
    async def test_unknown_tool(self):
        assert _text(await dispatch("jira_fly", {})) == "❌ Error: Unknown tool: jira_fly"

    async def test_validation_error_makes_no_call(self, mock_fetcher):
        text = _text(await dispatch("jira_get_issue", {}))
        assert text.startswith("❌ Error: Input validation failed.")
        assert "issueKey" in text
        mock_fetcher.get_issue.assert_not_called()

    async def test_domain_error_envelope(self, mock_fetcher):
        mock_fetcher.get_issue.side_effect = MCPJiraNotFoundError(
            "Resource not found or insufficient permissions", status_code=404
        )
        text = _text(await dispatch("jira_get_issue", {"issueKey": "PROJ-1"}))
        assert text == "❌ Error: Resource not found or insufficient permissions"

    async def test_unexpected_error_envelope(self, mock_fetcher):
        mock_fetcher.get_priorities.side_effect = RuntimeError("kaboom")
        text = _text(await dispatch("jira_get_priorities", None))
        assert text == "❌ Error: kaboom"

    async def test_escaping_handler_exception_is_enveloped(self):
        async def broken(arguments):
            raise RuntimeError("escaped")

        with patch.dict(TOOL_HANDLERS, {"jira_get_priorities": broken}):
            text = _text(await dispatch("jira_get_priorities", {}))
        assert text == "❌ Error: escaped"


@pytest.mark.asyncio
class TestHandlers:
    async def test_get_issue(self, mock_fetcher, issue_payload):
        mock_fetcher.get_issue.return_value = JiraIssue.from_api_response(issue_payload)

        text = _text(await dispatch("jira_get_issue", {"issueKey": "proj-123"}))

        mock_fetcher.get_issue.assert_called_once_with("PROJ-123", expand=None, fields=None)
        assert text.startswith("**PROJ-123: Login fails on Safari**")

    async def test_fetcher_runs_off_the_event_loop_thread(self, mock_fetcher, issue_payload):
        loop_thread = threading.get_ident()
        call_threads = []

        def get_issue(*args, **kwargs):
            call_threads.append(threading.get_ident())
            return JiraIssue.from_api_response(issue_payload)

        mock_fetcher.get_issue.side_effect = get_issue

        await dispatch("jira_get_issue", {"issueKey": "PROJ-123"})

        assert len(call_threads) == 1
        assert call_threads[0] != loop_thread

    async def test_slow_fetcher_does_not_block_other_tasks(self, mock_fetcher):
        release = threading.Event()
        mock_fetcher.get_priorities.side_effect = lambda: release.wait(5) and []

        call = asyncio.create_task(dispatch("jira_get_priorities", {}))
        await asyncio.sleep(0.05)
        assert not call.done()
        release.set()

        text = _text(await asyncio.wait_for(call, timeout=5))
        assert text == "No priorities found."

    async def test_search_issues(self, mock_fetcher):
        mock_fetcher.search_issues.return_value = JiraSearchResult()

        text = _text(
            await dispatch(
                "jira_search_issues",
                {"jql": "project = PROJ", "maxResults": 10, "nextPageToken": "t"},
            )
        )

        mock_fetcher.search_issues.assert_called_once_with(
            "project = PROJ", next_page_token="t", max_results=10, fields=None, expand=None
        )
        assert text == "No issues found matching your search criteria."

    async def test_create_issue_returns_key(self, mock_fetcher):
        mock_fetcher.create_issue.return_value = "PROJ-5"

        text = _text(
            await dispatch(
                "jira_create_issue",
                {
                    "projectKey": "PROJ",
                    "summary": "New",
                    "issueType": "Task",
                    "returnIssue": False,
                    "customFields": {"customfield_1": "x"},
                },
            )
        )

        assert text == "✅ Created issue PROJ-5"
        kwargs = mock_fetcher.create_issue.call_args.kwargs
        assert kwargs["custom_fields"] == {"customfield_1": "x"}
        assert kwargs["return_issue"] is False
        assert kwargs["description_format"] == "markdown"

    async def test_update_issue_requires_changes(self, mock_fetcher):
        text = _text(await dispatch("jira_update_issue", {"issueKey": "PROJ-1"}))
        assert "no fields to update" in text
        mock_fetcher.update_issue.assert_not_called()

    async def test_update_issue_unassign(self, mock_fetcher, issue_payload):
        mock_fetcher.get_issue.return_value = JiraIssue.from_api_response(issue_payload)

        await dispatch("jira_update_issue", {"issueKey": "PROJ-1", "assignee": ""})

        mock_fetcher.update_issue.assert_called_once_with(
            "PROJ-1", description_format="markdown", assignee=""
        )
        mock_fetcher.get_issue.assert_called_once_with("PROJ-1")

    async def test_add_comment(self, mock_fetcher):
        mock_fetcher.add_comment.return_value = JiraComment(id="1", body="hi")

        text = _text(
            await dispatch(
                "jira_add_comment",
                {
                    "issueKey": "PROJ-1",
                    "body": "hi",
                    "visibility": {"type": "group", "value": "devs"},
                },
            )
        )

        mock_fetcher.add_comment.assert_called_once_with(
            "PROJ-1",
            "hi",
            visibility={"type": "group", "value": "devs"},
            body_format="markdown",
        )
        assert text.startswith("**Comment added successfully**")

    async def test_create_subtask_without_subtask_type(self, mock_fetcher):
        mock_fetcher.create_subtask.side_effect = MCPJiraError(
            "No subtask issue type found for project PROJ"
        )
        text = _text(
            await dispatch(
                "jira_create_subtask", {"parentIssueKey": "PROJ-1", "summary": "s"}
            )
        )
        assert text == "❌ Error: No subtask issue type found for project PROJ"

    async def test_create_issue_link(self, mock_fetcher):
        text = _text(
            await dispatch(
                "jira_create_issue_link",
                {"fromIssue": "PROJ-1", "toIssue": "PROJ-2", "linkType": "blocks"},
            )
        )
        mock_fetcher.create_issue_link.assert_called_once_with("PROJ-1", "PROJ-2", "blocks")
        assert text == "✅ Link created: PROJ-1 blocks PROJ-2"

    async def test_link_issues_with_comment(self, mock_fetcher):
        text = _text(
            await dispatch(
                "jira_link_issues",
                {
                    "inwardIssueKey": "PROJ-1",
                    "outwardIssueKey": "PROJ-2",
                    "linkType": "Relates",
                    "comment": "related",
                },
            )
        )
        assert text == "✅ Successfully linked PROJ-1 to PROJ-2 (Relates) with comment"

    async def test_add_attachment_prefers_file_path(self, mock_fetcher):
        mock_fetcher.add_attachment_from_path.return_value = JiraAttachment(
            id="1", filename="a.txt"
        )

        text = _text(
            await dispatch(
                "jira_add_attachment",
                {
                    "issueKey": "PROJ-1",
                    "filename": "a.txt",
                    "filePath": "/tmp/a.txt",
                    "fileUrl": "https://x/a.txt",
                    "content": "aGk=",
                },
            )
        )

        mock_fetcher.add_attachment_from_path.assert_called_once_with(
            "PROJ-1", "/tmp/a.txt", filename="a.txt"
        )
        mock_fetcher.add_attachment_from_url.assert_not_called()
        mock_fetcher.add_attachment.assert_not_called()
        assert text.startswith("✅ Attachment uploaded to PROJ-1")

    async def test_add_attachment_inline_content(self, mock_fetcher):
        mock_fetcher.add_attachment.return_value = JiraAttachment(id="1", filename="a.txt")

        await dispatch(
            "jira_add_attachment",
            {"issueKey": "PROJ-1", "filename": "a.txt", "content": "hi", "isBase64": False},
        )

        mock_fetcher.add_attachment.assert_called_once_with(
            "PROJ-1", "a.txt", "hi", is_base64=False
        )

    async def test_add_attachment_requires_a_source(self, mock_fetcher):
        text = _text(
            await dispatch("jira_add_attachment", {"issueKey": "PROJ-1", "filename": "a"})
        )
        assert "one of filePath, fileUrl or content is required" in text

    @pytest.mark.parametrize(
        "tool", ["jira_get_attachments", "jira_list_issue_attachments"]
    )
    async def test_list_attachments(self, mock_fetcher, tool):
        mock_fetcher.get_attachments.return_value = []
        text = _text(await dispatch(tool, {"issueKey": "PROJ-1"}))
        assert text == "No attachments found for PROJ-1."

    async def test_delete_attachment(self, mock_fetcher):
        text = _text(await dispatch("jira_delete_attachment", {"attachmentId": "10001"}))
        mock_fetcher.delete_attachment.assert_called_once_with("10001")
        assert text == "✅ Successfully deleted attachment 10001"

    async def test_search_by_epic(self, mock_fetcher):
        mock_fetcher.search_by_epic.return_value = JiraSearchResult()

        await dispatch("jira_search_by_epic", {"epicKey": "EPIC-1", "includeSubtasks": True})

        mock_fetcher.search_by_epic.assert_called_once_with(
            "EPIC-1",
            include_subtasks=True,
            order_by="created",
            next_page_token=None,
            max_results=50,
            fields=[],
            expand=None,
        )

    async def test_get_custom_fields(self, mock_fetcher):
        mock_fetcher.get_custom_fields.return_value = []
        text = _text(await dispatch("jira_get_custom_fields", {"projectKey": "PROJ"}))
        assert text == "No custom fields found (project PROJ)."
