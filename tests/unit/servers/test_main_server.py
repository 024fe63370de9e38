"""Tests for the MCP server wiring: tools, resources and lifespan."""

from unittest.mock import MagicMock, patch

import pytest

from mcp_jira.models.jira import JiraAttachment
from mcp_jira.servers.main import (
    app,
    list_resource_templates,
    list_resources,
    list_tools,
    read_resource,
    server_lifespan,
)
from mcp_jira.servers.registry import TOOL_DEFINITIONS


@pytest.fixture
def mock_fetcher():
    fetcher = MagicMock(name="JiraFetcher")
    with patch("mcp_jira.servers.main.get_jira_fetcher", return_value=fetcher):
        yield fetcher


@pytest.mark.asyncio
async def test_list_tools_returns_registry():
    assert await list_tools() == TOOL_DEFINITIONS


@pytest.mark.asyncio
async def test_resources():
    assert await list_resources() == []
    templates = await list_resource_templates()
    assert [t.uriTemplate for t in templates] == [
        "jira://attachment/{attachmentId}",
        "jira://attachment/{attachmentId}/thumbnail",
    ]


@pytest.mark.asyncio
async def test_read_attachment(mock_fetcher):
    mock_fetcher.get_attachment_metadata.return_value = JiraAttachment(
        id="10001", filename="a.pdf", mime_type="application/pdf"
    )
    mock_fetcher.get_attachment_content.return_value = b"%PDF"

    contents = await read_resource("jira://attachment/10001")

    mock_fetcher.get_attachment_content.assert_called_once_with("10001", thumbnail=False)
    assert contents[0].content == b"%PDF"
    assert contents[0].mime_type == "application/pdf"


@pytest.mark.asyncio
async def test_read_thumbnail(mock_fetcher):
    mock_fetcher.get_attachment_metadata.return_value = JiraAttachment(id="10001")
    mock_fetcher.get_attachment_content.return_value = b"\x89PNG"

    contents = await read_resource("jira://attachment/10001/thumbnail")

    mock_fetcher.get_attachment_content.assert_called_once_with("10001", thumbnail=True)
    assert contents[0].mime_type == "image/png"


@pytest.mark.asyncio
async def test_read_invalid_uri(mock_fetcher):
    with pytest.raises(ValueError):
        await read_resource("jira://issue/PROJ-1")
    mock_fetcher.get_attachment_metadata.assert_not_called()


@pytest.mark.asyncio
class TestLifespan:
    async def test_dry_run_skips_connectivity_check(self, monkeypatch, mock_fetcher):
        monkeypatch.setenv("MCP_DRY_RUN", "true")
        async with server_lifespan(app) as context:
            assert context.connected is None
        mock_fetcher.test_connection.assert_not_called()

    async def test_connectivity_check(self, mock_fetcher):
        mock_fetcher.test_connection.return_value = True
        async with server_lifespan(app) as context:
            assert context.connected is True

    async def test_missing_credentials_keep_serving(self):
        with patch(
            "mcp_jira.servers.main.get_jira_fetcher",
            side_effect=ValueError("Jira authentication required."),
        ):
            async with server_lifespan(app) as context:
                assert context.connected is False
