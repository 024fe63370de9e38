"""
Root test configuration for MCP Jira.

Provides configuration factories, a JiraFetcher whose HTTP layer is mocked,
and helpers for fake HTTP responses. No test touches the network.
"""

import json as jsonlib
from unittest.mock import MagicMock

import pytest
import requests

from mcp_jira.jira import JiraConfig, JiraFetcher, RetryPolicy

JIRA_ENV_VARS = (
    "JIRA_BASE_URL",
    "JIRA_URL",
    "JIRA_EMAIL",
    "JIRA_USERNAME",
    "JIRA_API_TOKEN",
    "JIRA_TIMEOUT",
    "JIRA_MAX_RETRIES",
    "JIRA_RETRY_DELAY",
    "JIRA_SSL_VERIFY",
    "MCP_REDACT_SENSITIVE",
    "REDACT_SENSITIVE",
    "MCP_DRY_RUN",
)


@pytest.fixture(autouse=True)
def clean_jira_environment(monkeypatch):
    """Make every test start without Jira-related environment variables."""
    for name in JIRA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def jira_config_factory():
    """
    Factory for creating JiraConfig instances with customizable options.

    Example:
        def test_config(jira_config_factory):
            config = jira_config_factory(url="https://custom.atlassian.net")
    """

    def _create_config(**overrides):
        defaults = {
            "url": "https://test.atlassian.net",
            "email": "test@example.com",
            "api_token": "test-api-token-1234",
            "retry_policy": RetryPolicy(max_retries=3, base_delay=0.0),
        }
        return JiraConfig(**{**defaults, **overrides})

    return _create_config


@pytest.fixture
def mock_config(jira_config_factory):
    return jira_config_factory()


@pytest.fixture
def jira_fetcher(mock_config):
    """
    JiraFetcher with ``request`` replaced by a MagicMock.

    Domain tests configure ``jira_fetcher.request.return_value`` or
    ``side_effect`` and assert on the calls.
    """
    fetcher = JiraFetcher(config=mock_config)
    fetcher.request = MagicMock(name="request")
    fetcher.request_raw = MagicMock(name="request_raw")
    return fetcher


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""

    def _make(status_code=200, payload=None, reason="", content=None):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.ok = 200 <= status_code < 300
        response.reason = reason
        if payload is None:
            response.json.side_effect = ValueError("No JSON")
            response.content = content or b""
            response.text = (content or b"").decode("utf-8", "replace")
        else:
            response.json.return_value = payload
            response.content = content or jsonlib.dumps(payload).encode()
            response.text = jsonlib.dumps(payload)
        return response

    return _make


@pytest.fixture
def issue_payload():
    """A representative GET /issue/{key} payload."""
    return {
        "id": "10001",
        "key": "PROJ-123",
        "fields": {
            "summary": "Login fails on Safari",
            "description": {
                "type": "doc",
                "version": 1,
                "content": [
                    {
                        "type": "paragraph",
                        "content": [{"type": "text", "text": "Steps to reproduce"}],
                    }
                ],
            },
            "status": {
                "id": "3",
                "name": "In Progress",
                "statusCategory": {"id": 4, "key": "indeterminate", "name": "In Progress"},
            },
            "priority": {"id": "2", "name": "High"},
            "assignee": {
                "accountId": "5b10ac8d82e05b22cc7d4ef5",
                "displayName": "Jane Doe",
                "emailAddress": "jane@example.com",
            },
            "reporter": {"accountId": "abcd1234efgh", "displayName": "John Smith"},
            "project": {"id": "10000", "key": "PROJ", "name": "Project"},
            "issuetype": {"id": "10004", "name": "Bug", "subtask": False},
            "labels": ["frontend", "safari"],
            "components": [{"id": "1", "name": "Web"}],
            "created": "2024-01-15T10:30:00.000+0000",
            "updated": "2024-01-16T08:00:00.000+0000",
        },
    }
