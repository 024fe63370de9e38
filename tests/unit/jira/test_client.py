"""Tests for the Jira request pipeline."""

from unittest.mock import MagicMock, call, patch

import pytest
import requests

from mcp_jira.exceptions import (
    MCPJiraApiError,
    MCPJiraAuthenticationError,
    MCPJiraFieldError,
    MCPJiraNetworkError,
    MCPJiraNotFoundError,
    MCPJiraPermissionError,
    MCPJiraRateLimitError,
)
from mcp_jira.jira import JiraClient, RetryPolicy
from mcp_jira.jira.client import classify_response


@pytest.fixture
def client(jira_config_factory):
    client = JiraClient(
        config=jira_config_factory(retry_policy=RetryPolicy(max_retries=3, base_delay=0.5))
    )
    client.jira = MagicMock()
    return client


@pytest.fixture
def mock_sleep():
    with patch("mcp_jira.jira.client.time.sleep") as sleep:
        yield sleep


class TestClassifyResponse:
    """Tests for mapping HTTP failures to exceptions."""

    @pytest.mark.parametrize(
        ("status", "error_class"),
        [
            (401, MCPJiraAuthenticationError),
            (403, MCPJiraPermissionError),
            (404, MCPJiraNotFoundError),
            (429, MCPJiraRateLimitError),
        ],
    )
    def test_status_specific_errors(self, make_response, status, error_class):
        error = classify_response(make_response(status, {}))
        assert isinstance(error, error_class)
        assert error.status_code == status

    def test_field_errors(self, make_response):
        response = make_response(400, {"errors": {"summary": "Field is required"}})
        error = classify_response(response)
        assert isinstance(error, MCPJiraFieldError)
        assert error.field_errors == {"summary": "Field is required"}
        assert str(error) == "summary: Field is required"
        assert error.retryable is False

    def test_error_messages(self, make_response):
        response = make_response(400, {"errorMessages": ["Bad JQL", "Another"]})
        error = classify_response(response)
        assert isinstance(error, MCPJiraApiError)
        assert str(error) == "Bad JQL, Another"

    def test_server_error_without_body_is_retryable(self, make_response):
        error = classify_response(make_response(503, reason="Service Unavailable"))
        assert isinstance(error, MCPJiraApiError)
        assert str(error) == "HTTP 503: Service Unavailable"
        assert error.retryable is True

    def test_not_found_includes_jira_message(self, make_response):
        response = make_response(404, {"errorMessages": ["Issue does not exist"]})
        error = classify_response(response)
        assert "Issue does not exist" in str(error)


class TestRequestRetries:
    """Tests for retry behavior of JiraClient.request."""

    def test_success_returns_decoded_json(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(200, {"key": "PROJ-1"})

        assert client.request("GET", "issue/PROJ-1") == {"key": "PROJ-1"}
        mock_sleep.assert_not_called()

    def test_path_is_prefixed_with_api_base(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(200, {})

        client.request("GET", "myself", params={"a": 1})

        kwargs = client.jira.request.call_args.kwargs
        assert kwargs["path"] == "rest/api/3/myself"
        assert kwargs["params"] == {"a": 1}
        assert kwargs["advanced_mode"] is True
        assert kwargs["absolute"] is False

    def test_absolute_url_is_not_prefixed(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(200, {})

        client.request("GET", "https://files.example.com/x")

        kwargs = client.jira.request.call_args.kwargs
        assert kwargs["path"] == "https://files.example.com/x"
        assert kwargs["absolute"] is True

    @pytest.mark.parametrize("max_retries", [0, 1, 3])
    def test_persistent_server_error_makes_retries_plus_one_attempts(
        self, client, make_response, mock_sleep, max_retries
    ):
        client.jira.request.return_value = make_response(500, {"errorMessages": ["boom"]})
        policy = RetryPolicy(max_retries=max_retries, base_delay=0.5)

        with pytest.raises(MCPJiraApiError):
            client.request("GET", "issue/PROJ-1", retry_policy=policy)

        assert client.jira.request.call_count == max_retries + 1
        assert mock_sleep.call_args_list == [
            call(0.5 * n) for n in range(1, max_retries + 1)
        ]

    def test_recovers_after_transient_failure(self, client, make_response, mock_sleep):
        client.jira.request.side_effect = [
            make_response(502, reason="Bad Gateway"),
            make_response(200, {"ok": True}),
        ]

        assert client.request("GET", "issue/PROJ-1") == {"ok": True}
        assert client.jira.request.call_count == 2
        mock_sleep.assert_called_once_with(0.5)

    @pytest.mark.parametrize("status", [401, 403, 404])
    def test_terminal_statuses_are_not_retried(
        self, client, make_response, mock_sleep, status
    ):
        client.jira.request.return_value = make_response(status, {})

        with pytest.raises(
            (MCPJiraAuthenticationError, MCPJiraPermissionError, MCPJiraNotFoundError)
        ):
            client.request("GET", "issue/PROJ-1")

        assert client.jira.request.call_count == 1
        mock_sleep.assert_not_called()

    def test_terminal_status_ignores_retry_condition(
        self, client, make_response, mock_sleep
    ):
        client.jira.request.return_value = make_response(404, {})
        policy = RetryPolicy(max_retries=3, base_delay=0, retry_condition=lambda e: True)

        with pytest.raises(MCPJiraNotFoundError):
            client.request("GET", "issue/PROJ-1", retry_policy=policy)

        assert client.jira.request.call_count == 1

    def test_client_error_is_not_retried(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(
            400, {"errors": {"summary": "required"}}
        )

        with pytest.raises(MCPJiraFieldError):
            client.request("POST", "issue", json={})

        assert client.jira.request.call_count == 1

    def test_rate_limit_is_retried(self, client, make_response, mock_sleep):
        client.jira.request.side_effect = [
            make_response(429, {}),
            make_response(200, {"done": 1}),
        ]

        assert client.request("GET", "myself") == {"done": 1}
        assert client.jira.request.call_count == 2

    def test_retry_condition_can_veto_retry(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(500, {})
        seen = []

        def never(error):
            seen.append(error)
            return False

        policy = RetryPolicy(max_retries=3, base_delay=0, retry_condition=never)
        with pytest.raises(MCPJiraApiError):
            client.request("GET", "myself", retry_policy=policy)

        assert client.jira.request.call_count == 1
        assert len(seen) == 1

    def test_retry_condition_can_allow_client_error_retry(
        self, client, make_response, mock_sleep
    ):
        client.jira.request.return_value = make_response(400, {"errorMessages": ["x"]})
        policy = RetryPolicy(max_retries=2, base_delay=0, retry_condition=lambda e: True)

        with pytest.raises(MCPJiraApiError):
            client.request("GET", "myself", retry_policy=policy)

        assert client.jira.request.call_count == 3

    def test_network_error_is_retried_then_raised(self, client, mock_sleep):
        client.jira.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(MCPJiraNetworkError) as exc_info:
            client.request("GET", "myself")

        assert client.jira.request.call_count == 4
        assert "refused" in str(exc_info.value)


class TestRequestDecoding:
    """Tests for response body decoding."""

    def test_no_content_returns_none(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(204)
        assert client.request("DELETE", "attachment/1") is None

    def test_non_json_body_returns_text(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(200, content=b"plain body")
        assert client.request("GET", "something") == "plain body"

    def test_request_raw_returns_response(self, client, make_response, mock_sleep):
        response = make_response(200, content=b"\x89PNG")
        client.jira.request.return_value = response
        assert client.request_raw("GET", "attachment/content/1") is response


class TestConnection:
    """Tests for JiraClient.test_connection."""

    def test_success(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(200, {"displayName": "Jane"})
        assert client.test_connection() is True

    def test_failure_is_not_retried(self, client, make_response, mock_sleep):
        client.jira.request.return_value = make_response(500, {})
        assert client.test_connection() is False
        assert client.jira.request.call_count == 1


class TestSession:
    """Tests for lazy creation of the atlassian session."""

    def test_session_created_once_with_config(self, jira_config_factory):
        config = jira_config_factory(timeout=12, ssl_verify=False)
        with patch("mcp_jira.jira.client.Jira") as mock_jira:
            client = JiraClient(config=config)
            first = client.jira
            second = client.jira

        assert first is second
        mock_jira.assert_called_once_with(
            url="https://test.atlassian.net",
            username="test@example.com",
            password="test-api-token-1234",
            cloud=True,
            timeout=12,
            verify_ssl=False,
        )
