"""Tests for environment variable helpers."""

import pytest

from mcp_jira.utils.env import (
    getenv_first,
    is_dry_run,
    is_env_ssl_verify,
    is_env_truthy,
    is_redaction_enabled,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("TRUE", True), ("1", True), ("yes", True), ("false", False), ("", False)],
)
def test_is_env_truthy(monkeypatch, value, expected):
    monkeypatch.setenv("TEST_FLAG", value)
    assert is_env_truthy("TEST_FLAG") is expected


def test_is_env_truthy_unset(monkeypatch):
    monkeypatch.delenv("TEST_FLAG", raising=False)
    assert is_env_truthy("TEST_FLAG") is False
    assert is_env_truthy("TEST_FLAG", "true") is True


@pytest.mark.parametrize(
    ("value", "expected"), [("false", False), ("0", False), ("no", False), ("true", True)]
)
def test_is_env_ssl_verify(monkeypatch, value, expected):
    monkeypatch.setenv("TEST_SSL", value)
    assert is_env_ssl_verify("TEST_SSL") is expected


def test_is_env_ssl_verify_defaults_to_true(monkeypatch):
    monkeypatch.delenv("TEST_SSL", raising=False)
    assert is_env_ssl_verify("TEST_SSL") is True


def test_getenv_first(monkeypatch):
    monkeypatch.delenv("FIRST_VAR", raising=False)
    monkeypatch.setenv("SECOND_VAR", "second")
    assert getenv_first("FIRST_VAR", "SECOND_VAR") == "second"
    monkeypatch.setenv("FIRST_VAR", "first")
    assert getenv_first("FIRST_VAR", "SECOND_VAR") == "first"
    assert getenv_first("MISSING_VAR_X", default="d") == "d"


def test_flags(monkeypatch):
    assert is_redaction_enabled() is False
    assert is_dry_run() is False
    monkeypatch.setenv("MCP_REDACT_SENSITIVE", "true")
    monkeypatch.setenv("MCP_DRY_RUN", "1")
    assert is_redaction_enabled() is True
    assert is_dry_run() is True
