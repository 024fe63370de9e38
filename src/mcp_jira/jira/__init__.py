"""Jira API module for MCP Jira.

This module provides the Jira client and its operation mixins.
"""

from .attachments import AttachmentsMixin
from .client import JiraClient
from .comments import CommentsMixin
from .config import JiraConfig, RetryPolicy
from .epics import EpicsMixin
from .fields import FieldsMixin
from .issues import IssuesMixin
from .links import LinksMixin
from .projects import ProjectsMixin
from .search import SearchMixin
from .users import UsersMixin


class JiraFetcher(
    ProjectsMixin,
    IssuesMixin,
    SearchMixin,
    EpicsMixin,
    FieldsMixin,
    UsersMixin,
    CommentsMixin,
    LinksMixin,
    AttachmentsMixin,
):
    """
    The main Jira client class providing access to all Jira operations.

    This class inherits from multiple mixins that provide specific
    functionality:
    - ProjectsMixin: projects, issue types, priorities, statuses
    - IssuesMixin: issue get/create/update, subtasks, create metadata
    - SearchMixin: JQL search
    - EpicsMixin: Epic Link discovery and epic search
    - FieldsMixin: field definitions
    - UsersMixin: user lookup
    - CommentsMixin: comments
    - LinksMixin: issue links
    - AttachmentsMixin: attachment upload, download and deletion
    """

    pass


__all__ = ["JiraFetcher", "JiraConfig", "JiraClient", "RetryPolicy"]
