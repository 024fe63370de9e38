"""
Jira data models for the MCP Jira integration.

This package provides Pydantic models for Jira API data structures,
organized by entity type.
"""

from .adf import adf_to_text, ensure_adf, markdown_to_adf, text_to_adf
from .comment import JiraComment, JiraCommentPage, JiraCommentVisibility
from .common import (
    JiraAttachment,
    JiraComponent,
    JiraField,
    JiraIssueType,
    JiraPriority,
    JiraStatus,
    JiraStatusCategory,
    JiraUser,
)
from .createmeta import (
    JiraCreateMeta,
    JiraCreateMetaField,
    JiraCreateMetaIssueType,
    JiraCreateMetaProject,
)
from .issue import JiraIssue, JiraIssueProject
from .project import JiraProject, JiraProjectInsight
from .search import JiraSearchResult

__all__ = [
    # Converters
    "adf_to_text",
    "ensure_adf",
    "markdown_to_adf",
    "text_to_adf",
    # Common models
    "JiraUser",
    "JiraStatusCategory",
    "JiraStatus",
    "JiraIssueType",
    "JiraPriority",
    "JiraComponent",
    "JiraAttachment",
    "JiraField",
    # Entities
    "JiraIssue",
    "JiraIssueProject",
    "JiraProject",
    "JiraProjectInsight",
    "JiraSearchResult",
    "JiraComment",
    "JiraCommentPage",
    "JiraCommentVisibility",
    "JiraCreateMeta",
    "JiraCreateMetaProject",
    "JiraCreateMetaIssueType",
    "JiraCreateMetaField",
]
