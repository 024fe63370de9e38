"""Module for Jira issue link operations."""

import logging
from typing import Any

from ..models.jira import ensure_adf
from .client import JiraClient
from .constants import INWARD_LINK_PHRASES, LINK_TYPE_NAMES

logger = logging.getLogger("mcp-jira.links")


def resolve_link_direction(
    from_issue: str, to_issue: str, link_type: str
) -> dict[str, Any]:
    """
    Translate a friendly link phrase into an issueLink request body.

    "A is blocked by B" makes A the inward issue; every other phrasing
    makes the first issue the outward one. Unknown phrases are sent as the
    Jira link type name unchanged.
    """
    phrase = " ".join(link_type.split()).lower()
    type_name = LINK_TYPE_NAMES.get(phrase, link_type)
    if phrase in INWARD_LINK_PHRASES:
        inward, outward = from_issue, to_issue
    else:
        inward, outward = to_issue, from_issue
    return {
        "type": {"name": type_name},
        "inwardIssue": {"key": inward},
        "outwardIssue": {"key": outward},
    }


class LinksMixin(JiraClient):
    """Mixin for Jira issue link operations."""

    def create_issue_link(self, from_issue: str, to_issue: str, link_type: str) -> None:
        """
        Link two issues using a friendly phrase such as 'blocks'.

        Args:
            from_issue: Issue the phrase starts from
            to_issue: Issue the phrase points at
            link_type: 'blocks', 'is blocked by', 'relates to', 'duplicates',
                'is duplicated by', 'clones', 'is cloned by', or a Jira link
                type name
        """
        body = resolve_link_direction(from_issue, to_issue, link_type)
        self.request("POST", "issueLink", json=body)
        logger.info(f"Linked {from_issue} {link_type} {to_issue}")

    def link_issues(
        self,
        inward_issue_key: str,
        outward_issue_key: str,
        link_type: str,
        comment: str | None = None,
    ) -> None:
        """
        Link two issues with an explicit Jira link type name.

        Args:
            inward_issue_key: Inward side of the link
            outward_issue_key: Outward side of the link
            link_type: Jira link type name (e.g. 'Blocks')
            comment: Optional comment added to the inward issue
        """
        body: dict[str, Any] = {
            "type": {"name": link_type},
            "inwardIssue": {"key": inward_issue_key},
            "outwardIssue": {"key": outward_issue_key},
        }
        if comment:
            body["comment"] = {"body": ensure_adf(comment)}
        self.request("POST", "issueLink", json=body)
        logger.info(f"Linked {inward_issue_key} to {outward_issue_key} ({link_type})")
