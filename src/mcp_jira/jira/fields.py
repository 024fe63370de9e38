"""Module for Jira field operations."""

import logging

from ..models.jira import JiraField
from .client import JiraClient

logger = logging.getLogger("mcp-jira.fields")


class FieldsMixin(JiraClient):
    """Mixin for Jira field definitions."""

    def get_fields(self) -> list[JiraField]:
        """Get every field definition (system and custom) of the instance."""
        return JiraField.from_api_list(self.request("GET", "field"))

    def get_custom_fields(self) -> list[JiraField]:
        return [field for field in self.get_fields() if field.custom]
