"""
Base model for Jira API data.

All models are built from raw Jira JSON with ``from_api_response`` and are
tolerant of missing or malformed input: they fall back to defaults instead of
raising.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Base class for models constructed from Jira API responses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        raise NotImplementedError

    @classmethod
    def from_api_list(cls, items: Any, **kwargs: Any) -> list[Self]:
        """Build a list of models, skipping entries that are not objects."""
        if not isinstance(items, list):
            return []
        return [
            cls.from_api_response(item, **kwargs)
            for item in items
            if isinstance(item, dict)
        ]
