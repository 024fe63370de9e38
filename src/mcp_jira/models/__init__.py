"""Pydantic models for Jira API data."""

from .base import ApiModel

__all__ = ["ApiModel"]
