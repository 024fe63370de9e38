"""Utility functions specific to Jira operations."""

import re
from urllib.parse import parse_qs, unquote, urlparse

from .constants import ATTACHMENT_URI_PREFIX

ISSUE_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9]*-\d+$")
PROJECT_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9]{0,9}$")
_ISSUE_KEY_SEARCH = re.compile(r"\b([A-Z][A-Z0-9]*-\d+)\b")
_JQL_STRIP_CHARS = re.compile(r"[<>\"'`]")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_jql(jql: str) -> str:
    """Strip characters that break downstream rendering and tidy whitespace.

    Removes ``< > " ' ` `` characters, collapses whitespace runs to a single
    space and trims both ends. This is not a JQL validator.

    Args:
        jql: The raw JQL query

    Returns:
        The sanitized query; sanitizing it again returns the same string
    """
    without_chars = _JQL_STRIP_CHARS.sub("", jql)
    return _WHITESPACE_RUN.sub(" ", without_chars).strip()


def is_valid_issue_key(key: str) -> bool:
    return bool(ISSUE_KEY_PATTERN.match(key or ""))


def is_valid_project_key(key: str) -> bool:
    return bool(PROJECT_KEY_PATTERN.match(key or ""))


def extract_issue_key(text: str) -> str | None:
    """Find an issue key (e.g. ``PROJ-123``) in a URL or free text.

    For ``http(s)`` URLs only the path and query are searched: the segment
    after ``/browse/`` wins, then the last key-shaped path segment, then any
    query value. The hostname is never considered.
    """
    text = (text or "").strip()
    parsed = urlparse(text)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        segments = [unquote(s).upper() for s in parsed.path.split("/") if s]
        if "BROWSE" in segments:
            index = segments.index("BROWSE") + 1
            if index < len(segments) and is_valid_issue_key(segments[index]):
                return segments[index]
        for segment in reversed(segments):
            if is_valid_issue_key(segment):
                return segment
        for values in parse_qs(parsed.query).values():
            for value in values:
                if is_valid_issue_key(value.strip().upper()):
                    return value.strip().upper()
        return None

    match = _ISSUE_KEY_SEARCH.search(text.upper())
    return match.group(1) if match else None


def format_file_size(size: int | float | None) -> str:
    """Render a byte count as B, KB, MB or GB with up to two decimals."""
    if not size or size < 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    unit_index = 0
    while value >= 1024 and unit_index < len(units) - 1:
        value /= 1024
        unit_index += 1
    rendered = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{rendered} {units[unit_index]}"


def attachment_uri(attachment_id: str, thumbnail: bool = False) -> str:
    uri = f"{ATTACHMENT_URI_PREFIX}{attachment_id}"
    return f"{uri}/thumbnail" if thumbnail else uri


def parse_attachment_uri(uri: str) -> tuple[str, bool]:
    """Split ``jira://attachment/{id}[/thumbnail]`` into id and thumbnail flag.

    Raises:
        ValueError: If the URI is not an attachment URI
    """
    if not uri.startswith(ATTACHMENT_URI_PREFIX):
        raise ValueError(f"Not a Jira attachment URI: {uri}")
    parts = uri[len(ATTACHMENT_URI_PREFIX) :].strip("/").split("/")
    attachment_id = parts[0]
    if not attachment_id or len(parts) > 2 or (
        len(parts) == 2 and parts[1] != "thumbnail"
    ):
        raise ValueError(f"Invalid Jira attachment URI: {uri}")
    return attachment_id, len(parts) == 2
