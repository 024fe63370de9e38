"""Attachment operations for Jira API."""

import base64
import binascii
import logging
import mimetypes
import os
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from ..exceptions import MCPJiraError, MCPJiraNetworkError, MCPJiraValidationError
from ..models.jira import JiraAttachment
from .client import JiraClient
from .constants import (
    ALLOWED_URL_SCHEMES,
    BASE64_WARNING_SIZE,
    MAX_ATTACHMENT_SIZE,
    NETWORK_ERROR_MESSAGE,
    VALIDATION_ERROR_MESSAGE,
)
from .utils import format_file_size

logger = logging.getLogger("mcp-jira.attachments")

UPLOAD_HEADERS = {"X-Atlassian-Token": "no-check"}
DOWNLOAD_HEADERS = {"Accept": "*/*"}
_CHUNK_SIZE = 64 * 1024


def _invalid(problem: str) -> MCPJiraValidationError:
    return MCPJiraValidationError(VALIDATION_ERROR_MESSAGE, [problem])


def _check_size(size: int, source: str) -> None:
    if size > MAX_ATTACHMENT_SIZE:
        raise _invalid(
            f"{source}: file is {format_file_size(size)}, larger than the "
            f"{format_file_size(MAX_ATTACHMENT_SIZE)} limit"
        )


class AttachmentsMixin(JiraClient):
    """Mixin for Jira attachment operations."""

    def _upload(self, issue_key: str, filename: str, data: bytes) -> JiraAttachment:
        _check_size(len(data), filename)
        mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        result = self.request(
            "POST",
            f"issue/{issue_key}/attachments",
            files={"file": (filename, data, mime_type)},
            headers=UPLOAD_HEADERS,
        )
        if not isinstance(result, list) or not result:
            raise MCPJiraError(
                "Failed to upload attachment - no attachment returned from Jira"
            )
        logger.info(
            f"Uploaded {filename} ({format_file_size(len(data))}) to {issue_key}"
        )
        return JiraAttachment.from_api_response(result[0])

    def add_attachment(
        self, issue_key: str, filename: str, content: str, is_base64: bool = True
    ) -> JiraAttachment:
        """
        Upload inline content as an attachment.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            filename: Name the attachment gets in Jira
            content: File content, base64-encoded unless ``is_base64`` is False
            is_base64: Whether ``content`` is base64

        Returns:
            The created attachment
        """
        if is_base64:
            if len(content) > BASE64_WARNING_SIZE:
                logger.warning(
                    f"Large base64 content detected ({len(content)} chars). "
                    "Consider using filePath instead for better efficiency."
                )
            try:
                data = base64.b64decode(content, validate=True)
            except (binascii.Error, ValueError) as e:
                raise _invalid("content: not valid base64") from e
        else:
            data = content.encode("utf-8")
        return self._upload(issue_key, filename, data)

    def add_attachment_from_path(
        self, issue_key: str, file_path: str, filename: str | None = None
    ) -> JiraAttachment:
        path = Path(os.path.expanduser(file_path))
        if not path.is_file():
            raise _invalid(f"filePath: file not found: {file_path}")
        _check_size(path.stat().st_size, str(path))
        return self._upload(issue_key, filename or path.name, path.read_bytes())

    def add_attachment_from_url(
        self, issue_key: str, url: str, filename: str | None = None
    ) -> JiraAttachment:
        """
        Download a file over HTTP(S) and attach it.

        The download is streamed and aborted once it exceeds the size limit.
        """
        parsed = urlparse(url)
        if parsed.scheme not in ALLOWED_URL_SCHEMES:
            raise _invalid(
                f"fileUrl: unsupported protocol '{parsed.scheme}', use http or https"
            )

        try:
            with requests.get(
                url,
                stream=True,
                timeout=self.config.timeout,
                verify=self.config.ssl_verify,
            ) as response:
                response.raise_for_status()
                declared = response.headers.get("Content-Length")
                if declared and declared.isdigit():
                    _check_size(int(declared), url)
                chunks: list[bytes] = []
                received = 0
                for chunk in response.iter_content(_CHUNK_SIZE):
                    received += len(chunk)
                    _check_size(received, url)
                    chunks.append(chunk)
        except requests.RequestException as e:
            raise MCPJiraNetworkError(
                f"{NETWORK_ERROR_MESSAGE} Failed to download {url}: {e}"
            ) from e

        name = filename or unquote(os.path.basename(parsed.path)) or "attachment"
        return self._upload(issue_key, name, b"".join(chunks))

    def get_attachments(self, issue_key: str) -> list[JiraAttachment]:
        data = self.request(
            "GET", f"issue/{issue_key}", params={"fields": "attachment"}
        ) or {}
        return JiraAttachment.from_api_list((data.get("fields") or {}).get("attachment"))

    def get_attachment_metadata(self, attachment_id: str) -> JiraAttachment:
        return JiraAttachment.from_api_response(
            self.request("GET", f"attachment/{attachment_id}")
        )

    def get_attachment_content(
        self, attachment_id: str, thumbnail: bool = False
    ) -> bytes:
        """Download the bytes of an attachment or its thumbnail."""
        kind = "thumbnail" if thumbnail else "content"
        response = self.request_raw(
            "GET", f"attachment/{kind}/{attachment_id}", headers=DOWNLOAD_HEADERS
        )
        return response.content

    def delete_attachment(self, attachment_id: str) -> None:
        self.request("DELETE", f"attachment/{attachment_id}")
        logger.info(f"Deleted attachment {attachment_id}")
