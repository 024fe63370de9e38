"""
Atlassian Document Format (ADF) utilities.

Jira Cloud stores descriptions and comments as ADF trees. This module turns
human-written text into ADF on the write path and flattens ADF back to
plain text for display on the read path.

Markdown input is parsed with markdown-it (CommonMark plus tables and
strikethrough) and its syntax tree is mapped onto ADF nodes. Line breaks
inside a paragraph are kept as ``hardBreak`` nodes.

Plain input goes through a fixed set of line heuristics, not a markdown
parser. Rules are tried in this order and the first match wins:

1. blank line -> empty paragraph
2. ``Title:`` alone on a line -> bold label paragraph; a stack trace label
   also swallows the following non-blank lines into one code block
3. run of ``1. item`` lines -> one ordered list
4. run of ``- item`` / ``• item`` lines -> one bullet list
5. ``Label: value`` with a label of letters and spaces (any script) -> bold
   label plus value
6. filesystem path (``/...`` or ``C:\\...``) -> paragraph in code style
7. anything else -> plain paragraph

URLs inside produced text become link-marked text nodes.

The reverse direction is lossy: marks, list numbering and nesting depth are
not restored.
"""

import json
import logging
import re
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ...exceptions import MCPJiraValidationError

logger = logging.getLogger("mcp-jira.models.adf")

_LINE_BREAK = re.compile(r"\r?\n")
_SECTION_LABEL = re.compile(r"^(?P<title>[^:]{2,}):\s*$")
_ORDERED_ITEM = re.compile(r"^\d+\.\s+")
_BULLET_ITEM = re.compile(r"^[-•]\s+")
_LABEL_VALUE = re.compile(r"^(?P<label>[^\W\d_](?:[^\W\d_]|\s)*):\s+(?P<value>.+)$")
_PATH_LINE = re.compile(r"^(?:/|[A-Za-z]:\\)")
_URL = re.compile(r"https?://[^\s)]+")

CODE_SECTION_TITLES = frozenset({"stack trace", "stacktrace", "traceback"})

_MARKDOWN = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])
_MARKDOWN_MARKS = {"strong": "strong", "em": "em", "s": "strike"}


def _text(text: str, marks: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "text", "text": text}
    if marks:
        node["marks"] = marks
    return node


def _paragraph(content: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "paragraph", "content": content}


def inline_nodes(
    text: str, marks: list[dict[str, Any]] | None = None
) -> list[dict[str, Any]]:
    """Split text into text nodes, giving each URL its own link-marked node."""
    marks = marks or []
    nodes: list[dict[str, Any]] = []
    position = 0
    for match in _URL.finditer(text):
        if match.start() > position:
            nodes.append(_text(text[position : match.start()], marks))
        url = match.group(0)
        nodes.append(_text(url, [*marks, {"type": "link", "attrs": {"href": url}}]))
        position = match.end()
    if position < len(text):
        nodes.append(_text(text[position:], marks))
    return nodes


def _list_block(list_type: str, items: list[str]) -> dict[str, Any]:
    return {
        "type": list_type,
        "content": [
            {"type": "listItem", "content": [_paragraph(inline_nodes(item))]}
            for item in items
        ],
    }


def _is_code_section(title: str) -> bool:
    return " ".join(title.split()).lower() in CODE_SECTION_TITLES


def text_to_adf(text: str) -> dict[str, Any]:
    """
    Convert plain text to an ADF document using the line heuristics above.

    Args:
        text: Plain text, possibly multi-line

    Returns:
        A fresh ``{"type": "doc", "version": 1, "content": [...]}`` tree
    """
    content: list[dict[str, Any]] = []
    if text == "":
        return {"type": "doc", "version": 1, "content": content}

    raw_lines = _LINE_BREAK.split(text)
    lines = [line.rstrip() for line in raw_lines]
    i = 0
    while i < len(lines):
        line = lines[i]

        if not line:
            content.append(_paragraph([]))
            i += 1
            continue

        section = _SECTION_LABEL.match(line)
        if section:
            title = section.group("title")
            content.append(
                _paragraph([_text(f"{title}:", [{"type": "strong"}])])
            )
            i += 1
            if _is_code_section(title):
                block: list[str] = []
                while i < len(lines) and lines[i]:
                    block.append(raw_lines[i].rstrip("\r"))
                    i += 1
                if block:
                    content.append(
                        {
                            "type": "codeBlock",
                            "attrs": {"language": ""},
                            "content": [_text("\n".join(block))],
                        }
                    )
            continue

        if _ORDERED_ITEM.match(line):
            items = []
            while i < len(lines) and _ORDERED_ITEM.match(lines[i]):
                items.append(_ORDERED_ITEM.sub("", lines[i], count=1))
                i += 1
            content.append(_list_block("orderedList", items))
            continue

        if _BULLET_ITEM.match(line):
            items = []
            while i < len(lines) and _BULLET_ITEM.match(lines[i]):
                items.append(_BULLET_ITEM.sub("", lines[i], count=1))
                i += 1
            content.append(_list_block("bulletList", items))
            continue

        label_value = _LABEL_VALUE.match(line)
        if label_value:
            content.append(
                _paragraph(
                    [
                        _text(f"{label_value.group('label')}:", [{"type": "strong"}]),
                        _text(" "),
                        *inline_nodes(label_value.group("value")),
                    ]
                )
            )
        elif _PATH_LINE.match(line):
            content.append(_paragraph([_text(line, [{"type": "code"}])]))
        else:
            content.append(_paragraph(inline_nodes(line)))
        i += 1

    return {"type": "doc", "version": 1, "content": content}


def _markdown_inline(
    node: SyntaxTreeNode, marks: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for child in node.children:
        kind = child.type
        if kind == "text":
            if not child.content:
                continue
            if any(mark["type"] == "link" for mark in marks):
                nodes.append(_text(child.content, marks))
            else:
                nodes.extend(inline_nodes(child.content, marks))
        elif kind == "code_inline":
            # ADF only allows link next to the code mark
            links = [mark for mark in marks if mark["type"] == "link"]
            nodes.append(_text(child.content, [*links, {"type": "code"}]))
        elif kind in ("softbreak", "hardbreak"):
            nodes.append({"type": "hardBreak"})
        elif kind in _MARKDOWN_MARKS:
            nodes.extend(
                _markdown_inline(child, [*marks, {"type": _MARKDOWN_MARKS[kind]}])
            )
        elif kind == "link":
            link = {"type": "link", "attrs": {"href": str(child.attrs.get("href", ""))}}
            nodes.extend(_markdown_inline(child, [*marks, link]))
        elif kind == "image":
            src = str(child.attrs.get("src", ""))
            label = child.content or src
            if label:
                nodes.append(
                    _text(label, [*marks, {"type": "link", "attrs": {"href": src}}])
                )
        elif child.children:
            nodes.extend(_markdown_inline(child, marks))
        elif child.content:
            nodes.append(_text(child.content, marks))
    return nodes


def _markdown_inline_content(block: SyntaxTreeNode) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for child in block.children:
        if child.type == "inline":
            nodes.extend(_markdown_inline(child, []))
    return nodes


def _markdown_list(node: SyntaxTreeNode) -> dict[str, Any]:
    list_type = "orderedList" if node.type == "ordered_list" else "bulletList"
    block: dict[str, Any] = {
        "type": list_type,
        "content": [
            {"type": "listItem", "content": _markdown_blocks(item) or [_paragraph([])]}
            for item in node.children
        ],
    }
    start = node.attrs.get("start")
    if list_type == "orderedList" and start is not None:
        block["attrs"] = {"order": int(start)}
    return block


def _markdown_table(node: SyntaxTreeNode) -> dict[str, Any]:
    rows = []
    for section in node.children:
        for row in section.children:
            cells = [
                {
                    "type": "tableHeader" if cell.type == "th" else "tableCell",
                    "attrs": {},
                    "content": [_paragraph(_markdown_inline_content(cell))],
                }
                for cell in row.children
            ]
            rows.append({"type": "tableRow", "content": cells})
    return {
        "type": "table",
        "attrs": {"isNumberColumnEnabled": False, "layout": "default"},
        "content": rows,
    }


def _markdown_blocks(node: SyntaxTreeNode) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = []
    for child in node.children:
        kind = child.type
        if kind == "paragraph":
            blocks.append(_paragraph(_markdown_inline_content(child)))
        elif kind == "heading":
            blocks.append(
                {
                    "type": "heading",
                    "attrs": {"level": int(child.tag[1:])},
                    "content": _markdown_inline_content(child),
                }
            )
        elif kind in ("bullet_list", "ordered_list"):
            blocks.append(_markdown_list(child))
        elif kind in ("fence", "code_block"):
            info = child.info.split()
            code = child.content.rstrip("\n")
            blocks.append(
                {
                    "type": "codeBlock",
                    "attrs": {"language": info[0] if info else ""},
                    "content": [_text(code)] if code else [],
                }
            )
        elif kind == "blockquote":
            blocks.append(
                {"type": "blockquote", "content": _markdown_blocks(child) or [_paragraph([])]}
            )
        elif kind == "hr":
            blocks.append({"type": "rule"})
        elif kind == "table":
            blocks.append(_markdown_table(child))
        elif child.children:
            blocks.extend(_markdown_blocks(child))
    return blocks


def markdown_to_adf(text: str) -> dict[str, Any]:
    """
    Convert Markdown to an ADF document.

    Args:
        text: Markdown source

    Returns:
        A fresh ``{"type": "doc", "version": 1, "content": [...]}`` tree
    """
    tree = SyntaxTreeNode(_MARKDOWN.parse(text))
    return {"type": "doc", "version": 1, "content": _markdown_blocks(tree)}


def ensure_adf(value: Any, fmt: str = "plain") -> Any:
    """
    Prepare a description or comment body for the v3 API.

    Args:
        value: Markdown or plain text, an ADF JSON string (with
            ``fmt="adf"``), or an already-structured ADF object
        fmt: ``"markdown"``, ``"plain"`` or ``"adf"``; markdown that cannot
            be converted falls back to the plain text heuristics

    Returns:
        An ADF document; non-string input (including None) is returned
        unchanged

    Raises:
        MCPJiraValidationError: If ``fmt="adf"`` and the string is not an ADF
            document
    """
    if not isinstance(value, str):
        return value

    if fmt == "markdown":
        try:
            return markdown_to_adf(value)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Markdown conversion failed, using plain text rules: {e}")
            return text_to_adf(value)

    if fmt == "adf":
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise MCPJiraValidationError(
                "Input validation failed.", [f"body: invalid ADF JSON ({e.msg})"]
            ) from e
        if not isinstance(parsed, dict) or parsed.get("type") != "doc":
            raise MCPJiraValidationError(
                "Input validation failed.",
                ["body: ADF content must be an object with type 'doc'"],
            )
        return parsed

    return text_to_adf(value)


def _children(node: dict[str, Any]) -> list[str]:
    content = node.get("content")
    if not isinstance(content, list):
        return []
    return [_render(child) for child in content]


def _render(node: Any) -> str:
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "\n".join(text for text in (_render(item) for item in node) if text)
    if not isinstance(node, dict):
        return ""

    node_type = node.get("type")
    if node_type == "text":
        text = node.get("text")
        return text if isinstance(text, str) else ""
    if node_type == "hardBreak":
        return "\n"
    if node_type in ("paragraph", "heading", "blockquote"):
        return "".join(_children(node))
    if node_type == "codeBlock":
        return "\n" + "".join(_children(node)) + "\n"
    if node_type in ("bulletList", "orderedList", "table"):
        return "\n".join(_children(node))
    if node_type == "tableRow":
        return " | ".join(_children(node))
    if node_type == "listItem":
        return "• " + "".join(_children(node))
    if node_type == "doc":
        return "\n".join(_children(node))
    return "".join(_children(node))


def adf_to_text(adf_content: Any) -> str:
    """
    Convert Atlassian Document Format (ADF) content to plain text.

    Never raises: None, scalars and malformed or cyclic trees yield "".

    Args:
        adf_content: ADF document (dict), content list, string, or None

    Returns:
        Plain text string, empty when nothing can be extracted
    """
    try:
        return _render(adf_content)
    except RecursionError:
        logger.debug("ADF tree too deep or cyclic, returning empty text")
        return ""
