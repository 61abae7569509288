"""Rendering of ``html`` fenced blocks.

The block source is rewritten (media paths resolved), parsed into nodes with
BeautifulSoup, and every image or media player gets load/error handling.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.html.rewrite import rewrite_media_attributes
from cardviewer.messages import get_messages
from cardviewer.nodes import InsertErrorAfter, MarkLoaded, Node

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TIMEOUT_S = 10.0
MEDIA_PLAYER_TAG = "media-player"

# A lone element (paired or self-closing) carrying no style/class/id attribute
# and no media source
_ATTRIBUTE = r'\s+(?!style|class|id|src|poster)[^\s=>/]+(?:="[^"]*")?'
EMPTY_TAG_PATTERNS = (
    re.compile(rf"^\s*<\w+(?:{_ATTRIBUTE})*>\s*</\w+>\s*$"),
    re.compile(rf"^\s*<\w+(?:{_ATTRIBUTE})*\s*/>\s*$"),
)
_STYLING_ATTRIBUTE = re.compile(r"\b(?:style|class|id)\s*=")


def is_empty_html(content: str) -> bool:
    """True for blank content or a single empty, unstyled element."""
    if not content:
        return True
    if _STYLING_ATTRIBUTE.search(content):
        return False
    return any(pattern.match(content) for pattern in EMPTY_TAG_PATTERNS)


def _convert(tag: Tag) -> Node:
    classes: list[str] = []
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        if name == "class":
            classes = list(value) if isinstance(value, list) else str(value).split()
        elif isinstance(value, list):
            attrs[name] = " ".join(value)
        else:
            attrs[name] = "" if value is None else str(value)

    node = Node(tag.name, classes=classes, attrs=attrs)
    for child in tag.children:
        if isinstance(child, Tag):
            node.append(_convert(child))
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            node.append(Node.text_node(str(child)))
    return node


def fragment_to_nodes(fragment: str) -> list[Node]:
    """Parse an HTML fragment into nodes (top-level elements only)."""
    soup = BeautifulSoup(fragment, "html.parser")
    return [_convert(child) for child in soup.contents if isinstance(child, Tag)]


def attach_media_handlers(
    root: Node,
    messages: dict[str, str],
    timeout_s: float = DEFAULT_MEDIA_TIMEOUT_S,
) -> None:
    """Give every image and media player load/error handling."""
    for node, _ in root.walk():
        if node.tag == "img":
            node.on("error", InsertErrorAfter(_load_error(messages["image_error"])))
            node.on("load", MarkLoaded(attr="data-loaded"))
        elif node.tag == MEDIA_PLAYER_TAG:
            node.attrs["data-load-timeout"] = str(int(timeout_s * 1000))
            node.on("error", InsertErrorAfter(_load_error(messages["media_failed"])))
            node.on("loadeddata", MarkLoaded(attr="data-loaded"))
            node.on("timeout", InsertErrorAfter(_load_error(messages["media_timeout"])))


def _load_error(message: str) -> Node:
    return Node("div", classes=["image-load-error"], text=message)


def render_html_block(
    source: str,
    resolver: AssetPathResolver,
    messages: Optional[dict[str, str]] = None,
    timeout_s: float = DEFAULT_MEDIA_TIMEOUT_S,
) -> Node:
    """Build the node tree for an ``html`` block.

    Args:
        source: Raw HTML from the block
        resolver: Resolver for media paths
        messages: Localized strings
        timeout_s: Load confirmation window for media players

    Returns:
        Container node with header and content area
    """
    messages = messages or get_messages()
    trimmed = (source or "").strip()

    container = Node("div", classes=["html-viewer-container"])
    header = container.el("div", cls="html-viewer-header")
    header.el("span", cls="html-viewer-type", text=messages["html_header"])
    content = container.el("div", cls="html-viewer-content")

    if is_empty_html(trimmed):
        content.el("div", cls="html-viewer-placeholder", text=messages["html_empty"])
        return container

    try:
        for node in fragment_to_nodes(rewrite_media_attributes(trimmed, resolver)):
            content.append(node)
        attach_media_handlers(content, messages, timeout_s)
    except Exception as e:
        logger.error(f"HTML render failed: {e}")
        content.children.clear()
        content.el("div", cls="html-viewer-error", text=f"{messages['html_failed']}: {e}")

    return container
