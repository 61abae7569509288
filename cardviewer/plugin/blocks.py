"""Block discovery in Markdown documents.

Blocks are found two ways:

    (a) fenced blocks whose language has a registered processor are rendered
        straight from the Markdown source
    (b) code blocks left in the rendered HTML whose class names a card
        subtype (``language-card-<subtype>``) or ``language-imgs``

Path (a) swaps each block for a placeholder before Markdown conversion, so
path (b) never sees it again and no block is rendered twice.
"""

import logging
import re
import uuid
from typing import Callable, Optional

import markdown
from bs4 import BeautifulSoup

from cardviewer.gallery.grid import render_image_grid
from cardviewer.html.media import check_media
from cardviewer.nodes import Node
from cardviewer.plugin.errors import render_safely
from cardviewer.plugin.host import CardViewerHost

logger = logging.getLogger(__name__)

CARD_SELECTOR = 'pre > code[class*="language-card"]'
IMGS_SELECTOR = 'pre > code[class*="language-imgs"]'
CARD_CLASS_PATTERN = re.compile(r"language-card-([a-z]+)")

MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]

# Top-level ``` or ~~~ fence with an optional info string
FENCE_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*(?P<lang>[^\s`]*)[^\n]*\n(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)

PLACEHOLDER_ATTR = "data-cardviewer-block"


def extract_card_type(class_name: str) -> Optional[str]:
    """Card subtype from a code element's class string, or None for the bare token."""
    match = CARD_CLASS_PATTERN.search(class_name or "")
    return match.group(1) if match else None


def process_fenced_block(
    host: CardViewerHost,
    language: str,
    source: str,
    source_dir: str = "",
) -> Optional[Node]:
    """Render a fenced block through its registered processor.

    Returns:
        The rendered node, or None if no processor handles ``language``
    """
    processor = host.registry.get(language)
    if processor is None:
        return None
    return processor(source, source_dir)


def render_imgs_block(host: CardViewerHost, source: str, source_dir: str = "") -> Node:
    messages = host.messages
    return render_safely(
        lambda: render_image_grid(source, host.resolver_for(source_dir), messages),
        messages["grid_failed"],
    )


# Placeholders carry a per-call token; markup typed into a note never matches
def _placeholder(token: str, index: int) -> str:
    return f'<div {PLACEHOLDER_ATTR}="{token}-{index}"></div>'


def _placeholder_pattern(token: str) -> re.Pattern:
    return re.compile(rf'<div {PLACEHOLDER_ATTR}="{token}-(\d+)"></div>')


def _replace_code_blocks(
    host: CardViewerHost,
    soup: BeautifulSoup,
    source_dir: str,
    blocks: list[Node],
    token: str,
) -> None:
    renderers: list[tuple[str, Callable]] = [
        (CARD_SELECTOR, lambda code: _card_from_code(host, code, source_dir)),
        (IMGS_SELECTOR, lambda code: render_imgs_block(host, code.get_text(), source_dir)),
    ]
    for selector, render in renderers:
        for code in soup.select(selector):
            pre = code.parent
            if pre is None or pre.parent is None:
                continue
            node = render(code)
            if node is None:
                continue
            blocks.append(node)
            placeholder = soup.new_tag("div", attrs={PLACEHOLDER_ATTR: f"{token}-{len(blocks) - 1}"})
            pre.replace_with(placeholder)


def _card_from_code(host: CardViewerHost, code, source_dir: str) -> Optional[Node]:
    card_type = extract_card_type(" ".join(code.get("class", [])))
    if not card_type:
        return None
    return host.card_processor(card_type)(code.get_text(), source_dir)


def _finish(
    host: CardViewerHost,
    html: str,
    blocks: list[Node],
    token: str,
    probe: Optional[Callable[[str], bool]],
) -> str:
    if probe is not None and blocks:
        for node in blocks:
            check_media(node, probe, host.monitor)
        host.monitor.join()
        host.monitor.cancel_all()

    def substitute(match: re.Match) -> str:
        return blocks[int(match.group(1))].to_html()

    return _placeholder_pattern(token).sub(substitute, html)


def process_rendered_html(
    host: CardViewerHost,
    html: str,
    source_dir: str = "",
    probe: Optional[Callable[[str], bool]] = None,
) -> str:
    """Replace card and image-grid code blocks in rendered HTML.

    Args:
        host: Loaded host
        html: Rendered HTML
        source_dir: Store-relative directory of the document
        probe: Media probe; when given, load/error events are applied first

    Returns:
        HTML with each recognized ``pre`` replaced by its rendered block
    """
    soup = BeautifulSoup(html, "html.parser")
    blocks: list[Node] = []
    token = uuid.uuid4().hex
    _replace_code_blocks(host, soup, source_dir, blocks, token)
    return _finish(host, str(soup), blocks, token, probe)


def render_document(
    host: CardViewerHost,
    markdown_text: str,
    source_dir: str = "",
    probe: Optional[Callable[[str], bool]] = None,
) -> str:
    """Render a Markdown document with all of its card, image and HTML blocks.

    Args:
        host: Loaded host
        markdown_text: Document source
        source_dir: Store-relative directory of the document (for ``./`` paths)
        probe: Media probe; when given, load/error events are applied first

    Returns:
        HTML body
    """
    blocks: list[Node] = []
    token = uuid.uuid4().hex

    def stash(match: re.Match) -> str:
        body = match.group("body")
        if body.endswith("\n"):
            body = body[:-1]
        node = process_fenced_block(host, match.group("lang"), body, source_dir)
        if node is None:
            return match.group(0)
        blocks.append(node)
        return f"\n\n{_placeholder(token, len(blocks) - 1)}\n\n"

    text = FENCE_PATTERN.sub(stash, markdown_text or "")
    html = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)

    soup = BeautifulSoup(html, "html.parser")
    _replace_code_blocks(host, soup, source_dir, blocks, token)
    logger.debug(f"Rendered {len(blocks)} blocks")
    return _finish(host, str(soup), blocks, token, probe)
