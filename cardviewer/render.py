"""Public rendering API.

Each call is independent: parse, resolve against ``store`` (read only) and
build a fresh node tree. Without a store every lookup misses and asset paths
come back as written. A builder that raises yields a single error node in
place of the block.
"""

from typing import Optional

from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.assets.store import ContentStore
from cardviewer.cards import layout, record
from cardviewer.gallery import grid, images
from cardviewer.html import rewrite
from cardviewer.messages import DEFAULT_LOCALE, get_messages
from cardviewer.nodes import Node
from cardviewer.plugin.errors import render_safely


def render_card(
    card_type: Optional[str],
    text: str,
    store: Optional[ContentStore] = None,
    *,
    source_dir: str = "",
    locale: str = DEFAULT_LOCALE,
) -> Node:
    """Render a card block.

    Args:
        card_type: "movie", "tv", "book", "music" or any fallback type
        text: Block text of ``field: value`` lines
        store: Content store for the poster
        source_dir: Store-relative directory of the document
        locale: Message locale

    Returns:
        Root node of the card, or an error node if building it failed
    """
    messages = get_messages(locale)
    return render_safely(
        lambda: layout.render_card(card_type, text, AssetPathResolver(store, source_dir), messages),
        messages["card_failed"].format(type=card_type or "unknown"),
    )


def render_image_grid(
    text: str,
    store: Optional[ContentStore] = None,
    *,
    source_dir: str = "",
    locale: str = DEFAULT_LOCALE,
) -> Node:
    """Render an image grid block."""
    messages = get_messages(locale)
    return render_safely(
        lambda: grid.render_image_grid(text, AssetPathResolver(store, source_dir), messages),
        messages["grid_failed"],
    )


def rewrite_html(text: str, store: Optional[ContentStore] = None, *, source_dir: str = "") -> str:
    """Resolve media ``src``/``poster`` values in an HTML fragment."""
    return rewrite.rewrite_media_attributes(text, AssetPathResolver(store, source_dir))


def parse_record(card_type: Optional[str], text: str, *, locale: str = DEFAULT_LOCALE) -> record.CardRecord:
    return record.parse_record(card_type, text, get_messages(locale))


def parse_images(text: str) -> list[images.ImageRef]:
    return images.parse_images(text)
