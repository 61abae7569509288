"""Card layout builder.

Card Layout:
  +----------+--------------------------------+
  |          | TITLE                   [TYPE] |  <- header
  |  POSTER  | ★★★★☆ 8.5                      |  <- rating (optional)
  |          | Date: ...                      |  <- type-dependent details
  |          | Genres: [tag] [tag]            |
  |          | Overview text                  |
  +----------+--------------------------------+
"""

import math
from typing import Optional

from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.cards.record import CardRecord, parse_record
from cardviewer.messages import get_messages
from cardviewer.nodes import MarkLoaded, Node, OpenUrl, ShowLoadError

# Subject/detail page bases keyed by provider
DOUBAN_MOVIE_URL = "https://movie.douban.com/subject/"
DOUBAN_BOOK_URL = "https://book.douban.com/subject/"
TMDB_MOVIE_URL = "https://www.themoviedb.org/movie/"
TMDB_TV_URL = "https://www.themoviedb.org/tv/"

STAR_SLOTS = 5
STAR_PATH = (
    "M9.049 2.927c.3-.921 1.603-.921 1.902 0l1.07 3.292a1 1 0 00.95.69h3.462c.969 0 "
    "1.371 1.24.588 1.81l-2.8 2.034a1 1 0 00-.364 1.118l1.07 3.292c.3.921-.755 "
    "1.688-1.54 1.118l-2.8-2.034a1 1 0 00-1.175 0l-2.8 2.034c-.784.57-1.838-.197"
    "-1.539-1.118l1.07-3.292a1 1 0 00-.364-1.118L2.98 8.72c-.783-.57-.38-1.81.588"
    "-1.81h3.461a1 1 0 00.951-.69l1.07-3.292z"
)
STAR_EMPTY_FILL = "#d1d5db"
STAR_FILL = "#fbbf24"


def base_url(source: Optional[str], card_type: str) -> str:
    """Pick the detail-page base URL for a card id."""
    if source == "douban":
        if card_type == "book":
            return DOUBAN_BOOK_URL
        return DOUBAN_MOVIE_URL

    if card_type == "tv":
        return TMDB_TV_URL
    if card_type == "book":
        return DOUBAN_BOOK_URL
    return TMDB_MOVIE_URL


def click_target(card: CardRecord) -> Optional[str]:
    """Where clicking the card goes, or None if it isn't clickable.

    ``external_url`` always wins, then a music card's ``url``, then the
    provider page built from ``id``.
    """
    if card.external_url:
        return card.external_url
    if card.type == "music" and card.url:
        return card.url
    if card.id:
        return f"{base_url(card.source, card.type)}{card.id}"
    return None


def star_states(rating: float) -> list[str]:
    """Map a 10-point rating onto five star slots.

    Returns:
        One of "full", "half" or "empty" per slot
    """
    scale = rating / 2
    whole = math.floor(scale)
    half = scale % 1 >= 0.5

    states = []
    for i in range(STAR_SLOTS):
        if i < whole:
            states.append("full")
        elif i == whole and half:
            states.append("half")
        else:
            states.append("empty")
    return states


def format_duration(seconds: int) -> str:
    """Seconds as ``m:ss``."""
    return f"{seconds // 60}:{seconds % 60:02d}"


def _star_svg(index: int, state: str) -> Node:
    svg = Node("svg", attrs={"viewBox": "0 0 20 20", "fill": "none"})
    if state != "half":
        svg.el("path", attrs={"d": STAR_PATH})
        return svg

    clip_id = f"half-star-{index}"
    defs = svg.el("defs")
    clip = defs.el("clipPath", attrs={"id": clip_id})
    clip.el("rect", attrs={"x": "0", "y": "0", "width": "10", "height": "20"})
    svg.el("path", attrs={"d": STAR_PATH, "fill": STAR_EMPTY_FILL})
    svg.el("path", attrs={"d": STAR_PATH, "fill": STAR_FILL, "clip-path": f"url(#{clip_id})"})
    return svg


def _render_header(info: Node, card: CardRecord) -> None:
    header = info.el("div", cls="card-viewer-header")
    header.el("h3", cls="card-viewer-title", text=card.title)
    right = header.el("div", cls="card-viewer-header-right")
    right.el("span", cls=f"card-viewer-type card-viewer-type-{card.type}", text=card.type.upper())


def _render_rating(info: Node, card: CardRecord) -> None:
    if card.rating is None:
        return

    meta = info.el("div", cls="card-viewer-meta")
    rating = meta.el("div", cls="card-viewer-rating")
    stars = rating.el("div", cls="card-viewer-stars")
    for i, state in enumerate(star_states(card.rating)):
        star = stars.el("span", cls=f"card-viewer-star {state}")
        star.append(_star_svg(i, state))
    rating.el("span", cls="card-viewer-rating-text", text=f"{card.rating:.1f}")


def _add_detail(details: Node, label: str, value, extra_cls: str = "") -> Optional[Node]:
    if value is None or value == "":
        return None
    row = details.el("div", cls=f"card-viewer-detail {extra_cls}".strip())
    row.el("span", cls="card-viewer-label", text=f"{label}: ")
    return row


def _add_value_detail(details: Node, label: str, value) -> None:
    row = _add_detail(details, label, value)
    if row is not None:
        row.el("span", cls="card-viewer-value", text=str(value))


def _render_details(info: Node, card: CardRecord, messages: dict[str, str]) -> Node:
    details = info.el("div", cls="card-viewer-details")
    _add_value_detail(details, messages["label_date"], card.release_date)

    if card.type == "music":
        _add_value_detail(details, messages["label_author"], card.author)
        _add_value_detail(details, messages["label_album"], card.album)
        if card.duration is not None:
            _add_value_detail(details, messages["label_duration"], format_duration(card.duration))
    elif card.type == "book":
        _add_value_detail(details, messages["label_author"], card.author)
    else:
        _add_value_detail(details, messages["label_region"], card.region)
        if card.runtime is not None:
            _add_value_detail(
                details, messages["label_duration"], f"{card.runtime}{messages['minutes_unit']}"
            )
    return details


def _render_poster(
    section: Node,
    card: CardRecord,
    resolver: AssetPathResolver,
    messages: dict[str, str],
) -> None:
    if not card.poster:
        section.el("div", cls="card-viewer-poster-placeholder", text=messages["no_poster"])
        return

    container = section.el("div", cls="card-viewer-poster-container")
    poster = container.el(
        "img",
        cls="card-viewer-poster card-viewer-poster-image",
        attrs={"src": resolver.resolve(card.poster), "alt": card.title or messages["poster_alt"]},
    )

    marker = Node("div", classes=["card-viewer-poster-error"])
    marker.el("div", cls="card-viewer-error-icon", text=messages["poster_error_icon"])
    marker.el("div", cls="card-viewer-error-text", text=messages["poster_error"])
    poster.on("error", ShowLoadError(marker=marker, hide_class="hidden"))
    poster.on("load", MarkLoaded(cls="loaded"))


def _render_additional(details: Node, card: CardRecord, messages: dict[str, str]) -> None:
    if card.genres:
        genres = [g.strip() for g in card.genres.split(",") if g.strip()]
        row = _add_detail(details, messages["label_genres"], card.genres, "genres")
        tags = row.el("div", cls="card-viewer-genres-container")
        for genre in genres:
            tags.el("span", cls="card-viewer-genre-tag", text=genre)

    if card.overview:
        overview = details.el("div", cls="card-viewer-overview")
        overview.el("div", cls="card-viewer-overview-text", text=card.overview)


def build_card(
    card: CardRecord,
    resolver: AssetPathResolver,
    messages: Optional[dict[str, str]] = None,
) -> Node:
    """Build the node tree for an already parsed record."""
    messages = messages or get_messages()

    card_el = Node("div", classes=["card-viewer-card"], attrs={"data-card-type": card.type})
    content = card_el.el("div", cls="card-viewer-content")
    poster_section = content.el("div", cls="card-viewer-poster-section")
    info_section = content.el("div", cls="card-viewer-info-section")

    target = click_target(card)
    if target:
        card_el.add_class("card-viewer-clickable")
        card_el.on("click", OpenUrl(target))

    _render_header(info_section, card)
    _render_rating(info_section, card)
    details = _render_details(info_section, card, messages)
    _render_poster(poster_section, card, resolver, messages)
    _render_additional(details, card, messages)
    return card_el


def render_card(
    card_type: Optional[str],
    content: str,
    resolver: AssetPathResolver,
    messages: Optional[dict[str, str]] = None,
) -> Node:
    """Parse a card block and build its layout.

    Args:
        card_type: Declared card type ("movie", "tv", "book", "music", ...)
        content: Raw block text
        resolver: Resolver used for the poster path
        messages: Localized strings

    Returns:
        Root node of the card
    """
    messages = messages or get_messages()
    card = parse_record(card_type, content, messages)
    return build_card(card, resolver, messages)
