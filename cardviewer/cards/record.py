"""Typed card records built from block text."""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from cardviewer.cards.fields import extract_field, extract_number
from cardviewer.messages import get_messages

CARD_TYPES = ("movie", "tv", "book", "music")
UNKNOWN_TYPE = "unknown"


@dataclass
class CardRecord:
    """One parsed card block.

    ``type`` and ``title`` are always set. Every other field is either a
    well-typed value or None.
    """
    type: str
    title: str
    id: Optional[str] = None
    release_date: Optional[str] = None
    region: Optional[str] = None
    rating: Optional[float] = None
    runtime: Optional[int] = None  # minutes
    genres: Optional[str] = None
    overview: Optional[str] = None
    poster: Optional[str] = None
    author: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = None  # seconds, music only
    url: Optional[str] = None
    source: Optional[str] = None
    external_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Present fields only."""
        return {key: value for key, value in asdict(self).items() if value is not None}


def _to_int(value: Optional[float]) -> Optional[int]:
    return None if value is None else int(value)


def parse_record(
    card_type: Optional[str],
    content: Optional[str],
    messages: Optional[dict[str, str]] = None,
) -> CardRecord:
    """Build a CardRecord from raw block text.

    Never fails: a malformed block still yields a usable, if sparse, record.

    Args:
        card_type: Card type from the block declaration ("movie", "tv", ...)
        content: Raw block text of ``field: value`` lines
        messages: Message table used for the title placeholder

    Returns:
        CardRecord with ``type`` and ``title`` always set
    """
    messages = messages or get_messages()
    content = content if isinstance(content, str) else ""

    def field(name: str) -> Optional[str]:
        return extract_field(content, name)

    return CardRecord(
        type=card_type or UNKNOWN_TYPE,
        title=field("title") or messages["untitled"],
        id=field("id"),
        release_date=field("release_date"),
        region=field("region"),
        rating=extract_number(content, "rating"),
        runtime=_to_int(extract_number(content, "runtime")),
        genres=field("genres"),
        overview=field("overview"),
        poster=field("poster"),
        author=field("author"),
        album=field("album"),
        duration=_to_int(extract_number(content, "duration")),
        url=field("url"),
        source=field("source"),
        external_url=field("external_url"),
    )
