"""Media attribute rewriting for raw HTML fragments.

Only ``src=``/``poster=`` values that end in a known media extension are
touched. The rewrite works on the text itself, so every other byte of the
fragment comes out exactly as it went in.
"""

import re

from cardviewer.assets.resolver import AssetPathResolver

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "webp", "svg")
VIDEO_EXTENSIONS = ("mp4", "webm", "ogg", "avi", "mov", "wmv", "mkv", "m4v", "3gp")
AUDIO_EXTENSIONS = ("mp3", "wav", "aac", "flac", "m4a")

MEDIA_EXTENSION_PATTERN = re.compile(
    r"\.(" + "|".join(IMAGE_EXTENSIONS + VIDEO_EXTENSIONS + AUDIO_EXTENSIONS) + r")$",
    re.IGNORECASE,
)

# src="..." / poster='...' with matching quotes
MEDIA_ATTRIBUTE_PATTERN = re.compile(r"""(src|poster)=(["'])([^"']*?)\2""", re.IGNORECASE)


def is_media_path(value: str) -> bool:
    return MEDIA_EXTENSION_PATTERN.search(value) is not None


def rewrite_media_attributes(fragment: str, resolver: AssetPathResolver) -> str:
    """Resolve media paths inside ``fragment``.

    Args:
        fragment: Raw HTML text
        resolver: Resolver applied to each matching attribute value

    Returns:
        The fragment with matching values replaced
    """

    def replace(match: re.Match) -> str:
        name, quote, value = match.group(1), match.group(2), match.group(3)
        if not is_media_path(value):
            return match.group(0)
        return f"{name}={quote}{resolver.resolve(value)}{quote}"

    return MEDIA_ATTRIBUTE_PATTERN.sub(replace, fragment)
