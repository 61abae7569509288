"""Inline image markup parsing for image grid blocks."""

import re
from dataclasses import dataclass

# ![alt](src "optional title")
IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\(([^\s\)]+)(?:\s+"([^"]+)")?\)')


@dataclass
class ImageRef:
    """One image reference from a grid block."""
    src: str
    alt: str = ""
    title: str = ""


def parse_images(content: str) -> list[ImageRef]:
    """Extract every image reference in order of appearance.

    Surrounding prose and malformed markup are ignored. An empty list means
    the block has no images.
    """
    return [
        ImageRef(src=match.group(2), alt=match.group(1) or "", title=match.group(3) or "")
        for match in IMAGE_PATTERN.finditer(content or "")
    ]
