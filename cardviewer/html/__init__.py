"""HTML blocks: media path rewriting, rendering and load checks."""

from cardviewer.html.rewrite import is_media_path, rewrite_media_attributes
from cardviewer.html.block import is_empty_html, render_html_block
from cardviewer.html.media import MediaLoadMonitor, MediaProbe, check_media

__all__ = [
    # rewrite.py
    "is_media_path",
    "rewrite_media_attributes",
    # block.py
    "is_empty_html",
    "render_html_block",
    # media.py
    "MediaLoadMonitor",
    "MediaProbe",
    "check_media",
]
