"""Image grid parsing, layout and the enlarged image view."""

from cardviewer.gallery.images import ImageRef, parse_images
from cardviewer.gallery.grid import build_image_item, render_image_grid
from cardviewer.gallery.modal import build_image_view

__all__ = [
    # images.py
    "ImageRef",
    "parse_images",
    # grid.py
    "build_image_item",
    "render_image_grid",
    # modal.py
    "build_image_view",
]
