"""Image grid layout builder."""

from typing import Optional

from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.gallery.images import ImageRef, parse_images
from cardviewer.messages import get_messages
from cardviewer.nodes import Node, OpenImageView, ShowLoadError


def build_image_item(image: ImageRef, resolver: AssetPathResolver, messages: dict[str, str]) -> Node:
    """Build one grid cell for ``image``."""
    item = Node("div", classes=["imgs-grid-item"])
    src = resolver.resolve(image.src)

    img = item.el(
        "img",
        cls="imgs-grid-image",
        attrs={"src": src, "alt": image.alt, "loading": "lazy"},
    )
    if image.title:
        item.el("div", cls="imgs-grid-title", text=image.title)

    marker = Node("div", classes=["imgs-grid-error"], text=messages["image_error"])
    img.on("error", ShowLoadError(marker=marker, container_class="error"))
    img.on("click", OpenImageView(src=src, alt=image.alt, title=image.title))
    return item


def render_image_grid(
    content: str,
    resolver: AssetPathResolver,
    messages: Optional[dict[str, str]] = None,
) -> Node:
    """Build the image grid for a block.

    Args:
        content: Raw block text containing ``![alt](src "title")`` markup
        resolver: Resolver for image paths
        messages: Localized strings

    Returns:
        Grid container node: header label plus either the items or a
        single "no images" placeholder
    """
    messages = messages or get_messages()

    container = Node("div", classes=["imgs-grid-container"])
    header = container.el("div", cls="imgs-grid-header")
    header.el("span", cls="imgs-grid-type", text=messages["images_header"])
    grid = container.el("div", cls="imgs-grid")

    images = parse_images(content)
    if not images:
        grid.el("div", cls="imgs-grid-placeholder", text=messages["no_images"])
        return container

    for image in images:
        grid.append(build_image_item(image, resolver, messages))
    return container
