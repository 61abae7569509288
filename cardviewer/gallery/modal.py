"""Enlarged image view opened from a grid item."""

from cardviewer.nodes import Node, ShowLoadError


def build_image_view(src: str, alt: str, title: str, messages: dict[str, str]) -> Node:
    """Build the enlarged view for one image.

    Args:
        src: Already resolved image locator
        alt: Alt text (a generic label is used when empty)
        title: Optional caption
        messages: Localized strings

    Returns:
        The view's root node
    """
    view = Node("div", classes=["card-viewer-image-modal"])
    view.el(
        "button",
        cls="card-viewer-modal-close",
        text=messages["close"],
        attrs={"type": "button", "aria-label": messages["close_label"]},
    )
    image = view.el(
        "img",
        cls="card-viewer-modal-image",
        attrs={"src": src, "alt": alt or messages["image_view_alt"]},
    )
    if title:
        view.el("div", cls="card-viewer-modal-title", text=title)

    marker = Node("div", classes=["card-viewer-modal-error"], text=messages["image_view_error"])
    image.on("error", ShowLoadError(marker=marker, hide_class="card-viewer-modal-image-hidden"))
    return view
