"""cardviewer - structured text blocks to host-agnostic layouts.

Exports are lazily loaded so that ``import cardviewer`` (and the CLI's
version lookup) stays cheap.
"""

__version__ = "0.1.0"

__all__ = [
    # render.py
    "render_card",
    "render_image_grid",
    "rewrite_html",
    "parse_record",
    "parse_images",
    # assets/store.py
    "VaultStore",
    "MappingStore",
    # nodes.py
    "Node",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("render_card", "render_image_grid", "rewrite_html", "parse_record", "parse_images"):
        from cardviewer import render
        return getattr(render, name)
    elif name in ("VaultStore", "MappingStore"):
        from cardviewer.assets import store
        return getattr(store, name)
    elif name == "Node":
        from cardviewer import nodes
        return nodes.Node
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
