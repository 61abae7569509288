"""Host layer: processor registry, settings, error boundaries and block discovery."""

__all__ = [
    "CardViewerHost",
    "Settings",
    "load_settings",
    "save_settings",
    "render_document",
    "process_rendered_html",
    "process_fenced_block",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name == "CardViewerHost":
        from cardviewer.plugin import host
        return host.CardViewerHost
    elif name in ("Settings", "load_settings", "save_settings"):
        from cardviewer.plugin import settings
        return getattr(settings, name)
    elif name in ("render_document", "process_rendered_html", "process_fenced_block"):
        from cardviewer.plugin import blocks
        return getattr(blocks, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
