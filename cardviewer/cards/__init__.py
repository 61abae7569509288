"""Card blocks: field parsing, typed records and the card layout.

Exports are lazily loaded to avoid import cycles with the host layer.
"""

__all__ = [
    # fields.py
    "extract_field",
    "extract_number",
    # record.py
    "CardRecord",
    "CARD_TYPES",
    "parse_record",
    # layout.py
    "build_card",
    "render_card",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("extract_field", "extract_number"):
        from cardviewer.cards import fields
        return getattr(fields, name)
    elif name in ("CardRecord", "CARD_TYPES", "parse_record"):
        from cardviewer.cards import record
        return getattr(record, name)
    elif name in ("build_card", "render_card"):
        from cardviewer.cards import layout
        return getattr(layout, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
