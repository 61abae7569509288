"""Error boundary helpers for block rendering."""

import logging
from typing import Callable, Optional, TypeVar

from cardviewer.nodes import Node

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorHandler = Callable[[Exception, str], None]

ERROR_CLASS = "card-viewer-error"


def create_error_handler() -> ErrorHandler:
    """Build the default handler: failures are logged at DEBUG and otherwise swallowed."""

    def handle(error: Exception, context: str = "unknown") -> None:
        logger.debug(f"Error in {context}: {error}")

    return handle


def safe_execute(
    fn: Callable[[], T],
    handler: Optional[ErrorHandler] = None,
    context: str = "unknown",
) -> Optional[T]:
    """Run ``fn``, reporting any exception to ``handler`` instead of raising.

    Returns:
        ``fn``'s result, or None if it raised
    """
    handler = handler or create_error_handler()
    try:
        return fn()
    except Exception as e:
        handler(e, context)
        return None


def error_node(message: str, exc: Exception) -> Node:
    return Node("div", classes=[ERROR_CLASS], text=f"{message}: {exc}")


def render_safely(build: Callable[[], Node], message: str) -> Node:
    """Run one block builder behind an error boundary.

    Args:
        build: Zero-argument callable producing the block's node
        message: Localized prefix for the error text

    Returns:
        The built node, or exactly one error node if building raised
    """
    try:
        return build()
    except Exception as e:
        logger.debug(f"Error in block render: {e}")
        return error_node(message, e)
