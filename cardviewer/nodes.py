"""Host-agnostic node tree.

Layout builders describe their output as a tree of ``Node`` objects instead of
touching a concrete DOM. A host mounts the tree afterwards: the static site
serializes it with ``to_html()``, tests inspect it directly.

Event handlers are declarative actions. ``Node.fire()`` applies the tree
mutation an action describes (load/error handling) and hands the action back
so the host can perform anything that leaves the tree (navigation, opening an
image view).
"""

from __future__ import annotations

import html
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Iterator, Optional

TEXT_TAG = "#text"

# Elements serialized without a closing tag
VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}

# Elements whose text content is emitted verbatim
RAW_TEXT_TAGS = {"script", "style"}


@dataclass
class Action:
    """Base class for declarative event actions."""

    def apply(self, node: "Node", parent: Optional["Node"]) -> None:
        """Mutate the tree in response to the event. Most actions don't."""
        return None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(getattr(self, key), Node):
                data[key] = getattr(self, key).to_dict()
        return {"action": type(self).__name__, **data}


@dataclass
class OpenUrl(Action):
    """Open ``url`` in a new window."""
    url: str


@dataclass
class OpenImageView(Action):
    """Open the enlarged image view for a grid item."""
    src: str
    alt: str = ""
    title: str = ""

    def view(self, messages: dict[str, str]) -> "Node":
        """Build the enlarged view node for this image."""
        from cardviewer.gallery.modal import build_image_view
        return build_image_view(self.src, self.alt, self.title, messages)


@dataclass
class ShowLoadError(Action):
    """Swap a broken image for a visible marker inside its container.

    ``hide_class`` is added to the failing element, ``container_class`` to its
    parent, and ``marker`` is appended to the parent.
    """
    marker: "Node"
    hide_class: Optional[str] = None
    container_class: Optional[str] = None

    def apply(self, node: "Node", parent: Optional["Node"]) -> None:
        if self.hide_class:
            node.add_class(self.hide_class)
        if parent is None:
            return
        if self.container_class:
            parent.add_class(self.container_class)
        if self.marker not in parent.children:
            parent.children.append(self.marker)


@dataclass
class InsertErrorAfter(Action):
    """Insert ``marker`` right after the failing element."""
    marker: "Node"

    def apply(self, node: "Node", parent: Optional["Node"]) -> None:
        if parent is None or self.marker in parent.children:
            return
        parent.insert_after(node, self.marker)


@dataclass
class MarkLoaded(Action):
    """Flag an element as successfully loaded."""
    cls: Optional[str] = None
    attr: Optional[str] = None

    def apply(self, node: "Node", parent: Optional["Node"]) -> None:
        if self.cls:
            node.add_class(self.cls)
        if self.attr:
            node.attrs[self.attr] = "true"


@dataclass(eq=False)
class Node:
    """One element of a layout tree."""
    tag: str
    classes: list[str] = field(default_factory=list)
    text: Optional[str] = None
    attrs: dict[str, str] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)
    events: dict[str, Action] = field(default_factory=dict)

    @classmethod
    def text_node(cls, text: str) -> "Node":
        return cls(TEXT_TAG, text=text)

    def el(
        self,
        tag: str,
        cls: Optional[str] = None,
        text: Optional[str] = None,
        attrs: Optional[dict[str, str]] = None,
    ) -> "Node":
        """Create a child element, append it and return it.

        Args:
            tag: Element tag name
            cls: Space separated class names
            text: Text content
            attrs: Extra attributes

        Returns:
            The new child node
        """
        child = Node(tag, classes=cls.split() if cls else [], text=text, attrs=dict(attrs or {}))
        self.children.append(child)
        return child

    def append(self, child: "Node") -> "Node":
        self.children.append(child)
        return child

    def insert_after(self, reference: "Node", child: "Node") -> None:
        """Insert ``child`` directly after ``reference`` (or at the end)."""
        for index, existing in enumerate(self.children):
            if existing is reference:
                self.children.insert(index + 1, child)
                return
        self.children.append(child)

    def add_class(self, *names: str) -> None:
        for name in names:
            for part in name.split():
                if part not in self.classes:
                    self.classes.append(part)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def on(self, event: str, action: Action) -> "Node":
        self.events[event] = action
        return self

    def fire(self, event: str, parent: Optional["Node"] = None) -> Optional[Action]:
        """Dispatch ``event`` to this node.

        Returns:
            The action bound to the event, or None if nothing listens
        """
        action = self.events.get(event)
        if action is None:
            return None
        action.apply(self, parent)
        return action

    def walk(self) -> Iterator[tuple["Node", Optional["Node"]]]:
        """Yield ``(node, parent)`` pairs depth-first, starting with self."""
        stack: list[tuple[Node, Optional[Node]]] = [(self, None)]
        while stack:
            node, parent = stack.pop()
            yield node, parent
            for child in reversed(node.children):
                stack.append((child, node))

    def find_all(self, cls: Optional[str] = None, tag: Optional[str] = None) -> list["Node"]:
        return [
            node for node, _ in self.walk()
            if (cls is None or node.has_class(cls)) and (tag is None or node.tag == tag)
        ]

    def find(self, cls: Optional[str] = None, tag: Optional[str] = None) -> Optional["Node"]:
        matches = self.find_all(cls=cls, tag=tag)
        return matches[0] if matches else None

    def text_content(self) -> str:
        parts = [self.text or ""]
        parts.extend(child.text_content() for child in self.children)
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form of the tree (for JSON/YAML output)."""
        if self.tag == TEXT_TAG:
            return {"text": self.text or ""}
        data: dict[str, Any] = {"tag": self.tag}
        if self.classes:
            data["classes"] = list(self.classes)
        if self.text is not None:
            data["text"] = self.text
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.events:
            data["events"] = {name: action.to_dict() for name, action in self.events.items()}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def to_html(self, raw_text: bool = False) -> str:
        """Serialize the tree to an HTML string.

        Events are carried as ``data-cv-on-<event>`` JSON attributes so a page
        script can wire them up.
        """
        if self.tag == TEXT_TAG:
            text = self.text or ""
            return text if raw_text else html.escape(text, quote=False)

        attrs = {}
        if self.classes:
            attrs["class"] = " ".join(self.classes)
        attrs.update(self.attrs)
        for name, action in self.events.items():
            attrs[f"data-cv-on-{name}"] = json.dumps(action.to_dict(), ensure_ascii=False)

        rendered_attrs = "".join(
            f' {name}="{html.escape(str(value), quote=True)}"' for name, value in attrs.items()
        )
        opening = f"<{self.tag}{rendered_attrs}>"
        if self.tag in VOID_TAGS:
            return opening

        raw = self.tag in RAW_TEXT_TAGS
        inner = ""
        if self.text is not None:
            inner += self.text if raw else html.escape(self.text, quote=False)
        inner += "".join(child.to_html(raw_text=raw) for child in self.children)
        return f"{opening}{inner}</{self.tag}>"
