"""
Element handle contract
========================
Rendering-layer abstraction for the animation engine.
Minimal contract any renderer (browser bridge, test double, headless
tree) must satisfy so the engine can look up, style and wire elements.

VirtualElement is the in-memory implementation used by the scene
bootstrap and the test suite. Style semantics follow the CSSOM inline
style: kebab-case names, string values, optional "important" priority,
and an empty value removes the declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Protocol

ID_ATTRIBUTE = "data-figma-id"
NAME_ATTRIBUTE = "data-figma-name"
TYPE_ATTRIBUTE = "data-figma-type"
VARIANT_ATTRIBUTE = "data-variant"
COMPONENT_SET_ATTRIBUTE = "data-component-set"

IMPORTANT = "important"


# ---------------------------------------------------------------------------
# Style store
# ---------------------------------------------------------------------------

class StyleDeclaration:
    """Inline style store of one element"""

    def __init__(self):
        self._values: Dict[str, str] = {}
        self._priorities: Dict[str, str] = {}

    def set_property(self, name: str, value: Optional[str], priority: str = "") -> None:
        """
        Set a declaration. Empty or None value removes it.

        A normal write replaces an important one, like CSSOM setProperty.
        """
        if value is None or value == "":
            self.remove_property(name)
            return
        self._values[name] = str(value)
        if priority == IMPORTANT:
            self._priorities[name] = IMPORTANT
        else:
            self._priorities.pop(name, None)

    def get_property_value(self, name: str) -> str:
        return self._values.get(name, "")

    def get_property_priority(self, name: str) -> str:
        return self._priorities.get(name, "")

    def remove_property(self, name: str) -> str:
        self._priorities.pop(name, None)
        return self._values.pop(name, "")

    def __getitem__(self, name: str) -> str:
        return self.get_property_value(name)

    def __setitem__(self, name: str, value: Optional[str]) -> None:
        self.set_property(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def items(self):
        return list(self._values.items())

    @property
    def css_text(self) -> str:
        parts = []
        for name, value in self._values.items():
            suffix = " !important" if self._priorities.get(name) else ""
            parts.append(f"{name}: {value}{suffix};")
        return " ".join(parts)

    def __repr__(self):
        return f"StyleDeclaration({self.css_text!r})"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass
class DomEvent:
    """Dispatched UI event (bubbles from target to root)"""
    type: str
    target: Optional["VirtualElement"] = None
    current_target: Optional["VirtualElement"] = None
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


EventListener = Callable[[DomEvent], None]


@dataclass(frozen=True)
class BoundingBox:
    """Absolute box in page coordinates"""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


# ---------------------------------------------------------------------------
# Handle contract
# ---------------------------------------------------------------------------

class ElementHandle(Protocol):
    """
    Protocol defining the element interface the engine relies on.

    All implementations must provide:
    - style: inline style store (set_property / get_property_value)
    - attribute access and descendant lookup by id or attribute
    - tag-path query_selector ("g path", "path")
    - parent / closest traversal
    - event listener registration
    - bounding_box: absolute geometry (for layout flattening)
    """

    style: StyleDeclaration
    children: List["ElementHandle"]

    @property
    def tag_name(self) -> str:
        ...

    @property
    def parent(self) -> Optional["ElementHandle"]:
        ...

    def iter_descendants(self) -> Iterator["ElementHandle"]:
        """Document-order walk (self excluded)."""
        ...

    def get_attribute(self, name: str) -> Optional[str]:
        ...

    def set_attribute(self, name: str, value: str) -> None:
        ...

    def query_descendant_by_id(self, node_id: str) -> Optional["ElementHandle"]:
        """Descendant whose id attribute equals node_id."""
        ...

    def query_descendant_by_attribute(self, name: str, value: str) -> Optional["ElementHandle"]:
        ...

    def iter_descendants_with_attribute(self, name: str) -> Iterator["ElementHandle"]:
        ...

    def query_selector(self, selector: str) -> Optional["ElementHandle"]:
        """First descendant matching a whitespace separated tag path."""
        ...

    def closest(self, attribute: str) -> Optional["ElementHandle"]:
        """Self or nearest ancestor carrying the attribute."""
        ...

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        ...

    def bounding_box(self) -> BoundingBox:
        ...


# ---------------------------------------------------------------------------
# In-memory element
# ---------------------------------------------------------------------------

class VirtualElement(ElementHandle):
    """
    In-memory element tree node.

    Example:
        root = VirtualElement("div", {ID_ATTRIBUTE: "1:2"})
        icon = root.append_child(VirtualElement("svg", {NAME_ATTRIBUTE: "Icon"}))
        root.query_descendant_by_attribute(NAME_ATTRIBUTE, "Icon") is icon  # True
    """

    def __init__(
        self,
        tag_name: str = "div",
        attributes: Optional[Dict[str, str]] = None,
        box: Optional[BoundingBox] = None
    ):
        self._tag_name = tag_name.lower()
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.style = StyleDeclaration()
        self.children: List[VirtualElement] = []
        self._parent: Optional[VirtualElement] = None
        self._listeners: Dict[str, List[EventListener]] = {}
        self.box = box or BoundingBox()

    # === Tree ===

    @property
    def tag_name(self) -> str:
        return self._tag_name

    @property
    def parent(self) -> Optional["VirtualElement"]:
        return self._parent

    def append_child(self, child: "VirtualElement") -> "VirtualElement":
        if child._parent is not None:
            child._parent.children.remove(child)
        child._parent = self
        self.children.append(child)
        return child

    def iter_descendants(self) -> Iterator["VirtualElement"]:
        """Document-order walk (self excluded)"""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def iter_ancestors(self) -> Iterator["VirtualElement"]:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    # === Attributes ===

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = str(value)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def node_id(self) -> Optional[str]:
        return self.attributes.get(ID_ATTRIBUTE)

    # === Lookup ===

    def query_descendant_by_id(self, node_id: str) -> Optional["VirtualElement"]:
        return self.query_descendant_by_attribute(ID_ATTRIBUTE, node_id)

    def query_descendant_by_attribute(self, name: str, value: str) -> Optional["VirtualElement"]:
        for node in self.iter_descendants():
            if node.attributes.get(name) == value:
                return node
        return None

    def iter_descendants_with_attribute(self, name: str) -> Iterator["VirtualElement"]:
        for node in self.iter_descendants():
            if name in node.attributes:
                yield node

    def query_selector(self, selector: str) -> Optional["VirtualElement"]:
        parts = [p.lower() for p in selector.split()]
        if not parts:
            return None
        for node in self.iter_descendants():
            if node._matches_path(parts):
                return node
        return None

    def _matches_path(self, parts: List[str]) -> bool:
        """Descendant-combinator match of a tag path ending at self."""
        if parts[-1] != "*" and self._tag_name != parts[-1]:
            return False
        remaining = parts[:-1]
        for ancestor in self.iter_ancestors():
            if not remaining:
                break
            if remaining[-1] == "*" or ancestor._tag_name == remaining[-1]:
                remaining.pop()
        return not remaining

    def closest(self, attribute: str) -> Optional["VirtualElement"]:
        if attribute in self.attributes:
            return self
        for ancestor in self.iter_ancestors():
            if attribute in ancestor.attributes:
                return ancestor
        return None

    # === Events ===

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: EventListener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch_event(self, event: DomEvent) -> DomEvent:
        """Run listeners on self, then bubble to ancestors until stopped."""
        event.target = self
        for node in [self, *self.iter_ancestors()]:
            event.current_target = node
            for listener in list(node._listeners.get(event.type, [])):
                listener(event)
            if event.propagation_stopped:
                break
        return event

    def click(self) -> DomEvent:
        return self.dispatch_event(DomEvent("click"))

    # === Geometry / visibility ===

    def bounding_box(self) -> BoundingBox:
        return self.box

    @property
    def is_hidden(self) -> bool:
        return self.style.get_property_value("display") == "none"

    def __repr__(self):
        ident = self.attributes.get(ID_ATTRIBUTE) or self.attributes.get(NAME_ATTRIBUTE) or ""
        return f"<{self._tag_name} {ident}>".replace(" >", ">")
