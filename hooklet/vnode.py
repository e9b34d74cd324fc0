from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Union


class VNode:
    """
    Immutable description of a platform element: tag, attributes,
    event bindings and children. A new tree is built on every render.

    A tag of ``None`` describes a null node: it has no element of its
    own and its children take its place when materialized.
    """

    __slots__ = ("tag", "library", "attributes", "events", "children")

    def __init__(
        self,
        tag: str | None,
        library: str | None = None,
        attributes: dict[str, str] | None = None,
        events: dict[str, Callable] | None = None,
        children: Iterable[Child] | None = None,
    ):
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "library", library)
        object.__setattr__(self, "attributes", dict(attributes or {}))
        object.__setattr__(self, "events", dict(events or {}))
        object.__setattr__(self, "children", tuple(children or ()))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, VNode):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.library == other.library
            and self.attributes == other.attributes
            and self.events.keys() == other.events.keys()
            and all(self.events[key] is other.events[key] for key in self.events)
            and self.children == other.children
        )

    def __repr__(self):
        return f"<{type(self).__name__}({self.tag})>"


Child = Union[VNode, str, None]


class EmbeddedNode:
    """Placeholder for a node or a sequence of nodes inside a template."""

    __slots__ = ("value",)

    def __init__(self, value: VNode | list | tuple):
        self.value = value

    def nodes(self) -> list[Child]:
        """Returns the embedded value as a flat list of children."""
        return list(flatten(self.value))


class EventHandler:
    """Placeholder for a callable bound to an attribute inside a template."""

    __slots__ = ("callback",)

    def __init__(self, callback: Callable[..., Any]):
        self.callback = callback


def flatten(value) -> Iterable[Child]:
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from flatten(item)
    else:
        yield value


def h(
    tag: str | None,
    library: str | None = None,
    props: dict[str, dict] | None = None,
    children: Iterable[Child] | None = None,
) -> VNode:
    """
    Build a VNode from a tag, the library tag, a props dict with the keys
    ``attrs`` and ``events``, and a list of children. Nested sequences in
    ``children`` are flattened.
    """
    props = props or {}
    return VNode(
        tag,
        library,
        attributes=props.get("attrs"),
        events=props.get("events"),
        children=flatten(list(children or ())),
    )
