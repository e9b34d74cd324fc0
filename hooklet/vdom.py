from __future__ import annotations

import logging
from typing import Any

from .renderers import Renderer
from .vnode import Child, VNode

logger = logging.getLogger(__name__)


def event_type(name: str) -> str:
    """Maps an event attribute name onto the event type: ``onclick`` -> ``click``"""
    return name[2:] if name.startswith("on") and len(name) > 2 else name


def materialize(
    vnode: Child | list[Child],
    renderer: Renderer,
    target: Any,
    anchor: Any = None,
) -> list[Any]:
    """
    Create elements for the given tree with the renderer and insert them
    into `target` (before `anchor`, if given).

    Returns the list of top-level elements that were inserted, so that the
    caller can remove them again. Null nodes (``None`` children and VNodes
    without tag) produce no element of their own.
    """
    if isinstance(vnode, (list, tuple)):
        elements = []
        for item in vnode:
            elements.extend(materialize(item, renderer, target, anchor))
        return elements

    if vnode is None:
        return []

    if isinstance(vnode, VNode) and vnode.tag is None:
        return materialize(list(vnode.children), renderer, target, anchor)

    element = create(vnode, renderer)
    renderer.insert(element, parent=target, anchor=anchor)
    return [element]


def create(vnode: VNode | str, renderer: Renderer) -> Any:
    """Create a detached element (with all its children) for the vnode."""
    if not isinstance(vnode, VNode):
        element = renderer.create_text_element()
        renderer.set_element_text(element, str(vnode))
        return element

    element = renderer.create_element(vnode.tag)
    for attr, value in vnode.attributes.items():
        renderer.set_attribute(element, attr, value)
    for name, handler in vnode.events.items():
        renderer.add_event_listener(element, event_type(name), handler)
    for child in vnode.children:
        materialize(child, renderer, element)
    return element
