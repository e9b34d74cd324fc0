from collections import defaultdict
from html import escape

from .renderer import Renderer

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


def format_element(element, indent=0):
    if element.type == "TEXT_ELEMENT":
        return f"{'  ' * indent}{escape(element.text, quote=False)}"

    result = [f"{'  ' * indent}<{element.type}>"]
    attributes = format_attributes(element.attributes)
    if attributes:
        result[0] = result[0][:-1] + " " + attributes + ">"
    if not element.children:
        if element.type not in VOID_ELEMENTS:
            result[0] += f"</{element.type}>"
    else:
        for child in element.children:
            result.append(format_element(child, indent=indent + 1))
        result.append(f"{'  ' * indent}</{element.type}>")
    return "\n".join(result)


def format_attributes(attributes):
    return " ".join(
        key if val == "" else f'{key}="{escape(str(val))}"'
        for key, val in attributes.items()
    )


class Element:
    def __init__(self, type):
        self.type = type
        self.text = ""
        self.children = []
        self.attributes = {}
        self.handlers = defaultdict(list)

    def to_html(self):
        """Serialize the element and its children to markup"""
        if self.type == "TEXT_ELEMENT":
            return escape(self.text, quote=False)
        attributes = format_attributes(self.attributes)
        opening = f"<{self.type} {attributes}>" if attributes else f"<{self.type}>"
        if self.type in VOID_ELEMENTS:
            return opening
        inner = "".join(child.to_html() for child in self.children)
        return f"{opening}{inner}</{self.type}>"

    def dispatch(self, event_type, *args):
        """Call all listeners for `event_type` with the given arguments"""
        for handler in list(self.handlers[event_type]):
            handler(*args)

    def __repr__(self):
        return format_element(self)


class HTMLRenderer(Renderer):
    """Renderer that renders to a simple Element object that serializes to HTML"""

    def create_element(self, type: str) -> Element:
        return Element(type=type)

    def create_text_element(self) -> Element:
        return Element(type="TEXT_ELEMENT")

    def insert(self, el: Element, parent: Element, anchor=None):
        anchor_idx = parent.children.index(anchor) if anchor else len(parent.children)
        parent.children.insert(anchor_idx, el)

    def remove(self, el: Element, parent: Element):
        parent.children.remove(el)

    def set_element_text(self, el: Element, value: str):
        el.text = value

    def set_attribute(self, el: Element, attr: str, value):
        el.attributes[attr] = value

    def remove_attribute(self, el: Element, attr: str, value):
        if attr in el.attributes:
            del el.attributes[attr]

    def add_event_listener(self, el: Element, event_type, value):
        el.handlers[event_type].append(value)

    def remove_event_listener(self, el: Element, event_type, value):
        el.handlers[event_type].remove(value)
