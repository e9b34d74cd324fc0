from .renderer import Renderer


TEXT_ELEMENT = "TEXT_ELEMENT"


def format_dict(el, indent=0):
    """Returns a markup-like multi-line representation of a dict element"""
    prefix = "  " * indent
    if el["type"] == TEXT_ELEMENT:
        return f"{prefix}{el.get('text', '')!r}"

    attrs = " ".join(f'{key}="{val}"' for key, val in el.get("attrs", {}).items())
    handlers = " ".join(f"@{event}" for event in el.get("handlers", {}))
    opening = " ".join(part for part in (el["type"], attrs, handlers) if part)
    children = el.get("children", [])
    if not children:
        return f"{prefix}<{opening} />"

    result = [f"{prefix}<{opening}>"]
    for child in children:
        result.append(format_dict(child, indent=indent + 1))
    result.append(f"{prefix}</{el['type']}>")
    return "\n".join(result)


class DictRenderer(Renderer):
    """Renderer that renders to plain dicts. Keys without content are omitted."""

    def create_element(self, type: str) -> dict:
        return {"type": type}

    def create_text_element(self) -> dict:
        return {"type": TEXT_ELEMENT}

    def insert(self, el: dict, parent: dict, anchor=None):
        children = parent.setdefault("children", [])
        idx = len(children)
        if anchor is not None:
            idx = next(i for i, child in enumerate(children) if child is anchor)
        children.insert(idx, el)

    def remove(self, el: dict, parent: dict):
        children = parent["children"]
        # Remove by identity: equal-looking siblings are common
        for idx, child in enumerate(children):
            if child is el:
                del children[idx]
                break
        if not children:
            del parent["children"]

    def set_element_text(self, el: dict, value: str):
        el["text"] = value

    def set_attribute(self, el: dict, attr: str, value):
        el.setdefault("attrs", {})[attr] = value

    def remove_attribute(self, el: dict, attr: str, value):
        attrs = el.get("attrs", {})
        attrs.pop(attr, None)
        if not attrs:
            el.pop("attrs", None)

    def add_event_listener(self, el: dict, event_type: str, value):
        el.setdefault("handlers", {}).setdefault(event_type, []).append(value)

    def remove_event_listener(self, el: dict, event_type: str, value):
        handlers = el["handlers"][event_type]
        handlers.remove(value)
        if not handlers:
            del el["handlers"][event_type]
        if not el["handlers"]:
            del el["handlers"]
