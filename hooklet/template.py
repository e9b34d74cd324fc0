"""
Compile tagged templates into VNode trees.

A template is a sequence of literal markup fragments with values in between,
the shape of a JavaScript tagged template or a Python template string::

    html(["<button onclick=", ">", "</button>"], increment, label)

Values that can not be written as text (nodes, sequences of nodes and
callables) are swapped for placeholders in the markup. After parsing, the
placeholders are looked up by id and swapped back in.
"""
from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from html import escape
from html.parser import HTMLParser
import logging
import re
import secrets
from typing import Any

from .vnode import Child, EmbeddedNode, EventHandler, VNode, h

logger = logging.getLogger(__name__)


LIBRARY = "hooklet"
PLACEHOLDER_TAG = "m-placeholder"
EVENT_PREFIX = "m-ev-"
NONCE_BYTES = 4
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


def event_token_pattern(nonce: str) -> re.Pattern:
    """
    Pattern for the event token of one compilation, as complete attribute
    value or in the 'data-m-event' wire form.
    """
    return re.compile(
        rf"""(?:data-m-event=["']?)?{EVENT_PREFIX}{re.escape(nonce)}-(\d+)["']?"""
    )


class TemplateError(ValueError):
    """Raised for values that can't be placed at their position in a template."""


class UnresolvedPlaceholderError(TemplateError):
    """Raised when a placeholder id has no recorded value."""


class Context(Enum):
    TEXT = "text"
    COMMENT = "comment"
    TAG = "tag"
    ATTR_VALUE = "attribute value"


class Scanner:
    """
    Tracks the markup context at the end of each literal fragment, so that
    interpolated values can be encoded for the position they end up in.
    """

    def __init__(self):
        self.context = Context.TEXT
        self.quote = None
        # Whether the last significant character in a tag was '='
        self.after_equals = False

    def feed(self, fragment: str):
        idx = 0
        length = len(fragment)
        while idx < length:
            char = fragment[idx]
            if self.context is Context.TEXT:
                if fragment.startswith("<!--", idx):
                    self.context = Context.COMMENT
                    idx += 4
                    continue
                if char == "<" and idx + 1 < length:
                    following = fragment[idx + 1]
                    if following.isalpha() or following in "/!?":
                        self.context = Context.TAG
                        self.after_equals = False
            elif self.context is Context.COMMENT:
                if fragment.startswith("-->", idx):
                    self.context = Context.TEXT
                    idx += 3
                    continue
            elif self.context is Context.TAG:
                if char in "\"'":
                    self.context = Context.ATTR_VALUE
                    self.quote = char
                    self.after_equals = False
                elif char == ">":
                    self.context = Context.TEXT
                    self.after_equals = False
                elif char == "=":
                    self.after_equals = True
                elif not char.isspace():
                    self.after_equals = False
            elif self.context is Context.ATTR_VALUE:
                if char == self.quote:
                    self.context = Context.TAG
                    self.quote = None
            idx += 1

    def value_written(self):
        """An unquoted attribute value was just written"""
        self.after_equals = False


def is_embedded(value) -> bool:
    return isinstance(value, (VNode, list, tuple))


def to_text(value) -> str:
    return "" if value is None else str(value)


def substitute(
    fragments: Sequence[str], values: Sequence[Any], nonce: str
) -> tuple[str, dict[int, EmbeddedNode | EventHandler]]:
    """
    Returns the markup for the template, with placeholders for all values
    that can't be written as text, and the table of recorded placeholders.
    Event tokens carry the `nonce`, so that text can never pass for one.
    """
    if len(fragments) != len(values) + 1:
        raise TemplateError(
            f"Expected {len(values) + 1} fragments for {len(values)} values, "
            f"got {len(fragments)}"
        )

    scanner = Scanner()
    placeholders: dict[int, EmbeddedNode | EventHandler] = {}
    out = []

    for fragment, value in zip(fragments, values):
        out.append(fragment)
        scanner.feed(fragment)
        context = scanner.context

        if context is Context.COMMENT:
            # Comments are dropped from the tree anyway
            out.append(escape(to_text(value)))
        elif is_embedded(value):
            if context is not Context.TEXT:
                raise TemplateError(
                    f"Nodes can only be placed as children, not in {context.value}"
                )
            idx = len(placeholders)
            placeholders[idx] = EmbeddedNode(value)
            out.append(f'<{PLACEHOLDER_TAG} id="{idx}" />')
        elif callable(value):
            if context is Context.ATTR_VALUE:
                token = f"{EVENT_PREFIX}{nonce}-{len(placeholders)}"
            elif context is Context.TAG and scanner.after_equals:
                token = f'"{EVENT_PREFIX}{nonce}-{len(placeholders)}"'
                scanner.value_written()
            else:
                raise TemplateError(
                    f"Callables can only be placed as attribute value, "
                    f"not in {context.value}: {value!r}"
                )
            placeholders[len(placeholders)] = EventHandler(value)
            out.append(token)
        else:
            text = to_text(value)
            if context is Context.ATTR_VALUE:
                out.append(escape(text))
            elif context is Context.TAG and scanner.after_equals:
                out.append(f'"{escape(text)}"')
                scanner.value_written()
            else:
                out.append(text)

    out.append(fragments[-1])
    return "".join(out), placeholders


class Node:
    """Element parsed from the template markup."""

    def __init__(self, tag, attrs=None):
        super().__init__()
        self.tag = tag
        self.attrs = attrs or {}
        self.children = []


class Text:
    def __init__(self, data):
        self.data = data


class Comment:
    def __init__(self, data):
        self.data = data


class TemplateParser(HTMLParser):
    """
    Parser for template markup.

    Creates a tree of Nodes with all encountered attributes, text and
    comments. Void elements never get children, unclosed elements are
    closed at the end and stray end tags are ignored.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.root = Node("root")
        self.stack = [self.root]

    def _append(self, child):
        self.stack[-1].children.append(child)

    def handle_starttag(self, tag, attrs):
        # Attributes without value are flags, stored as empty string
        node = Node(tag, {key: "" if value is None else value for key, value in attrs})
        self._append(node)
        if tag not in VOID_ELEMENTS:
            self.stack.append(node)

    def handle_startendtag(self, tag, attrs):
        node = Node(tag, {key: "" if value is None else value for key, value in attrs})
        self._append(node)

    def handle_endtag(self, tag):
        for idx in range(len(self.stack) - 1, 0, -1):
            if self.stack[idx].tag == tag:
                del self.stack[idx:]
                return

    def handle_data(self, data):
        siblings = self.stack[-1].children
        if siblings and isinstance(siblings[-1], Text):
            siblings[-1].data += data
        else:
            siblings.append(Text(data))

    def handle_comment(self, data):
        self._append(Comment(data))


def parse(markup: str) -> Node:
    parser = TemplateParser()
    parser.feed(markup)
    parser.close()
    return parser.root


class Converter:
    """Converts a parsed tree into VNodes, resolving the placeholders."""

    def __init__(
        self, placeholders: dict[int, EmbeddedNode | EventHandler], nonce: str
    ):
        self.placeholders = placeholders
        self.event_token = event_token_pattern(nonce)
        self.resolved: set[int] = set()

    def lookup(self, idx, kind):
        try:
            placeholder = self.placeholders[int(idx)]
        except (KeyError, TypeError, ValueError):
            raise UnresolvedPlaceholderError(
                f"No value recorded for placeholder {idx!r}"
            ) from None
        if not isinstance(placeholder, kind):
            raise UnresolvedPlaceholderError(
                f"Placeholder {idx!r} is not a {kind.__name__}"
            )
        self.resolved.add(int(idx))
        return placeholder

    def convert(self, node) -> list[Child]:
        if isinstance(node, Text):
            # Whitespace with a line break is template indentation
            if not node.data.strip() and "\n" in node.data:
                return []
            return [node.data]
        if isinstance(node, Comment):
            return [None]
        if node.tag == PLACEHOLDER_TAG:
            return self.lookup(node.attrs.get("id"), EmbeddedNode).nodes()

        attributes = {}
        events = {}
        for name, value in node.attrs.items():
            if match := self.event_token.fullmatch(value):
                events[name] = self.lookup(match.group(1), EventHandler).callback
                continue
            if self.event_token.search(value):
                raise TemplateError(
                    f"A callable must be the complete value of attribute "
                    f"'{name}' of <{node.tag}>"
                )
            attributes[name] = value

        children = []
        for child in node.children:
            children.extend(self.convert(child))
        return [
            h(node.tag, LIBRARY, {"attrs": attributes, "events": events}, children)
        ]


def compile_template(
    fragments: Sequence[str], values: Sequence[Any] = ()
) -> VNode | list[Child] | None:
    """
    Compile literal markup `fragments` with the interleaved `values` into a
    VNode. Returns None when the template has no nodes and a list when it
    has more than one top-level node.

    Sequences and VNodes are placed as children at their position, callables
    become event handlers of the attribute they are assigned to. Any other
    value is written as text.
    """
    nonce = secrets.token_hex(NONCE_BYTES)
    markup, placeholders = substitute(fragments, values, nonce)
    tree = parse(markup)

    converter = Converter(placeholders, nonce)
    nodes = []
    for child in tree.children:
        nodes.extend(converter.convert(child))

    if missing := set(placeholders) - converter.resolved:
        raise TemplateError(
            f"Could not place interpolated value(s) {sorted(missing)} in: {markup!r}"
        )

    logger.debug(
        "Compiled template with %d placeholder(s) into %d node(s)",
        len(placeholders),
        len(nodes),
    )

    if not nodes:
        return None
    if len(nodes) == 1:
        return nodes[0]
    return nodes


def html(strings, *values):
    """
    Tagged template entry point. Accepts the literal fragments followed by
    the values, a single markup string, or a template string object
    (``t"..."``).
    """
    if hasattr(strings, "interpolations"):
        return compile_template(
            strings.strings, [item.value for item in strings.interpolations]
        )
    if isinstance(strings, str):
        strings = (strings,)
    return compile_template(strings, values)
