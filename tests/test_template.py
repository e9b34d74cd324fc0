from types import SimpleNamespace

import pytest

from hooklet import compile_template, h, html, TemplateError, UnresolvedPlaceholderError
from hooklet.template import Converter, LIBRARY, parse, substitute


def test_single_node():
    node = html("<app />")

    assert node.tag == "app"
    assert node.library == LIBRARY
    assert node.attributes == {}
    assert node.events == {}
    assert node.children == ()


def test_hierarchical_tree():
    node = html(
        """
        <parent>
          <child />
          <child>
            <grand-child />
            <grand-child />
          </child>
        </parent>
        """
    )

    assert node.tag == "parent"
    assert [child.tag for child in node.children] == ["child", "child"]
    assert [child.tag for child in node.children[1].children] == [
        "grand-child",
        "grand-child",
    ]


def test_fragment():
    nodes = html(
        """
        <item />
        <other />
        """
    )

    assert isinstance(nodes, list)
    assert [node.tag for node in nodes] == ["item", "other"]


@pytest.mark.parametrize("source", ["", "   \n  ", "<!-- comment only -->"])
def test_empty(source):
    assert html(source) is None


def test_comments_become_none():
    node = html("<div><!-- note --><span></span></div>")

    assert node.children[0] is None
    assert node.children[1].tag == "span"


def test_static_attributes():
    node = html('<input type="checkbox" checked value=5>')

    assert node.attributes == {"type": "checkbox", "checked": "", "value": "5"}


def test_text_values():
    node = html(["<p>Count: ", "</p>"], 5)
    assert node.children == ("Count: 5",)

    node = html(["<p>", "</p>"], None)
    assert node.children == ()

    node = html("<p>a &amp; b</p>")
    assert node.children == ("a & b",)


def test_attribute_values():
    node = html(
        ["<div class=", ' title="', '" data-x="pre-', '">', "</div>"],
        "a b",
        'say "hi"',
        3,
        "body",
    )

    assert node.attributes == {"class": "a b", "title": 'say "hi"', "data-x": "pre-3"}
    assert node.children == ("body",)


def test_embedded_node():
    child = html("<child />")
    node = html(["<parent>", "</parent>"], child)

    assert node.children == (child,)
    assert node.children[0] is child


def test_embedded_node_top_level():
    child = html("<child />")

    assert html(["", ""], child) is child


def test_template_flattening():
    a = html("<a />")
    b = html("<b />")
    node = html(["<div><span>x</span>", "<span>y</span></div>"], [a, b])

    assert [child.tag for child in node.children] == ["span", "a", "b", "span"]
    assert node.children[1] is a
    assert node.children[2] is b


def test_nested_sequences_are_flattened():
    items = [html(["<li>", "</li>"], idx) for idx in range(3)]
    node = html(["<ul>", "</ul>"], [items[0], (items[1], [items[2]])])

    assert node.children == tuple(items)


def test_sequence_at_top_level():
    a = html("<a />")
    b = html("<b />")

    assert html(["", ""], [a, b]) == [a, b]
    assert html(["", ""], []) is None


def test_event_extraction():
    def fn1():
        pass

    def fn2():
        pass

    node = html(["<button onclick=", " onmouseover=", ">Go</button>"], fn1, fn2)

    assert node.events == {"onclick": fn1, "onmouseover": fn2}
    assert node.attributes == {}
    assert node.children == ("Go",)


def test_quoted_event_handler():
    def fn():
        pass

    node = html(['<button class="btn" onclick="', "\" data-id='", "'>"], fn, 7)

    assert node.events == {"onclick": fn}
    assert node.attributes == {"class": "btn", "data-id": "7"}


def test_event_handler_wire_form():
    def fn():
        pass

    node = html(["<button onclick='data-m-event=\"", "\"'></button>"], fn)

    assert node.events == {"onclick": fn}
    assert node.attributes == {}


def test_event_handler_in_nested_element():
    def fn():
        pass

    node = html(["<form><input onchange=", "></form>"], fn)

    assert node.events == {}
    assert node.children[0].events == {"onchange": fn}


def test_events_and_nodes_combined():
    def fn():
        pass

    items = [html("<li />"), html("<li />")]
    node = html(["<ul onclick=", ">", "</ul>"], fn, items)

    assert node.events == {"onclick": fn}
    assert len(node.children) == 2


def test_placeholder_markup():
    markup, placeholders = substitute(
        ["<ul onclick=", ">", "</ul>"], [print, [h("li")]], nonce="abc"
    )

    assert markup == '<ul onclick="m-ev-abc-0"><m-placeholder id="1" /></ul>'
    assert sorted(placeholders) == [0, 1]


def test_callable_as_child():
    with pytest.raises(TemplateError):
        html(["<div>", "</div>"], lambda: None)


def test_callable_as_attribute_name():
    with pytest.raises(TemplateError):
        html(["<div ", "></div>"], lambda: None)


def test_callable_in_attribute_text():
    with pytest.raises(TemplateError):
        html(['<button onclick="go ', '">'], lambda: None)


def test_node_as_attribute():
    with pytest.raises(TemplateError):
        html(["<div title=", "></div>"], h("b"))


def test_unresolved_placeholder():
    with pytest.raises(UnresolvedPlaceholderError):
        html('<div><m-placeholder id="3" /></div>')

    converter = Converter({}, nonce="abc")
    button = parse('<button onclick="m-ev-abc-0"></button>').children[0]
    with pytest.raises(UnresolvedPlaceholderError):
        converter.convert(button)


def test_fragment_count():
    with pytest.raises(TemplateError):
        compile_template(["<a>", "</a>"], [])


def test_void_elements():
    node = html("<p>a<br>b</p>")

    assert node.children[0] == "a"
    assert node.children[1].tag == "br"
    assert node.children[2] == "b"


def test_unclosed_element():
    node = html("<app><unclosed></app>")

    assert node.tag == "app"
    assert node.children[0].tag == "unclosed"


def test_stray_end_tag():
    node = html("<app></other></app>")

    assert node.tag == "app"
    assert node.children == ()


def test_template_string_object():
    template = SimpleNamespace(
        strings=("<p>", "</p>"),
        interpolations=(SimpleNamespace(value=3),),
    )

    assert html(template).children == ("3",)


def test_idempotent():
    def fn():
        pass

    child = h("child")

    def compile():
        return html(["<app onclick=", ' x="1">', "</app>"], fn, [child, "text"])

    assert compile() == compile()


def test_event_token_text_is_plain_attribute():
    node = html(["<div class=", "></div>"], "m-ev-0")

    assert node.attributes == {"class": "m-ev-0"}
    assert node.events == {}

    node = html('<button onclick="m-ev-0"></button>')

    assert node.attributes == {"onclick": "m-ev-0"}
    assert node.events == {}


def test_event_token_text_next_to_handler():
    def fn():
        pass

    node = html(["<div onclick=", " class=", "></div>"], fn, "m-ev-0")

    assert node.events == {"onclick": fn}
    assert node.attributes == {"class": "m-ev-0"}


def test_event_tokens_differ_per_compilation():
    markup_a, _ = substitute(["<a onclick=", "></a>"], [print], nonce="one")
    markup_b, _ = substitute(["<a onclick=", "></a>"], [print], nonce="two")

    assert markup_a != markup_b


def test_inline_whitespace_is_kept():
    node = html("<p><b>a</b> <i>b</i></p>")

    assert len(node.children) == 3
    assert node.children[1] == " "

    node = html(["<p><b>a</b>", "<i>b</i></p>"], " ")

    assert [getattr(child, "tag", child) for child in node.children] == ["b", " ", "i"]


def test_indentation_is_dropped():
    node = html(
        """
        <p>
          <b>a</b>
        </p>
        """
    )

    assert [child.tag for child in node.children] == ["b"]
