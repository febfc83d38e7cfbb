"""Tests for rendering data dictionaries as HTML."""

import pytest

from datadict_sync.core.tree.html import map_data_dictionary_to_html
from datadict_sync.models.node import DataDictionary, Node, Schema
from tests.unit.conftest import NESTED_HTML


def _dictionary(*children: Node) -> DataDictionary:
    root = Node(id="root", schema_id="root", children=tuple(c.id for c in children))
    return DataDictionary(nodes={"root": root, **{c.id: c for c in children}}, root_id="root")


def test_root_children_render_without_the_root(simple_dictionary: DataDictionary) -> None:
    assert map_data_dictionary_to_html(simple_dictionary, {}) == ["<p>hello</p>"]


def test_nested_elements_indent_one_level_per_depth(nested_dictionary: DataDictionary) -> None:
    assert map_data_dictionary_to_html(nested_dictionary, {}) == NESTED_HTML


def test_empty_root_renders_no_lines() -> None:
    assert map_data_dictionary_to_html(_dictionary(), {}) == []


def test_void_elements_have_no_closing_tag() -> None:
    img = Node(id="i", schema_id="img", parent_id="root", attributes={"src": "a.png"})
    line = Node(id="l", schema_id="line", parent_id="root")
    dictionary = _dictionary(img, line)

    assert map_data_dictionary_to_html(dictionary, {}) == ['<img src="a.png">', "<line></line>"]
    assert map_data_dictionary_to_html(dictionary, {"line": Schema(id="line", void=True)}) == [
        '<img src="a.png">',
        "<line>",
    ]


def test_attributes_and_text_are_escaped() -> None:
    node = Node(
        id="a",
        schema_id="input",
        parent_id="root",
        attributes={"value": 'say "hi" & <go>', "disabled": None},
    )
    para = Node(id="b", schema_id="p", parent_id="root", text="1 < 2 & 3 > 2")

    assert map_data_dictionary_to_html(_dictionary(node, para), {}) == [
        '<input value="say &quot;hi&quot; &amp; &lt;go&gt;" disabled>',
        "<p>1 &lt; 2 &amp; 3 &gt; 2</p>",
    ]


def test_element_text_precedes_its_children() -> None:
    div = Node(id="d", schema_id="div", parent_id="root", children=("s",), text="intro")
    span = Node(id="s", schema_id="span", parent_id="d", text="x")
    dictionary = DataDictionary(
        nodes={"root": Node(id="root", schema_id="root", children=("d",)), "d": div, "s": span},
        root_id="root",
    )
    assert map_data_dictionary_to_html(dictionary, {}) == [
        "<div>",
        "    intro",
        "    <span>x</span>",
        "</div>",
    ]


def test_indent_width_follows_environment(
    nested_dictionary: DataDictionary, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DATADICT_SYNC_INDENT", "2")
    lines = map_data_dictionary_to_html(nested_dictionary, {})
    assert lines[1] == "  <h1>Title</h1>"
    assert lines[4] == "    <span>bold</span>"


def test_invalid_indent_width_falls_back_to_default(
    nested_dictionary: DataDictionary, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DATADICT_SYNC_INDENT", "wide")
    assert map_data_dictionary_to_html(nested_dictionary, {}) == NESTED_HTML


def test_whitespace_starting_a_line_is_written_as_character_references() -> None:
    para = Node(id="p", schema_id="p", parent_id="root", children=("b", "t"), text=" lead")
    bold = Node(id="b", schema_id="b", parent_id="p", text=" x\n  y")
    tail = Node(id="t", schema_id="text", parent_id="p", text=" after")
    dictionary = DataDictionary(
        nodes={
            "root": Node(id="root", schema_id="root", children=("p",)),
            "p": para,
            "b": bold,
            "t": tail,
        },
        root_id="root",
    )
    assert map_data_dictionary_to_html(dictionary, {}) == [
        "<p>",
        "    &#32;lead",
        "    <b> x",
        "&#32;&#32;y</b>",
        "    &#32;after",
        "</p>",
    ]
