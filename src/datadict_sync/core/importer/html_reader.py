"""Parse HTML text into a data dictionary."""

import itertools
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

from loguru import logger

from datadict_sync.config import (
    DEFAULT_ROOT_ID,
    DEFAULT_ROOT_SCHEMA_ID,
    PARSE_MODE_TEXT,
    TEXT_SCHEMA_ID,
)
from datadict_sync.core.tree.html import is_void
from datadict_sync.errors import ParseError
from datadict_sync.models.node import DataDictionary, Node, SchemaDictionary

# An attribute name, skipping over its value so quoted text is never read as a name.
_ATTRIBUTE = re.compile(r"""([^\s/>"'=][^\s/>=]*)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]*))?""")


@dataclass
class _OpenElement:
    """An element whose closing tag has not been seen yet."""

    id: str
    schema_id: str
    parent_id: str | None
    attributes: dict[str, str | None] = field(default_factory=dict)
    children: list[str] = field(default_factory=list)
    pending_text: list[str] = field(default_factory=list)
    is_root: bool = False


class _DictionaryBuilder(HTMLParser):
    """Builds nodes while tokenizing; ids are allocated in document order."""

    def __init__(self, root: Node, schema_dictionary: SchemaDictionary) -> None:
        super().__init__(convert_charrefs=True)
        self.schema_dictionary = schema_dictionary
        self.nodes: dict[str, Node] = {}
        self._ids = (f"{root.id}-{n}" for n in itertools.count(1))
        self._stack: list[_OpenElement] = [
            _OpenElement(
                id=root.id,
                schema_id=root.schema_id,
                parent_id=None,
                attributes=dict(root.attributes),
                is_root=True,
            )
        ]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag, attrs = self._original_case(tag, attrs)
        element = self._open(tag, attrs)
        if is_void(tag, self.schema_dictionary):
            self._close(element)
        else:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._close(self._open(*self._original_case(tag, attrs)))

    def handle_endtag(self, tag: str) -> None:
        top = self._stack[-1]
        if top.is_root:
            msg = f"Unexpected closing tag </{tag}>"
            raise ParseError(msg)
        if top.schema_id.lower() != tag:
            msg = f"Closing tag </{tag}> does not match open <{top.schema_id}>"
            raise ParseError(msg)
        self._close(self._stack.pop())

    def handle_data(self, data: str) -> None:
        self._stack[-1].pending_text.append(data)

    def handle_comment(self, data: str) -> None:
        logger.debug("Dropping comment {!r}", data[:40])

    def finish(self) -> DataDictionary:
        # The tokenizer holds back markup it cannot complete yet; close() would
        # pass it on as text.
        leftover = self.rawdata.lstrip()
        if leftover.startswith("<"):
            msg = f"Incomplete markup at end of text: {leftover[:40]!r}"
            raise ParseError(msg)
        self.close()
        if len(self._stack) > 1:
            unclosed = ", ".join(f"<{e.schema_id}>" for e in self._stack[1:])
            msg = f"Unclosed elements: {unclosed}"
            raise ParseError(msg)
        root = self._stack.pop()
        self._close(root)
        return DataDictionary(nodes=self.nodes, root_id=root.id)

    def _original_case(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> tuple[str, list[tuple[str, str | None]]]:
        """Recover tag and attribute names as written; html.parser lowercases them."""
        raw = self.get_starttag_text() or ""
        name = raw[1 : 1 + len(tag)]
        if name.lower() != tag:
            return tag, attrs

        names = [m.group(1) for m in _ATTRIBUTE.finditer(raw, 1 + len(tag))]
        parsed_names = [parsed for parsed, _value in attrs]
        if [written.lower() for written in names] != parsed_names:
            return name, attrs
        return name, [(written, value) for written, (_parsed, value) in zip(names, attrs)]

    def _check_child(self, parent: _OpenElement, schema_id: str) -> None:
        schema = self.schema_dictionary.get(parent.schema_id)
        if schema is not None and not schema.allows_child(schema_id):
            msg = f"<{parent.schema_id}> does not allow {schema_id!r} children"
            raise ParseError(msg)

    def _open(self, tag: str, attrs: list[tuple[str, str | None]]) -> _OpenElement:
        if self.schema_dictionary and tag not in self.schema_dictionary:
            msg = f"Unknown element <{tag}>"
            raise ParseError(msg)
        schema = self.schema_dictionary.get(tag)
        for name, _value in attrs:
            if schema is not None and not schema.allows_attribute(name):
                msg = f"Attribute {name!r} is not allowed on <{tag}>"
                raise ParseError(msg)

        parent = self._stack[-1]
        self._check_child(parent, tag)
        self._flush_text_nodes(parent)

        element = _OpenElement(
            id=next(self._ids),
            schema_id=tag,
            parent_id=parent.id,
            attributes=dict(attrs),
        )
        parent.children.append(element.id)
        return element

    def _flush_text_nodes(self, element: _OpenElement) -> None:
        """Turn pending text into a text node, once an element has mixed content."""
        text = "".join(element.pending_text)
        element.pending_text.clear()
        if not text.strip():
            return
        self._check_child(element, TEXT_SCHEMA_ID)
        text_id = next(self._ids)
        element.children.append(text_id)
        self.nodes[text_id] = Node(
            id=text_id, schema_id=TEXT_SCHEMA_ID, parent_id=element.id, text=text
        )

    def _close(self, element: _OpenElement) -> None:
        text = ""
        if element.children or element.is_root:
            self._flush_text_nodes(element)
        else:
            text = "".join(element.pending_text)
            if text:
                self._check_child(element, TEXT_SCHEMA_ID)

        self.nodes[element.id] = Node(
            id=element.id,
            schema_id=element.schema_id,
            parent_id=element.parent_id,
            children=tuple(element.children),
            attributes=element.attributes,
            text=text,
        )


def map_html_to_data_dictionary(
    value: str,
    mode: str,
    previous: DataDictionary | None,
    schema_dictionary: SchemaDictionary,
) -> DataDictionary:
    """Parse HTML into a new data dictionary.

    The root of ``previous`` is kept (same id, schema and attributes) as the
    container of the parsed elements; every other node gets a fresh id
    derived from the root id and its order of appearance, so parsing the
    same text twice yields the same dictionary.

    Args:
        value: The HTML text.
        mode: Parse mode; only ``"text"`` is supported.
        previous: The dictionary the text was edited from, if any.
        schema_dictionary: Schemas to validate elements against. When empty,
            any element and attribute is accepted.

    Raises:
        ParseError: If the text is malformed or violates a schema.
    """
    if mode != PARSE_MODE_TEXT:
        msg = f"Unsupported parse mode {mode!r}"
        raise ParseError(msg)

    root = (
        previous.root
        if previous is not None
        else Node(id=DEFAULT_ROOT_ID, schema_id=DEFAULT_ROOT_SCHEMA_ID)
    )
    builder = _DictionaryBuilder(root, schema_dictionary)
    builder.feed(value)
    data_dictionary = builder.finish()
    logger.debug("Parsed {} nodes under root {!r}", len(data_dictionary), root.id)
    return data_dictionary
