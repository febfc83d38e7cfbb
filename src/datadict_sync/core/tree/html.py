"""Render a data dictionary as indented HTML lines."""

import html
from collections.abc import Mapping

from datadict_sync.config import TEXT_SCHEMA_ID, VOID_ELEMENTS, resolve_indent_width
from datadict_sync.models.node import DataDictionary, Node, SchemaDictionary


def is_void(schema_id: str, schema_dictionary: SchemaDictionary) -> bool:
    """Whether elements of this schema have no content and no closing tag."""
    schema = schema_dictionary.get(schema_id)
    if schema is not None:
        return schema.void
    return schema_id.lower() in VOID_ELEMENTS


def format_attributes(attributes: Mapping[str, str | None]) -> str:
    parts = []
    for name, value in attributes.items():
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(value, quote=True)}"')
    return "".join(parts)


def format_start_tag(node: Node) -> str:
    return f"<{node.schema_id}{format_attributes(node.attributes)}>"


def _encode_leading_whitespace(line: str) -> str:
    stripped = line.lstrip()
    indent = line[: len(line) - len(stripped)]
    return "".join(f"&#{ord(char)};" for char in indent) + stripped


def escape_text(text: str, *, at_line_start: bool) -> str:
    """Escape text for HTML, writing whitespace that begins a line as character references.

    Readers strip indentation before parsing, so whitespace at the start of a
    line only survives as a reference.
    """
    lines = html.escape(text, quote=False).split("\n")
    return "\n".join(
        _encode_leading_whitespace(line) if index or at_line_start else line
        for index, line in enumerate(lines)
    )


def map_data_dictionary_to_html(
    data_dictionary: DataDictionary,
    schema_dictionary: SchemaDictionary,
) -> list[str]:
    """Render the tree as HTML, one element or text run per line.

    The root is a container and only its children are written, starting at
    indentation zero. Each nesting level adds one indentation step. An
    element without children keeps its text and closing tag on its opening
    line; void elements write only the opening tag.

    Args:
        data_dictionary: The tree to render.
        schema_dictionary: Schemas, consulted for void elements.

    Returns:
        The text as a list of lines.
    """
    indent_unit = " " * resolve_indent_width()
    lines: list[str] = []

    def render(node: Node, depth: int) -> None:
        indent = indent_unit * depth

        # Continuation lines of multi-line text are not indented.
        if node.schema_id == TEXT_SCHEMA_ID:
            lines.extend(f"{indent}{escape_text(node.text, at_line_start=True)}".split("\n"))
            return

        start_tag = format_start_tag(node)
        if is_void(node.schema_id, schema_dictionary):
            lines.append(f"{indent}{start_tag}")
            return

        end_tag = f"</{node.schema_id}>"
        if not node.children:
            text = escape_text(node.text, at_line_start=False)
            lines.extend(f"{indent}{start_tag}{text}{end_tag}".split("\n"))
            return

        lines.append(f"{indent}{start_tag}")
        if node.text:
            text = escape_text(node.text, at_line_start=True)
            lines.extend(f"{indent}{indent_unit}{text}".split("\n"))
        for child in data_dictionary.children_of(node.id):
            render(child, depth + 1)
        lines.append(f"{indent}{end_tag}")

    for child in data_dictionary.children_of(data_dictionary.root_id):
        render(child, 0)

    return lines
