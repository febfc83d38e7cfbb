"""Locate a node in serialized text without reparsing it."""

from datadict_sync.config import TEXT_SCHEMA_ID, resolve_indent_width
from datadict_sync.core.tree.html import format_start_tag, is_void
from datadict_sync.core.tree.navigation import find_dictionary_id_parents
from datadict_sync.errors import IdNotFoundError
from datadict_sync.models.node import DataDictionary, Node, Position, SchemaDictionary


def _opening_line_count(node: Node) -> int:
    """Lines taken before a parent's first child: the start tag plus any own text."""
    count = format_start_tag(node).count("\n") + 1
    if node.text:
        count += node.text.count("\n") + 1
    return count


def count_lines(
    node: Node,
    data_dictionary: DataDictionary,
    schema_dictionary: SchemaDictionary,
) -> int:
    """Number of lines the serializer writes for a node and its subtree."""
    if node.schema_id == TEXT_SCHEMA_ID:
        return node.text.count("\n") + 1
    if node.parent_id is None:
        return sum(
            count_lines(child, data_dictionary, schema_dictionary)
            for child in data_dictionary.children_of(node.id)
        )
    start_lines = format_start_tag(node).count("\n") + 1
    if is_void(node.schema_id, schema_dictionary):
        return start_lines
    if not node.children:
        return start_lines + node.text.count("\n")
    return (
        _opening_line_count(node)
        + sum(
            count_lines(child, data_dictionary, schema_dictionary)
            for child in data_dictionary.children_of(node.id)
        )
        + 1
    )


def find_position_by_dictionary_id(
    dictionary_id: str,
    data_dictionary: DataDictionary,
    schema_dictionary: SchemaDictionary,
    lines: list[str],
) -> Position:
    """Find where a node's content begins in text written by the HTML serializer.

    Follows the serializer's pre-order layout: for each ancestor, adds its
    opening lines and the lines of every earlier sibling subtree. Only the
    ancestors and their preceding siblings are visited.

    The result is clamped to the bounds of ``lines``, since a local edit can
    leave text formatted differently from what the serializer would write.

    Raises:
        IdNotFoundError: If the id is not in the dictionary.
    """
    if dictionary_id not in data_dictionary:
        raise IdNotFoundError(dictionary_id)

    chain = find_dictionary_id_parents(dictionary_id, data_dictionary)
    if len(chain) == 1:
        return Position(line_number=1, column=1)

    line_number = 1
    for parent_id, child_id in zip(reversed(chain[1:]), reversed(chain[:-1]), strict=True):
        parent = data_dictionary[parent_id]
        if parent.parent_id is not None:
            line_number += _opening_line_count(parent)
        for sibling_id in parent.children:
            if sibling_id == child_id:
                break
            line_number += count_lines(
                data_dictionary[sibling_id], data_dictionary, schema_dictionary
            )

    depth = len(chain) - 2
    column = resolve_indent_width() * depth + 1
    return _clamp(Position(line_number=line_number, column=column), lines)


def _clamp(position: Position, lines: list[str]) -> Position:
    if not lines:
        return Position(line_number=1, column=1)
    line_number = min(position.line_number, len(lines))
    column = min(position.column, len(lines[line_number - 1]) + 1)
    return Position(line_number=line_number, column=column)
