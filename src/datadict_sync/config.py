"""Configuration constants for datadict-sync."""

import os

from loguru import logger

# Originator id attached to messages posted by the text adapter.
TEXT_ADAPTER_ID: str = "datadict-sync::text-adapter"

# Spaces per nesting level in serialized text.
INDENT_WIDTH: int = 4

# Environment variable overriding INDENT_WIDTH.
INDENT_WIDTH_ENV: str = "DATADICT_SYNC_INDENT"

# Schema id of free-standing text runs.
TEXT_SCHEMA_ID: str = "text"

# Root used when a text edit arrives before any data dictionary.
DEFAULT_ROOT_ID: str = "root"
DEFAULT_ROOT_SCHEMA_ID: str = "root"

# The only parse mode the HTML reader understands.
PARSE_MODE_TEXT: str = "text"

# Elements written without content or closing tag, unless a schema says otherwise.
VOID_ELEMENTS: frozenset[str] = frozenset(
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


def resolve_indent_width() -> int:
    """Return the indentation width, honouring the environment override."""
    raw = os.environ.get(INDENT_WIDTH_ENV)
    if raw is None:
        return INDENT_WIDTH
    try:
        width = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer {}={!r}", INDENT_WIDTH_ENV, raw)
        return INDENT_WIDTH
    return max(width, 0)
