"""Protocols for the collaborators injected into the text adapter."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from datadict_sync.models.message import Message
from datadict_sync.models.node import DataDictionary, Position, SchemaDictionary


@runtime_checkable
class SerializerProtocol(Protocol):
    """Turns a data dictionary into text lines."""

    def __call__(
        self, data_dictionary: DataDictionary, schema_dictionary: SchemaDictionary
    ) -> list[str]:
        """Serialize the tree; total for any well-formed dictionary."""
        ...


@runtime_checkable
class ParserProtocol(Protocol):
    """Turns text back into a data dictionary."""

    def __call__(
        self,
        value: str,
        mode: str,
        previous: DataDictionary | None,
        schema_dictionary: SchemaDictionary,
    ) -> DataDictionary:
        """Parse the text, raising ParseError when it is malformed."""
        ...


@runtime_checkable
class PositionMapperProtocol(Protocol):
    """Locates a node in the text."""

    def __call__(
        self,
        dictionary_id: str,
        data_dictionary: DataDictionary,
        schema_dictionary: SchemaDictionary,
        lines: list[str],
    ) -> Position:
        """Return where the node's content begins, raising IdNotFoundError if absent."""
        ...


@runtime_checkable
class MessageSystemProtocol(Protocol):
    """Ordered in-process channel the adapter listens and posts to."""

    def post_message(self, message: Message) -> None:
        """Queue a message for delivery to every listener."""
        ...

    def add(self, handler: Callable[[Message], None]) -> None:
        """Register a listener."""
        ...
