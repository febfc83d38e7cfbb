"""Keeps a data dictionary and a text editor's contents in sync."""

from typing import Any

from loguru import logger

from datadict_sync.adapter.actions import AdapterAction, AdapterActionCallbackConfig
from datadict_sync.adapter.service import MessageSystemService
from datadict_sync.config import PARSE_MODE_TEXT, TEXT_ADAPTER_ID
from datadict_sync.core.importer.html_reader import map_html_to_data_dictionary
from datadict_sync.core.tree.html import map_data_dictionary_to_html
from datadict_sync.core.tree.navigation import resolve_active_id
from datadict_sync.core.tree.position import find_position_by_dictionary_id
from datadict_sync.errors import IdNotFoundError, ParseError
from datadict_sync.models.message import Message, MessageType
from datadict_sync.models.node import DataDictionary, Position, SchemaDictionary
from datadict_sync.protocols import (
    MessageSystemProtocol,
    ParserProtocol,
    PositionMapperProtocol,
    SerializerProtocol,
)


class TextAdapter(MessageSystemService):
    """A message system service for a flat text editor.

    Holds the last known data dictionary, schema dictionary, active id and
    text snapshot. Incoming ``initialize`` messages from other senders
    regenerate the snapshot; local text edits are parsed and broadcast as an
    ``initialize`` message tagged with this adapter's originator id, which
    the adapter recognizes and does not re-serialize when it comes back.
    """

    def __init__(
        self,
        message_system: MessageSystemProtocol,
        actions: list[AdapterAction] | None = None,
        *,
        serializer: SerializerProtocol = map_data_dictionary_to_html,
        parser: ParserProtocol = map_html_to_data_dictionary,
        position_mapper: PositionMapperProtocol = find_position_by_dictionary_id,
        originator_id: str = TEXT_ADAPTER_ID,
    ) -> None:
        self.serializer = serializer
        self.parser = parser
        self.position_mapper = position_mapper
        self.originator_id = originator_id

        self.text_snapshot: list[str] = []
        self.schema_dictionary: SchemaDictionary = {}
        self.data_dictionary: DataDictionary | None = None
        self.dictionary_id: str | None = None

        super().__init__(message_system, actions)
        self.add_config_to_actions()

    def handle_message_system(self, message: Message) -> None:
        """Update held state from an incoming message.

        Unknown message kinds are ignored.
        """
        if message.type == MessageType.initialize:
            if not self._replace_data_dictionary(message):
                return
            if message.originator_id == self.originator_id:
                logger.debug("Ignoring echo of our own initialize message")
                return

            if message.schema_dictionary is not None:
                self.schema_dictionary = message.schema_dictionary
            self.text_snapshot = self.serializer(self.data_dictionary, self.schema_dictionary)
            self.add_config_to_actions()
            self.invoke_actions(message.type)
        elif message.type == MessageType.data:
            self._replace_data_dictionary(message)
        elif message.type == MessageType.navigation:
            if message.active_id is not None:
                self.dictionary_id = message.active_id
            elif self.data_dictionary is not None:
                self.dictionary_id = self.data_dictionary.root_id
        elif message.type == MessageType.schema_dictionary:
            if message.schema_dictionary is not None:
                self.schema_dictionary = message.schema_dictionary
        else:
            logger.debug("Ignoring message of kind {!r}", message.type)

    def get_action_config(self, message_type: str) -> AdapterActionCallbackConfig:
        return AdapterActionCallbackConfig(
            get_text_snapshot=self.get_text_snapshot,
            set_text_snapshot=self.set_text_snapshot,
            get_position_for_id=self.get_position_for_id,
            message_type=message_type,
        )

    def get_text_snapshot(self) -> list[str]:
        """Retrieve the current text, one entry per line."""
        return self.text_snapshot

    def set_text_snapshot(self, value: list[str], is_external: bool) -> dict[str, Any]:
        """Store new editor text and, for local edits, parse it into the data dictionary.

        External text only replaces the snapshot: the data dictionary it came
        from already reached the rest of the system another way.

        Args:
            value: The text, as lines or as chunks containing line breaks.
            is_external: True when the text did not originate in this editor.

        Returns:
            ``{"success": True, "active_id": ...}``, or
            ``{"success": False, "error": ...}`` when the text does not parse.
            On failure the snapshot is kept but the data dictionary is not.
        """
        self.text_snapshot = "\n".join(value).split("\n")

        if is_external:
            return {"success": True, "active_id": self.dictionary_id}

        # Indentation and line breaks are layout only.
        normalized = (
            "".join(line.lstrip() for line in self.text_snapshot)
            .replace("\r", "")
            .replace("\n", "")
        )
        try:
            data_dictionary = self.parser(
                normalized, PARSE_MODE_TEXT, self.data_dictionary, self.schema_dictionary
            )
        except ParseError as e:
            logger.warning("Text edit not applied, keeping previous data dictionary: {}", e)
            return {"success": False, "error": str(e)}

        self._update_dictionary_id_from_data_dictionary(data_dictionary)
        active_id = self.dictionary_id

        self.message_system.post_message(
            Message(
                type=MessageType.initialize,
                data_dictionary=data_dictionary,
                schema_dictionary=self.schema_dictionary,
                active_id=active_id,
                originator_id=self.originator_id,
            )
        )
        return {"success": True, "active_id": active_id}

    def get_position_for_id(self, dictionary_id: str | None = None) -> Position:
        """Get the position of a node in the text, defaulting to the active id.

        Raises:
            IdNotFoundError: If the id is not in the current data dictionary.
        """
        target = dictionary_id if isinstance(dictionary_id, str) else self.dictionary_id
        if self.data_dictionary is None or target is None or target not in self.data_dictionary:
            raise IdNotFoundError(target)
        return self.position_mapper(
            target, self.data_dictionary, self.schema_dictionary, self.text_snapshot
        )

    def _replace_data_dictionary(self, message: Message) -> bool:
        if message.data_dictionary is None:
            logger.warning("Ignoring {!r} message without a data dictionary", message.type)
            return False
        self.data_dictionary = message.data_dictionary
        self.dictionary_id = message.active_id or message.data_dictionary.root_id
        return True

    def _update_dictionary_id_from_data_dictionary(self, data_dictionary: DataDictionary) -> None:
        self.dictionary_id = resolve_active_id(
            self.dictionary_id, self.data_dictionary, data_dictionary
        )
        self.data_dictionary = data_dictionary
