"""Messages exchanged over the message system."""

from dataclasses import dataclass
from enum import StrEnum

from datadict_sync.models.node import DataDictionary, SchemaDictionary


class MessageType(StrEnum):
    """Message kinds the text adapter reacts to."""

    initialize = "initialize"
    data = "data-changed"
    navigation = "navigation"
    schema_dictionary = "schema-changed"


@dataclass(frozen=True)
class Message:
    """A single message on the channel.

    ``type`` is a plain string so kinds unknown to a given listener can
    still travel through the channel.
    """

    type: str
    data_dictionary: DataDictionary | None = None
    schema_dictionary: SchemaDictionary | None = None
    active_id: str | None = None
    originator_id: str | None = None
