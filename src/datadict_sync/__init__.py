"""Bidirectional sync between a data dictionary and its text form."""

from datadict_sync.adapter.actions import AdapterAction, AdapterActionCallbackConfig
from datadict_sync.adapter.text_adapter import TextAdapter
from datadict_sync.errors import IdNotFoundError, ParseError
from datadict_sync.message_system import MessageSystem
from datadict_sync.models.message import Message, MessageType
from datadict_sync.models.node import DataDictionary, Node, Position, Schema

__all__ = [
    "AdapterAction",
    "AdapterActionCallbackConfig",
    "DataDictionary",
    "IdNotFoundError",
    "Message",
    "MessageSystem",
    "MessageType",
    "Node",
    "ParseError",
    "Position",
    "Schema",
    "TextAdapter",
]
