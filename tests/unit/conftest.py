"""Shared test fixtures."""

import pytest

from datadict_sync.adapter.text_adapter import TextAdapter
from datadict_sync.message_system import MessageSystem
from datadict_sync.models.message import Message, MessageType
from datadict_sync.models.node import DataDictionary, Node, Schema
from tests.unit.fakes import RecordingListener

OTHER_ORIGINATOR = "tests::canvas"

# <div class="card">
#     <h1>Title</h1>
#     <p>first</p>
#     <p>
#         <span>bold</span>
#         tail
#     </p>
# </div>
NESTED_NODES = {
    "root": Node(id="root", schema_id="root", children=("d1",)),
    "d1": Node(
        id="d1",
        schema_id="div",
        parent_id="root",
        children=("h1", "p1", "p2"),
        attributes={"class": "card"},
    ),
    "h1": Node(id="h1", schema_id="h1", parent_id="d1", text="Title"),
    "p1": Node(id="p1", schema_id="p", parent_id="d1", text="first"),
    "p2": Node(id="p2", schema_id="p", parent_id="d1", children=("s1", "t1")),
    "s1": Node(id="s1", schema_id="span", parent_id="p2", text="bold"),
    "t1": Node(id="t1", schema_id="text", parent_id="p2", text="tail"),
}

NESTED_HTML = [
    '<div class="card">',
    "    <h1>Title</h1>",
    "    <p>first</p>",
    "    <p>",
    "        <span>bold</span>",
    "        tail",
    "    </p>",
    "</div>",
]


@pytest.fixture
def simple_dictionary() -> DataDictionary:
    """Return root -> p1, where p1 holds the text "hello"."""
    return DataDictionary(
        nodes={
            "root": Node(id="root", schema_id="root", children=("p1",)),
            "p1": Node(id="p1", schema_id="p", parent_id="root", text="hello"),
        },
        root_id="root",
    )


@pytest.fixture
def nested_dictionary() -> DataDictionary:
    return DataDictionary(nodes=dict(NESTED_NODES), root_id="root")


@pytest.fixture
def schema_dictionary() -> dict[str, Schema]:
    """Return schemas for a small HTML vocabulary."""
    return {
        "root": Schema(id="root", attributes=frozenset()),
        "div": Schema(id="div", attributes=frozenset({"class", "id"})),
        "h1": Schema(id="h1", children=frozenset({"text"})),
        "p": Schema(id="p", children=frozenset({"text", "span", "br"})),
        "span": Schema(id="span", children=frozenset({"text"})),
        "br": Schema(id="br", attributes=frozenset(), void=True),
    }


@pytest.fixture
def message_system() -> MessageSystem:
    return MessageSystem()


@pytest.fixture
def recorder(message_system: MessageSystem) -> RecordingListener:
    """Return a listener registered before any adapter, so it sees every message."""
    listener = RecordingListener()
    message_system.add(listener)
    return listener


@pytest.fixture
def adapter(
    message_system: MessageSystem,
    recorder: RecordingListener,
    simple_dictionary: DataDictionary,
) -> TextAdapter:
    """Return an adapter initialized with the simple dictionary, p1 active."""
    text_adapter = TextAdapter(message_system)
    message_system.post_message(
        Message(
            type=MessageType.initialize,
            data_dictionary=simple_dictionary,
            schema_dictionary={},
            active_id="p1",
            originator_id=OTHER_ORIGINATOR,
        )
    )
    return text_adapter
