"""Tests for the in-process message channel."""

from datadict_sync.message_system import MessageSystem
from datadict_sync.models.message import Message
from tests.unit.fakes import RecordingListener


def test_messages_reach_every_listener_in_order() -> None:
    channel = MessageSystem()
    first, second = RecordingListener(), RecordingListener()
    channel.add(first)
    channel.add(second)

    channel.post_message(Message(type="a"))
    channel.post_message(Message(type="b"))

    assert [m.type for m in first.messages] == ["a", "b"]
    assert [m.type for m in second.messages] == ["a", "b"]


def test_message_posted_during_delivery_is_queued() -> None:
    """A reply must not overtake the message that caused it."""
    channel = MessageSystem()
    seen: list[str] = []

    def replier(message: Message) -> None:
        seen.append(f"replier:{message.type}")
        if message.type == "ping":
            channel.post_message(Message(type="pong"))
            seen.append("replier:posted")

    def watcher(message: Message) -> None:
        seen.append(f"watcher:{message.type}")

    channel.add(replier)
    channel.add(watcher)
    channel.post_message(Message(type="ping"))

    assert seen == [
        "replier:ping",
        "replier:posted",
        "watcher:ping",
        "replier:pong",
        "watcher:pong",
    ]


def test_failing_listener_does_not_break_delivery() -> None:
    channel = MessageSystem()
    recorder = RecordingListener()

    def broken(message: Message) -> None:
        msg = "boom"
        raise RuntimeError(msg)

    channel.add(broken)
    channel.add(recorder)
    channel.post_message(Message(type="a"))
    channel.post_message(Message(type="b"))

    assert [m.type for m in recorder.messages] == ["a", "b"]


def test_removed_listener_receives_nothing() -> None:
    channel = MessageSystem()
    recorder = RecordingListener()
    channel.add(recorder)
    channel.remove(recorder)
    channel.remove(recorder)

    channel.post_message(Message(type="a"))

    assert recorder.messages == []
