"""Reactions that external callers attach to adapter message kinds."""

import itertools
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from datadict_sync.models.node import Position

_action_ids = itertools.count(1)


@dataclass(frozen=True)
class AdapterActionCallbackConfig:
    """Accessors an action gets to the text adapter."""

    get_text_snapshot: Callable[[], list[str]]
    set_text_snapshot: Callable[[list[str], bool], dict[str, Any]]
    get_position_for_id: Callable[..., Position]
    message_type: str


class AdapterAction:
    """A callback fired when the adapter handles a given message kind.

    The adapter hands over an :class:`AdapterActionCallbackConfig` before
    the action is ever invoked, and again whenever it re-initializes.
    """

    def __init__(
        self,
        action: Callable[[AdapterActionCallbackConfig], None],
        *,
        message_type: str,
        id: str | None = None,
    ) -> None:
        self.id = id or f"action-{next(_action_ids)}"
        self.action = action
        self.message_type = message_type
        self.config: AdapterActionCallbackConfig | None = None

    def add_config(self, config: AdapterActionCallbackConfig) -> None:
        self.config = config

    def get_message_type(self) -> str:
        return self.message_type

    def matches(self, message_type: str) -> bool:
        return self.message_type == message_type

    def invoke(self) -> None:
        if self.config is None:
            msg = f"Action {self.id!r} invoked before it was configured"
            raise RuntimeError(msg)
        self.action(self.config)

    def __repr__(self) -> str:
        return f"AdapterAction(id={self.id!r}, message_type={self.message_type!r})"


class ActionRegistry:
    """Actions in registration order, dispatched by message kind equality."""

    def __init__(self, actions: list[AdapterAction] | None = None) -> None:
        self._actions: list[AdapterAction] = list(actions or [])

    def register(self, action: AdapterAction) -> None:
        self._actions.append(action)

    def matching(self, message_type: str) -> list[AdapterAction]:
        """Actions registered for a message kind, in registration order."""
        return [action for action in self._actions if action.matches(message_type)]

    def __iter__(self) -> Iterator[AdapterAction]:
        return iter(list(self._actions))

    def __len__(self) -> int:
        return len(self._actions)
