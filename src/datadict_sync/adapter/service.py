"""Base class for services that listen on the message system."""

from abc import ABC, abstractmethod

from loguru import logger

from datadict_sync.adapter.actions import (
    ActionRegistry,
    AdapterAction,
    AdapterActionCallbackConfig,
)
from datadict_sync.models.message import Message
from datadict_sync.protocols import MessageSystemProtocol


class MessageSystemService(ABC):
    """Owns a message system subscription and a registry of actions."""

    def __init__(
        self,
        message_system: MessageSystemProtocol,
        actions: list[AdapterAction] | None = None,
    ) -> None:
        self.message_system = message_system
        self.registered_actions = ActionRegistry(actions)
        message_system.add(self.handle_message_system)

    @abstractmethod
    def handle_message_system(self, message: Message) -> None:
        """React to a message delivered by the message system."""

    @abstractmethod
    def get_action_config(self, message_type: str) -> AdapterActionCallbackConfig:
        """Build the accessors handed to actions registered for a message kind."""

    def register_action(self, action: AdapterAction) -> None:
        """Register an action after construction and configure it right away."""
        self.registered_actions.register(action)
        action.add_config(self.get_action_config(action.get_message_type()))

    def add_config_to_actions(self) -> None:
        """Hand fresh accessors to every registered action."""
        for action in self.registered_actions:
            action.add_config(self.get_action_config(action.get_message_type()))

    def invoke_actions(self, message_type: str) -> None:
        """Run the actions registered for a message kind, in registration order."""
        for action in self.registered_actions.matching(message_type):
            try:
                action.invoke()
            except Exception:
                logger.exception("Action {!r} failed on {!r}", action.id, message_type)
