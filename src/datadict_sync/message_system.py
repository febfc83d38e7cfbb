"""In-process, ordered message channel."""

from collections import deque
from collections.abc import Callable

from loguru import logger

from datadict_sync.models.message import Message

MessageHandler = Callable[[Message], None]


class MessageSystem:
    """Delivers messages to listeners one at a time, in the order posted.

    A message posted while another is being delivered is queued rather
    than delivered re-entrantly, so each listener finishes handling one
    message before it sees the next. Listener failures are logged and never
    propagate to the poster.
    """

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []
        self._queue: deque[Message] = deque()
        self._dispatching = False

    def add(self, handler: MessageHandler) -> None:
        """Register a listener."""
        self._handlers.append(handler)

    def remove(self, handler: MessageHandler) -> None:
        """Remove a previously registered listener if present."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.debug("Listener {!r} was not registered", handler)

    def post_message(self, message: Message) -> None:
        """Queue a message and deliver the queue unless a delivery is in progress."""
        self._queue.append(message)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                self._deliver(self._queue.popleft())
        finally:
            self._dispatching = False

    def _deliver(self, message: Message) -> None:
        logger.debug("Delivering {!r} from {!r}", message.type, message.originator_id)
        for handler in list(self._handlers):
            try:
                handler(message)
            except Exception:
                logger.exception("Listener failed on {!r} message", message.type)
