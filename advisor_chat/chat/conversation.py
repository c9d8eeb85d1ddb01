"""Conversation log and chat session state.

The log is append-only. The single permitted mutation is swapping a job's
status placeholder for its terminal message, which happens at most once
per job. Both operations complete synchronously, so the event loop never
observes a half-applied update.
"""

import logging
import uuid
from collections.abc import Callable, Iterator

from advisor_chat.models.schemas import Message

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ConversationState:
    """Ordered log of conversation messages."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked after every change to the log."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def append(self, message: Message) -> Message:
        """Add a message to the end of the log."""
        self._messages.append(message)
        self._notify()
        return message

    def replace(self, message_id: str, message: Message) -> bool:
        """Swap the status message ``message_id`` for a terminal message in place.

        Returns:
            True if the placeholder was replaced, False if it no longer exists
            or is not a status message.
        """
        for index, current in enumerate(self._messages):
            if current.id != message_id:
                continue
            if not current.is_status:
                logger.warning(f"Refusing to replace non-status message {message_id}")
                return False
            self._messages[index] = message
            self._notify()
            return True
        return False

    def find_status(self, job_id: str) -> Message | None:
        """Return the pending placeholder for ``job_id``, if there is one."""
        for message in self._messages:
            if message.is_status and message.job_id == job_id:
                return message
        return None

    def resolve_status(self, job_id: str, text: str) -> Message | None:
        """Replace the placeholder for ``job_id`` with a terminal assistant message.

        Safe to call more than once: once the placeholder is gone, later calls
        change nothing and return None.
        """
        placeholder = self.find_status(job_id)
        if placeholder is None:
            logger.debug(f"No pending placeholder for job {job_id}")
            return None
        message = Message.assistant(text)
        self.replace(placeholder.id, message)
        return message


class ChatSession:
    """Manages chat state for a user session.

    Owns the conversation log and the awaiting-response flag that admits one
    submission at a time.
    """

    def __init__(self, welcome_message: str = "") -> None:
        self.session_id: str = str(uuid.uuid4())
        self.conversation = ConversationState()
        self.is_awaiting_response: bool = False
        if welcome_message:
            self.conversation.append(Message.assistant(welcome_message))
