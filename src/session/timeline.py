"""Turn-taking timeline of a single session.

The timeline mutates the session's committed message list in place. A user
message is appended optimistically before its request resolves and is either
confirmed by a following assistant message or reverted with
``rollback_last_user``.
"""

import logging

from src.models.schemas import Message, Role, Session
from src.session.errors import MessageValidationError

logger = logging.getLogger(__name__)


class MessageTimeline:
    """Ordered messages of one session with optimistic append and rollback."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session_id(self) -> str:
        return self._session.id

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._session.messages)

    def __len__(self) -> int:
        return len(self._session.messages)

    @property
    def pending(self) -> Message | None:
        """The trailing user message still waiting for an answer, if any."""
        messages = self._session.messages
        if messages and messages[-1].role is Role.USER:
            return messages[-1]
        return None

    def is_complete(self) -> bool:
        """True when every user message except a trailing one has been answered."""
        messages = self._session.messages
        for current, following in zip(messages, messages[1:]):
            if current.role is Role.USER and following.role is not Role.ASSISTANT:
                return False
        return True

    def append_user(self, text: str) -> Message:
        """Append a user message before its request resolves.

        Args:
            text: Raw user input; stored stripped.

        Returns:
            The committed user message.

        Raises:
            MessageValidationError: If the input is empty after stripping.
        """
        content = text.strip() if text else ""
        if not content:
            raise MessageValidationError("Message must not be empty")
        message = Message(role=Role.USER, content=content)
        self._session.messages.append(message)
        return message

    def append_assistant(self, text: str) -> Message:
        message = Message(role=Role.ASSISTANT, content=text)
        self._session.messages.append(message)
        return message

    def rollback_last_user(self, message_id: str | None = None) -> Message | None:
        """Remove the trailing unanswered user message.

        Repeating the call after the message is gone is a no-op.

        Args:
            message_id: When given, only that message may be removed.

        Returns:
            The removed message, or None when nothing was rolled back.
        """
        pending = self.pending
        if pending is None:
            return None
        if message_id is not None and pending.id != message_id:
            return None
        self._session.messages.pop()
        logger.debug(f"Rolled back user message {pending.id} in session {self.session_id}")
        return pending
