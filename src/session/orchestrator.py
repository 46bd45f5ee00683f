"""Request orchestration for chat turns.

One ``submit`` call is one turn: the user message is appended optimistically,
exactly one request goes to the answering service, and the turn ends either
with a committed assistant message or with the user message rolled back.

Architecture decisions:

1. **Single-flight per session** - the session is marked ``sending`` before the
   first await, so a second submit for the same session is rejected without
   touching the timeline or the network.

2. **Commit before reveal** - the assistant message is committed and persisted
   as soon as the answer is known. The reveal that follows only feeds the
   renderer and keeps the turn in flight until it finishes.

3. **Failures end at this boundary** - every error is turned into a
   notification and a ``SubmitResult``; nothing propagates to the UI except
   cancellation of the submitting task. Store writes are included: the user
   is notified before the session is saved, and a failed save is reported
   rather than raised.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.client.answer_client import AnswerServiceClient
from src.client.answers import FALLBACK_ANSWER, DecodedAnswer
from src.documents.library import DocumentSet
from src.models.schemas import ChatMode, Message, Session, TurnState
from src.session.errors import (
    MalformedResponseError,
    SessionNotFoundError,
    TransportError,
)
from src.session.repository import SessionRepository
from src.session.reveal import AnswerRevealer
from src.session.timeline import MessageTimeline

logger = logging.getLogger(__name__)

SEND_FAILED_NOTICE = "Failed to send message. Please try again."
SAVE_FAILED_NOTICE = "Answer received, but the conversation could not be saved."
REVEAL_FAILED_NOTICE = "Answer received, but it could not be displayed."

RevealCallback = Callable[[str, str], None]
Notifier = Callable[[str, str], None]


def log_notifier(message: str, level: str) -> None:
    """Default notifier: route user-facing notices to the log."""
    if level == "negative":
        logger.error(message)
    elif level == "warning":
        logger.warning(message)
    else:
        logger.info(message)


@dataclass
class SubmitResult:
    """Outcome of one submit call.

    Attributes:
        sent: Whether a request was issued for this turn.
        session_id: Session the turn belonged to, if one was resolved.
        user_message: The user message, if it was appended.
        assistant_message: The committed answer, on success.
        error: Why the turn was rejected or failed.
    """

    sent: bool
    session_id: str | None = None
    user_message: Message | None = None
    assistant_message: Message | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.assistant_message is not None


class RequestOrchestrator:
    """Runs chat turns against the answering service.

    Args:
        repository: Session index the turns are recorded in.
        client: Answering-service client.
        revealer: Paces the answer for the renderer.
        documents: Document set consulted in document mode.
        user_id: Authenticated user sent with document-mode requests.
        notify: Receives (message, level) for user-visible notices.
        rollback_on_missing_output: Fail the turn when the answer has no output
            instead of committing the fallback reply.
    """

    def __init__(
        self,
        repository: SessionRepository,
        client: AnswerServiceClient,
        revealer: AnswerRevealer | None = None,
        documents: DocumentSet | None = None,
        user_id: str | None = None,
        notify: Notifier = log_notifier,
        rollback_on_missing_output: bool = False,
    ) -> None:
        self.repository = repository
        self._client = client
        self._revealer = revealer or AnswerRevealer()
        self._documents = documents
        self._user_id = user_id or (documents.user_id if documents is not None else None)
        self._notify = notify
        self._rollback_on_missing_output = rollback_on_missing_output
        self._states: dict[str, TurnState] = {}

    def state(self, session_id: str) -> TurnState:
        return self._states.get(session_id, TurnState.IDLE)

    def is_busy(self, session_id: str) -> bool:
        return self.state(session_id) is not TurnState.IDLE

    async def _request(self, prompt_text: str, mode: ChatMode) -> DecodedAnswer:
        if mode is ChatMode.DOCUMENTS:
            if self._documents is None or not self._user_id:
                raise TransportError("Document chat is not configured")
            # read at submit time so removed documents never leak into context
            return await self._client.ask_documents(
                prompt_text, self._documents.context(), self._user_id
            )
        return await self._client.ask(prompt_text)

    async def submit(
        self,
        prompt_text: str,
        *,
        mode: ChatMode = ChatMode.CHAT,
        on_user_message: Callable[[Message], None] | None = None,
        on_reveal: RevealCallback | None = None,
        notify: Notifier | None = None,
    ) -> SubmitResult:
        """Run one turn for the current session.

        Args:
            prompt_text: The user's input.
            mode: Free chat or document-grounded chat.
            on_user_message: Called with the optimistic user message before
                the request is issued.
            on_reveal: Receives (session_id, partial_answer) per reveal step.
            notify: Overrides the notifier for this call.

        Returns:
            SubmitResult describing whether the turn was sent and how it ended.
        """
        notify = notify or self._notify

        if not prompt_text or not prompt_text.strip():
            notify("Please enter a message", "warning")
            return SubmitResult(sent=False, error="Message must not be empty")

        try:
            session = self.repository.ensure_current()
        except Exception as e:
            logger.exception("Could not open a session for the turn")
            notify(SEND_FAILED_NOTICE, "negative")
            return SubmitResult(sent=False, error=repr(e))

        if self.is_busy(session.id):
            logger.info(f"Rejected submit for busy session {session.id}")
            return SubmitResult(
                sent=False,
                session_id=session.id,
                error="A message is already being answered in this session",
            )

        self._states[session.id] = TurnState.SENDING
        timeline = MessageTimeline(session)
        user_message = timeline.append_user(prompt_text)

        try:
            if on_user_message is not None:
                on_user_message(user_message)
            answer = await self._request(user_message.content, mode)
            if not answer.has_output:
                logger.warning(f"Answer for session {session.id} had no output")
                if self._rollback_on_missing_output:
                    raise MalformedResponseError("Answering service returned no output")
        except TransportError as e:
            self._states[session.id] = TurnState.FAILED
            notify(SEND_FAILED_NOTICE, "negative")
            self._fail(session, timeline, user_message, reason=str(e))
            return SubmitResult(
                sent=True, session_id=session.id, user_message=user_message, error=str(e)
            )
        except asyncio.CancelledError:
            self._fail(session, timeline, user_message, reason="cancelled")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during turn in session {session.id}")
            notify(SEND_FAILED_NOTICE, "negative")
            self._fail(session, timeline, user_message, reason=repr(e))
            return SubmitResult(
                sent=True, session_id=session.id, user_message=user_message, error=repr(e)
            )

        assistant_message: Message | None = None
        error: str | None = None
        try:
            self._states[session.id] = TurnState.SUCCEEDED
            assistant_message = timeline.append_assistant(answer.text(FALLBACK_ANSWER))
            error = self._persist(session)
            if error is not None:
                notify(SAVE_FAILED_NOTICE, "warning")
            if on_reveal is not None:
                async for partial in self._revealer.reveal(assistant_message.content):
                    on_reveal(session.id, partial)
        except Exception as e:
            # the answer stays committed; only its presentation failed
            logger.exception(f"Reveal failed in session {session.id}")
            notify(REVEAL_FAILED_NOTICE, "warning")
            error = repr(e)
        finally:
            self._states.pop(session.id, None)

        return SubmitResult(
            sent=True,
            session_id=session.id,
            user_message=user_message,
            assistant_message=assistant_message,
            error=error,
        )

    def _fail(
        self,
        session: Session,
        timeline: MessageTimeline,
        user_message: Message,
        *,
        reason: str,
    ) -> None:
        logger.warning(f"Turn failed in session {session.id}: {reason}")
        timeline.rollback_last_user(user_message.id)
        self._states.pop(session.id, None)
        self._persist(session)

    def _persist(self, session: Session) -> str | None:
        """Save the session; returns why the save failed, or None."""
        # a session deleted mid-turn must not be resurrected by the save
        try:
            self.repository.get(session.id)
        except SessionNotFoundError:
            logger.info(f"Session {session.id} was deleted during its turn")
            return None
        try:
            self.repository.save(session)
        except Exception as e:
            logger.exception(f"Failed to save session {session.id}")
            return repr(e)
        return None
