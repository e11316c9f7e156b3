"""Message exchange controller: lazy conversation creation, send, recovery."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import inspect
import logging
from typing import TYPE_CHECKING, Any, Literal

from .events.bus import EXCHANGE_NOTICE, EXCHANGE_STATE_CHANGED, EventBus
from .exceptions import ClipboardError, LumoChatError, MessageValidationError, NetworkError
from .models import TITLE_MAX_LENGTH, Message, generate_chat_title
from .modes import DEFAULT_MODE, next_mode
from .state import IN_FLIGHT_STATES, ExchangeState, StateManager
from .view_cache import messages_key

if TYPE_CHECKING:
    from .gateway import ConversationGateway
    from .models import Conversation
    from .view_cache import ConversationViewCache

LOGGER = logging.getLogger(__name__)

Copier = Callable[[str], Any]

SEND_FAILED_NOTICE = "Failed to send message. Please try again."
CLEAR_FAILED_NOTICE = "Failed to clear conversation."
COPY_FAILED_NOTICE = "Failed to copy message."
COPY_OK_NOTICE = "Message copied to clipboard."


class SendStatus(str, Enum):
    """Progress of a single pending send."""

    IDLE = "idle"
    CREATING_CONVERSATION = "creating-conversation"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PendingSend:
    """The unit of work between a submission and its persisted message pair.

    ``conversation_created`` together with a ``FAILED`` status marks the
    "created but not sent" outcome; the created conversation stays held so a
    retry sends against it instead of creating another one.
    """

    text: str
    conversation_id: str | None
    mode: str
    status: SendStatus = SendStatus.IDLE
    conversation_created: bool = False
    error: LumoChatError | None = None


@dataclass(frozen=True)
class Notice:
    """A transient, dismissible message for the user."""

    title: str
    description: str
    severity: Literal["information", "warning", "error"] = "information"


class MessageExchangeController:
    """Own the selected conversation and drive the send state machine.

    Only one send runs at a time: ``submit`` claims the ``IDLE`` state with a
    compare-and-set, so a submit issued while another is in flight is a no-op.
    Failures move the machine to ``ERROR`` and keep both the held conversation
    id and the draft intact until :meth:`acknowledge_error`.
    """

    def __init__(
        self,
        gateway: ConversationGateway,
        cache: ConversationViewCache,
        *,
        mode: str = DEFAULT_MODE.value,
        event_bus: EventBus | None = None,
        state: StateManager | None = None,
        title_max_length: int = TITLE_MAX_LENGTH,
    ) -> None:
        self._gateway = gateway
        self._cache = cache
        self.event_bus = event_bus or EventBus()
        self._state = state or StateManager()
        self.title_max_length = title_max_length
        self.mode = self._clean_mode(mode)
        self.conversation_id: str | None = None
        self.draft = ""
        self.pending: PendingSend | None = None
        self.last_error: LumoChatError | None = None
        self.last_notice: Notice | None = None

    @staticmethod
    def _clean_mode(mode: str) -> str:
        cleaned = str(mode or "").strip()
        return cleaned or DEFAULT_MODE.value

    @property
    def state(self) -> ExchangeState:
        return self._state.current

    @property
    def is_busy(self) -> bool:
        return self._state.current in IN_FLIGHT_STATES

    def set_draft(self, text: str) -> None:
        self.draft = text

    def select_mode(self, mode: str) -> str:
        """Select the mode used for the next send; any value is accepted."""
        self.mode = self._clean_mode(mode)
        return self.mode

    def cycle_mode(self) -> str:
        return self.select_mode(next_mode(self.mode))

    @staticmethod
    def validate_submission(text: str) -> str:
        """Return the trimmed text or raise :class:`MessageValidationError`."""
        trimmed = text.strip()
        if not trimmed:
            raise MessageValidationError("Cannot send an empty message.")
        return trimmed

    async def submit(self, text: str | None = None) -> bool:
        """Send ``text`` (or the current draft) and report whether it was persisted.

        Returns ``False`` without touching any state for empty input or when
        the controller is not idle.
        """
        candidate = self.draft if text is None else text
        try:
            trimmed = self.validate_submission(candidate)
        except MessageValidationError:
            LOGGER.debug(
                "exchange.submit.rejected",
                extra={"event": "exchange.submit.rejected", "reason": "empty"},
            )
            return False

        creating = self.conversation_id is None
        first_state = (
            ExchangeState.CREATING_CONVERSATION if creating else ExchangeState.SENDING_MESSAGE
        )
        if not await self._state.transition_if(ExchangeState.IDLE, first_state):
            LOGGER.debug(
                "exchange.submit.rejected",
                extra={
                    "event": "exchange.submit.rejected",
                    "reason": "busy",
                    "state": self._state.current.value,
                },
            )
            return False

        self.draft = trimmed
        pending = PendingSend(
            text=trimmed, conversation_id=self.conversation_id, mode=self.mode
        )
        self.pending = pending
        self.last_error = None
        await self._announce(ExchangeState.IDLE, first_state)

        try:
            if pending.conversation_id is None:
                pending.status = SendStatus.CREATING_CONVERSATION
                conversation = await self._gateway.create_conversation(
                    pending.mode,
                    generate_chat_title(trimmed, max_length=self.title_max_length),
                )
                self.conversation_id = conversation.id
                pending.conversation_id = conversation.id
                pending.conversation_created = True
                await self._move(ExchangeState.SENDING_MESSAGE)

            pending.status = SendStatus.SENDING
            response = await self._gateway.send_message(
                pending.conversation_id, trimmed, pending.mode
            )
        except NetworkError as exc:
            pending.status = SendStatus.FAILED
            pending.error = exc
            self.last_error = exc
            LOGGER.warning(
                "exchange.send.failed",
                extra={
                    "event": "exchange.send.failed",
                    "conversation_id": pending.conversation_id,
                    "conversation_created": pending.conversation_created,
                    "status_code": exc.status_code,
                    "error": str(exc),
                },
            )
            await self._move(ExchangeState.ERROR)
            await self._notify(Notice("Error", SEND_FAILED_NOTICE, "error"))
            return False
        except asyncio.CancelledError:
            pending.status = SendStatus.FAILED
            await self._move(ExchangeState.IDLE)
            raise
        except Exception as exc:  # noqa: BLE001 - injected gateways may raise anything.
            error = LumoChatError(str(exc) or type(exc).__name__)
            pending.status = SendStatus.FAILED
            pending.error = error
            self.last_error = error
            LOGGER.error(
                "exchange.send.crashed",
                exc_info=exc,
                extra={
                    "event": "exchange.send.crashed",
                    "conversation_id": pending.conversation_id,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            await self._move(ExchangeState.ERROR)
            await self._notify(Notice("Error", SEND_FAILED_NOTICE, "error"))
            return False

        pending.status = SendStatus.SUCCEEDED
        self.draft = ""
        LOGGER.info(
            "exchange.send.succeeded",
            extra={
                "event": "exchange.send.succeeded",
                "conversation_id": pending.conversation_id,
                "user_message_id": response.user_message.id,
                "ai_message_id": response.ai_message.id,
            },
        )
        await self._cache.invalidate_messages(pending.conversation_id)
        await self._cache.invalidate_conversations()
        await self._move(ExchangeState.IDLE)
        return True

    async def acknowledge_error(self) -> bool:
        """Dismiss the current error and return to ``IDLE``."""
        if not await self._state.transition_if(ExchangeState.ERROR, ExchangeState.IDLE):
            return False
        await self._announce(ExchangeState.ERROR, ExchangeState.IDLE)
        return True

    async def new_conversation(self) -> bool:
        """Drop the held conversation so the next submit creates one."""
        if not await self._state.is_idle():
            return False
        self.conversation_id = None
        self.pending = None
        LOGGER.info("exchange.conversation.new", extra={"event": "exchange.conversation.new"})
        return True

    async def open_conversation(self, conversation: Conversation | str) -> bool:
        """Hold an existing conversation; its mode becomes the selected mode."""
        if not await self._state.is_idle():
            return False
        if isinstance(conversation, str):
            self.conversation_id = conversation
        else:
            self.conversation_id = conversation.id
            self.select_mode(conversation.mode)
        self.pending = None
        LOGGER.info(
            "exchange.conversation.opened",
            extra={
                "event": "exchange.conversation.opened",
                "conversation_id": self.conversation_id,
            },
        )
        return True

    async def clear_conversation(self) -> bool:
        """Delete the held conversation's messages; no send may start until it settles."""
        conversation_id = self.conversation_id
        if conversation_id is None:
            return False
        if not await self._state.transition_if(ExchangeState.IDLE, ExchangeState.CLEARING):
            return False
        await self._announce(ExchangeState.IDLE, ExchangeState.CLEARING)
        try:
            await self._gateway.clear_conversation(conversation_id)
        except NetworkError as exc:
            self.last_error = exc
            await self._move(ExchangeState.IDLE)
            await self._notify(Notice("Error", CLEAR_FAILED_NOTICE, "error"))
            return False
        except BaseException:
            await self._move(ExchangeState.IDLE)
            raise

        await self._cache.invalidate_messages(conversation_id)
        await self._cache.invalidate_conversations()
        self.conversation_id = None
        self.pending = None
        await self._move(ExchangeState.IDLE)
        return True

    async def messages(self) -> list[Message]:
        """Messages of the held conversation, served by the view cache."""
        return await self._cache.read_messages(self.conversation_id)

    async def conversations(self) -> list[Conversation]:
        return await self._cache.read_conversations()

    async def copy_message(self, content: str, copier: Copier) -> bool:
        """Best-effort clipboard copy; failures only produce a notice."""
        try:
            result = copier(content)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:  # noqa: BLE001 - clipboard backends fail in many ways.
            error = ClipboardError(str(exc) or type(exc).__name__)
            self.last_error = error
            LOGGER.warning(
                "exchange.copy.failed",
                extra={"event": "exchange.copy.failed", "error": str(error)},
            )
            await self._notify(Notice("Error", COPY_FAILED_NOTICE, "error"))
            return False
        await self._notify(Notice("Copied", COPY_OK_NOTICE))
        return True

    async def copy_last_assistant_message(self, copier: Copier) -> bool:
        """Copy the newest assistant reply of the held conversation."""
        cached = None
        if self.conversation_id is not None:
            cached = self._cache.peek(messages_key(self.conversation_id))
        if cached is None:
            try:
                cached = await self.messages()
            except NetworkError as exc:
                self.last_error = exc
                await self._notify(Notice("Error", COPY_FAILED_NOTICE, "error"))
                return False
        for message in reversed(cached):
            if message.role == "assistant" and message.content.strip():
                return await self.copy_message(message.content, copier)
        await self._notify(Notice("Nothing to copy", "No assistant message available to copy."))
        return False

    async def _move(self, new_state: ExchangeState) -> None:
        previous = await self._state.transition_to(new_state)
        await self._announce(previous, new_state)

    async def _announce(self, old_state: ExchangeState, new_state: ExchangeState) -> None:
        LOGGER.info(
            "exchange.state.transition",
            extra={
                "event": "exchange.state.transition",
                "from_state": old_state.value,
                "to_state": new_state.value,
                "conversation_id": self.conversation_id,
            },
        )
        await self.event_bus.publish(
            EXCHANGE_STATE_CHANGED,
            {"from_state": old_state, "to_state": new_state},
            source="controller",
        )

    async def _notify(self, notice: Notice) -> None:
        self.last_notice = notice
        await self.event_bus.publish(
            EXCHANGE_NOTICE,
            {
                "title": notice.title,
                "description": notice.description,
                "severity": notice.severity,
            },
            source="controller",
        )
