"""Typed payloads exchanged with the conversation backend."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .modes import DEFAULT_MODE, label_for

TITLE_MAX_LENGTH = 50

MessageRole = Literal["user", "assistant"]


class _CamelModel(BaseModel):
    """Base model reading and writing the backend's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Conversation(_CamelModel):
    """A server-assigned, mode-tagged container of messages."""

    id: str
    mode: str = DEFAULT_MODE.value
    title: str = ""
    created_at: datetime | None = None

    @property
    def mode_label(self) -> str:
        return label_for(self.mode)


class Message(_CamelModel):
    """A single persisted user or assistant message."""

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    timestamp: datetime


class ChatResponse(_CamelModel):
    """The persisted user message and the generated assistant reply."""

    user_message: Message
    ai_message: Message

    @property
    def messages(self) -> list[Message]:
        return [self.user_message, self.ai_message]


def format_message_time(timestamp: datetime) -> str:
    """Render a message timestamp as local ``HH:MM``."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime("%H:%M")


def default_conversation_title(mode: str, today: date | None = None) -> str:
    """Title used when a conversation is created without one, e.g. ``Chat - 10/18/2026``."""
    day = today or date.today()
    return f"{label_for(mode)} - {day.month}/{day.day}/{day.year}"


def generate_chat_title(
    content: str,
    today: date | None = None,
    max_length: int = TITLE_MAX_LENGTH,
) -> str:
    """Summarize the first prompt into a conversation title.

    Content longer than ``max_length`` is cut and suffixed with ``...``; the
    short date (``Oct 18``) follows after a dash.
    """
    summary = content if len(content) <= max_length else content[:max_length] + "..."
    day = today or date.today()
    return f"{summary} - {day.strftime('%b')} {day.day}"
