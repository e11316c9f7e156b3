"""Scrollable conversation view widget."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

from ..models import format_message_time
from .message import MessageBubble

if TYPE_CHECKING:
    from ..models import Message


class EmptyState(Vertical):
    """Placeholder shown before a conversation has any messages."""

    DEFAULT_CSS = """
    EmptyState {
        height: 1fr;
        align: center middle;
    }
    EmptyState > Static {
        width: auto;
        content-align: center middle;
    }
    EmptyState > #empty-title {
        text-style: bold;
    }
    EmptyState > #empty-hint {
        color: $text-muted;
    }
    """

    def __init__(self, title: str, hint: str) -> None:
        super().__init__()
        self._title = title
        self._hint = hint

    def compose(self):  # type: ignore[override]
        yield Static(self._title, id="empty-title")
        yield Static(self._hint, id="empty-hint")


class ConversationView(VerticalScroll):
    """A scrollable container that mirrors the cached message list."""

    def __init__(
        self,
        empty_title: str = "Start a Conversation",
        empty_hint: str = "Type your message to start chat with Lumo",
        show_timestamps: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.empty_title = empty_title
        self.empty_hint = empty_hint
        self.show_timestamps = show_timestamps
        self.rendered_ids: list[str] = []

    def build_bubbles(self, messages: Sequence[Message]) -> list[MessageBubble]:
        """Create one bubble per message, in list order."""
        bubbles: list[MessageBubble] = []
        for message in messages:
            bubble = MessageBubble(
                content=message.content,
                role=message.role,
                timestamp=format_message_time(message.timestamp) if self.show_timestamps else "",
                message_id=message.id,
            )
            bubble.add_class(f"message-{message.role}")
            bubbles.append(bubble)
        return bubbles

    async def render_messages(self, messages: Sequence[Message]) -> None:
        """Replace the rendered bubbles with ``messages``."""
        await self.remove_children()
        self.rendered_ids = [message.id for message in messages]
        if not messages:
            await self.mount(EmptyState(self.empty_title, self.empty_hint))
            return
        await self.mount_all(self.build_bubbles(messages))
        self.scroll_end(animate=False)
