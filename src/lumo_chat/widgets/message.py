"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message as TextualMessage
from textual.widgets import Button, Static


class MessageBubble(Vertical):
    """Render one persisted chat message with its role, time and copy action."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        margin-bottom: 1;
    }
    MessageBubble.role-user {
        align-horizontal: right;
    }
    MessageBubble > #content-block {
        height: auto;
        max-width: 70%;
        padding: 0 1;
        border: round $panel;
    }
    MessageBubble.role-user > #content-block {
        border: round $primary;
    }
    MessageBubble > #meta-row {
        height: auto;
    }
    MessageBubble #meta-time {
        width: auto;
        color: $text-muted;
        margin-right: 1;
    }
    MessageBubble #copy-button {
        min-width: 8;
        height: 1;
        border: none;
    }
    """

    class CopyRequested(TextualMessage):
        """Posted when the copy button of an assistant bubble is pressed."""

        def __init__(self, content: str) -> None:
            super().__init__()
            self.content = content

    def __init__(
        self,
        content: str,
        role: str,
        timestamp: str = "",
        message_id: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.message_content = content
        self.role = role
        self.timestamp = timestamp
        self.message_id = message_id
        self.add_class(f"role-{role}")

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return "You" if self.role == "user" else "Lumo"

    @property
    def copyable(self) -> bool:
        return self.role == "assistant"

    def compose(self) -> ComposeResult:
        text = self.message_content.rstrip()
        yield Static(Markdown(text) if text else "", id="content-block")
        with Horizontal(id="meta-row"):
            yield Static(self.timestamp, id="meta-time")
            if self.copyable:
                yield Button("Copy", id="copy-button", variant="default")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "copy-button":
            event.stop()
            self.post_message(self.CopyRequested(self.message_content))
