"""Input row containing the message field and send button."""

from __future__ import annotations

from textual.containers import Horizontal
from textual.widgets import Button, Input


class InputBox(Horizontal):
    """Input region with the message field and send button."""

    DEFAULT_CSS = """
    InputBox {
        height: auto;
    }
    InputBox > #message_input {
        width: 1fr;
    }
    """

    def compose(self):  # type: ignore[override]
        yield Input(placeholder="Type your message...", id="message_input")
        yield Button("Send", id="send_button", variant="success", disabled=True)

    def set_busy(self, busy: bool) -> None:
        """Lock the field and button while a send is in flight."""
        input_widget = self.query_one("#message_input", Input)
        input_widget.disabled = busy
        self.refresh_send_button(input_widget.value, busy)
        if not busy:
            input_widget.focus()

    def refresh_send_button(self, value: str, busy: bool = False) -> None:
        self.query_one("#send_button", Button).disabled = busy or not value.strip()
