"""Status bar widget for mode, conversation and exchange state."""

from __future__ import annotations

from textual import events
from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import Label, Static

_STATE_TEXT: dict[str, str] = {
    "IDLE": "● ready",
    "CREATING_CONVERSATION": "◐ creating conversation",
    "SENDING_MESSAGE": "◐ sending",
    "CLEARING": "◐ clearing",
    "ERROR": "✖ error",
}


class StatusBar(Static):
    """Render compact runtime status information.

    Segments (left to right):
        ● ready  |  Mode: Study  |  Explain entropy - Oct 18
    """

    DEFAULT_CSS = """
    StatusBar {
        layout: horizontal;
        height: auto;
    }
    StatusBar Label {
        margin-right: 1;
    }
    StatusBar #status_conversation {
        color: $text-muted;
    }
    """

    class ModePickerRequested(Message):
        """Posted when the status bar is clicked."""

    def compose(self) -> ComposeResult:
        yield Label(_STATE_TEXT["IDLE"], id="status_state")
        yield Label("|", id="status_sep1")
        yield Label("Mode: Chat", id="status_mode")
        yield Label("|", id="status_sep2")
        yield Label("New conversation", id="status_conversation")

    @staticmethod
    def state_text(state: str) -> str:
        return _STATE_TEXT.get(state, state.lower())

    def set_status(self, *, state: str, mode_label: str, conversation: str) -> None:
        """Update all status segment labels."""
        self.query_one("#status_state", Label).update(self.state_text(state))
        self.query_one("#status_mode", Label).update(f"Mode: {mode_label}")
        self.query_one("#status_conversation", Label).update(
            conversation or "New conversation"
        )

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(self.ModePickerRequested())
