"""Modal pickers for chat modes and stored conversations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static

from .modes import MODE_ORDER, label_for

if TYPE_CHECKING:
    from .models import Conversation


class PickerScreen(ModalScreen[int | None]):
    """Modal list picker that dismisses with the selected index."""

    CSS = """
    PickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 60;
        max-height: 24;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #picker-title {
        padding-bottom: 1;
        text-style: bold;
    }

    #picker-help {
        padding-top: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Close", show=False)]

    def __init__(self, title: str, options: Sequence[str], highlighted: int = 0) -> None:
        super().__init__()
        self._title = title
        self._options = list(options)
        self._highlighted = highlighted

    @property
    def options(self) -> list[str]:
        return list(self._options)

    def compose(self) -> ComposeResult:
        with Container(id="picker-dialog"):
            yield Static(self._title, id="picker-title")
            yield OptionList(*self._options, id="picker-options")
            yield Static("Enter/click to select | Esc to cancel", id="picker-help")

    def on_mount(self) -> None:
        if 0 <= self._highlighted < len(self._options):
            self.query_one("#picker-options", OptionList).highlighted = self._highlighted

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        index: Any = getattr(event, "option_index", None)
        if index is None:
            index = getattr(event, "index", -1)
        try:
            selected = int(index)
        except (TypeError, ValueError):
            selected = -1
        if 0 <= selected < len(self._options):
            self.dismiss(selected)

    def action_cancel(self) -> None:
        self.dismiss(None)


def mode_picker(current_mode: str) -> PickerScreen:
    """Picker over the known modes with ``current_mode`` highlighted."""
    labels = [label_for(mode) for mode in MODE_ORDER]
    highlighted = MODE_ORDER.index(current_mode) if current_mode in MODE_ORDER else 0
    return PickerScreen("Select mode", labels, highlighted)


def conversation_picker(
    conversations: Sequence[Conversation], current_id: str | None
) -> PickerScreen:
    """Picker over stored conversations, labelled ``title [mode]``."""
    labels = [
        f"{conversation.title or conversation.id}  [{conversation.mode_label}]"
        for conversation in conversations
    ]
    highlighted = next(
        (i for i, conversation in enumerate(conversations) if conversation.id == current_id),
        0,
    )
    return PickerScreen("Open conversation", labels, highlighted)
