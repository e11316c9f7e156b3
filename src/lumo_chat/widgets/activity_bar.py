"""Activity bar showing the typing indicator and keyboard shortcut hints."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.timer import Timer
from textual.widgets import Label, Static

_ANIMATION_FRAMES: tuple[str, ...] = (
    "·  ",
    "●  ",
    "·● ",
    " ·●",
    "  ●",
    "  ·",
)


class ActivityBar(Static):
    """Animated "Lumo is typing" indicator plus shortcut hints."""

    DEFAULT_CSS = """
    ActivityBar {
        layout: horizontal;
        height: 1;
        padding: 0 1;
    }
    ActivityBar #activity_left {
        width: 1fr;
    }
    ActivityBar #activity_right {
        width: auto;
        color: $text-muted;
    }
    """

    def __init__(self, shortcut_hints: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._shortcut_hints = shortcut_hints
        self._animation_timer: Timer | None = None
        self._running = False
        self._frame_index = 0
        self._hint = ""

    @property
    def running(self) -> bool:
        return self._running

    def compose(self) -> ComposeResult:
        yield Label("", id="activity_left")
        yield Label(self._shortcut_hints, id="activity_right")

    def start_activity(self, hint: str = "Lumo is typing") -> None:
        """Begin the animation; repeated calls while running are ignored."""
        if self._running:
            return
        self._running = True
        self._hint = hint
        self._frame_index = 0
        self._update_left()
        self._animation_timer = self.set_interval(0.15, self._advance_frame)

    def stop_activity(self) -> None:
        self._running = False
        if self._animation_timer is not None:
            self._animation_timer.stop()
            self._animation_timer = None
        self.query_one("#activity_left", Label).update("")

    def _advance_frame(self) -> None:
        if not self._running:
            return
        self._frame_index = (self._frame_index + 1) % len(_ANIMATION_FRAMES)
        self._update_left()

    def _update_left(self) -> None:
        frame = _ANIMATION_FRAMES[self._frame_index]
        self.query_one("#activity_left", Label).update(f"{frame} {self._hint}")
