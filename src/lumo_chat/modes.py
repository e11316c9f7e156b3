"""Chat mode identifiers and their display labels."""

from __future__ import annotations

from enum import Enum


class ChatMode(str, Enum):
    """Backend behaviours a conversation can be tagged with."""

    DEFAULT = "default"
    IMAGE = "image"
    CALCULATION = "calculation"
    STUDY = "study"


DEFAULT_MODE = ChatMode.DEFAULT

MODE_LABELS: dict[str, str] = {
    ChatMode.DEFAULT.value: "Chat",
    ChatMode.IMAGE.value: "Image Generation",
    ChatMode.CALCULATION.value: "Calculator",
    ChatMode.STUDY.value: "Study",
}

MODE_ORDER: tuple[str, ...] = tuple(mode.value for mode in ChatMode)


def _mode_value(mode: str | ChatMode) -> str:
    if isinstance(mode, ChatMode):
        return mode.value
    return str(mode).strip().lower()


def label_for(mode: str | ChatMode) -> str:
    """Return the label for ``mode``; unknown values get the default label."""
    return MODE_LABELS.get(_mode_value(mode), MODE_LABELS[DEFAULT_MODE.value])


def is_known_mode(mode: str | ChatMode) -> bool:
    return _mode_value(mode) in MODE_LABELS


def normalize_mode(mode: str | ChatMode | None) -> str:
    """Return a known mode value, falling back to ``default``."""
    if mode is None:
        return DEFAULT_MODE.value
    value = _mode_value(mode)
    return value if value in MODE_LABELS else DEFAULT_MODE.value


def next_mode(mode: str | ChatMode) -> str:
    """Return the mode after ``mode`` in display order, wrapping around."""
    current = normalize_mode(mode)
    index = MODE_ORDER.index(current)
    return MODE_ORDER[(index + 1) % len(MODE_ORDER)]
