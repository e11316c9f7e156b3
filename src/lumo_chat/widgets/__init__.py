"""Widget exports for the lumo_chat UI."""

from .activity_bar import ActivityBar
from .conversation import ConversationView, EmptyState
from .input_box import InputBox
from .message import MessageBubble
from .status_bar import StatusBar

__all__ = [
    "ActivityBar",
    "ConversationView",
    "EmptyState",
    "InputBox",
    "MessageBubble",
    "StatusBar",
]
