"""Unit tests for individual widget classes and picker helpers."""

from __future__ import annotations

from datetime import datetime
import unittest

from lumo_chat.models import Conversation, Message

try:
    from lumo_chat.screens import conversation_picker, mode_picker
    from lumo_chat.widgets.conversation import ConversationView
    from lumo_chat.widgets.message import MessageBubble
    from lumo_chat.widgets.status_bar import StatusBar
except ModuleNotFoundError:
    ConversationView = None  # type: ignore[assignment,misc]
    MessageBubble = None  # type: ignore[assignment,misc]
    StatusBar = None  # type: ignore[assignment,misc]
    conversation_picker = None  # type: ignore[assignment]
    mode_picker = None  # type: ignore[assignment]


@unittest.skipIf(MessageBubble is None, "textual is not installed")
class MessageBubbleTests(unittest.TestCase):
    """Validate MessageBubble role handling."""

    def test_user_bubble(self) -> None:
        bubble = MessageBubble(content="hello", role="user", timestamp="09:15")
        self.assertEqual(bubble.message_content, "hello")
        self.assertEqual(bubble.role_prefix, "You")
        self.assertIn("role-user", bubble.classes)
        self.assertFalse(bubble.copyable)
        self.assertEqual(bubble.timestamp, "09:15")

    def test_assistant_bubble_is_copyable(self) -> None:
        bubble = MessageBubble(content="answer", role="assistant", message_id="m2")
        self.assertEqual(bubble.role_prefix, "Lumo")
        self.assertIn("role-assistant", bubble.classes)
        self.assertTrue(bubble.copyable)
        self.assertEqual(bubble.message_id, "m2")


@unittest.skipIf(ConversationView is None, "textual is not installed")
class ConversationViewTests(unittest.TestCase):
    """Bubbles mirror the message list."""

    def _messages(self) -> list[Message]:
        stamp = datetime(2024, 5, 1, 8, 45)
        return [
            Message(id="m1", conversation_id="c1", role="user", content="q", timestamp=stamp),
            Message(
                id="m2", conversation_id="c1", role="assistant", content="a", timestamp=stamp
            ),
        ]

    def test_build_bubbles_preserves_order_and_time(self) -> None:
        view = ConversationView()
        bubbles = view.build_bubbles(self._messages())
        self.assertEqual([b.message_id for b in bubbles], ["m1", "m2"])
        self.assertEqual([b.role for b in bubbles], ["user", "assistant"])
        self.assertEqual(bubbles[0].timestamp, "08:45")

    def test_timestamps_can_be_hidden(self) -> None:
        view = ConversationView(show_timestamps=False)
        bubbles = view.build_bubbles(self._messages())
        self.assertEqual(bubbles[1].timestamp, "")


@unittest.skipIf(StatusBar is None, "textual is not installed")
class StatusBarTests(unittest.TestCase):
    """State labels shown in the status bar."""

    def test_state_text(self) -> None:
        self.assertEqual(StatusBar.state_text("IDLE"), "● ready")
        self.assertIn("sending", StatusBar.state_text("SENDING_MESSAGE"))
        self.assertIn("creating", StatusBar.state_text("CREATING_CONVERSATION"))
        self.assertIn("clearing", StatusBar.state_text("CLEARING"))
        self.assertEqual(StatusBar.state_text("UNKNOWN"), "unknown")


@unittest.skipIf(mode_picker is None, "textual is not installed")
class PickerTests(unittest.TestCase):
    """Picker helpers build labelled option lists."""

    def test_mode_picker_highlights_current_mode(self) -> None:
        picker = mode_picker("calculation")
        self.assertEqual(
            picker.options, ["Chat", "Image Generation", "Calculator", "Study"]
        )
        self.assertEqual(picker._highlighted, 2)
        self.assertEqual(mode_picker("custom")._highlighted, 0)

    def test_conversation_picker_labels(self) -> None:
        conversations = [
            Conversation(id="c1", mode="study", title="Entropy"),
            Conversation(id="c2", mode="image", title=""),
        ]
        picker = conversation_picker(conversations, "c2")
        self.assertEqual(picker.options, ["Entropy  [Study]", "c2  [Image Generation]"])
        self.assertEqual(picker._highlighted, 1)


if __name__ == "__main__":
    unittest.main()
