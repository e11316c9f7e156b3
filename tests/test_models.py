"""Tests for backend payload models and title helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import unittest

from pydantic import ValidationError

from lumo_chat.models import (
    ChatResponse,
    Conversation,
    Message,
    default_conversation_title,
    format_message_time,
    generate_chat_title,
)


class TitleTests(unittest.TestCase):
    """Conversation titles derived from the first prompt."""

    def test_short_prompt_is_kept_whole(self) -> None:
        title = generate_chat_title("Explain entropy", today=date(2024, 10, 18))
        self.assertEqual(title, "Explain entropy - Oct 18")

    def test_long_prompt_is_truncated_with_ellipsis(self) -> None:
        prompt = "x" * 60
        title = generate_chat_title(prompt, today=date(2024, 3, 5))
        self.assertEqual(title, "x" * 50 + "... - Mar 5")

    def test_prompt_of_exact_limit_is_not_truncated(self) -> None:
        prompt = "y" * 50
        title = generate_chat_title(prompt, today=date(2024, 3, 5))
        self.assertEqual(title, prompt + " - Mar 5")

    def test_default_title_uses_mode_label(self) -> None:
        day = date(2024, 1, 2)
        self.assertEqual(
            default_conversation_title("calculation", today=day),
            "Calculator - 1/2/2024",
        )


class PayloadTests(unittest.TestCase):
    """camelCase parsing of backend payloads."""

    def test_message_parses_camel_case(self) -> None:
        message = Message.model_validate(
            {
                "id": "m1",
                "conversationId": "c1",
                "role": "assistant",
                "content": "hello",
                "timestamp": "2024-05-01T12:00:00Z",
            }
        )
        self.assertEqual(message.conversation_id, "c1")
        self.assertEqual(message.timestamp.utcoffset(), timedelta(0))

    def test_message_rejects_unknown_role(self) -> None:
        with self.assertRaises(ValidationError):
            Message.model_validate(
                {
                    "id": "m1",
                    "conversationId": "c1",
                    "role": "system",
                    "content": "x",
                    "timestamp": "2024-05-01T12:00:00Z",
                }
            )

    def test_conversation_defaults_and_label(self) -> None:
        conversation = Conversation.model_validate({"id": "c1"})
        self.assertEqual(conversation.mode, "default")
        self.assertEqual(conversation.mode_label, "Chat")
        self.assertIsNone(conversation.created_at)

    def test_chat_response_messages(self) -> None:
        base = {"conversationId": "c1", "timestamp": "2024-05-01T12:00:00Z"}
        response = ChatResponse.model_validate(
            {
                "userMessage": {**base, "id": "m1", "role": "user", "content": "q"},
                "aiMessage": {**base, "id": "m2", "role": "assistant", "content": "a"},
            }
        )
        self.assertEqual([m.role for m in response.messages], ["user", "assistant"])

    def test_format_message_time(self) -> None:
        self.assertEqual(format_message_time(datetime(2024, 5, 1, 7, 5)), "07:05")
        aware = datetime(2024, 5, 1, 7, 5, tzinfo=timezone.utc)
        self.assertEqual(format_message_time(aware), aware.astimezone().strftime("%H:%M"))


if __name__ == "__main__":
    unittest.main()
