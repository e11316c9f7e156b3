"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import lumo_chat


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        self.assertTrue(callable(lumo_chat.load_config))
        self.assertTrue(callable(lumo_chat.ensure_config_dir))
        self.assertTrue(callable(lumo_chat.label_for))
        self.assertIsNotNone(lumo_chat.ConversationGateway)
        self.assertIsNotNone(lumo_chat.ConversationViewCache)
        self.assertIsNotNone(lumo_chat.MessageExchangeController)
        self.assertIsNotNone(lumo_chat.ExchangeState)
        self.assertIsNotNone(lumo_chat.StateManager)
        self.assertIsNotNone(lumo_chat.NetworkError)
        self.assertIsNotNone(lumo_chat.MessageValidationError)
        self.assertIsNotNone(lumo_chat.Conversation)
        self.assertIsNotNone(lumo_chat.Message)

    def test_all_names_are_resolvable_without_ui(self) -> None:
        for name in lumo_chat.__all__:
            if name == "LumoChatApp":
                continue
            self.assertIsNotNone(getattr(lumo_chat, name), name)

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(lumo_chat, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
