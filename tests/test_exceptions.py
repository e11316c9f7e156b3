"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from lumo_chat.exceptions import (
    ClipboardError,
    ConfigValidationError,
    LumoChatError,
    MessageValidationError,
    NetworkError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(MessageValidationError, LumoChatError))
        self.assertTrue(issubclass(NetworkError, LumoChatError))
        self.assertTrue(issubclass(ClipboardError, LumoChatError))
        self.assertTrue(issubclass(ConfigValidationError, LumoChatError))

    def test_network_error_carries_status_and_route(self) -> None:
        error = NetworkError("boom", status_code=503, route="/chat/c1")
        self.assertEqual(str(error), "boom")
        self.assertEqual(error.status_code, 503)
        self.assertEqual(error.route, "/chat/c1")
        self.assertIsNone(NetworkError("offline").status_code)


if __name__ == "__main__":
    unittest.main()
