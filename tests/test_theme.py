"""Tests for the light/dark theme manager."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
import unittest

from lumo_chat.managers import ThemeManager


class _FakeApp:
    theme = ""


class ThemeManagerTests(unittest.TestCase):
    """Preference toggling, persistence and application."""

    def test_defaults_to_configured_theme(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            manager = ThemeManager(
                {"theme": {"name": "light", "persist": True}},
                settings_path=Path(temp_dir) / "theme.json",
            )
            self.assertEqual(manager.preference, "light")
            self.assertFalse(manager.is_dark)
            self.assertEqual(manager.textual_theme, "textual-light")

    def test_toggle_persists_and_reloads(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = Path(temp_dir) / "nested" / "theme.json"
            config = {"theme": {"name": "dark", "persist": True}}
            manager = ThemeManager(config, settings_path=settings)

            self.assertEqual(manager.toggle(), "light")
            self.assertEqual(json.loads(settings.read_text(encoding="utf-8")), {"theme": "light"})

            reloaded = ThemeManager(config, settings_path=settings)
            self.assertEqual(reloaded.preference, "light")

    def test_persist_disabled_writes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = Path(temp_dir) / "theme.json"
            manager = ThemeManager(
                {"theme": {"name": "dark", "persist": False}}, settings_path=settings
            )
            manager.toggle()
            self.assertFalse(settings.exists())
            self.assertEqual(manager.preference, "light")

    def test_corrupt_settings_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = Path(temp_dir) / "theme.json"
            settings.write_text("{not json", encoding="utf-8")
            with self.assertLogs("lumo_chat.managers.theme", level="WARNING"):
                manager = ThemeManager({"theme": {"name": "dark"}}, settings_path=settings)
            self.assertEqual(manager.preference, "dark")

    def test_unknown_preference_falls_back_to_dark(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            manager = ThemeManager(
                {"theme": {"name": "light", "persist": False}},
                settings_path=Path(temp_dir) / "theme.json",
            )
            self.assertEqual(manager.set_preference("neon"), "dark")

    def test_apply_sets_app_theme(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            manager = ThemeManager(
                {"theme": {"name": "dark", "persist": False}},
                settings_path=Path(temp_dir) / "theme.json",
            )
            app = _FakeApp()
            manager.apply(app)  # type: ignore[arg-type]
            self.assertEqual(app.theme, "textual-dark")


if __name__ == "__main__":
    unittest.main()
