"""Light/dark theme preference shared by the whole interface.

The preference is owned here rather than by the exchange controller: the app
injects one ``ThemeManager`` and reads or flips it in response to user input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from platformdirs import user_config_path

if TYPE_CHECKING:
    from textual.app import App

LOGGER = logging.getLogger(__name__)

TEXTUAL_THEMES: dict[str, str] = {
    "dark": "textual-dark",
    "light": "textual-light",
}


class ThemeManager:
    """Hold, persist and apply the light/dark preference."""

    def __init__(
        self,
        config: dict[str, Any],
        app_name: str = "lumochat",
        settings_path: Path | None = None,
    ) -> None:
        self.theme_config = config.get("theme", {})
        self.persist = bool(self.theme_config.get("persist", True))
        self._preference = self._coerce(self.theme_config.get("name", "dark"))
        self._settings_path = settings_path or (
            user_config_path(app_name, ensure_exists=False) / "theme_settings.json"
        )
        if self.persist:
            self._load_persisted_theme()

    @staticmethod
    def _coerce(name: Any) -> str:
        value = str(name or "").strip().lower()
        return value if value in TEXTUAL_THEMES else "dark"

    def _load_persisted_theme(self) -> None:
        try:
            if not self._settings_path.exists():
                return
            data = json.loads(self._settings_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning(
                "theme.load.failed",
                extra={"event": "theme.load.failed", "error": str(exc)},
            )
            return
        saved = data.get("theme") if isinstance(data, dict) else None
        if saved in TEXTUAL_THEMES:
            self._preference = saved

    def _persist_theme(self) -> None:
        if not self.persist:
            return
        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            self._settings_path.write_text(
                json.dumps({"theme": self._preference}, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            LOGGER.warning(
                "theme.persist.failed",
                extra={"event": "theme.persist.failed", "error": str(exc)},
            )

    @property
    def preference(self) -> str:
        """``"dark"`` or ``"light"``."""
        return self._preference

    @property
    def is_dark(self) -> bool:
        return self._preference == "dark"

    @property
    def textual_theme(self) -> str:
        return TEXTUAL_THEMES[self._preference]

    def set_preference(self, name: str) -> str:
        self._preference = self._coerce(name)
        self._persist_theme()
        LOGGER.info(
            "theme.changed",
            extra={"event": "theme.changed", "theme": self._preference},
        )
        return self._preference

    def toggle(self) -> str:
        """Flip between dark and light and return the new preference."""
        return self.set_preference("light" if self.is_dark else "dark")

    def apply(self, app: App) -> None:
        """Push the preference to a running Textual app."""
        app.theme = self.textual_theme
