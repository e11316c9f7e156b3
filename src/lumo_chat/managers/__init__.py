"""Manager classes holding interface-wide concerns outside the exchange core.

Available managers:
- ThemeManager: light/dark preference, persistence and application
"""

from __future__ import annotations

from .theme import ThemeManager

__all__ = ["ThemeManager"]
