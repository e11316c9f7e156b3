"""Domain exception hierarchy for the Lumo chat client."""

from __future__ import annotations


class LumoChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class MessageValidationError(LumoChatError):
    """Raised when a submission is empty after trimming."""


class NetworkError(LumoChatError):
    """Raised when a backend request fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        route: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.route = route


class ClipboardError(LumoChatError):
    """Raised when a best-effort clipboard copy fails."""


class ConfigValidationError(LumoChatError):
    """Raised when configuration cannot be validated safely."""
