"""Top-level package for lumo-chat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import LumoChatApp
    from .config import ensure_config_dir, load_config
    from .controller import MessageExchangeController, Notice, PendingSend, SendStatus
    from .exceptions import (
        ClipboardError,
        ConfigValidationError,
        LumoChatError,
        MessageValidationError,
        NetworkError,
    )
    from .gateway import ConversationGateway
    from .models import ChatResponse, Conversation, Message
    from .modes import ChatMode, label_for
    from .state import ExchangeState, StateManager
    from .view_cache import ConversationViewCache

__all__ = [
    "ChatMode",
    "ChatResponse",
    "ClipboardError",
    "ConfigValidationError",
    "Conversation",
    "ConversationGateway",
    "ConversationViewCache",
    "ExchangeState",
    "LumoChatApp",
    "LumoChatError",
    "Message",
    "MessageExchangeController",
    "MessageValidationError",
    "NetworkError",
    "Notice",
    "PendingSend",
    "SendStatus",
    "StateManager",
    "ensure_config_dir",
    "label_for",
    "load_config",
]

_LAZY_MODULES: dict[str, str] = {
    "ChatMode": ".modes",
    "label_for": ".modes",
    "ChatResponse": ".models",
    "Conversation": ".models",
    "Message": ".models",
    "ClipboardError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "LumoChatError": ".exceptions",
    "MessageValidationError": ".exceptions",
    "NetworkError": ".exceptions",
    "ConversationGateway": ".gateway",
    "ConversationViewCache": ".view_cache",
    "ExchangeState": ".state",
    "StateManager": ".state",
    "MessageExchangeController": ".controller",
    "Notice": ".controller",
    "PendingSend": ".controller",
    "SendStatus": ".controller",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "LumoChatApp": ".app",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so the core stays importable without the UI stack."""
    module_name = _LAZY_MODULES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
