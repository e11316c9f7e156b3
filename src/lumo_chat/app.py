"""Main Textual application for chatting with the Lumo backend."""

from __future__ import annotations

import logging
import sys
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Button, Footer, Header, Input

from .config import load_config
from .controller import MessageExchangeController
from .events.bus import EXCHANGE_NOTICE, EXCHANGE_STATE_CHANGED, VIEW_INVALIDATED, Event, EventBus
from .exceptions import NetworkError
from .gateway import ConversationGateway
from .logging_utils import configure_logging
from .managers import ThemeManager
from .modes import MODE_ORDER, label_for
from .screens import conversation_picker, mode_picker
from .state import IN_FLIGHT_STATES, ExchangeState
from .view_cache import CONVERSATIONS_KEY, ConversationViewCache, messages_key
from .widgets.activity_bar import ActivityBar
from .widgets.conversation import ConversationView
from .widgets.input_box import InputBox
from .widgets.message import MessageBubble
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)


class LumoChatApp(App[None]):
    """Terminal chat client rendering server-held conversations."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
        padding: 0 1;
    }

    #conversation {
        height: 1fr;
        padding: 1 0;
    }

    InputBox {
        padding-top: 1;
    }
    """

    DEFAULT_ACTION_DESCRIPTIONS: dict[str, str] = {
        "send_message": "Send",
        "new_conversation": "New chat",
        "clear_conversation": "Clear",
        "toggle_theme": "Theme",
        "cycle_mode": "Next mode",
        "pick_mode": "Mode",
        "open_conversation": "Open",
        "copy_last_message": "Copy last",
        "quit": "Quit",
    }

    def __init__(
        self,
        config: dict[str, dict[str, Any]] | None = None,
        gateway: ConversationGateway | None = None,
        theme_manager: ThemeManager | None = None,
    ) -> None:
        self.config = config or load_config()
        configure_logging(self.config["logging"])
        LOGGER.info(
            "app.python",
            extra={
                "event": "app.python",
                "executable": sys.executable,
                "version": sys.version.split()[0],
            },
        )

        server_cfg = self.config["server"]
        chat_cfg = self.config["chat"]
        self.gateway = gateway or ConversationGateway(
            host=str(server_cfg["host"]),
            api_prefix=str(server_cfg["api_prefix"]),
            timeout=int(server_cfg["timeout"]),
        )
        self.event_bus = EventBus()
        self.view_cache = ConversationViewCache(self.gateway, self.event_bus)
        self.controller = MessageExchangeController(
            self.gateway,
            self.view_cache,
            mode=str(chat_cfg["default_mode"]),
            event_bus=self.event_bus,
            title_max_length=int(chat_cfg["title_max_length"]),
        )
        self.theme_manager = theme_manager or ThemeManager(self.config)
        self._conversation_title = ""
        self._binding_specs = self._binding_specs_from_config(self.config)
        super().__init__()

        self.event_bus.subscribe(VIEW_INVALIDATED, self._on_view_invalidated)
        self.event_bus.subscribe(EXCHANGE_STATE_CHANGED, self._on_exchange_state_changed)
        self.event_bus.subscribe(EXCHANGE_NOTICE, self._on_exchange_notice)

    @classmethod
    def _binding_specs_from_config(
        cls, config: dict[str, dict[str, Any]]
    ) -> list[Binding]:
        keybinds = config.get("keybinds", {})
        bindings: list[Binding] = []
        for action_name, description in cls.DEFAULT_ACTION_DESCRIPTIONS.items():
            binding_key = keybinds.get(action_name)
            if isinstance(binding_key, str) and binding_key.strip():
                bindings.append(
                    Binding(
                        key=binding_key.strip(),
                        action=action_name,
                        description=description,
                        show=True,
                    )
                )
        return bindings

    def compose(self) -> ComposeResult:
        ui_cfg = self.config["ui"]
        yield Header()
        with Container(id="app-root"):
            yield ConversationView(
                empty_title=str(ui_cfg["empty_state_title"]),
                empty_hint=str(ui_cfg["empty_state_hint"]),
                show_timestamps=bool(ui_cfg["show_timestamps"]),
                id="conversation",
            )
            yield ActivityBar(shortcut_hints="enter send", id="activity_bar")
            yield InputBox()
            yield StatusBar(id="status_bar")
        yield Footer()

    async def on_mount(self) -> None:
        self.title = str(self.config["app"]["title"])
        self.theme_manager.apply(self)
        for binding in self._binding_specs:
            self.bind(
                binding.key,
                binding.action,
                description=binding.description,
                show=binding.show,
            )
        await self._refresh_messages()
        self._update_status_bar()
        self.query_one("#message_input", Input).focus()

    async def on_unmount(self) -> None:
        await self.gateway.aclose()

    def _update_status_bar(self) -> None:
        self.query_one("#status_bar", StatusBar).set_status(
            state=self.controller.state.value,
            mode_label=label_for(self.controller.mode),
            conversation=self._conversation_title,
        )

    async def _refresh_messages(self) -> None:
        """Render the held conversation from the view cache."""
        conversation = self.query_one(ConversationView)
        try:
            messages = await self.controller.messages()
        except NetworkError as exc:
            LOGGER.warning(
                "app.messages.load_failed",
                extra={"event": "app.messages.load_failed", "error": str(exc)},
            )
            self.notify("Failed to load messages.", title="Error", severity="error")
            return
        await conversation.render_messages(messages)

    async def _refresh_conversation_title(self) -> None:
        conversation_id = self.controller.conversation_id
        if conversation_id is None:
            self._conversation_title = ""
            self._update_status_bar()
            return
        try:
            conversations = await self.controller.conversations()
        except NetworkError as exc:
            LOGGER.warning(
                "app.conversations.load_failed",
                extra={"event": "app.conversations.load_failed", "error": str(exc)},
            )
            return
        for conversation in conversations:
            if conversation.id == conversation_id:
                self._conversation_title = conversation.title
                break
        self._update_status_bar()

    async def _on_view_invalidated(self, event: Event) -> None:
        key = event.data.get("key")
        conversation_id = self.controller.conversation_id
        if conversation_id is not None and key == messages_key(conversation_id):
            await self._refresh_messages()
        elif key == CONVERSATIONS_KEY:
            await self._refresh_conversation_title()

    async def _on_exchange_state_changed(self, event: Event) -> None:
        new_state = event.data.get("to_state")
        busy = new_state in IN_FLIGHT_STATES
        activity = self.query_one("#activity_bar", ActivityBar)
        if new_state == ExchangeState.CLEARING:
            activity.start_activity("Clearing conversation")
        elif busy:
            activity.start_activity()
        else:
            activity.stop_activity()
        self.query_one(InputBox).set_busy(busy)
        self._update_status_bar()

    async def _on_exchange_notice(self, event: Event) -> None:
        data = event.data
        self.notify(
            str(data.get("description", "")),
            title=str(data.get("title", "")),
            severity=data.get("severity", "information"),
        )
        # Toasts dismiss themselves, so the error counts as acknowledged once shown.
        await self.controller.acknowledge_error()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "message_input":
            return
        self.controller.set_draft(event.value)
        self.query_one(InputBox).refresh_send_button(event.value, self.controller.is_busy)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            self.send_user_message()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send_button":
            self.send_user_message()

    def send_user_message(self) -> None:
        """Submit the draft without blocking the message loop."""
        self.run_worker(self._submit_draft(), group="exchange")

    async def _submit_draft(self) -> None:
        sent = await self.controller.submit()
        input_widget = self.query_one("#message_input", Input)
        if sent:
            input_widget.value = self.controller.draft
        elif self.controller.is_busy:
            self.sub_title = "Busy. Wait for current request to finish."

    async def on_message_bubble_copy_requested(
        self, message: MessageBubble.CopyRequested
    ) -> None:
        await self.controller.copy_message(message.content, self.copy_to_clipboard)

    async def on_status_bar_mode_picker_requested(
        self, _message: StatusBar.ModePickerRequested
    ) -> None:
        await self.action_pick_mode()

    async def action_send_message(self) -> None:
        self.send_user_message()

    async def action_new_conversation(self) -> None:
        if not await self.controller.new_conversation():
            self.sub_title = "New chat is available only when idle."
            return
        self._conversation_title = ""
        await self._refresh_messages()
        self._update_status_bar()

    async def action_clear_conversation(self) -> None:
        if self.controller.conversation_id is None:
            self.sub_title = "Nothing to clear."
            return
        if await self.controller.clear_conversation():
            self._conversation_title = ""
            await self._refresh_messages()
            self._update_status_bar()
            self.notify("Conversation cleared.", title="Cleared")

    def action_toggle_theme(self) -> None:
        self.theme_manager.toggle()
        self.theme_manager.apply(self)

    def action_cycle_mode(self) -> None:
        self.controller.cycle_mode()
        self._update_status_bar()

    async def action_pick_mode(self) -> None:
        def _on_mode_picked(index: int | None) -> None:
            if index is None:
                return
            self.controller.select_mode(MODE_ORDER[index])
            self._update_status_bar()

        self.push_screen(mode_picker(self.controller.mode), callback=_on_mode_picked)

    async def action_open_conversation(self) -> None:
        if self.controller.is_busy:
            self.sub_title = "Open is available only when idle."
            return
        try:
            conversations = await self.controller.conversations()
        except NetworkError:
            self.notify("Failed to load conversations.", title="Error", severity="error")
            return
        if not conversations:
            self.sub_title = "No stored conversations."
            return

        async def _on_conversation_picked(index: int | None) -> None:
            if index is None:
                return
            chosen = conversations[index]
            if await self.controller.open_conversation(chosen):
                self._conversation_title = chosen.title
                await self._refresh_messages()
                self._update_status_bar()

        self.push_screen(
            conversation_picker(conversations, self.controller.conversation_id),
            callback=_on_conversation_picked,
        )

    async def action_copy_last_message(self) -> None:
        await self.controller.copy_last_assistant_message(self.copy_to_clipboard)

    async def action_quit(self) -> None:
        self.exit()
