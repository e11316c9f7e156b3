"""Message exchange state machine and lock-protected transitions."""

from __future__ import annotations

import asyncio
from enum import Enum


class ExchangeState(str, Enum):
    """Lifecycle of the pending send as seen by the interface."""

    IDLE = "IDLE"
    CREATING_CONVERSATION = "CREATING_CONVERSATION"
    SENDING_MESSAGE = "SENDING_MESSAGE"
    CLEARING = "CLEARING"
    ERROR = "ERROR"


IN_FLIGHT_STATES = frozenset(
    {
        ExchangeState.CREATING_CONVERSATION,
        ExchangeState.SENDING_MESSAGE,
        ExchangeState.CLEARING,
    }
)


class StateManager:
    """Manage state transitions with async lock semantics."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._state = ExchangeState.IDLE

    @property
    def current(self) -> ExchangeState:
        """Return the last committed state without waiting for the lock."""
        return self._state

    async def get_state(self) -> ExchangeState:
        """Return the current state under lock."""
        async with self._lock:
            return self._state

    async def transition_to(self, new_state: ExchangeState) -> ExchangeState:
        """Transition unconditionally and return the previous state."""
        async with self._lock:
            previous = self._state
            self._state = new_state
            return previous

    async def transition_if(
        self,
        expected_state: ExchangeState,
        new_state: ExchangeState,
    ) -> bool:
        """Transition only when the current state matches ``expected_state``."""
        async with self._lock:
            if self._state != expected_state:
                return False
            self._state = new_state
            return True

    async def is_idle(self) -> bool:
        """Return True when a new send may start."""
        async with self._lock:
            return self._state == ExchangeState.IDLE
