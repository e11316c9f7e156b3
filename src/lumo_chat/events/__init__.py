"""Publish/subscribe plumbing between the controller, cache and UI."""

from .bus import Event, EventBus

__all__ = ["EventBus", "Event"]
