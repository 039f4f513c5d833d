"""Delivery of monitoring events to a handler."""

from __future__ import annotations

from typing import Any, Callable, Optional

from wiremix.event import ErrorEvent, Event, Ready, StateEvent, StateUpdate


class EventSender:
    """Passes events to a handler and stops the loop when it declines.

    ``handler`` is a callable taking an event, or an object with a
    ``handle_event`` method; it returns False when monitoring should stop,
    in which case ``quit`` is called if given.
    """

    def __init__(self, handler: Any, quit: Optional[Callable[[], None]] = None) -> None:
        handle = getattr(handler, "handle_event", handler)
        if not callable(handle):
            raise TypeError("handler must be callable or have a handle_event method")
        self._handle: Callable[[Event], bool] = handle
        self._quit = quit

    def _dispatch(self, event: Event) -> None:
        if not self._handle(event) and self._quit is not None:
            self._quit()

    def send(self, event: StateEvent) -> None:
        """Send a state change."""
        self._dispatch(StateUpdate(event))

    def send_ready(self) -> None:
        """Signal that the initial state has been sent."""
        self._dispatch(Ready())

    def send_error(self, error: str) -> None:
        """Report a monitoring error."""
        self._dispatch(ErrorEvent(error))