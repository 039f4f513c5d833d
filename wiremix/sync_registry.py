"""Tracking of pending core syncs to detect when initial state is complete."""

from __future__ import annotations

from typing import Any


class SyncRegistry:
    """Tracks pending syncs until all have completed for the first time."""

    def __init__(self) -> None:
        self._pending: set[int] = set()
        self._done = False

    def sync(self, core: Any) -> None:
        """Register a pending sync on ``core``.

        ``core.sync(0)`` must return the sequence number of the sync and may
        raise OSError on failure, in which case nothing is registered.
        """
        if self._done:
            return
        try:
            seq = core.sync(0)
        except OSError:
            return
        self._pending.add(seq)

    def done(self, seq: int) -> bool:
        """Mark a sync as done; True when all are done for the first time."""
        if self._done:
            return False
        self._pending.discard(seq)
        if not self._pending:
            self._done = True
        return not self._pending