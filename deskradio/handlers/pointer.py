"""
Pointer Capture - Routes pointer move/up events to at most one listener.

A listener owns the capture between acquire() and release(); the app only
forwards motion and button-up events while someone holds it.
"""
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class PointerCapture:
    """Single-pointer capture slot."""

    def __init__(self):
        self._owner = None

    @property
    def owner(self):
        return self._owner

    @property
    def captured(self) -> bool:
        return self._owner is not None

    def acquire(self, owner):
        """Give the capture to owner, ending any previous holder's grip."""
        if self._owner is owner:
            return
        if self._owner is not None:
            logger.debug('Pointer capture taken over')
            previous = self._owner
            self._owner = None
            previous.end()
        self._owner = owner

    def release(self, owner):
        """Drop the capture if owner holds it."""
        if self._owner is owner:
            self._owner = None

    def dispatch_move(self, pos: Tuple[int, int]) -> bool:
        """Forward a pointer move. Returns False if nobody listens."""
        if self._owner is None:
            return False
        self._owner.on_move(pos)
        return True

    def dispatch_up(self, pos: Tuple[int, int]) -> bool:
        """Forward a pointer release. Returns False if nobody listens."""
        owner: Optional[object] = self._owner
        if owner is None:
            return False
        owner.on_up(pos)
        return True
