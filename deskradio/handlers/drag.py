"""
Draggable Panel - A movable, focusable window surface.

The title bar is the drag handle. Pressing it starts a DragSession which
holds the pointer capture until the button is released anywhere on screen.
"""
import logging
from typing import Callable, Optional, Tuple

from ..config import TITLE_BAR_HEIGHT, CLOSE_BUTTON_SIZE
from ..managers.windows import WindowRegistry
from .pointer import PointerCapture

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
Rect = Tuple[int, int, int, int]


def rect_contains(rect: Rect, pos: Point) -> bool:
    x, y, w, h = rect
    return x <= pos[0] < x + w and y <= pos[1] < y + h


class DragSession:
    """One press-move-release gesture on a panel's handle."""

    def __init__(self, panel: 'DraggablePanel', pointer: Point, capture: PointerCapture):
        x, y = panel.position
        self.panel = panel
        self.anchor_offset = (pointer[0] - x, pointer[1] - y)
        self.active = True
        self._capture = capture
        capture.acquire(self)

    def on_move(self, pos: Point):
        if not self.active:
            return
        dx, dy = self.anchor_offset
        self.panel.move_to((pos[0] - dx, pos[1] - dy))

    def on_up(self, pos: Point):
        self.end()

    def end(self):
        """Finish the gesture and give the pointer back. Idempotent."""
        if not self.active:
            return
        self.active = False
        self._capture.release(self)
        self.panel._session_ended(self)


class DraggablePanel:
    """Pointer behaviour of one window, backed by the registry's PanelState."""

    def __init__(self, name: str, registry: WindowRegistry, capture: PointerCapture,
                 on_focus: Optional[Callable[[str], None]] = None,
                 on_close: Optional[Callable[[str], None]] = None):
        """
        Args:
            name: Window name in the registry
            registry: Holds position, size, open flag and z-index
            capture: Shared pointer capture for drag sessions
            on_focus: Focus request (defaults to registry.focus)
            on_close: Close request (defaults to registry.close)
        """
        self.name = name
        self.registry = registry
        self.capture = capture
        self.on_focus = on_focus or registry.focus
        self.on_close = on_close or registry.close
        self.session: Optional[DragSession] = None

    @property
    def state(self):
        return self.registry[self.name]

    @property
    def position(self) -> Point:
        return self.state.position

    @property
    def dragging(self) -> bool:
        return self.session is not None and self.session.active

    @property
    def rect(self) -> Rect:
        x, y = self.state.position
        w, h = self.state.size
        return (x, y, w, h)

    @property
    def handle_rect(self) -> Rect:
        x, y = self.state.position
        return (x, y, self.state.size[0], TITLE_BAR_HEIGHT)

    @property
    def close_rect(self) -> Rect:
        x, y = self.state.position
        w = self.state.size[0]
        margin = (TITLE_BAR_HEIGHT - CLOSE_BUTTON_SIZE) // 2
        return (x + w - CLOSE_BUTTON_SIZE - margin, y + margin, CLOSE_BUTTON_SIZE, CLOSE_BUTTON_SIZE)

    @property
    def content_rect(self) -> Rect:
        x, y, w, h = self.rect
        return (x, y + TITLE_BAR_HEIGHT, w, h - TITLE_BAR_HEIGHT)

    def contains(self, pos: Point) -> bool:
        return self.state.is_open and rect_contains(self.rect, pos)

    def on_pointer_down(self, pos: Point) -> bool:
        """Handle a press. Returns True if it landed on this panel."""
        if not self.contains(pos):
            return False

        if rect_contains(self.close_rect, pos):
            logger.debug(f'Close button: {self.name}')
            self.close()
            return True

        if rect_contains(self.handle_rect, pos):
            self.session = DragSession(self, pos, self.capture)
            logger.debug(f'Drag start: {self.name}, anchor={self.session.anchor_offset}')

        self.on_focus(self.name)
        return True

    def on_pointer_move(self, pos: Point):
        """Follow the pointer while dragging, otherwise ignore."""
        if self.dragging:
            self.session.on_move(pos)

    def on_pointer_up(self, pos: Point):
        if self.session is not None:
            self.session.on_up(pos)

    def move_to(self, position: Point):
        self.registry.move(self.name, position)

    def close(self):
        """Close this window (stops playback if it is the primary one)."""
        self.dispose()
        self.on_close(self.name)

    def dispose(self):
        """End any drag in progress and release the pointer."""
        if self.session is not None:
            self.session.end()

    def _session_ended(self, session: DragSession):
        if self.session is session:
            logger.debug(f'Drag end: {self.name} at {self.position}')
            self.session = None
