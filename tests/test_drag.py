"""
Tests for draggable panels and pointer capture.
"""
from deskradio.config import TITLE_BAR_HEIGHT
from deskradio.handlers import PointerCapture, DraggablePanel
from deskradio.managers.windows import WindowRegistry


PANELS = {
    'player': {'title': 'Radio Player', 'open': True, 'z_index': 10,
               'position': (100, 80), 'size': (320, 384)},
    'history': {'title': 'Song History', 'open': True, 'z_index': 9,
                'position': (200, 200), 'size': (384, 384)},
}


def make_panels(on_primary_closed=None):
    registry = WindowRegistry(PANELS, on_primary_closed=on_primary_closed)
    capture = PointerCapture()
    panels = {name: DraggablePanel(name, registry, capture) for name in registry.names}
    return registry, capture, panels


class TestDragSession:
    """Tests for press-move-release on the title bar."""

    def test_handle_press_starts_drag(self):
        """Pressing the title bar starts a session with the anchor offset."""
        registry, capture, panels = make_panels()
        player = panels['player']

        assert player.on_pointer_down((130, 90)) is True
        assert player.dragging
        assert player.session.anchor_offset == (30, 10)
        assert capture.owner is player.session

    def test_move_keeps_anchor_offset(self):
        """The grabbed point stays under the pointer."""
        registry, capture, panels = make_panels()
        panels['player'].on_pointer_down((130, 90))

        capture.dispatch_move((400, 300))

        assert registry['player'].position == (370, 290)

    def test_move_is_not_clamped(self):
        """A window may be dragged partly off screen."""
        registry, capture, panels = make_panels()
        panels['player'].on_pointer_down((130, 90))

        capture.dispatch_move((0, 0))

        assert registry['player'].position == (-30, -10)

    def test_release_ends_session(self):
        """Releasing anywhere ends the drag and frees the capture."""
        registry, capture, panels = make_panels()
        player = panels['player']
        player.on_pointer_down((130, 90))

        capture.dispatch_up((900, 700))

        assert not player.dragging
        assert player.session is None
        assert not capture.captured

    def test_moves_after_release_ignored(self):
        """Once released the window no longer follows the pointer."""
        registry, capture, panels = make_panels()
        player = panels['player']
        player.on_pointer_down((130, 90))
        capture.dispatch_move((200, 200))
        capture.dispatch_up((200, 200))

        assert capture.dispatch_move((500, 500)) is False
        player.on_pointer_move((500, 500))

        assert registry['player'].position == (170, 190)

    def test_move_without_session_ignored(self):
        """Pointer motion with no drag in progress changes nothing."""
        registry, capture, panels = make_panels()
        panels['player'].on_pointer_move((500, 500))

        assert registry['player'].position == (100, 80)

    def test_dispose_releases_capture(self):
        """Disposing a panel mid-drag ends the session."""
        registry, capture, panels = make_panels()
        player = panels['player']
        player.on_pointer_down((130, 90))

        player.dispose()

        assert not player.dragging
        assert not capture.captured

    def test_new_session_ends_previous(self):
        """A second panel taking the capture ends the first one's drag."""
        registry, capture, panels = make_panels()
        panels['player'].on_pointer_down((130, 90))
        panels['history'].on_pointer_down((450, 210))

        assert not panels['player'].dragging
        assert panels['history'].dragging
        assert capture.owner is panels['history'].session


class TestFocusAndClose:
    """Tests for presses that do not drag."""

    def test_handle_press_focuses(self):
        """Pressing a lower window's title bar raises it."""
        registry, capture, panels = make_panels()
        panels['history'].on_pointer_down((450, 210))

        assert registry.topmost() == 'history'

    def test_body_press_focuses_without_drag(self):
        """Pressing the content area raises the window but does not drag."""
        registry, capture, panels = make_panels()
        history = panels['history']

        history.on_pointer_down((250, 200 + TITLE_BAR_HEIGHT + 50))

        assert registry.topmost() == 'history'
        assert not history.dragging

    def test_press_outside_not_handled(self):
        """A press outside the window is not claimed."""
        registry, capture, panels = make_panels()

        assert panels['player'].on_pointer_down((5, 5)) is False

    def test_closed_window_ignores_press(self):
        """A closed window does not react to presses at its old place."""
        registry, capture, panels = make_panels()
        registry.toggle('history')

        assert panels['history'].on_pointer_down((450, 210)) is False

    def test_close_button_closes_primary(self):
        """The close button on the player closes it and stops playback."""
        stopped = []
        registry, capture, panels = make_panels(on_primary_closed=lambda: stopped.append(True))
        player = panels['player']
        x, y, w, h = player.close_rect

        player.on_pointer_down((x + w // 2, y + h // 2))

        assert not registry.is_open('player')
        assert stopped == [True]
        assert not player.dragging
