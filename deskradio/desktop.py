"""
Desktop - Application state orchestrator.

Owns the window registry, the draggable panels, the station poller, the
elapsed clock, the playback controller and the request browser, and exposes
the user actions that mutate them. Presentation reads a DesktopView and
never mutates state directly.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import POLL_INTERVAL, TICK_INTERVAL, PANELS, PRIMARY_PANEL, THEMES, DEFAULT_THEME
from .models import PanelState, StationSnapshot, PlaybackIntent
from .handlers import PointerCapture, DraggablePanel
from .managers import Scheduler, Timer, WindowRegistry, StationPoller, ElapsedClock, RequestBrowser
from .controllers import PlaybackController

logger = logging.getLogger(__name__)

REQUESTS_PANEL = 'requests'


@dataclass
class DesktopView:
    """Everything needed to render one frame."""
    panels: List[PanelState]  # Open windows, bottom to top
    snapshot: Optional[StationSnapshot]
    loading: bool
    elapsed: int
    duration: int
    progress: float
    intent: PlaybackIntent
    theme: str
    dragging: Optional[str] = None
    requests: Optional[RequestBrowser] = None
    stream_error: Optional[str] = None
    open_flags: Dict[str, bool] = field(default_factory=dict)


class Desktop:
    """Composes the core components and wires user actions to them."""

    def __init__(self, api, audio, scheduler: Scheduler,
                 panels: Optional[dict] = None,
                 poll_interval: float = POLL_INTERVAL,
                 tick_interval: float = TICK_INTERVAL):
        """
        Args:
            api: Station client (now_playing, requestable_songs, submit_request)
            audio: Audio resource handed to the PlaybackController
            scheduler: Loop driving timers and background completions
            panels: Window table (defaults to config.PANELS)
            poll_interval: Seconds between station polls
            tick_interval: Seconds per elapsed-clock tick
        """
        self.scheduler = scheduler
        self.tick_interval = tick_interval
        self.theme = DEFAULT_THEME

        self.playback = PlaybackController(audio, scheduler)
        self.windows = WindowRegistry(
            PANELS if panels is None else panels,
            primary=PRIMARY_PANEL,
            on_primary_closed=self.playback.stop,
        )
        self.capture = PointerCapture()
        self.panels: Dict[str, DraggablePanel] = {
            name: DraggablePanel(
                name, self.windows, self.capture,
                on_focus=self.focus_window,
                on_close=self.close_window,
            )
            for name in self.windows.names
        }
        self.clock = ElapsedClock()
        self.poller = StationPoller(api, scheduler, poll_interval, on_snapshot=self._on_snapshot)
        self.requests = RequestBrowser(api, scheduler)

        self._tick_timer: Optional[Timer] = None
        self.running = False

    # ============================================
    # LIFECYCLE
    # ============================================

    def start(self):
        """Begin polling and ticking."""
        if self.running:
            return
        self.running = True
        self.poller.start()
        self._tick_timer = self.scheduler.call_every(self.tick_interval, self._tick)
        if REQUESTS_PANEL in self.windows and self.windows.is_open(REQUESTS_PANEL):
            self.requests.load()
        logger.info('Desktop started')

    def teardown(self):
        """Stop all timers and background work and release the stream."""
        if not self.running:
            return
        self.running = False
        self.poller.stop()
        if self._tick_timer is not None:
            self._tick_timer.cancel()
            self._tick_timer = None
        self.requests.cancel()
        for panel in self.panels.values():
            panel.dispose()
        self.playback.release()
        logger.info('Desktop torn down')

    # ============================================
    # WINDOW ACTIONS
    # ============================================

    def toggle_window(self, name: str) -> bool:
        """Sidebar button: open or close a window. Returns new open state."""
        if self.windows.is_open(name):
            self.panels[name].dispose()
        is_open = self.windows.toggle(name)
        if is_open:
            self._on_window_opened(name)
        return is_open

    def close_window(self, name: str):
        """Close button on the window itself."""
        if self.windows.is_open(name):
            self.toggle_window(name)

    def focus_window(self, name: str) -> bool:
        return self.windows.focus(name)

    def _on_window_opened(self, name: str):
        if name == PRIMARY_PANEL:
            if self.clock.resync(self.poller.snapshot):
                logger.debug(f'Player opened, clock at {self.clock.elapsed}s')
        elif name == REQUESTS_PANEL:
            self.requests.load()

    def panel_at(self, pos: Tuple[int, int]) -> Optional[str]:
        """Topmost open window under the pointer."""
        for state in reversed(self.windows.stacking_order()):
            if self.panels[state.name].contains(pos):
                return state.name
        return None

    # ============================================
    # POINTER
    # ============================================

    def pointer_down(self, pos: Tuple[int, int]) -> Optional[str]:
        """Route a press to the topmost window under it. Returns its name."""
        name = self.panel_at(pos)
        if name is not None:
            self.panels[name].on_pointer_down(pos)
        return name

    def pointer_move(self, pos: Tuple[int, int]) -> bool:
        return self.capture.dispatch_move(pos)

    def pointer_up(self, pos: Tuple[int, int]) -> bool:
        return self.capture.dispatch_up(pos)

    @property
    def dragging(self) -> Optional[str]:
        owner = self.capture.owner
        return owner.panel.name if owner is not None else None

    # ============================================
    # PLAYBACK & THEME
    # ============================================

    def toggle_play(self):
        self.playback.toggle_play()

    def toggle_mute(self):
        self.playback.toggle_mute()

    def toggle_theme(self) -> str:
        order = list(THEMES)
        self.theme = order[(order.index(self.theme) + 1) % len(order)]
        logger.info(f'Theme: {self.theme}')
        return self.theme

    # ============================================
    # REQUESTS WINDOW
    # ============================================

    def type_text(self, text: str):
        self.requests.set_query(self.requests.query + text)

    def erase_text(self):
        self.requests.set_query(self.requests.query[:-1])

    def request_song(self, request_id: str) -> bool:
        return self.requests.submit(request_id)

    # ============================================
    # STATE
    # ============================================

    def _on_snapshot(self, snapshot: StationSnapshot):
        self.clock.observe(snapshot)

    def _tick(self):
        self.clock.tick(self.playback.playing)
        self.playback.retry_if_stalled()

    @property
    def snapshot(self) -> Optional[StationSnapshot]:
        return self.poller.snapshot

    @property
    def loading(self) -> bool:
        return self.poller.loading

    @property
    def elapsed(self) -> int:
        return self.clock.elapsed

    @property
    def progress_percentage(self) -> float:
        return self.clock.progress_percentage

    def view(self) -> DesktopView:
        return DesktopView(
            panels=self.windows.stacking_order(),
            snapshot=self.poller.snapshot,
            loading=self.poller.loading,
            elapsed=self.clock.elapsed,
            duration=self.clock.duration,
            progress=self.clock.progress_percentage,
            intent=PlaybackIntent(self.playback.playing, self.playback.muted),
            theme=self.theme,
            dragging=self.dragging,
            requests=self.requests,
            stream_error=self.playback.last_error,
            open_flags={name: self.windows.is_open(name) for name in self.windows.names},
        )
