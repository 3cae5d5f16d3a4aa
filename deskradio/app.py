"""
DeskRadio Application - pygame shell around the Desktop orchestrator.
"""
import os
import time
import signal
import logging
from typing import Tuple

import pygame

from .config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, SIDEBAR_WIDTH, TARGET_FPS, IDLE_FPS,
    STATION_API_URL, STATION_NAME, STREAM_URL, MOCK_MODE,
)
from .api import StationAPI, MockStationAPI
from .controllers import NullStream
from .desktop import Desktop
from .managers import Scheduler
from .ui import ImageCache, Renderer

logger = logging.getLogger(__name__)

PANEL_KEYS = {
    pygame.K_1: 'player',
    pygame.K_2: 'history',
    pygame.K_3: 'requests',
    pygame.K_4: 'playlist_info',
}
SEARCH_PANEL = 'requests'


class DeskRadio:
    """Main DeskRadio application."""

    def __init__(self, fullscreen: bool = False):
        pygame.init()
        pygame.display.set_caption('DeskRadio')

        self._init_display(fullscreen)
        self._init_components()

    def _init_display(self, fullscreen: bool):
        """Initialize the display."""
        flags = pygame.DOUBLEBUF
        if fullscreen:
            flags |= pygame.FULLSCREEN

        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), flags)
        self.clock = pygame.time.Clock()

        info = pygame.display.Info()
        video_driver = os.environ.get('SDL_VIDEODRIVER', 'default')
        logger.info(f'Display: {pygame.display.get_driver()} (requested: {video_driver})')
        logger.info(f'Resolution: {info.current_w}x{info.current_h}')

    def _init_components(self):
        """Initialize all application components."""
        self.mock_mode = MOCK_MODE
        self.scheduler = Scheduler()

        if self.mock_mode:
            self.api = MockStationAPI()
            audio = NullStream(STREAM_URL)
        else:
            self.api = StationAPI(STATION_API_URL, STATION_NAME)
            audio = self._open_stream()

        self.desktop = Desktop(self.api, audio, self.scheduler)

        self.image_cache = ImageCache()
        self.renderer = Renderer(self.screen, self.image_cache)

        self.running = True
        self._last_status_log = time.time()
        self._status_log_interval = 60

        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

    def _open_stream(self):
        from .controllers.stream import VlcStream

        # libVLC reports errors on its own thread; hop onto the loop first
        def on_error(message: str):
            self.scheduler.call_soon_threadsafe(lambda: self.desktop.playback.on_stream_error(message))

        return VlcStream(STREAM_URL, on_error=on_error)

    def _handle_signal(self, signum, frame):
        """Handle SIGTERM/SIGINT for graceful shutdown."""
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        logger.info(f'Received {sig_name}, shutting down...')
        self.running = False

    def start(self):
        """Start the application and run the main loop."""
        logger.info('Starting DeskRadio...')
        if self.mock_mode:
            logger.info('Running in MOCK MODE')
        elif not self.api.is_connected():
            logger.warning(f'Station service not reachable yet: {STATION_API_URL}')

        self.desktop.start()
        pygame.key.start_text_input()

        logger.info('Entering main loop...')
        try:
            while self.running:
                self._handle_events()
                self.scheduler.run_pending()
                self.renderer.draw(self.desktop.view())
                pygame.display.flip()

                fps = TARGET_FPS if self.desktop.dragging or self.desktop.playback.playing else IDLE_FPS
                self.clock.tick(fps)
                self._log_status()
        finally:
            logger.info('Shutting down...')
            self.desktop.teardown()
            self.scheduler.close()
            pygame.quit()
            logger.info('DeskRadio stopped')

    def _log_status(self):
        now = time.time()
        if now - self._last_status_log < self._status_log_interval:
            return
        self._last_status_log = now
        poller = self.desktop.poller
        logger.info(f'FPS: {self.clock.get_fps():.1f} | playing={self.desktop.playback.playing} | '
                    f'muted={self.desktop.playback.muted} | poll_failures={poller.failures} | '
                    f'top={self.desktop.windows.topmost()}')

    # ============================================
    # INPUT
    # ============================================

    def _handle_events(self):
        """Translate pygame events into desktop actions."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_pointer_down(event.pos)

            elif event.type == pygame.MOUSEMOTION:
                self.desktop.pointer_move(self._to_desktop(event.pos))

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.desktop.pointer_up(self._to_desktop(event.pos))

            elif event.type == pygame.MOUSEWHEEL:
                name = self.desktop.panel_at(self._to_desktop(pygame.mouse.get_pos()))
                if name:
                    self.renderer.scroll_panel(name, event.y)

            elif event.type == pygame.TEXTINPUT:
                if self._search_focused():
                    self.desktop.type_text(event.text)

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

    def _to_desktop(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        """Screen position -> window-area position (right of the sidebar)."""
        return (pos[0] - SIDEBAR_WIDTH, pos[1])

    def _search_focused(self) -> bool:
        return self.desktop.windows.topmost() == SEARCH_PANEL

    def _handle_pointer_down(self, pos: Tuple[int, int]):
        if pos[0] < SIDEBAR_WIDTH:
            control = self.renderer.control_at(pos, None)
            if control is None:
                return
            logger.debug(f'Sidebar: {control.action} {control.arg or ""}')
            if control.action == 'theme':
                self.desktop.toggle_theme()
            elif control.action == 'toggle':
                self.desktop.toggle_window(control.arg)
            return

        name = self.desktop.pointer_down(self._to_desktop(pos))
        if name is None or not self.desktop.windows.is_open(name):
            return

        control = self.renderer.control_at(pos, name)
        if control is None:
            return
        if control.action == 'play':
            self.desktop.toggle_play()
        elif control.action == 'mute':
            self.desktop.toggle_mute()
        elif control.action == 'request':
            self.desktop.request_song(control.arg)

    def _handle_key(self, key):
        """Handle keyboard input."""
        if key == pygame.K_ESCAPE:
            self.running = False
            return

        if self._search_focused():
            # Typing goes to the search box while the requests window is on top
            if key == pygame.K_BACKSPACE:
                self.desktop.erase_text()
            return

        if key in PANEL_KEYS:
            self.desktop.toggle_window(PANEL_KEYS[key])
        elif key == pygame.K_SPACE:
            self.desktop.toggle_play()
        elif key == pygame.K_m:
            self.desktop.toggle_mute()
        elif key == pygame.K_t:
            self.desktop.toggle_theme()
