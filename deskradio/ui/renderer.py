"""
Renderer - All drawing for the DeskRadio desktop.

Draws the sidebar, the background and every open window in stacking order.
While drawing it records the hit rectangles of clickable controls so the app
can map clicks back to actions.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pygame

from .helpers import (
    draw_aa_circle, draw_rounded_rect, blit_text,
    draw_play_icon, draw_pause_icon, draw_speaker_icon, draw_close_icon,
)
from .image_cache import ImageCache
from ..desktop import DesktopView
from ..models import PanelState, Song
from ..utils import format_time
from ..config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, SIDEBAR_WIDTH, THEMES,
    TITLE_BAR_HEIGHT, CLOSE_BUTTON_SIZE, STATION_TITLE, STATION_SLOGAN,
)

logger = logging.getLogger(__name__)

SIDEBAR_BUTTONS = [
    ('theme', None),
    ('toggle', 'player'),
    ('toggle', 'history'),
    ('toggle', 'requests'),
    ('toggle', 'playlist_info'),
]
SIDEBAR_LABELS = {
    'player': 'Radio',
    'history': 'History',
    'requests': 'Requests',
    'playlist_info': 'Info',
}
ROW_HEIGHT = 56


@dataclass
class Control:
    """A clickable area drawn in the last frame."""
    panel: Optional[str]  # None for sidebar controls
    action: str           # 'play', 'mute', 'theme', 'toggle', 'request'
    rect: pygame.Rect
    arg: Optional[str] = None


class Renderer:
    """Handles all drawing for the DeskRadio UI."""

    def __init__(self, screen: pygame.Surface, image_cache: ImageCache):
        self.screen = screen
        self.image_cache = image_cache

        self.font_large = pygame.font.Font(None, 30)
        self.font_medium = pygame.font.Font(None, 24)
        self.font_small = pygame.font.Font(None, 20)
        self.font_title = pygame.font.Font(None, 64)
        self.font_slogan = pygame.font.Font(None, 30)

        self.main_rect = pygame.Rect(SIDEBAR_WIDTH, 0, SCREEN_WIDTH - SIDEBAR_WIDTH, SCREEN_HEIGHT)
        self.controls: List[Control] = []
        self.scroll: Dict[str, int] = {}  # panel name -> list scroll offset (px)
        self._sidebar_text: Dict[str, pygame.Surface] = {}

    # ============================================
    # PUBLIC
    # ============================================

    def control_at(self, pos: Tuple[int, int], panel: Optional[str]) -> Optional[Control]:
        """Topmost control at a screen position belonging to `panel`."""
        for control in reversed(self.controls):
            if control.panel == panel and control.rect.collidepoint(pos):
                return control
        return None

    def scroll_panel(self, name: str, dy: int):
        self.scroll[name] = max(0, self.scroll.get(name, 0) - dy * 24)

    def draw(self, view: DesktopView):
        """Draw a full frame."""
        self.controls = []
        colors = THEMES[view.theme]

        if view.loading:
            self.screen.fill(colors['bg'])
            blit_text(self.screen, self.font_large, 'Loading radio...', colors['text_primary'],
                      (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 10), center=True)
            return

        main = self.screen.subsurface(self.main_rect)
        self._draw_background(main, view, colors)
        for state in view.panels:
            self._draw_panel(main, state, view, colors)
        self._draw_sidebar(view, colors)

    # ============================================
    # BACKGROUND & SIDEBAR
    # ============================================

    def _draw_background(self, surface: pygame.Surface, view: DesktopView, colors: dict):
        surface.fill(colors['bg'])
        song = view.snapshot.current_song if view.snapshot else None
        backdrop = self.image_cache.get_backdrop(song.art if song else None, surface.get_size())
        if backdrop:
            surface.blit(backdrop, (0, 0))
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill(colors['overlay'])
        surface.blit(overlay, (0, 0))

    def _draw_sidebar(self, view: DesktopView, colors: dict):
        bar = pygame.Surface((SIDEBAR_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        bar.fill(colors['sidebar'])
        self.screen.blit(bar, (0, 0))

        title = self._rotated(STATION_TITLE, self.font_title, (255, 255, 255))
        slogan = self._rotated(STATION_SLOGAN, self.font_slogan, colors['accent'])
        top = 24
        self.screen.blit(title, (SIDEBAR_WIDTH // 2 - title.get_width() + 4, top))
        self.screen.blit(slogan, (SIDEBAR_WIDTH // 2 + 6, top))

        size = 56
        x = (SIDEBAR_WIDTH - size) // 2
        y = SCREEN_HEIGHT - 16 - len(SIDEBAR_BUTTONS) * (size + 12)
        for action, name in SIDEBAR_BUTTONS:
            rect = pygame.Rect(x, y, size, size)
            is_open = bool(name and view.open_flags.get(name))
            fill = colors['accent'] + (90,) if is_open else colors['sidebar_button']
            draw_rounded_rect(self.screen, fill, rect, 10)
            if action == 'theme':
                label = 'Light' if view.theme == 'dark' else 'Dark'
            else:
                label = SIDEBAR_LABELS.get(name, name)
            blit_text(self.screen, self.font_small, label, (255, 255, 255),
                      (rect.centerx, rect.centery - 6), max_width=size - 4, center=True)
            self.controls.append(Control(None, action, rect, name))
            y += size + 12

    def _rotated(self, text: str, font: pygame.font.Font, color: tuple) -> pygame.Surface:
        key = f'{text}_{color}'
        if key not in self._sidebar_text:
            self._sidebar_text[key] = pygame.transform.rotate(font.render(text, True, color[:3]), 90)
        return self._sidebar_text[key]

    # ============================================
    # WINDOWS
    # ============================================

    def _draw_panel(self, surface: pygame.Surface, state: PanelState, view: DesktopView, colors: dict):
        x, y = state.position
        w, h = state.size
        frame = pygame.Rect(x, y, w, h)

        shadow = pygame.Surface((w + 16, h + 16), pygame.SRCALPHA)
        draw_rounded_rect(shadow, (0, 0, 0, 70), (0, 0, w + 16, h + 16), 14)
        surface.blit(shadow, (x - 8, y + 4))

        draw_rounded_rect(surface, colors['panel'], frame, 8)
        pygame.draw.rect(surface, colors['panel_border'], frame, 1, border_radius=8)
        draw_rounded_rect(surface, colors['title_bar'], (x, y, w, TITLE_BAR_HEIGHT), 7, top_only=True)
        blit_text(surface, self.font_medium, state.title, colors['title_text'],
                  (x + 10, y + 7), max_width=w - CLOSE_BUTTON_SIZE - 30)

        margin = (TITLE_BAR_HEIGHT - CLOSE_BUTTON_SIZE) // 2
        close_rect = (x + w - CLOSE_BUTTON_SIZE - margin, y + margin, CLOSE_BUTTON_SIZE, CLOSE_BUTTON_SIZE)
        draw_close_icon(surface, colors['title_text'], close_rect)

        content = pygame.Rect(x, y + TITLE_BAR_HEIGHT, w, h - TITLE_BAR_HEIGHT)
        clip = surface.get_clip()
        surface.set_clip(content.clip(clip))
        surface.fill(colors['content_bg'], content)

        draw = {
            'player': self._draw_player,
            'history': self._draw_history,
            'requests': self._draw_requests,
            'playlist_info': self._draw_playlist_info,
        }.get(state.name)
        if draw:
            draw(surface, content, state.name, view, colors)
        surface.set_clip(clip)

    def _backdrop(self, surface: pygame.Surface, rect: pygame.Rect, art: Optional[str], colors: dict):
        backdrop = self.image_cache.get_backdrop(art, rect.size)
        if backdrop:
            surface.blit(backdrop, rect.topleft)
            veil = pygame.Surface(rect.size, pygame.SRCALPHA)
            veil.fill((0, 0, 0, 77))
            surface.blit(veil, rect.topleft)
        else:
            surface.fill((12, 12, 12), rect)

    def _cover(self, surface: pygame.Surface, url: Optional[str], rect: pygame.Rect, colors: dict):
        image = self.image_cache.get(url, rect.width)
        if image:
            surface.blit(image, rect.topleft)
        else:
            draw_rounded_rect(surface, (64, 64, 64), rect, 6)

    def _register(self, panel: str, action: str, rect: pygame.Rect, arg: Optional[str] = None):
        # Panels draw into the main area; controls are stored in screen space
        self.controls.append(Control(panel, action, rect.move(self.main_rect.topleft), arg))

    def _draw_player(self, surface, content: pygame.Rect, name: str, view: DesktopView, colors: dict):
        now_playing = view.snapshot.now_playing if view.snapshot else None
        if now_playing is None:
            surface.fill((0, 0, 0), content)
            draw_aa_circle(surface, (82, 82, 82), (content.centerx, content.centery - 30), 24)
            blit_text(surface, self.font_medium, 'Waiting for music...', (163, 163, 163),
                      (content.centerx, content.centery + 10), center=True)
            return

        song = now_playing.song
        self._backdrop(surface, content, song.art, colors)

        cover = pygame.Rect(0, 0, 160, 160)
        cover.midtop = (content.centerx, content.top + 14)
        self._cover(surface, song.art, cover, colors)

        text_w = content.width - 32
        ty = cover.bottom + 10
        blit_text(surface, self.font_large, song.title, (255, 255, 255), (content.centerx, ty),
                  max_width=text_w, center=True)
        blit_text(surface, self.font_medium, song.artist, (212, 212, 212), (content.centerx, ty + 26),
                  max_width=text_w, center=True)
        blit_text(surface, self.font_small, song.album, (163, 163, 163), (content.centerx, ty + 48),
                  max_width=text_w, center=True)

        bar = pygame.Rect(content.left + 16, ty + 74, text_w, 6)
        draw_rounded_rect(surface, (64, 64, 64), bar, 3)
        filled = int(bar.width * view.progress / 100)
        if filled > 0:
            draw_rounded_rect(surface, (255, 255, 255), (bar.x, bar.y, filled, bar.height), 3)
        blit_text(surface, self.font_small, format_time(view.elapsed), (163, 163, 163), (bar.left, bar.bottom + 4))
        duration = self.font_small.render(format_time(view.duration), True, (163, 163, 163))
        surface.blit(duration, (bar.right - duration.get_width(), bar.bottom + 4))

        controls_y = bar.bottom + 44
        mute_rect = pygame.Rect(0, 0, 32, 32)
        mute_rect.center = (content.centerx - 56, controls_y)
        draw_speaker_icon(surface, (212, 212, 212), mute_rect.center, 22, view.intent.muted)
        self._register(name, 'mute', mute_rect)

        play_rect = pygame.Rect(0, 0, 48, 48)
        play_rect.center = (content.centerx, controls_y)
        draw_aa_circle(surface, (255, 255, 255), play_rect.center, 24)
        if view.intent.playing:
            draw_pause_icon(surface, (0, 0, 0), play_rect.center, 20)
        else:
            draw_play_icon(surface, (0, 0, 0), (play_rect.centerx + 2, play_rect.centery), 20)
        self._register(name, 'play', play_rect)

        if view.intent.playing and view.stream_error:
            blit_text(surface, self.font_small, 'Stream unavailable, retrying...', colors['error'],
                      (content.centerx, content.bottom - 22), max_width=text_w, center=True)

    def _song_rows(self, surface, content: pygame.Rect, name: str, songs: List[Tuple[Song, Optional[str]]],
                   colors: dict, top: int, button: Optional[str] = None):
        """Scrollable list of songs with optional per-row buttons."""
        max_scroll = max(0, len(songs) * ROW_HEIGHT - (content.bottom - top))
        offset = min(self.scroll.get(name, 0), max_scroll)
        self.scroll[name] = offset

        clip = surface.get_clip()
        surface.set_clip(pygame.Rect(content.left, top, content.width, content.bottom - top).clip(clip))
        y = top + 4 - offset
        for song, arg in songs:
            if y + ROW_HEIGHT < top:
                y += ROW_HEIGHT
                continue
            if y > content.bottom:
                break
            row = pygame.Rect(content.left + 8, y, content.width - 16, ROW_HEIGHT - 6)
            draw_rounded_rect(surface, colors['row_bg'], row, 6)
            art = pygame.Rect(row.left + 4, row.top + 3, row.height - 6, row.height - 6)
            self._cover(surface, song.art, art, colors)
            text_x = art.right + 10
            text_w = row.right - text_x - (64 if button else 8)
            blit_text(surface, self.font_medium, song.title, colors['row_text'], (text_x, row.top + 8), max_width=text_w)
            blit_text(surface, self.font_small, song.artist, (82, 82, 82), (text_x, row.top + 28), max_width=text_w)
            if button:
                btn = pygame.Rect(row.right - 58, row.centery - 12, 52, 24)
                disabled = arg is None
                draw_rounded_rect(surface, colors['button'] + ((128,) if disabled else ()), btn, 4)
                blit_text(surface, self.font_small, button, (255, 255, 255), (btn.centerx, btn.top + 5), center=True)
                if not disabled:
                    self._register(name, 'request', btn, arg)
            y += ROW_HEIGHT
        surface.set_clip(clip)

    def _draw_history(self, surface, content: pygame.Rect, name: str, view: DesktopView, colors: dict):
        history = view.snapshot.history if view.snapshot else []
        if not history:
            surface.fill((0, 0, 0), content)
            blit_text(surface, self.font_medium, 'Song history is empty.', (212, 212, 212),
                      (content.centerx, content.centery - 8), center=True)
            return
        self._backdrop(surface, content, history[0].song.art, colors)
        self._song_rows(surface, content, name, [(entry.song, None) for entry in history], colors, content.top)

    def _draw_requests(self, surface, content: pygame.Rect, name: str, view: DesktopView, colors: dict):
        browser = view.requests
        filtered = browser.filtered() if browser else []
        art = filtered[0].song.art if filtered else (browser.songs[0].song.art if browser and browser.songs else None)
        self._backdrop(surface, content, art, colors)
        if browser is None:
            return

        search = pygame.Rect(content.left + 8, content.top + 8, content.width - 16, 30)
        draw_rounded_rect(surface, (23, 23, 23), search, 4)
        pygame.draw.rect(surface, (64, 64, 64), search, 1, border_radius=4)
        if browser.query:
            blit_text(surface, self.font_medium, browser.query + '|', (255, 255, 255),
                      (search.left + 8, search.top + 8), max_width=search.width - 16)
        else:
            blit_text(surface, self.font_medium, 'Search song or artist...', (115, 115, 115),
                      (search.left + 8, search.top + 8), max_width=search.width - 16)

        list_top = search.bottom + 6
        footer = 24 if (browser.success or browser.error) else 0
        list_area = pygame.Rect(content.left, list_top, content.width, content.bottom - list_top - footer)

        if browser.loading:
            blit_text(surface, self.font_medium, 'Loading songs...', (163, 163, 163),
                      (list_area.centerx, list_area.centery - 8), center=True)
        elif not filtered:
            blit_text(surface, self.font_medium, 'No songs found.', (163, 163, 163),
                      (list_area.centerx, list_area.top + 32), center=True)
        else:
            rows = [(item.song, None if browser.requesting else item.request_id) for item in filtered]
            self._song_rows(surface, list_area,
                            name, rows, colors, list_area.top, button='Request')

        if footer:
            color = colors['success'] if browser.success else colors['error']
            blit_text(surface, self.font_small, browser.success or browser.error, color,
                      (content.centerx, content.bottom - 20), max_width=content.width - 16, center=True)

    def _draw_playlist_info(self, surface, content: pygame.Rect, name: str, view: DesktopView, colors: dict):
        now_playing = view.snapshot.now_playing if view.snapshot else None
        playlist = (now_playing.playlist if now_playing else None) or 'Unknown'
        next_song = now_playing.next_song if now_playing else None
        art = (next_song.art if next_song else None) or (now_playing.song.art if now_playing else None)
        self._backdrop(surface, content, art, colors)

        x = content.left + 16
        y = content.top + 16
        width = content.width - 32
        blit_text(surface, self.font_large, 'Playlist Info:', (255, 255, 255), (x, y))
        label = blit_text(surface, self.font_medium, 'Current playlist:', (255, 255, 255), (x, y + 36))
        blit_text(surface, self.font_medium, playlist, (212, 212, 212), (label.right + 8, y + 36),
                  max_width=width - label.width - 8)
        label = blit_text(surface, self.font_medium, 'Playing next:', (255, 255, 255), (x, y + 70))

        if next_song is None:
            blit_text(surface, self.font_medium, 'Not found', (163, 163, 163), (label.right + 8, y + 70))
            return

        art_rect = pygame.Rect(x, y + 96, 48, 48)
        self._cover(surface, next_song.art, art_rect, colors)
        text_w = width - 60
        blit_text(surface, self.font_medium, next_song.title, (255, 255, 255), (art_rect.right + 12, art_rect.top),
                  max_width=text_w)
        blit_text(surface, self.font_small, next_song.artist, (212, 212, 212), (art_rect.right + 12, art_rect.top + 18),
                  max_width=text_w)
        blit_text(surface, self.font_small, next_song.album, (163, 163, 163), (art_rect.right + 12, art_rect.top + 34),
                  max_width=text_w)
