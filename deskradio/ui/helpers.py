"""
UI Helpers - Drawing utilities for pygame.
"""
from typing import Tuple

import pygame
import pygame.gfxdraw


def draw_aa_circle(surface: pygame.Surface, color: tuple, center: tuple, radius: int):
    """Draw an anti-aliased filled circle."""
    cx, cy = int(center[0]), int(center[1])
    r = int(radius)
    pygame.gfxdraw.aacircle(surface, cx, cy, r, color)
    pygame.gfxdraw.filled_circle(surface, cx, cy, r, color)


def draw_rounded_rect(surface: pygame.Surface, color: tuple, rect: tuple, radius: int,
                      top_only: bool = False):
    """Draw a filled rounded rectangle; alpha colors blend onto the surface."""
    x, y, w, h = rect
    if w <= 0 or h <= 0:
        return
    r = min(radius, w // 2, h // 2)

    if len(color) == 4 and color[3] < 255:
        layer = pygame.Surface((w, h), pygame.SRCALPHA)
        _rounded(layer, color, (0, 0, w, h), r, top_only)
        surface.blit(layer, (x, y))
    else:
        _rounded(surface, color, rect, r, top_only)


def _rounded(surface, color, rect, r, top_only):
    if top_only:
        pygame.draw.rect(surface, color, rect, border_top_left_radius=r, border_top_right_radius=r)
    else:
        pygame.draw.rect(surface, color, rect, border_radius=r)


def truncate(font: pygame.font.Font, text: str, max_width: int) -> str:
    """Shorten text with an ellipsis until it fits max_width pixels."""
    if font.size(text)[0] <= max_width:
        return text
    ellipsis = '...'
    while text and font.size(text + ellipsis)[0] > max_width:
        text = text[:-1]
    return text + ellipsis


def blit_text(surface: pygame.Surface, font: pygame.font.Font, text: str, color: tuple,
              pos: Tuple[int, int], max_width: int = 0, center: bool = False) -> pygame.Rect:
    """Render and blit a single line, optionally truncated and centered on pos[0]."""
    if max_width:
        text = truncate(font, text, max_width)
    rendered = font.render(text, True, color[:3])
    rect = rendered.get_rect()
    if center:
        rect.midtop = pos
    else:
        rect.topleft = pos
    surface.blit(rendered, rect)
    return rect


def draw_play_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int):
    cx, cy = center
    half = size // 2
    points = [(cx - half * 0.6, cy - half), (cx - half * 0.6, cy + half), (cx + half, cy)]
    pygame.gfxdraw.aapolygon(surface, points, color)
    pygame.gfxdraw.filled_polygon(surface, points, color)


def draw_pause_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int):
    cx, cy = center
    bar_w = max(3, size // 4)
    gap = max(2, size // 5)
    pygame.draw.rect(surface, color, (cx - gap // 2 - bar_w, cy - size // 2, bar_w, size))
    pygame.draw.rect(surface, color, (cx + gap // 2, cy - size // 2, bar_w, size))


def draw_speaker_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int, muted: bool):
    cx, cy = center
    s = size // 2
    body = [(cx - s, cy - s // 3), (cx - s // 3, cy - s // 3), (cx + s // 4, cy - s),
            (cx + s // 4, cy + s), (cx - s // 3, cy + s // 3), (cx - s, cy + s // 3)]
    pygame.draw.polygon(surface, color, body)
    if muted:
        pygame.draw.line(surface, color, (cx + s // 2, cy - s // 2), (cx + s, cy + s // 2), 2)
        pygame.draw.line(surface, color, (cx + s // 2, cy + s // 2), (cx + s, cy - s // 2), 2)
    else:
        pygame.draw.arc(surface, color, (cx, cy - s // 2, s, s), -1.0, 1.0, 2)
        pygame.draw.arc(surface, color, (cx - s // 4, cy - s, s * 3 // 2, s * 2), -1.0, 1.0, 2)


def draw_close_icon(surface: pygame.Surface, color: tuple, rect: tuple):
    x, y, w, h = rect
    pad = w // 4
    pygame.draw.line(surface, color, (x + pad, y + pad), (x + w - pad, y + h - pad), 2)
    pygame.draw.line(surface, color, (x + pad, y + h - pad), (x + w - pad, y + pad), 2)
