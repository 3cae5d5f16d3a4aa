"""
DeskRadio UI - Rendering and visual components.
"""
from .helpers import (
    draw_aa_circle,
    draw_rounded_rect,
)
from .image_cache import ImageCache
from .renderer import Renderer, Control

__all__ = [
    'draw_aa_circle',
    'draw_rounded_rect',
    'ImageCache',
    'Renderer',
    'Control',
]
