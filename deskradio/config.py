"""
DeskRadio Configuration - All constants and settings.
"""
import os
import sys
from pathlib import Path

# ============================================
# SCREEN & DISPLAY
# ============================================

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 800
SIDEBAR_WIDTH = 88
TARGET_FPS = 30
IDLE_FPS = 10

# ============================================
# STATION SERVICE
# ============================================

STATION_API_URL = os.environ.get('DESKRADIO_API_URL', 'https://radio.bandito.site/api')
STATION_NAME = os.environ.get('DESKRADIO_STATION', 'cesaria')
STREAM_URL = os.environ.get(
    'DESKRADIO_STREAM_URL',
    f'https://radio.bandito.site/listen/{STATION_NAME}/radio.mp3'
)

HTTP_TIMEOUT = 5        # now playing / request list
REQUEST_TIMEOUT = 10    # submitting a song request

# ============================================
# PATHS
# ============================================

LOG_DIR = Path.home() / 'deskradio' / 'logs'
LOG_FILE = LOG_DIR / 'deskradio.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 5

# ============================================
# COMMAND LINE FLAGS
# ============================================

MOCK_MODE = '--mock' in sys.argv or '-m' in sys.argv
FULLSCREEN = '--fullscreen' in sys.argv or '-f' in sys.argv

# ============================================
# TIMING
# ============================================

POLL_INTERVAL = 15.0   # Station snapshot refresh (staleness bound)
TICK_INTERVAL = 1.0    # Local elapsed-time extrapolation
STREAM_RETRY_INTERVAL = 5.0  # Wait between automatic stream start retries

# ============================================
# WINDOWS
# ============================================

PRIMARY_PANEL = 'player'  # Closing it stops playback

# name -> title, open at start, initial z-index, default position, size
PANELS = {
    'player': {
        'title': 'Radio Player',
        'open': True,
        'z_index': 10,
        'position': (100, 80),
        'size': (320, 384),
    },
    'history': {
        'title': 'Song History',
        'open': False,
        'z_index': 9,
        'position': (200, 200),
        'size': (384, 384),
    },
    'requests': {
        'title': 'Song Requests',
        'open': False,
        'z_index': 8,
        'position': (320, 120),
        'size': (384, 384),
    },
    'playlist_info': {
        'title': 'Playlist Info',
        'open': False,
        'z_index': 7,
        'position': (440, 160),
        'size': (384, 288),
    },
}

TITLE_BAR_HEIGHT = 28
CLOSE_BUTTON_SIZE = 20

# Z-indexes only ever grow; renumber by rank before crossing this
Z_INDEX_CEILING = 1_000_000

# ============================================
# THEMES
# ============================================

THEMES = {
    'dark': {
        'bg': (23, 23, 23),
        'overlay': (0, 0, 0, 178),
        'sidebar': (0, 0, 0, 90),
        'sidebar_button': (255, 255, 255, 26),
        'panel': (229, 229, 229),
        'panel_border': (163, 163, 163),
        'title_bar': (64, 64, 64),
        'title_text': (255, 255, 255),
        'content_bg': (23, 23, 23),
        'text_primary': (255, 255, 255),
        'text_secondary': (163, 163, 163),
        'text_muted': (115, 115, 115),
        'row_bg': (245, 245, 245, 178),
        'row_text': (0, 0, 0),
        'accent': (255, 183, 3),
        'button': (37, 99, 235),
        'success': (74, 222, 128),
        'error': (248, 113, 113),
        'close_hover': (239, 68, 68),
    },
    'light': {
        'bg': (245, 245, 245),
        'overlay': (255, 255, 255, 153),
        'sidebar': (0, 0, 0, 60),
        'sidebar_button': (255, 255, 255, 40),
        'panel': (229, 229, 229),
        'panel_border': (163, 163, 163),
        'title_bar': (64, 64, 64),
        'title_text': (255, 255, 255),
        'content_bg': (255, 255, 255),
        'text_primary': (0, 0, 0),
        'text_secondary': (82, 82, 82),
        'text_muted': (64, 64, 64),
        'row_bg': (245, 245, 245, 204),
        'row_text': (0, 0, 0),
        'accent': (255, 183, 3),
        'button': (37, 99, 235),
        'success': (22, 163, 74),
        'error': (220, 38, 38),
        'close_hover': (239, 68, 68),
    },
}
DEFAULT_THEME = 'dark'

STATION_TITLE = 'RADIO CESARIA'
STATION_SLOGAN = 'CUIDAR É O NOSSO REMÉDIO'

# ============================================
# IMAGES
# ============================================

IMAGE_CACHE_MAX_SIZE = 120  # Maximum cached surfaces
BACKDROP_BLUR_RADIUS = 16
