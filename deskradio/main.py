#!/usr/bin/env python3
"""
DeskRadio - Desktop-style console for a live internet radio station

Usage:
    python -m deskradio              # Windowed
    python -m deskradio --fullscreen # Fullscreen
    python -m deskradio --mock       # Mock mode (no network, silent stream)
"""
import os
import sys
import logging
import platform
from logging.handlers import RotatingFileHandler

from .config import (
    SCREEN_WIDTH, SCREEN_HEIGHT,
    STATION_API_URL, STATION_NAME, STREAM_URL, MOCK_MODE, FULLSCREEN,
    POLL_INTERVAL,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
)


def setup_logging():
    """Configure logging with console and rotating file handler."""
    level_name = os.environ.get('DESKRADIO_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(console_formatter)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        root.addHandler(file_handler)
        root.info(f'Logging to: {LOG_FILE}')
    except (OSError, PermissionError) as e:
        root.warning(f'Could not create log file: {e}')

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)


def log_system_info(logger: logging.Logger):
    """Log system information at startup."""
    logger.info('=' * 50)
    logger.info('DESKRADIO STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')
    logger.info(f'Station: {STATION_NAME} @ {STATION_API_URL}')
    logger.info(f'Stream: {STREAM_URL}')
    logger.info(f'Poll interval: {POLL_INTERVAL:.0f}s')
    logger.info(f'Screen: {SCREEN_WIDTH}x{SCREEN_HEIGHT}, fullscreen={FULLSCREEN}')
    if MOCK_MODE:
        logger.info('Mode: MOCK (UI testing)')
    logger.info('=' * 50)


def main():
    """Entry point for DeskRadio."""
    setup_logging()
    logger = logging.getLogger(__name__)
    log_system_info(logger)

    print()
    print('Controls:')
    print('   1-4     Toggle windows (player, history, requests, playlist)')
    print('   Space   Play/Pause')
    print('   M       Mute')
    print('   T       Light/dark theme')
    print('   Esc     Quit')
    print()

    # pygame and libVLC are only needed once the UI starts
    from .app import DeskRadio

    app = DeskRadio(fullscreen=FULLSCREEN)
    app.start()


if __name__ == '__main__':
    main()
