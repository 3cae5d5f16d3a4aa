"""
DeskRadio Utilities - Shared helper functions.
"""
import threading
import logging

logger = logging.getLogger(__name__)


def run_async(fn, *args):
    """Fire-and-forget execution in a daemon thread.

    Wraps function to catch and log exceptions.
    """
    def wrapper():
        try:
            fn(*args)
        except Exception as e:
            logger.warning(f'Async task {getattr(fn, "__name__", fn)} failed: {e}', exc_info=True)

    threading.Thread(target=wrapper, daemon=True).start()


def format_time(seconds) -> str:
    """Format seconds as MM:SS (minutes are not wrapped at the hour)."""
    seconds = max(0, int(seconds or 0))
    minutes, secs = divmod(seconds, 60)
    return f'{minutes:02d}:{secs:02d}'


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
