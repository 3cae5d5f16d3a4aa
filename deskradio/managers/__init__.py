"""
DeskRadio Managers - Window stacking, polling, timing and request state.
"""
from .scheduler import Scheduler, Timer
from .windows import WindowRegistry
from .poller import StationPoller
from .clock import ElapsedClock
from .song_requests import RequestBrowser

__all__ = [
    'Scheduler',
    'Timer',
    'WindowRegistry',
    'StationPoller',
    'ElapsedClock',
    'RequestBrowser',
]
