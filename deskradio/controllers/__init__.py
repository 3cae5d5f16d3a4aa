"""
DeskRadio Controllers - Playback ownership.

VlcStream lives in .stream and is imported by the app only.
"""
from .playback import PlaybackController, PlaybackError, NullStream

__all__ = ['PlaybackController', 'PlaybackError', 'NullStream']
