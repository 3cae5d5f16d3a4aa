"""
VLC Stream - The station's audio stream, played with libVLC.

Only PlaybackController calls into this class.
"""
import os
import logging
from typing import Callable, Optional

import vlc

from .playback import PlaybackError

logger = logging.getLogger(__name__)


class VlcStream:
    """Live stream player: play() may fail, pause() never does."""

    def __init__(self, url: str, on_error: Optional[Callable[[str], None]] = None):
        """
        Args:
            url: Stream URL (mp3/aac over HTTP)
            on_error: Called from a libVLC thread when playback breaks down
        """
        self.url = url
        self.on_error = on_error
        self._muted = False

        self.instance = vlc.Instance('--no-xlib' if os.name != 'nt' else '')
        self.player = self.instance.media_player_new()
        events = self.player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._on_vlc_error)
        logger.info(f'Audio stream: {url}')

    @property
    def muted(self) -> bool:
        return self._muted

    @muted.setter
    def muted(self, value: bool):
        self._muted = bool(value)
        self.player.audio_set_mute(self._muted)

    def play(self):
        """Start the stream from the live edge. Raises PlaybackError on refusal."""
        # Fresh media each time: a stopped live stream cannot be resumed in place
        media = self.instance.media_new(self.url)
        self.player.set_media(media)
        if self.player.play() == -1:
            raise PlaybackError(f'libVLC refused to play {self.url}')
        self.player.audio_set_mute(self._muted)

    def pause(self):
        self.player.stop()

    def release(self):
        self.player.stop()
        self.player.release()
        self.instance.release()

    def _on_vlc_error(self, event):
        logger.debug(f'libVLC error event: {event.type}')
        if self.on_error:
            self.on_error('stream error reported by libVLC')
