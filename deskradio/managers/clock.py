"""
Elapsed Clock - Local extrapolation of the current song's position.

Snapshots arrive every 15 seconds; between them the clock ticks once per
second while playback is wanted. It is re-synchronised only when the song
changes (or the player window reopens), so same-song polls never make the
displayed time jump backwards.
"""
import logging
from typing import Optional

from ..models import StationSnapshot
from ..utils import clamp

logger = logging.getLogger(__name__)


class ElapsedClock:
    """Seconds into the current song, as shown to the user."""

    def __init__(self):
        self.elapsed = 0
        self.duration = 0
        self.song_key: Optional[str] = None

    def observe(self, snapshot: Optional[StationSnapshot]) -> bool:
        """Take a new snapshot into account. Returns True if the clock was reset."""
        now_playing = snapshot.now_playing if snapshot else None
        if now_playing is None:
            if self.song_key is not None:
                logger.debug('Nothing on air, clock cleared')
            self.song_key = None
            self.elapsed = 0
            self.duration = 0
            return False

        self.duration = now_playing.duration
        if now_playing.song_key == self.song_key:
            return False

        self.song_key = now_playing.song_key
        self.elapsed = now_playing.elapsed
        logger.debug(f'New song {now_playing.song.label!r}, clock reset to {self.elapsed}s')
        return True

    def resync(self, snapshot: Optional[StationSnapshot]) -> bool:
        """Force the clock to the snapshot's reported position."""
        now_playing = snapshot.now_playing if snapshot else None
        if now_playing is None:
            return False
        self.song_key = now_playing.song_key
        self.duration = now_playing.duration
        self.elapsed = now_playing.elapsed
        return True

    def tick(self, playing: bool):
        if playing:
            self.elapsed += 1

    @property
    def progress_percentage(self) -> float:
        """Position within the song in percent, 0 when duration is unknown."""
        if self.duration <= 0:
            return 0.0
        return clamp(self.elapsed / self.duration * 100.0, 0.0, 100.0)
