"""
DeskRadio Data Models - Core data structures.
"""
import time
from dataclasses import dataclass, field
from typing import Optional, List, Tuple


class SnapshotError(ValueError):
    """Raised when a now-playing payload cannot be turned into a snapshot."""


def _as_int(value, default: int = 0) -> int:
    """Coerce a numeric payload field, treating null as the default."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SnapshotError(f'Expected a number, got {value!r}')


@dataclass
class Song:
    """A track as described by the station service."""
    id: str = ''
    title: str = ''
    artist: str = ''
    album: str = ''
    art: str = ''

    @classmethod
    def from_payload(cls, data) -> 'Song':
        if not isinstance(data, dict):
            raise SnapshotError(f'Song must be an object, got {type(data).__name__}')
        return cls(
            id=str(data.get('id') or ''),
            title=data.get('title') or '',
            artist=data.get('artist') or '',
            album=data.get('album') or '',
            art=data.get('art') or '',
        )

    @property
    def label(self) -> str:
        """'Artist - Title', or whichever half is known."""
        return ' - '.join(part for part in (self.artist, self.title) if part)


@dataclass
class NowPlaying:
    """Current play on the station."""
    song: Song
    elapsed: int = 0
    duration: int = 0
    playlist: Optional[str] = None
    next_song: Optional[Song] = None
    sh_id: Optional[str] = None

    @property
    def song_key(self) -> str:
        """Identity of this play, used to detect song changes between polls."""
        if self.sh_id:
            return f'sh:{self.sh_id}'
        if self.song.id:
            return f'id:{self.song.id}'
        return f'label:{self.song.label}'


@dataclass
class HistoryEntry:
    """One previously played song."""
    id: str
    song: Song


@dataclass
class StationSnapshot:
    """
    Read-only copy of remote station state.

    Replaced wholesale on every successful poll, never merged.
    """
    now_playing: Optional[NowPlaying] = None
    history: List[HistoryEntry] = field(default_factory=list)
    fetched_at: float = field(default_factory=time.time)

    @classmethod
    def from_payload(cls, payload) -> 'StationSnapshot':
        """Parse a `/nowplaying/{station}` response body."""
        if not isinstance(payload, dict):
            raise SnapshotError(f'Payload must be an object, got {type(payload).__name__}')

        now_playing = None
        np_data = payload.get('now_playing')
        if np_data is not None:
            if not isinstance(np_data, dict):
                raise SnapshotError('now_playing must be an object')
            # A now_playing block without a song means nothing is on air
            if np_data.get('song'):
                next_song = None
                playing_next = np_data.get('playing_next')
                if isinstance(playing_next, dict) and playing_next.get('song'):
                    next_song = Song.from_payload(playing_next['song'])
                sh_id = np_data.get('sh_id')
                now_playing = NowPlaying(
                    song=Song.from_payload(np_data['song']),
                    elapsed=max(0, _as_int(np_data.get('elapsed'))),
                    duration=max(0, _as_int(np_data.get('duration'))),
                    playlist=np_data.get('playlist') or None,
                    next_song=next_song,
                    sh_id=str(sh_id) if sh_id is not None else None,
                )

        history_data = payload.get('song_history') or []
        if not isinstance(history_data, list):
            raise SnapshotError('song_history must be a list')

        history = []
        for index, entry in enumerate(history_data):
            if not isinstance(entry, dict) or not entry.get('song'):
                raise SnapshotError(f'song_history[{index}] has no song')
            entry_id = entry.get('sh_id', entry.get('id', index))
            history.append(HistoryEntry(id=str(entry_id), song=Song.from_payload(entry['song'])))

        return cls(now_playing=now_playing, history=history)

    @property
    def current_song(self) -> Optional[Song]:
        return self.now_playing.song if self.now_playing else None


@dataclass
class PanelState:
    """Open flag, stacking rank and placement of one named window."""
    name: str
    title: str
    is_open: bool
    z_index: int
    position: Tuple[int, int]
    size: Tuple[int, int]
    dragged: bool = False


@dataclass
class PlaybackIntent:
    """Locally desired playback state (not the audio resource's actual state)."""
    playing: bool = False
    muted: bool = False


@dataclass
class RequestableSong:
    """A song listeners may request."""
    request_id: str
    song: Song

    @classmethod
    def from_payload(cls, data) -> 'RequestableSong':
        if not isinstance(data, dict) or 'request_id' not in data:
            raise SnapshotError('Requestable song needs a request_id')
        return cls(request_id=str(data['request_id']), song=Song.from_payload(data.get('song') or {}))


@dataclass
class RequestResult:
    """Outcome of submitting a song request."""
    success: bool
    message: str = ''
