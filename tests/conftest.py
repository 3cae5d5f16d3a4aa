"""
Pytest configuration and shared fixtures for DeskRadio tests.
"""
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from deskradio.models import RequestResult
from deskradio.managers.scheduler import Scheduler
from deskradio.controllers.playback import PlaybackError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class DeferredSpawner:
    """Holds background work until the test releases it."""

    def __init__(self):
        self.pending = []

    def __call__(self, runner):
        self.pending.append(runner)

    def run_all(self):
        pending, self.pending = self.pending, []
        for runner in pending:
            runner()


class FakeAudio:
    """Audio resource that records calls and can refuse to start."""

    def __init__(self):
        self.muted = False
        self.playing = False
        self.fail = False
        self.released = False
        self.play_calls = 0
        self.pause_calls = 0

    def play(self):
        self.play_calls += 1
        if self.fail:
            raise PlaybackError('play() rejected: autoplay blocked')
        self.playing = True

    def pause(self):
        self.pause_calls += 1
        self.playing = False

    def release(self):
        self.released = True


class FakeStationAPI:
    """Station service returning whatever the test put in `payload`."""

    def __init__(self, payload=None):
        self.payload = payload
        self.calls = 0
        self.songs = []
        self.result = RequestResult(success=True)
        self.submitted = []

    def now_playing(self):
        self.calls += 1
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def requestable_songs(self):
        if isinstance(self.songs, Exception):
            raise self.songs
        return self.songs

    def submit_request(self, request_id):
        self.submitted.append(request_id)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _song(title, artist='Cesária Évora', song_id=None):
    return {
        'id': song_id or title.lower().replace(' ', '-'),
        'title': title,
        'artist': artist,
        'album': f'{title} (album)',
        'art': f'https://example.com/art/{title.lower().replace(" ", "-")}.jpg',
    }


@pytest.fixture
def make_song():
    return _song


@pytest.fixture
def make_payload():
    """Build a /nowplaying response body."""
    def factory(title='Sodade', sh_id=1, elapsed=42, duration=180, playlist='Default',
                next_title='Petit Pays', history=('Angola', 'Mar Azul')):
        now_playing = {
            'sh_id': sh_id,
            'song': _song(title),
            'elapsed': elapsed,
            'duration': duration,
            'playlist': playlist,
        }
        if next_title:
            now_playing['playing_next'] = {'song': _song(next_title)}
        return {
            'now_playing': now_playing,
            'song_history': [
                {'sh_id': 100 + i, 'song': _song(name)} for i, name in enumerate(history)
            ],
        }
    return factory


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    """Scheduler whose background work runs inline (completion still queued)."""
    return Scheduler(clock=clock, spawn=lambda runner: runner())


@pytest.fixture
def pump(scheduler):
    """Run the scheduler until nothing is left to do right now."""
    def run(max_rounds: int = 20):
        for _ in range(max_rounds):
            if not scheduler.run_pending():
                return
    return run


@pytest.fixture
def advance(clock, pump):
    """Move time forward one second at a time, pumping after each step."""
    def run(seconds: int):
        for _ in range(int(seconds)):
            clock.advance(1.0)
            pump()
    return run


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def api(make_payload):
    return FakeStationAPI(make_payload())
