"""
Tests for the playback controller (intent reconciliation).
"""
from deskradio.controllers import PlaybackController, NullStream
from deskradio.managers.scheduler import Scheduler
from conftest import DeferredSpawner


class TestIntent:
    """Tests for play and mute toggles."""

    def test_play_starts_stream(self, audio, scheduler, pump):
        """Toggling play on starts the audio resource."""
        playback = PlaybackController(audio, scheduler)

        playback.toggle_play()
        pump()

        assert playback.playing
        assert audio.playing
        assert audio.play_calls == 1

    def test_pause_stops_stream(self, audio, scheduler, pump):
        """Toggling play off pauses the audio resource."""
        playback = PlaybackController(audio, scheduler)
        playback.toggle_play()
        pump()

        playback.toggle_play()

        assert not playback.playing
        assert not audio.playing

    def test_mute_applied_regardless_of_play_state(self, audio, scheduler):
        """The muted flag is pushed to the resource even while paused."""
        playback = PlaybackController(audio, scheduler)

        playback.toggle_mute()
        assert audio.muted is True

        playback.toggle_mute()
        assert audio.muted is False

    def test_stop_forces_pause(self, audio, scheduler, pump):
        """stop() turns the intent off no matter what it was."""
        playback = PlaybackController(audio, scheduler)
        playback.toggle_play()
        pump()

        playback.stop()
        playback.stop()

        assert not playback.playing
        assert not audio.playing


class TestStartFailures:
    """Tests for a stream that refuses to start."""

    def test_failure_keeps_intent(self, audio, scheduler, pump, caplog):
        """A rejected start is logged and the intent stays 'playing'."""
        audio.fail = True
        playback = PlaybackController(audio, scheduler)

        playback.toggle_play()
        pump()

        assert playback.playing
        assert not audio.playing
        assert playback.start_failures == 1
        assert 'autoplay blocked' in playback.last_error
        assert 'Playback failed' in caplog.text

    def test_retry_after_interval(self, audio, scheduler, clock, pump):
        """retry_if_stalled waits for the retry interval before trying again."""
        audio.fail = True
        playback = PlaybackController(audio, scheduler, retry_interval=5.0)
        playback.toggle_play()
        pump()

        clock.advance(1.0)
        playback.retry_if_stalled()
        pump()
        assert audio.play_calls == 1

        audio.fail = False
        clock.advance(5.0)
        playback.retry_if_stalled()
        pump()

        assert audio.play_calls == 2
        assert audio.playing
        assert playback.last_error is None

    def test_no_retry_when_paused(self, audio, scheduler, clock, pump):
        """Nothing is retried once the user paused."""
        audio.fail = True
        playback = PlaybackController(audio, scheduler)
        playback.toggle_play()
        pump()
        playback.toggle_play()

        clock.advance(60.0)
        playback.retry_if_stalled()
        pump()

        assert audio.play_calls == 1


class TestOrdering:
    """Tests for interleaved intent changes."""

    def test_pause_during_start_wins(self, audio, clock):
        """Pausing while a start is in flight leaves the stream paused."""
        spawner = DeferredSpawner()
        scheduler = Scheduler(clock=clock, spawn=spawner)
        playback = PlaybackController(audio, scheduler)

        playback.toggle_play()
        playback.toggle_play()
        spawner.run_all()
        scheduler.run_pending()

        assert not playback.playing
        assert not audio.playing

    def test_double_press_starts_once(self, audio, clock):
        """play/pause/play before the start lands issues a single play()."""
        spawner = DeferredSpawner()
        scheduler = Scheduler(clock=clock, spawn=spawner)
        playback = PlaybackController(audio, scheduler)

        playback.toggle_play()
        playback.toggle_play()
        playback.toggle_play()
        spawner.run_all()
        scheduler.run_pending()

        assert playback.playing
        assert audio.playing
        assert audio.play_calls == 1

    def test_quick_double_press_keeps_playing(self, audio, scheduler, clock):
        """play/pause/play while the started stream is still unconfirmed ends up audible."""
        playback = PlaybackController(audio, scheduler)

        # Inline worker: play() has already run when the pause arrives
        playback.toggle_play()
        playback.toggle_play()
        playback.toggle_play()
        scheduler.run_pending()

        for _ in range(10):
            clock.advance(1.0)
            playback.retry_if_stalled()
            scheduler.run_pending()

        assert playback.playing
        assert audio.playing
        assert audio.play_calls == 1

    def test_pause_after_worker_started_wins(self, audio, scheduler):
        """A pause landing after play() ran but before completion silences the stream."""
        playback = PlaybackController(audio, scheduler)

        playback.toggle_play()
        assert audio.playing
        playback.toggle_play()
        scheduler.run_pending()

        assert not playback.playing
        assert not audio.playing

    def test_release_ignores_late_start(self, audio, clock):
        """A start completing after release() does not revive playback."""
        spawner = DeferredSpawner()
        scheduler = Scheduler(clock=clock, spawn=spawner)
        playback = PlaybackController(audio, scheduler)
        playback.toggle_play()

        playback.release()
        spawner.run_all()
        scheduler.run_pending()

        assert audio.released
        assert not playback.playing
        assert not playback._started


class TestNullStream:
    """Tests for the mock-mode audio resource."""

    def test_play_pause(self, scheduler, pump):
        """NullStream tracks play state without any audio."""
        stream = NullStream('http://example.com/radio.mp3')
        playback = PlaybackController(stream, scheduler)

        playback.toggle_play()
        pump()
        assert stream.playing

        playback.toggle_play()
        assert not stream.playing
