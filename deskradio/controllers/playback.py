"""
Playback Controller - Owns play/mute intent and the audio stream.

Nothing else touches the audio resource. Every intent change is followed by
reconcile(), which derives the resource state from the current intent only,
so the latest intent always wins no matter how requests interleave.

A failed start is logged and the intent stays "playing": the user sees the
pause button and the next tick (or a second press) retries.
"""
import logging
from typing import Optional

from ..models import PlaybackIntent
from ..managers.scheduler import Scheduler
from ..config import STREAM_RETRY_INTERVAL

logger = logging.getLogger(__name__)


class PlaybackError(RuntimeError):
    """The audio resource refused to start."""


class NullStream:
    """Silent audio resource for mock mode."""

    def __init__(self, url: str = ''):
        self.url = url
        self.muted = False
        self.playing = False

    def play(self):
        logger.info(f'[mock] play {self.url}')
        self.playing = True

    def pause(self):
        if self.playing:
            logger.info('[mock] pause')
        self.playing = False

    def release(self):
        self.playing = False


class PlaybackController:
    """Reconciles PlaybackIntent against a single audio resource."""

    def __init__(self, audio, scheduler: Scheduler, retry_interval: float = STREAM_RETRY_INTERVAL):
        """
        Args:
            audio: Resource with play() (may raise), pause(), muted, release()
            scheduler: Loop used to start playback off the main thread
            retry_interval: Minimum seconds between automatic start retries
        """
        self.audio = audio
        self.scheduler = scheduler
        self.retry_interval = retry_interval
        self.intent = PlaybackIntent()
        self._last_attempt = float('-inf')

        self._started = False     # Resource is (believed to be) playing
        self._starting = False    # A play() call is in flight
        self._generation = 0
        self.start_failures = 0
        self.last_error: Optional[str] = None

    @property
    def playing(self) -> bool:
        return self.intent.playing

    @property
    def muted(self) -> bool:
        return self.intent.muted

    # ============================================
    # INTENT
    # ============================================

    def toggle_play(self):
        self.intent.playing = not self.intent.playing
        logger.info(f'Playback intent: {"play" if self.intent.playing else "pause"}')
        self.reconcile()

    def toggle_mute(self):
        self.intent.muted = not self.intent.muted
        logger.info(f'Mute: {self.intent.muted}')
        self.reconcile()

    def stop(self):
        """Force playback off (primary window closed, teardown)."""
        if self.intent.playing:
            logger.info('Playback stopped')
        self.intent.playing = False
        self.reconcile()

    # ============================================
    # RECONCILIATION
    # ============================================

    def reconcile(self):
        """Drive the audio resource to match the current intent."""
        self.audio.muted = self.intent.muted

        if self.intent.playing:
            if not self._started and not self._starting:
                self._start()
        elif self._starting:
            # play() may already have run on the worker; _on_started pauses it
            logger.debug('Pause requested during start, deferring')
        else:
            if self._started:
                logger.debug('Pausing stream')
            self.audio.pause()
            self._started = False

    def _start(self):
        self._starting = True
        self._last_attempt = self.scheduler.now()
        generation = self._generation
        logger.debug('Starting stream')
        self.scheduler.submit(
            self.audio.play,
            lambda result, error: self._on_started(generation, error),
        )

    def _on_started(self, generation: int, error: Optional[BaseException]):
        if generation != self._generation:
            return
        self._starting = False

        if error is not None:
            self.on_stream_error(error)
            return

        self.start_failures = 0
        self.last_error = None
        self._started = True
        # Intent may have flipped any number of times while starting
        self.reconcile()

    def on_stream_error(self, error):
        """Record a start failure or an asynchronous stream error. Intent is kept."""
        self._started = False
        self.start_failures += 1
        self.last_error = str(error)
        logger.warning(f'Playback failed ({self.start_failures}x), keeping play intent: {error}')

    def retry_if_stalled(self):
        """Re-attempt a start if playback is wanted but not running."""
        if not self.intent.playing or self._started or self._starting:
            return
        if self.scheduler.now() - self._last_attempt < self.retry_interval:
            return
        logger.debug('Retrying stream start')
        self._start()

    def release(self):
        """Stop and free the audio resource. Late start completions are ignored."""
        self.intent.playing = False
        self._generation += 1
        self._starting = False
        self._started = False
        self.audio.pause()
        self.audio.release()
