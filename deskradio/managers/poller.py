"""
Station Poller - Periodic now-playing refresh.

Fetches once at start and then on a fixed cadence. A failed fetch keeps the
last snapshot on screen; the next scheduled tick is the retry, so the UI is
never more than one interval stale once the service recovers.
"""
import time
import logging
from typing import Callable, Optional

from ..models import StationSnapshot, SnapshotError
from ..config import POLL_INTERVAL
from .scheduler import Scheduler, Timer

logger = logging.getLogger(__name__)


class StationPoller:
    """Keeps the latest StationSnapshot and a loading flag."""

    def __init__(self, api, scheduler: Scheduler, interval: float = POLL_INTERVAL,
                 on_snapshot: Optional[Callable[[StationSnapshot], None]] = None):
        """
        Args:
            api: Station client with now_playing() -> Optional[dict]
            scheduler: Loop the poll timer and fetch completions run on
            interval: Seconds between polls
            on_snapshot: Called on the loop after each successful poll
        """
        self.api = api
        self.scheduler = scheduler
        self.interval = interval
        self.on_snapshot = on_snapshot

        self.snapshot: Optional[StationSnapshot] = None
        self.loading = True
        self.failures = 0  # Consecutive
        self.last_success: Optional[float] = None

        self._timer: Optional[Timer] = None
        self._generation = 0
        self._in_flight = False

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self):
        """Poll now and then every interval."""
        if self._timer is not None:
            return
        self._timer = self.scheduler.call_every(self.interval, self.poll, immediate=True)
        logger.info(f'Polling station every {self.interval:.0f}s')

    def stop(self):
        """Stop polling. A fetch still in flight is ignored when it lands."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1
        self._in_flight = False
        logger.debug('Station polling stopped')

    def poll(self):
        """Issue one fetch (skipped while the previous one is still out)."""
        if self._in_flight:
            logger.debug('Previous now-playing fetch still running, skipping tick')
            return
        self._in_flight = True
        generation = self._generation
        self.scheduler.submit(
            self.api.now_playing,
            lambda payload, error: self._on_fetched(generation, payload, error),
        )

    def _on_fetched(self, generation: int, payload, error: Optional[BaseException]):
        if generation != self._generation:
            logger.debug('Discarding now-playing response from a stopped poller')
            return
        self._in_flight = False

        if error is None and payload is None:
            error = ConnectionError('station service unreachable')

        snapshot = None
        if error is None:
            try:
                snapshot = StationSnapshot.from_payload(payload)
            except SnapshotError as e:
                error = e

        self.loading = False

        if error is not None:
            self.failures += 1
            logger.warning(f'Now-playing refresh failed ({self.failures}x), keeping last snapshot: {error}')
            return

        if self.failures:
            logger.info(f'Now-playing refresh recovered after {self.failures} failures')
        self.failures = 0
        self.last_success = time.time()
        self.snapshot = snapshot
        if self.on_snapshot:
            self.on_snapshot(snapshot)
