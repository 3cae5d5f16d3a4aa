"""
Scheduler - Cooperative timers and background work for the main loop.

Everything that mutates application state runs on the thread that calls
run_pending() (the pygame main loop). Blocking work is pushed to daemon
threads and its completion is queued back onto that thread.
"""
import time
import queue
import logging
from typing import Callable, List, Optional

from ..utils import run_async

logger = logging.getLogger(__name__)


class Timer:
    """Handle for a scheduled callback."""

    def __init__(self, scheduler: 'Scheduler', due: float, callback: Callable[[], None],
                 interval: Optional[float] = None):
        self._scheduler = scheduler
        self.due = due
        self.callback = callback
        self.interval = interval  # None = one-shot
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self):
        """Cancel the timer. Safe to call more than once."""
        if not self.cancelled:
            self.cancelled = True
            self._scheduler._discard(self)


class Scheduler:
    """Single-threaded timer wheel with a thread-safe completion inbox."""

    def __init__(self, clock: Callable[[], float] = time.monotonic,
                 spawn: Callable[[Callable[[], None]], None] = run_async):
        """
        Args:
            clock: Monotonic time source (seconds)
            spawn: Runs a zero-argument callable off the loop thread
        """
        self._clock = clock
        self._spawn = spawn
        self._timers: List[Timer] = []
        self._inbox: 'queue.SimpleQueue[Callable[[], None]]' = queue.SimpleQueue()
        self.closed = False

    def now(self) -> float:
        return self._clock()

    # ============================================
    # TIMERS (loop thread only)
    # ============================================

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        """Run callback once after delay seconds."""
        timer = Timer(self, self.now() + delay, callback)
        self._add(timer)
        return timer

    def call_every(self, interval: float, callback: Callable[[], None],
                   immediate: bool = False) -> Timer:
        """Run callback every interval seconds, first run now if immediate."""
        if interval <= 0:
            raise ValueError(f'Interval must be positive, got {interval}')
        due = self.now() if immediate else self.now() + interval
        timer = Timer(self, due, callback, interval)
        self._add(timer)
        return timer

    def _add(self, timer: Timer):
        if self.closed:
            timer.cancelled = True
            logger.debug('Scheduler closed, timer not added')
            return
        self._timers.append(timer)

    def _discard(self, timer: Timer):
        try:
            self._timers.remove(timer)
        except ValueError:
            pass

    def next_deadline(self) -> Optional[float]:
        """Earliest due time of pending timers, or None."""
        if not self._timers:
            return None
        return min(t.due for t in self._timers)

    # ============================================
    # BACKGROUND WORK
    # ============================================

    def call_soon_threadsafe(self, callback: Callable[[], None]):
        """Queue callback for the loop thread. Callable from any thread."""
        if self.closed:
            return
        self._inbox.put(callback)

    def submit(self, work: Callable[[], object],
               on_done: Callable[[object, Optional[BaseException]], None]):
        """
        Run blocking work off the loop, then on_done(result, error) on the loop.

        Exactly one of result/error is meaningful: error is None on success.
        """
        def runner():
            try:
                result = work()
            except Exception as e:
                error = e
                self.call_soon_threadsafe(lambda: on_done(None, error))
            else:
                self.call_soon_threadsafe(lambda: on_done(result, None))

        self._spawn(runner)

    # ============================================
    # LOOP
    # ============================================

    def run_pending(self) -> int:
        """Run queued completions, then due timers. Returns callbacks run."""
        ran = 0

        while not self.closed:
            try:
                callback = self._inbox.get_nowait()
            except queue.Empty:
                break
            self._run(callback)
            ran += 1

        now = self.now()
        due = sorted((t for t in self._timers if t.due <= now), key=lambda t: t.due)
        for timer in due:
            if timer.cancelled or self.closed:
                continue
            if timer.repeating:
                # Fire once even if several intervals were missed
                timer.due += timer.interval
                if timer.due <= now:
                    timer.due = now + timer.interval
            else:
                self._discard(timer)
                timer.cancelled = True
            self._run(timer.callback)
            ran += 1

        return ran

    def _run(self, callback: Callable[[], None]):
        try:
            callback()
        except Exception as e:
            logger.error(f'Scheduled callback failed: {e}', exc_info=True)

    def close(self):
        """Cancel every timer and drop queued and future completions."""
        self.closed = True
        for timer in list(self._timers):
            timer.cancelled = True
        self._timers.clear()
        while True:
            try:
                self._inbox.get_nowait()
            except queue.Empty:
                break
        logger.debug('Scheduler closed')
