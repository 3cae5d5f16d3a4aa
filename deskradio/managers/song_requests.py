"""
Request Browser - State behind the song requests window.

Loads the list of requestable songs when the window opens, filters it by
the search box and submits requests. Success and error text stay inside the
window; nothing here blocks the rest of the desktop.
"""
import logging
from typing import List, Optional

from ..models import RequestableSong, RequestResult, SnapshotError
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

LOAD_ERROR = 'Could not load available songs.'
SUBMIT_ERROR = 'Could not send request.'
SUBMIT_REJECTED = 'The request could not be made.'
SUBMIT_OK = 'Request sent!'


class RequestBrowser:
    """Searchable list of requestable songs."""

    def __init__(self, api, scheduler: Scheduler):
        self.api = api
        self.scheduler = scheduler

        self.songs: List[RequestableSong] = []
        self.query = ''
        self.loading = False
        self.requesting = False
        self.success = ''
        self.error = ''
        self._generation = 0

    def load(self):
        """(Re)load the requestable songs in the background."""
        self.loading = True
        self.error = ''
        generation = self._generation
        self.scheduler.submit(
            self.api.requestable_songs,
            lambda data, error: self._on_loaded(generation, data, error),
        )

    def _on_loaded(self, generation: int, data, error: Optional[BaseException]):
        if generation != self._generation:
            return
        self.loading = False

        songs = None
        if error is None and isinstance(data, list):
            try:
                songs = [RequestableSong.from_payload(item) for item in data]
            except SnapshotError as e:
                error = e

        if songs is None:
            logger.warning(f'Loading requestable songs failed: {error or "no data"}')
            self.error = LOAD_ERROR
            return

        self.songs = songs
        logger.info(f'Loaded {len(songs)} requestable songs')

    def filtered(self) -> List[RequestableSong]:
        """Songs whose title or artist contains the query (case-insensitive)."""
        needle = self.query.strip().lower()
        if not needle:
            return list(self.songs)
        return [
            item for item in self.songs
            if needle in item.song.title.lower() or needle in item.song.artist.lower()
        ]

    def set_query(self, text: str):
        self.query = text

    def submit(self, request_id: str) -> bool:
        """Request a song. Returns False if another request is still running."""
        if self.requesting:
            logger.debug(f'Ignoring request {request_id}: previous one still running')
            return False

        self.requesting = True
        self.success = ''
        self.error = ''
        generation = self._generation
        logger.info(f'Requesting song {request_id}')
        self.scheduler.submit(
            lambda: self.api.submit_request(request_id),
            lambda result, error: self._on_submitted(generation, request_id, result, error),
        )
        return True

    def _on_submitted(self, generation: int, request_id: str, result: Optional[RequestResult],
                      error: Optional[BaseException]):
        if generation != self._generation:
            return
        self.requesting = False

        if error is not None or result is None:
            logger.warning(f'Request {request_id} failed: {error or "no response"}')
            self.error = SUBMIT_ERROR
        elif result.success:
            self.success = SUBMIT_OK
        else:
            logger.info(f'Request {request_id} rejected: {result.message}')
            self.error = result.message or SUBMIT_REJECTED

    def cancel(self):
        """Forget in-flight loads and submissions (teardown)."""
        self._generation += 1
        self.loading = False
        self.requesting = False
