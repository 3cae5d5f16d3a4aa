"""
Station API Client - REST client for the radio station service.
"""
import logging
from typing import Optional, List

import requests

from ..models import RequestResult
from ..config import HTTP_TIMEOUT, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


class StationAPI:
    """Direct REST API client for an AzuraCast-style station service."""

    def __init__(self, base_url: str, station: str):
        self.base_url = base_url.rstrip('/')
        self.station = station
        self.session = requests.Session()
        self.session.headers['Accept'] = 'application/json'

    def now_playing(self) -> Optional[dict]:
        """Get the now-playing block and song history. None on failure."""
        try:
            resp = self.session.get(f'{self.base_url}/nowplaying/{self.station}', timeout=HTTP_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.debug(f'Now playing request failed: {e}')
            return None
        except ValueError as e:
            logger.warning(f'Now playing response is not JSON: {e}')
            return None

    def requestable_songs(self) -> Optional[List[dict]]:
        """Get songs listeners may request. None on failure."""
        try:
            resp = self.session.get(
                f'{self.base_url}/station/{self.station}/requests',
                timeout=HTTP_TIMEOUT
            )
            resp.raise_for_status()
            data = resp.json()
            return data if isinstance(data, list) else []
        except requests.RequestException as e:
            logger.debug(f'Requestable songs request failed: {e}')
            return None
        except ValueError as e:
            logger.warning(f'Requestable songs response is not JSON: {e}')
            return None

    def submit_request(self, request_id: str) -> Optional[RequestResult]:
        """Request a song. None when the service could not be reached."""
        try:
            resp = self.session.post(
                f'{self.base_url}/station/{self.station}/request/{request_id}',
                json={},
                timeout=REQUEST_TIMEOUT
            )
            data = resp.json()
        except requests.RequestException as e:
            logger.error(f'Request error for song {request_id}: {e}')
            return None
        except ValueError:
            logger.warning(f'Request {request_id}: non-JSON response ({resp.status_code})')
            return RequestResult(success=False)

        if not isinstance(data, dict):
            return RequestResult(success=False)
        return RequestResult(success=bool(data.get('success')), message=data.get('message') or '')

    def is_connected(self) -> bool:
        """Check if the station service is reachable."""
        try:
            resp = self.session.get(f'{self.base_url}/nowplaying/{self.station}', timeout=1)
            return resp.ok
        except requests.RequestException:
            return False


class MockStationAPI:
    """Canned station data for UI testing (--mock)."""

    SONGS = [
        {'id': 'a1', 'title': 'Sodade', 'artist': 'Cesária Évora', 'album': 'Miss Perfumado', 'art': ''},
        {'id': 'a2', 'title': 'Petit Pays', 'artist': 'Cesária Évora', 'album': 'Cabo Verde', 'art': ''},
        {'id': 'a3', 'title': 'Angola', 'artist': 'Cesária Évora', 'album': 'Cesária', 'art': ''},
        {'id': 'a4', 'title': 'Mar Azul', 'artist': 'Cesária Évora', 'album': 'Mar Azul', 'art': ''},
    ]

    def __init__(self):
        self._calls = 0

    def now_playing(self) -> dict:
        # Advance one song every four polls (~1 minute)
        index = (self._calls // 4) % len(self.SONGS)
        elapsed = (self._calls % 4) * 15
        self._calls += 1
        history = [
            {'sh_id': 1000 + index - i, 'song': self.SONGS[(index - i) % len(self.SONGS)]}
            for i in range(1, len(self.SONGS))
        ]
        return {
            'now_playing': {
                'sh_id': 1000 + index,
                'song': self.SONGS[index],
                'elapsed': elapsed,
                'duration': 60,
                'playlist': 'Default',
                'playing_next': {'song': self.SONGS[(index + 1) % len(self.SONGS)]},
            },
            'song_history': history,
        }

    def requestable_songs(self) -> List[dict]:
        return [{'request_id': f'r{i}', 'song': song} for i, song in enumerate(self.SONGS)]

    def submit_request(self, request_id: str) -> RequestResult:
        logger.info(f'[mock] request {request_id}')
        return RequestResult(success=True)

    def is_connected(self) -> bool:
        return True
