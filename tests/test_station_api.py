"""
Tests for the station REST client.
"""
from unittest.mock import MagicMock, patch

import requests

from deskradio.api import StationAPI, MockStationAPI
from deskradio.models import StationSnapshot


def make_response(data=None, status=200, json_error=False):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    if json_error:
        resp.json.side_effect = ValueError('No JSON object could be decoded')
    else:
        resp.json.return_value = data
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f'{status} error')
    return resp


class TestNowPlaying:
    """Tests for StationAPI.now_playing."""

    def test_url_and_payload(self, make_payload):
        """The station name is part of the now-playing URL."""
        api = StationAPI('https://radio.example.com/api/', 'cesaria')
        payload = make_payload()

        with patch.object(api.session, 'get', return_value=make_response(payload)) as get:
            assert api.now_playing() == payload

        assert get.call_args[0][0] == 'https://radio.example.com/api/nowplaying/cesaria'

    def test_connection_error(self):
        """Network failures return None instead of raising."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')

        with patch.object(api.session, 'get', side_effect=requests.ConnectionError('down')):
            assert api.now_playing() is None

    def test_http_error(self):
        """Error statuses return None."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')

        with patch.object(api.session, 'get', return_value=make_response(status=502)):
            assert api.now_playing() is None

    def test_not_json(self):
        """A non-JSON body returns None."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')

        with patch.object(api.session, 'get', return_value=make_response(json_error=True)):
            assert api.now_playing() is None


class TestRequests:
    """Tests for the requestable songs list and submitting requests."""

    def test_requestable_songs(self):
        api = StationAPI('https://radio.example.com/api', 'cesaria')
        songs = [{'request_id': 'r1', 'song': {'title': 'Sodade'}}]

        with patch.object(api.session, 'get', return_value=make_response(songs)) as get:
            assert api.requestable_songs() == songs

        assert get.call_args[0][0] == 'https://radio.example.com/api/station/cesaria/requests'

    def test_requestable_songs_wrong_shape(self):
        """A non-list body yields an empty list."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')

        with patch.object(api.session, 'get', return_value=make_response({'error': 'nope'})):
            assert api.requestable_songs() == []

    def test_submit_success(self):
        """A successful request posts to the request URL."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')
        resp = make_response({'success': True, 'message': 'Queued'})

        with patch.object(api.session, 'post', return_value=resp) as post:
            result = api.submit_request('r1')

        assert result.success
        assert post.call_args[0][0] == 'https://radio.example.com/api/station/cesaria/request/r1'

    def test_submit_rejected_message(self):
        """The service's explanation is passed through."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')
        resp = make_response({'success': False, 'message': 'Song was played recently.'}, status=400)

        with patch.object(api.session, 'post', return_value=resp):
            result = api.submit_request('r1')

        assert not result.success
        assert result.message == 'Song was played recently.'

    def test_submit_unreachable(self):
        """Network failures return None."""
        api = StationAPI('https://radio.example.com/api', 'cesaria')

        with patch.object(api.session, 'post', side_effect=requests.Timeout('slow')):
            assert api.submit_request('r1') is None


class TestMockStationAPI:
    """Tests for the canned mock service."""

    def test_payload_parses(self):
        """Mock responses are valid now-playing payloads."""
        snapshot = StationSnapshot.from_payload(MockStationAPI().now_playing())

        assert snapshot.current_song.title == 'Sodade'
        assert len(snapshot.history) == 3

    def test_song_advances(self):
        """Every fourth poll moves to the next song."""
        api = MockStationAPI()
        titles = [api.now_playing()['now_playing']['song']['title'] for _ in range(5)]

        assert titles[:4] == ['Sodade'] * 4
        assert titles[4] == 'Petit Pays'
