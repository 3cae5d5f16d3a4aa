"""
Tests for the station poller.
"""
from deskradio.managers.poller import StationPoller
from deskradio.managers.scheduler import Scheduler
from conftest import DeferredSpawner, FakeStationAPI


class TestPolling:
    """Tests for fetch cadence and snapshot replacement."""

    def test_loading_until_first_response(self, api, scheduler, pump):
        """loading is True until the first fetch settles."""
        poller = StationPoller(api, scheduler, interval=15)
        assert poller.loading

        poller.start()
        pump()

        assert not poller.loading
        assert poller.snapshot.current_song.title == 'Sodade'
        assert api.calls == 1

    def test_fetches_every_interval(self, api, scheduler, advance, pump):
        """After the initial fetch, one fetch per interval."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()

        advance(14)
        assert api.calls == 1

        advance(1)
        assert api.calls == 2

        advance(30)
        assert api.calls == 4

    def test_snapshot_replaced_wholesale(self, api, scheduler, advance, pump, make_payload):
        """A newer response replaces every field of the snapshot."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()

        api.payload = make_payload(title='Angola', sh_id=2, history=())
        advance(15)

        assert poller.snapshot.current_song.title == 'Angola'
        assert poller.snapshot.history == []

    def test_on_snapshot_called(self, api, scheduler, pump):
        """Each successful poll is reported to on_snapshot."""
        seen = []
        poller = StationPoller(api, scheduler, interval=15, on_snapshot=seen.append)
        poller.start()
        pump()

        assert len(seen) == 1
        assert seen[0] is poller.snapshot


class TestFailures:
    """Tests for failed polls keeping the last snapshot."""

    def test_unreachable_keeps_previous(self, api, scheduler, advance, pump):
        """A None response keeps the last good snapshot."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()
        previous = poller.snapshot

        api.payload = None
        advance(15)

        assert poller.snapshot is previous
        assert poller.failures == 1
        assert not poller.loading

    def test_exception_keeps_previous(self, api, scheduler, advance, pump):
        """An exception from the client is treated like a failed poll."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()
        previous = poller.snapshot

        api.payload = ConnectionError('reset by peer')
        advance(15)

        assert poller.snapshot is previous
        assert poller.failures == 1

    def test_malformed_payload_keeps_previous(self, api, scheduler, advance, pump):
        """A payload that does not parse is a failure, not a crash."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()
        previous = poller.snapshot

        api.payload = {'now_playing': 'garbage'}
        advance(15)

        assert poller.snapshot is previous

    def test_first_poll_failure_clears_loading(self, scheduler, pump, caplog):
        """A failing first poll ends loading with no snapshot."""
        poller = StationPoller(FakeStationAPI(None), scheduler, interval=15)
        poller.start()
        pump()

        assert not poller.loading
        assert poller.snapshot is None
        assert 'keeping last snapshot' in caplog.text

    def test_recovery_resets_failures(self, api, scheduler, advance, pump, make_payload):
        """The next scheduled tick is the retry."""
        poller = StationPoller(api, scheduler, interval=15)
        api.payload = None
        poller.start()
        pump()
        assert poller.failures == 1

        api.payload = make_payload()
        advance(15)

        assert poller.failures == 0
        assert poller.snapshot is not None


class TestLifecycle:
    """Tests for stopping and overlapping fetches."""

    def test_stop_halts_polling(self, api, scheduler, advance, pump):
        """No fetches are issued after stop()."""
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        pump()

        poller.stop()
        advance(60)

        assert api.calls == 1
        assert not poller.running

    def test_late_response_after_stop_ignored(self, clock, api):
        """A fetch landing after stop() does not touch state."""
        spawner = DeferredSpawner()
        scheduler = Scheduler(clock=clock, spawn=spawner)
        seen = []
        poller = StationPoller(api, scheduler, interval=15, on_snapshot=seen.append)
        poller.start()
        scheduler.run_pending()

        poller.stop()
        spawner.run_all()
        scheduler.run_pending()

        assert poller.snapshot is None
        assert seen == []

    def test_tick_skipped_while_in_flight(self, clock, api):
        """A slow fetch is not stacked with another one."""
        spawner = DeferredSpawner()
        scheduler = Scheduler(clock=clock, spawn=spawner)
        poller = StationPoller(api, scheduler, interval=15)
        poller.start()
        scheduler.run_pending()

        clock.advance(15)
        scheduler.run_pending()

        assert len(spawner.pending) == 1
