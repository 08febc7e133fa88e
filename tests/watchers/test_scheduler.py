import threading
import time
from unittest.mock import Mock

import dam_agent.watchers.scheduler as scheduler_module
from dam_agent.errors import CaptureError
from dam_agent.watchers.scheduler import CaptureScheduler


class TestCaptureScheduler:
    """Background capture loop."""

    def test_tick_passes_sample_to_callback(self, make_capture):
        capture = Mock()
        capture.capture.return_value = make_capture("Claude")
        callback = Mock()

        CaptureScheduler(capture).tick(callback)

        callback.assert_called_once_with(capture.capture.return_value)

    def test_tick_survives_capture_failure(self):
        """A failed grab drops the tick without raising"""
        capture = Mock()
        capture.capture.side_effect = CaptureError("no display")
        callback = Mock()

        CaptureScheduler(capture).tick(callback)

        callback.assert_not_called()

    def test_start_ticks_immediately_and_stops(self, make_capture):
        # Given: a scheduler with a long interval
        capture = Mock()
        capture.capture.return_value = make_capture("Claude")
        ticked = threading.Event()
        scheduler = CaptureScheduler(capture)

        # When: it is started
        scheduler.start(lambda sample: ticked.set(), interval=60.0)

        # Then: the first tick does not wait for the interval
        try:
            assert ticked.wait(timeout=5.0)
            assert scheduler.running is True
            assert scheduler.interval == 60.0
        finally:
            scheduler.stop()
        assert scheduler.running is False

    def test_second_start_is_ignored(self, make_capture):
        capture = Mock()
        capture.capture.return_value = make_capture("Claude")
        scheduler = CaptureScheduler(capture)
        scheduler.start(Mock(), interval=60.0)
        try:
            thread = scheduler._thread
            scheduler.start(Mock(), interval=1.0)
            assert scheduler._thread is thread
            assert scheduler.interval == 60.0
        finally:
            scheduler.stop()

    def test_stop_without_start(self):
        scheduler = CaptureScheduler(Mock())
        scheduler.stop()
        assert scheduler.running is False

    def test_restart_after_slow_stop_does_not_revive_old_loop(self, make_capture, monkeypatch):
        """A loop that outlived stop() exits after its tick despite a restart"""
        # Given: a callback slower than the stop join timeout
        monkeypatch.setattr(scheduler_module, "JOIN_TIMEOUT_SECONDS", 0.1)
        capture = Mock()
        capture.capture.return_value = make_capture("Claude")
        ticks = []
        first_tick = threading.Event()

        def slow_callback(sample):
            ticks.append(threading.current_thread())
            first_tick.set()
            time.sleep(0.3)

        scheduler = CaptureScheduler(capture)
        scheduler.start(slow_callback, interval=0.05)
        assert first_tick.wait(timeout=5.0)
        first_thread = scheduler._thread

        # When: it is stopped mid-tick and started again
        scheduler.stop()
        scheduler.start(slow_callback, interval=0.05)
        second_thread = scheduler._thread
        time.sleep(1.0)
        scheduler.stop()

        # Then: the first loop never ticked again
        first_thread.join(2.0)
        second_thread.join(2.0)
        assert first_thread is not second_thread
        assert first_thread.is_alive() is False
        assert ticks.count(first_thread) == 1
        assert ticks.count(second_thread) >= 1
