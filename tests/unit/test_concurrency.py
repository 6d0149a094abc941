"""
Tests for nexus_match.core.matching.concurrency: CancellationToken and PollScheduler.
"""

import threading
import time

import pytest

from nexus_match.core.exceptions import MatchCancelledError
from nexus_match.core.matching import CancellationToken, PollScheduler


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# ── CancellationToken ───────────────────────────────────────────────────────


class TestCancellationToken:
    def test_initially_active(self):
        token = CancellationToken()
        assert not token.is_cancelled
        assert token.reason is None
        token.raise_if_cancelled()

    def test_cancel_sets_reason(self):
        token = CancellationToken()
        token.cancel("superseded")
        assert token.is_cancelled
        assert token.reason == "superseded"

    def test_first_reason_wins(self):
        token = CancellationToken()
        token.cancel("timeout")
        token.cancel("session closed")
        assert token.reason == "timeout"

    def test_raise_if_cancelled(self):
        token = CancellationToken()
        token.cancel("timeout")
        with pytest.raises(MatchCancelledError, match="timeout"):
            token.raise_if_cancelled()

    def test_wait_returns_when_cancelled_from_other_thread(self):
        token = CancellationToken()
        threading.Timer(0.02, token.cancel).start()
        assert token.wait(timeout=5.0)

    def test_wait_times_out(self):
        assert not CancellationToken().wait(timeout=0.01)


# ── PollScheduler ───────────────────────────────────────────────────────────


class TestPollScheduler:
    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PollScheduler(0, lambda: None)

    def test_calls_repeatedly_until_stopped(self):
        calls = []
        scheduler = PollScheduler(0.01, lambda: calls.append(1))
        scheduler.start()
        try:
            assert _wait_until(lambda: len(calls) >= 3)
            assert scheduler.is_running
        finally:
            scheduler.stop(timeout=1.0)
        assert not scheduler.is_running

        count = len(calls)
        time.sleep(0.05)
        assert len(calls) == count

    def test_start_is_idempotent(self):
        scheduler = PollScheduler(0.01, lambda: None)
        scheduler.start()
        thread = scheduler._thread
        scheduler.start()
        try:
            assert scheduler._thread is thread
        finally:
            scheduler.stop(timeout=1.0)

    def test_restart_after_stop(self):
        calls = []
        scheduler = PollScheduler(0.01, lambda: calls.append(1))
        scheduler.start()
        scheduler.stop(timeout=1.0)
        calls.clear()

        scheduler.start()
        try:
            assert _wait_until(lambda: len(calls) >= 1)
        finally:
            scheduler.stop(timeout=1.0)

    def test_callback_errors_do_not_stop_schedule(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        scheduler = PollScheduler(0.01, flaky)
        scheduler.start()
        try:
            assert _wait_until(lambda: len(calls) >= 3)
        finally:
            scheduler.stop(timeout=1.0)

    def test_stop_from_callback(self):
        holder = {}

        def stop_self():
            holder["scheduler"].stop()

        scheduler = PollScheduler(0.01, stop_self)
        holder["scheduler"] = scheduler
        scheduler.start()
        assert _wait_until(lambda: not scheduler.is_running)

    def test_stop_before_start(self):
        PollScheduler(0.01, lambda: None).stop()
