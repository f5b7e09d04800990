import os
import select
import signal

import pytest

from deskkit.blocks.block import BlockError
from deskkit.blocks.signals import REFRESH_SIGNAL, SIGRTMIN, SignalHandler
from deskkit.blocks.timer import TIMER_SIGNAL


class FakeBlock:
    def __init__(self, signal_offset, command="cmd"):
        self.signal = signal_offset
        self.command = command
        self.executed = []

    def execute(self, button=0):
        self.executed.append(button)


class Recorder:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def __call__(self, *args):
        self.calls.append(args)
        if self.fail:
            raise BlockError("boom")


def make_handler(blocks, refresh=None, timer_cb=None):
    return SignalHandler(blocks, refresh or Recorder(), timer_cb or Recorder())


def test_dispatch_timer_signal_calls_timer_callback():
    blocks = [FakeBlock(1)]
    timer_cb = Recorder()
    handler = make_handler(blocks, timer_cb=timer_cb)
    sentinel = object()
    assert handler.dispatch(TIMER_SIGNAL, 0, sentinel) is True
    assert timer_cb.calls == [(blocks, sentinel)]


def test_dispatch_refresh_signal_calls_refresh_callback():
    blocks = [FakeBlock(1)]
    refresh = Recorder()
    handler = make_handler(blocks, refresh=refresh)
    assert handler.dispatch(REFRESH_SIGNAL, 0, None) is True
    assert refresh.calls == [(blocks,)]


@pytest.mark.parametrize("signum", [signal.SIGTERM, signal.SIGINT])
def test_dispatch_termination_stops(signum):
    handler = make_handler([FakeBlock(1)])
    assert handler.dispatch(signum, 0, None) is False


def test_dispatch_failed_callback_stops():
    handler = make_handler([], refresh=Recorder(fail=True))
    assert handler.dispatch(REFRESH_SIGNAL, 0, None) is False


def test_dispatch_realtime_signal_runs_matching_block_with_button():
    first, second = FakeBlock(3), FakeBlock(5)
    handler = make_handler([first, second])
    assert handler.dispatch(SIGRTMIN + 5, 2, None) is True
    assert first.executed == []
    assert second.executed == [2]


def test_dispatch_button_truncated_to_byte():
    block = FakeBlock(4)
    handler = make_handler([block])
    handler.dispatch(SIGRTMIN + 4, 0x103, None)
    assert block.executed == [3]


def test_open_rejects_unsupported_signal():
    handler = make_handler([FakeBlock(1000)])
    with pytest.raises(ValueError):
        handler.open()


def test_fileno_before_open_raises():
    with pytest.raises(ValueError):
        make_handler([]).fileno()


def _wait(handler):
    ready, _, _ = select.select([handler.fileno()], [], [], 2.0)
    return ready


def test_process_refresh_signal_from_kill():
    refresh = Recorder()
    with make_handler([], refresh=refresh) as handler:
        os.kill(os.getpid(), REFRESH_SIGNAL)
        assert _wait(handler) == [handler.fileno()]
        assert handler.process(None) is True
    assert len(refresh.calls) == 1


def test_process_realtime_signal_runs_block():
    block = FakeBlock(2)
    with make_handler([block]) as handler:
        os.kill(os.getpid(), SIGRTMIN + 2)
        assert _wait(handler) == [handler.fileno()]
        assert handler.process(None) is True
    assert block.executed == [0]


def test_process_terminate_signal_stops():
    with make_handler([]) as handler:
        os.kill(os.getpid(), signal.SIGTERM)
        _wait(handler)
        assert handler.process(None) is False


def test_close_restores_previous_handler():
    before = signal.getsignal(REFRESH_SIGNAL)
    refresh = Recorder()
    handler = make_handler([], refresh=refresh)
    handler.open()
    os.kill(os.getpid(), REFRESH_SIGNAL)
    assert _wait(handler) == [handler.fileno()]
    assert handler.process(None) is True
    handler.close()
    assert len(refresh.calls) == 1
    assert signal.getsignal(REFRESH_SIGNAL) == before