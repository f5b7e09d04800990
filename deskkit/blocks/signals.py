"""Routing of timer, refresh, termination and per-block signals."""

import os
import signal
import sys
from typing import Callable, Dict, List, Optional, Sequence

from .block import BlockError
from .timer import TIMER_SIGNAL

__all__ = [
    "REFRESH_SIGNAL",
    "SIGRTMIN",
    "SIGRTMAX",
    "SignalHandler",
]

REFRESH_SIGNAL = signal.SIGUSR1
SIGRTMIN = int(getattr(signal, "SIGRTMIN", 34))
SIGRTMAX = int(getattr(signal, "SIGRTMAX", 64))

_TERMINATION = (signal.SIGTERM, signal.SIGINT)


def _ignore(signum, frame) -> None:
    """Python-level handler; the signal itself is read from the wakeup pipe."""


class SignalHandler:
    """Turns incoming signals into readable bytes and dispatches them.

    ``refresh_callback(blocks)`` runs on the refresh signal and
    ``timer_callback(blocks, timer)`` on the timer signal. A realtime signal
    ``SIGRTMIN + n`` runs the block whose ``signal`` is ``n``.
    """

    def __init__(self, blocks, refresh_callback, timer_callback):
        self.blocks: Sequence = blocks
        self.refresh_callback: Callable = refresh_callback
        self.timer_callback: Callable = timer_callback
        self._read_fd: Optional[int] = None
        self._write_fd: Optional[int] = None
        self._previous_handlers: Dict[int, object] = {}
        self._previous_wakeup: Optional[int] = None

    def _handled_signals(self) -> List[int]:
        handled = [int(REFRESH_SIGNAL), int(TIMER_SIGNAL), *map(int, _TERMINATION)]
        for block in self.blocks:
            if block.signal > 0:
                signum = SIGRTMIN + block.signal
                if signum > SIGRTMAX:
                    raise ValueError(
                        "invalid or unsupported signal specified for "
                        f'"{block.command}" block'
                    )
                handled.append(signum)
        return handled

    def open(self) -> None:
        """Install handlers and route signal numbers into a pipe."""
        handled = self._handled_signals()
        read_fd, write_fd = os.pipe()
        os.set_blocking(read_fd, False)
        os.set_blocking(write_fd, False)
        self._read_fd, self._write_fd = read_fd, write_fd
        try:
            self._previous_wakeup = signal.set_wakeup_fd(write_fd)
            for signum in handled:
                if signum not in self._previous_handlers:
                    self._previous_handlers[signum] = signal.signal(signum, _ignore)
            for signum in range(SIGRTMIN, SIGRTMAX + 1):
                if signum in self._previous_handlers:
                    continue
                try:
                    self._previous_handlers[signum] = signal.signal(signum, signal.SIG_IGN)
                except (OSError, ValueError):
                    continue
        except BaseException:
            self.close()
            raise

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def fileno(self) -> int:
        """Return the descriptor that becomes readable when a signal arrives."""
        if self._read_fd is None:
            raise ValueError("signal handler is not open")
        return self._read_fd

    def dispatch(self, signum, value, timer) -> bool:
        """Act on one signal; return whether the event loop should keep running."""
        try:
            if signum == TIMER_SIGNAL:
                self.timer_callback(self.blocks, timer)
                return True
            if signum == REFRESH_SIGNAL:
                self.refresh_callback(self.blocks)
                return True
        except BlockError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return False
        if signum in _TERMINATION:
            return False

        for block in self.blocks:
            if block.signal == signum - SIGRTMIN:
                try:
                    block.execute(value & 0xFF)
                except BlockError as exc:
                    print(f"error: {exc}", file=sys.stderr)
                break
        return True

    def process(self, timer) -> bool:
        """Read one pending signal and dispatch it."""
        try:
            data = os.read(self.fileno(), 1)
        except BlockingIOError:
            return True
        if not data:
            return True
        return self.dispatch(data[0], 0, timer)

    def close(self) -> None:
        """Restore the previous handlers and close the pipe."""
        for signum, previous in self._previous_handlers.items():
            try:
                signal.signal(signum, previous)
            except (OSError, ValueError, TypeError):
                continue
        self._previous_handlers = {}
        if self._previous_wakeup is not None:
            signal.set_wakeup_fd(self._previous_wakeup)
            self._previous_wakeup = None
        failed = False
        for fd in (self._read_fd, self._write_fd):
            if fd is None:
                continue
            try:
                os.close(fd)
            except OSError:
                failed = True
        self._read_fd = self._write_fd = None
        if failed:
            raise OSError("could not close signal file descriptor")