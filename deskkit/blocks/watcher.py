"""Waiting for block output and incoming signals."""

import select
from typing import Dict, List

__all__ = ["Watcher"]


class Watcher:
    """Polls the blocks' pipes and the signal descriptor for input."""

    def __init__(self, blocks, signal_fd):
        if signal_fd is None or signal_fd < 0:
            raise ValueError("invalid signal file descriptor passed to watcher")
        self.signal_fd = signal_fd
        self._poller = select.poll()
        self._indices: Dict[int, int] = {}
        for index, block in enumerate(blocks):
            fd = block.fileno()
            if fd < 0:
                raise ValueError("invalid block file descriptors passed to watcher")
            self._indices[fd] = index
            self._poller.register(fd, select.POLLIN)
        self._poller.register(signal_fd, select.POLLIN)
        self.got_signal = False
        self.active_blocks: List[int] = []

    def poll(self, timeout_ms=-1) -> List[int]:
        """Wait for input; return the indices of blocks with output ready.

        ``got_signal`` tells afterwards whether a signal is pending.
        A negative timeout waits without limit.
        """
        timeout = None if timeout_ms is None or timeout_ms < 0 else timeout_ms
        events = self._poller.poll(timeout)
        readable = {fd for fd, mask in events if mask & select.POLLIN}
        self.got_signal = self.signal_fd in readable
        self.active_blocks = sorted(
            index for fd, index in self._indices.items() if fd in readable
        )
        return self.active_blocks