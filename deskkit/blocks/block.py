"""A status block: a shell command run in a child process whose output is piped back."""

import os
import subprocess
from typing import Optional

from .util import UTF8_MAX_BYTE_COUNT, truncate_utf8

__all__ = ["BlockError", "Block"]

_NUL = b"\0"


class BlockError(Exception):
    """Raised when a block's pipe or command cannot be handled."""


class Block:
    """A command whose first output line is shown in the status.

    The command runs in a forked child, which writes the truncated output to
    a pipe owned by the block. The read end of the pipe is exposed through
    :meth:`fileno` so it can be polled.
    """

    def __init__(self, icon, command, interval, signal, max_output_length):
        self.icon = icon
        self.command = command
        self.interval = interval
        self.signal = signal
        self.max_output_length = max_output_length
        self.output = ""
        self.pid: Optional[int] = None
        self._read_fd: Optional[int] = None
        self._write_fd: Optional[int] = None

    @property
    def buffer_size(self) -> int:
        return self.max_output_length * UTF8_MAX_BYTE_COUNT + 1

    def open(self) -> None:
        """Create the pipe the child writes into."""
        try:
            self._read_fd, self._write_fd = os.pipe()
        except OSError as exc:
            raise BlockError(f'could not create a pipe for "{self.command}" block') from exc

    def close(self) -> None:
        """Close both ends of the pipe."""
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
            raise BlockError(f'could not close "{self.command}" block\'s pipe')

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def fileno(self) -> int:
        """Return the read end of the block's pipe."""
        if self._read_fd is None:
            raise BlockError(f'"{self.command}" block has no open pipe')
        return self._read_fd

    def execute(self, button: int = 0) -> None:
        """Start the command unless a previous run is still pending.

        A non-zero ``button`` is passed to the command as ``BLOCK_BUTTON``.
        """
        if self.pid is not None:
            return
        if self._write_fd is None:
            raise BlockError(f'"{self.command}" block has no open pipe')
        try:
            pid = os.fork()
        except OSError as exc:
            raise BlockError(
                f'could not create a subprocess for "{self.command}" block'
            ) from exc
        if pid == 0:
            code = 1
            try:
                code = self._run_child(button)
            finally:
                os._exit(code)
        self.pid = pid

    def _run_child(self, button: int) -> int:
        write_fd = self._write_fd
        os.close(self._read_fd)
        env = dict(os.environ)
        if button:
            env["BLOCK_BUTTON"] = str(button & 0xFF)
        try:
            result = subprocess.run(
                self.command, shell=True, stdout=subprocess.PIPE, env=env
            )
        except OSError:
            os.write(write_fd, _NUL)
            return 1
        if result.returncode != 0:
            os.write(write_fd, _NUL)
            return 1
        line = result.stdout[: self.buffer_size - 1].split(b"\n", 1)[0]
        text = truncate_utf8(line, self.buffer_size, self.max_output_length)
        os.write(write_fd, text + _NUL)
        return 0

    def update(self) -> None:
        """Read the finished command's output and reap the child."""
        if self.pid is None:
            raise BlockError(f'"{self.command}" block has no running command')
        try:
            data = os.read(self.fileno(), self.buffer_size)
        except OSError as exc:
            raise BlockError(f'could not fetch output of "{self.command}" block') from exc
        try:
            _, status = os.waitpid(self.pid, 0)
        except OSError as exc:
            raise BlockError(
                f'could not obtain exit status for "{self.command}" block'
            ) from exc
        self.pid = None
        if status != 0:
            raise BlockError(f'"{self.command}" block exited with non-zero status')
        self.output = data.split(_NUL, 1)[0].decode("utf-8", "replace")