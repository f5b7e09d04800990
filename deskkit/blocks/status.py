"""Assembling block outputs into the status line and publishing it."""

import sys

from .config import StatusConfig

__all__ = ["Status"]


class Status:
    """The combined status text, with the previous value kept for change detection."""

    def __init__(self, blocks, config=None):
        self.blocks = blocks
        self.config = config if config is not None else StatusConfig()
        self.current = ""
        self.previous = ""

    def _compose(self) -> str:
        config = self.config
        parts = []
        for block in self.blocks:
            if not block.output:
                continue
            if config.leading_delimiter or parts:
                parts.append(config.delimiter)
            if config.clickable_blocks and block.signal > 0:
                parts.append(chr(block.signal))
            parts.append(block.icon)
            parts.append(block.output)
        if config.trailing_delimiter and parts:
            parts.append(config.delimiter)
        return "".join(parts)

    def update(self) -> bool:
        """Rebuild the status text; return whether it changed."""
        self.previous = self.current
        self.current = self._compose()
        return self.current != self.previous

    def write(self, debug, connection=None, stream=None) -> None:
        """Print the status in debug mode, otherwise set it as the root window name."""
        if debug:
            print(self.current, file=stream if stream is not None else sys.stdout)
            return
        connection.set_root_name(self.current)