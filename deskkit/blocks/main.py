"""Entry point of the status feed: runs the blocks and publishes their output."""

import sys
from contextlib import ExitStack
from typing import List, Optional

from .block import Block, BlockError
from .cli import UsageError, parse_arguments
from .config import StatusConfig, default_config
from .signals import SignalHandler
from .status import Status
from .timer import Timer
from .watcher import Watcher
from .x11 import X11Connection, X11Error

__all__ = ["build_blocks", "execute_blocks", "event_loop", "main"]


def build_blocks(config: StatusConfig) -> List[Block]:
    """Create one block per configured spec."""
    return [
        Block(spec.icon, spec.command, spec.interval, spec.signal, config.max_block_output_length)
        for spec in config.blocks
    ]


def execute_blocks(blocks, timer: Optional[Timer]) -> None:
    """Start every block that is due; with no timer, start them all."""
    for block in blocks:
        if timer is None or timer.must_run(block.interval):
            block.execute(0)


def _trigger_event(blocks, timer: Timer) -> None:
    execute_blocks(blocks, timer)
    timer.arm()


def _refresh(blocks) -> None:
    execute_blocks(blocks, None)


def event_loop(blocks, config, debug, connection, handler) -> None:
    """Run blocks on schedule and on signals until a termination signal arrives."""
    timer = Timer(block.interval for block in blocks)
    _trigger_event(blocks, timer)

    watcher = Watcher(blocks, handler.fileno())
    status = Status(blocks, config)
    alive = True
    while alive:
        watcher.poll(-1)
        if watcher.got_signal:
            alive = handler.process(timer)

        for index in watcher.active_blocks:
            try:
                blocks[index].update()
            except BlockError as exc:
                print(f"error: {exc}", file=sys.stderr)

        if status.update():
            status.write(debug, connection)


def main(argv=None) -> int:
    """Run the status feed; return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_arguments(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1

    config = default_config()
    try:
        connection = X11Connection.open()
    except X11Error as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    blocks = build_blocks(config)
    try:
        with ExitStack() as stack:
            stack.callback(connection.close)
            for block in blocks:
                block.open()
                stack.callback(block.close)
            handler = SignalHandler(blocks, _refresh, _trigger_event)
            handler.open()
            stack.callback(handler.close)
            event_loop(blocks, config, args.is_debug_mode, connection, handler)
    except (BlockError, X11Error, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())