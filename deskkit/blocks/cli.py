"""Command-line options of the status feed."""

import getopt
from dataclasses import dataclass
from typing import Sequence

__all__ = ["BINARY", "USAGE", "UsageError", "CliArguments", "parse_arguments"]

BINARY = "dwmblocks"
USAGE = f"usage: {BINARY} [-d]"


class UsageError(Exception):
    """Raised for unknown options or a help request; the message is for stderr."""


@dataclass(frozen=True)
class CliArguments:
    is_debug_mode: bool = False


def parse_arguments(argv: Sequence[str]) -> CliArguments:
    """Parse the arguments following the program name.

    ``-d`` selects debug mode, which prints the status instead of setting it.
    ``-h`` and unknown options raise :class:`UsageError`.
    """
    try:
        options, _ = getopt.gnu_getopt(list(argv), "dh")
    except getopt.GetoptError as exc:
        raise UsageError(f"error: unknown option `-{exc.opt}'\n{USAGE}") from None

    debug = False
    for option, _ in options:
        if option == "-d":
            debug = True
        else:
            raise UsageError(USAGE)
    return CliArguments(is_debug_mode=debug)