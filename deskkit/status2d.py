"""Parsing and measuring status text with embedded colour and drawing codes.

Codes are enclosed in ``^`` characters: ``^c#rrggbb^`` and ``^b#rrggbb^``
set the foreground and background, ``^C<n>^`` and ``^B<n>^`` pick one of the
sixteen terminal colours, ``^d^`` restores the default colours, ``^w^`` swaps
them, ``^v^`` saves and ``^t^`` restores them, ``^r<x>,<y>,<w>,<h>^`` draws a
rectangle and ``^f<n>^`` moves forward by ``n`` pixels. Control characters
below a space mark the boundaries of clickable blocks and are not drawn.
"""

import re
from dataclasses import dataclass
from typing import Callable, List

__all__ = [
    "TERMCOLORS",
    "DrawOp",
    "valid_chars",
    "status2d_text_length",
    "parse_status2d",
    "click_status_signal",
]

TERMCOLORS = (
    "#000000", "#ff0000", "#33ff00", "#ff0099",
    "#0066ff", "#cc00ff", "#00ffff", "#d0d0d0",
    "#808080", "#ff0000", "#33ff00", "#ff0099",
    "#0066ff", "#cc00ff", "#00ffff", "#ffffff",
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

TextWidth = Callable[[str], int]


@dataclass(frozen=True)
class DrawOp:
    """One drawing step of a status line.

    ``kind`` is one of ``text``, ``fg``, ``bg``, ``reset``, ``swap``, ``save``,
    ``restore``, ``rect`` or ``forward``. ``value`` holds the text, the colour
    string, the ``(x, y, w, h)`` of a rectangle or the forward distance.
    """

    kind: str
    value: object = None


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _terminated(text: str) -> str:
    return text.split("\0", 1)[0]


def valid_chars(text: str) -> str:
    """Drop the control characters that mark clickable block boundaries."""
    return "".join(c for c in _terminated(text) if c >= " ")


def status2d_text_length(text: str, text_width: TextWidth) -> int:
    """Width of the status text when drawn, codes excluded.

    ``text_width`` measures plain text without padding. Forward codes that
    directly follow an opening ``^`` add their distance.
    """
    text = valid_chars(text)
    n = len(text)
    width = 0
    start = 0
    in_code = False
    i = 0
    while i < n:
        if text[i] == "^":
            if not in_code:
                in_code = True
                width += text_width(text[start:i])
                i += 1
                if i >= n:
                    break
                if text[i] == "f":
                    i += 1
                    width += _atoi(text[i:])
            else:
                in_code = False
                start = i + 1
        i += 1
    if not in_code:
        width += text_width(text[start:])
    return width


def parse_status2d(text: str) -> List[DrawOp]:
    """Turn status text into the sequence of drawing steps it describes."""
    length = len(_terminated(text))
    text = valid_chars(text)
    ops: List[DrawOp] = []

    while True:
        start = text.find("^")
        if start < 0:
            break
        if start:
            ops.append(DrawOp("text", text[:start]))

        n = len(text)
        i = start
        while True:
            i += 1
            if i >= n:
                break
            code = text[i]
            if code == "^":
                break
            if code in "cb":
                if i + 7 >= length:
                    i += 7
                    length = 0
                    break
                ops.append(DrawOp("fg" if code == "c" else "bg", text[i + 1:i + 8]))
                i += 7
            elif code in "CB":
                i += 1
                colour = TERMCOLORS[_atoi(text[i:]) % len(TERMCOLORS)]
                ops.append(DrawOp("fg" if code == "C" else "bg", colour))
            elif code == "d":
                ops.append(DrawOp("reset"))
            elif code == "w":
                ops.append(DrawOp("swap"))
            elif code == "v":
                ops.append(DrawOp("save"))
            elif code == "t":
                ops.append(DrawOp("restore"))
            elif code == "r":
                values = []
                for k in range(4):
                    if k:
                        comma = text.find(",", i + 1)
                        i = comma if comma >= 0 else n
                    i += 1
                    values.append(_atoi(text[i:]))
                rx, ry, rw, rh = values
                ops.append(DrawOp("rect", (max(rx, 0), max(ry, 0), rw, rh)))
            elif code == "f":
                i += 1
                ops.append(DrawOp("forward", _atoi(text[i:])))

        text = text[i + 1:]
        length -= i + 1
        if length <= 0:
            break

    if length > 0 and text:
        ops.append(DrawOp("text", text))
    return ops


def click_status_signal(rel_x: int, text: str, text_width: TextWidth) -> int:
    """Return the signal of the block under ``rel_x``, or 0 if there is none.

    Each block in the raw status text is preceded by a control character
    whose code is the block's signal.
    """
    text = _terminated(text)
    signal = -1
    x = 0
    segment_start = 0
    for pos, ch in enumerate(text):
        if ch >= " ":
            continue
        x += status2d_text_length(text[segment_start:pos], text_width)
        segment_start = pos + 1
        if x >= rel_x and signal != -1:
            break
        signal = ord(ch)
    return 0 if signal == -1 else signal