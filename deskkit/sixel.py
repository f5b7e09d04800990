"""Decoder for DEC sixel graphics into tiles of packed ARGB pixels."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Sequence

from .hls import hls_to_rgb

__all__ = [
    "PARAMS_MAX",
    "PALETTE_MAX",
    "PARAMVALUE_MAX",
    "WIDTH_MAX",
    "HEIGHT_MAX",
    "ParseState",
    "ImageTile",
    "SixelParser",
    "sixel_rgb",
    "sixel_xrgb",
    "create_clipmask",
]

PARAMS_MAX = 16
PALETTE_MAX = 1024
PARAMVALUE_MAX = 65535
WIDTH_MAX = 4096
HEIGHT_MAX = 4096

_ESC = 0x1B
_DIGITS = range(ord("0"), ord("9") + 1)


def sixel_rgb(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into an opaque ARGB value."""
    return (255 << 24) + (r << 16) + (g << 8) + b


def _palval(n: int, a: int, m: int) -> int:
    return (n * a + m // 2) // m


def sixel_xrgb(r: int, g: int, b: int) -> int:
    """Pack channels given in percent (0-100) into an opaque ARGB value."""
    return sixel_rgb(_palval(r, 255, 100), _palval(g, 255, 100), _palval(b, 255, 100))


DEFAULT_COLOR_TABLE = (
    sixel_xrgb(0, 0, 0),  # black
    sixel_xrgb(20, 20, 80),  # blue
    sixel_xrgb(80, 13, 13),  # red
    sixel_xrgb(20, 80, 20),  # green
    sixel_xrgb(80, 20, 80),  # magenta
    sixel_xrgb(20, 80, 80),  # cyan
    sixel_xrgb(80, 80, 20),  # yellow
    sixel_xrgb(53, 53, 53),  # gray 50%
    sixel_xrgb(26, 26, 26),  # gray 25%
    sixel_xrgb(33, 33, 60),  # blue*
    sixel_xrgb(60, 26, 26),  # red*
    sixel_xrgb(33, 60, 33),  # green*
    sixel_xrgb(60, 33, 60),  # magenta*
    sixel_xrgb(33, 60, 60),  # cyan*
    sixel_xrgb(60, 60, 33),  # yellow*
    sixel_xrgb(80, 80, 80),  # gray 75%
)


class ParseState(IntEnum):
    ESC = 1
    DECSIXEL = 2
    DECGRA = 3
    DECGRI = 4
    DECGCI = 5
    ERROR = 6


@dataclass
class ImageTile:
    """One cell-row high slice of a decoded image."""

    x: int
    y: int
    cols: int
    width: int
    height: int
    cw: int
    ch: int
    pixels: List[int] = field(default_factory=list)
    transparent: bool = False


class SixelParser:
    """Incremental sixel decoder holding the image buffer and palette."""

    def __init__(
        self,
        transparent,
        fgcolor,
        bgcolor,
        use_private_register,
        cell_width,
        cell_height,
    ):
        self.state = ParseState.DECSIXEL
        self.pos_x = 0
        self.pos_y = 0
        self.max_x = 0
        self.max_y = 0
        self.attributed_pan = 2
        self.attributed_pad = 1
        self.attributed_ph = 0
        self.attributed_pv = 0
        self.transparent = bool(transparent)
        self.repeat_count = 1
        self.color_index = 16
        self.grid_width = cell_width
        self.grid_height = cell_height
        self.param = 0
        self.params: List[int] = []

        self.width = 1
        self.height = 1
        self.data = [0]
        self.ncolors = 2
        self.use_private_register = bool(use_private_register)
        self.palette = [0] * PALETTE_MAX
        self.palette[0] = 0 if transparent else bgcolor
        if self.use_private_register:
            self.palette[1] = fgcolor
        self.palette_modified = False

    def set_default_color(self):
        """Load the default VT340 colours, colour cube and grey ramp."""
        palette = self.palette
        palette[1:17] = DEFAULT_COLOR_TABLE
        n = 17
        for r in range(6):
            for g in range(6):
                for b in range(6):
                    palette[n] = sixel_rgb(r * 51, g * 51, b * 51)
                    n += 1
        for i in range(24):
            palette[n] = sixel_rgb(i * 11, i * 11, i * 11)
            n += 1
        palette[n:] = [sixel_rgb(255, 255, 255)] * (PALETTE_MAX - n)

    def _resize(self, width: int, height: int) -> None:
        new = [0] * (width * height)
        copy_w = min(width, self.width)
        for row in range(min(height, self.height)):
            src = row * self.width
            dst = row * width
            new[dst:dst + copy_w] = self.data[src:src + copy_w]
        self.data = new
        self.width = width
        self.height = height

    def _push_param(self) -> None:
        if len(self.params) < PARAMS_MAX:
            self.params.append(self.param)

    def _accumulate_digit(self, ch: int) -> None:
        self.param = min(self.param * 10 + ch - ord("0"), PARAMVALUE_MAX)

    def _draw_sixel(self, ch: int) -> None:
        needed_x = self.pos_x + self.repeat_count
        needed_y = self.pos_y + 6
        if (
            (self.width < needed_x or self.height < needed_y)
            and self.width < WIDTH_MAX
            and self.height < HEIGHT_MAX
        ):
            sx = self.width * 2
            sy = self.height * 2
            while sx < needed_x or sy < needed_y:
                sx *= 2
                sy *= 2
            self._resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))

        if self.color_index > self.ncolors:
            self.ncolors = self.color_index

        if self.pos_x + self.repeat_count > self.width:
            self.repeat_count = self.width - self.pos_x

        if self.repeat_count > 0 and self.pos_y + 5 < self.height:
            bits = ch - ord("?")
            if bits:
                width = self.width
                base = width * self.pos_y + self.pos_x
                color = self.color_index
                repeat = max(self.repeat_count, 1)
                last = 0
                for i in range(6):
                    if bits & (1 << i):
                        start = base + i * width
                        self.data[start:start + repeat] = [color] * repeat
                        last = i
                self.max_x = max(self.max_x, self.pos_x + repeat - 1)
                self.max_y = max(self.max_y, self.pos_y + last)

        if self.repeat_count > 0:
            self.pos_x += self.repeat_count
        self.repeat_count = 1

    def _apply_raster_attributes(self) -> None:
        self._push_param()
        params = self.params
        if len(params) > 0:
            self.attributed_pad = params[0]
        if len(params) > 1:
            self.attributed_pan = params[1]
        if len(params) > 2 and params[2] > 0:
            self.attributed_ph = params[2]
        if len(params) > 3 and params[3] > 0:
            self.attributed_pv = params[3]
        if self.attributed_pan <= 0:
            self.attributed_pan = 1
        if self.attributed_pad <= 0:
            self.attributed_pad = 1

        if self.width < self.attributed_ph or self.height < self.attributed_pv:
            sx = max(self.width, self.attributed_ph)
            sy = max(self.height, self.attributed_pv)
            # keep the height a multiple of 6 so the last band needs no resize
            sy = (sy + 5) // 6 * 6
            self._resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))

        self.state = ParseState.DECSIXEL
        self.param = 0
        self.params = []

    def _apply_color(self) -> None:
        self.state = ParseState.DECSIXEL
        self._push_param()
        self.param = 0
        params = self.params
        if params:
            self.color_index = min(max(1 + params[0], 0), PALETTE_MAX - 1)
        if len(params) > 4:
            self.palette_modified = True
            if params[1] == 1:
                hue = min(params[2], 360)
                lum = min(params[3], 100)
                sat = min(params[4], 100)
                self.palette[self.color_index] = hls_to_rgb(hue, lum, sat)
            elif params[1] == 2:
                r = min(params[2], 100)
                g = min(params[3], 100)
                b = min(params[4], 100)
                self.palette[self.color_index] = sixel_xrgb(r, g, b)

    def parse(self, data) -> int:
        """Feed sixel bytes; return how many were consumed.

        Parsing stops without consuming an ESC byte, leaving the parser in
        the ESC state.
        """
        data = bytes(data)
        p = 0
        end = len(data)
        while p < end:
            state = self.state
            ch = data[p]
            if state == ParseState.ESC:
                break

            if state == ParseState.DECSIXEL:
                if ch == _ESC:
                    self.state = ParseState.ESC
                    continue
                p += 1
                if ch == ord('"'):
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGRA
                elif ch == ord("!"):
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGRI
                elif ch == ord("#"):
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGCI
                elif ch == ord("$"):
                    self.pos_x = 0
                elif ch == ord("-"):
                    self.pos_x = 0
                    if self.pos_y < HEIGHT_MAX - 5 - 6:
                        self.pos_y += 6
                    else:
                        self.pos_y = HEIGHT_MAX + 1
                elif ord("?") <= ch <= ord("~"):
                    self._draw_sixel(ch)

            elif state in (ParseState.DECGRA, ParseState.DECGRI, ParseState.DECGCI):
                if ch == _ESC:
                    self.state = ParseState.ESC
                elif ch in _DIGITS:
                    self._accumulate_digit(ch)
                    p += 1
                elif ch == ord(";") and state != ParseState.DECGRI:
                    self._push_param()
                    self.param = 0
                    p += 1
                elif state == ParseState.DECGRA:
                    self._apply_raster_attributes()
                elif state == ParseState.DECGRI:
                    self.repeat_count = max(self.param, 1)
                    self.state = ParseState.DECSIXEL
                    self.param = 0
                    self.params = []
                else:
                    self._apply_color()

            else:  # ParseState.ERROR
                if ch == _ESC:
                    self.state = ParseState.ESC
                    break
                p += 1
        return p

    def finalize(self, cx, cy, cw, ch) -> List[ImageTile]:
        """Cut the decoded image into tiles one cell row high.

        Tiles are placed at column ``cx`` starting at row ``cy``; ``cw`` and
        ``ch`` are the cell width and height in pixels.
        """
        if cw <= 0 or ch <= 0:
            raise ValueError("cell dimensions must be positive")

        self.max_x += 1
        if self.max_x < self.attributed_ph:
            self.max_x = self.attributed_ph
        self.max_y += 1
        if self.max_y < self.attributed_pv:
            self.max_y = self.attributed_pv

        if self.use_private_register and self.ncolors > 2 and not self.palette_modified:
            self.set_default_color()

        w = min(self.max_x, self.width)
        h = min(self.max_y, self.height)
        numimages = (h + ch - 1) // ch
        if numimages <= 0:
            raise ValueError("image has no rows to render")
        cols = (w + cw - 1) // cw

        tiles = []
        y = 0
        for i in range(numimages):
            tile_height = min(h - ch * i, ch)
            pixels = []
            for row in range(y, min(y + tile_height, h)):
                start = row * self.width
                pixels.extend(self.palette[c] for c in self.data[start:start + w])
            y += tile_height
            has_clear = any(color == 0 for color in pixels)
            tiles.append(
                ImageTile(
                    x=cx,
                    y=cy + i,
                    cols=cols,
                    width=w,
                    height=tile_height,
                    cw=cw,
                    ch=ch,
                    pixels=pixels,
                    transparent=self.transparent and has_clear,
                )
            )
        return tiles


def create_clipmask(pixels: Sequence[int], width: int, height: int, msb_first: bool) -> bytes:
    """Build a 1-bit mask, one padded byte row per pixel row, set where a pixel is non-zero."""
    out = bytearray()
    it = iter(pixels)
    for _ in range(height):
        remaining = width
        while remaining > 0:
            n = min(remaining, 8)
            byte = 0
            for i in range(n):
                if next(it):
                    byte |= (0x80 >> i) if msb_first else (0x01 << i)
            out.append(byte)
            remaining -= n
    return bytes(out)