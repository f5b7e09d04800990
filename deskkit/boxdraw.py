"""Geometry for drawing box-drawing, block, shade and braille characters.

Every shape is encoded as a 16-bit value. The high bits select a category
and the low byte carries the shape data. Drawing produces rectangles in
cell coordinates rather than calling a graphics backend.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

__all__ = [
    "BDL", "BDA", "BBD", "BBL", "BBU", "BBR", "BBQ", "BRL", "BBS", "BDB",
    "LL", "LU", "LR", "LD", "LH", "LV",
    "DL", "DU", "DR", "DD", "DH", "DV",
    "HL", "HU", "HR", "HD", "HH", "HV",
    "TL", "TR", "BL", "BR",
    "BOXDATA",
    "Rect",
    "is_boxdraw",
    "boxdraw_index",
    "draw_box",
    "box_lines",
]

# Categories (mutually exclusive except BDB).
BDL = 1 << 8   # lines (light/double/heavy)
BDA = 1 << 9   # light arcs
BBD = 1 << 10  # lower block, data is 8 - X eighths
BBL = 2 << 10  # left block, data is X eighths
BBU = 3 << 10  # upper block, data is X eighths
BBR = 4 << 10  # right block, data is 8 - X eighths
BBQ = 5 << 10  # quadrants
BRL = 6 << 10  # braille, data is the low byte of U+28XX
BBS = 1 << 14  # shades
BDB = 1 << 15  # bold

# Light / double / heavy rays.
LL, LU, LR, LD = 1 << 0, 1 << 1, 1 << 2, 1 << 3
LH, LV = LL + LR, LU + LD
DL, DU, DR, DD = 1 << 4, 1 << 5, 1 << 6, 1 << 7
DH, DV = DL + DR, DU + DD
HL, HU, HR, HD = LL + DL, LU + DU, LR + DR, LD + DD
HH, HV = HL + HR, HU + HD

# Quadrants.
TL, TR, BL, BR = 1 << 0, 1 << 1, 1 << 2, 1 << 3

_BOX_SHAPES = {
    # light lines
    0x00: BDL + LH, 0x02: BDL + LV,
    0x0C: BDL + LD + LR, 0x10: BDL + LD + LL,
    0x14: BDL + LU + LR, 0x18: BDL + LU + LL,
    0x1C: BDL + LV + LR, 0x24: BDL + LV + LL,
    0x2C: BDL + LH + LD, 0x34: BDL + LH + LU,
    0x3C: BDL + LV + LH,
    0x74: BDL + LL, 0x75: BDL + LU, 0x76: BDL + LR, 0x77: BDL + LD,
    # heavy [+light] lines
    0x01: BDL + HH, 0x03: BDL + HV,
    0x0D: BDL + HR + LD, 0x0E: BDL + HD + LR, 0x0F: BDL + HD + HR,
    0x11: BDL + HL + LD, 0x12: BDL + HD + LL, 0x13: BDL + HD + HL,
    0x15: BDL + HR + LU, 0x16: BDL + HU + LR, 0x17: BDL + HU + HR,
    0x19: BDL + HL + LU, 0x1A: BDL + HU + LL, 0x1B: BDL + HU + HL,
    0x1D: BDL + HR + LV, 0x1E: BDL + HU + LD + LR,
    0x1F: BDL + HD + LR + LU, 0x20: BDL + HV + LR,
    0x21: BDL + HU + HR + LD, 0x22: BDL + HD + HR + LU,
    0x23: BDL + HV + HR, 0x25: BDL + HL + LV,
    0x26: BDL + HU + LD + LL, 0x27: BDL + HD + LU + LL,
    0x28: BDL + HV + LL, 0x29: BDL + HU + HL + LD,
    0x2A: BDL + HD + HL + LU, 0x2B: BDL + HV + HL,
    0x2D: BDL + HL + LD + LR, 0x2E: BDL + HR + LL + LD,
    0x2F: BDL + HH + LD, 0x30: BDL + HD + LH,
    0x31: BDL + HD + HL + LR, 0x32: BDL + HR + HD + LL,
    0x33: BDL + HH + HD, 0x35: BDL + HL + LU + LR,
    0x36: BDL + HR + LU + LL, 0x37: BDL + HH + LU,
    0x38: BDL + HU + LH, 0x39: BDL + HU + HL + LR,
    0x3A: BDL + HU + HR + LL, 0x3B: BDL + HH + HU,
    0x3D: BDL + HL + LV + LR, 0x3E: BDL + HR + LV + LL,
    0x3F: BDL + HH + LV, 0x40: BDL + HU + LH + LD,
    0x41: BDL + HD + LH + LU, 0x42: BDL + HV + LH,
    0x43: BDL + HU + HL + LD + LR, 0x44: BDL + HU + HR + LD + LL,
    0x45: BDL + HD + HL + LU + LR, 0x46: BDL + HD + HR + LU + LL,
    0x47: BDL + HH + HU + LD, 0x48: BDL + HH + HD + LU,
    0x49: BDL + HV + HL + LR, 0x4A: BDL + HV + HR + LL,
    0x4B: BDL + HV + HH,
    0x78: BDL + HL, 0x79: BDL + HU, 0x7A: BDL + HR, 0x7B: BDL + HD,
    0x7C: BDL + HR + LL, 0x7D: BDL + HD + LU,
    0x7E: BDL + HL + LR, 0x7F: BDL + HU + LD,
    # double [+light] lines
    0x50: BDL + DH, 0x51: BDL + DV,
    0x52: BDL + DR + LD, 0x53: BDL + DD + LR, 0x54: BDL + DR + DD,
    0x55: BDL + DL + LD, 0x56: BDL + DD + LL, 0x57: BDL + DL + DD,
    0x58: BDL + DR + LU, 0x59: BDL + DU + LR, 0x5A: BDL + DU + DR,
    0x5B: BDL + DL + LU, 0x5C: BDL + DU + LL, 0x5D: BDL + DL + DU,
    0x5E: BDL + DR + LV, 0x5F: BDL + DV + LR, 0x60: BDL + DV + DR,
    0x61: BDL + DL + LV, 0x62: BDL + DV + LL, 0x63: BDL + DV + DL,
    0x64: BDL + DH + LD, 0x65: BDL + DD + LH, 0x66: BDL + DD + DH,
    0x67: BDL + DH + LU, 0x68: BDL + DU + LH, 0x69: BDL + DH + DU,
    0x6A: BDL + DH + LV, 0x6B: BDL + DV + LH, 0x6C: BDL + DH + DV,
    # light arcs
    0x6D: BDA + LD + LR, 0x6E: BDA + LD + LL,
    0x6F: BDA + LU + LL, 0x70: BDA + LU + LR,
    # lower X/8 blocks (data is 8 - X)
    0x81: BBD + 7, 0x82: BBD + 6, 0x83: BBD + 5, 0x84: BBD + 4,
    0x85: BBD + 3, 0x86: BBD + 2, 0x87: BBD + 1, 0x88: BBD + 0,
    # left X/8 blocks
    0x89: BBL + 7, 0x8A: BBL + 6, 0x8B: BBL + 5, 0x8C: BBL + 4,
    0x8D: BBL + 3, 0x8E: BBL + 2, 0x8F: BBL + 1,
    # upper half, upper eighth, right half, right eighth
    0x80: BBU + 4, 0x94: BBU + 1,
    0x90: BBR + 4, 0x95: BBR + 7,
    # quadrants
    0x96: BBQ + BL, 0x97: BBQ + BR, 0x98: BBQ + TL,
    0x99: BBQ + TL + BL + BR, 0x9A: BBQ + TL + BR,
    0x9B: BBQ + TL + TR + BL, 0x9C: BBQ + TL + TR + BR,
    0x9D: BBQ + TR, 0x9E: BBQ + BL + TR, 0x9F: BBQ + BL + TR + BR,
    # shades, data is alpha in quarters
    0x91: BBS + 1, 0x92: BBS + 2, 0x93: BBS + 3,
}

BOXDATA: Tuple[int, ...] = tuple(_BOX_SHAPES.get(i, 0) for i in range(256))

Color = Any


@dataclass(frozen=True)
class Rect:
    """A filled rectangle; ``color`` is the colour it is filled with."""

    x: int
    y: int
    w: int
    h: int
    color: Optional[Color] = None


def _div(n: int, d: int) -> int:
    """Rounded division of ``n / d``, truncating toward zero like C."""
    q = n + d // 2
    return q // d if q >= 0 else -((-q) // d)


def is_boxdraw(codepoint: int, boxdraw: bool, braille: bool) -> bool:
    """Tell whether the codepoint is drawn as a shape rather than a glyph."""
    block = codepoint & ~0xFF
    return bool(
        (boxdraw and block == 0x2500 and BOXDATA[codepoint & 0xFF])
        or (braille and block == 0x2800)
    )


def boxdraw_index(codepoint: int, bold: bool, boxdraw_bold: bool, braille: bool) -> int:
    """Return the encoded shape data for a codepoint."""
    if braille and (codepoint & ~0xFF) == 0x2800:
        return BRL | (codepoint & 0xFF)
    if boxdraw_bold and bold:
        return BDB | BOXDATA[codepoint & 0xFF]
    return BOXDATA[codepoint & 0xFF]


def _blend(fg: Color, bg: Color, d: int) -> Tuple[int, ...]:
    return tuple(_div(f * d + b * (4 - d), 4) for f, b in zip(fg, bg))


def draw_box(x: int, y: int, w: int, h: int, bd: int, fg: Color, bg: Color) -> List[Rect]:
    """Return the rectangles that draw shape ``bd`` in the given cell.

    ``fg`` and ``bg`` are colours; shades require them as (red, green, blue)
    sequences and are filled with the blended colour.
    """
    cat = bd & ~(BDB | 0xFF) & 0xFFFF
    data = bd & 0xFF

    if bd & (BDL | BDA):
        return [Rect(r.x, r.y, r.w, r.h, fg) for r in box_lines(x, y, w, h, bd)]

    if cat == BBD:
        d = _div(data * h, 8)
        return [Rect(x, y + d, w, h - d, fg)]
    if cat == BBU:
        return [Rect(x, y, w, _div(data * h, 8), fg)]
    if cat == BBL:
        return [Rect(x, y, _div(data * w, 8), h, fg)]
    if cat == BBR:
        d = _div(data * w, 8)
        return [Rect(x + d, y, w - d, h, fg)]
    if cat == BBQ:
        w2, h2 = _div(w, 2), _div(h, 2)
        rects = []
        if bd & TL:
            rects.append(Rect(x, y, w2, h2, fg))
        if bd & TR:
            rects.append(Rect(x + w2, y, w - w2, h2, fg))
        if bd & BL:
            rects.append(Rect(x, y + h2, w2, h - h2, fg))
        if bd & BR:
            rects.append(Rect(x + w2, y + h2, w - w2, h - h2, fg))
        return rects
    if bd & BBS:
        return [Rect(x, y, w, h, _blend(fg, bg, data))]
    if cat == BRL:
        w1 = _div(w, 2)
        h1, h2, h3 = _div(h, 4), _div(h, 2), _div(3 * h, 4)
        dots = (
            (1, x, y, w1, h1),
            (2, x, y + h1, w1, h2 - h1),
            (4, x, y + h2, w1, h3 - h2),
            (8, x + w1, y, w - w1, h1),
            (16, x + w1, y + h1, w - w1, h2 - h1),
            (32, x + w1, y + h2, w - w1, h3 - h2),
            (64, x, y + h3, w1, h - h3),
            (128, x + w1, y + h3, w - w1, h - h3),
        )
        return [Rect(rx, ry, rw, rh, fg) for bit, rx, ry, rw, rh in dots if bd & bit]
    return []


def box_lines(x: int, y: int, w: int, h: int, bd: int) -> List[Rect]:
    """Return uncoloured rectangles for a line or arc shape.

    Heavy lines are drawn as light plus double strokes that align.
    Bold uses a thicker stem when the cell is at least 6 pixels.
    """
    mwh = min(w, h)
    base_s = max(1, _div(mwh, 8))
    bold = bool(bd & BDB) and mwh >= 6
    s = max(base_s + 1, _div(3 * base_s, 2)) if bold else base_s
    w2, h2 = _div(w - s, 2), _div(h - s, 2)

    light = bd & (LL | LU | LR | LD)
    double = bd & (DL | DU | DR | DD)
    rects: List[Rect] = []

    if light:
        arc = bd & BDA
        multi_light = light & (light - 1)
        multi_double = double & (double - 1)
        d = -s if arc or (multi_double and not multi_light) else 0
        if bd & LL:
            rects.append(Rect(x, y + h2, w2 + s + d, s))
        if bd & LU:
            rects.append(Rect(x + w2, y, s, h2 + s + d))
        if bd & LR:
            rects.append(Rect(x + w2 - d, y + h2, w - w2 + d, s))
        if bd & LD:
            rects.append(Rect(x + w2, y + h2 - d, s, h - h2 + d))

    if double:
        dl, du, dr, dd = bd & DL, bd & DU, bd & DR, bd & DD
        if dl:
            p = -s if dd else 0
            n = -s if du else (s if dd else 0)
            rects.append(Rect(x, y + h2 + s, w2 + s + p, s))
            rects.append(Rect(x, y + h2 - s, w2 + s + n, s))
        if du:
            p = -s if dl else 0
            n = -s if dr else (s if dl else 0)
            rects.append(Rect(x + w2 - s, y, s, h2 + s + p))
            rects.append(Rect(x + w2 + s, y, s, h2 + s + n))
        if dr:
            p = -s if du else 0
            n = -s if dd else (s if du else 0)
            rects.append(Rect(x + w2 - p, y + h2 - s, w - w2 + p, s))
            rects.append(Rect(x + w2 - n, y + h2 + s, w - w2 + n, s))
        if dd:
            p = -s if dr else 0
            n = -s if dl else (s if dr else 0)
            rects.append(Rect(x + w2 + s, y + h2 - p, s, h - h2 + p))
            rects.append(Rect(x + w2 - s, y + h2 - n, s, h - h2 + n))

    return rects