"""Conversion of DEC HLS colour coordinates to packed RGB values.

Primary colour hues follow the DEC convention:
blue at 0 degrees, red at 120 degrees and green at 240 degrees.
"""

import math

__all__ = ["hls_to_rgb"]

_OPAQUE = 255 << 24


def _pack(r: int, g: int, b: int) -> int:
    return r + (g << 8) + (b << 16) + _OPAQUE


def _clamp_percent(value: int) -> int:
    return min(max(value, 0), 100)


def hls_to_rgb(hue: int, lum: int, sat: int) -> int:
    """Convert hue (degrees), lightness and saturation (percent) to a packed colour.

    The result holds red in the low byte, then green, then blue, with the
    alpha byte fully opaque.
    """
    if sat == 0:
        grey = lum * 255 // 100
        return _pack(grey, grey, grey)

    hs = float(int(math.fmod(hue + 240, 360)))
    hv = hs / 360.0
    lv = lum / 100.0
    sv = sat / 100.0

    c = (1.0 - abs(2.0 * lv - 1.0)) * sv
    hpi = int(hv * 6.0)
    x = c if hpi & 1 else 0.0
    m = lv - 0.5 * c

    sectors = {
        0: (c, x, 0.0),
        1: (x, c, 0.0),
        2: (0.0, c, x),
        3: (0.0, x, c),
        4: (x, 0.0, c),
        5: (c, 0.0, x),
    }
    if hpi not in sectors:
        return _pack(255, 255, 255)
    r1, g1, b1 = sectors[hpi]

    r, g, b = (
        _clamp_percent(int((component + m) * 100.0 + 0.5))
        for component in (r1, g1, b1)
    )
    return _pack(r * 255 // 100, g * 255 // 100, b * 255 // 100)