"""Tiling arrangements: master/stack, fibonacci spiral and dwindle, monocle.

Each layout returns the geometry every tiled client is given, in the order
of the clients. Widths and heights exclude the client's border.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple

__all__ = [
    "Geometry",
    "TiledClient",
    "Gaps",
    "WorkArea",
    "get_gaps",
    "get_facts",
    "tile",
    "fibonacci",
    "monocle",
    "clamp_gaps",
]


@dataclass(frozen=True)
class Geometry:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class TiledClient:
    """A tiled client's size factor and border width."""

    cfact: float = 1.0
    bw: int = 0


@dataclass(frozen=True)
class Gaps:
    """Outer horizontal/vertical and inner horizontal/vertical gaps."""

    oh: int = 0
    ov: int = 0
    ih: int = 0
    iv: int = 0


@dataclass(frozen=True)
class WorkArea:
    x: int
    y: int
    w: int
    h: int


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def clamp_gaps(oh: int, ov: int, ih: int, iv: int) -> Gaps:
    """Gaps with negative values raised to zero."""
    return Gaps(max(oh, 0), max(ov, 0), max(ih, 0), max(iv, 0))


def get_gaps(gaps: Gaps, count: int, enabled: bool = True, smartgaps_fact: int = 1) -> Gaps:
    """Effective gaps for ``count`` tiled clients.

    With one client the outer gaps are multiplied by ``smartgaps_fact``;
    with gaps disabled every gap is zero.
    """
    outer = inner = int(bool(enabled))
    if count == 1:
        outer *= smartgaps_fact
    return Gaps(gaps.oh * outer, gaps.ov * outer, gaps.ih * inner, gaps.iv * inner)


def get_facts(
    clients: Sequence[TiledClient], nmaster: int, msize: int, ssize: int
) -> Tuple[float, float, int, int]:
    """Return the master and stack factor totals and the pixels left over.

    The remainders are what integer splitting of ``msize`` and ``ssize`` by
    the client factors leaves undistributed.
    """
    masters = clients[:max(nmaster, 0)]
    stack = clients[max(nmaster, 0):]
    mfacts = sum(Fraction(c.cfact) for c in masters)
    sfacts = sum(Fraction(c.cfact) for c in stack)

    mtotal = 0
    for c in masters:
        mtotal = int(mtotal + msize * (Fraction(c.cfact) / mfacts))
    stotal = 0
    for c in stack:
        stotal = int(stotal + ssize * (Fraction(c.cfact) / sfacts))

    return float(mfacts), float(sfacts), msize - mtotal, ssize - stotal


def tile(
    area: WorkArea,
    clients: Sequence[TiledClient],
    nmaster: int,
    mfact: float,
    gaps: Gaps,
) -> List[Geometry]:
    """Master column on the left, stack on the right, heights by client factor."""
    n = len(clients)
    if n == 0:
        return []
    oh, ov, ih, iv = gaps.oh, gaps.ov, gaps.ih, gaps.iv

    sx = mx = area.x + ov
    sy = my = area.y + oh
    mh = area.h - 2 * oh - ih * (min(n, nmaster) - 1)
    sh = area.h - 2 * oh - ih * (n - nmaster - 1)
    sw = mw = area.w - 2 * ov

    if nmaster and n > nmaster:
        sw = int((mw - iv) * (1 - mfact))
        mw = int((mw - iv) * mfact)
        sx = mx + mw + iv

    mfacts, sfacts, mrest, srest = get_facts(clients, nmaster, mh, sh)

    result = []
    for i, c in enumerate(clients):
        if i < nmaster:
            h = int((mh / mfacts) * c.cfact + (1 if i < mrest else 0) - 2 * c.bw)
            result.append(Geometry(mx, my, mw - 2 * c.bw, h))
            my += h + 2 * c.bw + ih
        else:
            extra = 1 if (i - nmaster) < srest else 0
            h = int((sh / sfacts) * c.cfact + extra - 2 * c.bw)
            result.append(Geometry(sx, sy, sw - 2 * c.bw, h))
            sy += h + 2 * c.bw + ih
    return result


def fibonacci(
    area: WorkArea,
    clients: Sequence[TiledClient],
    mfact: float,
    gaps: Gaps,
    bar_height: int,
    spiral: bool = True,
) -> List[Geometry]:
    """Halve the remaining space for each client, as a spiral or a dwindle.

    Splitting stops once a half would be no taller or wider than the bar;
    the remaining clients then share the last area.
    """
    n = len(clients)
    if n == 0:
        return []
    oh, ov, ih, iv = gaps.oh, gaps.ov, gaps.ih, gaps.iv
    dwindle = not spiral

    nx = area.x + ov
    ny = oh
    nw = area.w - 2 * ov
    nh = area.h - 2 * oh
    hrest = wrest = 0
    splitting = True
    i = 0

    result = []
    for c in clients:
        if splitting:
            odd = i % 2
            if (odd and _cdiv(nh - ih, 2) <= bar_height + 2 * c.bw) or (
                not odd and _cdiv(nw - iv, 2) <= bar_height + 2 * c.bw
            ):
                splitting = False
            if splitting and i < n - 1:
                if odd:
                    nv = _cdiv(nh - ih, 2)
                    hrest = nh - 2 * nv - ih
                    nh = nv
                else:
                    nv = _cdiv(nw - iv, 2)
                    wrest = nw - 2 * nv - iv
                    nw = nv
                if i % 4 == 2 and not dwindle:
                    nx += nw + iv
                elif i % 4 == 3 and not dwindle:
                    ny += nh + ih

            quarter = i % 4
            if quarter == 0:
                if dwindle:
                    ny += nh + ih
                    nh += hrest
                else:
                    nh -= hrest
                    ny -= nh + ih
            elif quarter == 1:
                nx += nw + iv
                nw += wrest
            elif quarter == 2:
                ny += nh + ih
                nh += hrest
                if i < n - 1:
                    nw += wrest
            else:
                if dwindle:
                    nx += nw + iv
                    nw -= wrest
                else:
                    nw -= wrest
                    nx -= nw + iv
                    nh += hrest

            if i == 0:
                if n != 1:
                    usable = area.w - iv - 2 * ov
                    nw = int(usable - usable * (1 - mfact))
                    wrest = 0
                ny = area.y + oh
            elif i == 1:
                nw = area.w - nw - iv - 2 * ov
            i += 1

        result.append(Geometry(nx, ny, nw - 2 * c.bw, nh - 2 * c.bw))
    return result


def monocle(
    area: WorkArea, clients: Sequence[TiledClient], visible_count: int
) -> Tuple[Optional[str], List[Geometry]]:
    """Give every client the whole area.

    Returns the layout symbol showing the number of visible clients (or
    ``None`` when there are none) and the geometries.
    """
    symbol = f"[{visible_count}]" if visible_count > 0 else None
    geometries = [
        Geometry(area.x, area.y, area.w - 2 * c.bw, area.h - 2 * c.bw) for c in clients
    ]
    return symbol, geometries