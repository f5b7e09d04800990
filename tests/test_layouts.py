import pytest

from deskkit.layouts import (
    Gaps,
    Geometry,
    TiledClient,
    WorkArea,
    clamp_gaps,
    fibonacci,
    get_facts,
    get_gaps,
    monocle,
    tile,
)

AREA = WorkArea(0, 0, 1000, 800)


def test_clamp_gaps():
    assert clamp_gaps(-1, 2, -3, 4) == Gaps(0, 2, 0, 4)


def test_get_gaps_disabled():
    assert get_gaps(Gaps(5, 6, 7, 8), 3, enabled=False) == Gaps(0, 0, 0, 0)


def test_get_gaps_smart_single_client():
    result = get_gaps(Gaps(5, 6, 7, 8), 1, enabled=True, smartgaps_fact=0)
    assert (result.oh, result.ov) == (0, 0)
    assert (result.ih, result.iv) == (7, 8)


def test_get_gaps_several_clients_unchanged():
    gaps = Gaps(5, 6, 7, 8)
    assert get_gaps(gaps, 3, enabled=True, smartgaps_fact=0) == gaps


def test_get_facts_totals():
    clients = [TiledClient(1.0)] * 3
    mfacts, sfacts, mrest, srest = get_facts(clients, 1, 600, 1000)
    assert mfacts == 1.0
    assert sfacts == float(len(clients) - 1)
    assert mrest == 0
    assert srest == 0


def test_tile_empty():
    assert tile(AREA, [], 1, 0.5, Gaps()) == []


def test_tile_single_client_fills_area():
    client = TiledClient(1.0, 2)
    (geom,) = tile(AREA, [client], 1, 0.5, Gaps())
    assert geom == Geometry(AREA.x, AREA.y, AREA.w - 2 * client.bw, AREA.h - 2 * client.bw)


def test_tile_master_and_stack_share_width():
    master, stack = tile(AREA, [TiledClient(), TiledClient()], 1, 0.5, Gaps())
    assert master.w + stack.w == AREA.w
    assert stack.x == master.x + master.w
    assert master.h == stack.h == AREA.h


def test_tile_stack_heights_fill_area():
    area = WorkArea(0, 0, 1000, 1000)
    geoms = tile(area, [TiledClient()] * 4, 1, 0.5, Gaps())
    stack = geoms[1:]
    assert sum(g.h for g in stack) == area.h
    for above, below in zip(stack, stack[1:]):
        assert below.y == above.y + above.h


def test_tile_respects_gaps():
    gaps = Gaps(10, 20, 5, 5)
    (geom,) = tile(AREA, [TiledClient()], 1, 0.5, gaps)
    assert geom.x == AREA.x + gaps.ov
    assert geom.y == AREA.y + gaps.oh
    assert geom.w == AREA.w - 2 * gaps.ov


@pytest.mark.parametrize("spiral", [True, False])
def test_fibonacci_single_client_fills_area(spiral):
    (geom,) = fibonacci(AREA, [TiledClient()], 0.5, Gaps(), 20, spiral)
    assert geom == Geometry(AREA.x, AREA.y, AREA.w, AREA.h)


def test_fibonacci_two_clients_split_width():
    first, second = fibonacci(AREA, [TiledClient(), TiledClient()], 0.5, Gaps(), 20, True)
    assert first.w + second.w == AREA.w
    assert second.x == first.x + first.w
    assert first.h == second.h == AREA.h


def test_fibonacci_clients_stay_inside_area():
    geoms = fibonacci(AREA, [TiledClient()] * 5, 0.5, Gaps(), 20, False)
    assert len(geoms) == 5
    for g in geoms:
        assert AREA.x <= g.x and g.x + g.w <= AREA.x + AREA.w
        assert AREA.y <= g.y and g.y + g.h <= AREA.y + AREA.h


def test_monocle_symbol_and_geometry():
    client = TiledClient(1.0, 1)
    symbol, geoms = monocle(AREA, [client, client], 2)
    assert symbol == "[2]"
    assert geoms == [Geometry(AREA.x, AREA.y, AREA.w - 2, AREA.h - 2)] * 2


def test_monocle_without_visible_clients():
    symbol, geoms = monocle(AREA, [], 0)
    assert symbol is None
    assert geoms == []