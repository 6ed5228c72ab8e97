import math
import os
import random
import sys
import warnings

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from collision import rects_overlap
from dimensions import NON_BLOCKING, Category, CatalogItem
from rules import DEFAULT_ROOM_SQFT
from solver import (
    RoomKind,
    generate_layout,
    openings_from_hints,
    room_kind,
    room_size,
    strategy_for,
)


def _items(*specs):
    return [CatalogItem(i + 1, cat, name) for i, (cat, name) in enumerate(specs)]


def _by_name(layout, name):
    return [p for p in layout.placed if p.item.name == name]


def _assert_no_overlaps(layout):
    blocking = [p for p in layout.placed if p.category not in NON_BLOCKING]
    for i, a in enumerate(blocking):
        for b in blocking[i + 1:]:
            assert not rects_overlap(a.rect, b.rect), (a.item.name, b.item.name)


LIVING = _items(
    ("sofa", "Sofa"),
    ("table", "Coffee Table"),
    ("chair", "Accent Chair"),
    ("chair", "Accent Chair"),
)


def test_living_room_arrangement():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        layout = generate_layout(LIVING, 0, "Living Room", room_w=14, room_l=16, rng=random.Random(0))

    assert (layout.canvas_w, layout.canvas_h) == (840, 960)
    assert len(layout.placed) == 4
    _assert_no_overlaps(layout)

    sofa = _by_name(layout, "Sofa")[0]
    table = _by_name(layout, "Coffee Table")[0]
    assert (sofa.x, sofa.y) == pytest.approx((210, 505.2))
    # coffee table sits centred in front of the sofa with a 1.5 ft gap
    assert table.x + table.w / 2 == pytest.approx(sofa.x + sofa.w / 2)
    assert sofa.y - (table.y + table.h) == pytest.approx(1.5 * layout.scale)

    left, right = _by_name(layout, "Accent Chair")
    assert left.x + left.w <= sofa.x
    assert right.x >= sofa.x + sofa.w
    assert layout.anchors["sofa"] == sofa.rect
    assert layout.anchors["table"] == table.rect


def test_living_room_overlays():
    layout = generate_layout(LIVING, 0, "Living Room", room_w=14, room_l=16, rng=random.Random(0))
    assert [p.label for p in layout.traffic_paths] == ["Main Path", "2.5′ Walkway"]
    sofa = _by_name(layout, "Sofa")[0]
    front = [z for z in layout.clearances if z.y == pytest.approx(sofa.y + sofa.h) and z.w == sofa.w]
    assert front and front[0].label == "2.5′"
    assert any(d.label == "1.5′" for d in layout.dimensions)


def test_dining_chairs_surround_table():
    items = _items(("table", "Dining Table"), *[("chair", "Dining Chair")] * 6)
    layout = generate_layout(items, 0, "Dining Room", room_w=12, room_l=14, rng=random.Random(0))

    table = _by_name(layout, "Dining Table")[0]
    assert (table.x, table.y, table.w, table.h) == pytest.approx((180, 324, 360, 192))
    chairs = _by_name(layout, "Dining Chair")
    assert len(chairs) == 6
    gap = 0.25 * layout.scale
    for c in chairs:
        assert c.x >= gap and c.y >= gap
        assert c.x + c.w <= layout.canvas_w - gap
        assert c.y + c.h <= layout.canvas_h - gap
    _assert_no_overlaps(layout)
    assert (chairs[0].x, chairs[0].y) == pytest.approx((72, 366))
    assert (chairs[2].x, chairs[2].y) == pytest.approx((312, 204))


def test_bed_headboard_against_focal_wall():
    items = _items(("bed", "Queen Bed"), ("light", "Table Lamp"), ("light", "Table Lamp"))
    layout = generate_layout(items, 0, "Bedroom", room_w=12, room_l=14, rng=random.Random(0))
    bed = _by_name(layout, "Queen Bed")[0]
    assert bed.y == pytest.approx(0.25 * layout.scale)
    assert bed.x + bed.w / 2 == pytest.approx(layout.canvas_w / 2)
    lamps = _by_name(layout, "Table Lamp")
    assert lamps[0].x + lamps[0].w < bed.x
    assert lamps[1].x > bed.x + bed.w


def test_office_chair_below_desk():
    items = _items(("table", "Desk"), ("chair", "Desk Chair"))
    layout = generate_layout(items, 0, "Office", room_w=12, room_l=10, rng=random.Random(0))
    desk = _by_name(layout, "Desk")[0]
    chair = _by_name(layout, "Desk Chair")[0]
    assert (desk.x, desk.y) == pytest.approx((81, 45))
    assert chair.y > desk.y + desk.h
    assert chair.x + chair.w / 2 == pytest.approx(desk.x + desk.w / 2)


def test_layout_is_deterministic_without_random_fallback():
    items = LIVING + _items(("rug", "Rug"), ("art", "Print"), ("accent", "Side Table"), ("light", "Floor Lamp"))

    def run():
        layout = generate_layout(items, 180, "Living Room", rng=random.Random(3), random_fallback=False)
        return [(p.item.id, p.x, p.y) for p in layout.placed]

    assert run() == run()


def test_crowded_room_warns_but_keeps_every_piece():
    items = _items(("sofa", "Sofa"), ("sofa", "Sofa"), ("sofa", "Sofa"))
    with pytest.warns(UserWarning, match="could not be placed"):
        layout = generate_layout(items, 0, "Living Room", room_w=5, room_l=5, rng=random.Random(1))
    assert len(layout.placed) == 3


def test_every_room_kind_has_a_strategy_for_every_category():
    for kind in RoomKind:
        for cat in Category:
            strategy = strategy_for(kind, cat)
            assert strategy
            assert all(callable(build) for build in strategy)


def test_room_kind_lookup():
    assert room_kind("Kitchen") is RoomKind.DINING
    assert room_kind("Garage") is RoomKind.OTHER


def test_room_size_from_area():
    w, length = room_size(200, "Bedroom")
    assert w * length == pytest.approx(200)
    assert w / length == pytest.approx(1.25)
    assert room_size(200, "Bedroom", 10, 20) == (10, 20)
    layout = generate_layout([], 200, "Bedroom")
    assert layout.canvas_w == int(math.floor(math.sqrt(250) * 60 + 0.5))


def test_room_without_area_uses_default_footprint():
    w, length = room_size(0, "Living Room")
    assert w * length == pytest.approx(DEFAULT_ROOM_SQFT)
    w, length = room_size(-40, "Office", room_w=0)
    assert w * length == pytest.approx(DEFAULT_ROOM_SQFT)
    layout = generate_layout(_items(("sofa", "Sofa")), 0, "Living Room", rng=random.Random(0))
    assert layout.canvas_w > 0 and layout.canvas_h > 0
    assert len(layout.placed) == 1


def test_openings_from_hints():
    windows, doors = openings_from_hints(840, 960, 60, None)
    assert len(windows) == 2 and doors[0].side == "right"

    windows, doors = openings_from_hints(840, 960, 60, "3 windows and an entry door")
    assert len(windows) == 3
    assert all(w.side == "top" for w in windows)
    assert doors[0].side == "right"

    windows, doors = openings_from_hints(840, 960, 60, "bright corner")
    assert len(windows) == 2
    assert doors[0].side == "bottom"


def test_nightstands_flank_bed_after_dresser():
    items = _items(("bed", "Queen Bed"), ("storage", "Dresser"), ("accent", "Nightstand"), ("accent", "Nightstand"))
    layout = generate_layout(items, 0, "Bedroom", room_w=12, room_l=14, rng=random.Random(0))
    bed = _by_name(layout, "Queen Bed")[0]
    stands = _by_name(layout, "Nightstand")
    assert len(stands) == 2
    assert sum(s.x + s.w <= bed.x for s in stands) == 1
    assert sum(s.x >= bed.x + bed.w for s in stands) == 1
