import os
import sys
from collections import namedtuple

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from shapes import create_empty_room
from snapping import (
    HORIZONTAL,
    VERTICAL,
    Guide,
    apply_smart_snap,
    get_distance_guides,
    get_smart_snaps,
    snap_to_angle,
    snap_to_grid,
    snap_to_wall,
)

Box = namedtuple("Box", "id x y w h")
ROOM = create_empty_room(14, 16)


def test_snap_to_grid_rounds_half_up():
    assert snap_to_grid(1.4, 2.6, 1) == (1, 3)
    assert snap_to_grid(0.5, 1.5, 1) == (1, 2)
    assert snap_to_grid(1.3, 0.2, 0.5) == (1.5, 0)


def test_smart_snaps_find_edges_and_centres():
    others = [Box("a", 5, 5, 2, 2)]
    guides = get_smart_snaps(Box("m", 5.2, 9, 2, 2), others, ROOM)
    assert guides == [Guide(VERTICAL, 4), Guide(VERTICAL, 6), Guide(VERTICAL, 5)]


def test_smart_snaps_ignore_the_moving_piece_and_dedupe():
    moving = Box("m", 7, 8, 2, 2)
    guides = get_smart_snaps(moving, [moving], ROOM)
    # room centre lines only
    assert guides == [Guide(VERTICAL, 7), Guide(HORIZONTAL, 8)]


def test_apply_smart_snap_aligns_to_neighbour():
    result = apply_smart_snap(5.2, 9, 2, 2, [Box("a", 5, 5, 2, 2)], ROOM)
    assert (result.x, result.y) == pytest.approx((5, 9))
    assert result.guides


def test_apply_smart_snap_to_wall_edge():
    result = apply_smart_snap(1.2, 9.1, 2, 2, [], ROOM)
    assert result.x == pytest.approx(1)
    assert result.y == pytest.approx(9.1)


def test_snap_to_wall():
    snapped = snap_to_wall(7, 0.2, ROOM, 0.5)
    assert snapped.snapped
    assert (snapped.x, snapped.y) == pytest.approx((7, 0))
    assert snap_to_wall(7, 7, ROOM, 0.5) == (7, 7, False)


def test_snap_to_angle_keeps_distance():
    x, y = snap_to_angle(1, 0.1, (0, 0), 45)
    assert y == pytest.approx(0, abs=1e-9)
    assert x == pytest.approx((1 + 0.01) ** 0.5)
    x, y = snap_to_angle(3, 2.8, (1, 1), 45)
    assert x - 1 == pytest.approx(y - 1)


def test_distance_guides_when_balanced():
    centred = Box("m", 7, 8, 2, 2)
    assert get_distance_guides(centred, [], ROOM) == [Guide(VERTICAL, 7), Guide(HORIZONTAL, 8)]
    assert get_distance_guides(Box("m", 3, 3, 2, 2), [], ROOM) == []
