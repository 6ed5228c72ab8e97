import os
import sys
from collections import namedtuple

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from collision import Rect
from editor import EditorDoor, EditorFurniture
from geometry import wall_segments
from shapes import create_empty_room
from solver import DoorDef
from ui.overlays import (
    compute_clearances,
    compute_traffic_paths,
    layout_dimension_lines,
    layout_traffic_paths,
)

ROOM = create_empty_room(14, 16)
Piece = namedtuple("Piece", "id category x y w h")


def test_clearance_zones_for_large_pieces():
    sofa = Piece("s", "sofa", 7, 10, 7, 3)
    zones = compute_clearances([sofa])
    front, left, right = zones
    assert (front.x, front.y, front.w, front.h) == (3.5, 11.5, 7, 2.5)
    assert front.label == "2.5'"
    assert (left.x, left.w) == (2.0, 1.5)
    assert (right.x, right.w) == (10.5, 1.5)


def test_narrow_pieces_get_front_zone_only():
    zones = compute_clearances([Piece("c", "chair", 3, 3, 1.6, 1.8)])
    assert len(zones) == 1
    assert zones[0].label == "1.5'"


def test_exempt_pieces_have_no_clearance():
    pieces = [
        Piece("r", "rug", 7, 8, 8, 5),
        Piece("a", "art", 7, 0.5, 2.5, 0.3),
        Piece("l", "light", 2, 2, 1, 1),
        Piece("d", "decor", 4, 4, 1, 1),
    ]
    assert compute_clearances(pieces) == []


def test_editor_traffic_path_from_door_to_sofa():
    sofa = EditorFurniture("furn_1", 1, 7, 12, 7, 3, category="sofa")
    door = EditorDoor("door_1", "wall_0", 0.5)
    main, walkway = compute_traffic_paths([sofa], [door], wall_segments(ROOM), ROOM)
    assert main.label == "Main Path"
    assert main.points == ((7, 0), (7, 8), (7, 15))
    assert walkway.label == "2.5' Walkway"
    assert walkway.points[0] == (2.5, 2.5)
    assert walkway.points[2] == (11.5, 13.5)


def test_editor_traffic_path_without_door():
    main, _ = compute_traffic_paths([], [], wall_segments(ROOM), ROOM)
    assert main.points[0] == pytest.approx((9.8, 16))


def test_layout_main_path_needs_a_destination():
    paths = layout_traffic_paths(840, 960, 60, [], {})
    assert [p.label for p in paths] == ["2.5′ Walkway"]

    door = DoorDef(840 - 180, 960 - 180, 180, "right")
    paths = layout_traffic_paths(840, 960, 60, [door], {"sofa": Rect(210, 505, 420, 180)})
    assert paths[0].label == "Main Path"
    assert paths[0].points[0] == (840, 870)
    assert paths[0].points[-1] == (420, 775)


def test_dining_dimension_lines():
    table = Rect(180, 324, 360, 192)
    lines = layout_dimension_lines(720, 840, 60, {"table": table}, 15, dining=True)
    assert [line.label for line in lines] == ["3′", "3′"]
    assert layout_dimension_lines(720, 840, 60, {"table": table}, 15) == []
