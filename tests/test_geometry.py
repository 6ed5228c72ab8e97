import math
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry import (
    Room,
    add_vertex,
    corner_angles,
    format_dist,
    move_vertex,
    nearest_wall,
    offset_polygon,
    point_in_polygon,
    rect_inside_room,
    remove_vertex,
    room_area,
    room_bounds,
    room_perimeter,
    wall_lengths,
    wall_segments,
)
from shapes import create_empty_room, get_template

L_SHAPE = ((0, 0), (10, 0), (10, 8), (18, 8), (18, 16), (0, 16))


def test_rectangle_measurements():
    room = create_empty_room(14, 16)
    assert room_area(room) == pytest.approx(224)
    assert room_perimeter(room) == pytest.approx(60)
    b = room_bounds(room)
    assert (b.width, b.height) == (14, 16)


def test_ten_by_twelve_room_area():
    assert room_area(create_empty_room(10, 12)) == pytest.approx(120)
    assert room_area(Room(((0, 0), (10, 0), (10, 12), (0, 12)))) == pytest.approx(120)


def test_l_shape_area_and_walls():
    room = Room(L_SHAPE)
    assert room_area(room) == pytest.approx(224)
    assert room_area(get_template("l_shape").room()) == pytest.approx(224)
    assert [w for w, _ in wall_lengths(room)] == [f"wall_{i}" for i in range(6)]
    assert [length for _, length in wall_lengths(room)] == pytest.approx([10, 8, 8, 8, 18, 16])


def test_walls_follow_vertices():
    walls = wall_segments(create_empty_room(14, 16))
    assert [w.id for w in walls] == ["wall_0", "wall_1", "wall_2", "wall_3"]
    assert (walls[2].x1, walls[2].y1, walls[2].x2, walls[2].y2) == (14, 16, 0, 16)
    assert walls[0].thickness == 0.5


def test_rectangle_corners_match():
    angles = corner_angles(create_empty_room(4, 4))
    assert len(angles) == 4
    assert angles[0] in (90, 270)
    assert all(a == pytest.approx(angles[0]) for a in angles)


def test_point_in_l_shape():
    assert point_in_polygon(5, 4, L_SHAPE)
    assert not point_in_polygon(15, 4, L_SHAPE)
    assert point_in_polygon(15, 12, L_SHAPE)


def test_rotated_rect_can_leave_room():
    room = create_empty_room(14, 16)
    assert rect_inside_room(1.2, 1.2, 2, 2, 0, room)
    assert not rect_inside_room(1.2, 1.2, 2, 2, 45, room)


def test_nearest_wall_within_threshold():
    walls = wall_segments(create_empty_room(14, 16))
    hit = nearest_wall(7, 0.3, walls)
    assert hit.wall.id == "wall_0"
    assert hit.t == pytest.approx(0.5)
    assert nearest_wall(7, 8, walls) is None


def test_format_dist():
    assert format_dist(2.5) == "2.5'"
    assert format_dist(3) == "3'"
    assert format_dist(0.5) == '6"'


def test_offset_polygon_moves_along_bisector():
    out = offset_polygon(((0, 0), (10, 0), (10, 10), (0, 10)), 1)
    x, y = out[0]
    assert abs(x) == pytest.approx(math.sqrt(0.5))
    assert abs(y) == pytest.approx(math.sqrt(0.5))


def test_vertex_editing():
    room = create_empty_room(10, 10)
    bigger = add_vertex(room, 0, (5, -2))
    assert bigger.vertices[1] == (5.0, -2.0)
    assert len(bigger.vertices) == 5
    moved = move_vertex(room, 2, (12, 12))
    assert moved.vertices[2] == (12.0, 12.0)
    assert room.vertices[2] == (10.0, 10.0)
    assert len(remove_vertex(bigger, 1).vertices) == 4


def test_triangle_keeps_its_vertices():
    tri = Room(((0, 0), (4, 0), (0, 3)))
    assert remove_vertex(tri, 0) is tri


def test_room_needs_three_vertices():
    with pytest.raises(ValueError):
        Room(((0, 0), (1, 1)))


def test_centroid_inside_far_point_outside():
    rect = create_empty_room(10, 12)
    assert point_in_polygon(5, 6, rect.vertices)
    assert not point_in_polygon(110, 112, rect.vertices)
    assert not point_in_polygon(118, 116, L_SHAPE)
    assert room_area(create_empty_room(10, 12)) == pytest.approx(120)
