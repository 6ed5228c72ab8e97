import os
import sys

import pytest

# Ensure repository root importable when tests run from this directory
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry import point_in_polygon, room_area
from shapes import (
    ROOM_TEMPLATES,
    create_custom_polygon_room,
    create_empty_room,
    create_l_shaped_room,
    create_t_shaped_room,
    create_u_shaped_room,
    get_template,
)


def test_multi_segment_rooms_have_expected_area():
    assert room_area(create_l_shaped_room(18, 16, 10, 8)) == pytest.approx(224)
    assert room_area(create_u_shaped_room(20, 16, 6, 8)) == pytest.approx(256)
    assert room_area(create_t_shaped_room(20, 16, 8, 6)) == pytest.approx(248)


def test_l_shape_cut_corner_is_outside():
    room = create_l_shaped_room(18, 16, 10, 8)
    assert len(room.vertices) == 6
    assert not point_in_polygon(15, 4, room.vertices)
    assert point_in_polygon(15, 12, room.vertices)


def test_u_shape_courtyard_is_outside():
    room = create_u_shaped_room(20, 16, 6, 8)
    assert not point_in_polygon(10, 12, room.vertices)
    assert point_in_polygon(3, 12, room.vertices)


def test_custom_polygon_and_empty_room():
    tri = create_custom_polygon_room([(0, 0), (6, 0), (0, 4)])
    assert room_area(tri) == pytest.approx(12)
    assert create_empty_room(10, 12).vertices == ((0, 0), (10, 0), (10, 12), (0, 12))


def test_templates_are_unique_and_match_their_extent():
    ids = [t.id for t in ROOM_TEMPLATES]
    assert len(ids) == len(set(ids)) == 15
    for tpl in ROOM_TEMPLATES:
        xs = [x for x, _ in tpl.vertices]
        ys = [y for _, y in tpl.vertices]
        assert max(xs) - min(xs) == tpl.width_ft
        assert max(ys) - min(ys) == tpl.height_ft


def test_get_template():
    assert get_template("studio").name == "Studio Apartment"
    assert get_template("castle") is None
