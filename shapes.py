from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from geometry import Point, Room


def create_empty_room(width_ft: float, height_ft: float) -> Room:
    return Room(((0, 0), (width_ft, 0), (width_ft, height_ft), (0, height_ft)))


def create_l_shaped_room(w1: float, h1: float, w2: float, h2: float) -> Room:
    """Return a ``w1`` x ``h1`` room with its top-right corner cut away.

    ``w2`` is the width of the full-height leg and ``h2`` the height of the
    lower, full-width part."""
    return Room((
        (0, 0), (w2, 0), (w2, h1 - h2), (w1, h1 - h2), (w1, h1), (0, h1),
    ))


def create_u_shaped_room(w: float, h: float, cut_w: float, cut_h: float) -> Room:
    """A ``w`` x ``h`` room with a courtyard notched into the bottom wall."""
    return Room((
        (0, 0), (w, 0), (w, h), (w - cut_w, h),
        (w - cut_w, h - cut_h), (cut_w, h - cut_h), (cut_w, h), (0, h),
    ))


def create_t_shaped_room(w: float, h: float, stem_w: float, stem_h: float) -> Room:
    sx = (w - stem_w) / 2
    return Room((
        (sx, 0), (sx + stem_w, 0), (sx + stem_w, stem_h), (w, stem_h),
        (w, h), (0, h), (0, stem_h), (sx, stem_h),
    ))


def create_custom_polygon_room(vertices: Sequence[Point]) -> Room:
    return Room(tuple(vertices))


@dataclass(frozen=True)
class RoomTemplate:
    id: str
    name: str
    category: str
    vertices: Tuple[Point, ...]
    description: str
    width_ft: float
    height_ft: float

    def room(self) -> Room:
        return Room(self.vertices)


def _rect(w: float, h: float) -> Tuple[Point, ...]:
    return ((0, 0), (w, 0), (w, h), (0, h))


ROOM_TEMPLATES: List[RoomTemplate] = [
    RoomTemplate("rect_small", "Small Rectangle", "Basic", _rect(10, 12), "10×12 compact room", 10, 12),
    RoomTemplate("rect_medium", "Medium Rectangle", "Basic", _rect(14, 16), "14×16 standard room", 14, 16),
    RoomTemplate("rect_large", "Large Rectangle", "Basic", _rect(20, 18), "20×18 spacious room", 20, 18),
    RoomTemplate("square", "Square Room", "Basic", _rect(15, 15), "15×15 square", 15, 15),
    RoomTemplate(
        "l_shape", "L-Shape", "Complex",
        ((0, 0), (10, 0), (10, 8), (18, 8), (18, 16), (0, 16)),
        "L-shaped living area", 18, 16,
    ),
    RoomTemplate(
        "u_shape", "U-Shape", "Complex",
        ((0, 0), (20, 0), (20, 16), (14, 16), (14, 8), (6, 8), (6, 16), (0, 16)),
        "U-shaped with inner courtyard", 20, 16,
    ),
    RoomTemplate("studio", "Studio Apartment", "Residential", _rect(25, 14), "25×14 open studio", 25, 14),
    RoomTemplate("master_bed", "Master Bedroom", "Residential", _rect(16, 14), "16×14 with ensuite space", 16, 14),
    RoomTemplate(
        "open_kitchen", "Open Kitchen", "Residential",
        ((0, 0), (18, 0), (18, 12), (12, 12), (12, 20), (0, 20)),
        "Kitchen with dining extension", 18, 20,
    ),
    RoomTemplate("great_room", "Great Room", "Residential", _rect(28, 22), "28×22 grand space", 28, 22),
    RoomTemplate(
        "alcove", "Room with Alcove", "Complex",
        ((0, 0), (16, 0), (16, 6), (20, 6), (20, 12), (16, 12), (16, 18), (0, 18)),
        "16×18 with side alcove", 20, 18,
    ),
    RoomTemplate(
        "bay_window", "Bay Window Room", "Complex",
        ((0, 0), (14, 0), (16, 3), (16, 9), (14, 12), (0, 12)),
        "14×12 with bay bump-out", 16, 12,
    ),
    RoomTemplate("office", "Home Office", "Residential", _rect(12, 10), "12×10 workspace", 12, 10),
    RoomTemplate("dining", "Formal Dining", "Residential", _rect(14, 12), "14×12 dining room", 14, 12),
    RoomTemplate("nursery", "Nursery", "Residential", _rect(11, 10), "11×10 baby room", 11, 10),
]


def get_template(template_id: str) -> Optional[RoomTemplate]:
    for tpl in ROOM_TEMPLATES:
        if tpl.id == template_id:
            return tpl
    return None
