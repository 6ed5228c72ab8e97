"""Derived overlay geometry for layout and editor views.

Nothing here draws: the functions return clearance rectangles, traffic
polylines and dimension call-outs for a renderer to paint.  Layout overlays
are in canvas pixels, editor overlays in feet.  All of them go stale as soon
as a piece moves and are recomputed on demand.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from collision import Rect
from dimensions import Category, get_product_dims
from geometry import Room, find_wall, room_bounds, wall_point_at
from rules import CLEARANCE_RULES

Point = Tuple[float, float]

# No clearance zone is drawn around these.
NO_CLEARANCE = frozenset({Category.RUG, Category.ART, Category.LIGHT, Category.DECOR})


@dataclass(frozen=True)
class ClearanceZone:
    x: float
    y: float
    w: float
    h: float
    label: str
    dist_ft: float = 0.0


@dataclass(frozen=True)
class TrafficPath:
    points: Tuple[Point, ...]
    label: str


@dataclass(frozen=True)
class DimensionLine:
    x1: float
    y1: float
    x2: float
    y2: float
    label: str


def _prime(ft: float) -> str:
    return f"{round(ft * 10) / 10:g}′"


def _walkway(x0: float, y0: float, x1: float, y1: float, offset: float) -> Tuple[Point, ...]:
    return (
        (x0 + offset, y0 + offset),
        (x1 - offset, y0 + offset),
        (x1 - offset, y1 - offset),
        (x0 + offset, y1 - offset),
        (x0 + offset, y0 + offset),
    )


# -----------------------
# Generated layout (pixels)
# -----------------------

def layout_clearances(placed: Sequence, scale: float) -> List[ClearanceZone]:
    """Front zone below every piece, side zones for pieces wider than 2 ft."""
    zones = []
    for p in placed:
        if Category.coerce(p.item.category) in NO_CLEARANCE:
            continue
        dims = get_product_dims(p.item)
        front = dims.clear_front * scale
        side = dims.clear_side * scale
        if front > 0:
            zones.append(ClearanceZone(p.x, p.y + p.h, p.w, front, _prime(dims.clear_front), dims.clear_front))
        if side > 0 and p.w > scale * 2:
            label = _prime(dims.clear_side)
            zones.append(ClearanceZone(p.x - side, p.y, side, p.h, label, dims.clear_side))
            zones.append(ClearanceZone(p.x + p.w, p.y, side, p.h, label, dims.clear_side))
    return zones


def _door_point(door, canvas_w: float, canvas_h: float) -> Point:
    if door.side == "right":
        return canvas_w, door.y + door.w / 2
    if door.side == "bottom":
        return door.x + door.w / 2, canvas_h
    if door.side == "left":
        return 0.0, door.y + door.w / 2
    return door.x + door.w / 2, 0.0


def layout_traffic_paths(
    canvas_w: float,
    canvas_h: float,
    scale: float,
    doors: Sequence,
    anchors: Dict[str, Rect],
) -> List[TrafficPath]:
    """Main path from the first door through the room centre to the primary
    seating (sofa, else bed, else table), plus a perimeter walkway."""
    offset = CLEARANCE_RULES["walkway_offset"] * scale
    door = doors[0] if doors else None
    door_pt = _door_point(door, canvas_w, canvas_h) if door else (canvas_w * 0.7, canvas_h - scale)
    center = (canvas_w / 2, canvas_h / 2)

    points = [door_pt]
    if door is not None and door.side == "right":
        points.append((canvas_w - offset, door_pt[1]))
        points.append((canvas_w - offset, center[1]))
    elif door is not None and door.side == "bottom":
        points.append((door_pt[0], canvas_h - offset))
        points.append((center[0], canvas_h - offset))
    points.append(center)

    sofa, bed, table = anchors.get("sofa"), anchors.get("bed"), anchors.get("table")
    if sofa:
        points.append((sofa.cx, sofa.y + sofa.h + 1.5 * scale))
    elif bed:
        points.append((bed.cx, bed.y + bed.h + 2 * scale))
    elif table:
        points.append((table.cx, table.y + table.h + 1.5 * scale))

    paths = []
    if len(points) >= 3:
        paths.append(TrafficPath(tuple(points), "Main Path"))
    paths.append(TrafficPath(
        _walkway(0, 0, canvas_w, canvas_h, offset),
        f"{_prime(CLEARANCE_RULES['walkway_offset'])} Walkway",
    ))
    return paths


def layout_dimension_lines(
    canvas_w: float,
    canvas_h: float,
    scale: float,
    anchors: Dict[str, Rect],
    wall_gap: float,
    dining: bool = False,
) -> List[DimensionLine]:
    lines = []
    sofa, bed, table = anchors.get("sofa"), anchors.get("bed"), anchors.get("table")

    if sofa and table:
        gap = sofa.y - (table.y + table.h)
        if gap > 0:
            lines.append(DimensionLine(sofa.cx, table.y + table.h, sofa.cx, sofa.y, _prime(gap / scale)))

    if bed:
        if bed.x > wall_gap + scale:
            lines.append(DimensionLine(0, bed.cy, bed.x, bed.cy, _prime(bed.x / scale)))
        right = canvas_w - (bed.x + bed.w)
        if right > scale:
            lines.append(DimensionLine(bed.x + bed.w, bed.cy, canvas_w, bed.cy, _prime(right / scale)))

    if sofa:
        below = canvas_h - (sofa.y + sofa.h)
        if below > scale:
            lines.append(DimensionLine(sofa.cx, sofa.y + sofa.h, sofa.cx, canvas_h, _prime(below / scale)))

    if table and dining:
        lines.append(DimensionLine(0, table.cy, table.x, table.cy, _prime(table.x / scale)))
        right = canvas_w - (table.x + table.w)
        lines.append(DimensionLine(table.x + table.w, table.cy, canvas_w, table.cy, _prime(right / scale)))
    return lines


# -----------------------
# Editor (feet)
# -----------------------

def compute_clearances(furniture: Sequence) -> List[ClearanceZone]:
    rules = CLEARANCE_RULES
    zones = []
    for f in furniture:
        cat = Category.coerce(f.category)
        if cat in NO_CLEARANCE:
            continue
        large = cat.value in rules["large_categories"]
        front = rules["large_front"] if large else rules["front"]
        side = rules["large_side"] if large else rules["side"]
        zones.append(ClearanceZone(f.x - f.w / 2, f.y + f.h / 2, f.w, front, f"{front:g}'", front))
        if f.w > rules["min_width_for_side"]:
            zones.append(ClearanceZone(f.x - f.w / 2 - side, f.y - f.h / 2, side, f.h, f"{side:g}'", side))
            zones.append(ClearanceZone(f.x + f.w / 2, f.y - f.h / 2, side, f.h, f"{side:g}'", side))
    return zones


def _primary_piece(furniture: Sequence):
    for cat in (Category.SOFA, Category.BED, Category.TABLE):
        for f in furniture:
            if Category.coerce(f.category) is cat:
                return f
    return None


def compute_traffic_paths(furniture: Sequence, doors: Sequence, walls: Sequence, room: Room) -> List[TrafficPath]:
    b = room_bounds(room)
    door_pt: Point = (b.width * 0.7, b.height)
    wall = find_wall(walls, doors[0].wall_id) if doors else None
    if wall is not None:
        door_pt = wall_point_at(wall, doors[0].position)

    center = ((b.min_x + b.max_x) / 2, (b.min_y + b.max_y) / 2)
    points = [door_pt, center]
    anchor = _primary_piece(furniture)
    if anchor is not None:
        points.append((anchor.x, anchor.y + anchor.h / 2 + 1.5))

    offset = CLEARANCE_RULES["walkway_offset"]
    return [
        TrafficPath(tuple(points), "Main Path"),
        TrafficPath(_walkway(b.min_x, b.min_y, b.max_x, b.max_y, offset), f"{offset:g}' Walkway"),
    ]
