"""Grid, wall and alignment snapping for interactive dragging (feet)."""

import math
from typing import List, NamedTuple, Sequence

from geometry import Point, Room, nearest_wall, room_bounds, wall_point_at, wall_segments

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


class Guide(NamedTuple):
    type: str
    position: float


class SnapResult(NamedTuple):
    x: float
    y: float
    guides: List[Guide]


class WallSnap(NamedTuple):
    x: float
    y: float
    snapped: bool


class _Probe(NamedTuple):
    id: str
    x: float
    y: float
    w: float
    h: float


def _round_half_up(v: float) -> float:
    return math.floor(v + 0.5)


def snap_to_grid(x: float, y: float, grid_size: float) -> Point:
    return _round_half_up(x / grid_size) * grid_size, _round_half_up(y / grid_size) * grid_size


def _edge_guides(kind: str, m1: float, m2: float, mc: float,
                 o1: float, o2: float, oc: float, threshold: float) -> List[Guide]:
    """Edge to edge, centre to centre and edge to opposite edge matches."""
    pairs = ((m1, o1), (m2, o2), (mc, oc), (m1, o2), (m2, o1))
    return [Guide(kind, o) for m, o in pairs if abs(m - o) < threshold]


def get_smart_snaps(moving, others: Sequence, room: Room, threshold: float = 0.3) -> List[Guide]:
    mx1, mx2 = moving.x - moving.w / 2, moving.x + moving.w / 2
    my1, my2 = moving.y - moving.h / 2, moving.y + moving.h / 2

    guides: List[Guide] = []
    for o in others:
        if o.id == moving.id:
            continue
        guides += _edge_guides(HORIZONTAL, my1, my2, moving.y,
                               o.y - o.h / 2, o.y + o.h / 2, o.y, threshold)
        guides += _edge_guides(VERTICAL, mx1, mx2, moving.x,
                               o.x - o.w / 2, o.x + o.w / 2, o.x, threshold)

    b = room_bounds(room)
    rcx, rcy = (b.min_x + b.max_x) / 2, (b.min_y + b.max_y) / 2
    for kind, m, pos in (
        (VERTICAL, mx1, b.min_x),
        (VERTICAL, mx2, b.max_x),
        (HORIZONTAL, my1, b.min_y),
        (HORIZONTAL, my2, b.max_y),
        (VERTICAL, moving.x, rcx),
        (HORIZONTAL, moving.y, rcy),
    ):
        if abs(m - pos) < threshold:
            guides.append(Guide(kind, pos))

    seen = set()
    unique = []
    for g in guides:
        key = (g.type, f"{g.position:.2f}")
        if key not in seen:
            seen.add(key)
            unique.append(g)
    return unique


def _snap_axis(c: float, size: float, guide: float, threshold: float, current: float) -> float:
    lo, hi = c - size / 2, c + size / 2
    if abs(lo - guide) < threshold:
        return guide + size / 2
    if abs(hi - guide) < threshold:
        return guide - size / 2
    if abs(c - guide) < threshold:
        return guide
    return current


def apply_smart_snap(x: float, y: float, w: float, h: float, others: Sequence,
                     room: Room, threshold: float = 0.3) -> SnapResult:
    """Snap a ``w`` x ``h`` piece centred on ``(x, y)``.

    Guides are applied in the order they were found and each one is tested
    against the unsnapped position, so the last matching guide on an axis wins.
    """
    guides = get_smart_snaps(_Probe("__snap__", x, y, w, h), others, room, threshold)
    sx, sy = x, y
    for g in guides:
        if g.type == VERTICAL:
            sx = _snap_axis(x, w, g.position, threshold, sx)
        else:
            sy = _snap_axis(y, h, g.position, threshold, sy)
    return SnapResult(sx, sy, guides)


def snap_to_wall(x: float, y: float, room: Room, threshold: float) -> WallSnap:
    hit = nearest_wall(x, y, wall_segments(room), threshold)
    if hit is None:
        return WallSnap(x, y, False)
    px, py = wall_point_at(hit.wall, hit.t)
    return WallSnap(px, py, True)


def snap_to_angle(x: float, y: float, origin: Point, angle_increment: float) -> Point:
    """Rotate ``(x, y)`` about ``origin`` onto the nearest multiple of
    ``angle_increment`` degrees, keeping its distance."""
    ox, oy = origin
    dist = math.hypot(x - ox, y - oy)
    inc = math.radians(angle_increment)
    snapped = _round_half_up(math.atan2(y - oy, x - ox) / inc) * inc
    return ox + dist * math.cos(snapped), oy + dist * math.sin(snapped)


def get_distance_guides(moving, others: Sequence, room: Room) -> List[Guide]:
    """Guides through the room centre when the piece is balanced between
    opposite walls.  ``others`` is accepted for call-site symmetry."""
    b = room_bounds(room)
    to_left = moving.x - moving.w / 2 - b.min_x
    to_right = b.max_x - (moving.x + moving.w / 2)
    to_top = moving.y - moving.h / 2 - b.min_y
    to_bottom = b.max_y - (moving.y + moving.h / 2)
    guides = []
    if abs(to_left - to_right) < 0.3:
        guides.append(Guide(VERTICAL, (b.min_x + b.max_x) / 2))
    if abs(to_top - to_bottom) < 0.3:
        guides.append(Guide(HORIZONTAL, (b.min_y + b.max_y) / 2))
    return guides
