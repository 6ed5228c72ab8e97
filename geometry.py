"""Room polygon primitives in feet.

Rooms are simple (not necessarily convex) polygons.  Walls are derived from
consecutive vertex pairs and never stored on their own.
"""

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from rules import DEFAULT_WALL_THICKNESS_FT

Point = Tuple[float, float]


@dataclass(frozen=True)
class Room:
    vertices: Tuple[Point, ...]
    wall_thickness: float = DEFAULT_WALL_THICKNESS_FT

    def __post_init__(self):
        verts = tuple((float(x), float(y)) for x, y in self.vertices)
        if len(verts) < 3:
            raise ValueError("room needs at least 3 vertices")
        object.__setattr__(self, "vertices", verts)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.vertices, dtype=float)


@dataclass(frozen=True)
class Wall:
    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float = DEFAULT_WALL_THICKNESS_FT


class Bounds(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class WallHit(NamedTuple):
    wall: Wall
    t: float
    dist: float


# -----------------------
# Measurements
# -----------------------

def room_area(room: Room) -> float:
    """Shoelace area of the room polygon in square feet."""
    v = room.as_array()
    x, y = v[:, 0], v[:, 1]
    xn, yn = np.roll(x, -1), np.roll(y, -1)
    return float(abs(np.sum(x * yn - xn * y)) / 2)


def room_bounds(room: Room) -> Bounds:
    v = room.as_array()
    lo = v.min(axis=0)
    hi = v.max(axis=0)
    return Bounds(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


def _edge_lengths(room: Room) -> np.ndarray:
    v = room.as_array()
    return np.hypot(*(np.roll(v, -1, axis=0) - v).T)


def room_perimeter(room: Room) -> float:
    return float(_edge_lengths(room).sum())


def wall_lengths(room: Room) -> List[Tuple[str, float]]:
    return [(f"wall_{i}", float(l)) for i, l in enumerate(_edge_lengths(room))]


def corner_angles(room: Room) -> List[float]:
    """Angle in degrees at each vertex, measured from the previous vertex to
    the next one and normalised into ``[0, 360)``."""
    v = room.vertices
    n = len(v)
    out = []
    for i, (cx, cy) in enumerate(v):
        px, py = v[(i - 1) % n]
        nx, ny = v[(i + 1) % n]
        a1 = math.atan2(py - cy, px - cx)
        a2 = math.atan2(ny - cy, nx - cx)
        angle = math.degrees(a2 - a1)
        if angle < 0:
            angle += 360
        out.append(angle)
    return out


def wall_segments(room: Room) -> List[Wall]:
    v = room.vertices
    walls = []
    for i, (x1, y1) in enumerate(v):
        x2, y2 = v[(i + 1) % len(v)]
        walls.append(Wall(f"wall_{i}", x1, y1, x2, y2, room.wall_thickness))
    return walls


def distance_ft(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def format_dist(ft: float) -> str:
    """``2.5'`` for distances of a foot or more, otherwise whole inches."""
    rounded = round(ft * 10) / 10
    if rounded >= 1:
        return f"{rounded:g}'"
    return f'{round(ft * 12)}"'


def wall_point_at(wall: Wall, t: float) -> Point:
    return wall.x1 + (wall.x2 - wall.x1) * t, wall.y1 + (wall.y2 - wall.y1) * t


def wall_length(wall: Wall) -> float:
    return distance_ft(wall.x1, wall.y1, wall.x2, wall.y2)


def wall_angle(wall: Wall) -> float:
    """Direction of the wall in radians."""
    return math.atan2(wall.y2 - wall.y1, wall.x2 - wall.x1)


def find_wall(walls: Iterable[Wall], wall_id: str) -> Optional[Wall]:
    for w in walls:
        if w.id == wall_id:
            return w
    return None


def nearest_wall(px: float, py: float, walls: Sequence[Wall], threshold: float = 0.5) -> Optional[WallHit]:
    """Closest wall to ``(px, py)`` strictly within ``threshold`` feet."""
    best = None
    for w in walls:
        dx = w.x2 - w.x1
        dy = w.y2 - w.y1
        len2 = dx * dx + dy * dy
        if len2 == 0:
            continue
        t = ((px - w.x1) * dx + (py - w.y1) * dy) / len2
        t = max(0.0, min(1.0, t))
        d = distance_ft(px, py, w.x1 + t * dx, w.y1 + t * dy)
        if d < threshold and (best is None or d < best.dist):
            best = WallHit(w, t, d)
    return best


# -----------------------
# Containment
# -----------------------

def point_in_polygon(px: float, py: float, vertices: Sequence[Point]) -> bool:
    """Ray-casting parity test."""
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def rect_corners(cx: float, cy: float, w: float, h: float, rotation: float = 0.0) -> np.ndarray:
    """The four corners of a ``w`` x ``h`` rectangle rotated about its center."""
    rad = math.radians(rotation)
    c, s = math.cos(rad), math.sin(rad)
    half = np.array([[w / 2, h / 2], [-w / 2, h / 2], [-w / 2, -h / 2], [w / 2, -h / 2]])
    rot = np.array([[c, -s], [s, c]])
    return half @ rot.T + np.array([cx, cy])


def rect_inside_room(cx: float, cy: float, w: float, h: float, rotation: float, room: Room) -> bool:
    return all(
        point_in_polygon(float(x), float(y), room.vertices)
        for x, y in rect_corners(cx, cy, w, h, rotation)
    )


def offset_polygon(vertices: Sequence[Point], offset: float) -> List[Point]:
    """Shift each vertex along the averaged normal of its two edges."""
    v = np.asarray(vertices, dtype=float)
    d1 = v - np.roll(v, 1, axis=0)
    d2 = np.roll(v, -1, axis=0) - v

    def _normals(d):
        length = np.hypot(d[:, 0], d[:, 1])
        length[length == 0] = 1
        return np.stack([-d[:, 1] / length, d[:, 0] / length], axis=1)

    n = (_normals(d1) + _normals(d2)) / 2
    nl = np.hypot(n[:, 0], n[:, 1])
    nl[nl == 0] = 1
    shifted = v + n / nl[:, None] * offset
    return [(float(x), float(y)) for x, y in shifted]


# -----------------------
# Vertex editing
# -----------------------

def add_vertex(room: Room, after_index: int, vertex: Point) -> Room:
    verts = list(room.vertices)
    verts.insert(after_index + 1, vertex)
    return replace(room, vertices=tuple(verts))


def move_vertex(room: Room, index: int, new_pos: Point) -> Room:
    verts = list(room.vertices)
    verts[index] = new_pos
    return replace(room, vertices=tuple(verts))


def remove_vertex(room: Room, index: int) -> Room:
    """Drop vertex ``index``; a triangle is returned unchanged."""
    if len(room.vertices) <= 3:
        return room
    verts = tuple(v for i, v in enumerate(room.vertices) if i != index)
    return replace(room, vertices=verts)
