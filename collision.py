"""Axis-aligned collision and clearance checks.

Two rectangle conventions are in use: the planner works with top-left
``Rect`` tuples in pixels, the editor with furniture centred on ``x``/``y``
in feet.  Rotation is ignored by every test here.
"""

import math
from typing import Iterable, List, NamedTuple, Sequence, Tuple

from dimensions import NON_BLOCKING, Category

# Pieces ignored by the pairwise clearance audit.
CLEARANCE_EXEMPT = NON_BLOCKING | {Category.DECOR}


class Rect(NamedTuple):
    x: float
    y: float
    w: float
    h: float

    @property
    def cx(self) -> float:
        return self.x + self.w / 2

    @property
    def cy(self) -> float:
        return self.y + self.h / 2


class ClearanceViolation(NamedTuple):
    id: str
    adjacent_id: str
    clearance: float


def rects_overlap(a: Rect, b: Rect, padding: float = 0.0) -> bool:
    """True when ``a`` grown by ``padding`` intersects ``b``; touching edges do not count."""
    p = padding
    return (
        a.x - p < b.x + b.w
        and a.x + a.w + p > b.x
        and a.y - p < b.y + b.h
        and a.y + a.h + p > b.y
    )


def rect_in_bounds(r: Rect, width: float, height: float, margin: float = 0.0) -> bool:
    return (
        r.x >= margin
        and r.y >= margin
        and r.x + r.w <= width - margin
        and r.y + r.h <= height - margin
    )


def _blocking(category) -> bool:
    return Category.coerce(category) not in NON_BLOCKING


def _extent(f) -> Tuple[float, float, float, float]:
    return f.x - f.w / 2, f.y - f.h / 2, f.x + f.w / 2, f.y + f.h / 2


def _boxes_overlap(a, b) -> bool:
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return ax1 < bx2 and ax2 > bx1 and ay1 < by2 and ay2 > by1


def check_collision(item, others: Iterable, padding: float = 0.0) -> bool:
    """Does ``item`` (grown by ``padding``) hit any blocking piece in ``others``?

    Rugs, lights and art are skipped as obstacles.  The moving ``item`` itself
    is tested whatever its category.
    """
    x1, y1, x2, y2 = _extent(item)
    box = (x1 - padding, y1 - padding, x2 + padding, y2 + padding)
    for o in others:
        if o.id == item.id or not _blocking(o.category):
            continue
        if _boxes_overlap(box, _extent(o)):
            return True
    return False


def get_overlapping_pairs(furniture: Sequence) -> List[Tuple[str, str]]:
    pairs = []
    for i, a in enumerate(furniture):
        for b in furniture[i + 1:]:
            if not (_blocking(a.category) and _blocking(b.category)):
                continue
            if _boxes_overlap(_extent(a), _extent(b)):
                pairs.append((a.id, b.id))
    return pairs


def check_minimum_clearance(furniture: Sequence, min_gap: float) -> List[ClearanceViolation]:
    """Pairs closer than ``min_gap`` feet.  Touching or overlapping pairs
    (gap of zero) are left to :func:`get_overlapping_pairs`."""
    out = []
    for i, a in enumerate(furniture):
        if Category.coerce(a.category) in CLEARANCE_EXEMPT:
            continue
        for b in furniture[i + 1:]:
            if Category.coerce(b.category) in CLEARANCE_EXEMPT:
                continue
            dx = max(0.0, abs(a.x - b.x) - (a.w + b.w) / 2)
            dy = max(0.0, abs(a.y - b.y) - (a.h + b.h) / 2)
            dist = math.hypot(dx, dy)
            if 0 < dist < min_gap:
                out.append(ClearanceViolation(a.id, b.id, dist))
    return out
