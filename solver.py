"""Anchor based furniture placement.

``generate_layout`` places a list of catalog items into a rectangular room.
Items are sorted so that pivotal pieces (rug, bed, sofa, table) go first and
become *anchors* for the pieces that follow.  Every (room kind, category)
pair maps to a strategy: an ordered tuple of target builders.  A single
dispatcher walks the targets of the strategy, trying the exact slot, then a
local search around it, before moving on to the next target.  When no target
yields a free spot the room is raster scanned and, as a last resort, a random
spot is accepted even if it overlaps.

All positions are canvas pixels with the origin at the top-left corner.  The
top wall (y = 0) is the focal wall.
"""

import logging
import math
import random
import re
import warnings
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from collision import Rect, rect_in_bounds, rects_overlap
from dimensions import NON_BLOCKING, CatalogItem, Category, get_product_dims
from rules import (
    ASPECT_RATIOS,
    CATEGORY_COLORS,
    DEFAULT_ASPECT,
    DEFAULT_ROOM_SQFT,
    FALLBACK_COLOR,
    MAX_SEARCH_RADIUS_FT,
    PX_PER_FT,
    RASTER_STEP_FT,
    SEARCH_STEP_FT,
    WALL_GAP_FT,
)
from ui.overlays import (
    ClearanceZone,
    DimensionLine,
    TrafficPath,
    layout_clearances,
    layout_dimension_lines,
    layout_traffic_paths,
)

logger = logging.getLogger(__name__)


class RoomKind(Enum):
    LIVING = "living"
    DINING = "dining"
    BEDROOM = "bedroom"
    OFFICE = "office"
    OTHER = "other"


ROOM_KINDS = {
    "Living Room": RoomKind.LIVING,
    "Great Room": RoomKind.LIVING,
    "Dining Room": RoomKind.DINING,
    "Kitchen": RoomKind.DINING,
    "Bedroom": RoomKind.BEDROOM,
    "Office": RoomKind.OFFICE,
}


def room_kind(room_type: str) -> RoomKind:
    return ROOM_KINDS.get(room_type, RoomKind.OTHER)


SORT_ORDER = {
    Category.RUG: 0,
    Category.BED: 1,
    Category.SOFA: 2,
    Category.TABLE: 3,
    Category.CHAIR: 4,
    Category.STOOL: 5,
    Category.STORAGE: 5,
    Category.ACCENT: 6,
    Category.DECOR: 6,
    Category.LIGHT: 7,
    Category.ART: 8,
}

# Categories that share one running index while being placed.
INDEX_GROUP = {
    Category.ACCENT: Category.ACCENT,
    Category.DECOR: Category.ACCENT,
    Category.STORAGE: Category.ACCENT,
}

END_TABLE = re.compile(r"end\s*table|side\s*table|nightstand", re.I)
OTTOMAN = re.compile(r"ottoman|pouf|footstool", re.I)
MIRROR = re.compile(r"mirror", re.I)


def index_group(item: CatalogItem):
    """Key of the running index an item counts under.

    End tables keep their own count so storage and decor placed earlier do
    not push the first one off the left side of the bed or sofa.
    """
    group = INDEX_GROUP.get(item.cat, item.cat)
    if group is Category.ACCENT and END_TABLE.search(item.name or ""):
        return "end_table"
    return group


# -----------------------
# Layout records
# -----------------------

@dataclass(frozen=True)
class WindowDef:
    x: float
    y: float
    w: float
    side: str


@dataclass(frozen=True)
class DoorDef:
    x: float
    y: float
    w: float
    side: str
    swing_dir: str = "inward"


@dataclass
class PlacedItem:
    item: CatalogItem
    x: float
    y: float
    w: float
    h: float
    rotation: float = 0.0
    color: str = FALLBACK_COLOR
    shape: str = "rect"

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def category(self) -> Category:
        return self.item.cat


@dataclass
class FurnitureLayout:
    placed: List[PlacedItem]
    canvas_w: int
    canvas_h: int
    room_w: float
    room_h: float
    scale: float
    windows: List[WindowDef] = field(default_factory=list)
    doors: List[DoorDef] = field(default_factory=list)
    clearances: List[ClearanceZone] = field(default_factory=list)
    traffic_paths: List[TrafficPath] = field(default_factory=list)
    dimensions: List[DimensionLine] = field(default_factory=list)
    anchors: Dict[str, Rect] = field(default_factory=dict)


# -----------------------
# Placement context
# -----------------------

@dataclass(frozen=True)
class Target:
    """One candidate slot for a piece, top-left corner in pixels."""
    x: float
    y: float
    radius: float = 0.0
    pad: float = 0.0
    exact: bool = False
    exact_pad: float = 0.0
    check_bounds: bool = False
    force: bool = False
    anchor: Optional[str] = None


@dataclass(frozen=True)
class Piece:
    item: CatalogItem
    category: Category
    w: float
    h: float
    index: int
    total: int

    @property
    def name(self) -> str:
        return (self.item.name or "").lower()


class PlanContext:
    """Mutable bookkeeping for one ``generate_layout`` run."""

    def __init__(self, canvas_w: float, canvas_h: float, scale: float, kind: RoomKind):
        self.W = canvas_w
        self.H = canvas_h
        self.s = scale
        self.gap = WALL_GAP_FT * scale
        self.kind = kind
        self.placed: List[PlacedItem] = []
        self.occupied: List[Rect] = []
        self.anchors: Dict[str, Rect] = {}
        self.counts: Counter = Counter()

    @property
    def sofa(self) -> Optional[Rect]:
        return self.anchors.get("sofa")

    @property
    def table(self) -> Optional[Rect]:
        return self.anchors.get("table")

    @property
    def bed(self) -> Optional[Rect]:
        return self.anchors.get("bed")

    def collides(self, r: Rect, padding: float = 0.0) -> bool:
        return any(rects_overlap(r, o, padding) for o in self.occupied)

    def in_bounds(self, r: Rect) -> bool:
        return rect_in_bounds(r, self.W, self.H, self.gap)

    def clamp(self, x: float, y: float, w: float, h: float) -> Tuple[float, float]:
        x = max(self.gap, min(x, self.W - w - self.gap))
        y = max(self.gap, min(y, self.H - h - self.gap))
        return x, y

    def place(self, piece: Piece, x: float, y: float, anchor: Optional[str] = None) -> PlacedItem:
        x, y = self.clamp(x, y, piece.w, piece.h)
        dims = get_product_dims(piece.item)
        p = PlacedItem(
            item=piece.item,
            x=x,
            y=y,
            w=piece.w,
            h=piece.h,
            color=CATEGORY_COLORS.get(piece.category.value, FALLBACK_COLOR),
            shape=dims.shape,
        )
        self.placed.append(p)
        if piece.category not in NON_BLOCKING:
            self.occupied.append(p.rect)
        if anchor and anchor not in self.anchors:
            self.anchors[anchor] = p.rect
        self.counts[index_group(piece.item)] += 1
        return p

    def find_near(self, tx: float, ty: float, w: float, h: float, radius: float, pad: float = 0.0):
        """Nearest free in-bounds spot within ``radius`` of ``(tx, ty)``."""
        step = SEARCH_STEP_FT * self.s
        r = min(radius or 5 * self.s, MAX_SEARCH_RADIUS_FT * self.s)
        n = int(r / step + 1e-9)
        best, best_d = None, math.inf
        for iy in range(-n, n + 1):
            dy = iy * step
            for ix in range(-n, n + 1):
                dx = ix * step
                cand = Rect(tx + dx, ty + dy, w, h)
                if not self.in_bounds(cand) or self.collides(cand, pad):
                    continue
                d = dx * dx + dy * dy
                if d < best_d:
                    best_d, best = d, (cand.x, cand.y)
        return best

    def raster(self, w: float, h: float):
        """First free spot in row-major order on a coarse grid."""
        step = RASTER_STEP_FT * self.s
        start = self.gap + self.s
        j = 0
        while start + j * step < self.H - h - self.gap:
            y = start + j * step
            i = 0
            while start + i * step < self.W - w - self.gap:
                x = start + i * step
                if not self.collides(Rect(x, y, w, h), 0.3 * self.s):
                    return x, y
                i += 1
            j += 1
        return None


# -----------------------
# Target builders
# -----------------------

Strategy = Tuple[Callable[[PlanContext, Piece], List[Target]], ...]


def rug_center(ctx: PlanContext, p: Piece) -> List[Target]:
    return [Target(ctx.W / 2 - p.w / 2, ctx.H * 0.35 - p.h / 2, force=True)]


def bed_headboard(ctx: PlanContext, p: Piece) -> List[Target]:
    return [Target((ctx.W - p.w) / 2, ctx.gap, radius=4 * ctx.s, exact=True, anchor="bed")]


def sofa_foot_of_bed(ctx: PlanContext, p: Piece) -> List[Target]:
    bed = ctx.bed
    if p.index or bed is None:
        return []
    return [Target(bed.cx - p.w / 2, bed.y + bed.h + 2 * ctx.s, radius=4 * ctx.s, anchor="sofa")]


def sofa_primary(ctx: PlanContext, p: Piece) -> List[Target]:
    if p.index:
        return []
    s = ctx.s
    return [Target(
        (ctx.W - p.w) / 2, ctx.H * 0.62 - p.h / 2,
        radius=5 * s, pad=0.3 * s, exact=True, exact_pad=0.3 * s, anchor="sofa",
    )]


def sofa_facing(ctx: PlanContext, p: Piece) -> List[Target]:
    sofa = ctx.sofa
    if not p.index or sofa is None:
        return []
    y = max(ctx.gap, sofa.y - 5 * ctx.s - p.h)
    return [Target(sofa.cx - p.w / 2, y, radius=4 * ctx.s)]


def table_centered(ctx: PlanContext, p: Piece) -> List[Target]:
    if p.index:
        return []
    s = ctx.s
    return [Target(
        (ctx.W - p.w) / 2, (ctx.H - p.h) / 2,
        radius=4 * s, pad=0.3 * s, exact=True, exact_pad=0.5 * s, anchor="table",
    )]


def coffee_table(ctx: PlanContext, p: Piece) -> List[Target]:
    sofa = ctx.sofa
    if p.index or sofa is None:
        return []
    return [Target(sofa.cx - p.w / 2, sofa.y - 1.5 * ctx.s - p.h, radius=3 * ctx.s, exact=True, anchor="table")]


def desk(ctx: PlanContext, p: Piece) -> List[Target]:
    if p.index:
        return []
    return [Target(ctx.W * 0.3 - p.w / 2, ctx.gap + 0.5 * ctx.s, radius=3 * ctx.s, anchor="table")]


def side_table(ctx: PlanContext, p: Piece) -> List[Target]:
    sofa = ctx.sofa
    if sofa is not None:
        x, y = sofa.x + sofa.w + 0.5 * ctx.s, sofa.cy - p.h / 2
    else:
        x, y = ctx.W * 0.2, ctx.H * 0.3
    return [Target(x, y, radius=5 * ctx.s, anchor="table")]


def dining_seat(ctx: PlanContext, p: Piece) -> List[Target]:
    """Cycle through eight seats tucked around the table."""
    t = ctx.table
    if t is None:
        return []
    w, h, gap = p.w, p.h, 0.2 * ctx.s
    left, right = t.x - w - gap, t.x + t.w + gap
    seats = [
        (left, t.cy - h / 2),
        (right, t.cy - h / 2),
        (t.cx - w / 2, t.y - h - gap),
        (t.cx - w / 2, t.y + t.h + gap),
        (left, t.y + t.h * 0.15 - h / 2),
        (right, t.y + t.h * 0.15 - h / 2),
        (left, t.y + t.h * 0.85 - h / 2),
        (right, t.y + t.h * 0.85 - h / 2),
    ]
    x, y = seats[p.index % len(seats)]
    return [Target(x, y, radius=2 * ctx.s, exact=True, check_bounds=True)]


def sofa_flank(ctx: PlanContext, p: Piece) -> List[Target]:
    sofa = ctx.sofa
    if sofa is None:
        return []
    s = ctx.s
    slots = [
        (sofa.x - p.w - 1.2 * s, sofa.cy - p.h - 0.5 * s),
        (sofa.x + sofa.w + 1.2 * s, sofa.cy - p.h - 0.5 * s),
        (sofa.cx - p.w / 2 - 3 * s, sofa.y - 5 * s),
        (sofa.cx - p.w / 2 + 3 * s, sofa.y - 5 * s),
    ]
    x, y = slots[p.index % len(slots)]
    return [Target(x, y, radius=3 * s)]


def desk_chair(ctx: PlanContext, p: Piece) -> List[Target]:
    t = ctx.table
    if t is None:
        return []
    return [Target(t.cx - p.w / 2, t.y + t.h + 0.3 * ctx.s, radius=2 * ctx.s)]


def bedside_chair(ctx: PlanContext, p: Piece) -> List[Target]:
    bed = ctx.bed
    if bed is None:
        return []
    return [Target(ctx.gap + ctx.s, bed.y + bed.h + 2 * ctx.s, radius=4 * ctx.s)]


def stool_at_table(ctx: PlanContext, p: Piece) -> List[Target]:
    t = ctx.table
    if t is None:
        return []
    x = t.x + p.index * (p.w + 0.4 * ctx.s)
    return [Target(x, t.y - p.h - 0.2 * ctx.s, radius=2 * ctx.s)]


def stool_along_wall(ctx: PlanContext, p: Piece) -> List[Target]:
    s = ctx.s
    spacing = min(p.w + s, (ctx.W - 4 * s) / max(p.total, 1))
    x = (ctx.W - p.total * spacing) / 2 + p.index * spacing
    return [Target(x, ctx.gap + s, radius=3 * s)]


def art_focal_wall(ctx: PlanContext, p: Piece) -> List[Target]:
    spacing = (ctx.W - 2 * ctx.s) / (p.total + 1)
    x = ctx.s + spacing * (p.index + 1) - p.w / 2
    return [Target(x, ctx.gap, force=True)]


def _light(ctx: PlanContext, p: Piece, flank_bed: bool) -> List[Target]:
    s, idx = ctx.s, p.index
    table, sofa, bed = ctx.table, ctx.sofa, ctx.bed
    if idx == 0 and table is not None:
        x, y = table.cx - p.w / 2, table.cy - p.h / 2
    elif idx == 0 and sofa is not None:
        x, y = sofa.x + sofa.w + 0.5 * s, sofa.y
    elif idx == 1 and sofa is not None:
        x, y = sofa.x - p.w - 0.5 * s, sofa.y
    elif flank_bed and bed is not None:
        x = bed.x - p.w - 0.5 * s if idx == 0 else bed.x + bed.w + 0.5 * s
        y = bed.y + 0.5 * s
    else:
        near, far_x, far_y = ctx.gap + s, ctx.W - p.w - ctx.gap - s, ctx.H - p.h - ctx.gap - s
        x, y = [(near, near), (far_x, near), (near, far_y), (far_x, far_y)][idx % 4]
    return [Target(x, y, force=True)]


def light_slot(ctx: PlanContext, p: Piece) -> List[Target]:
    return _light(ctx, p, flank_bed=False)


def bedroom_light_slot(ctx: PlanContext, p: Piece) -> List[Target]:
    return _light(ctx, p, flank_bed=True)


def _accent(ctx: PlanContext, p: Piece, flank_bed: bool) -> List[Target]:
    s, idx, name = ctx.s, p.index, p.name
    table, sofa, bed = ctx.table, ctx.sofa, ctx.bed
    end_table = bool(END_TABLE.search(name))
    if flank_bed and bed is not None and end_table:
        x = bed.x - p.w - 0.3 * s if idx == 0 else bed.x + bed.w + 0.3 * s
        y = bed.y + 0.5 * s
    elif sofa is not None and end_table:
        x = sofa.x - p.w - 0.3 * s if idx == 0 else sofa.x + sofa.w + 0.3 * s
        y = sofa.cy - p.h / 2
    elif sofa is not None and OTTOMAN.search(name):
        x, y = sofa.cx - p.w / 2, sofa.y - s - p.h
        if table is not None and abs(y - table.y) < 2 * s:
            y = table.y + table.h + 0.5 * s
    elif MIRROR.search(name):
        x, y = ctx.gap, ctx.H * 0.3
    elif sofa is not None:
        x, y = [
            (sofa.x + sofa.w + 0.5 * s, sofa.cy - p.h / 2),
            (sofa.x - p.w - 0.5 * s, sofa.cy - p.h / 2),
            (sofa.cx - p.w / 2, sofa.y + sofa.h + s),
        ][idx % 3]
    else:
        x, y = [
            (ctx.gap + s, ctx.H * 0.4),
            (ctx.W - p.w - ctx.gap - s, ctx.H * 0.4),
            (ctx.W * 0.3, ctx.gap + s),
        ][idx % 3]
    return [Target(x, y, radius=4 * s)]


def accent_slot(ctx: PlanContext, p: Piece) -> List[Target]:
    return _accent(ctx, p, flank_bed=False)


def bedroom_accent_slot(ctx: PlanContext, p: Piece) -> List[Target]:
    return _accent(ctx, p, flank_bed=True)


# -----------------------
# Rule table
# -----------------------

DEFAULT_STRATEGIES: Dict[Category, Strategy] = {
    Category.RUG: (rug_center,),
    Category.BED: (bed_headboard,),
    Category.SOFA: (sofa_primary, sofa_facing),
    Category.TABLE: (coffee_table, side_table),
    Category.CHAIR: (sofa_flank,),
    Category.STOOL: (stool_along_wall,),
    Category.LIGHT: (light_slot,),
    Category.ART: (art_focal_wall,),
    Category.ACCENT: (accent_slot,),
    Category.DECOR: (accent_slot,),
    Category.STORAGE: (accent_slot,),
}

ROOM_RULES: Dict[Tuple[RoomKind, Category], Strategy] = {
    (RoomKind.BEDROOM, Category.SOFA): (sofa_foot_of_bed, sofa_primary, sofa_facing),
    (RoomKind.BEDROOM, Category.CHAIR): (sofa_flank, bedside_chair),
    (RoomKind.BEDROOM, Category.LIGHT): (bedroom_light_slot,),
    (RoomKind.BEDROOM, Category.ACCENT): (bedroom_accent_slot,),
    (RoomKind.BEDROOM, Category.DECOR): (bedroom_accent_slot,),
    (RoomKind.BEDROOM, Category.STORAGE): (bedroom_accent_slot,),
    (RoomKind.DINING, Category.TABLE): (table_centered, coffee_table, side_table),
    (RoomKind.DINING, Category.CHAIR): (dining_seat, sofa_flank),
    (RoomKind.DINING, Category.STOOL): (stool_at_table, stool_along_wall),
    (RoomKind.OFFICE, Category.TABLE): (coffee_table, desk, side_table),
    (RoomKind.OFFICE, Category.CHAIR): (sofa_flank, desk_chair),
}


def strategy_for(kind: RoomKind, category: Category) -> Strategy:
    return ROOM_RULES.get((kind, category), DEFAULT_STRATEGIES[category])


def place_piece(
    ctx: PlanContext,
    piece: Piece,
    targets: Sequence[Target],
    rng: random.Random,
    random_fallback: bool = True,
) -> PlacedItem:
    """Place ``piece`` at the first workable target, else fall back."""
    for t in targets:
        if t.force:
            return ctx.place(piece, t.x, t.y, t.anchor)
        if t.exact:
            r = Rect(t.x, t.y, piece.w, piece.h)
            if (not t.check_bounds or ctx.in_bounds(r)) and not ctx.collides(r, t.exact_pad):
                return ctx.place(piece, t.x, t.y, t.anchor)
        if t.radius > 0:
            pos = ctx.find_near(t.x, t.y, piece.w, piece.h, t.radius, t.pad)
            if pos is not None:
                return ctx.place(piece, pos[0], pos[1], t.anchor)

    pos = ctx.raster(piece.w, piece.h)
    if pos is not None:
        logger.debug("%s placed by raster scan at %s", piece.item.name, pos)
        return ctx.place(piece, *pos)

    warnings.warn(f"{piece.item.name or piece.category.value} could not be placed without overlap", UserWarning)
    s = ctx.s
    if random_fallback:
        x = ctx.gap + s + rng.random() * max(1, ctx.W - piece.w - 4 * s)
        y = ctx.gap + s + rng.random() * max(1, ctx.H - piece.h - 4 * s)
    elif targets:
        x, y = targets[0].x, targets[0].y
    else:
        x = y = ctx.gap + s
    logger.debug("%s forced to %.1f, %.1f", piece.item.name, x, y)
    return ctx.place(piece, x, y)


# -----------------------
# Room and openings
# -----------------------

def room_size(room_sqft: float, room_type: str, room_w: Optional[float] = None,
              room_l: Optional[float] = None) -> Tuple[float, float]:
    """Room width and length in feet.

    Without usable dimensions or a positive area the default floor area is
    planned, so a layout is always produced.
    """
    if room_w and room_l and room_w > 0 and room_l > 0:
        return float(room_w), float(room_l)
    if not room_sqft or room_sqft <= 0:
        logger.debug("no usable room size for %s, using %s sq ft", room_type, DEFAULT_ROOM_SQFT)
        room_sqft = DEFAULT_ROOM_SQFT
    aspect = ASPECT_RATIOS.get(room_type, DEFAULT_ASPECT)
    w = math.sqrt(room_sqft * aspect)
    return w, room_sqft / w


def openings_from_hints(canvas_w: float, canvas_h: float, scale: float,
                        hints: Optional[str]) -> Tuple[List[WindowDef], List[DoorDef]]:
    """Windows along the focal wall and one door, read loosely from ``hints``."""
    s = scale
    if not hints:
        windows = [
            WindowDef(canvas_w * 0.15, 0, 4 * s, "top"),
            WindowDef(canvas_w * 0.6, 0, 3 * s, "top"),
        ]
        return windows, [DoorDef(canvas_w - 3 * s, canvas_h - 3 * s, 3 * s, "right")]

    m = re.search(r"(\d+)\s*window", hints, re.I)
    count = int(m.group(1)) or 2 if m else 2
    windows = [
        WindowDef(canvas_w / (count + 1) * (i + 1) - 1.5 * s, 0, 3 * s, "top")
        for i in range(count)
    ]
    if re.search(r"door|entry|entrance", hints, re.I):
        door = DoorDef(canvas_w - 3 * s, canvas_h - 3 * s, 3 * s, "right")
    else:
        door = DoorDef(canvas_w * 0.4, canvas_h, 3 * s, "bottom")
    return windows, [door]


def generate_layout(
    items: Sequence[CatalogItem],
    room_sqft: float,
    room_type: str,
    hints: Optional[str] = None,
    room_w: Optional[float] = None,
    room_l: Optional[float] = None,
    rng: Optional[random.Random] = None,
    random_fallback: bool = True,
) -> FurnitureLayout:
    """Place ``items`` in a room and derive the overlays.

    Nothing is raised for a crowded room: pieces that find no free spot are
    still placed (see :func:`place_piece`) and show up in validation.
    """
    rng = rng or random.Random()
    width, length = room_size(room_sqft, room_type, room_w, room_l)
    scale = PX_PER_FT
    canvas_w = int(math.floor(width * scale + 0.5))
    canvas_h = int(math.floor(length * scale + 0.5))
    windows, doors = openings_from_hints(canvas_w, canvas_h, scale, hints)

    kind = room_kind(room_type)
    ordered = sorted(items, key=lambda it: SORT_ORDER[it.cat])
    totals = Counter(index_group(it) for it in ordered)
    ctx = PlanContext(canvas_w, canvas_h, scale, kind)
    logger.debug("layout %s %.1fx%.1f ft, %d items", room_type, width, length, len(ordered))

    for item in ordered:
        cat = item.cat
        dims = get_product_dims(item)
        group = index_group(item)
        piece = Piece(item, cat, dims.w * scale, dims.d * scale, ctx.counts[group], totals[group])
        targets = [t for build in strategy_for(kind, cat) for t in build(ctx, piece)]
        place_piece(ctx, piece, targets, rng, random_fallback)

    return FurnitureLayout(
        placed=ctx.placed,
        canvas_w=canvas_w,
        canvas_h=canvas_h,
        room_w=round(width, 1),
        room_h=round(length, 1),
        scale=scale,
        windows=windows,
        doors=doors,
        clearances=layout_clearances(ctx.placed, scale),
        traffic_paths=layout_traffic_paths(canvas_w, canvas_h, scale, doors, ctx.anchors),
        dimensions=layout_dimension_lines(
            canvas_w, canvas_h, scale, ctx.anchors, ctx.gap, dining=kind is RoomKind.DINING,
        ),
        anchors=dict(ctx.anchors),
    )
