"""Floor plan editor state.

``EditorState`` is immutable.  Every operation takes a state and returns a
new one; anything that cannot be applied (unknown id, too few selected
pieces, a locked piece) hands back the state unchanged.  Positions are item
centres in feet.

Ids come from :func:`make_id` and the ``id_seq`` counter carried on the
state, so two runs over the same inputs produce the same ids.
"""

import json
import logging
from collections import deque
from copy import deepcopy
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from collision import get_overlapping_pairs
from dimensions import NON_BLOCKING, Category, get_product_dims, resolve_dims
from geometry import (
    Bounds,
    Point,
    Room,
    Wall,
    add_vertex,
    move_vertex,
    point_in_polygon,
    rect_inside_room,
    remove_vertex,
    room_area,
    room_bounds,
    room_perimeter,
    wall_segments,
)
from rules import EDITOR_COLORS, FALLBACK_COLOR
from shapes import create_empty_room, get_template

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
DUPLICATE_OFFSET_FT = 1.5
MIN_SIZE_FT = 0.5

# Layout side -> wall of a rectangular room, walls run clockwise from the top-left corner.
SIDE_WALLS = {"top": "wall_0", "right": "wall_1", "bottom": "wall_2", "left": "wall_3"}


def make_id(prefix: str, seq: int) -> str:
    return f"{prefix}_{seq}"


def clamp_position(position: float) -> float:
    return max(0.1, min(0.9, position))


@dataclass(frozen=True)
class EditorFurniture:
    id: str
    product_id: int
    x: float
    y: float
    w: float
    h: float
    rotation: float = 0.0
    locked: bool = False
    color: str = FALLBACK_COLOR
    shape: str = "rect"
    label: str = ""
    category: str = Category.ACCENT.value


@dataclass(frozen=True)
class EditorDoor:
    id: str
    wall_id: str
    position: float
    width: float = 3.0
    swing_angle: float = 90.0
    swing_dir: str = "left"


@dataclass(frozen=True)
class EditorWindow:
    id: str
    wall_id: str
    position: float
    width: float = 3.0


@dataclass(frozen=True)
class EditorGroup:
    id: str
    name: str
    item_ids: Tuple[str, ...]
    locked: bool = False


@dataclass(frozen=True)
class HistoryEntry:
    furniture: Tuple[EditorFurniture, ...]
    room: Room
    doors: Tuple[EditorDoor, ...]
    windows: Tuple[EditorWindow, ...]
    walls: Tuple[Wall, ...]


@dataclass(frozen=True)
class EditorState:
    room: Room
    walls: Tuple[Wall, ...]
    doors: Tuple[EditorDoor, ...] = ()
    windows: Tuple[EditorWindow, ...] = ()
    furniture: Tuple[EditorFurniture, ...] = ()
    groups: Tuple[EditorGroup, ...] = ()
    selection: Tuple[str, ...] = ()
    room_type: str = "Living Room"
    style: str = ""
    room_width_ft: float = 0.0
    room_height_ft: float = 0.0
    grid_size: float = 1.0
    snap_to_grid: bool = True
    id_seq: int = 0


class PlacementIssue(NamedTuple):
    id: str
    issue: str


# -----------------------
# Creation
# -----------------------

def create_editor_state(room: Room, room_type: str = "Living Room", style: str = "",
                        grid_size: float = 1.0, id_seq: int = 0) -> EditorState:
    b = room_bounds(room)
    return EditorState(
        room=room,
        walls=tuple(wall_segments(room)),
        room_type=room_type,
        style=style,
        room_width_ft=b.width,
        room_height_ft=b.height,
        grid_size=grid_size,
        id_seq=id_seq,
    )


def _opening_position(side: str, x: float, y: float, width: float, room_w: float, room_h: float) -> float:
    """Normalised position of an opening along its wall, following the wall's direction."""
    if side in ("top", "bottom"):
        t = (x + width / 2) / room_w
    else:
        t = (y + width / 2) / room_h
    if side in ("bottom", "left"):
        t = 1 - t
    return clamp_position(t)


def create_editor_state_from_layout(layout, room_type: str, style: str = "", id_seq: int = 0) -> EditorState:
    """Convert a generated layout (pixels) into an editable state (feet)."""
    scale = layout.scale
    room_w_px, room_h_px = layout.room_w * scale, layout.room_h * scale
    seq = id_seq

    furniture = []
    for p in layout.placed:
        seq += 1
        dims = get_product_dims(p.item)
        cat = p.item.cat
        furniture.append(EditorFurniture(
            id=make_id("furn", seq),
            product_id=p.item.id,
            x=(p.x + p.w / 2) / scale,
            y=(p.y + p.h / 2) / scale,
            w=dims.w,
            h=dims.d,
            rotation=p.rotation,
            color=EDITOR_COLORS.get(cat.value, p.color or FALLBACK_COLOR),
            shape=dims.shape,
            label=dims.label or cat.value,
            category=cat.value,
        ))

    windows = []
    for win in layout.windows:
        seq += 1
        windows.append(EditorWindow(
            id=make_id("win", seq),
            wall_id=SIDE_WALLS.get(win.side, "wall_3"),
            position=_opening_position(win.side, win.x, win.y, win.w, room_w_px, room_h_px),
            width=win.w / scale,
        ))

    doors = []
    for d in layout.doors:
        seq += 1
        doors.append(EditorDoor(
            id=make_id("door", seq),
            wall_id=SIDE_WALLS.get(d.side, "wall_3"),
            position=_opening_position(d.side, d.x, d.y, d.w, room_w_px, room_h_px),
            width=d.w / scale,
        ))

    state = create_editor_state(create_empty_room(layout.room_w, layout.room_h), room_type, style, id_seq=seq)
    return replace(state, furniture=tuple(furniture), windows=tuple(windows), doors=tuple(doors))


# -----------------------
# Helpers
# -----------------------

def _ids(state: EditorState, ids: Optional[Sequence[str]]) -> List[str]:
    return list(state.selection if ids is None else ids)


def _selected(state: EditorState, ids: Sequence[str]) -> List[EditorFurniture]:
    wanted = set(ids)
    return [f for f in state.furniture if f.id in wanted]


def _update(state: EditorState, ids: Sequence[str], fn: Callable[[EditorFurniture], EditorFurniture],
            skip_locked: bool = False) -> EditorState:
    wanted = set(ids)
    furniture = tuple(
        fn(f) if f.id in wanted and not (skip_locked and f.locked) else f
        for f in state.furniture
    )
    return replace(state, furniture=furniture)


def _forget(state: EditorState, ids: Sequence[str]) -> EditorState:
    """Drop ``ids`` from the selection and from every group."""
    gone = set(ids)
    groups = []
    for g in state.groups:
        kept = tuple(i for i in g.item_ids if i not in gone)
        if kept:
            groups.append(replace(g, item_ids=kept))
    selection = tuple(i for i in state.selection if i not in gone)
    return replace(state, groups=tuple(groups), selection=selection)


def _with_room(state: EditorState, room: Room) -> EditorState:
    if room is state.room:
        return state
    return replace(state, room=room, walls=tuple(wall_segments(room)))


# -----------------------
# Room
# -----------------------

def add_room_vertex(state: EditorState, after_index: int, vertex: Point) -> EditorState:
    return _with_room(state, add_vertex(state.room, after_index, vertex))


def move_room_vertex(state: EditorState, index: int, new_pos: Point) -> EditorState:
    return _with_room(state, move_vertex(state.room, index, new_pos))


def remove_room_vertex(state: EditorState, index: int) -> EditorState:
    return _with_room(state, remove_vertex(state.room, index))


def apply_room_template(state: EditorState, template_id: str) -> EditorState:
    tpl = get_template(template_id)
    if tpl is None:
        return state
    state = _with_room(state, tpl.room())
    return replace(state, room_width_ft=tpl.width_ft, room_height_ft=tpl.height_ft)


# -----------------------
# Single piece
# -----------------------

def add_furniture(state: EditorState, product_id: int, category: str, x: float, y: float,
                  name: str = "", w: Optional[float] = None, h: Optional[float] = None) -> EditorState:
    """Drop a catalog product centred on ``(x, y)``; size defaults to the resolved footprint."""
    cat = Category.coerce(category)
    dims = resolve_dims(cat, name)
    seq = state.id_seq + 1
    item = EditorFurniture(
        id=make_id("furn", seq),
        product_id=product_id,
        x=x,
        y=y,
        w=dims.w if w is None else max(MIN_SIZE_FT, w),
        h=dims.d if h is None else max(MIN_SIZE_FT, h),
        color=EDITOR_COLORS.get(cat.value, FALLBACK_COLOR),
        shape=dims.shape,
        label=dims.label,
        category=cat.value,
    )
    return replace(state, furniture=state.furniture + (item,), id_seq=seq)


def move_furniture(state: EditorState, item_id: str, x: float, y: float) -> EditorState:
    return _update(state, [item_id], lambda f: replace(f, x=x, y=y), skip_locked=True)


def rotate_furniture(state: EditorState, item_id: str, angle_deg: float) -> EditorState:
    return _update(state, [item_id], lambda f: replace(f, rotation=(f.rotation + angle_deg) % 360), skip_locked=True)


def resize_furniture(state: EditorState, item_id: str, w: float, h: float) -> EditorState:
    return _update(
        state, [item_id],
        lambda f: replace(f, w=max(MIN_SIZE_FT, w), h=max(MIN_SIZE_FT, h)),
        skip_locked=True,
    )


def delete_furniture(state: EditorState, item_id: str) -> EditorState:
    return delete_multiple(state, [item_id])


def duplicate_furniture(state: EditorState, item_id: str) -> EditorState:
    return duplicate_multiple(state, [item_id])


def toggle_lock(state: EditorState, item_id: str) -> EditorState:
    return _update(state, [item_id], lambda f: replace(f, locked=not f.locked))


def reset_transform(state: EditorState, item_id: str) -> EditorState:
    return _update(state, [item_id], lambda f: replace(f, rotation=0.0))


# -----------------------
# Doors and windows
# -----------------------

def add_door(state: EditorState, wall_id: str, position: float, width: float = 3.0) -> EditorState:
    seq = state.id_seq + 1
    door = EditorDoor(make_id("door", seq), wall_id, clamp_position(position), width)
    return replace(state, doors=state.doors + (door,), id_seq=seq)


def add_window(state: EditorState, wall_id: str, position: float, width: float = 3.0) -> EditorState:
    seq = state.id_seq + 1
    window = EditorWindow(make_id("win", seq), wall_id, clamp_position(position), width)
    return replace(state, windows=state.windows + (window,), id_seq=seq)


def remove_door(state: EditorState, door_id: str) -> EditorState:
    return replace(state, doors=tuple(d for d in state.doors if d.id != door_id))


def remove_window(state: EditorState, window_id: str) -> EditorState:
    return replace(state, windows=tuple(w for w in state.windows if w.id != window_id))


# -----------------------
# Selection
# -----------------------

def select(state: EditorState, ids: Sequence[str], additive: bool = False) -> EditorState:
    known = {f.id for f in state.furniture}
    picked = [i for i in ids if i in known]
    if additive:
        picked = list(state.selection) + [i for i in picked if i not in state.selection]
    return replace(state, selection=tuple(dict.fromkeys(picked)))


def select_all(state: EditorState) -> EditorState:
    return replace(state, selection=tuple(f.id for f in state.furniture))


def invert_selection(state: EditorState) -> EditorState:
    current = set(state.selection)
    return replace(state, selection=tuple(f.id for f in state.furniture if f.id not in current))


def select_by_category(state: EditorState, category: str) -> EditorState:
    return replace(state, selection=tuple(f.id for f in state.furniture if f.category == category))


def select_in_rect(state: EditorState, x1: float, y1: float, x2: float, y2: float) -> EditorState:
    """Select every piece whose centre lies in the dragged rectangle."""
    lo_x, hi_x = min(x1, x2), max(x1, x2)
    lo_y, hi_y = min(y1, y2), max(y1, y2)
    return replace(state, selection=tuple(
        f.id for f in state.furniture if lo_x <= f.x <= hi_x and lo_y <= f.y <= hi_y
    ))


def clear_selection(state: EditorState) -> EditorState:
    return replace(state, selection=())


# -----------------------
# Multi-select
# -----------------------

def move_multiple(state: EditorState, dx: float, dy: float, ids: Optional[Sequence[str]] = None) -> EditorState:
    return _update(state, _ids(state, ids), lambda f: replace(f, x=f.x + dx, y=f.y + dy), skip_locked=True)


def delete_multiple(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    gone = set(_ids(state, ids))
    state = _forget(state, list(gone))
    return replace(state, furniture=tuple(f for f in state.furniture if f.id not in gone))


def duplicate_multiple(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    """Copies land 1.5 ft down and right of their originals, unlocked or not."""
    seq = state.id_seq
    copies = []
    for f in _selected(state, _ids(state, ids)):
        seq += 1
        copies.append(replace(
            f, id=make_id("furn", seq), x=f.x + DUPLICATE_OFFSET_FT, y=f.y + DUPLICATE_OFFSET_FT,
        ))
    if not copies:
        return state
    return replace(state, furniture=state.furniture + tuple(copies), id_seq=seq)


def rotate_multiple(state: EditorState, angle: float, ids: Optional[Sequence[str]] = None) -> EditorState:
    return _update(state, _ids(state, ids), lambda f: replace(f, rotation=(f.rotation + angle) % 360), skip_locked=True)


def lock_multiple(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    return _update(state, _ids(state, ids), lambda f: replace(f, locked=True))


def unlock_multiple(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    return _update(state, _ids(state, ids), lambda f: replace(f, locked=False))


def get_selection_bounds(state: EditorState, ids: Optional[Sequence[str]] = None) -> Bounds:
    sel = _selected(state, _ids(state, ids))
    return _bounds_of(sel)


def _bounds_of(items: Sequence[EditorFurniture]) -> Bounds:
    if not items:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    return Bounds(
        min(f.x - f.w / 2 for f in items),
        min(f.y - f.h / 2 for f in items),
        max(f.x + f.w / 2 for f in items),
        max(f.y + f.h / 2 for f in items),
    )


# -----------------------
# Align, distribute, flip, scale
# -----------------------

ALIGN_MODES = ("left", "right", "top", "bottom", "center_h", "center_v")


def align(state: EditorState, mode: str, ids: Optional[Sequence[str]] = None) -> EditorState:
    """Line the selected pieces up on a shared edge or on their mean centre."""
    ids = _ids(state, ids)
    sel = _selected(state, ids)
    if len(sel) < 2:
        return state
    b = _bounds_of(sel)
    if mode == "left":
        fn = lambda f: replace(f, x=b.min_x + f.w / 2)  # noqa: E731
    elif mode == "right":
        fn = lambda f: replace(f, x=b.max_x - f.w / 2)  # noqa: E731
    elif mode == "top":
        fn = lambda f: replace(f, y=b.min_y + f.h / 2)  # noqa: E731
    elif mode == "bottom":
        fn = lambda f: replace(f, y=b.max_y - f.h / 2)  # noqa: E731
    elif mode == "center_h":
        cx = sum(f.x for f in sel) / len(sel)
        fn = lambda f: replace(f, x=cx)  # noqa: E731
    elif mode == "center_v":
        cy = sum(f.y for f in sel) / len(sel)
        fn = lambda f: replace(f, y=cy)  # noqa: E731
    else:
        logger.debug("unknown align mode %r", mode)
        return state
    return _update(state, ids, fn)


def distribute(state: EditorState, axis: str, ids: Optional[Sequence[str]] = None) -> EditorState:
    """Space centres evenly between the outermost two along ``axis``
    (``"horizontal"`` or ``"vertical"``)."""
    sel = _selected(state, _ids(state, ids))
    if len(sel) < 3 or axis not in ("horizontal", "vertical"):
        return state
    attr = "x" if axis == "horizontal" else "y"
    ordered = sorted(sel, key=lambda f: getattr(f, attr))
    lo, hi = getattr(ordered[0], attr), getattr(ordered[-1], attr)
    step = (hi - lo) / (len(ordered) - 1)
    target = {f.id: lo + i * step for i, f in enumerate(ordered)}
    return _update(state, list(target), lambda f: replace(f, **{attr: target[f.id]}))


def flip_horizontal(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    ids = _ids(state, ids)
    sel = _selected(state, ids)
    if not sel:
        return state
    cx = sum(f.x for f in sel) / len(sel)
    return _update(state, ids, lambda f: replace(f, x=2 * cx - f.x, rotation=(360 - f.rotation) % 360))


def flip_vertical(state: EditorState, ids: Optional[Sequence[str]] = None) -> EditorState:
    ids = _ids(state, ids)
    sel = _selected(state, ids)
    if not sel:
        return state
    cy = sum(f.y for f in sel) / len(sel)
    return _update(state, ids, lambda f: replace(f, y=2 * cy - f.y, rotation=(180 - f.rotation + 360) % 360))


def scale_from_center(state: EditorState, factor: float, ids: Optional[Sequence[str]] = None) -> EditorState:
    """Scale positions and sizes about the selection's mean centre."""
    ids = _ids(state, ids)
    sel = _selected(state, ids)
    if not sel or factor <= 0:
        return state
    cx = sum(f.x for f in sel) / len(sel)
    cy = sum(f.y for f in sel) / len(sel)
    return _update(state, ids, lambda f: replace(
        f,
        x=cx + (f.x - cx) * factor,
        y=cy + (f.y - cy) * factor,
        w=f.w * factor,
        h=f.h * factor,
    ))


# -----------------------
# Z-order
# -----------------------

def _reorder(state: EditorState, item_id: str, how: str) -> EditorState:
    items = list(state.furniture)
    idx = next((i for i, f in enumerate(items) if f.id == item_id), -1)
    if idx < 0:
        return state
    if how == "front":
        items.append(items.pop(idx))
    elif how == "back":
        items.insert(0, items.pop(idx))
    elif how == "forward" and idx < len(items) - 1:
        items[idx], items[idx + 1] = items[idx + 1], items[idx]
    elif how == "backward" and idx > 0:
        items[idx - 1], items[idx] = items[idx], items[idx - 1]
    else:
        return state
    return replace(state, furniture=tuple(items))


def bring_to_front(state: EditorState, item_id: str) -> EditorState:
    return _reorder(state, item_id, "front")


def send_to_back(state: EditorState, item_id: str) -> EditorState:
    return _reorder(state, item_id, "back")


def bring_forward(state: EditorState, item_id: str) -> EditorState:
    return _reorder(state, item_id, "forward")


def send_backward(state: EditorState, item_id: str) -> EditorState:
    return _reorder(state, item_id, "backward")


# -----------------------
# Groups
# -----------------------

def create_group(state: EditorState, name: str, item_ids: Optional[Sequence[str]] = None) -> EditorState:
    """Group the given pieces, taking them out of any group they were in."""
    members = tuple(f.id for f in _selected(state, _ids(state, item_ids)))
    if not members:
        return state
    taken = set(members)
    groups = []
    for g in state.groups:
        kept = tuple(i for i in g.item_ids if i not in taken)
        if kept:
            groups.append(replace(g, item_ids=kept))
    seq = state.id_seq + 1
    groups.append(EditorGroup(make_id("grp", seq), name, members))
    return replace(state, groups=tuple(groups), id_seq=seq)


def ungroup(state: EditorState, group_id: str) -> EditorState:
    return replace(state, groups=tuple(g for g in state.groups if g.id != group_id))


def get_group_for_item(state: EditorState, item_id: str) -> Optional[EditorGroup]:
    for g in state.groups:
        if item_id in g.item_ids:
            return g
    return None


def _group(state: EditorState, group_id: str) -> Optional[EditorGroup]:
    for g in state.groups:
        if g.id == group_id:
            return g
    return None


def move_group(state: EditorState, group_id: str, dx: float, dy: float) -> EditorState:
    g = _group(state, group_id)
    if g is None or g.locked:
        return state
    return move_multiple(state, dx, dy, g.item_ids)


def get_group_bounds(state: EditorState, group_id: str) -> Bounds:
    g = _group(state, group_id)
    return _bounds_of(_selected(state, g.item_ids) if g else [])


# -----------------------
# Validation and statistics
# -----------------------

def validate_placement(furniture: Sequence[EditorFurniture], room: Room) -> List[PlacementIssue]:
    issues = []
    for f in furniture:
        if not point_in_polygon(f.x, f.y, room.vertices):
            issues.append(PlacementIssue(f.id, "Center outside room"))
        if not rect_inside_room(f.x, f.y, f.w, f.h, f.rotation, room):
            issues.append(PlacementIssue(f.id, "Extends beyond walls"))
    return issues


def compute_statistics(state: EditorState) -> Dict:
    area = room_area(state.room)
    footprint = 0.0
    breakdown: Dict[str, int] = {}
    for f in state.furniture:
        if Category.coerce(f.category) not in NON_BLOCKING:
            footprint += f.w * f.h
        breakdown[f.category] = breakdown.get(f.category, 0) + 1
    return {
        "item_count": len(state.furniture),
        "category_breakdown": breakdown,
        "total_footprint": footprint,
        "room_area": area,
        "coverage_pct": footprint / area * 100 if area > 0 else 0.0,
        "door_count": len(state.doors),
        "window_count": len(state.windows),
        "wall_count": len(state.room.vertices),
        "perimeter": room_perimeter(state.room),
        "overlapping_pairs": len(get_overlapping_pairs(state.furniture)),
    }


# -----------------------
# Undo / redo
# -----------------------

def create_snapshot(state: EditorState) -> HistoryEntry:
    return HistoryEntry(
        furniture=deepcopy(state.furniture),
        room=deepcopy(state.room),
        doors=deepcopy(state.doors),
        windows=deepcopy(state.windows),
        walls=deepcopy(state.walls),
    )


def restore_snapshot(state: EditorState, snapshot: HistoryEntry) -> EditorState:
    return replace(
        state,
        furniture=snapshot.furniture,
        room=snapshot.room,
        doors=snapshot.doors,
        windows=snapshot.windows,
        walls=snapshot.walls,
    )


class EditorHistory:
    """Undo and redo stacks held by the caller.

    Call :meth:`record` with the state *before* each mutating operation.
    """

    def __init__(self, limit: int = 100):
        self.undo_stack: deque = deque(maxlen=limit)
        self.redo_stack: deque = deque(maxlen=limit)

    def record(self, state: EditorState) -> None:
        self.undo_stack.append(create_snapshot(state))
        self.redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo(self, state: EditorState) -> EditorState:
        if not self.undo_stack:
            return state
        self.redo_stack.append(create_snapshot(state))
        return restore_snapshot(state, self.undo_stack.pop())

    def redo(self, state: EditorState) -> EditorState:
        if not self.redo_stack:
            return state
        self.undo_stack.append(create_snapshot(state))
        return restore_snapshot(state, self.redo_stack.pop())


# -----------------------
# Serialization
# -----------------------

def export_to_json(state: EditorState, exported_at: Optional[datetime] = None) -> str:
    stats = compute_statistics(state)
    stamp = (exported_at or datetime.now(timezone.utc)).isoformat()
    doc = {
        "version": EXPORT_VERSION,
        "export_date": stamp,
        "room": {
            "type": state.room_type,
            "style": state.style,
            "width": state.room_width_ft,
            "height": state.room_height_ft,
            "area": stats["room_area"],
            "perimeter": stats["perimeter"],
            "wall_thickness": state.room.wall_thickness,
            "vertices": [{"x": x, "y": y} for x, y in state.room.vertices],
        },
        "furniture": [
            {
                "id": f.id,
                "product_id": f.product_id,
                "label": f.label,
                "category": f.category,
                "position": {"x": f.x, "y": f.y},
                "size": {"w": f.w, "h": f.h},
                "rotation": f.rotation,
                "locked": f.locked,
                "color": f.color,
                "shape": f.shape,
            }
            for f in state.furniture
        ],
        "doors": [asdict(d) for d in state.doors],
        "windows": [asdict(w) for w in state.windows],
        "groups": [dict(asdict(g), item_ids=list(g.item_ids)) for g in state.groups],
        "grid_size": state.grid_size,
        "snap_to_grid": state.snap_to_grid,
        "id_seq": state.id_seq,
        "statistics": stats,
    }
    return json.dumps(doc, indent=2)


def _furniture_from_doc(d: Dict) -> EditorFurniture:
    return EditorFurniture(
        id=str(d["id"]),
        product_id=d.get("product_id", 0),
        x=float(d["position"]["x"]),
        y=float(d["position"]["y"]),
        w=float(d["size"]["w"]),
        h=float(d["size"]["h"]),
        rotation=float(d.get("rotation", 0.0)),
        locked=bool(d.get("locked", False)),
        color=d.get("color", FALLBACK_COLOR),
        shape=d.get("shape", "rect"),
        label=d.get("label", ""),
        category=d.get("category", Category.ACCENT.value),
    )


def deserialize_editor_state(text: str) -> Optional[EditorState]:
    """Rebuild a state from :func:`export_to_json` output.

    Returns ``None`` for anything that is not a structurally sound export.
    """
    try:
        doc = json.loads(text)
        if not isinstance(doc, dict) or not isinstance(doc.get("room"), dict):
            return None
        if not isinstance(doc.get("furniture"), list):
            return None
        r = doc["room"]
        room = Room(
            tuple((float(v["x"]), float(v["y"])) for v in r["vertices"]),
            float(r.get("wall_thickness", 0.5)),
        )
        state = EditorState(
            room=room,
            walls=tuple(wall_segments(room)),
            doors=tuple(EditorDoor(**d) for d in doc.get("doors", [])),
            windows=tuple(EditorWindow(**w) for w in doc.get("windows", [])),
            furniture=tuple(_furniture_from_doc(f) for f in doc["furniture"]),
            groups=tuple(
                EditorGroup(g["id"], g["name"], tuple(g["item_ids"]), bool(g.get("locked", False)))
                for g in doc.get("groups", [])
            ),
            room_type=r.get("type", "Living Room"),
            style=r.get("style", ""),
            room_width_ft=float(r.get("width", 0.0)),
            room_height_ft=float(r.get("height", 0.0)),
            grid_size=float(doc.get("grid_size", 1.0)),
            snap_to_grid=bool(doc.get("snap_to_grid", True)),
            id_seq=int(doc.get("id_seq", 0)),
        )
    except (ValueError, KeyError, TypeError, OverflowError, RecursionError) as exc:
        logger.debug("rejecting editor document: %s", exc)
        return None
    return state
