"""Main entry module exposing the layout planner and the editor state API."""
from rules import load_rules, RULES, PX_PER_FT  # noqa: F401
from dimensions import Category, CatalogItem, ProductDims, get_product_dims, resolve_dims  # noqa: F401
from geometry import Room, Wall, room_area, room_bounds, room_perimeter, wall_segments  # noqa: F401
from shapes import ROOM_TEMPLATES, get_template, create_empty_room, create_l_shaped_room  # noqa: F401
from collision import check_collision, check_minimum_clearance, get_overlapping_pairs  # noqa: F401
from solver import FurnitureLayout, PlacedItem, generate_layout  # noqa: F401
from snapping import apply_smart_snap, snap_to_grid, snap_to_wall  # noqa: F401
from ui.overlays import compute_clearances, compute_traffic_paths  # noqa: F401
from editor import *  # noqa: F401,F403

__all__ = [
    "load_rules",
    "Category",
    "CatalogItem",
    "ProductDims",
    "get_product_dims",
    "resolve_dims",
    "Room",
    "Wall",
    "room_area",
    "room_bounds",
    "room_perimeter",
    "wall_segments",
    "ROOM_TEMPLATES",
    "get_template",
    "create_empty_room",
    "create_l_shaped_room",
    "check_collision",
    "check_minimum_clearance",
    "get_overlapping_pairs",
    "FurnitureLayout",
    "PlacedItem",
    "generate_layout",
    "apply_smart_snap",
    "snap_to_grid",
    "snap_to_wall",
    "compute_clearances",
    "compute_traffic_paths",
    "EditorState",
    "EditorHistory",
    "create_editor_state",
    "create_editor_state_from_layout",
    "export_to_json",
    "deserialize_editor_state",
]
