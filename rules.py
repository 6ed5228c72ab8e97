"""Rule tables and unit constants shared by the layout engine.

Values are built in and may be overridden by ``rules.layout.json`` (or the
file named by ``FURNPLAN_RULES``).  The file may carry ``//`` and ``/* */``
comments.
"""

import json
import logging
import os
import re
from typing import Dict

logger = logging.getLogger(__name__)

LAYOUT_RULES_FILE = os.environ.get(
    "FURNPLAN_RULES",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "rules.layout.json"),
)


def load_rules(path: str) -> Dict:
    """
    Load rule configuration from ``path``. If the file is missing or invalid
    an empty dictionary is returned so that built-in defaults remain in effect.
    """
    try:
        with open(path, "r") as f:
            text = f.read()
        text = re.sub(r"//.*?$|/\*.*?\*/", "", text, flags=re.MULTILINE | re.DOTALL)
        rules = json.loads(text)
    except (OSError, ValueError) as exc:
        logger.debug("rules file %s not loaded: %s", path, exc)
        return {}
    if not isinstance(rules, dict):
        return {}
    return rules


RULES = load_rules(LAYOUT_RULES_FILE)

# -----------------------
# Units
# -----------------------

IN_TO_FT = 1 / 12
PX_PER_FT = RULES.get("units", {}).get("PX_PER_FT", 60)
WALL_GAP_FT = RULES.get("units", {}).get("WALL_GAP_FT", 0.25)
SEARCH_STEP_FT = RULES.get("solver", {}).get("SEARCH_STEP_FT", 0.5)
RASTER_STEP_FT = RULES.get("solver", {}).get("RASTER_STEP_FT", 1.0)
MAX_SEARCH_RADIUS_FT = RULES.get("solver", {}).get("MAX_SEARCH_RADIUS_FT", 10.0)
DEFAULT_WALL_THICKNESS_FT = RULES.get("units", {}).get("WALL_THICKNESS_FT", 0.5)

# -----------------------
# Catalog (base sizes, feet)
# -----------------------

DEFAULT_FURN_DIMS = {
    "sofa":    {"w": 7,   "d": 3,   "clear_front": 2.5, "clear_side": 0.5, "label": "Sofa"},
    "bed":     {"w": 5.5, "d": 7,   "clear_front": 3,   "clear_side": 1.5, "label": "Bed"},
    "table":   {"w": 4.5, "d": 2.5, "clear_front": 3,   "clear_side": 2,   "label": "Table"},
    "chair":   {"w": 2.2, "d": 2.2, "clear_front": 1.5, "clear_side": 0.5, "label": "Chair"},
    "stool":   {"w": 1.3, "d": 1.3, "clear_front": 1.5, "clear_side": 0.5, "label": "Stool"},
    "light":   {"w": 1.2, "d": 1.2, "clear_front": 0,   "clear_side": 0,   "label": "Light"},
    "rug":     {"w": 8,   "d": 5,   "clear_front": 0,   "clear_side": 0,   "label": "Rug"},
    "art":     {"w": 2.5, "d": 0.3, "clear_front": 0,   "clear_side": 0,   "label": "Art"},
    "accent":  {"w": 1.8, "d": 1.8, "clear_front": 0.5, "clear_side": 0.5, "label": "Accent"},
    "decor":   {"w": 1,   "d": 1,   "clear_front": 0.3, "clear_side": 0.3, "label": "Decor"},
    "storage": {"w": 3,   "d": 1.5, "clear_front": 1,   "clear_side": 0.5, "label": "Storage"},
}

FURN_DIMS = dict(DEFAULT_FURN_DIMS)
FURN_DIMS.update(RULES.get("furniture_dims", {}))

# Width / length ratio used when only a floor area is known.
DEFAULT_ASPECT_RATIOS = {
    "Living Room": 1.4,
    "Bedroom": 1.25,
    "Dining Room": 1.3,
    "Kitchen": 1.1,
    "Office": 1.2,
    "Great Room": 1.5,
    "Outdoor": 1.3,
    "Bathroom": 1.1,
}
ASPECT_RATIOS = dict(DEFAULT_ASPECT_RATIOS)
ASPECT_RATIOS.update(RULES.get("aspect_ratios", {}))
DEFAULT_ASPECT = RULES.get("solver", {}).get("DEFAULT_ASPECT", 1.3)
# Floor area used when neither dimensions nor a positive area are given.
DEFAULT_ROOM_SQFT = RULES.get("solver", {}).get("DEFAULT_ROOM_SQFT", 150)

# -----------------------
# Palette
# -----------------------

DEFAULT_CATEGORY_COLORS = {
    "sofa": "#8B6840", "bed": "#7B4870", "table": "#4B7B50", "chair": "#5B4B9B",
    "stool": "#8B6B35", "light": "#B8901A", "rug": "#3878A0", "art": "#985050",
    "accent": "#607060", "decor": "#607060", "storage": "#5B6B5B",
}
CATEGORY_COLORS = dict(DEFAULT_CATEGORY_COLORS)
CATEGORY_COLORS.update(RULES.get("category_colors", {}))

# Muted tones used once a layout is handed to the editor.
DEFAULT_EDITOR_COLORS = {
    "sofa": "#7B6650", "bed": "#8B7060", "table": "#6B7B5B", "chair": "#7B6B58",
    "stool": "#8B7B60", "light": "#A89040", "rug": "#8B7B68", "art": "#9B7B6B",
    "accent": "#7B7060", "decor": "#7B7060", "storage": "#6B7060",
}
EDITOR_COLORS = dict(DEFAULT_EDITOR_COLORS)
EDITOR_COLORS.update(RULES.get("editor_colors", {}))

FALLBACK_COLOR = "#6B685B"

# -----------------------
# Clearance rules (editor overlay)
# -----------------------

CLEARANCE_RULES = {
    "large_categories": ["sofa", "bed"],
    "large_front": 2.5,
    "large_side": 1.5,
    "front": 1.5,
    "side": 1.0,
    "min_width_for_side": 2.0,
    "walkway_offset": 2.5,
}
CLEARANCE_RULES.update(RULES.get("clearances", {}))
