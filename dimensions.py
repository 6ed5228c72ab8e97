"""Footprint estimation for catalog items.

A catalog item only carries a category and a free-text name, so the
footprint is estimated in four steps:

1. an explicit ``W x D`` pair of inches in the name,
2. a single inch measurement (depth follows the category's aspect ratio),
3. keyword rules per category (``sectional``, ``queen``, ``round`` ...),
4. the base size of the category.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Tuple

from rules import FURN_DIMS, IN_TO_FT


class Category(str, Enum):
    SOFA = "sofa"
    BED = "bed"
    TABLE = "table"
    CHAIR = "chair"
    STOOL = "stool"
    LIGHT = "light"
    RUG = "rug"
    ART = "art"
    ACCENT = "accent"
    DECOR = "decor"
    STORAGE = "storage"

    @classmethod
    def coerce(cls, value) -> "Category":
        """Return the category for ``value``; unknown strings map to ACCENT."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.ACCENT


# Rugs, art and lights never act as obstacles for other pieces.
NON_BLOCKING = frozenset({Category.RUG, Category.ART, Category.LIGHT})


@dataclass(frozen=True)
class CatalogItem:
    """A product as supplied by the catalog service."""
    id: int
    category: str
    name: str = ""
    price: float = 0.0
    image: str = ""
    styles: Tuple[str, ...] = field(default_factory=tuple)
    rooms: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def cat(self) -> Category:
        return Category.coerce(self.category)


@dataclass(frozen=True)
class ProductDims:
    w: float
    d: float
    clear_front: float
    clear_side: float
    label: str
    shape: str = "rect"


def base_dims(category) -> ProductDims:
    cat = Category.coerce(category)
    base = FURN_DIMS.get(cat.value) or FURN_DIMS["accent"]
    return ProductDims(
        w=float(base["w"]),
        d=float(base["d"]),
        clear_front=float(base.get("clear_front", 0)),
        clear_side=float(base.get("clear_side", 0)),
        label=base.get("label", cat.value.title()),
    )


RECT_INCHES = re.compile(r'(\d{2,3})\s*(?:"|inch|in)?\s*(?:x|by|×)\s*(\d{2,3})')
SINGLE_INCHES = re.compile(r'(\d{2,3})(?:\.\d+)?\s*(?:"|inches\b|inch\b|in\b)')
RUG_FEET = re.compile(r"(\d+)\s*(?:'|ft|foot)?\s*(?:x|by|×)\s*(\d+)")

SMALL_WORDS = re.compile(r"compact|small|mini|apartment|petite")
LARGE_WORDS = re.compile(r"oversized|grand|\bxl\b|large")

# (pattern, w, d, label, shape); first match wins.
SOFA_VARIANTS = [
    (r"sectional", 10, 7, "Sectional", "L"),
    (r"modular", 9, 3.5, "Modular Sofa", "rect"),
    (r"loveseat|love\s*seat", 5, 2.8, "Loveseat", "rect"),
    (r"settee", 4.5, 2.5, "Settee", "rect"),
    (r"daybed", 6.5, 3, "Daybed", "rect"),
    (r"chaise", 5.5, 2.5, "Chaise", "rect"),
    (r"sleeper", 7.5, 3.2, "Sleeper Sofa", "rect"),
]

BED_VARIANTS = [
    (r"cal(ifornia)?\s*king", 6, 7.4, "Cal King Bed", "bed"),
    (r"king", 6.5, 7.4, "King Bed", "bed"),
    (r"queen", 5, 7.4, "Queen Bed", "bed"),
    (r"full|double", 4.5, 7, "Full Bed", "bed"),
    (r"twin\s*xl", 3.25, 6.75, "Twin XL", "bed"),
    (r"twin", 3.25, 6.5, "Twin Bed", "bed"),
    (r"daybed", 6.5, 3.25, "Daybed", "rect"),
    (r"bunk", 3.5, 6.5, "Bunk Bed", "bed"),
    (r"crib", 2.5, 4.5, "Crib", "rect"),
]

DINING_TABLE_VARIANTS = [
    (r"round", 4, 4, "Round Dining", "round"),
    (r"oval", 6, 3.5, "Oval Dining", "oval"),
    (r"extendable|extension|extending", 7, 3.5, "Ext. Dining", "rect"),
]

COFFEE_TABLE_VARIANTS = [
    (r"round", 3, 3, "Round Coffee", "round"),
    (r"oval", 4, 2, "Oval Coffee", "oval"),
]

TABLE_VARIANTS = [
    (r"console", 4.5, 1.2, "Console", "rect"),
    (r"nightstand|night\s*stand|bedside", 1.8, 1.5, "Nightstand", "rect"),
    (r"side\s*table|end\s*table|accent\s*table", 1.8, 1.8, "Side Table", "rect"),
    (r"desk", 4.5, 2, "Desk", "rect"),
    (r"vanity", 3.5, 1.5, "Vanity", "rect"),
    (r"dresser", 5, 1.5, "Dresser", "rect"),
    (r"bookshelf|bookcase|shelf|shelving", 3, 1, "Bookshelf", "rect"),
    (r"round", 3.5, 3.5, "Table", "round"),
    (r"oval", 5, 3, "Table", "oval"),
]

CHAIR_VARIANTS = [
    (r"dining", 1.6, 1.8, "Dining Chair", "rect"),
    (r"accent|arm\s*chair|lounge", 2.5, 2.8, "Accent Chair", "rect"),
    (r"recliner", 3, 3, "Recliner", "rect"),
    (r"rocking|rocker", 2.2, 3, "Rocker", "rect"),
    (r"desk\s*chair|office", 2, 2, "Desk Chair", "rect"),
    (r"swivel", 2.5, 2.5, "Swivel Chair", "round"),
    (r"barrel", 2.5, 2.5, "Barrel Chair", "round"),
    (r"wingback|wing", 2.5, 2.8, "Wingback", "rect"),
    (r"club", 2.5, 2.8, "Club Chair", "rect"),
    (r"bench", 4, 1.5, "Bench", "rect"),
    (r"ottoman|pouf", 2, 2, "Ottoman", "round"),
]

STOOL_VARIANTS = [
    (r"counter", 1.4, 1.4, "Counter Stool", "round"),
    (r"bar", 1.4, 1.4, "Bar Stool", "round"),
    (r"backless", 1.2, 1.2, "Backless Stool", "round"),
]

LIGHT_VARIANTS = [
    (r"chandelier", 2.5, 2.5, "Chandelier", "round"),
    (r"pendant", 1.5, 1.5, "Pendant", "round"),
    (r"floor\s*lamp", 1.2, 1.2, "Floor Lamp", "round"),
    (r"table\s*lamp", 1, 1, "Table Lamp", "round"),
    (r"sconce|wall\s*light", 0.6, 0.5, "Sconce", "rect"),
    (r"lamp", 1, 1, "Lamp", "round"),
]

ACCENT_VARIANTS = [
    (r"mirror", 2.5, 0.3, "Mirror", "rect"),
    (r"planter|pot|vase", 1, 1, "Decor", "round"),
    (r"basket|hamper", 1.5, 1.5, "Basket", "round"),
    (r"pillow|throw|cushion", 1.5, 1.5, "Throw", "rect"),
    (r"blanket", 1.5, 0.5, "Blanket", "rect"),
    (r"tray", 1.2, 0.8, "Tray", "rect"),
    (r"candl", 0.5, 0.5, "Candle", "round"),
    (r"clock", 1, 0.3, "Clock", "round"),
    (r"shelf|bookend", 3, 0.8, "Shelf", "rect"),
    (r"cabinet|credenza|sideboard|buffet", 5, 1.5, "Credenza", "rect"),
    (r"ottoman|pouf", 2, 2, "Ottoman", "round"),
]


def _match_variant(name: str, variants: List[Tuple]) -> Optional[Tuple[float, float, str, str]]:
    for pattern, w, d, label, shape in variants:
        if re.search(pattern, name):
            return float(w), float(d), label, shape
    return None


def _sofa(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, SOFA_VARIANTS) or (7.0, 3.0, "Sofa", "rect")
    if SMALL_WORDS.search(name):
        w, d = w * 0.8, d * 0.85
    if LARGE_WORDS.search(name):
        w, d = w * 1.15, d * 1.1
    return replace(base, w=w, d=d, label=label, shape=shape)


def _bed(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, BED_VARIANTS) or (5.5, 7.4, "Bed", "bed")
    return replace(base, w=w, d=d, label=label, shape=shape)


def _table(name: str, base: ProductDims) -> ProductDims:
    if "dining" in name:
        hit = _match_variant(name, DINING_TABLE_VARIANTS) or (6.0, 3.2, "Dining Table", "rect")
    elif "coffee" in name:
        hit = _match_variant(name, COFFEE_TABLE_VARIANTS) or (4.0, 2.0, "Coffee Table", "rect")
    else:
        hit = _match_variant(name, TABLE_VARIANTS) or (4.5, 2.5, "Table", "rect")
    w, d, label, shape = hit
    if label == "Side Table" and "round" in name:
        shape = "round"
    if re.search(r"small|mini|compact|petite", name):
        w, d = w * 0.8, d * 0.85
    if re.search(r"large|grand|oversized", name):
        w, d = w * 1.2, d * 1.15
    return replace(base, w=w, d=d, label=label, shape=shape)


def _chair(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, CHAIR_VARIANTS) or (2.2, 2.2, "Chair", "rect")
    if re.search(r"round|circular", name) and shape != "round":
        shape = "round"
        w = d = max(w, d)
    return replace(base, w=w, d=d, label=label, shape=shape)


def _stool(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, STOOL_VARIANTS) or (1.4, 1.4, "Stool", "round")
    if re.search(r"square|rectangular", name):
        shape = "rect"
    return replace(base, w=w, d=d, label=label, shape=shape)


def _light(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, LIGHT_VARIANTS) or (1.2, 1.2, "Light", "round")
    return replace(base, w=w, d=d, label=label, shape=shape)


def _rug(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = 8.0, 5.0, "Rug", "rect"
    m = RUG_FEET.search(name)
    if m and int(m.group(1)) and int(m.group(2)):
        w, d = float(m.group(1)), float(m.group(2))
    elif "runner" in name:
        w, d, label = 2.5, 8.0, "Runner"
    if re.search(r"round|circular", name):
        shape = "round"
        d = w
    if w < d:
        w, d = d, w
    return replace(base, w=w, d=d, label=label, shape=shape)


def _art(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = 2.5, 0.3, "Art", "rect"
    if "mirror" in name:
        label = "Mirror"
        if "round" in name:
            shape = "round"
    elif re.search(r"large|oversized", name):
        w = 4.0
    elif re.search(r"small|mini", name):
        w = 1.5
    return replace(base, w=w, d=d, label=label, shape=shape)


def _accent(name: str, base: ProductDims) -> ProductDims:
    w, d, label, shape = _match_variant(name, ACCENT_VARIANTS) or (1.8, 1.8, "Accent", "rect")
    if label == "Mirror" and "round" in name:
        shape = "round"
    return replace(base, w=w, d=d, label=label, shape=shape)


KEYWORD_RULES: Dict[Category, Callable[[str, ProductDims], ProductDims]] = {
    Category.SOFA: _sofa,
    Category.BED: _bed,
    Category.TABLE: _table,
    Category.CHAIR: _chair,
    Category.STOOL: _stool,
    Category.LIGHT: _light,
    Category.RUG: _rug,
    Category.ART: _art,
    Category.ACCENT: _accent,
}


@lru_cache(maxsize=1024)
def resolve_dims(category, name: str) -> ProductDims:
    """Estimate the footprint of an item from its category and name."""
    cat = Category.coerce(category)
    name = (name or "").lower()
    base = base_dims(cat)

    # zero measurements ("00 x 00") fall through to the keyword rules
    m = RECT_INCHES.search(name)
    if m and int(m.group(1)) and int(m.group(2)):
        return replace(base, w=float(m.group(1)) * IN_TO_FT, d=float(m.group(2)) * IN_TO_FT, shape="rect")
    m = SINGLE_INCHES.search(name)
    if m and int(m.group(1)):
        w_ft = float(m.group(1)) * IN_TO_FT
        return replace(base, w=w_ft, d=base.d * (w_ft / base.w), shape="rect")

    rule = KEYWORD_RULES.get(cat)
    if rule is None:
        return base
    return rule(name, base)


def get_product_dims(item: CatalogItem) -> ProductDims:
    return resolve_dims(item.cat, item.name)
