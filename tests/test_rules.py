import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import rules
from rules import load_rules


def test_load_rules_strips_comments(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        '{\n'
        '  // pixels per foot\n'
        '  "units": {"PX_PER_FT": 48},\n'
        '  /* solver tuning\n'
        '     spans lines */\n'
        '  "solver": {"SEARCH_STEP_FT": 0.25}\n'
        '}\n'
    )
    assert load_rules(str(path)) == {"units": {"PX_PER_FT": 48}, "solver": {"SEARCH_STEP_FT": 0.25}}


def test_missing_or_broken_rules_fall_back_to_defaults(tmp_path):
    assert load_rules(str(tmp_path / "absent.json")) == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert load_rules(str(broken)) == {}
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    assert load_rules(str(listing)) == {}


def test_builtin_defaults():
    assert rules.PX_PER_FT == 60
    assert rules.CLEARANCE_RULES["walkway_offset"] == 2.5
    assert set(rules.FURN_DIMS) >= {"sofa", "bed", "table", "decor", "storage"}
