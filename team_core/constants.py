from __future__ import annotations

# --- Team colors (fixed palette, order = team order) ---
TEAM_COLORS = ["white", "colored", "black"]

# --- Ratings ---
RATING_MIN = 1
RATING_MAX = 5

# --- Constraint types ---
MUTUAL_EXCLUSION = "mutual-exclusion"
COLOR_RESTRICTION = "color-restriction"
CONSTRAINT_TYPES = [MUTUAL_EXCLUSION, COLOR_RESTRICTION]

# Legacy names used by saved app data -> canonical type
CONSTRAINT_ALIASES = {
    "cannot_play_together": MUTUAL_EXCLUSION,
    "separate_teams": MUTUAL_EXCLUSION,
    "cannot_wear_color": COLOR_RESTRICTION,
    "mutual_exclusion": MUTUAL_EXCLUSION,
    "color_restriction": COLOR_RESTRICTION,
}

# Violation rule for direct participant-to-participant conflicts
DIRECT_CONFLICT = "conflict"

# --- Defaults ---
DEFAULT_TEAM_SIZE = 6
DEFAULT_TEAM_NAMES = [
    "Team Alpha", "Team Beta", "Team Gamma", "Team Delta", "Team Epsilon", "Team Zeta",
]

EMPTY_TEAM_PLACEHOLDER = "(no players)"

def normalize_constraint_type(t: str) -> str:
    if not t:
        return ""
    key = t.strip()
    if key in CONSTRAINT_TYPES:
        return key
    return CONSTRAINT_ALIASES.get(key.lower(), key)

def normalize_color(c: str) -> str:
    if not c:
        return ""
    return c.strip().lower()

def team_id_for(index: int) -> str:
    return f"team-{index + 1}"
