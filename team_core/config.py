# team_core/config.py
from __future__ import annotations
import textwrap
from typing import Any, Dict, Optional
import yaml

from .constants import DEFAULT_TEAM_SIZE, DEFAULT_TEAM_NAMES, TEAM_COLORS
from .models import AppSettings

# ===== Defaults =====
DEFAULT_CONFIG = {
    "team_size": DEFAULT_TEAM_SIZE,
    "team_names": list(DEFAULT_TEAM_NAMES),
    "palette": list(TEAM_COLORS),
    "refine_passes": 3,         # swap passes after greedy placement; 0 disables
    "random_seed": None,        # None = ties keep roster order
}

DEFAULT_SETTINGS_YAML = textwrap.dedent("""\
team_size: 6
team_names:
  - Team Alpha
  - Team Beta
  - Team Gamma
  - Team Delta
  - Team Epsilon
  - Team Zeta
palette:
  - white
  - colored
  - black
refine_passes: 3
""")

# Keys accepted from older saved settings
_LEGACY_KEYS = {
    "defaultTeamSize": "team_size",
    "teamNames": "team_names",
}

def _merge(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = dict(DEFAULT_CONFIG)
    for k, v in (overrides or {}).items():
        key = _LEGACY_KEYS.get(k, k)
        if key not in DEFAULT_CONFIG:
            raise ValueError(f"Unknown setting: {k}")
        if v is None and key != "random_seed":
            continue
        merged[key] = v
    return merged

def settings_from_dict(data: Optional[Dict[str, Any]]) -> AppSettings:
    return AppSettings(**_merge(data))

def load_settings(text: str) -> AppSettings:
    obj = yaml.safe_load(text) or {}
    if not isinstance(obj, dict):
        raise ValueError("Settings YAML must be a mapping.")
    return settings_from_dict(obj)

def load_settings_yaml(path: str) -> AppSettings:
    with open(path, "r", encoding="utf-8") as f:
        return load_settings(f.read())

def dump_settings(settings: AppSettings) -> str:
    return yaml.safe_dump(settings.model_dump(), sort_keys=False)
