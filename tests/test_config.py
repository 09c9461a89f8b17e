import pytest
from pydantic import ValidationError

from team_core.config import (
    DEFAULT_CONFIG, DEFAULT_SETTINGS_YAML, load_settings, load_settings_yaml, dump_settings, settings_from_dict,
)
from team_core.models import AppSettings

def test_default_yaml_matches_defaults():
    s = load_settings(DEFAULT_SETTINGS_YAML)
    assert s.team_size == DEFAULT_CONFIG["team_size"]
    assert s.palette == ["white", "colored", "black"]
    assert s.team_names[0] == "Team Alpha"
    assert s.random_seed is None

def test_partial_yaml_merges_over_defaults(tmp_path):
    p = tmp_path / "settings.yaml"
    p.write_text("team_size: 4\nrandom_seed: 11\n", encoding="utf-8")
    s = load_settings_yaml(str(p))
    assert s.team_size == 4
    assert s.random_seed == 11
    assert s.refine_passes == 3

def test_legacy_keys_and_round_trip():
    s = settings_from_dict({"defaultTeamSize": 8, "teamNames": ["A", "B"]})
    assert s.team_size == 8
    assert load_settings(dump_settings(s)) == s

def test_invalid_settings():
    with pytest.raises(ValueError, match="Unknown setting"):
        settings_from_dict({"colour": "red"})
    with pytest.raises(ValueError):
        load_settings("- just\n- a list\n")
    with pytest.raises(ValidationError):
        AppSettings(team_size=0)
    with pytest.raises(ValidationError):
        AppSettings(palette=["white", "White"])
    with pytest.raises(ValidationError):
        AppSettings(refine_passes=-1)
