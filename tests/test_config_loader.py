"""
Tests for game settings loading.
"""
from pathlib import Path
import pytest
import yaml

from autocade.game.config_loader import (
    build_caller_settings,
    build_killer_settings,
    build_x01_settings,
    load_game_config,
    load_game_settings,
)

REPO_CONFIG = Path(__file__).parent.parent / "config" / "default_config.yaml"


def write_config(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_missing_file_uses_defaults(tmp_path: Path):
    """Test missing config falls back to defaults."""
    assert load_game_settings(tmp_path / "missing.yaml") == {}

    x01, killer, caller = load_game_config(tmp_path / "missing.yaml")
    assert x01.base_score == 501
    assert x01.double_out
    assert killer.starting_lives == 5
    assert caller.enabled


def test_overrides(tmp_path: Path):
    """Test YAML values override defaults."""
    path = write_config(tmp_path / "game.yaml", {
        "x01": {"base_score": 301, "in_mode": "double", "match_mode": "legs"},
        "killer": {"zone": "outer-single", "starting-lives": 3},
        "caller": {"announce_all_darts": True},
    })

    x01, killer, caller = load_game_config(path)

    assert x01.base_score == 301
    assert x01.double_in
    assert x01.match_mode == "legs"
    assert killer.zone == "outer-single"
    assert killer.starting_lives == 3
    assert caller.announce_all_darts


def test_unknown_keys_ignored():
    """Test unknown keys do not break loading."""
    x01 = build_x01_settings({"x01": {"base_score": 701, "checkout_hints": True}})

    assert x01.base_score == 701
    assert not hasattr(x01, "checkout_hints")


def test_invalid_value_raises():
    """Test invalid values are rejected."""
    with pytest.raises(ValueError):
        build_x01_settings({"x01": {"out_mode": "triple"}})
    with pytest.raises(ValueError):
        build_killer_settings({"killer": {"killer_vs_killer": "sometimes"}})


def test_empty_sections():
    """Test empty or missing sections."""
    assert build_x01_settings(None).base_score == 501
    assert build_killer_settings({"killer": None}).zone == "full"
    assert build_caller_settings({}).announce_busts


def test_broken_yaml_uses_defaults(tmp_path: Path):
    """Test unreadable YAML falls back to an empty dict."""
    path = tmp_path / "broken.yaml"
    path.write_text("x01: [unclosed", encoding="utf-8")

    assert load_game_settings(path) == {}


def test_repo_default_config():
    """Test the shipped default config loads cleanly."""
    x01, killer, caller = load_game_config(REPO_CONFIG)

    assert x01.get_name() == "501 (Double Out)"
    assert x01.match_mode == "off"
    assert killer.killer_vs_killer == "life"
    assert killer.starting_order == "listed"
    assert caller.announce_checkouts
