"""
Utilities to load game settings from YAML files.

Settings live in `config/default_config.yaml` under the sections `x01`,
`killer` and `caller`. Unknown keys are ignored to keep the loader
backwards compatible.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import logging

from autocade.core import load_yaml
from .caller import CallerSettings
from .game_modes import X01Settings
from .killer import KillerSettings

logger = logging.getLogger(__name__)

# Default location for the application-wide settings
DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")


def _apply_overrides(target: Any, overrides: Dict[str, Any]) -> None:
    """
    Apply dictionary overrides to a dataclass-like object.

    Unknown keys are ignored to remain forward compatible with new YAML fields.
    Dashes in keys are accepted in place of underscores.
    """
    for key, value in overrides.items():
        attr = str(key).replace("-", "_")
        if hasattr(target, attr):
            setattr(target, attr, value)
        else:
            logger.debug("Ignoring unknown config key: %s", key)


def load_game_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load raw settings dictionary from YAML.

    Args:
        config_path: Optional path to YAML file (defaults to DEFAULT_CONFIG_PATH)

    Returns:
        Dictionary with settings (empty dict on failure)
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.info("Game config not found at %s, using defaults", path)
        return {}

    try:
        return load_yaml(path) or {}
    except Exception as exc:  # YAML/IO errors fall back to safe defaults
        logger.warning("Failed to load game config from %s: %s", path, exc)
        return {}


def build_x01_settings(settings: Optional[Dict[str, Any]] = None) -> X01Settings:
    """Construct X01Settings from the `x01` section."""
    settings = settings or {}
    x01 = X01Settings()
    _apply_overrides(x01, settings.get("x01") or {})
    x01.validate()
    return x01


def build_killer_settings(settings: Optional[Dict[str, Any]] = None) -> KillerSettings:
    """Construct KillerSettings from the `killer` section."""
    settings = settings or {}
    killer = KillerSettings()
    _apply_overrides(killer, settings.get("killer") or {})
    killer.validate()
    return killer


def build_caller_settings(settings: Optional[Dict[str, Any]] = None) -> CallerSettings:
    """Construct CallerSettings from the `caller` section."""
    settings = settings or {}
    caller = CallerSettings()
    _apply_overrides(caller, settings.get("caller") or {})
    return caller


def load_game_config(
        config_path: Optional[Path] = None
) -> Tuple[X01Settings, KillerSettings, CallerSettings]:
    """
    Convenience wrapper to load and build all game settings in one call.
    """
    settings = load_game_settings(config_path)
    return (
        build_x01_settings(settings),
        build_killer_settings(settings),
        build_caller_settings(settings),
    )
