"""
YAML helpers for game settings, feed recordings and replay summaries.

All three are mappings at the top level; anything else is rejected on load.
"""
import os
import tempfile
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

logger = logging.getLogger(__name__)


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """
    Read a YAML mapping.

    Args:
        filepath: Settings file, feed recording or summary

    Returns:
        Parsed mapping ({} for an empty file)

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the document is not a mapping
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"YAML file not found: {filepath}")

    with filepath.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{filepath}: expected a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded {filepath} ({len(data)} keys)")
    return data


def atomic_write_yaml(filepath: Path, data: Dict[str, Any]) -> None:
    """
    Write a mapping as YAML so readers never see a half-written file.

    Keys keep insertion order, which keeps summaries readable.

    Raises:
        IOError: If the file could not be written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the target directory so os.replace stays on one filesystem
    tmp = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=filepath.parent,
        prefix=f".{filepath.stem}_",
        suffix=".tmp",
        delete=False,
    )
    try:
        with tmp:
            yaml.safe_dump(data, tmp, sort_keys=False, allow_unicode=True)
        os.replace(tmp.name, filepath)
    except (OSError, yaml.YAMLError) as e:
        Path(tmp.name).unlink(missing_ok=True)
        logger.error(f"Failed to write {filepath}: {e}")
        raise IOError(f"Could not write {filepath}: {e}") from e

    logger.debug(f"Wrote {filepath}")
