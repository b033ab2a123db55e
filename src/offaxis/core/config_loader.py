"""JSON config file loading utilities."""

import json
import logging
from pathlib import Path
from typing import Any

from offaxis.constants import CONFIG_DIR, DEFAULT_RIG_CONFIG
from offaxis.core.settings import RigSettings

logger = logging.getLogger(__name__)


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_config(name: str) -> Any:
    """Load a config file from assets/config/."""
    return load_json(CONFIG_DIR / name)


def load_rig_settings(source: str | Path | None = None) -> RigSettings:
    """Load rig settings from a path, a name under assets/config/, or the default.

    A bare file name that does not exist relative to the working directory
    is looked up in assets/config/.
    """
    if source is None:
        source = DEFAULT_RIG_CONFIG
    path = Path(source)
    if not path.is_file():
        path = CONFIG_DIR / path
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Rig config {path} must contain a JSON object")
    logger.info("Loaded rig config: %s", path)
    return RigSettings.from_dict(data)
