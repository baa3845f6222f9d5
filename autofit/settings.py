"""
Settings loader.

Reads user scheduling preferences from a YAML file whose keys mirror the
settings payload (defaultTaskDuration, workingHours, ...). Keys not present
in the file keep their DEFAULT_SETTINGS value.
"""

import copy
import logging
import os
from pathlib import Path

import yaml

from .config import APP_ENV_HOME, DEFAULT_SETTINGS
from .errors import MalformedInput
from .models import Settings
from .schemas import parse_settings

logger = logging.getLogger(__name__)


def app_home() -> Path:
    """
    User-writable home for Autofit.
    Override with AUTOFIT_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".autofit").resolve()


def settings_path() -> Path:
    return app_home() / "settings.yaml"


def load_settings(path: Path | str | None = None) -> Settings:
    """
    Load settings from YAML, falling back to defaults if the file is missing.

    Raises:
        MalformedInput: If the file cannot be read, is not a mapping, or holds invalid values
    """
    path = Path(path) if path is not None else settings_path()
    data = copy.deepcopy(DEFAULT_SETTINGS)

    if not path.exists():
        logger.warning("Settings file not found at %s, using defaults", path)
        return parse_settings(data)

    try:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as exc:
        raise MalformedInput(f"Failed to load settings from {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise MalformedInput(f"Settings file {path} must contain a mapping, got {type(loaded).__name__}")

    data.update(loaded)
    return parse_settings(data)
