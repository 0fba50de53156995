"""Constants used in the project."""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    PROVIDER_ERROR = 1
    USAGE_ERROR = 2
    PERMISSION_ERROR = 3
    CHECKSUM_MISMATCH = 4
    UNSUITABLE = 5


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROVIDER_NAME = "homebrew"
    BREW_PATH = "/usr/local/bin/brew"
    SUPPORTED_PLATFORMS = ("darwin",)
    LOG_FORMAT = "[%(levelname)s] %(message)s"

    ENV_CONFIG = "BREWPROV_CONFIG"
    ENV_BREW_PATH = "BREWPROV_BREW_PATH"
    ENV_LOG_LEVEL = "BREWPROV_LOG_LEVEL"

    DEFAULT_CONFIG_PATHS = (
        os.path.join("~", ".config", "brewprov", "brewprov.yml"),
        "brewprov.yml",
    )


def _candidate_config_paths(path: Optional[str] = None):
    if path:
        yield path
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        yield env_path
    for default in Constants.DEFAULT_CONFIG_PATHS:
        yield os.path.expanduser(default)


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the first YAML config found.

    Search order: explicit path, $BREWPROV_CONFIG, ~/.config/brewprov/brewprov.yml,
    ./brewprov.yml. A missing, unreadable or malformed file yields an empty dict.
    """
    import yaml

    for candidate in _candidate_config_paths(path):
        if not os.path.isfile(candidate):
            if candidate == path:
                logger.warning("Config file not found: %s", candidate)
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to load config %s: %s", candidate, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level must be a mapping", candidate)
            return {}
        logger.debug("Loaded config from %s", candidate)
        return data
    return {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply the ``homebrew`` section of a loaded config onto Constants.

    The BREWPROV_BREW_PATH environment variable wins over the file.
    """
    section = cfg.get("homebrew") if isinstance(cfg, dict) else None
    if isinstance(section, dict):
        brew_path = section.get("brew_path")
        if isinstance(brew_path, str) and brew_path.strip():
            Constants.BREW_PATH = brew_path.strip()
        platforms = section.get("supported_platforms")
        if isinstance(platforms, (list, tuple)) and platforms:
            Constants.SUPPORTED_PLATFORMS = tuple(str(p).lower() for p in platforms)

    env_brew = os.environ.get(Constants.ENV_BREW_PATH)
    if env_brew and env_brew.strip():
        Constants.BREW_PATH = env_brew.strip()
