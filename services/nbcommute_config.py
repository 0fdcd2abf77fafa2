"""
nbcommute Configuration Service - Manages settings from nbcommute_config.json.

This module handles loading and accessing the nbcommute_config.json file,
which controls strict mode, the nbformat version notebooks are upgraded to,
and logging verbosity for the command line tool.

If nbcommute_config.json doesn't exist, defaults are used. Run
`write_default_config()` to create a file to customize.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Any

from document.upgrade import NBFORMAT

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "nbcommute_config.json"

# Default configuration - used when no config file exists
DEFAULT_CONFIG = {
    "normalizer": {
        "strict": False,
        "target_nbformat": NBFORMAT,
        "comment": "strict: raise on unknown cell ids, bad indices and dangling references instead of absorbing them"
    },
    "logging": {
        "level": "WARNING",
        "comment": "Python logging level name: DEBUG, INFO, WARNING, ERROR"
    }
}


@dataclass
class NbcommuteConfig:
    """Parsed nbcommute configuration."""
    strict: bool = False
    target_nbformat: int = NBFORMAT
    log_level: str = "WARNING"

    # Raw config for reference
    raw_config: Dict[str, Any] = field(default_factory=dict)

    def get_log_level(self) -> int:
        """Numeric logging level, WARNING when the name is not recognized."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


# Module-level cached config
_config: Optional[NbcommuteConfig] = None
_config_path: Optional[Path] = None


def _parse_config(raw: Dict[str, Any]) -> NbcommuteConfig:
    """Parse raw JSON config into NbcommuteConfig."""
    config = NbcommuteConfig(raw_config=raw)

    normalizer = {k: v for k, v in raw.get("normalizer", {}).items() if k != "comment"}
    config.strict = bool(normalizer.get("strict", False))
    target = normalizer.get("target_nbformat", NBFORMAT)
    if isinstance(target, int) and not isinstance(target, bool):
        config.target_nbformat = target
    else:
        logger.warning(f"Ignoring non-integer target_nbformat {target!r}")

    log = raw.get("logging", {})
    config.log_level = str(log.get("level", "WARNING"))

    return config


def write_default_config(config_path: Optional[Path] = None) -> Path:
    """Write the default config file and return its path."""
    config_path = Path(config_path or Path.cwd() / CONFIG_FILENAME)
    logger.info(f"Creating default {CONFIG_FILENAME} at {config_path}")
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(DEFAULT_CONFIG, f, indent=2)
    return config_path


def load_config(config_path: Optional[Path] = None, force_reload: bool = False) -> NbcommuteConfig:
    """
    Load nbcommute configuration from JSON file.

    Args:
        config_path: Path to config file. Defaults to ./nbcommute_config.json
        force_reload: If True, reload from disk even if cached

    Returns:
        Parsed NbcommuteConfig
    """
    global _config, _config_path

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    config_path = Path(config_path)

    # Return cached if available and path matches
    if _config is not None and not force_reload and _config_path == config_path:
        return _config

    _config_path = config_path

    if not config_path.exists():
        logger.debug(f"No {CONFIG_FILENAME} at {config_path}, using defaults")
        raw = DEFAULT_CONFIG
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            logger.info(f"Loaded {CONFIG_FILENAME} from {config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {config_path}: {e}")
            raw = DEFAULT_CONFIG

    _config = _parse_config(raw)
    return _config


def get_config() -> NbcommuteConfig:
    """Get the current config, loading if necessary."""
    if _config is None:
        return load_config()
    return _config


def reset_config_cache() -> None:
    """Reset cached config (useful for testing)."""
    global _config, _config_path
    _config = None
    _config_path = None
