from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of indexing preferences using JSON in the user
data directory. Missing keys fall back to defaults and a corrupted file never
prevents the application from starting.
"""

import json
import logging
import os
from typing import Any, Dict

from nestedtags.core.analysis.tag_extractor import (
    DEFAULT_MARKER,
    DEFAULT_SEPARATOR,
    DEFAULT_TERMINATOR,
)
from nestedtags.core.services.filters import default_exclude_patterns, default_include_patterns
from nestedtags.domain.tag_path import DEFAULT_DELIMITER
from nestedtags.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_POLL_INTERVAL = 1.0


def get_config_file() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Workspace
        "workspace_path": os.getcwd(),

        # Discovery
        "include_patterns": default_include_patterns(),
        "exclude_patterns": default_exclude_patterns(),
        "respect_gitignore": True,

        # Tag syntax
        "tag_marker": DEFAULT_MARKER,
        "tag_terminator": DEFAULT_TERMINATOR,
        "tag_separator": DEFAULT_SEPARATOR,
        "hierarchy_delimiter": DEFAULT_DELIMITER,

        # Scheduling
        "debounce_seconds": DEFAULT_DEBOUNCE_SECONDS,
        "poll_interval": DEFAULT_POLL_INTERVAL,

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration, or defaults on failure.
    """
    config = get_default_config()
    config_file = get_config_file()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    data.pop("version", None)
    config.update({k: v for k, v in data.items() if k in config})
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    config_file = get_config_file()
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
