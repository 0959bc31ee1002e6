#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import yaml
from pathlib import Path
from copy import deepcopy

# GLOBALS
_config = None

DEFAULT_CONFIG_PATH = "etc/config.yaml"
CONFIG_ENV_VAR = "WOWSRP_CONFIG"

DEFAULTS = {
    "tool_name": "wowsrp",
    "Logging": {
        "logging_levels": "Success, Information, Warning, Error",
        "logging_file_levels": "None",
        "log_file": "wowsrp.log",
        "log_dir": "logs",
        "date_format": "[%Y-%m-%d %H:%M:%S]",
    },
}


def _merge_dicts(base: dict, override: dict) -> dict:
    """
    Shallow+nested merge: values in override win; dict values are merged recursively.
    """
    result = deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _merge_dicts(result[k], v)
        else:
            result[k] = deepcopy(v)
    return result


def _resolve_path(filepath: str | None) -> tuple[Path, bool]:
    """
    Pick the config file to read.

    Returns the path and whether it was requested explicitly (argument or
    environment). The default path is optional; an explicit one is not.
    """
    if filepath:
        return Path(filepath), True

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return Path(DEFAULT_CONFIG_PATH), False


class ConfigLoader:
    @staticmethod
    def get_config() -> dict:
        """
        Returns the cached configuration, loading it on first use.
        """
        global _config
        if _config is None:
            _config = ConfigLoader.load_config()
        return _config

    @staticmethod
    def load_config(filepath: str | None = None) -> dict:
        """
        Loads the configuration file if not already cached.

        The YAML file is overlaid on the built-in defaults, so a partial
        file only needs the keys it changes.
        """
        global _config

        if _config is None:
            path, explicit = _resolve_path(filepath)

            overlay = {}
            if path.is_file():
                try:
                    overlay = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                except yaml.YAMLError as e:
                    raise RuntimeError(f"Error parsing YAML file: {e}")
            elif explicit:
                raise RuntimeError(f"Configuration file not found at {path}.")

            if not isinstance(overlay, dict):
                raise RuntimeError(f"Configuration root in {path} must be a mapping.")

            _config = _merge_dicts(DEFAULTS, overlay)

        return _config

    @staticmethod
    def reload_config(filepath: str | None = None) -> dict:
        """
        Reload the configuration from disk.

        Returns:
            dict: The reloaded configuration dictionary.
        """

        global _config
        _config = None

        return ConfigLoader.load_config(filepath)
