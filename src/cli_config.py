"""Configuration file loading and CLI precedence.

Settings come from, in increasing precedence: Constants defaults, the
configuration file passed with --config, and explicit CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Args:
        config_path: Path to YAML/JSON config file, or None.

    Returns:
        Configuration dict (empty when no file is given).

    Raises:
        ConfigError: If the file is missing, malformed or not a mapping.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "yes", "1", "on")


def apply_config(args, config: Dict[str, Any]) -> None:
    """Fill unset CLI arguments from ``config`` and Constants defaults, in place."""
    analyzer_cfg = config.get("analyzer") or {}
    if not isinstance(analyzer_cfg, dict):
        analyzer_cfg = {"command": analyzer_cfg}

    if getattr(args, "OPTIMIZE", None) is None:
        args.OPTIMIZE = _as_bool(config["optimize"]) if "optimize" in config else Constants.DEFAULT_OPTIMIZE
    if not getattr(args, "SERVER_XML", None):
        args.SERVER_XML = config.get("server_xml")
    if not getattr(args, "CLASSES_DIRS", None):
        args.CLASSES_DIRS = _as_list(config.get("classes_dirs"))
    if not getattr(args, "CLASS_FILES", None):
        args.CLASS_FILES = _as_list(config.get("class_files"))
    if not getattr(args, "POM", None):
        args.POM = config.get("pom")
    if not getattr(args, "DEPENDENCIES", None):
        args.DEPENDENCIES = _as_list(config.get("dependencies"))
    if not getattr(args, "LOG_LOCATION", None):
        args.LOG_LOCATION = config.get("log_location") or os.getcwd()
    if not getattr(args, "ANALYZER", None):
        args.ANALYZER = analyzer_cfg.get("command")
    if getattr(args, "ANALYZER_TIMEOUT", None) is None:
        timeout = analyzer_cfg.get("timeout", Constants.ANALYZER_TIMEOUT)
        args.ANALYZER_TIMEOUT = float(timeout) if timeout is not None else None


def analyzer_command(value: Any) -> List[str]:
    """Split a configured analyzer command into argv tokens."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if not value:
        return []
    return shlex.split(str(value))
