"""
Configuration Loader - Load YAML configuration files
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from cdc_json.config.settings import CdcJsonSettings

logger = logging.getLogger(__name__)


def load_yaml_config(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary containing configuration

    Raises:
        FileNotFoundError: If configuration file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML file {file_path}: {e}")
        raise

    if config is None:
        logger.warning(f"Empty configuration file: {file_path}")
        return {}

    logger.info(f"Loaded configuration from {file_path}")
    return config


def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge multiple configuration dictionaries (later configs override earlier ones)

    Args:
        *configs: Variable number of configuration dictionaries

    Returns:
        Merged configuration dictionary
    """
    merged: Dict[str, Any] = {}

    for config in configs:
        if not config:
            continue
        _deep_merge(merged, config)

    return merged


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override dictionary into base dictionary (in-place)"""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def load_config(
    config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None
) -> CdcJsonSettings:
    """
    Load encoder configuration from a YAML file or environment variables

    Args:
        config_path: Optional path to YAML config file. If None, uses environment variables.
        overrides: Optional values merged over the file contents

    Returns:
        CdcJsonSettings: Validated configuration object

    Raises:
        FileNotFoundError: If config file specified but not found
        yaml.YAMLError: If YAML parsing fails
        ValidationError: If configuration validation fails

    Examples:
        >>> config = load_config("config/cdc-json.yaml")
        >>> envelope_config = config.format.to_envelope_config()
    """
    if config_path:
        values = merge_configs(load_yaml_config(config_path), overrides or {})
        config = CdcJsonSettings(**values)
    else:
        config = CdcJsonSettings(**(overrides or {}))
        logger.info("Loaded configuration from environment variables")

    logger.debug("Configuration loaded successfully")
    return config
