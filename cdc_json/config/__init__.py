"""
Configuration loading for the changelog JSON encoder
"""

from cdc_json.config.loader import load_config, load_yaml_config, merge_configs
from cdc_json.config.settings import CdcJsonSettings, JsonFormatSettings, ObservabilitySettings

__all__ = [
    "load_config",
    "load_yaml_config",
    "merge_configs",
    "CdcJsonSettings",
    "JsonFormatSettings",
    "ObservabilitySettings",
]
