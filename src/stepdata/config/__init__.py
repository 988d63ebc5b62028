"""
Configuration module for stepdata.

Uses pydantic-settings for environment variable loading and layered
YAML files for defaults.
"""

from stepdata.config.settings import Settings, find_project_root
from stepdata.config.sources import (
    ConfigFileError,
    LayeredYamlSettingsSource,
    get_user_config_dir,
    get_user_config_path,
)
from stepdata.config.types import LoggingConfig, ParsingConfig

__all__ = [
    "ConfigFileError",
    "LayeredYamlSettingsSource",
    "LoggingConfig",
    "ParsingConfig",
    "Settings",
    "find_project_root",
    "get_user_config_dir",
    "get_user_config_path",
]
