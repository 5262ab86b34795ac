"""
Configuration module for deltaview.

Uses pydantic-settings for environment variable and YAML loading.
"""

from deltaview.config.settings import Settings
from deltaview.config.sources import ConfigFileError, YamlSettingsSource
from deltaview.config.types import ConfigBase, OverlayOptions

__all__ = ["ConfigBase", "ConfigFileError", "OverlayOptions", "Settings", "YamlSettingsSource"]
