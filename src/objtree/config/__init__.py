"""
Configuration module for objtree.

Uses pydantic-settings for environment variable loading and layered YAML
files for defaults.
"""

from objtree.config.settings import Settings
from objtree.config.types import CleanConfig, ConfigBase, MergeConfig, OutputConfig

__all__ = ["CleanConfig", "ConfigBase", "MergeConfig", "OutputConfig", "Settings"]
