"""
Shared constants for objtree.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

ENV_PREFIX = "OBJTREE_"
"""Prefix for all environment variables read by Settings."""

ENV_CONFIG_DIR = "OBJTREE_CONFIG_DIR"
"""Environment variable overriding the user config directory."""

ENV_ENV_FILE = "OBJTREE_ENV_FILE"
"""Environment variable pointing at a .env file to load."""

PROJECT_CONFIG_NAME = ".objtree.yaml"
"""Project-level config file, looked up in the current directory."""

DEFAULT_INDENT = 2
"""Default indentation for JSON and YAML output."""

DEFAULT_LOG_LEVEL = "WARNING"
"""Default level for the CLI's root logger."""

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
"""Format of CLI log records (written to stderr)."""

YAML_SUFFIXES = (".yaml", ".yml")
"""File suffixes treated as YAML. Everything else is JSON."""

STDIN_MARKER = "-"
"""File argument meaning standard input."""
