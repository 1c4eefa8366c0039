"""
Exception types for objtree.

The tree operations themselves never raise for missing paths or type
mismatches; these cover the layers around them (documents, config files).
"""

import pathlib as _pathlib


class ObjtreeError(Exception):
    """Base class for objtree errors."""

    pass


class DocumentError(ObjtreeError):
    """Error reading, parsing or writing a JSON/YAML document."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"Error in document {source}: {message}")


class ConfigFileError(ObjtreeError):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")
