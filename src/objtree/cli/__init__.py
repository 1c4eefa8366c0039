"""
CLI module for objtree.

Provides the command-line interface using Click.
"""

from objtree.cli.main import cli, main

__all__ = ["main", "cli"]
