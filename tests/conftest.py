"""
Shared pytest fixtures for objtree tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest


@_pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate every test from the user's config files and OBJTREE_* variables.

    The working directory (project config location) becomes a fresh
    workspace and the user config directory points into tmp_path.

    Returns:
        The workspace directory.
    """
    for key in list(_os.environ):
        if key.startswith("OBJTREE_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("NO_COLOR", raising=False)

    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("OBJTREE_CONFIG_DIR", str(user_dir))

    workspace = tmp_path / "workspace"
    workspace.mkdir()
    monkeypatch.chdir(workspace)
    return workspace


@_pytest.fixture
def user_config_dir(isolated_config: _pathlib.Path) -> _pathlib.Path:
    """The user config directory used by isolated tests."""
    return _pathlib.Path(_os.environ["OBJTREE_CONFIG_DIR"])


@_pytest.fixture
def nested_document() -> dict[str, _typing.Any]:
    """A small document mixing mappings, arrays and scalars."""
    return {
        "server": {
            "host": "localhost",
            "ports": [80, 443],
            "tls": {"enabled": True, "cert": None},
        },
        "users": [
            {"name": "ada", "roles": ["admin"]},
            {"name": "bob", "roles": []},
        ],
        "debug": False,
    }
