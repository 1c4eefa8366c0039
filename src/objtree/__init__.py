"""
objtree - nested object-tree manipulation.

Path-addressed get/set/has/delete, deep merge with array concatenation,
and configurable recursive pruning for dict/list trees.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("objtree")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from objtree.tree import (  # noqa: E402
    UNDEFINED,
    CleanOptions,
    MergeOptions,
    clean,
    deep_clone,
    deep_equal,
    delete_path,
    flat_keys,
    get_path,
    has_path,
    merge,
    merge_all,
    omit,
    pick,
    set_path,
)

__all__ = [
    "UNDEFINED",
    "CleanOptions",
    "MergeOptions",
    "__version__",
    "__version_info__",
    "clean",
    "deep_clone",
    "deep_equal",
    "delete_path",
    "flat_keys",
    "get_path",
    "has_path",
    "merge",
    "merge_all",
    "omit",
    "pick",
    "set_path",
]
