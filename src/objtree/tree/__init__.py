"""
Tree operations over nested mappings and arrays.

Three families of functions:

- Path access: get_path, has_path, set_path, delete_path
- Deep merge: merge, merge_all
- Pruning: clean

Example:
    >>> from objtree.tree import clean, merge, set_path
    >>> config = set_path({}, "server.port", 8080)
    >>> merged = merge(config, {"server": {"host": ""}})
    >>> merged
    {'server': {'port': 8080, 'host': ''}}
    >>> clean(merged)
    {'server': {'port': 8080}}
"""

from objtree.tree._clean import CleanOptions, clean, resolve_options
from objtree.tree._helpers import (
    deep_clone,
    deep_equal,
    flat_keys,
    map_keys,
    map_values,
    omit,
    pick,
)
from objtree.tree._merge import MergeOptions, merge, merge_all
from objtree.tree._paths import delete_path, get_path, has_path, parse_path, set_path
from objtree.tree._types import (
    UNDEFINED,
    NodeKind,
    Path,
    classify,
    is_array,
    is_container,
    is_empty_container,
    is_plain_mapping,
)

__all__ = [
    "UNDEFINED",
    "CleanOptions",
    "MergeOptions",
    "NodeKind",
    "Path",
    "classify",
    "clean",
    "deep_clone",
    "deep_equal",
    "delete_path",
    "flat_keys",
    "get_path",
    "has_path",
    "is_array",
    "is_container",
    "is_empty_container",
    "is_plain_mapping",
    "map_keys",
    "map_values",
    "merge",
    "merge_all",
    "omit",
    "parse_path",
    "pick",
    "resolve_options",
    "set_path",
]
