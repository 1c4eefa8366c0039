"""
Path-addressed access to nested containers.

A path is either a dot-separated string ("a.b.0") or a sequence of
segments (["a", "b", 0]). Both forms normalise to a tuple of strings.
Empty segments are kept: "a..b" addresses the key "" inside "a".

Read side (get_path, has_path) never mutates. Write side (set_path,
delete_path) mutates the root in place; clone first if you need the
original intact.

Example:
    >>> data = {}
    >>> set_path(data, "server.ports", [80])
    {'server': {'ports': [80]}}
    >>> get_path(data, "server.ports.0")
    80
    >>> has_path(data, "server.host")
    False
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import objtree.tree._types as _types

# Marker for a walk that fell off the tree
_MISSING = object()


def parse_path(path: _typing.Any) -> _types.Path:
    """
    Normalise a path into a tuple of string segments.

    Args:
        path: Dot-separated string, or a sequence of str/int segments.

    Returns:
        Tuple of segments. Empty string and unsupported types give ().
    """
    if isinstance(path, str):
        if not path:
            return ()
        return tuple(path.split("."))
    if isinstance(path, _abc.Sequence) and not isinstance(path, (bytes, bytearray)):
        return tuple(str(segment) for segment in path)
    return ()


def _child(container: _typing.Any, segment: str) -> _typing.Any:
    """Return the child addressed by segment, or _MISSING."""
    kind = _types.classify(container)
    if kind is _types.NodeKind.MAPPING:
        if segment in container:
            return container[segment]
        return _MISSING
    if kind is _types.NodeKind.ARRAY:
        index = _types.array_index(container, segment)
        if index is None:
            return _MISSING
        return container[index]
    return _MISSING


def _walk(root: _typing.Any, segments: _types.Path) -> _typing.Any:
    """Follow segments from root, returning the final value or _MISSING."""
    current = root
    for segment in segments:
        current = _child(current, segment)
        if current is _MISSING:
            return _MISSING
    return current


def get_path(
    root: _typing.Any,
    path: _types.PathLike,
    default: _typing.Any = None,
) -> _typing.Any:
    """
    Get the value at a path.

    Args:
        root: Container to read from.
        path: Path to the value.
        default: Returned when any segment is missing.

    Returns:
        The value at path, or default. An empty path returns default for a
        container root and the root itself for a scalar root.
    """
    segments = parse_path(path)
    if not segments:
        return root if not _types.is_container(root) else default
    value = _walk(root, segments)
    return default if value is _MISSING else value


def has_path(root: _typing.Any, path: _types.PathLike) -> bool:
    """Check whether every segment of a path resolves to an existing key."""
    segments = parse_path(path)
    if not segments:
        return False
    return _walk(root, segments) is not _MISSING


def _assign(container: _typing.Any, segment: str, value: _typing.Any) -> bool:
    """
    Assign value under segment in a writable container.

    Lists accept indices up to len (append); larger indices pad the gap
    with UNDEFINED.

    Returns:
        False if the segment cannot address the container.
    """
    if isinstance(container, _abc.MutableMapping):
        container[segment] = value
        return True
    index = _types.parse_index(segment)
    if index is None:
        return False
    if index < len(container):
        container[index] = value
    else:
        container.extend([_types.UNDEFINED] * (index - len(container)))
        container.append(value)
    return True


def set_path(
    root: _typing.Any,
    path: _types.PathLike,
    value: _typing.Any,
    *,
    delete_undefined: bool = False,
) -> _typing.Any:
    """
    Set a value at a path, creating intermediate dicts. Mutates root.

    Any intermediate that is missing or not a writable container (dict-like
    or list) is replaced by a new empty dict. Numeric segments never create
    lists; they only index lists that already exist.

    Args:
        root: Writable container to modify.
        path: Path to the value.
        value: Value to store.
        delete_undefined: If True and value is UNDEFINED, delete the path
            instead of storing the sentinel.

    Returns:
        root, the same object that was modified.
    """
    if delete_undefined and value is _types.UNDEFINED:
        delete_path(root, path)
        return root

    segments = parse_path(path)
    if not segments or not _types.is_writable(root):
        return root

    current = root
    for segment in segments[:-1]:
        child = _child(current, segment)
        if child is _MISSING or not _types.is_writable(child):
            child = {}
            # Only existing containers have been visited so far, so a
            # refused assignment leaves root untouched.
            if not _assign(current, segment, child):
                return root
        current = child

    _assign(current, segments[-1], value)
    return root


def delete_path(root: _typing.Any, path: _types.PathLike) -> None:
    """
    Remove the key or list element at a path. Mutates root.

    Missing paths, empty paths and non-container roots are ignored.
    Removing a list element shifts the following elements down.
    """
    segments = parse_path(path)
    if not segments:
        return

    parent = _walk(root, segments[:-1])
    final_key = segments[-1]
    if isinstance(parent, _abc.MutableMapping):
        if final_key in parent:
            del parent[final_key]
    elif isinstance(parent, list):
        index = _types.array_index(parent, final_key)
        if index is not None:
            del parent[index]
