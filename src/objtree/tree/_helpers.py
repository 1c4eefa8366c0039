"""
Structural helpers shared by the tree operations.

Container rebuilding keeps the input's concrete type: a cleaned or cloned
OrderedDict is an OrderedDict, a defaultdict keeps its factory, a list
subclass stays that subclass. Other mappings (read-only views, ChainMap,
wrappers around an inner dict) are rebuilt by calling their type with a
new dict, or come back as a plain dict when the constructor refuses one.
The original is never modified.
"""

from __future__ import annotations

import collections as _collections
import collections.abc as _abc
import copy as _copy
import typing as _typing

import objtree.tree._types as _types

# Mappings whose copy.copy() never shares entries with the original
_INDEPENDENT_COPY_TYPES = (dict, _collections.UserDict)


def rebuild_mapping(
    original: _abc.Mapping[_typing.Any, _typing.Any],
    items: _abc.Iterable[tuple[_typing.Any, _typing.Any]],
) -> _abc.Mapping[_typing.Any, _typing.Any]:
    """
    Build a mapping of the same type as original holding items.

    Args:
        original: Mapping whose type (and instance state) to reproduce.
        items: Key/value pairs for the new mapping, in order.

    Returns:
        A new mapping. Never original itself.
    """
    if type(original) is dict:
        return dict(items)
    if isinstance(original, _INDEPENDENT_COPY_TYPES):
        result = _copy.copy(original)
        result.clear()
        result.update(items)
        return result
    try:
        return type(original)(dict(items))  # type: ignore[call-arg]
    except TypeError:
        return dict(items)


def rebuild_array(
    original: _abc.Sequence[_typing.Any],
    items: _abc.Iterable[_typing.Any],
) -> list[_typing.Any] | tuple[_typing.Any, ...]:
    """Build an array of the same type as original holding items."""
    if type(original) is list:
        return list(items)
    if isinstance(original, list):
        result = _copy.copy(original)
        if result is not original:
            result.clear()
            result.extend(items)
            return result
        return list(items)
    # Tuple subclasses (namedtuples) have fixed arity; rebuild as plain tuple
    return tuple(items)


def deep_clone(value: _typing.Any) -> _typing.Any:
    """
    Copy containers recursively; scalars are returned as-is.

    Datetimes, compiled patterns, callables and other objects are leaves
    and are shared, not copied.

    Example:
        >>> original = {"a": 1, "b": {"c": 2}}
        >>> cloned = deep_clone(original)
        >>> cloned["b"]["c"] = 3
        >>> original["b"]["c"]
        2
    """
    kind = _types.classify(value)
    if kind is _types.NodeKind.MAPPING:
        return rebuild_mapping(value, ((k, deep_clone(v)) for k, v in value.items()))
    if kind is _types.NodeKind.ARRAY:
        return rebuild_array(value, (deep_clone(item) for item in value))
    return value


def _scalar_equal(a: _typing.Any, b: _typing.Any) -> bool:
    """Compare two scalars: NaN-aware, bools only equal bools."""
    if a is b:
        return True
    if _types.is_nan(a) and _types.is_nan(b):
        return True
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


def deep_equal(a: _typing.Any, b: _typing.Any) -> bool:
    """
    Structural equality of two trees.

    Mappings compare by key set and values, arrays by length and
    elements (a list equals a tuple with the same items). NaN equals
    NaN, True does not equal 1.
    """
    kind_a = _types.classify(a)
    if kind_a is not _types.classify(b):
        return False
    if kind_a is _types.NodeKind.MAPPING:
        if len(a) != len(b):
            return False
        return all(key in b and deep_equal(value, b[key]) for key, value in a.items())
    if kind_a is _types.NodeKind.ARRAY:
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    return _scalar_equal(a, b)


def value_in(value: _typing.Any, candidates: _abc.Iterable[_typing.Any]) -> bool:
    """
    Check if value is one of candidates.

    Containers match by identity only. Scalars match with the same rules
    as deep_equal (NaN matches NaN, 0 does not match False).
    """
    if _types.is_container(value):
        return any(value is candidate for candidate in candidates)
    return any(
        not _types.is_container(candidate) and _scalar_equal(value, candidate)
        for candidate in candidates
    )


def flat_keys(mapping: _abc.Mapping[_typing.Any, _typing.Any], prefix: str = "") -> list[str]:
    """
    List the dotted paths of all leaves in a mapping tree.

    Arrays are leaves. Empty nested mappings contribute nothing.

    Example:
        >>> flat_keys({"a": 1, "b": {"c": 2, "d": {"e": 3}}})
        ['a', 'b.c', 'b.d.e']
    """
    keys: list[str] = []
    for key, value in mapping.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if _types.is_plain_mapping(value):
            keys.extend(flat_keys(value, full_key))
        else:
            keys.append(full_key)
    return keys


def pick(
    mapping: _abc.Mapping[_typing.Any, _typing.Any],
    keys: _abc.Iterable[_typing.Any],
) -> dict[_typing.Any, _typing.Any]:
    """Return a new dict with only the listed keys that exist in mapping."""
    return {key: mapping[key] for key in keys if key in mapping}


def omit(
    mapping: _abc.Mapping[_typing.Any, _typing.Any],
    keys: _abc.Iterable[_typing.Any],
) -> dict[_typing.Any, _typing.Any]:
    """Return a new dict without the listed keys."""
    excluded = list(keys)
    return {key: value for key, value in mapping.items() if key not in excluded}


def map_values(
    mapping: _abc.Mapping[_typing.Any, _typing.Any],
    fn: _abc.Callable[[_typing.Any, _typing.Any], _typing.Any],
) -> dict[_typing.Any, _typing.Any]:
    """Return a new dict with fn(value, key) applied to every value."""
    return {key: fn(value, key) for key, value in mapping.items()}


def map_keys(
    mapping: _abc.Mapping[_typing.Any, _typing.Any],
    fn: _abc.Callable[[_typing.Any], _typing.Any],
) -> dict[_typing.Any, _typing.Any]:
    """Return a new dict with fn(key) applied to every key. Later keys win."""
    return {fn(key): value for key, value in mapping.items()}
