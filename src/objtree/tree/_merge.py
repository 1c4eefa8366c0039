"""
Deep merge of mapping trees.

Later values win. Per key:
- array + array: concatenated (or replaced, with array_merge="replace")
- mapping + mapping: merged recursively
- anything else: the later value replaces the earlier one

Inputs are never modified and the result shares no containers with them.

Example:
    >>> merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}, "e": 4})
    {'a': 1, 'b': {'c': 2, 'd': 3}, 'e': 4}
    >>> merge({"x": [1]}, {"x": [1]})
    {'x': [1, 1]}
"""

from __future__ import annotations

import typing as _typing

import pydantic as _pydantic

import objtree.tree._helpers as _helpers
import objtree.tree._types as _types


class MergeOptions(_pydantic.BaseModel):
    """Options for merge() and merge_all(), resolved once per call."""

    model_config = _pydantic.ConfigDict(frozen=True, extra="forbid")

    array_merge: _typing.Literal["concat", "replace"] = "concat"
    """How two arrays under the same key combine."""


_DEFAULT_OPTIONS = MergeOptions()


def _merge_arrays(
    base: _typing.Sequence[_typing.Any],
    override: _typing.Sequence[_typing.Any],
    options: MergeOptions,
) -> _typing.Any:
    """
    Combine two arrays found under the same key.

    Concatenation keeps the base's array type (list or tuple).
    """
    if options.array_merge == "replace":
        return _helpers.deep_clone(override)
    items = [_helpers.deep_clone(item) for item in base]
    items.extend(_helpers.deep_clone(item) for item in override)
    return tuple(items) if isinstance(base, tuple) else items


def _merge_value(
    base: _typing.Any,
    override: _typing.Any,
    options: MergeOptions,
) -> _typing.Any:
    """Merge override into base, returning a new value."""
    base_kind = _types.classify(base)
    override_kind = _types.classify(override)

    if base_kind is _types.NodeKind.ARRAY and override_kind is _types.NodeKind.ARRAY:
        return _merge_arrays(base, override, options)
    if base_kind is _types.NodeKind.MAPPING and override_kind is _types.NodeKind.MAPPING:
        return _merge_mappings(base, override, options)
    # Scalar or type mismatch: override wins
    return _helpers.deep_clone(override)


def _merge_mappings(
    base: _typing.Mapping[_typing.Any, _typing.Any],
    override: _typing.Mapping[_typing.Any, _typing.Any],
    options: MergeOptions,
) -> dict[_typing.Any, _typing.Any]:
    """Key-wise merge of two mappings into a new dict."""
    result = {key: _helpers.deep_clone(value) for key, value in base.items()}
    for key, value in override.items():
        if key in base:
            result[key] = _merge_value(base[key], value, options)
        else:
            result[key] = _helpers.deep_clone(value)
    return result


def merge(
    target: _typing.Any,
    source: _typing.Any,
    options: MergeOptions | None = None,
) -> _typing.Any:
    """
    Deep merge source into target, returning a new value.

    Args:
        target: The base value.
        source: The value to merge in (takes priority).
        options: Merge options. Defaults to MergeOptions().

    Returns:
        New merged dict when both are mappings. Otherwise the replacement
        rule applies and a copy of source is returned.
    """
    return _merge_value(target, source, options or _DEFAULT_OPTIONS)


def merge_all(
    *objects: _typing.Any,
    options: MergeOptions | None = None,
) -> _typing.Any:
    """
    Deep merge any number of values from left to right.

    Example:
        >>> merge_all({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}}, {"e": 5})
        {'a': 1, 'b': {'c': 2, 'd': 3}, 'e': 5}

    Returns:
        {} for no arguments, a deep copy of a single argument, otherwise the
        left fold of merge() starting from {}.
    """
    if not objects:
        return {}
    if len(objects) == 1:
        return _helpers.deep_clone(objects[0])

    resolved = options or _DEFAULT_OPTIONS
    result: _typing.Any = {}
    for obj in objects:
        result = _merge_value(result, obj, resolved)
    return result
