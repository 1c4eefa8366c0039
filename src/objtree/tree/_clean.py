"""
Recursive pruning of mapping/array trees.

clean() rebuilds a tree depth-first and drops entries according to
CleanOptions. For every entry of a container, in order:

1. Key (array index as a string) in clean_keys: dropped, nothing else runs
2. transform(key, value, container) replaces the value
3. Containers are cleaned recursively
4. should_remove(key, cleaned, container) or a built-in rule drops it

The container passed to the callbacks is the original parent, not the
partially built result. Emptiness is judged after recursion, so removals
propagate upwards. The input is never modified.

Example:
    >>> clean({"a": {"b": None, "c": 1}, "d": "", "e": []})
    {'a': {'c': 1}}
    >>> clean(["a", "b", "c"], clean_keys=["1"])
    ['a', 'c']
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import pydantic as _pydantic

import objtree.tree._helpers as _helpers
import objtree.tree._types as _types

# transform(key, value, container) -> new value
TransformFn: _typing.TypeAlias = _abc.Callable[[_typing.Any, _typing.Any, _typing.Any], _typing.Any]

# should_remove(key, cleaned_value, container) -> bool
ShouldRemoveFn: _typing.TypeAlias = _abc.Callable[[_typing.Any, _typing.Any, _typing.Any], bool]


class CleanOptions(_pydantic.BaseModel):
    """
    Options for clean(), resolved once per call.

    Field names are snake_case; the camelCase names (cleanKeys, NaNValues,
    shouldRemove, ...) are accepted as aliases.
    """

    model_config = _pydantic.ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    clean_keys: tuple[str, ...] = _pydantic.Field(default=(), alias="cleanKeys")
    """Keys (or array indices as strings) that are always removed."""

    clean_values: tuple[_typing.Any, ...] = _pydantic.Field(default=(), alias="cleanValues")
    """Values that are always removed (NaN-aware, containers by identity)."""

    empty_objects: bool = _pydantic.Field(default=True, alias="emptyObjects")
    """Remove mappings left empty after cleaning."""

    empty_arrays: bool = _pydantic.Field(default=True, alias="emptyArrays")
    """Remove arrays left empty after cleaning."""

    empty_strings: bool = _pydantic.Field(default=True, alias="emptyStrings")
    """Remove "" values."""

    nan_values: bool = _pydantic.Field(default=False, alias="NaNValues")
    """Remove float NaN values."""

    null_values: bool = _pydantic.Field(default=True, alias="nullValues")
    """Remove None values."""

    undefined_values: bool = _pydantic.Field(default=True, alias="undefinedValues")
    """Remove UNDEFINED values."""

    should_remove: ShouldRemoveFn | None = _pydantic.Field(default=None, alias="shouldRemove")
    """Custom predicate; True removes the entry regardless of other rules."""

    transform: TransformFn | None = None
    """Applied to each value before recursion and removal checks."""

    @_pydantic.field_validator("clean_keys", mode="before")
    @classmethod
    def _stringify_keys(cls, value: _typing.Any) -> _typing.Any:
        """Accept int indices in clean_keys by converting them to strings."""
        if isinstance(value, str):
            return (value,)
        if isinstance(value, _abc.Iterable):
            return tuple(str(key) for key in value)
        return value


_DEFAULT_OPTIONS = CleanOptions()


def resolve_options(
    options: CleanOptions | _abc.Mapping[str, _typing.Any] | None = None,
    **overrides: _typing.Any,
) -> CleanOptions:
    """
    Build a CleanOptions from an instance, a mapping, and keyword overrides.

    Raises:
        pydantic.ValidationError: If an option is unknown or has a bad type.
    """
    if options is None and not overrides:
        return _DEFAULT_OPTIONS
    if isinstance(options, CleanOptions):
        if not overrides:
            return options
        # dict(model) keeps field values by reference (callables, clean_values)
        return CleanOptions.model_validate({**dict(options), **overrides})
    return CleanOptions.model_validate({**dict(options or {}), **overrides})


def _should_skip(value: _typing.Any, options: CleanOptions) -> bool:
    """Apply the built-in removal rules to a cleaned value."""
    if options.clean_values and _helpers.value_in(value, options.clean_values):
        return True

    kind = _types.classify(value)
    if kind is _types.NodeKind.MAPPING:
        return options.empty_objects and len(value) == 0
    if kind is _types.NodeKind.ARRAY:
        return options.empty_arrays and len(value) == 0

    if options.empty_strings and isinstance(value, str) and value == "":
        return True
    if options.nan_values and _types.is_nan(value):
        return True
    if options.null_values and value is None:
        return True
    if options.undefined_values and value is _types.UNDEFINED:
        return True
    return False


def _clean_entry(
    key: _typing.Any,
    value: _typing.Any,
    container: _typing.Any,
    options: CleanOptions,
) -> tuple[bool, _typing.Any]:
    """
    Run one container entry through the pipeline.

    Returns:
        Tuple of (keep, cleaned_value).
    """
    if str(key) in options.clean_keys:
        return False, None

    if options.transform is not None:
        value = options.transform(key, value, container)

    cleaned = _clean_node(value, options) if _types.is_container(value) else value

    if options.should_remove is not None and options.should_remove(key, cleaned, container):
        return False, None
    if _should_skip(cleaned, options):
        return False, None
    return True, cleaned


def _clean_node(value: _typing.Any, options: CleanOptions) -> _typing.Any:
    """Rebuild a container with its surviving entries."""
    kind = _types.classify(value)

    if kind is _types.NodeKind.ARRAY:
        items: list[_typing.Any] = []
        for index, item in enumerate(value):
            keep, cleaned = _clean_entry(str(index), item, value, options)
            if keep:
                items.append(cleaned)
        return _helpers.rebuild_array(value, items)

    pairs: list[tuple[_typing.Any, _typing.Any]] = []
    for key, item in value.items():
        keep, cleaned = _clean_entry(key, item, value, options)
        if keep:
            pairs.append((key, cleaned))
    return _helpers.rebuild_mapping(value, pairs)


def clean(
    value: _typing.Any,
    options: CleanOptions | _abc.Mapping[str, _typing.Any] | None = None,
    **overrides: _typing.Any,
) -> _typing.Any:
    """
    Return a pruned copy of a tree.

    Args:
        value: Tree to clean. Non-container values are returned unchanged.
        options: CleanOptions instance or a mapping of option names.
        **overrides: Individual options, applied on top of options.

    Returns:
        A new container of the same type as value (an empty top-level
        container is returned, not removed), or value itself for scalars.
    """
    resolved = resolve_options(options, **overrides)
    if not _types.is_container(value):
        return value
    return _clean_node(value, resolved)
