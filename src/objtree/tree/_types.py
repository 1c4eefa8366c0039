"""
Node classification for tree operations.

Every value handled by the tree package is one of three kinds:

- SCALAR: opaque leaf (str, numbers, bool, None, UNDEFINED, datetimes,
  compiled patterns, callables, arbitrary objects)
- MAPPING: any collections.abc.Mapping
- ARRAY: list or tuple (str/bytes are scalars)

Algorithms call classify() once per value and branch on the result.
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import math as _math
import typing as _typing

# Path alias for normalised key paths
# Example: ("config", "model", "0") represents config.model.0
Path: _typing.TypeAlias = tuple[str, ...]

# Anything accepted where a path is expected
PathLike: _typing.TypeAlias = "str | _abc.Sequence[str | int]"


def _get_undefined_singleton() -> _UndefinedType:
    """Return the UNDEFINED singleton. Called by pickle to reconstruct."""
    return UNDEFINED


class _UndefinedType:
    """Sentinel type for a slot that holds no value (distinct from None)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _UndefinedType:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> _UndefinedType:
        return self

    def __reduce__(self) -> tuple[_typing.Callable[[], _UndefinedType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_undefined_singleton, ())


UNDEFINED = _UndefinedType()


class NodeKind(_enum.Enum):
    """Structural kind of a value."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    ARRAY = "array"


def classify(value: _typing.Any) -> NodeKind:
    """
    Return the structural kind of a value.

    Example:
        >>> classify({"a": 1})
        <NodeKind.MAPPING: 'mapping'>
        >>> classify([1, 2])
        <NodeKind.ARRAY: 'array'>
        >>> classify("text")
        <NodeKind.SCALAR: 'scalar'>
    """
    if isinstance(value, _abc.Mapping):
        return NodeKind.MAPPING
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    return NodeKind.SCALAR


def is_plain_mapping(value: _typing.Any) -> bool:
    """Check if a value is a mapping eligible for key-wise deep merge."""
    return classify(value) is NodeKind.MAPPING


def is_array(value: _typing.Any) -> bool:
    """Check if a value is a list or tuple."""
    return classify(value) is NodeKind.ARRAY


def is_container(value: _typing.Any) -> bool:
    """Check if a value is a mapping or an array."""
    return classify(value) is not NodeKind.SCALAR


def is_empty_container(value: _typing.Any) -> bool:
    """Check if a value is a mapping or array with no entries."""
    return is_container(value) and len(value) == 0


def is_writable(value: _typing.Any) -> bool:
    """Check if a container supports in-place key/index assignment."""
    return isinstance(value, (_abc.MutableMapping, list))


def is_nan(value: _typing.Any) -> bool:
    """Check if a value is a float NaN."""
    return isinstance(value, float) and _math.isnan(value)


def array_index(array: _abc.Sequence[_typing.Any], segment: str) -> int | None:
    """
    Convert a path segment into an index of an existing array element.

    Only canonical non-negative decimal strings address elements: "0" and
    "12" do, "-1", "01", "1.0" and "x" do not.

    Returns:
        The index, or None if the segment does not address an element.
    """
    index = parse_index(segment)
    if index is None or index >= len(array):
        return None
    return index


def parse_index(segment: str) -> int | None:
    """Parse a canonical non-negative decimal index, or return None."""
    if not segment.isascii() or not segment.isdigit():
        return None
    if len(segment) > 1 and segment[0] == "0":
        return None
    return int(segment)
