"""Tests for clean()."""

import collections as _collections
import collections.abc as _abc
import copy as _copy
import math as _math
import types as _types
import typing as _typing

import pydantic as _pydantic
import pytest as _pytest

import objtree.tree as tree


class _Store(_abc.MutableMapping):  # type: ignore[type-arg]
    """Mapping that keeps its entries in an inner dict."""

    def __init__(self, data: dict[_typing.Any, _typing.Any] | None = None) -> None:
        self._data = dict(data or {})

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return self._data[key]

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: _typing.Any) -> None:
        del self._data[key]

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class TestCleanDefaults:
    """Behavior with default options."""

    def test_removes_empty_and_null(self) -> None:
        """None, empty strings and empty containers go."""
        result = tree.clean({"a": {"b": None, "c": 1}, "d": "", "e": [], "f": {}})

        assert result == {"a": {"c": 1}}

    def test_removal_propagates_upwards(self) -> None:
        """A mapping emptied by cleaning is itself removed."""
        assert tree.clean({"a": {"b": {"c": None}}, "d": 1}) == {"d": 1}

    def test_top_level_container_is_returned_when_empty(self) -> None:
        """The root is never removed, only emptied."""
        assert tree.clean({"a": {}}) == {}
        assert tree.clean([None, ""]) == []

    def test_arrays(self) -> None:
        """Array elements are filtered and the rest keep their order."""
        assert tree.clean([1, None, 2, "", [None], 3]) == [1, 2, 3]

    def test_keeps_falsy_scalars(self) -> None:
        """0, False and whitespace are not removed."""
        data = {"a": 0, "b": False, "c": " "}

        assert tree.clean(data) == data

    def test_nan_kept_by_default(self) -> None:
        """NaN removal is opt-in."""
        result = tree.clean({"a": float("nan")})

        assert _math.isnan(result["a"])

    def test_undefined_removed(self) -> None:
        """UNDEFINED slots are removed."""
        assert tree.clean({"a": tree.UNDEFINED, "b": [1, tree.UNDEFINED]}) == {"b": [1]}

    def test_scalar_input_returned(self) -> None:
        """Non-containers pass through unchanged."""
        assert tree.clean(5) == 5
        assert tree.clean(None) is None
        assert tree.clean("") == ""

    def test_input_not_modified(self, nested_document: dict) -> None:
        """The input tree is left intact."""
        before = _copy.deepcopy(nested_document)

        tree.clean(nested_document, clean_keys=["host"])

        assert nested_document == before


class TestCleanToggles:
    """Turning built-in rules off and on."""

    def test_keep_empty_objects(self) -> None:
        """empty_objects=False keeps empty mappings."""
        assert tree.clean({"a": {}}, empty_objects=False) == {"a": {}}

    def test_keep_empty_arrays(self) -> None:
        """empty_arrays=False keeps empty arrays."""
        assert tree.clean({"a": []}, empty_arrays=False) == {"a": []}

    def test_keep_empty_strings(self) -> None:
        """empty_strings=False keeps empty strings."""
        assert tree.clean({"a": ""}, empty_strings=False) == {"a": ""}

    def test_keep_null(self) -> None:
        """null_values=False keeps None."""
        assert tree.clean({"a": None}, null_values=False) == {"a": None}

    def test_keep_undefined(self) -> None:
        """undefined_values=False keeps UNDEFINED."""
        result = tree.clean({"a": tree.UNDEFINED}, undefined_values=False)

        assert result == {"a": tree.UNDEFINED}

    def test_remove_nan(self) -> None:
        """nan_values=True removes NaN from mappings and arrays."""
        nan = float("nan")

        assert tree.clean({"a": nan, "b": 1}, nan_values=True) == {"b": 1}
        assert tree.clean([nan, 1, nan], nan_values=True) == [1]

    def test_camel_case_aliases(self) -> None:
        """Options may be given by their camelCase names."""
        result = tree.clean(
            {"a": float("nan"), "b": None, "c": 1},
            {"NaNValues": True, "nullValues": False},
        )

        assert result == {"b": None, "c": 1}

    def test_options_instance_with_overrides(self) -> None:
        """Keyword overrides apply on top of an options instance."""
        options = tree.CleanOptions(null_values=False)

        result = tree.clean({"a": None, "b": ""}, options, empty_strings=False)

        assert result == {"a": None, "b": ""}


class TestCleanKeysAndValues:
    """clean_keys and clean_values."""

    def test_clean_keys_everywhere(self) -> None:
        """Listed keys are removed at any depth."""
        data = {"password": "x", "nested": {"password": "y", "k": 1}}

        assert tree.clean(data, clean_keys=["password"]) == {"nested": {"k": 1}}

    def test_clean_keys_single_string(self) -> None:
        """A single key may be given as a string."""
        assert tree.clean({"a": 1, "b": 2}, clean_keys="a") == {"b": 2}

    def test_clean_keys_array_indices(self) -> None:
        """Array indices match as strings."""
        assert tree.clean(["a", "b", "c"], clean_keys=["1"]) == ["a", "c"]
        assert tree.clean(["a", "b", "c"], clean_keys=[1]) == ["a", "c"]

    def test_clean_keys_skip_transform(self) -> None:
        """A removed key never reaches transform."""
        seen: list[_typing.Any] = []

        def transform(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> _typing.Any:
            seen.append(key)
            return value

        tree.clean({"a": 1, "b": 2}, clean_keys=["a"], transform=transform)

        assert seen == ["b"]

    def test_clean_values(self) -> None:
        """Listed values are removed, NaN included."""
        data = {"a": 0, "b": False, "c": float("nan"), "d": None, "e": 1, "f": "keep"}

        result = tree.clean(data, clean_values=[0, False, float("nan"), None])

        assert result == {"e": 1, "f": "keep"}

    def test_clean_values_distinguish_bool_and_int(self) -> None:
        """False does not match 0 and True does not match 1."""
        assert tree.clean({"a": 0, "b": False}, clean_values=[False]) == {"a": 0}
        assert tree.clean({"a": True, "b": 1}, clean_values=[1]) == {"a": True}

    def test_clean_values_in_arrays(self) -> None:
        """Array elements matching clean_values are removed."""
        assert tree.clean(["x", "drop", "y"], clean_values=["drop"]) == ["x", "y"]


class TestCleanCallbacks:
    """transform and should_remove."""

    def test_transform_trim(self) -> None:
        """Trimmed strings that become empty are removed."""

        def trim(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> _typing.Any:
            return value.strip() if isinstance(value, str) else value

        result = tree.clean({"a": "  ", "b": " x ", "c": [" y ", " "]}, transform=trim)

        assert result == {"b": "x", "c": ["y"]}

    def test_transform_arguments(self) -> None:
        """transform gets the key (index as string) and the original parent."""
        calls: list[tuple[_typing.Any, _typing.Any, _typing.Any]] = []
        data = {"a": [10, 20]}

        def record(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> _typing.Any:
            calls.append((key, value, container))
            return value

        tree.clean(data, transform=record)

        assert calls[0] == ("a", [10, 20], data)
        assert calls[1][0] == "0"
        assert calls[1][2] is data["a"]
        assert calls[2][:2] == ("1", 20)

    def test_transform_result_is_cleaned(self) -> None:
        """Containers returned by transform are cleaned recursively."""

        def expand(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> _typing.Any:
            return {"inner": None, "kept": value} if key == "a" else value

        assert tree.clean({"a": 1}, transform=expand) == {"a": {"kept": 1}}

    def test_should_remove_array_index(self) -> None:
        """should_remove sees array indices as strings."""

        def second(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> bool:
            return key == "1"

        assert tree.clean({"a": [1, 2, 3]}, should_remove=second) == {"a": [1, 3]}

    def test_should_remove_gets_cleaned_value(self) -> None:
        """The value passed to should_remove has already been cleaned."""
        seen: dict[_typing.Any, _typing.Any] = {}

        def record(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> bool:
            seen[key] = value
            return False

        tree.clean({"a": {"b": None, "c": 1}}, should_remove=record)

        assert seen["a"] == {"c": 1}

    def test_should_remove_false_does_not_rescue(self) -> None:
        """Built-in rules still apply when should_remove says keep."""
        result = tree.clean({"a": None, "b": 1}, should_remove=lambda k, v, c: False)

        assert result == {"b": 1}

    def test_should_remove_by_value(self) -> None:
        """Arbitrary predicates on values."""
        result = tree.clean(
            {"a": 1, "b": 20, "c": {"d": 30, "e": 2}},
            should_remove=lambda k, v, c: isinstance(v, int) and v > 10,
        )

        assert result == {"a": 1, "c": {"e": 2}}


class TestCleanContainerTypes:
    """Concrete container types survive cleaning."""

    def test_ordered_dict(self) -> None:
        """OrderedDict stays OrderedDict."""
        data = _collections.OrderedDict([("b", 1), ("a", None), ("c", 2)])

        result = tree.clean(data)

        assert type(result) is _collections.OrderedDict
        assert list(result) == ["b", "c"]

    def test_defaultdict_keeps_factory(self) -> None:
        """defaultdict keeps its default_factory."""
        data = _collections.defaultdict(list, {"a": 1, "b": None})

        result = tree.clean(data)

        assert type(result) is _collections.defaultdict
        assert result.default_factory is list
        assert dict(result) == {"a": 1}

    def test_dict_subclass(self) -> None:
        """Dict subclasses are preserved, nested ones too."""

        class Tagged(dict):  # type: ignore[type-arg]
            pass

        data = {"outer": Tagged(a=1, b=None)}

        result = tree.clean(data)

        assert type(result["outer"]) is Tagged
        assert result["outer"] == {"a": 1}

    def test_mapping_proxy(self) -> None:
        """Read-only mappings are rebuilt as the same type."""
        data = _types.MappingProxyType({"a": 1, "b": None})

        result = tree.clean(data)

        assert type(result) is _types.MappingProxyType
        assert dict(result) == {"a": 1}

    def test_tuple(self) -> None:
        """Tuples stay tuples."""
        assert tree.clean({"a": (1, None, 2)}) == {"a": (1, 2)}
        assert type(tree.clean((1, None))) is tuple

    def test_namedtuple_becomes_tuple(self) -> None:
        """Namedtuples cannot change arity and become plain tuples."""
        Point = _collections.namedtuple("Point", ["x", "y"])

        result = tree.clean(Point(1, None))

        assert type(result) is tuple
        assert result == (1,)

    def test_wrapping_mapping_input_untouched(self) -> None:
        """A mapping that stores entries in an inner dict is not emptied."""
        original = _Store({"a": 1, "b": None, "c": {"d": ""}})

        result = tree.clean(original)

        assert type(result) is _Store
        assert dict(result) == {"a": 1}
        assert dict(original) == {"a": 1, "b": None, "c": {"d": ""}}

    def test_user_dict(self) -> None:
        """UserDict subclasses keep their type and leave the input alone."""
        original = _collections.UserDict({"a": 1, "b": None})

        result = tree.clean(original)

        assert type(result) is _collections.UserDict
        assert dict(result) == {"a": 1}
        assert dict(original) == {"a": 1, "b": None}

    def test_chain_map(self) -> None:
        """Entries from parent maps are pruned too."""
        parent = {"a": None, "b": 1}
        original = _collections.ChainMap({}, parent)

        result = tree.clean(original)

        assert dict(result) == {"b": 1}
        assert parent == {"a": None, "b": 1}


class TestCleanOptions:
    """Option resolution and validation."""

    def test_unknown_option_rejected(self) -> None:
        """Unknown option names raise."""
        with _pytest.raises(_pydantic.ValidationError):
            tree.clean({}, bogus=True)

    def test_resolve_reuses_instance(self) -> None:
        """An instance without overrides is used as-is."""
        options = tree.CleanOptions(nan_values=True)

        assert tree.resolve_options(options) is options

    def test_resolve_keeps_callables(self) -> None:
        """Overrides keep the callables of the base instance."""

        def never(key: _typing.Any, value: _typing.Any, container: _typing.Any) -> bool:
            return False

        options = tree.CleanOptions(should_remove=never)

        resolved = tree.resolve_options(options, nan_values=True)

        assert resolved.should_remove is never
        assert resolved.nan_values is True

    def test_defaults(self) -> None:
        """Default option values."""
        options = tree.resolve_options()

        assert options.clean_keys == ()
        assert options.empty_objects is True
        assert options.nan_values is False
        assert options.transform is None
