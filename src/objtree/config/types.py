"""Configuration type definitions for objtree settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- OutputConfig: format, indent, sort_keys, color
- CleanConfig: default pruning rules for the clean command
- MergeConfig: array_merge strategy for the merge command

All types use `extra="allow"` so unknown keys are preserved and can be
reported (typos in config files) instead of being silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import objtree.constants as constants
import objtree.tree as tree

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are kept in model_extra rather than dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"output.colour": True, "clean.empty_object": False}

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Output Settings
# =============================================================================


class OutputConfig(ConfigBase):
    """
    How documents are written by the CLI.

    YAML section: output.*
    """

    format: _typing.Literal["json", "yaml"] = "json"
    """Output format when the input format is not reused."""

    indent: int = _pydantic.Field(default=constants.DEFAULT_INDENT, ge=0, le=16)
    """Indentation width."""

    sort_keys: bool = False
    """Sort mapping keys in output."""

    color: bool | None = None
    """Syntax highlighting: True/False to force, None to auto-detect a TTY."""


# =============================================================================
# Clean Settings
# =============================================================================


class CleanConfig(ConfigBase):
    """
    Default pruning rules for `objtree clean`.

    YAML section: clean.*
    """

    clean_keys: list[str] = _pydantic.Field(default_factory=list)
    clean_values: list[_typing.Any] = _pydantic.Field(default_factory=list)
    empty_objects: bool = True
    empty_arrays: bool = True
    empty_strings: bool = True
    nan_values: bool = False
    null_values: bool = True
    undefined_values: bool = True

    def to_options(self, **overrides: _typing.Any) -> tree.CleanOptions:
        """Build CleanOptions from this section, with per-call overrides."""
        values = {name: getattr(self, name) for name in self.__class__.model_fields}
        return tree.resolve_options(values, **overrides)


# =============================================================================
# Merge Settings
# =============================================================================


class MergeConfig(ConfigBase):
    """
    Defaults for `objtree merge`.

    YAML section: merge.*
    """

    array_merge: _typing.Literal["concat", "replace"] = "concat"

    def to_options(self, array_merge: str | None = None) -> tree.MergeOptions:
        """Build MergeOptions from this section; array_merge overrides when set."""
        return tree.MergeOptions(array_merge=array_merge or self.array_merge)
